"""sqlassist.orchestrator

Query-safety pipeline between "the model proposes SQL" and "SQL touches the database".

Two entry paths:
    (A) create_preview: guardrails -> store as pending preview -> explanation. Never executes.
    (B) execute: resolve SQL (take the stored preview, or the literal) -> guardrails again ->
        run -> PII masking -> best-effort audit. Taking a preview removes it (one-time use);
        it is put back only when the data store rejects the statement.

Guardrails run at every point where SQL text is produced: on raw input, on the
formatted text, and on text resolved from the preview store.

Nothing raises past this class: rejections come back as PipelineError with a
stable code.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlassist.contracts.models import (
    AuditEntry, ExecutionResult, ExplainResult, PendingPreview, PipelineError, PreviewResult,
)
from sqlassist.contracts.tool_base import AuditSink, DataStore, PreviewStore, SqlFormatter
from sqlassist.errors import (
    AppError, ExecutionError, ForbiddenStatementError, GuardrailError, RbacDeniedError, UnknownRoleError,
)
from sqlassist.explain.service import ExplanationService
from sqlassist.policy.access_policy import AccessPolicy
from sqlassist.policy.pii_redactor import mask_rows
from sqlassist.policy.sql_policy import SqlPolicy


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class QueryOrchestrator:
    sql_policy: SqlPolicy
    access_policy: AccessPolicy
    formatter: SqlFormatter
    previews: PreviewStore
    db: DataStore
    explainer: ExplanationService
    audit: Optional[AuditSink]
    logger: Any
    now: Callable[[], datetime] = field(default=_utcnow)

    # ---------- guardrails ----------
    def _guard_statement(self, sql: str) -> None:
        found = self.sql_policy.violations(sql)
        if found:
            raise ForbiddenStatementError(
                f"Query contains forbidden statements ({', '.join(found)}). Execution aborted."
            )

    def _guard_access(self, sql: str, role: Optional[str], action: str) -> None:
        decision = self.access_policy.check_access(sql, role)
        if decision.allowed:
            return
        exc = UnknownRoleError if decision.code == "unknown-role" else RbacDeniedError
        raise exc(f"RBAC blocked {action}: {decision.reason}")

    def _canonical(self, query: str) -> str:
        """Check raw text, format it, then check the formatted text."""
        self._guard_statement(query)
        formatted = self.formatter.format(query)
        self._guard_statement(formatted)
        return formatted

    def _error(self, e: Exception, path: str) -> PipelineError:
        if isinstance(e, GuardrailError):
            self.logger.info("%s rejected (%s): %s", path, e.code, e)
            return PipelineError(e.code, str(e))
        if isinstance(e, ExecutionError):
            self.logger.warning("%s failed in the data store: %s", path, e)
            return PipelineError(e.code, str(e))
        if isinstance(e, AppError):
            self.logger.error("%s failed: %s", path, e)
            return PipelineError("internal-error", str(e))
        self.logger.exception("%s failed unexpectedly", path)
        return PipelineError("internal-error", "Internal error while handling the query.")

    # ---------- (A) dry run ----------
    def create_preview(self, query: str, user_id: Optional[str] = None, user_role: Optional[str] = None) -> PreviewResult:
        try:
            formatted = self._canonical(query or "")
            self._guard_access(formatted, user_role, "preview creation")
            preview_id = self.previews.put(formatted, user_id=user_id, user_role=user_role)
            explanation = self.explainer.explain(formatted)
        except Exception as e:
            return PreviewResult(ok=False, error=self._error(e, "preview"))

        self.logger.info("Created preview %s (user_id=%s, role=%s)", preview_id, user_id, user_role)
        return PreviewResult(ok=True, preview_id=preview_id, formatted_query=formatted, explanation=explanation)

    # ---------- (B) commit ----------
    def _record_audit(self, sql: str, user_id: Optional[str], preview_id: Optional[str]) -> None:
        if self.audit is None:
            return
        entry = AuditEntry(query=sql, user_id=user_id, preview_id=preview_id, executed_at=self.now())
        try:
            self.audit.record(entry)
        except Exception as e:
            self.logger.warning("Audit write failed: %s", e)

    def _execute(self, query: Optional[str], preview_id: Optional[str], user_id: Optional[str], user_role: Optional[str]) -> ExecutionResult:
        stored: Optional[PendingPreview] = None
        if preview_id:
            # claimed up front: a concurrent confirmation of the same id gets preview-not-found
            stored = self.previews.take(preview_id)
            sql = stored.query
            role = user_role or stored.user_role
            user_id = user_id or stored.user_id
        else:
            sql = self._canonical(query or "")
            role = user_role

        if not sql.strip():
            raise ExecutionError("No SQL to execute")

        # a taken preview that fails its guardrails stays spent
        self._guard_statement(sql)
        self._guard_access(sql, role, "query execution")

        self.logger.info("Executing query (preview_id=%s, user_id=%s, role=%s): %s", preview_id, user_id, role, sql)
        try:
            raw = self.db.run(sql)
        except ExecutionError:
            # nothing ran; the preview stays usable until it expires
            if stored is not None:
                self.previews.restore(stored)
            raise
        result = mask_rows(raw)

        self._record_audit(sql, user_id, preview_id)
        return ExecutionResult(ok=True, rows=result, executed_query=sql, preview_id=preview_id)

    def execute(
        self,
        query: Optional[str] = None,
        preview_id: Optional[str] = None,
        user_id: Optional[str] = None,
        user_role: Optional[str] = None,
    ) -> ExecutionResult:
        try:
            return self._execute(query, preview_id, user_id, user_role)
        except Exception as e:
            return ExecutionResult(ok=False, preview_id=preview_id, error=self._error(e, "execute"))

    # ---------- explanation only ----------
    def explain(self, query: str) -> ExplainResult:
        """Format and explain without guardrails or side effects."""
        formatted = self.formatter.format(query or "")
        return ExplainResult(formatted_query=formatted, explanation=self.explainer.explain(formatted))
