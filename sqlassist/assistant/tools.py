"""sqlassist.assistant.tools

The four operations exposed to the model: schema, db, preview, explain.

Results are JSON-ready dicts. Failures are `{"error": ..., "code": ...}` so the
model can read the reason and self-correct.
"""

from __future__ import annotations
import json
from typing import Any, Callable, Optional

from sqlassist.orchestrator import QueryOrchestrator
from sqlassist.schema import SCHEMA_SQL

_IDENTITY_PROPS = {
    "userId": {"type": "string", "description": "Id of the requesting user (audit only)."},
    "userRole": {"type": "string", "description": "Role used for table-level access checks."},
}

TOOL_SPECS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "schema",
            "description": "Call this tool to get database schema information.",
            "parameters": {"type": "object", "properties": {}},
        },
    },
    {
        "type": "function",
        "function": {
            "name": "db",
            "description": (
                "Call this tool to query a database. With dryRun=true the query is validated and stored as a "
                "preview (not executed). With previewId the stored preview is executed."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "The SQL query to be ran."},
                    "dryRun": {"type": "boolean", "default": False},
                    "previewId": {"type": "string"},
                    **_IDENTITY_PROPS,
                },
                "required": ["query"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "preview",
            "description": "Create a preview-id for the SQL to show to the user for confirmation.",
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "The SQL to preview."},
                    **_IDENTITY_PROPS,
                },
                "required": ["query"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "explain",
            "description": "Return an English explanation of an SQL statement.",
            "parameters": {
                "type": "object",
                "properties": {"query": {"type": "string", "description": "SQL to explain"}},
                "required": ["query"],
            },
        },
    },
]


class AssistantTools:
    """Binds the tool surface to a QueryOrchestrator."""

    def __init__(self, orchestrator: QueryOrchestrator, logger, schema_text: str = SCHEMA_SQL):
        self.orchestrator = orchestrator
        self.logger = logger
        self.schema_text = schema_text
        self._handlers: dict[str, Callable[..., dict[str, Any]]] = {
            "schema": self.schema,
            "db": self.db,
            "preview": self.preview,
            "explain": self.explain,
        }

    @staticmethod
    def specs() -> list[dict[str, Any]]:
        return TOOL_SPECS

    def schema(self) -> dict[str, Any]:
        return {"schema": self.schema_text}

    def db(
        self,
        query: str,
        dry_run: bool = False,
        user_id: Optional[str] = None,
        user_role: Optional[str] = None,
        preview_id: Optional[str] = None,
    ) -> dict[str, Any]:
        if dry_run:
            res = self.orchestrator.create_preview(query, user_id=user_id, user_role=user_role)
            if not res.ok:
                return res.error.to_dict()
            return {
                "previewId": res.preview_id,
                "formattedQuery": res.formatted_query,
                "explanation": res.explanation,
                "note": "This is a preview. To execute use the /execute-preview REST endpoint "
                        "(POST { previewId, userId, userRole }).",
            }

        ex = self.orchestrator.execute(query=query, preview_id=preview_id, user_id=user_id, user_role=user_role)
        if not ex.ok:
            return ex.error.to_dict()
        return {"rows": ex.rows, "executedQuery": ex.executed_query}

    def preview(self, query: str, user_id: Optional[str] = None, user_role: Optional[str] = None) -> dict[str, Any]:
        res = self.orchestrator.create_preview(query, user_id=user_id, user_role=user_role)
        if not res.ok:
            return res.error.to_dict()
        run_body = json.dumps({"previewId": res.preview_id, "userId": user_id or "", "userRole": user_role or ""})
        return {
            "previewId": res.preview_id,
            "formattedQuery": res.formatted_query,
            "explanation": res.explanation,
            "runInstruction": f"To execute this preview, POST to /execute-preview with JSON {run_body}",
        }

    def explain(self, query: str) -> dict[str, Any]:
        res = self.orchestrator.explain(query)
        return {"formattedQuery": res.formatted_query, "explanation": res.explanation}

    def dispatch(
        self,
        name: str,
        arguments: dict[str, Any],
        user_id: Optional[str] = None,
        user_role: Optional[str] = None,
    ) -> dict[str, Any]:
        """Call a tool by name with model-produced (camelCase) arguments.

        `user_id` / `user_role` come from the authenticated request and win over
        whatever identity the model put into the arguments.
        """
        if name not in self._handlers:
            return {"error": f"Unknown tool: {name}", "code": "internal-error"}

        args = dict(arguments or {})
        if user_id:
            args["userId"] = user_id
        if user_role:
            args["userRole"] = user_role

        try:
            if name == "schema":
                return self.schema()
            if name == "explain":
                return self.explain(str(args.get("query", "")))
            if name == "preview":
                return self.preview(str(args.get("query", "")), user_id=args.get("userId"), user_role=args.get("userRole"))
            return self.db(
                str(args.get("query", "")),
                dry_run=bool(args.get("dryRun", False)),
                user_id=args.get("userId"),
                user_role=args.get("userRole"),
                preview_id=args.get("previewId"),
            )
        except Exception:
            self.logger.exception("Tool %s failed", name)
            return {"error": "Internal error while running the tool.", "code": "internal-error"}
