"""sqlassist.contracts.models

Shared models for the API, orchestrator, policies, and tools.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Optional

ErrorCode = Literal[
    "forbidden-statement",
    "rbac-denied",
    "preview-not-found",
    "unknown-role",
    "execution-error",
    "internal-error",
    "invalid-request",
]


@dataclass(frozen=True)
class PendingPreview:
    """A formatted SQL statement waiting for confirmation."""
    id: str
    query: str
    user_id: Optional[str]
    user_role: Optional[str]
    created_at: float


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of a role/table allowlist check."""
    allowed: bool
    code: Optional[ErrorCode] = None
    reason: Optional[str] = None

    @staticmethod
    def allow() -> "AccessDecision":
        return AccessDecision(True)

    @staticmethod
    def deny(code: ErrorCode, reason: str) -> "AccessDecision":
        return AccessDecision(False, code, reason)


@dataclass(frozen=True)
class AuditEntry:
    """One executed query, as written to query_logs."""
    query: str
    user_id: Optional[str]
    preview_id: Optional[str]
    executed_at: datetime


@dataclass(frozen=True)
class PipelineError:
    """Structured, user-facing rejection."""
    code: ErrorCode
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code}


@dataclass
class PreviewResult:
    """Result of the dry-run path."""
    ok: bool
    preview_id: Optional[str] = None
    formatted_query: Optional[str] = None
    explanation: Optional[str] = None
    error: Optional[PipelineError] = None


@dataclass
class ExecutionResult:
    """Result of the commit path. `rows` is a masked row list or an opaque store result."""
    ok: bool
    rows: Any = None
    executed_query: Optional[str] = None
    preview_id: Optional[str] = None
    error: Optional[PipelineError] = None


@dataclass
class ExplainResult:
    """Formatted SQL plus a plain-English description."""
    formatted_query: str
    explanation: str


@dataclass
class ToolCallRecord:
    """A single tool invocation made during a chat turn."""
    name: str
    arguments: dict[str, Any]
    result: dict[str, Any]


@dataclass
class ChatTurn:
    """Final response of the chat assistant for one request."""
    answer: str
    tool_calls: list[ToolCallRecord] = field(default_factory=list)
