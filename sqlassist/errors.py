"""sqlassist.errors

Central error types to keep error handling consistent.

Guardrail errors carry the stable `code` that is returned to callers
(HTTP bodies, tool results). The orchestrator is the only place that
converts them into structured results.
"""


class AppError(Exception):
    """Base application error."""

    code = "internal-error"


class ConfigError(AppError):
    """Raised when required configuration is missing or invalid."""


class ToolError(AppError):
    """Raised when an external tool call fails (LLM, DB)."""


class LLMOutputError(ToolError):
    """Raised when the LLM output is empty or cannot be used."""


class ExecutionError(ToolError):
    """Raised when the data store rejects or fails to run a query."""

    code = "execution-error"


class AuditWriteError(ToolError):
    """Raised when an audit record cannot be written. Never surfaced to users."""


class GuardrailError(AppError):
    """A pre-execution check blocked the query."""


class ForbiddenStatementError(GuardrailError):
    """SQL contains a mutating statement keyword."""

    code = "forbidden-statement"


class RbacDeniedError(GuardrailError):
    """The role may not read one of the referenced tables."""

    code = "rbac-denied"


class UnknownRoleError(GuardrailError):
    """The role is not present in the access policy."""

    code = "unknown-role"


class PreviewNotFoundError(GuardrailError):
    """The preview id is unknown, already used, or expired."""

    code = "preview-not-found"
