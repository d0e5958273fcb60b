"""sqlassist.config

Centralized configuration for the application.

Uses environment variables to avoid hardcoded secrets.
"""

from __future__ import annotations
from dataclasses import dataclass
import os

from sqlassist.errors import ConfigError


def _env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Azure OpenAI (explanations + chat); empty endpoint disables the LLM
    azure_openai_endpoint: str
    azure_openai_chat_deployment: str
    azure_openai_api_version: str
    explain_timeout_seconds: int
    chat_max_steps: int

    # DB
    db_backend: str  # sqlserver|sqlite
    azure_sql_server: str | None
    azure_sql_database: str | None
    azure_sql_conn_str: str | None
    sqlite_path: str
    db_timeout_seconds: int

    # Query pipeline
    preview_ttl_seconds: int
    preview_sweep_interval_seconds: int
    rbac_policy_file: str | None
    audit_enabled: bool

    # Logging
    log_dir: str

    @property
    def llm_configured(self) -> bool:
        return bool(self.azure_openai_endpoint and self.azure_openai_chat_deployment)

    def validate(self) -> "Settings":
        if self.db_backend not in ("sqlite", "sqlserver"):
            raise ConfigError(f"DB_BACKEND must be sqlite or sqlserver, got {self.db_backend!r}")
        if self.preview_ttl_seconds <= 0:
            raise ConfigError("PREVIEW_TTL_SECONDS must be positive")
        if not 0 < self.preview_sweep_interval_seconds < self.preview_ttl_seconds:
            raise ConfigError("PREVIEW_SWEEP_INTERVAL_SECONDS must be positive and shorter than PREVIEW_TTL_SECONDS")
        return self

    @staticmethod
    def load() -> "Settings":
        ttl = _env_int("PREVIEW_TTL_SECONDS", 3600)
        return Settings(
            azure_openai_endpoint=_env("AZURE_OPENAI_ENDPOINT", "") or "",
            azure_openai_chat_deployment=_env("AZURE_OPENAI_CHAT_DEPLOYMENT", "") or "",
            azure_openai_api_version=_env("AZURE_OPENAI_API_VERSION", "2024-12-01-preview") or "2024-12-01-preview",
            explain_timeout_seconds=_env_int("EXPLAIN_TIMEOUT_SECONDS", 10),
            chat_max_steps=_env_int("CHAT_MAX_STEPS", 5),
            db_backend=(_env("DB_BACKEND", "sqlite") or "sqlite").strip().lower(),
            azure_sql_server=_env("AZURE_SQL_SERVER"),
            azure_sql_database=_env("AZURE_SQL_DATABASE"),
            azure_sql_conn_str=_env("AZURE_SQL_CONN_STR"),
            sqlite_path=_env("SQLITE_PATH", "data/app.db") or "data/app.db",
            db_timeout_seconds=_env_int("DB_TIMEOUT_SECONDS", 20),
            preview_ttl_seconds=ttl,
            # 1/6 of the TTL keeps staleness bounded
            preview_sweep_interval_seconds=_env_int("PREVIEW_SWEEP_INTERVAL_SECONDS", max(1, ttl // 6)),
            rbac_policy_file=_env("RBAC_POLICY_FILE"),
            audit_enabled=_env_bool("AUDIT_ENABLED", True),
            log_dir=_env("LOG_DIR", "logs") or "logs",
        ).validate()
