import logging
from datetime import datetime, timezone

import pytest

from sqlassist.config import Settings
from sqlassist.explain.service import ExplanationService
from sqlassist.orchestrator import QueryOrchestrator
from sqlassist.policy.access_policy import AccessPolicy
from sqlassist.policy.sql_policy import SqlPolicy
from sqlassist.preview.store import InMemoryPreviewStore
from sqlassist.schema import create_demo_database
from sqlassist.tools.audit_log import QueryLogAuditSink
from sqlassist.tools.db_sqlite_tool import SqliteDatabaseTool
from sqlassist.tools.sql_formatter import SqlparseFormatter

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingDb:
    """Wraps a DataStore and records every statement it receives."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = []

    def run(self, sql, params=None):
        self.calls.append(sql)
        return self.inner.run(sql, params)


@pytest.fixture
def logger():
    return logging.getLogger("sqlassist.tests")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sqlite_path(tmp_path):
    return str(tmp_path / "demo.db")


@pytest.fixture
def demo_db(sqlite_path, logger):
    db = SqliteDatabaseTool(sqlite_path, logger)
    create_demo_database(db)
    return CountingDb(db)


@pytest.fixture
def previews(clock):
    return InMemoryPreviewStore(ttl_seconds=3600, clock=clock)


@pytest.fixture
def make_orchestrator(logger, previews, demo_db):
    def _make(db=None, provider=None, audit="query_logs"):
        db = db or demo_db
        sink = QueryLogAuditSink(db, logger) if audit == "query_logs" else audit
        return QueryOrchestrator(
            sql_policy=SqlPolicy(),
            access_policy=AccessPolicy.default(),
            formatter=SqlparseFormatter(),
            previews=previews,
            db=db,
            explainer=ExplanationService(provider, logger),
            audit=sink,
            logger=logger,
            now=lambda: FIXED_NOW,
        )
    return _make


@pytest.fixture
def orchestrator(make_orchestrator):
    return make_orchestrator()


@pytest.fixture
def settings(sqlite_path):
    return Settings(
        azure_openai_endpoint="",
        azure_openai_chat_deployment="",
        azure_openai_api_version="2024-12-01-preview",
        explain_timeout_seconds=5,
        chat_max_steps=5,
        db_backend="sqlite",
        azure_sql_server=None,
        azure_sql_database=None,
        azure_sql_conn_str=None,
        sqlite_path=sqlite_path,
        db_timeout_seconds=5,
        preview_ttl_seconds=3600,
        preview_sweep_interval_seconds=600,
        rbac_policy_file=None,
        audit_enabled=True,
        log_dir="",
    )
