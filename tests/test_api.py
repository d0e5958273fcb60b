import dataclasses
import json

import pytest
from fastapi.testclient import TestClient

from sqlassist.api import create_app
from sqlassist.main import build_services
from sqlassist.tools.db_sqlite_tool import SqliteDatabaseTool
from sqlassist.schema import create_demo_database
from sqlassist.tools.audit_log import QueryLogAuditSink


class FakeLLM:
    def __init__(self):
        self.step = 0

    def explain_sql(self, sql):
        return "Model explanation."

    def chat(self, messages, tools=None):
        self.step += 1
        if self.step == 1:
            args = {"query": "SELECT * FROM sales", "dryRun": True, "userRole": "analyst"}
            return {"content": None, "tool_calls": [{"id": "c1", "name": "db", "arguments": json.dumps(args)}]}
        return {"content": "Here is your preview.", "tool_calls": []}


@pytest.fixture
def services(settings, sqlite_path, logger):
    create_demo_database(SqliteDatabaseTool(sqlite_path, logger))
    return build_services(settings=settings)


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


def _preview(services, sql="SELECT customer_name FROM sales ORDER BY id", role="analyst"):
    res = services.orchestrator.create_preview(sql, user_id="u1", user_role=role)
    assert res.ok
    return res.preview_id


def test_health(client, services):
    _preview(services)
    assert client.get("/health").json() == {"status": "ok", "pendingPreviews": 1}


def test_execute_preview_ok_then_gone(client, services):
    pid = _preview(services)
    r = client.post("/execute-preview", json={"previewId": pid, "userId": "u1"})
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["rows"][0] == {"customer_name": "a***@***"}
    assert body["executedQuery"].split()[:2] == ["SELECT", "customer_name"]

    r2 = client.post("/execute-preview", json={"previewId": pid})
    assert r2.status_code == 404
    assert r2.json()["code"] == "preview-not-found"


def test_missing_preview_id(client):
    r = client.post("/execute-preview", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "previewId required"
    assert r.json()["code"] == "invalid-request"


def test_rbac_denied_is_403(client, services):
    pid = _preview(services, "SELECT * FROM sales")
    r = client.post("/execute-preview", json={"previewId": pid, "userRole": "guest"})
    assert r.status_code == 403
    assert r.json()["code"] == "rbac-denied"


def test_unknown_role_is_403(client, services):
    pid = _preview(services, "SELECT * FROM products")
    r = client.post("/execute-preview", json={"previewId": pid, "userRole": "intern"})
    assert r.status_code == 403
    assert r.json()["code"] == "unknown-role"


def test_forbidden_stored_query_is_400(client, services):
    pid = services.previews.put("DROP TABLE sales")
    r = client.post("/execute-preview", json={"previewId": pid})
    assert r.status_code == 400
    assert r.json()["code"] == "forbidden-statement"


def test_execution_error_is_500(client, services):
    pid = _preview(services, "SELECT * FROM nowhere", role="admin")
    r = client.post("/execute-preview", json={"previewId": pid})
    assert r.status_code == 500
    assert r.json()["code"] == "execution-error"


def test_chat_disabled_without_llm(client):
    r = client.post("/chat", json={"messages": [{"role": "user", "content": "hi"}]})
    assert r.status_code == 503


def test_chat_with_tools(settings, sqlite_path, logger):
    create_demo_database(SqliteDatabaseTool(sqlite_path, logger))
    svc = build_services(settings=settings, llm_tool=FakeLLM())
    client = TestClient(create_app(svc))

    r = client.post("/chat", json={"messages": [{"role": "user", "content": "sales please"}], "userId": "u7"})
    assert r.status_code == 200
    body = r.json()
    assert body["answer"] == "Here is your preview."
    result = body["toolCalls"][0]["result"]
    assert result["explanation"] == "Model explanation."
    assert svc.previews.get(result["previewId"]).user_id == "u7"


def test_lifespan_runs_sweeper(services):
    with TestClient(create_app(services)) as c:
        assert services.sweeper.is_running
        assert c.get("/health").status_code == 200
    assert not services.sweeper.is_running


def test_audit_sink_follows_settings(settings, services):
    assert isinstance(services.orchestrator.audit, QueryLogAuditSink)
    quiet = build_services(settings=dataclasses.replace(settings, audit_enabled=False))
    assert quiet.orchestrator.audit is None
