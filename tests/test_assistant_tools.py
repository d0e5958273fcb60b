import pytest

from sqlassist.assistant.tools import AssistantTools


@pytest.fixture
def tools(orchestrator, logger):
    return AssistantTools(orchestrator, logger)


def test_specs_expose_four_tools(tools):
    assert {s["function"]["name"] for s in tools.specs()} == {"schema", "db", "preview", "explain"}


def test_schema(tools):
    assert "CREATE TABLE sales" in tools.schema()["schema"]


def test_db_dry_run_then_execute_by_preview_id(tools, previews):
    out = tools.db("SELECT name FROM products WHERE id = 3", dry_run=True, user_role="guest")
    assert "previewId" in out and "explanation" in out and "note" in out

    res = tools.db("ignored when previewId is given", preview_id=out["previewId"])
    assert res == {"rows": [{"name": "Standing Desk"}], "executedQuery": out["formattedQuery"]}
    assert len(previews) == 0


def test_db_errors_are_objects(tools):
    assert tools.db("DROP TABLE sales") == {
        "error": "Query contains forbidden statements (DROP). Execution aborted.",
        "code": "forbidden-statement",
    }
    assert tools.db("SELECT 1", preview_id="missing")["code"] == "preview-not-found"


def test_preview_run_instruction(tools):
    out = tools.preview("SELECT * FROM products", user_id="u1", user_role="guest")
    assert out["previewId"] in out["runInstruction"]
    assert '"userRole": "guest"' in out["runInstruction"]


def test_explain_only(tools, previews, demo_db):
    out = tools.explain("SELECT * FROM sales")
    assert out["explanation"] == "Selecting: *. From: sales."
    assert len(previews) == 0
    assert demo_db.calls == []


def test_dispatch_camel_case_arguments(tools):
    out = tools.dispatch("db", {"query": "SELECT * FROM sales", "dryRun": True, "userRole": "guest"})
    assert out["code"] == "rbac-denied"

    out = tools.dispatch("preview", {"query": "SELECT * FROM sales", "userRole": "analyst"})
    assert "previewId" in out


def test_dispatch_request_identity_wins(tools):
    out = tools.dispatch("preview", {"query": "SELECT * FROM sales", "userRole": "admin"}, user_role="guest")
    assert out["code"] == "rbac-denied"


def test_dispatch_unknown_tool(tools):
    assert tools.dispatch("shell", {})["code"] == "internal-error"
