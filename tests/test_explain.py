from sqlassist.explain.heuristic import heuristic_explain
from sqlassist.explain.service import ExplanationService


def test_heuristic_full_query():
    sql = "SELECT name, price\nFROM products\nWHERE price > 10\nORDER BY price DESC\nLIMIT 5"
    assert heuristic_explain(sql) == (
        "Selecting: name, price. From: products. Filtered by: price > 10. Ordered by: price DESC. Limit: 5."
    )


def test_heuristic_group_by():
    sql = "SELECT region, SUM(total_amount) FROM sales GROUP BY region;"
    assert heuristic_explain(sql) == "Selecting: region, SUM(total_amount). From: sales. Grouped by: region."


def test_heuristic_unparseable():
    assert heuristic_explain("SHOW TABLES") == "Selecting from tables (couldn't parse columns/tables exactly)."


class _Provider:
    def __init__(self, text=None, exc=None):
        self.text = text
        self.exc = exc
        self.calls = 0

    def explain_sql(self, sql):
        self.calls += 1
        if self.exc:
            raise self.exc
        return self.text


def test_service_uses_provider(logger):
    p = _Provider(text="  Lists every product.  ")
    assert ExplanationService(p, logger).explain("SELECT * FROM products") == "Lists every product."
    assert p.calls == 1


def test_service_falls_back_on_error(logger, caplog):
    svc = ExplanationService(_Provider(exc=TimeoutError("slow")), logger)
    assert svc.explain("SELECT * FROM products") == "Selecting: *. From: products."
    assert "heuristic" in caplog.text


def test_service_falls_back_on_empty_or_missing(logger):
    assert ExplanationService(_Provider(text="   "), logger).explain("SELECT a FROM b") == "Selecting: a. From: b."
    assert ExplanationService(None, logger).explain("SELECT a FROM b") == "Selecting: a. From: b."
