"""sqlassist.tools.sql_formatter

Canonical SQL formatting (sqlparse).

Queries are formatted before they are stored or re-checked, so every later
guardrail pass sees the same text the data store will run.
"""

from __future__ import annotations
import sqlparse

from sqlassist.contracts.tool_base import SqlFormatter


class SqlparseFormatter(SqlFormatter):
    """Reindents SQL and upper-cases keywords. Literals and identifiers are untouched."""

    def __init__(self, keyword_case: str = "upper", reindent: bool = True):
        self.keyword_case = keyword_case
        self.reindent = reindent

    def format(self, sql: str) -> str:
        s = (sql or "").strip()
        if not s:
            return ""
        return sqlparse.format(s, reindent=self.reindent, keyword_case=self.keyword_case).strip()
