"""sqlassist.policy.table_extractor

Heuristic extraction of referenced table names (not a SQL parser).

Only `FROM <name>` and `JOIN <name>` are recognised. Subquery aliases, CTE
names and unusual quoting can produce extra names or miss some; the access
policy treats any unknown extracted name as a denial, never as an allow.
"""

from __future__ import annotations
import re

from sqlassist.contracts.tool_base import TableExtractor


_TABLE_REF_RE = re.compile(r"\b(?:from|join)\s+([`\"]?)([a-zA-Z0-9_$.]+)\1", re.IGNORECASE)


def extract_table_names(sql: str) -> set[str]:
    """Return the lowercase table names following FROM/JOIN in `sql`."""
    norm = (sql or "").replace("\n", " ")
    names: set[str] = set()
    for m in _TABLE_REF_RE.finditer(norm):
        # keep the table segment of schema.table / db.schema.table
        name = m.group(2).split(".")[-1].replace("`", "").replace('"', "")
        if name:
            names.add(name.lower())
    return names


class HeuristicTableExtractor(TableExtractor):
    """Regex-based TableExtractor."""

    def extract(self, sql: str) -> set[str]:
        return extract_table_names(sql)
