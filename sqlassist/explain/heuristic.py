"""sqlassist.explain.heuristic

Local, deterministic SQL explanation used when no LLM is available.
"""

from __future__ import annotations
import re

_SELECT_RE = re.compile(r"select\s+(.+?)\s+from\s+([^\s;]+)", re.IGNORECASE)
_WHERE_RE = re.compile(r"\bwhere\s+(.+?)(?:\s+group|\s+order|\s+limit|;|$)", re.IGNORECASE)
_GROUP_BY_RE = re.compile(r"\bgroup\s+by\s+(.+?)(?:\s+order|\s+limit|;|$)", re.IGNORECASE)
_ORDER_BY_RE = re.compile(r"\border\s+by\s+(.+?)(?:\s+limit|;|$)", re.IGNORECASE)
_LIMIT_RE = re.compile(r"\blimit\s+(\d+)", re.IGNORECASE)


def heuristic_explain(sql: str) -> str:
    """Render the main clauses of `sql` as short labelled phrases."""
    s = re.sub(r"\s+", " ", sql or "").strip()
    parts: list[str] = []

    m = _SELECT_RE.search(s)
    if m:
        parts.append(f"Selecting: {m.group(1).strip()}")
        parts.append(f"From: {m.group(2).strip()}")
    else:
        parts.append("Selecting from tables (couldn't parse columns/tables exactly)")

    for label, rx in (("Filtered by", _WHERE_RE), ("Grouped by", _GROUP_BY_RE), ("Ordered by", _ORDER_BY_RE)):
        m = rx.search(s)
        if m:
            parts.append(f"{label}: {m.group(1).strip()}")

    m = _LIMIT_RE.search(s)
    if m:
        parts.append(f"Limit: {m.group(1)}")

    return ". ".join(parts) + "."
