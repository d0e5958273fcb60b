"""sqlassist.policy.sql_policy

Forbidden-statement classifier.

This is intentionally conservative: a keyword anywhere in the text blocks the
query, including inside string literals and comments. A false positive costs a
rephrase; a false negative could mutate data.
"""

from __future__ import annotations
import re
from typing import List


_DENY_KEYWORDS = [
    "insert", "update", "delete", "drop",
    "truncate", "alter", "replace", "merge",
]

_DENY_PATTERN = re.compile(r"\b(" + "|".join(re.escape(k) for k in _DENY_KEYWORDS) + r")\b", re.IGNORECASE)


class SqlPolicy:
    """Detects mutating statements in SQL text."""

    def is_forbidden(self, sql: str) -> bool:
        return bool(_DENY_PATTERN.search(sql or ""))

    def violations(self, sql: str) -> List[str]:
        """Return the forbidden keywords found (upper-case, first occurrence order)."""
        found: List[str] = []
        for m in _DENY_PATTERN.finditer(sql or ""):
            kw = m.group(1).upper()
            if kw not in found:
                found.append(kw)
        return found
