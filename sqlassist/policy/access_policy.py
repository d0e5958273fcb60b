"""sqlassist.policy.access_policy

Flat role -> allowed-tables RBAC.

Rules:
- no role supplied: allowed (identity is expected to be required upstream)
- role missing from the map: denied as an unknown role
- "*" in the role's list: every table allowed
- otherwise every extracted table must be in the role's list
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Mapping, Optional, Iterable

from sqlassist.contracts.models import AccessDecision
from sqlassist.contracts.tool_base import TableExtractor
from sqlassist.errors import ConfigError
from sqlassist.policy.table_extractor import HeuristicTableExtractor


WILDCARD = "*"

DEFAULT_ROLE_TABLE_ALLOWLIST: dict[str, list[str]] = {
    "admin": [WILDCARD],
    "finance": ["sales", "products"],
    "analyst": ["sales", "products"],
    "hr": [],
    "guest": ["products"],
}


class AccessPolicy:
    """Evaluates whether a role may run a given SQL statement."""

    def __init__(self, allowlist: Mapping[str, Iterable[str]], extractor: Optional[TableExtractor] = None):
        self._allowlist: dict[str, frozenset[str]] = {
            role: frozenset(t.strip().lower() for t in tables) for role, tables in allowlist.items()
        }
        self.extractor = extractor or HeuristicTableExtractor()

    @classmethod
    def default(cls, extractor: Optional[TableExtractor] = None) -> "AccessPolicy":
        return cls(DEFAULT_ROLE_TABLE_ALLOWLIST, extractor)

    @classmethod
    def from_json_file(cls, path: str, extractor: Optional[TableExtractor] = None) -> "AccessPolicy":
        """Load `{"role": ["table", ...], ...}` from a JSON file."""
        p = Path(path).expanduser()
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot read RBAC policy file {p}: {e}") from e

        if not isinstance(data, dict) or not all(isinstance(v, list) for v in data.values()):
            raise ConfigError(f"RBAC policy file {p} must map role names to lists of tables")
        return cls(data, extractor)

    @property
    def roles(self) -> list[str]:
        return sorted(self._allowlist)

    def check_access(self, sql: str, role: Optional[str] = None) -> AccessDecision:
        if not role:
            return AccessDecision.allow()

        allowed = self._allowlist.get(role)
        if allowed is None:
            return AccessDecision.deny("unknown-role", f"Unknown role: {role}")
        if WILDCARD in allowed:
            return AccessDecision.allow()

        for table in sorted(self.extractor.extract(sql)):
            if table not in allowed:
                return AccessDecision.deny(
                    "rbac-denied", f'Role "{role}" is not allowed to access table "{table}"'
                )
        return AccessDecision.allow()
