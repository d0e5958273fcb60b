"""sqlassist.tools.audit_log

Best-effort audit sink.

Audit is not durable: a failed write (e.g. no query_logs table) is logged at
WARNING and reported as False, never raised to the request.

Expected table:
  CREATE TABLE query_logs (
      id INTEGER PRIMARY KEY AUTOINCREMENT,
      preview_id TEXT,
      executed_at TEXT NOT NULL,
      query TEXT NOT NULL,
      user_id TEXT
  );
"""

from __future__ import annotations

from sqlassist.contracts.models import AuditEntry
from sqlassist.contracts.tool_base import AuditSink, DataStore
from sqlassist.errors import AuditWriteError

_INSERT_SQL = "INSERT INTO query_logs (preview_id, executed_at, query, user_id) VALUES (?, ?, ?, ?)"


class QueryLogAuditSink(AuditSink):
    """Appends one row per executed query to the query_logs table."""

    def __init__(self, db: DataStore, logger):
        self.db = db
        self.logger = logger

    def _write(self, entry: AuditEntry) -> None:
        try:
            self.db.run(
                _INSERT_SQL,
                (entry.preview_id, entry.executed_at.isoformat(), entry.query, entry.user_id),
            )
        except Exception as e:
            raise AuditWriteError(str(e)) from e

    def record(self, entry: AuditEntry) -> bool:
        try:
            self._write(entry)
        except AuditWriteError as e:
            self.logger.warning("Could not write to query_logs table (maybe it does not exist): %s", e)
            return False
        return True
