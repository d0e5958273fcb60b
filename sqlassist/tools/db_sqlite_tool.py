"""sqlassist.tools.db_sqlite_tool

SQLite data store (dev/demo and tests).
"""

from __future__ import annotations
import sqlite3
import time
from typing import Any, Optional, Sequence

from sqlassist.contracts.tool_base import DataStore
from sqlassist.errors import ExecutionError


class SqliteDatabaseTool(DataStore):
    """SQLite execution wrapper. One connection per call."""

    def __init__(self, sqlite_path: str, logger, timeout_seconds: int = 20):
        self.sqlite_path = sqlite_path
        self.logger = logger
        self.timeout_seconds = timeout_seconds

    def run(self, sql: str, params: Optional[Sequence[Any]] = None) -> Any:
        start = time.time()
        conn = sqlite3.connect(self.sqlite_path, timeout=self.timeout_seconds)
        try:
            cur = conn.cursor()
            cur.execute(sql, tuple(params or ()))
            if cur.description:
                columns = [d[0] for d in cur.description]
                rows: Any = [dict(zip(columns, r)) for r in cur.fetchall()]
            else:
                conn.commit()
                rows = {"rowcount": cur.rowcount, "lastrowid": cur.lastrowid}
            self.logger.debug("sqlite run took %d ms", int((time.time() - start) * 1000))
            return rows
        except sqlite3.Error as e:
            raise ExecutionError(str(e)) from e
        finally:
            conn.close()
