"""sqlassist.tools.db_sqlserver_tool

SQL Server data store using **MSI** or an explicit connection string.

Uses pyodbc. Recommended MSI connection string pattern (ODBC Driver 18):
  Driver={ODBC Driver 18 for SQL Server};
  Server=tcp:<server>.database.windows.net,1433;
  Database=<db>;
  Encrypt=yes;
  TrustServerCertificate=no;
  Authentication=ActiveDirectoryMsi;
  UID=<user-assigned-msi-client-id>;   # optional for user-assigned MSI

Guardrails (forbidden statements, RBAC) are enforced by the orchestrator, not here.
"""

from __future__ import annotations
import time
from typing import Any, Optional, Sequence
import os
import pyodbc

from sqlassist.contracts.tool_base import DataStore
from sqlassist.errors import ConfigError, ExecutionError


class SqlServerDatabaseTool(DataStore):
    """SQL execution wrapper for Azure SQL."""

    def __init__(self, server: Optional[str], database: Optional[str], conn_str: Optional[str], logger, timeout_seconds: int = 20):
        self.server = server
        self.database = database
        self.conn_str = conn_str
        self.logger = logger
        self.timeout_seconds = timeout_seconds

    def _build_conn_str(self) -> str:
        if self.conn_str:
            return self.conn_str

        if not self.server or not self.database:
            raise ConfigError("AZURE_SQL_SERVER/AZURE_SQL_DATABASE or AZURE_SQL_CONN_STR must be set")

        client_id = (os.getenv("AZURE_MSI_CLIENT_ID") or "").strip()
        uid_part = f"UID={client_id};" if client_id else ""

        return (
            "Driver={ODBC Driver 18 for SQL Server};"
            f"Server=tcp:{self.server},1433;"
            f"Database={self.database};"
            "Encrypt=yes;"
            "TrustServerCertificate=no;"
            "Authentication=ActiveDirectoryMsi;"
            f"{uid_part}"
        )

    def run(self, sql: str, params: Optional[Sequence[Any]] = None) -> Any:
        start = time.time()
        conn = None
        try:
            conn = pyodbc.connect(self._build_conn_str(), timeout=self.timeout_seconds)
            cur = conn.cursor()
            cur.timeout = self.timeout_seconds
            cur.execute(sql, *(params or ()))
            if cur.description:
                columns = [c[0] for c in cur.description]
                result: Any = [dict(zip(columns, r)) for r in cur.fetchall()]
            else:
                conn.commit()
                result = {"rowcount": cur.rowcount}
            self.logger.debug("sqlserver run took %d ms", int((time.time() - start) * 1000))
            return result
        except pyodbc.Error as e:
            raise ExecutionError(str(e)) from e
        finally:
            try:
                if conn:
                    conn.close()
            except pyodbc.Error:
                pass
