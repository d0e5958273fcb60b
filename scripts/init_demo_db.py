"""scripts.init_demo_db

Creates the demo SQLite database (products, sales, query_logs) with sample rows.

Usage:
  python scripts/init_demo_db.py [--sqlite-path data/app.db] [--no-audit-table]
"""

from __future__ import annotations

import argparse
from pathlib import Path

from sqlassist.config import Settings
from sqlassist.env_loader import load_env
from sqlassist.logging_utils import build_logger
from sqlassist.schema import create_demo_database
from sqlassist.tools.db_sqlite_tool import SqliteDatabaseTool


def main() -> int:
    load_env()  # load .env if present
    settings = Settings.load()
    ap = argparse.ArgumentParser()
    ap.add_argument("--sqlite-path", default=settings.sqlite_path)
    ap.add_argument("--no-audit-table", action="store_true", help="skip creating query_logs")
    args = ap.parse_args()

    Path(args.sqlite_path).parent.mkdir(parents=True, exist_ok=True)
    logger = build_logger(settings.log_dir)
    create_demo_database(SqliteDatabaseTool(args.sqlite_path, logger), with_audit_table=not args.no_audit_table)
    print(f"OK: {args.sqlite_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
