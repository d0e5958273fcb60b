"""scripts.run_server

Starts the HTTP API with uvicorn.

Usage:
  python scripts/run_server.py [--host 127.0.0.1] [--port 8000]
"""

from __future__ import annotations

import argparse

import uvicorn

from sqlassist.api import create_app


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    args = ap.parse_args()
    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
