"""sqlassist.env_loader

Loads environment variables from a .env file using python-dotenv.

The file is located via SQLASSIST_ENV_FILE when set, otherwise by searching
upward from the current directory. Already-set variables win unless
`override=True`.

Usage:
    from sqlassist.env_loader import load_env
    load_env()
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv


def resolve_env_file(dotenv_path: str | None = None) -> Optional[Path]:
    """Return the .env file to load, or None when there is none."""
    explicit = dotenv_path or os.getenv("SQLASSIST_ENV_FILE")
    if explicit:
        path = Path(explicit).expanduser()
        return path if path.is_file() else None

    found = find_dotenv(usecwd=True)
    return Path(found) if found else None


def load_env(dotenv_path: str | None = None, override: bool = False) -> str | None:
    """Load env vars from .env and return the path used (None if nothing was loaded)."""
    path = resolve_env_file(dotenv_path)
    if path is None:
        return None
    load_dotenv(dotenv_path=str(path), override=override)
    return str(path)
