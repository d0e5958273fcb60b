"""sqlassist.logging_utils

Logging utilities: rotating file log plus console, shared by every component.
Components receive the logger as a constructor argument.
"""

from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "sqlassist"


def build_logger(log_dir: str | None, name: str = LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """Return the named logger, attaching handlers on first use only.

    `log_dir=None` skips the file handler (used by tests).
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers when the app is rebuilt (reloads, tests)
    if logger.handlers:
        return logger

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(str(Path(log_dir) / "app.log"), maxBytes=2_000_000, backupCount=5, encoding="utf-8")
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    logger.addHandler(console)
    return logger
