"""
astingest Logging

All loggers hang off the "astingest" root. Output goes to stderr so that
stdout stays free for the JSON the CLI prints.

Environment:
- ASTINGEST_DEBUG: "true"/"1"/"yes" turns on debug output
- ASTINGEST_LOG_FILE: also write the full log to this file; stderr then
  only carries warnings and errors
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "astingest"
LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("true", "1", "yes")


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logging(debug: Optional[bool] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    (Re)configure the astingest root logger.

    Args:
        debug: Debug level; falls back to ASTINGEST_DEBUG
        log_file: Extra log file; falls back to ASTINGEST_LOG_FILE

    Returns:
        The "astingest" logger
    """
    if debug is None:
        debug = _env_flag("ASTINGEST_DEBUG")
    log_file = log_file or os.environ.get("ASTINGEST_LOG_FILE") or None
    level = logging.DEBUG if debug else logging.INFO

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()

    root.addHandler(_handler(logging.StreamHandler(sys.stderr), logging.WARNING if log_file else level))

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(_handler(logging.FileHandler(path), level))
        root.debug(f"Writing log to {path}")

    return root


def get_logger(component: str) -> logging.Logger:
    """Logger for one component, e.g. get_logger("ingest.engine")."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")
