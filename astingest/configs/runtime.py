"""
astingest Runtime Configuration

Runtime defaults and configuration merging logic.
Combines defaults, YAML config, and environment variables.
"""

import os
from pathlib import Path
from typing import Optional

from astingest.configs.constants import DEFAULT_IGNORE_DIRS, DEFAULT_IO_WORKERS, POOL_KINDS
from astingest.configs.logging import get_logger
from astingest.configs.yaml_config import load_yaml_config

logger = get_logger("configs.runtime")

# --- Default Runtime Configuration ---

DEFAULT_CONFIG = {
    "pool_kind": "process",
    "max_workers": None,
    "io_workers": DEFAULT_IO_WORKERS,
    "trust_mtime": False,
    "use_durable_cache": True,
    "extensions": [],
    "ignore_dirs": list(DEFAULT_IGNORE_DIRS),
}


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def get_full_config(config_path: Optional[Path] = None) -> dict:
    """
    Get full ingestion configuration merged from defaults, YAML, and environment.

    Priority (highest wins):
    1. Environment variables
    2. `ingest` section of the YAML config file
    3. DEFAULT_CONFIG

    Returns:
        Merged configuration dictionary
    """
    config = dict(DEFAULT_CONFIG)

    yaml_config = load_yaml_config(config_path)
    ingest_section = yaml_config.get("ingest") or {}
    if isinstance(ingest_section, dict):
        for key, value in ingest_section.items():
            if key in config:
                config[key] = value
            else:
                logger.debug(f"Unknown ingest config key ignored: {key}")

    # Environment overrides
    if os.environ.get("ASTINGEST_WORKERS"):
        try:
            config["max_workers"] = int(os.environ["ASTINGEST_WORKERS"])
        except ValueError:
            logger.warning(f"Invalid ASTINGEST_WORKERS: {os.environ['ASTINGEST_WORKERS']!r}")

    if os.environ.get("ASTINGEST_POOL_KIND"):
        config["pool_kind"] = os.environ["ASTINGEST_POOL_KIND"].lower()

    if os.environ.get("ASTINGEST_TRUST_MTIME"):
        config["trust_mtime"] = _env_bool(os.environ["ASTINGEST_TRUST_MTIME"])

    if config["pool_kind"] not in POOL_KINDS:
        logger.warning(f"Unknown pool_kind {config['pool_kind']!r}, using 'process'")
        config["pool_kind"] = "process"

    return config
