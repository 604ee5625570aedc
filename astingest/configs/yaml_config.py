"""
astingest YAML Configuration

Loading and the default template of ~/.astingest/config.yaml.
"""

from pathlib import Path
from typing import Optional

import yaml

from astingest.configs.logging import get_logger
from astingest.configs.paths import get_data_path

logger = get_logger("configs.yaml")

# --- Default Config Template ---

DEFAULT_CONFIG_YAML = """\
# astingest Configuration
# Edit this file to customize ingestion behavior.

ingest:
  # Parser worker pool: "process" (default) or "thread"
  pool_kind: "process"

  # Maximum parser workers (null = number of CPUs)
  max_workers: null

  # Threads used for directory scans and file reads
  io_workers: 8

  # Watch mode: skip re-reading files whose mtime did not advance.
  # Faster, but misses edits on filesystems with coarse or skewed timestamps.
  trust_mtime: false

  # Persist successful parses in the per-project file cache
  use_durable_cache: true

  # Restrict ingestion to these extensions (empty = every supported language)
  extensions: []

  # Directory names never descended into (node_modules and .astingest are always skipped)
  ignore_dirs:
    - .git
    - .venv
    - __pycache__
"""


def get_config_path() -> Path:
    """Get the path to config.yaml."""
    return get_data_path() / "config.yaml"


def load_yaml_config(config_path: Optional[Path] = None) -> dict:
    """
    Load configuration from config.yaml.

    Args:
        config_path: Explicit file to read (defaults to get_config_path())

    Returns:
        Configuration dictionary (empty if file doesn't exist or is invalid)
    """
    path = Path(config_path) if config_path else get_config_path()
    if not path.exists():
        return {}

    try:
        loaded = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}

    if not isinstance(loaded, dict):
        logger.warning(f"Ignoring config {path}: top level is not a mapping")
        return {}
    return loaded


def create_default_config(config_path: Optional[Path] = None) -> bool:
    """
    Create default config.yaml if it doesn't exist.

    Returns:
        True if file was created, False if it already exists
    """
    path = Path(config_path) if config_path else get_config_path()
    if path.exists():
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG_YAML)
    return True
