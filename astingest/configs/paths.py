"""
astingest Data Paths

Locations of the user data directory and of the per-project durable cache.
"""

import os
from pathlib import Path
from typing import Optional

from astingest.configs.constants import FILE_CACHE_DIRNAME, TOOL_DIRECTORY

DEFAULT_DATA_PATH = Path.home() / ".astingest"


def get_data_path() -> Path:
    """Get the astingest data directory path (ASTINGEST_DATA_PATH or ~/.astingest)."""
    data_path = os.environ.get("ASTINGEST_DATA_PATH")
    if data_path:
        return Path(data_path).expanduser()
    return DEFAULT_DATA_PATH


def get_file_cache_path(
    project_root: Path,
    namespace: str,
    version: str,
    cache_root: Optional[Path] = None,
) -> Path:
    """
    Get the durable file cache directory for a project.

    The tool version is part of the path so that cached ASTs never leak
    across incompatible releases.

    Args:
        project_root: Directory containing the project manifest
        namespace: Cache namespace (lets several front-ends share a project)
        version: astingest version string
        cache_root: Overrides <project_root>/.astingest when given

    Returns:
        Path to the file-cache directory (not created)
    """
    base = Path(cache_root) if cache_root else Path(project_root) / TOOL_DIRECTORY
    return base / namespace / version / FILE_CACHE_DIRNAME
