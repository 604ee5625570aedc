"""
astingest Configuration Module

Re-exports commonly used functions for cleaner imports across the codebase.
"""

# Logging (most commonly used)
from astingest.configs.logging import get_logger, setup_logging

# Paths
from astingest.configs.paths import get_data_path, get_file_cache_path

# Constants
from astingest.configs.constants import (
    ALWAYS_IGNORED_DIRS,
    DEFAULT_IGNORE_DIRS,
    MANIFEST_FILENAME,
)

# YAML config
from astingest.configs.yaml_config import (
    DEFAULT_CONFIG_YAML,
    create_default_config,
    get_config_path,
    load_yaml_config,
)

# Runtime
from astingest.configs.runtime import DEFAULT_CONFIG, get_full_config

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Paths
    "get_data_path",
    "get_file_cache_path",
    # Constants
    "ALWAYS_IGNORED_DIRS",
    "DEFAULT_IGNORE_DIRS",
    "MANIFEST_FILENAME",
    # YAML config
    "DEFAULT_CONFIG_YAML",
    "create_default_config",
    "get_config_path",
    "load_yaml_config",
    # Runtime
    "DEFAULT_CONFIG",
    "get_full_config",
]
