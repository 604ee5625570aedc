"""
Ingestion Options

Everything one ingestion pass needs from the outer layers (CLI, editor
integration, tests). Build instances directly or via IngestOptions.from_config,
which merges defaults, config.yaml and environment variables.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from astingest.configs.constants import (
    DEFAULT_IGNORE_DIRS,
    DEFAULT_IO_WORKERS,
    DEFAULT_NAMESPACE,
    README_FILENAME,
)
from astingest.configs.paths import get_file_cache_path
from astingest.configs.runtime import get_full_config
from astingest.version import __version__


@dataclass
class IngestOptions:
    """Configuration for one ingestion pass."""

    manifest_path: Path
    manifest_path_was_specified: bool = False
    directories_to_analyze: list[str] = field(default_factory=list)
    watch: bool = False

    # Durable cache
    cache_root: Optional[Path] = None  # Defaults to <project>/.astingest
    use_durable_cache: bool = True
    namespace: str = DEFAULT_NAMESPACE

    # File discovery
    extensions: tuple[str, ...] = ()  # Empty = every supported language
    ignore_dirs: tuple[str, ...] = DEFAULT_IGNORE_DIRS

    # Concurrency
    max_workers: Optional[int] = None
    pool_kind: str = "process"
    io_workers: int = DEFAULT_IO_WORKERS

    # Staleness
    trust_mtime: bool = False

    def __post_init__(self):
        self.manifest_path = Path(self.manifest_path)
        if self.cache_root is not None:
            self.cache_root = Path(self.cache_root)

    @property
    def project_root(self) -> Path:
        return self.manifest_path.resolve().parent

    @property
    def readme_path(self) -> Path:
        return self.project_root / README_FILENAME

    def file_cache_path(self) -> Path:
        """Durable cache directory for this project and tool version."""
        return get_file_cache_path(self.project_root, self.namespace, __version__, self.cache_root)

    @classmethod
    def from_config(
        cls,
        manifest_path: Path,
        config_path: Optional[Path] = None,
        **overrides,
    ) -> "IngestOptions":
        """
        Build options from merged configuration.

        Args:
            manifest_path: Project manifest
            config_path: Explicit config.yaml (defaults to the data directory)
            **overrides: Field values that win over configuration

        Returns:
            IngestOptions
        """
        config = get_full_config(config_path)
        values = {
            "pool_kind": config["pool_kind"],
            "max_workers": config["max_workers"],
            "io_workers": config["io_workers"],
            "trust_mtime": bool(config["trust_mtime"]),
            "use_durable_cache": bool(config["use_durable_cache"]),
            "extensions": tuple(config["extensions"] or ()),
            "ignore_dirs": tuple(config["ignore_dirs"] or ()),
        }
        values.update(overrides)
        return cls(manifest_path=manifest_path, **values)
