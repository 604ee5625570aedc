"""
Pytest fixtures for astingest tests.
"""

import json
import sys
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

# Add project root to path for astingest imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from astingest.ingest.workers import ParserPool  # noqa: E402
from astingest.options import IngestOptions  # noqa: E402

VALID_SOURCE = "x = 1\ny = 2\n"
OTHER_VALID_SOURCE = "def add(a, b):\n    return a + b\n"
INVALID_SOURCE = "def broken(:\n    pass\n"


@pytest.fixture(autouse=True)
def isolated_data_path(tmp_path_factory, monkeypatch):
    """Keep config.yaml lookups away from the real home directory."""
    monkeypatch.setenv("ASTINGEST_DATA_PATH", str(tmp_path_factory.mktemp("astingest-data")))
    for name in ("ASTINGEST_WORKERS", "ASTINGEST_POOL_KIND", "ASTINGEST_TRUST_MTIME"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def make_project(temp_dir: Path) -> Callable[..., Path]:
    """
    Factory writing a project: manifest plus files.

    Usage:
        root = make_project({"src/a.py": "x = 1\\n"}, manifest={"type": "package"})
    """

    def _make(files: dict[str, str], manifest: dict | None = None) -> Path:
        if manifest is None:
            manifest = {"type": "application", "source-directories": ["src"]}
        (temp_dir / "project.json").write_text(json.dumps(manifest))
        for relative, content in files.items():
            path = temp_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return temp_dir

    return _make


@pytest.fixture
def make_options(temp_dir: Path) -> Callable[..., IngestOptions]:
    """Factory for IngestOptions pointing at the temp project, cache under the temp dir."""

    def _make(**overrides) -> IngestOptions:
        values = {
            "manifest_path": temp_dir / "project.json",
            "cache_root": temp_dir / ".cache-root",
            "pool_kind": "thread",
            "max_workers": 2,
            "io_workers": 4,
        }
        values.update(overrides)
        return IngestOptions(**values)

    return _make


@pytest.fixture
def thread_pool() -> ParserPool:
    """Thread-backed parser pool; dispatch_count tells how many parses ran."""
    return ParserPool(max_workers=2, kind="thread")
