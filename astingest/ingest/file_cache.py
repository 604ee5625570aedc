"""
Durable File Cache

Content-hash keyed store of parsed ASTs that survives across runs. Two files
with identical bytes share one entry, whatever their paths.

Layout: <cache_dir>/<language>/<hash[:2]>/<hash>.json
"""

import hashlib
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from astingest.ast.models import DurableCacheEntry
from astingest.configs import get_logger

logger = get_logger("ingest.file_cache")


def _default_file_mode() -> int:
    """Mode a plain open() would create files with under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


# Entries get the usual umask-derived mode instead of the 0600 of mkstemp
ENTRY_FILE_MODE = _default_file_mode()


def compute_content_hash(content: bytes) -> str:
    """
    Compute the SHA-256 hash of file content.

    Args:
        content: Exact file bytes

    Returns:
        Hex digest
    """
    return hashlib.sha256(content).hexdigest()


class DurableCache:
    """
    On-disk cache of successful parses.

    Entries are written once per content hash and never modified. Writes go
    to a temp file that is renamed into place, so concurrent writers of the
    same hash are harmless and readers never see a partial file.
    """

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)

    def _entry_path(self, content_hash: str, language: str) -> Path:
        return self.cache_dir / language / content_hash[:2] / f"{content_hash}.json"

    def read(self, content_hash: str, language: str) -> Optional[DurableCacheEntry]:
        """
        Load the entry for a content hash.

        Returns:
            The entry, or None when absent or unreadable
        """
        path = self._entry_path(content_hash, language)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache entry {path}: {e}")
            return None

        if not isinstance(data, dict) or data.get("content_hash") != content_hash or "ast" not in data:
            logger.warning(f"Ignoring malformed cache entry {path}")
            return None
        return DurableCacheEntry(content_hash=content_hash, language=language, ast=data["ast"])

    def write(self, entry: DurableCacheEntry) -> bool:
        """
        Persist an entry atomically (temp file + os.replace).

        Returns:
            False when the entry could not be written (logged as a warning)
        """
        path = self._entry_path(entry.content_hash, entry.language)
        payload = {"content_hash": entry.content_hash, "language": entry.language, "ast": entry.ast}
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
        except OSError as e:
            logger.warning(f"Could not write cache entry {path}: {e}")
            return False

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, separators=(",", ":"))
            os.chmod(tmp_path, ENTRY_FILE_MODE)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.warning(f"Could not write cache entry {path}: {e}")
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            return False
        return True

    def clear(self) -> None:
        """Remove every entry."""
        if self.cache_dir.exists():
            shutil.rmtree(self.cache_dir)
