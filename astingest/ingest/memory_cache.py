"""
In-Memory File Cache

Path-keyed parse results kept for the lifetime of a watch session. Each
session owns its own instance.
"""

import threading
from typing import Optional

from astingest.ast.models import MemoryCacheEntry


class MemoryCache:
    """
    Thread-safe map of relative path -> MemoryCacheEntry.

    Entries are immutable and replaced whole, so a reader sees either the
    previous entry or the new one, never a mix of old content and new AST.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, MemoryCacheEntry] = {}

    def lookup(self, path: str) -> Optional[MemoryCacheEntry]:
        with self._lock:
            return self._entries.get(path)

    def upsert(self, path: str, entry: MemoryCacheEntry) -> None:
        """Insert or replace the entry for one path (last writer wins)."""
        with self._lock:
            self._entries[path] = entry

    def invalidate(self, path: str) -> bool:
        """Drop one path. Returns True if it was cached."""
        with self._lock:
            return self._entries.pop(path, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def paths(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._entries
