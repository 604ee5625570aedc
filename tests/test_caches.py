"""
Tests for the in-memory session cache and the durable file cache.
"""

import hashlib
import json
import os
import stat
import threading
from pathlib import Path

from astingest.ast.models import DurableCacheEntry, MemoryCacheEntry, ParsedAst
from astingest.ingest import file_cache
from astingest.ingest.file_cache import ENTRY_FILE_MODE, DurableCache, compute_content_hash
from astingest.ingest.memory_cache import MemoryCache

TREE = {"type": "module", "start": [0, 0], "end": [1, 0]}


def _entry(path: str, mtime: float, content: bytes = b"x = 1\n") -> MemoryCacheEntry:
    return MemoryCacheEntry(
        path=path,
        last_updated_time=mtime,
        content=content,
        language="python",
        result=ParsedAst(language="python", tree=TREE),
    )


class TestMemoryCache:
    """Tests for MemoryCache."""

    def test_lookup_missing(self):
        assert MemoryCache().lookup("a.py") is None

    def test_upsert_replaces_whole_entry(self):
        cache = MemoryCache()
        cache.upsert("a.py", _entry("a.py", 1.0))
        newer = _entry("a.py", 2.0, b"x = 2\n")

        cache.upsert("a.py", newer)

        assert cache.lookup("a.py") is newer
        assert len(cache) == 1

    def test_invalidate_and_clear(self):
        cache = MemoryCache()
        cache.upsert("a.py", _entry("a.py", 1.0))
        cache.upsert("b.py", _entry("b.py", 1.0))

        assert cache.invalidate("a.py") is True
        assert cache.invalidate("a.py") is False
        assert "a.py" not in cache
        assert cache.paths() == ["b.py"]

        cache.clear()
        assert len(cache) == 0

    def test_instances_are_independent(self):
        first, second = MemoryCache(), MemoryCache()
        first.upsert("a.py", _entry("a.py", 1.0))

        assert second.lookup("a.py") is None

    def test_concurrent_upserts(self):
        cache = MemoryCache()

        def writer(index: int):
            for i in range(200):
                cache.upsert(f"f{index}.py", _entry(f"f{index}.py", float(i)))

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(cache) == 4
        assert all(cache.lookup(f"f{i}.py").last_updated_time == 199.0 for i in range(4))


class TestContentHash:
    """Tests for compute_content_hash."""

    def test_sha256(self):
        assert compute_content_hash(b"abc") == hashlib.sha256(b"abc").hexdigest()

    def test_identical_bytes_same_hash(self):
        assert compute_content_hash(b"x = 1\n") == compute_content_hash(b"x = 1\n")
        assert compute_content_hash(b"x = 1\n") != compute_content_hash(b"x = 1\r\n")


class TestDurableCache:
    """Tests for DurableCache."""

    def test_read_missing(self, temp_dir: Path):
        assert DurableCache(temp_dir).read("0" * 64, "python") is None

    def test_write_then_read(self, temp_dir: Path):
        cache = DurableCache(temp_dir / "cache")
        content_hash = compute_content_hash(b"x = 1\n")

        assert cache.write(DurableCacheEntry(content_hash, "python", TREE)) is True

        entry = cache.read(content_hash, "python")
        assert entry == DurableCacheEntry(content_hash, "python", TREE)
        assert cache.read(content_hash, "python") is not None
        assert cache.read(content_hash, "kotlin") is None

    def test_layout(self, temp_dir: Path):
        cache = DurableCache(temp_dir)
        content_hash = compute_content_hash(b"y = 2\n")

        cache.write(DurableCacheEntry(content_hash, "python", TREE))

        path = temp_dir / "python" / content_hash[:2] / f"{content_hash}.json"
        assert json.loads(path.read_text())["content_hash"] == content_hash
        assert not list(path.parent.glob("*.tmp"))

    def test_entry_mode_follows_umask(self, temp_dir: Path):
        cache = DurableCache(temp_dir)
        content_hash = compute_content_hash(b"shared = True\n")

        cache.write(DurableCacheEntry(content_hash, "python", TREE))

        path = temp_dir / "python" / content_hash[:2] / f"{content_hash}.json"
        assert stat.S_IMODE(path.stat().st_mode) == ENTRY_FILE_MODE
        assert ENTRY_FILE_MODE & stat.S_IRUSR

    def test_entry_readable_by_others_under_common_umask(self, temp_dir: Path):
        previous = os.umask(0o022)
        try:
            mode = file_cache._default_file_mode()
        finally:
            os.umask(previous)

        assert mode == 0o644

    def test_rewrite_same_hash_is_idempotent(self, temp_dir: Path):
        cache = DurableCache(temp_dir)
        content_hash = compute_content_hash(b"z = 3\n")

        cache.write(DurableCacheEntry(content_hash, "python", TREE))
        cache.write(DurableCacheEntry(content_hash, "python", TREE))

        assert cache.read(content_hash, "python").ast == TREE

    def test_corrupt_entry_is_a_miss(self, temp_dir: Path):
        cache = DurableCache(temp_dir)
        content_hash = compute_content_hash(b"bad")
        path = temp_dir / "python" / content_hash[:2] / f"{content_hash}.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        assert cache.read(content_hash, "python") is None

    def test_entry_for_other_hash_is_a_miss(self, temp_dir: Path):
        cache = DurableCache(temp_dir)
        content_hash = compute_content_hash(b"mismatch")
        path = temp_dir / "python" / content_hash[:2] / f"{content_hash}.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"content_hash": "other", "ast": TREE}))

        assert cache.read(content_hash, "python") is None

    def test_unwritable_directory(self, temp_dir: Path):
        blocker = temp_dir / "blocker"
        blocker.write_text("a file where a directory should be")
        cache = DurableCache(blocker)

        assert cache.write(DurableCacheEntry(compute_content_hash(b"x"), "python", TREE)) is False

    def test_clear(self, temp_dir: Path):
        cache = DurableCache(temp_dir / "cache")
        cache.write(DurableCacheEntry(compute_content_hash(b"x"), "python", TREE))

        cache.clear()

        assert not (temp_dir / "cache").exists()
