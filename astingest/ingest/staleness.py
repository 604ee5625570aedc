"""
Staleness Detection for Parsed Files

Decides whether a previously parsed result may be reused for a file, or
whether the file has to go to the parser pool.

Lookup order:
1. Watch mode, memory entry with last_updated_time >= the file's mtime:
   reuse without reading the file. This relies on the *mtime-monotonic*
   assumption: a file whose modification time did not advance has not
   changed. Filesystems with coarse timestamp resolution or clock skew
   break it, so the short-circuit is opt-in (trust_mtime=True).
2. Watch mode, memory entry whose content equals the freshly read bytes:
   reuse, including a recorded parse failure. Content equality wins over a
   newer mtime. Failures live only in the session cache, never on disk.
3. Durable cache entry for the content hash: reuse.
4. Otherwise the file is stale and must be parsed.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from astingest.ast.models import DurableCacheEntry, MemoryCacheEntry, ParsedAst, ParseResult
from astingest.configs import get_logger
from astingest.ingest.file_cache import DurableCache, compute_content_hash
from astingest.ingest.memory_cache import MemoryCache

logger = get_logger("ingest.staleness")

HIT_MEMORY = "memory"
HIT_CONTENT = "content"
HIT_DURABLE = "durable"


@dataclass(frozen=True)
class Verdict:
    """Outcome of a staleness check for one file."""

    hit: bool
    content: bytes
    content_hash: Optional[str] = None  # Set whenever the content was hashed
    result: Optional[ParseResult] = None  # Set on hits
    source: Optional[str] = None  # Which layer produced the hit


class StalenessOracle:
    """
    Combines the in-memory (watch) cache and the durable cache.

    Args:
        memory_cache: Session cache; consulted and updated in watch mode only
        durable_cache: Content-hash cache, or None to disable it
        watch: Whether this pass belongs to a watch session
        trust_mtime: Allow skipping the content read when mtime did not advance
    """

    def __init__(
        self,
        memory_cache: Optional[MemoryCache],
        durable_cache: Optional[DurableCache],
        watch: bool = False,
        trust_mtime: bool = False,
    ):
        self.memory_cache = memory_cache if watch else None
        self.durable_cache = durable_cache
        self.watch = watch
        self.trust_mtime = trust_mtime

    def assess(
        self,
        path: str,
        language: str,
        load_content: Callable[[], bytes],
        last_modified: Optional[float] = None,
    ) -> Verdict:
        """
        Check one file.

        Args:
            path: Path relative to the project root (memory cache key)
            language: Language the file parses as
            load_content: Reads the file; only called when needed
            last_modified: Freshly observed mtime (watch mode)

        Returns:
            Verdict; on a miss it carries the content and its hash
        """
        entry = self.memory_cache.lookup(path) if self.memory_cache is not None else None
        if entry is not None and entry.language != language:
            entry = None

        if entry is not None and self._unchanged_since(entry, last_modified):
            logger.debug(f"{path}: mtime unchanged, reusing session entry")
            return Verdict(hit=True, content=entry.content, result=entry.result, source=HIT_MEMORY)

        content = load_content()

        if entry is not None and entry.content == content:
            logger.debug(f"{path}: content unchanged, reusing session entry")
            return Verdict(hit=True, content=content, result=entry.result, source=HIT_CONTENT)

        content_hash = compute_content_hash(content)
        if self.durable_cache is not None:
            cached = self.durable_cache.read(content_hash, language)
            if cached is not None:
                return Verdict(
                    hit=True,
                    content=content,
                    content_hash=content_hash,
                    result=ParsedAst(language=language, tree=cached.ast),
                    source=HIT_DURABLE,
                )

        return Verdict(hit=False, content=content, content_hash=content_hash)

    def _unchanged_since(self, entry: MemoryCacheEntry, last_modified: Optional[float]) -> bool:
        if not self.trust_mtime or last_modified is None or entry.last_updated_time is None:
            return False
        return entry.last_updated_time >= last_modified

    def remember(
        self,
        path: str,
        language: str,
        content: bytes,
        last_modified: Optional[float],
        result: ParseResult,
    ) -> None:
        """Store the final result for a path in the session cache (watch mode only)."""
        if self.memory_cache is None:
            return
        self.memory_cache.upsert(
            path,
            MemoryCacheEntry(
                path=path,
                last_updated_time=last_modified,
                content=content,
                language=language,
                result=result,
            ),
        )

    def persist(self, content_hash: str, result: ParseResult) -> bool:
        """Write a fresh parse to the durable cache. Failures are never persisted."""
        if self.durable_cache is None or not isinstance(result, ParsedAst):
            return False
        return self.durable_cache.write(
            DurableCacheEntry(content_hash=content_hash, language=result.language, ast=result.tree)
        )
