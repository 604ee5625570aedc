"""
Ingestion Engine

Main ingestion logic: resolve the project's source files, reuse every parse
result that is still valid, send the rest to the parser pool, and hand back
one record per file in resolution order.

Configuration and I/O errors abort the pass (no partial output). Parse errors
are per file: the file's record carries a ParseFailure and the pass goes on.
"""

import os
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from astingest.ast.models import (
    IngestResult,
    IngestStats,
    ParsedFile,
    ParseFailure,
    ParseRequest,
    ParseResult,
)
from astingest.ast.parser import detect_language
from astingest.configs import get_logger
from astingest.exceptions import FileReadError, NoFilesFoundError
from astingest.ingest.file_cache import DurableCache
from astingest.ingest.memory_cache import MemoryCache
from astingest.ingest.project import get_source_directories, read_manifest, read_readme
from astingest.ingest.staleness import HIT_CONTENT, HIT_DURABLE, HIT_MEMORY, StalenessOracle, Verdict
from astingest.ingest.walker import find_files
from astingest.ingest.workers import ParserPool
from astingest.options import IngestOptions

logger = get_logger("ingest.engine")


@dataclass(frozen=True)
class _FileCheck:
    """Staleness verdict for one resolved file."""

    path: str  # Relative to the project root
    language: str
    last_modified: Optional[float]
    verdict: Verdict

    @property
    def request_id(self) -> str:
        # Identical content of the same language is parsed once
        return f"{self.language}:{self.verdict.content_hash}"


def _relative_path(file_path: str, project_root: Path) -> str:
    return Path(os.path.relpath(file_path, project_root)).as_posix()


def _check_file(
    file_path: str,
    options: IngestOptions,
    oracle: StalenessOracle,
) -> _FileCheck:
    """Stat (watch mode) and consult the staleness oracle for one file."""
    relative_path = _relative_path(file_path, options.project_root)
    language = detect_language(file_path)

    last_modified = None
    if options.watch:
        try:
            last_modified = os.stat(file_path).st_mtime
        except OSError as e:
            raise FileReadError(relative_path, e) from e

    def load_content() -> bytes:
        try:
            return Path(file_path).read_bytes()
        except OSError as e:
            raise FileReadError(relative_path, e) from e

    verdict = oracle.assess(relative_path, language, load_content, last_modified)
    return _FileCheck(relative_path, language, last_modified, verdict)


def _wait_in_order(futures: list[Future]) -> list:
    """Collect results in submission order; on the first error cancel the rest and re-raise."""
    try:
        return [future.result() for future in futures]
    except BaseException:
        for future in futures:
            future.cancel()
        raise


def _check_files(
    io: Executor,
    paths: list[str],
    options: IngestOptions,
    oracle: StalenessOracle,
) -> list[_FileCheck]:
    futures = [io.submit(_check_file, path, options, oracle) for path in paths]
    return _wait_in_order(futures)


def _parse_misses(pool: ParserPool, checks: list[_FileCheck]) -> dict[str, ParseResult]:
    """Dispatch every distinct stale content once; results keyed by request id."""
    requests: dict[str, ParseRequest] = {}
    for check in checks:
        if check.verdict.hit or check.request_id in requests:
            continue
        requests[check.request_id] = ParseRequest(
            request_id=check.request_id,
            path=check.path,
            language=check.language,
            content=check.verdict.content,
        )

    if not requests:
        return {}

    logger.debug(f"Parsing {len(requests)} distinct files")
    return pool.parse_all(requests.values())


def _prune_session_cache(memory_cache: MemoryCache, checks: list[_FileCheck]) -> int:
    """Drop session entries of paths this pass no longer resolved, such as deleted or renamed files."""
    resolved = {check.path for check in checks}
    dropped = [path for path in memory_cache.paths() if path not in resolved]
    for path in dropped:
        memory_cache.invalidate(path)
    if dropped:
        logger.debug(f"Dropped {len(dropped)} session entries no longer resolved")
    return len(dropped)


def ingest(
    options: IngestOptions,
    memory_cache: Optional[MemoryCache] = None,
    pool: Optional[ParserPool] = None,
) -> IngestResult:
    """
    Run one ingestion pass.

    Args:
        options: Pass configuration
        memory_cache: Session cache, used when options.watch is set
        pool: Parser pool to use (a new one is created when omitted)

    Returns:
        IngestResult with one ParsedFile per resolved path, in resolution order

    Raises:
        ConfigurationError: Manifest missing or invalid
        NoFilesFoundError: Explicit directories without source files
        FileReadError: A resolved file could not be read
    """
    if options.watch and memory_cache is None:
        memory_cache = MemoryCache()
    durable_cache = DurableCache(options.file_cache_path()) if options.use_durable_cache else None
    oracle = StalenessOracle(memory_cache, durable_cache, watch=options.watch, trust_mtime=options.trust_mtime)
    pool = pool or ParserPool(max_workers=options.max_workers, kind=options.pool_kind)
    stats = IngestStats()

    with ThreadPoolExecutor(max_workers=options.io_workers, thread_name_prefix="astingest-io") as io:
        manifest_future = io.submit(read_manifest, options)
        readme_future = io.submit(read_readme, options)
        manifest = manifest_future.result()
        readme = readme_future.result()

        source_directories = get_source_directories(options, manifest)
        scans = _wait_in_order(
            [
                io.submit(find_files, d, options.extensions, options.ignore_dirs, options.project_root)
                for d in source_directories
            ]
        )

        # Whole-batch decision: only once every scan is done
        if options.directories_to_analyze:
            empty = [scan.directory for scan in scans if not scan.files]
            if empty:
                raise NoFilesFoundError(empty)

        paths = list(dict.fromkeys(path for scan in scans for path in scan.files))
        logger.debug(f"Ingesting {len(paths)} files from {len(source_directories)} directories")
        for path in paths:
            logger.debug(f" - {path}")

        with pool.session():
            checks = _check_files(io, paths, options, oracle)
            parsed = _parse_misses(pool, checks)

    files: list[ParsedFile] = []
    errors: list[ParseFailure] = []
    persisted: set[str] = set()
    for check in checks:
        verdict = check.verdict
        if verdict.hit:
            result = verdict.result
            if verdict.source == HIT_MEMORY:
                stats.memory_hits += 1
            elif verdict.source == HIT_CONTENT:
                stats.content_hits += 1
            elif verdict.source == HIT_DURABLE:
                stats.durable_hits += 1
        else:
            result = parsed[check.request_id]
            if check.request_id not in persisted:
                persisted.add(check.request_id)
                oracle.persist(verdict.content_hash, result)

        if isinstance(result, ParseFailure):
            result = result.with_path(check.path)
            errors.append(result)

        if verdict.source != HIT_MEMORY:
            oracle.remember(check.path, check.language, verdict.content, check.last_modified, result)

        files.append(
            ParsedFile(
                path=check.path,
                content=verdict.content,
                language=check.language,
                result=result,
                last_modified=check.last_modified,
            )
        )

    if options.watch:
        _prune_session_cache(memory_cache, checks)

    stats.files = len(files)
    stats.dispatched = len(parsed)
    stats.parse_failures = len(errors)
    logger.info(
        f"Ingested {stats.files} files: "
        f"{stats.memory_hits + stats.content_hits + stats.durable_hits} cached, "
        f"{stats.dispatched} parsed, {stats.parse_failures} with parse errors"
    )

    return IngestResult(
        files=files,
        errors=errors,
        manifest=manifest,
        readme=readme,
        source_directories=source_directories,
        stats=stats,
    )


class WatchSession:
    """
    Long-lived session running repeated ingestion passes.

    Owns the in-memory cache for its lifetime. Passes are expected to be
    serialized by the caller; a later pass replaces entries of an earlier one.
    """

    def __init__(
        self,
        options: IngestOptions,
        memory_cache: Optional[MemoryCache] = None,
        pool: Optional[ParserPool] = None,
    ):
        self.options = replace(options, watch=True)
        self.memory_cache = memory_cache if memory_cache is not None else MemoryCache()
        self.pool = pool or ParserPool(max_workers=options.max_workers, kind=options.pool_kind)
        self.passes = 0

    def run_pass(self) -> IngestResult:
        """Run one pass against the session cache."""
        self.passes += 1
        logger.debug(f"Watch pass {self.passes}")
        return ingest(self.options, memory_cache=self.memory_cache, pool=self.pool)

    def invalidate(self, path: Optional[str] = None) -> None:
        """Forget one relative path, or everything when path is None."""
        if path is None:
            self.memory_cache.clear()
        else:
            self.memory_cache.invalidate(path)
