"""
astingest Ingestion Module

Incremental ingestion of a project's source files:
- File discovery with directory pruning
- Staleness checks against the session and durable caches
- Parallel parsing of stale files
"""

from astingest.ingest.engine import WatchSession, ingest
from astingest.ingest.file_cache import DurableCache, compute_content_hash
from astingest.ingest.memory_cache import MemoryCache
from astingest.ingest.project import find_manifest, get_source_directories, read_manifest, read_readme
from astingest.ingest.staleness import StalenessOracle, Verdict
from astingest.ingest.walker import find_files, resolve_file_paths, walk_source_files
from astingest.ingest.workers import ParserPool, run_parse_request

__all__ = [
    # Engine
    "ingest",
    "WatchSession",
    # Caches
    "DurableCache",
    "MemoryCache",
    "compute_content_hash",
    "StalenessOracle",
    "Verdict",
    # Project
    "find_manifest",
    "get_source_directories",
    "read_manifest",
    "read_readme",
    # Walker
    "find_files",
    "resolve_file_paths",
    "walk_source_files",
    # Workers
    "ParserPool",
    "run_parse_request",
]
