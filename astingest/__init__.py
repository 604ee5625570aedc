"""
astingest

Incremental source ingestion: finds a project's source files, reuses cached
parse results that are still valid, and parses the rest with tree-sitter.
"""

from astingest.exceptions import (
    AstIngestError,
    ConfigurationError,
    FileReadError,
    ManifestParseError,
    NoFilesFoundError,
    WorkerPoolError,
)
from astingest.ingest import MemoryCache, ParserPool, WatchSession, ingest
from astingest.options import IngestOptions
from astingest.version import __version__

__all__ = [
    "__version__",
    "ingest",
    "IngestOptions",
    "MemoryCache",
    "ParserPool",
    "WatchSession",
    "AstIngestError",
    "ConfigurationError",
    "FileReadError",
    "ManifestParseError",
    "NoFilesFoundError",
    "WorkerPoolError",
]
