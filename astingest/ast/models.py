"""
Data Models for Ingestion

Records produced and consumed by one ingestion pass: source files, parse
results, cache entries and the final result handed to analysis rules.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class SourceFile:
    """A source file as read from disk. A change on disk produces a new value."""

    path: str  # Relative to the project root
    content: bytes
    last_modified: Optional[float] = None  # Only read in watch mode

    @property
    def source(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class ParsedAst:
    """Successful parse: a JSON-compatible tree of nodes."""

    language: str
    tree: dict[str, Any]

    ok = True


@dataclass(frozen=True)
class SyntaxErrorLocation:
    """Position of an ERROR or MISSING node reported by tree-sitter."""

    kind: str  # "error" or "missing"
    node_type: str
    start: tuple[int, int]
    end: tuple[int, int]


@dataclass(frozen=True)
class ParseFailure:
    """Failed parse. Never written to the durable cache."""

    path: str
    language: str
    message: str
    errors: tuple[SyntaxErrorLocation, ...] = ()

    ok = False

    def with_path(self, path: str) -> "ParseFailure":
        """Same failure reported for another file with identical content."""
        return ParseFailure(path=path, language=self.language, message=self.message, errors=self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "error",
            "kind": "PARSE_ERROR",
            "path": self.path,
            "language": self.language,
            "message": self.message,
            "errors": [
                {"kind": e.kind, "node_type": e.node_type, "start": list(e.start), "end": list(e.end)}
                for e in self.errors
            ],
        }


ParseResult = Union[ParsedAst, ParseFailure]


@dataclass(frozen=True, kw_only=True)
class ParsedFile(SourceFile):
    """One output record: a source file with its parse result."""

    language: str
    result: ParseResult

    @property
    def ok(self) -> bool:
        return self.result.ok

    @property
    def ast(self) -> Optional[dict[str, Any]]:
        return self.result.tree if isinstance(self.result, ParsedAst) else None


# =============================================================================
# Cache Entries
# =============================================================================


@dataclass(frozen=True)
class MemoryCacheEntry:
    """Watch-session entry, replaced whole when a fresher mtime is observed."""

    path: str
    last_updated_time: Optional[float]
    content: bytes
    language: str
    result: ParseResult


@dataclass(frozen=True)
class DurableCacheEntry:
    """Persisted entry keyed by the hash of the exact file content."""

    content_hash: str
    language: str
    ast: dict[str, Any]


# =============================================================================
# Worker Pool Messages
# =============================================================================


@dataclass(frozen=True)
class ParseRequest:
    """Unit of work for the parser pool; request_id correlates the response."""

    request_id: str
    path: str
    language: str
    content: bytes


@dataclass(frozen=True)
class ParseResponse:
    request_id: str
    result: ParseResult


# =============================================================================
# Project and Pass Results
# =============================================================================


@dataclass(frozen=True)
class DirectoryScanResult:
    """Files found under one configured directory."""

    directory: str
    files: tuple[str, ...]


@dataclass(frozen=True)
class ManifestData:
    """The project manifest: relative path, raw text and parsed document."""

    path: str
    raw: str
    project: dict[str, Any]


@dataclass(frozen=True)
class Readme:
    path: str
    content: str


@dataclass
class IngestStats:
    """Counters for one ingestion pass."""

    files: int = 0
    memory_hits: int = 0
    content_hits: int = 0
    durable_hits: int = 0
    dispatched: int = 0
    parse_failures: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "files": self.files,
            "memory_hits": self.memory_hits,
            "content_hits": self.content_hits,
            "durable_hits": self.durable_hits,
            "dispatched": self.dispatched,
            "parse_failures": self.parse_failures,
        }


@dataclass
class IngestResult:
    """Everything one ingestion pass hands to the rule evaluation layer."""

    files: list[ParsedFile]
    errors: list[ParseFailure]
    manifest: ManifestData
    readme: Optional[Readme] = None
    source_directories: list[str] = field(default_factory=list)
    stats: IngestStats = field(default_factory=IngestStats)
