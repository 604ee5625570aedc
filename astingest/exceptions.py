"""
astingest Exception Hierarchy

Centralized exception classes for the ingestion pass. Every error that aborts
a pass inherits from AstIngestError and carries a `kind` tag so callers can
route all failures through one channel.

Parse errors are not exceptions: a file that does not parse yields a
ParseFailure value (see astingest.ast.models) and the pass continues.

Usage:
    from astingest.exceptions import AstIngestError

    try:
        result = ingest(options)
    except AstIngestError as e:
        print(json.dumps(e.to_dict()))
"""

from typing import Any, Iterable, Optional


class AstIngestError(Exception):
    """Base exception for all astingest errors."""

    kind = "UNEXPECTED_ERROR"
    title = "UNEXPECTED ERROR"

    def __init__(self, message: str, details: dict | None = None, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.path = path

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Structured form handed to report layers."""
        return {
            "type": "error",
            "kind": self.kind,
            "title": self.title,
            "path": self.path,
            "message": self.message.strip(),
            "details": self.details,
        }


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(AstIngestError):
    """Manifest not found or configuration unusable."""

    kind = "CONFIG_ERROR"
    title = "MANIFEST NOT FOUND"


class ManifestParseError(ConfigurationError):
    """Manifest exists but is not a valid project descriptor."""

    kind = "MANIFEST_PARSE_ERROR"
    title = "MANIFEST PARSE ERROR"


# =============================================================================
# Ingest Errors
# =============================================================================


class IngestError(AstIngestError):
    """Base class for errors that abort an ingestion pass."""

    pass


class NoFilesFoundError(IngestError):
    """Explicitly requested directories contained no source files."""

    kind = "NO_FILES_FOUND"
    title = "NO FILES FOUND"

    def __init__(self, directories: Iterable[str]):
        self.directories = list(directories)
        listing = "\n".join(f"- {directory}" for directory in self.directories)
        message = (
            "I was expecting to find source files in all the paths that you passed, "
            "but I could not find any in the following directories:\n"
            f"{listing}\n\n"
            "When I can't find files in some of the directories, I'm assuming that "
            "the directories were misconfigured."
        )
        super().__init__(message, {"directories": self.directories})


class FileReadError(IngestError):
    """A resolved source file could not be read."""

    kind = "FILE_READ_ERROR"
    title = "UNEXPECTED ERROR WHEN READING THE FILE"

    def __init__(self, path: str, cause: BaseException):
        self.cause = cause
        message = (
            f"I could not read the following file: {path}\n\n"
            f"Original error message: {cause}"
        )
        super().__init__(message, {"cause": str(cause)}, path=path)


# =============================================================================
# Worker Pool Errors
# =============================================================================


class WorkerPoolError(AstIngestError):
    """Parse requested from a pool that was not prepared."""

    kind = "WORKER_POOL_MISUSE"
    title = "WORKER POOL MISUSE"
