"""
AST Parsing

Tree-sitter based parsing of source files into JSON-compatible trees, plus
the records that flow through an ingestion pass.
"""

from astingest.ast.models import (
    DirectoryScanResult,
    IngestResult,
    IngestStats,
    ManifestData,
    ParsedAst,
    ParsedFile,
    ParseFailure,
    ParseResult,
    Readme,
    SourceFile,
)
from astingest.ast.parser import ASTParser, EXTENSION_TO_LANGUAGE, detect_language, get_parser

__all__ = [
    # Models
    "DirectoryScanResult",
    "IngestResult",
    "IngestStats",
    "ManifestData",
    "ParsedAst",
    "ParsedFile",
    "ParseFailure",
    "ParseResult",
    "Readme",
    "SourceFile",
    # Parser
    "ASTParser",
    "EXTENSION_TO_LANGUAGE",
    "detect_language",
    "get_parser",
]
