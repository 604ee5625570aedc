"""
Tree-sitter Parser Wrapper

Handles language detection, tree-sitter parsing, and conversion of trees into
the JSON-compatible representation that is cached and handed to rules.
"""

import threading
from pathlib import Path
from typing import Any, Optional

import tree_sitter_kotlin
import tree_sitter_python
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from astingest.ast.models import ParsedAst, ParseFailure, ParseResult, SyntaxErrorLocation
from astingest.configs import get_logger

logger = get_logger("ast.parser")


# Supported languages and their tree-sitter modules
LANGUAGE_MODULES = {
    "python": tree_sitter_python,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
    "kotlin": tree_sitter_kotlin,
}

# File extension to language mapping
EXTENSION_TO_LANGUAGE = {
    ".py": "python",
    ".pyw": "python",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".js": "typescript",  # Use TS parser for JS (superset)
    ".jsx": "tsx",
    ".mjs": "typescript",
    ".cjs": "typescript",
    ".kt": "kotlin",
    ".kts": "kotlin",
}

# Cap on syntax error locations kept per failure
MAX_REPORTED_ERRORS = 20


class ASTParser:
    """
    Parses source bytes with the tree-sitter grammar of a language.

    Grammars and parsers are created on first use of a language and kept for
    the lifetime of the instance. Instances are not shared between threads;
    use get_parser() to get the one of the current thread.
    """

    def __init__(self):
        self._parsers: dict[str, Parser] = {}

    def _parser_for(self, language: str) -> Optional[Parser]:
        parser = self._parsers.get(language)
        if parser is not None:
            return parser

        grammar = LANGUAGE_MODULES.get(language)
        if grammar is None:
            logger.warning(f"No tree-sitter grammar for language {language!r}")
            return None

        # tree_sitter_python exposes language(); tree_sitter_typescript one getter per dialect
        capsule = grammar() if callable(grammar) else grammar.language()
        parser = self._parsers[language] = Parser(Language(capsule))
        return parser

    def parse(self, content: bytes, language: str) -> Optional[Tree]:
        """
        Parse source bytes into a tree-sitter Tree.

        Returns:
            The tree, or None when there is no grammar for the language
        """
        parser = self._parser_for(language)
        return parser.parse(content) if parser is not None else None

    def parse_source(self, path: str, content: bytes, language: str) -> ParseResult:
        """
        Parse source bytes into a ParseResult.

        Tree-sitter always returns a tree; a tree containing ERROR or MISSING
        nodes is reported as a ParseFailure.
        """
        try:
            tree = self.parse(content, language)
        except Exception as e:
            logger.error(f"Failed to parse {path} as {language}: {e}")
            return ParseFailure(path=path, language=language, message=f"Parser crashed: {e}")

        if tree is None:
            return ParseFailure(path=path, language=language, message=f"Unsupported language: {language}")

        root = tree.root_node
        if root.has_error:
            errors = collect_syntax_errors(root)
            first = errors[0] if errors else None
            where = f" at line {first.start[0] + 1}, column {first.start[1] + 1}" if first else ""
            return ParseFailure(
                path=path,
                language=language,
                message=f"Syntax error{where}",
                errors=tuple(errors),
            )

        return ParsedAst(language=language, tree=serialize_tree(root))


def detect_language(file_path: str) -> Optional[str]:
    """Map a file path to a language name by extension."""
    return EXTENSION_TO_LANGUAGE.get(Path(file_path).suffix.lower())


def supported_extensions() -> tuple[str, ...]:
    return tuple(sorted(EXTENSION_TO_LANGUAGE))


def _point(point) -> list[int]:
    return [point[0], point[1]]


def _node_dict(node: Node, field_name: Optional[str]) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": node.type,
        "start": _point(node.start_point),
        "end": _point(node.end_point),
    }
    if field_name:
        data["field"] = field_name
    if node.named_child_count == 0 and node.text is not None:
        data["text"] = node.text.decode("utf-8", errors="replace")
    return data


def serialize_tree(root: Node) -> dict[str, Any]:
    """
    Convert a tree-sitter node into nested dicts of named nodes.

    Anonymous nodes (punctuation, keywords) are dropped; leaves keep their
    text. Iterative so deeply nested sources don't hit the recursion limit.
    """
    root_dict = _node_dict(root, None)
    stack = [(root, root_dict)]
    while stack:
        node, data = stack.pop()
        children = []
        for index, child in enumerate(node.children):
            if not child.is_named:
                continue
            child_dict = _node_dict(child, node.field_name_for_child(index))
            children.append(child_dict)
            stack.append((child, child_dict))
        if children:
            data["children"] = children
    return root_dict


def collect_syntax_errors(root: Node, limit: int = MAX_REPORTED_ERRORS) -> list[SyntaxErrorLocation]:
    """Find ERROR and MISSING nodes, in source order, descending only into erroneous subtrees."""
    found: list[SyntaxErrorLocation] = []
    stack = [root]
    while stack and len(found) < limit:
        node = stack.pop()
        if node.is_missing:
            found.append(
                SyntaxErrorLocation("missing", node.type, tuple(_point(node.start_point)), tuple(_point(node.end_point)))
            )
            continue
        if node.type == "ERROR":
            found.append(
                SyntaxErrorLocation("error", node.type, tuple(_point(node.start_point)), tuple(_point(node.end_point)))
            )
        stack.extend(child for child in reversed(node.children) if child.has_error or child.is_missing)
    return found


# One parser per thread; tree-sitter parsers are not thread-safe
_local = threading.local()


def get_parser() -> ASTParser:
    """Get the ASTParser instance of the current thread."""
    parser = getattr(_local, "parser", None)
    if parser is None:
        parser = ASTParser()
        _local.parser = parser
    return parser
