"""
Tests for AST Module

Tests tree-sitter parsing, error detection and tree serialization.
"""

import json
import threading

from astingest.ast.models import ParsedAst, ParseFailure
from astingest.ast.parser import ASTParser, EXTENSION_TO_LANGUAGE, detect_language, get_parser, supported_extensions


class TestLanguageDetection:
    """Test language detection from file extensions."""

    def test_python_extensions(self):
        assert detect_language("main.py") == "python"
        assert detect_language("script.pyw") == "python"
        assert detect_language("/path/to/module.py") == "python"

    def test_typescript_extensions(self):
        assert detect_language("app.ts") == "typescript"
        assert detect_language("component.tsx") == "tsx"
        assert detect_language("index.js") == "typescript"  # JS uses TS parser
        assert detect_language("App.jsx") == "tsx"

    def test_kotlin_extensions(self):
        assert detect_language("Main.kt") == "kotlin"
        assert detect_language("build.gradle.kts") == "kotlin"

    def test_case_insensitive(self):
        assert detect_language("MAIN.PY") == "python"
        assert detect_language("App.TS") == "typescript"

    def test_unsupported_extensions(self):
        assert detect_language("main.go") is None
        assert detect_language("readme.md") is None
        assert detect_language("Makefile") is None

    def test_supported_extensions(self):
        extensions = supported_extensions()

        assert extensions == tuple(sorted(EXTENSION_TO_LANGUAGE))
        assert ".py" in extensions

    def test_parser_is_per_thread(self):
        seen = []
        worker = threading.Thread(target=lambda: seen.append(get_parser()))
        worker.start()
        worker.join()

        assert get_parser() is get_parser()
        assert seen[0] is not get_parser()

    def test_every_extension_has_a_grammar(self):
        from astingest.ast.parser import LANGUAGE_MODULES

        assert set(EXTENSION_TO_LANGUAGE.values()) <= set(LANGUAGE_MODULES)


class TestParseSource:
    """Test conversion of source bytes into ParseResults."""

    def test_valid_python(self):
        result = ASTParser().parse_source("a.py", b"def hello(name):\n    return name\n", "python")

        assert isinstance(result, ParsedAst)
        assert result.ok
        assert result.language == "python"
        assert result.tree["type"] == "module"
        function = result.tree["children"][0]
        assert function["type"] == "function_definition"
        name = next(child for child in function["children"] if child.get("field") == "name")
        assert name["text"] == "hello"
        assert name["start"] == [0, 4]

    def test_tree_is_json_serializable(self):
        result = ASTParser().parse_source("a.py", b"class A:\n    x: int = 1\n", "python")

        assert json.loads(json.dumps(result.tree)) == result.tree

    def test_anonymous_nodes_dropped(self):
        result = ASTParser().parse_source("a.py", b"f(1, 2)\n", "python")

        def walk(node):
            yield node
            for child in node.get("children", []):
                yield from walk(child)

        types = {node["type"] for node in walk(result.tree)}
        assert "call" in types
        assert "(" not in types
        assert "," not in types

    def test_syntax_error_is_a_failure(self):
        result = ASTParser().parse_source("bad.py", b"def broken(:\n    pass\n", "python")

        assert isinstance(result, ParseFailure)
        assert not result.ok
        assert result.path == "bad.py"
        assert result.errors
        assert result.message.startswith("Syntax error at line")

    def test_failure_to_dict(self):
        result = ASTParser().parse_source("bad.py", b"x = (\n", "python")

        data = result.to_dict()
        assert data["kind"] == "PARSE_ERROR"
        assert data["path"] == "bad.py"
        assert data["errors"][0]["kind"] in ("error", "missing")

    def test_unsupported_language(self):
        result = ASTParser().parse_source("x.go", b"package main\n", "go")

        assert isinstance(result, ParseFailure)
        assert "Unsupported language" in result.message

    def test_typescript(self):
        result = ASTParser().parse_source("a.ts", b"interface User { name: string }\n", "typescript")

        assert isinstance(result, ParsedAst)
        assert result.tree["type"] == "program"

    def test_kotlin(self):
        result = ASTParser().parse_source("Main.kt", b'fun main() { println("hi") }\n', "kotlin")

        assert isinstance(result, ParsedAst)
        assert result.tree["type"] == "source_file"

    def test_deeply_nested_source(self):
        source = ("x = " + "(" * 200 + "1" + ")" * 200 + "\n").encode()

        result = ASTParser().parse_source("deep.py", source, "python")

        assert isinstance(result, ParsedAst)

    def test_with_path_rebinds_failure(self):
        failure = ParseFailure(path="a.py", language="python", message="Syntax error")

        moved = failure.with_path("b.py")

        assert moved.path == "b.py"
        assert moved.message == failure.message
