"""
Tests for manifest, README and source-directory handling.
"""

from pathlib import Path

import pytest

from astingest.exceptions import ConfigurationError, ManifestParseError
from astingest.ingest.project import find_manifest, get_source_directories, read_manifest, read_readme


class TestFindManifest:
    """Tests for upward manifest search."""

    def test_found_in_parent(self, make_project):
        root = make_project({"src/deep/a.py": "x = 1\n"})

        assert find_manifest(root / "src" / "deep") == root / "project.json"

    def test_not_found(self, temp_dir: Path):
        (temp_dir / "sub").mkdir()

        found = find_manifest(temp_dir / "sub", filename="no-such-manifest.json")

        assert found is None


class TestReadManifest:
    """Tests for read_manifest errors and results."""

    def test_valid(self, make_project, make_options):
        make_project({}, manifest={"type": "application", "source-directories": ["src", "lib"]})

        manifest = read_manifest(make_options())

        assert manifest.path == "project.json"
        assert manifest.project["source-directories"] == ["src", "lib"]
        assert '"application"' in manifest.raw

    def test_missing_not_specified(self, make_options):
        with pytest.raises(ConfigurationError) as excinfo:
            read_manifest(make_options())

        assert excinfo.value.kind == "CONFIG_ERROR"
        assert "running inside a project" in excinfo.value.message
        assert excinfo.value.path == "project.json"

    def test_missing_specified(self, make_options):
        with pytest.raises(ConfigurationError) as excinfo:
            read_manifest(make_options(manifest_path_was_specified=True))

        assert "misconfigured" in excinfo.value.message

    def test_invalid_json(self, temp_dir: Path, make_options):
        (temp_dir / "project.json").write_text("{ not json")

        with pytest.raises(ManifestParseError) as excinfo:
            read_manifest(make_options())

        assert excinfo.value.kind == "MANIFEST_PARSE_ERROR"
        assert isinstance(excinfo.value, ConfigurationError)

    def test_not_an_object(self, temp_dir: Path, make_options):
        (temp_dir / "project.json").write_text("[1, 2]")

        with pytest.raises(ManifestParseError):
            read_manifest(make_options())

    def test_bad_source_directories(self, make_project, make_options):
        make_project({}, manifest={"type": "application", "source-directories": "src"})

        with pytest.raises(ManifestParseError):
            read_manifest(make_options())

    def test_package_needs_no_source_directories(self, make_project, make_options):
        make_project({}, manifest={"type": "package"})

        assert read_manifest(make_options()).project["type"] == "package"


class TestReadReadme:
    """Tests for the optional README."""

    def test_present(self, make_project, make_options):
        make_project({"README.md": "# Hello\n"})

        readme = read_readme(make_options())

        assert readme.path == "README.md"
        assert readme.content == "# Hello\n"

    def test_absent(self, make_project, make_options):
        make_project({})

        assert read_readme(make_options()) is None


class TestSourceDirectories:
    """Tests for get_source_directories."""

    def test_application(self, make_project, make_options):
        root = make_project({}, manifest={"type": "application", "source-directories": ["src", "../shared"]})
        options = make_options()

        directories = get_source_directories(options, read_manifest(options))

        assert directories == [str(root / "src"), str((root / ".." / "shared").resolve()), str(root / "tests")]

    def test_package(self, make_project, make_options):
        root = make_project({}, manifest={"type": "package"})
        options = make_options()

        directories = get_source_directories(options, read_manifest(options))

        assert directories == [str(root / "src"), str(root / "tests")]

    def test_explicit_directories_win(self, make_project, make_options):
        root = make_project({"lib/a.py": "x = 1\n"})
        options = make_options(directories_to_analyze=[str(root / "lib")])

        directories = get_source_directories(options, read_manifest(options))

        assert directories == [str(root / "lib")]
