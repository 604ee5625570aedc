"""
Project Files

Locating and reading the project manifest and README, and deriving the
source directories to scan.
"""

import json
import os
from pathlib import Path
from typing import Optional

from astingest.ast.models import ManifestData, Readme
from astingest.configs import MANIFEST_FILENAME, get_logger
from astingest.configs.constants import PACKAGE_PROJECT_TYPE, PACKAGE_SOURCE_DIRECTORY, TEST_DIRECTORY
from astingest.exceptions import ConfigurationError, ManifestParseError
from astingest.options import IngestOptions

logger = get_logger("ingest.project")


def find_manifest(start: Optional[Path] = None, filename: str = MANIFEST_FILENAME) -> Optional[Path]:
    """
    Find the manifest in a directory or one of its parents.

    Args:
        start: Directory to start from (defaults to the working directory)
        filename: Manifest file name

    Returns:
        Path to the manifest, or None if there is none up to the filesystem root
    """
    current = Path(start or os.getcwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def read_manifest(options: IngestOptions) -> ManifestData:
    """
    Read and validate the project manifest.

    Raises:
        ConfigurationError: The manifest could not be read
        ManifestParseError: The manifest is not a valid project descriptor
    """
    manifest_path = options.manifest_path
    try:
        raw = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if options.manifest_path_was_specified:
            detail = "Since you specified this path, I'm assuming that it was misconfigured."
        else:
            detail = (
                "Are you running inside a project? If not, create a "
                f"{MANIFEST_FILENAME} or point to one explicitly."
            )
        raise ConfigurationError(
            f"I could not find the {MANIFEST_FILENAME} of the project to analyze. "
            f"I was looking for it at:\n\n    {manifest_path}\n\n{detail}",
            {"manifest_path": str(manifest_path)},
            path=manifest_path.name,
        )
    except OSError as e:
        raise ConfigurationError(
            f"I could not read the project manifest at {manifest_path}: {e}",
            {"manifest_path": str(manifest_path)},
            path=manifest_path.name,
        ) from e

    try:
        project = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestParseError(
            f"The manifest at {manifest_path} is not valid JSON: {e.msg} "
            f"(line {e.lineno}, column {e.colno})",
            {"manifest_path": str(manifest_path)},
            path=manifest_path.name,
        ) from e

    if not isinstance(project, dict):
        raise ManifestParseError(
            f"The manifest at {manifest_path} must be a JSON object",
            {"manifest_path": str(manifest_path)},
            path=manifest_path.name,
        )

    if project.get("type") != PACKAGE_PROJECT_TYPE:
        directories = project.get("source-directories")
        if not isinstance(directories, list) or not all(isinstance(d, str) for d in directories):
            raise ManifestParseError(
                f'The manifest at {manifest_path} must list its "source-directories" '
                "as an array of relative paths",
                {"manifest_path": str(manifest_path)},
                path=manifest_path.name,
            )

    return ManifestData(path=manifest_path.name, raw=raw, project=project)


def read_readme(options: IngestOptions) -> Optional[Readme]:
    """Read the README next to the manifest. A missing or unreadable README is not an error."""
    readme_path = options.readme_path
    try:
        content = readme_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"No readable README at {readme_path}: {e}")
        return None
    return Readme(path=os.path.relpath(readme_path, options.project_root), content=content)


def get_source_directories(options: IngestOptions, manifest: ManifestData) -> list[str]:
    """
    Directories to scan.

    Explicit directories win (resolved against the working directory). A
    "package" project scans src/ and tests/; any other project scans its
    declared source-directories plus tests/.
    """
    if options.directories_to_analyze:
        return [str(Path(directory).resolve()) for directory in options.directories_to_analyze]

    root = options.project_root
    if manifest.project.get("type") == PACKAGE_PROJECT_TYPE:
        return [str(root / PACKAGE_SOURCE_DIRECTORY), str(root / TEST_DIRECTORY)]

    directories = [str((root / directory).resolve()) for directory in manifest.project["source-directories"]]
    directories.append(str(root / TEST_DIRECTORY))
    return directories
