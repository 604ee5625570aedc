"""
Source File Walker

Expands configured roots (files or directories) into a deduplicated,
deterministically ordered list of source files.
"""

import os
from pathlib import Path
from typing import Generator, Iterable, Optional

from astingest.ast.models import DirectoryScanResult
from astingest.ast.parser import supported_extensions
from astingest.configs import ALWAYS_IGNORED_DIRS, get_logger

logger = get_logger("ingest.walker")


def _normalize_extensions(extensions: Optional[Iterable[str]]) -> frozenset[str]:
    if not extensions:
        extensions = supported_extensions()
    return frozenset(e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions)


def _ignored_names(ignore_dirs: Iterable[str]) -> frozenset[str]:
    return frozenset(name.lower() for name in (*ALWAYS_IGNORED_DIRS, *ignore_dirs))


def _segments_below(path: Path, base: Optional[Path]) -> tuple[str, ...]:
    """Path segments below base; empty when there is no base or path lies outside it."""
    if base is None:
        return ()
    try:
        return Path(os.path.abspath(path)).relative_to(os.path.abspath(base)).parts
    except ValueError:
        return ()


def _in_ignored_directory(segments: Iterable[str], ignored: frozenset[str]) -> bool:
    """
    Check whether any directory segment is ignored.

    Matching is by whole segment, so "node_modules-backup" is not excluded
    by a rule for "node_modules".
    """
    return any(part.lower() in ignored for part in segments)


def walk_source_files(
    root: Path,
    extensions: frozenset[str],
    ignored: frozenset[str],
) -> Generator[Path, None, None]:
    """
    Walk a directory yielding source files in sorted order.

    Args:
        root: Directory to walk
        extensions: Lower-cased extensions to include (e.g. {'.py'})
        ignored: Lower-cased directory names to prune

    Yields:
        Path objects for each matching file
    """
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune ignored directories (in-place modification keeps os.walk from descending)
        dirnames[:] = sorted(d for d in dirnames if d.lower() not in ignored)

        for filename in sorted(filenames):
            if Path(filename).suffix.lower() in extensions:
                yield Path(dirpath) / filename


def resolve_file_paths(
    roots: Iterable[str],
    extensions: Optional[Iterable[str]] = None,
    ignore_dirs: Iterable[str] = (),
    base: Optional[Path] = None,
) -> list[str]:
    """
    Expand roots into source file paths.

    A root that does not exist contributes nothing. A file root contributes
    itself when its extension is recognized. Directory roots are walked
    recursively. Duplicates are dropped, keeping first-discovery order.

    Ignore rules apply to the segments of a root below base (usually the
    project root), never to the directories above it. Without a base only
    the directories found while walking are checked.

    Args:
        roots: Files or directories
        extensions: Extensions to include (defaults to every supported language)
        ignore_dirs: Extra directory names to prune, on top of ALWAYS_IGNORED_DIRS
        base: Directory the root segments are taken relative to

    Returns:
        Ordered list of file paths
    """
    wanted = _normalize_extensions(extensions)
    ignored = _ignored_names(ignore_dirs)
    found: list[str] = []

    for root in roots:
        path = Path(root)
        if not path.exists():
            logger.debug(f"Skipping missing path: {root}")
            continue

        if path.is_dir():
            if _in_ignored_directory(_segments_below(path, base), ignored):
                logger.debug(f"Skipping ignored directory: {root}")
                continue
            found.extend(str(p) for p in walk_source_files(path, wanted, ignored))
            continue

        parent_segments = _segments_below(path, base)[:-1]
        if path.suffix.lower() in wanted and not _in_ignored_directory(parent_segments, ignored):
            found.append(str(path))

    return list(dict.fromkeys(found))


def find_files(
    directory: str,
    extensions: Optional[Iterable[str]] = None,
    ignore_dirs: Iterable[str] = (),
    base: Optional[Path] = None,
) -> DirectoryScanResult:
    """Scan one configured directory."""
    files = resolve_file_paths([directory], extensions, ignore_dirs, base)
    return DirectoryScanResult(directory=directory, files=tuple(files))
