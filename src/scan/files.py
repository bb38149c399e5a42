"""Source file and package discovery for layercycle."""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)

DEFAULT_SKIP_DIRS = frozenset(
    {".git", ".hg", ".venv", "venv", "__pycache__", "build", "dist", ".tox"}
)


def _walk(directory: Path, skip_dirs: frozenset[str]) -> Iterator[Path]:
    """Yield regular files below ``directory``; symlinks are never followed."""
    for dirpath, dirnames, filenames in os.walk(directory):
        current = Path(dirpath)
        dirnames[:] = [
            name
            for name in dirnames
            if name not in skip_dirs and not (current / name).is_symlink()
        ]
        for name in filenames:
            path = current / name
            if not path.is_symlink():
                yield path


def _gitignore_files(
    root: Path, *, nested: bool, skip_dirs: frozenset[str]
) -> list[Path]:
    if nested:
        found = [path for path in _walk(root, skip_dirs) if path.name == ".gitignore"]
    else:
        found = [root / ".gitignore"]
    found = [path for path in found if path.is_file() and not path.is_symlink()]
    return sorted(found, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
    skip_dirs: frozenset[str] = DEFAULT_SKIP_DIRS,
) -> Callable[[str], bool] | None:
    """Compose the root (or every nested) ``.gitignore`` into one predicate."""
    matchers = [
        parse_gitignore(path)
        for path in _gitignore_files(root, nested=nested_gitignore, skip_dirs=skip_dirs)
    ]
    if not matchers:
        return None

    def ignored(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # outside this .gitignore's directory
                continue
        return False

    return ignored


def _matches_any(rel_path: str, patterns: Sequence[str]) -> bool:
    return any(fnmatch(rel_path, pat) for pat in patterns)


def find_source_files(
    directory: Path,
    *,
    suffixes: Iterable[str] = (".py",),
    skip_dirs: frozenset[str] = DEFAULT_SKIP_DIRS,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> list[Path]:
    """Find source files below ``directory``.

    Args:
        directory: Codebase root to search
        suffixes: File suffixes to collect (default: Python files)
        skip_dirs: Directory names never descended into
        include_patterns: fnmatch patterns on root-relative paths; when
            given, a file must match one of them
        exclude_patterns: fnmatch patterns on root-relative paths; matching
            files are dropped
        nested_gitignore: Also honor .gitignore files below ``directory``

    Returns:
        Files sorted by root-relative POSIX path.
    """
    wanted = tuple(suffixes)
    ignored = _build_gitignore_matcher(
        directory, nested_gitignore=nested_gitignore, skip_dirs=skip_dirs
    )

    found: dict[str, Path] = {}
    for path in _walk(directory, skip_dirs):
        if not path.name.endswith(wanted):
            continue
        rel_path = path.relative_to(directory).as_posix()
        if ignored is not None and ignored(str(path)):
            continue
        if include_patterns and not _matches_any(rel_path, include_patterns):
            continue
        if exclude_patterns and _matches_any(rel_path, exclude_patterns):
            continue
        found[rel_path] = path

    logger.debug("Found %d source files under %s", len(found), directory)
    return [found[rel_path] for rel_path in sorted(found)]


def find_top_level_packages(
    directory: Path, skip_dirs: frozenset[str] = DEFAULT_SKIP_DIRS
) -> list[str]:
    """Names of the packages importable from ``directory`` as a sys.path entry.

    A directory that is itself a package (it holds ``__init__.py``) has no
    top-level packages of its own; its children import through its name.
    """
    if not directory.is_dir() or (directory / "__init__.py").is_file():
        return []
    return sorted(
        child.name
        for child in directory.iterdir()
        if child.is_dir()
        and not child.is_symlink()
        and child.name not in skip_dirs
        and child.name.isidentifier()
        and (child / "__init__.py").is_file()
    )


__all__ = ["DEFAULT_SKIP_DIRS", "find_source_files", "find_top_level_packages"]
