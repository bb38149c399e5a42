"""AST-based import reference extraction for Python modules."""

from __future__ import annotations

import ast
import logging
from typing import TYPE_CHECKING

from diagnostics.models import ImportReference, SourceLocation
from resolve.references import PACKAGE_SCHEME
from utils import normalize_path

if TYPE_CHECKING:
    from collections.abc import Collection
    from pathlib import Path

logger = logging.getLogger(__name__)


def path_to_module_id(file_path: Path) -> str:
    """Return the canonical module identifier of a file on disk."""
    return normalize_path(file_path.resolve())


def _module_file(base: Path, parts: list[str]) -> str | None:
    """Locate ``parts`` below ``base`` as a module or package file.

    Returns the ``/``-joined path relative to ``base`` (``a/b.py`` or
    ``a/b/__init__.py``), or None when neither exists.
    """
    if parts:
        stem = "/".join(parts)
        if (base.joinpath(*parts[:-1]) / f"{parts[-1]}.py").is_file():
            return f"{stem}.py"
        if base.joinpath(*parts, "__init__.py").is_file():
            return f"{stem}/__init__.py"
        return None
    if (base / "__init__.py").is_file():
        return "__init__.py"
    return None


def _first_module_file(base: Path, candidates: list[list[str]]) -> str | None:
    for parts in candidates:
        found = _module_file(base, parts)
        if found is not None:
            return found
    return None


def _location(node: ast.stmt, module_id: str) -> SourceLocation:
    return SourceLocation(
        path=module_id,
        line=node.lineno,
        column=node.col_offset,
        end_line=node.end_lineno,
        end_column=node.end_col_offset,
    )


class _ReferenceBuilder:
    """Turns import statements of one file into engine reference strings."""

    def __init__(
        self,
        file_path: Path,
        codebase_root: Path,
        package_name: str,
        local_packages: Collection[str],
    ) -> None:
        self.file_path = file_path
        self.codebase_root = codebase_root
        self.package_name = package_name
        self.local_packages = frozenset(local_packages)
        self.module_id = path_to_module_id(file_path)

    def absolute(self, dotted: str, names: list[str]) -> list[str]:
        """References for ``import dotted`` or ``from dotted import names``."""
        parts = dotted.split(".")
        if parts[0] in self.local_packages:
            # top-level package below the root: package:<name>/<dir>/...
            base = self.codebase_root / parts[0]
            prefix = f"{parts[0]}/"
        elif parts[0] == self.package_name:
            base = self.codebase_root
            prefix = ""
        else:
            return [f"{PACKAGE_SCHEME}{'/'.join(parts)}"]

        inner = parts[1:]
        references: list[str] = []
        for candidates in self._candidate_sets(inner, names):
            found = _first_module_file(base, candidates)
            if found is None:
                logger.debug("No module file for %r in %s", dotted, self.module_id)
                continue
            references.append(f"{PACKAGE_SCHEME}{self.package_name}/{prefix}{found}")
        return references

    def relative(self, level: int, module: str | None, names: list[str]) -> list[str]:
        """References for ``from .module import names`` at ``level`` dots."""
        base = self.file_path.parent
        for _ in range(level - 1):
            base = base.parent
        prefix = "./" if level == 1 else "../" * (level - 1)

        inner = module.split(".") if module else []
        references: list[str] = []
        for candidates in self._candidate_sets(inner, names):
            found = _first_module_file(base, candidates)
            if found is None:
                logger.debug(
                    "No module file for relative import %r in %s",
                    "." * level + (module or ""),
                    self.module_id,
                )
                continue
            references.append(f"{prefix}{found}")
        return references

    @staticmethod
    def _candidate_sets(inner: list[str], names: list[str]) -> list[list[list[str]]]:
        # An imported name is a submodule when a file for it exists,
        # otherwise it is an attribute of the ``inner`` module.
        if not names:
            return [[inner]]
        return [
            [[*inner, name], inner] if name != "*" else [inner] for name in names
        ]


def _process_import_node(
    node: ast.Import, builder: _ReferenceBuilder, refs: list[ImportReference]
) -> None:
    """Process a standard import node (import x)."""
    location = _location(node, builder.module_id)
    for name in node.names:
        for text in builder.absolute(name.name, []):
            refs.append(ImportReference(text=text, location=location))


def _process_import_from_node(
    node: ast.ImportFrom, builder: _ReferenceBuilder, refs: list[ImportReference]
) -> None:
    """Process a from-import node (from x import y)."""
    location = _location(node, builder.module_id)
    names = [name.name for name in node.names]

    if node.level > 0:
        texts = builder.relative(node.level, node.module, names)
    elif node.module:
        texts = builder.absolute(node.module, names)
    else:
        texts = []

    seen: set[str] = set()
    for text in texts:
        if text not in seen:
            seen.add(text)
            refs.append(ImportReference(text=text, location=location))


def extract_import_references(
    file_path: Path,
    codebase_root: Path,
    package_name: str,
    local_packages: Collection[str] = (),
) -> list[ImportReference]:
    """Extract import references from a Python file using AST.

    Args:
        file_path: Path to the Python file to analyze
        codebase_root: Directory holding the analyzed package's modules
        package_name: Name under which the package imports itself
        local_packages: Top-level packages directly below ``codebase_root``;
            their absolute imports are in-codebase too

    Returns:
        References in source order. In-package imports become
        ``package:<name>/<file>`` or ``./``/``../`` paths to existing
        files; imports of other packages become ``package:<dotted/path>``.
        Unreadable or invalid files yield no references.
    """
    builder = _ReferenceBuilder(file_path, codebase_root, package_name, local_packages)
    refs: list[ImportReference] = []

    try:
        with file_path.open(encoding="utf-8") as file:
            tree = ast.parse(file.read(), str(file_path))
    except (SyntaxError, UnicodeDecodeError) as exc:
        logger.warning("Skipping %s: %s", file_path, exc)
        return refs

    nodes = [
        node
        for node in ast.walk(tree)
        if isinstance(node, (ast.Import, ast.ImportFrom))
    ]
    nodes.sort(key=lambda n: (n.lineno, n.col_offset))

    for node in nodes:
        if isinstance(node, ast.Import):
            _process_import_node(node, builder, refs)
        else:
            _process_import_from_node(node, builder, refs)

    return refs


__all__ = ["extract_import_references", "path_to_module_id"]
