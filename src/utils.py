"""Shared path utilities for layercycle."""

from __future__ import annotations

from pathlib import Path


def to_posix(path: str | Path) -> str:
    """Return ``path`` with every separator rewritten to ``/``."""
    path_str = path.as_posix() if isinstance(path, Path) else str(path)
    return path_str.replace("\\", "/")


def normalize_segments(segments: list[str], *, absolute: bool) -> str:
    """Collapse ``.``, ``..`` and empty segments into a canonical path.

    Popping past the first segment is a no-op, matching permissive path
    normalization.

    Examples:
        >>> normalize_segments(["proj", "lib", "a", "..", "c.src"], absolute=True)
        '/proj/lib/c.src'
        >>> normalize_segments(["..", "..", "x"], absolute=False)
        'x'
    """
    stack: list[str] = []
    for segment in segments:
        if segment == "..":
            if stack:
                stack.pop()
        elif segment and segment != ".":
            stack.append(segment)

    joined = "/".join(stack)
    if absolute:
        return f"/{joined}"
    return joined


def normalize_path(path: str | Path) -> str:
    """Canonicalize a path into a module identifier.

    Examples:
        >>> normalize_path("/proj//lib/./a/../b.py")
        '/proj/lib/b.py'
        >>> normalize_path("C:\\\\proj\\\\lib\\\\b.py")
        'C:/proj/lib/b.py'
    """
    posix = to_posix(path)
    return normalize_segments(posix.split("/"), absolute=posix.startswith("/"))


def parent_dir(module_id: str) -> str:
    """Return the directory part of a canonical module identifier."""
    head, sep, _tail = module_id.rpartition("/")
    if not sep:
        return ""
    return head or "/"


def is_within(path: str, root: str) -> bool:
    """Return True when canonical ``path`` equals or sits below ``root``."""
    if root in {"", "/"}:
        return path.startswith("/") if root == "/" else True
    return path == root or path.startswith(f"{root}/")


def last_segments(module_id: str, count: int = 2) -> str:
    """Abbreviate an identifier to its last ``count`` path segments.

    Examples:
        >>> last_segments("/proj/lib/domain/user.py")
        'domain/user.py'
        >>> last_segments("user.py")
        'user.py'
    """
    parts = module_id.split("/")
    if len(parts) > count:
        return "/".join(parts[-count:])
    return module_id
