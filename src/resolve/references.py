"""Import reference resolution to canonical module identifiers."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from utils import is_within, normalize_path, normalize_segments, parent_dir, to_posix

logger = logging.getLogger(__name__)

PACKAGE_SCHEME = "package:"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:/")


@dataclass(frozen=True)
class ResolvedModule:
    """A reference that points at a module inside the analyzed codebase."""

    module_id: str


@dataclass(frozen=True)
class External:
    """A reference to code outside the analyzed codebase."""

    reference: str


@dataclass(frozen=True)
class Unresolvable:
    """A malformed reference that cannot be mapped anywhere."""

    reference: str
    reason: str


Resolution = ResolvedModule | External | Unresolvable


def _is_relative(reference: str) -> bool:
    return reference.startswith(("./", "../")) or reference in {".", ".."}


class ReferenceResolver:
    """Resolve raw import references against one codebase root.

    The resolver holds only static configuration, so ``resolve`` is a pure
    function of its arguments.
    """

    def __init__(self, codebase_root: str, package_name: str) -> None:
        if not codebase_root:
            msg = "codebase_root must be a non-empty path"
            raise ValueError(msg)
        self.codebase_root = normalize_path(codebase_root)
        self.package_name = package_name

    def resolve(self, reference: str, referencing_module: str) -> Resolution:
        """Resolve ``reference`` as written in ``referencing_module``.

        Args:
            reference: Import text, e.g. ``../c.py``, ``package:pkg/a.py``,
                ``std:async`` or ``/abs/path.py``.
            referencing_module: Canonical identifier of the importing module.

        Returns:
            ResolvedModule for targets inside the codebase root, External for
            platform, third-party or out-of-root targets, Unresolvable for
            malformed references.
        """
        problem = self._malformed(reference)
        if problem is not None:
            return Unresolvable(reference, problem)

        text = to_posix(reference.strip())

        if _is_relative(text):
            base = parent_dir(normalize_path(referencing_module))
            segments = [*base.split("/"), *text.split("/")]
            resolved = normalize_segments(segments, absolute=base.startswith("/"))
            if resolved in {"", "/"}:
                return Unresolvable(reference, "relative reference collapses to root")
            return self._inside_root(reference, resolved)

        if text.startswith(PACKAGE_SCHEME):
            return self._resolve_package(reference, text[len(PACKAGE_SCHEME) :])

        if text.startswith("/") or _WINDOWS_DRIVE_RE.match(text):
            return self._inside_root(reference, normalize_path(text))

        if _SCHEME_RE.match(text):
            return External(reference)

        return self._resolve_package(reference, text)

    def _malformed(self, reference: str) -> str | None:
        if not reference or not reference.strip():
            return "empty reference"
        if any(ch in reference for ch in ("\x00", "\n", "\r")):
            return "control character in reference"
        return None

    def _resolve_package(self, reference: str, qualified: str) -> Resolution:
        package, sep, rest = qualified.partition("/")
        if not package:
            return Unresolvable(reference, "missing package name")
        if package != self.package_name:
            return External(reference)
        if not sep or not rest.strip("/"):
            return Unresolvable(reference, "missing path after package name")

        target = normalize_segments(
            [*self.codebase_root.split("/"), *rest.split("/")],
            absolute=self.codebase_root.startswith("/"),
        )
        return self._inside_root(reference, target)

    def _inside_root(self, reference: str, target: str) -> Resolution:
        if is_within(target, self.codebase_root) and target != self.codebase_root:
            return ResolvedModule(target)
        logger.debug("Reference %r resolves outside %s", reference, self.codebase_root)
        return External(reference)


__all__ = [
    "External",
    "PACKAGE_SCHEME",
    "ReferenceResolver",
    "Resolution",
    "ResolvedModule",
    "Unresolvable",
]
