"""Translate detected cycles into diagnostics anchored at import statements."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from diagnostics.models import CycleKind, Diagnostic, ImportReference
from utils import last_segments

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

ARROW = " → "

SUGGEST_DEPENDENCY_INVERSION = (
    "Break the cycle by using dependency inversion. Create abstractions in the "
    "inner layer that outer layers can implement."
)
SUGGEST_REPOSITORY_INTERFACE = (
    "Consider using repository interfaces in the domain layer instead of "
    "direct dependencies."
)
SUGGEST_RESTRUCTURE_USE_CASES = (
    "Use cases should not depend on each other directly. Consider combining "
    "or restructuring them."
)
SUGGEST_EXTRACT_SHARED = (
    "Extract shared functionality to a separate module or use dependency "
    "injection to break the cycle."
)
SUGGEST_LAYER_CYCLE = (
    "Architectural layers should have acyclic dependencies. Consider using "
    "dependency inversion."
)

_REPOSITORY_MARKERS = ("repository",)
_USE_CASE_MARKERS = ("usecase", "use_case", "use-case")


class ResolvedImport(NamedTuple):
    """An import statement of the current module and the module it targets."""

    reference: ImportReference
    target: str


def describe_cycle(cycle: Sequence[str]) -> str:
    """Render a cycle as ``a/b.py → c/d.py → a/b.py``."""
    return ARROW.join(last_segments(module_id) for module_id in cycle)


def suggest_fix(cycle: Sequence[str], layer_of: Callable[[str], str | None]) -> str:
    """Pick a remediation hint from the cycle's layers and module names."""
    layers = {layer for layer in map(layer_of, cycle) if layer is not None}
    if len(layers) > 1:
        return SUGGEST_DEPENDENCY_INVERSION

    lowered = [module_id.lower() for module_id in cycle]
    if any(marker in m for m in lowered for marker in _REPOSITORY_MARKERS):
        return SUGGEST_REPOSITORY_INTERFACE
    if any(marker in m for m in lowered for marker in _USE_CASE_MARKERS):
        return SUGGEST_RESTRUCTURE_USE_CASES
    return SUGGEST_EXTRACT_SHARED


def _successor(cycle: Sequence[str], node: str) -> str | None:
    """Return the element after ``node`` in a closed cycle, if ``node`` is on it."""
    for index, item in enumerate(cycle[:-1]):
        if item == node:
            return cycle[index + 1]
    return None


class DiagnosticEmitter:
    """Builds diagnostics for one session's severity and layer map."""

    def __init__(
        self,
        layer_of: Callable[[str], str | None],
        *,
        severity: str = "warning",
    ) -> None:
        self.layer_of = layer_of
        self.severity = severity

    def emit_module_cycle(
        self,
        cycle: Sequence[str],
        current_module: str,
        imports: Sequence[ResolvedImport],
    ) -> Diagnostic | None:
        """Anchor a module cycle at the import that leads into it.

        Prefers the import pointing at the module after ``current_module`` in
        the cycle; when the current module only reaches the cycle, the first
        import targeting any cycle member is used. Returns None when no
        import of the current module touches the cycle.
        """
        anchor = self._module_anchor(cycle, current_module, imports)
        if anchor is None:
            return None

        return Diagnostic(
            location=anchor.reference.location,
            message=f"Circular dependency detected: {describe_cycle(cycle)}",
            suggestion=suggest_fix(cycle, self.layer_of),
            cycle_kind=CycleKind.MODULE_CYCLE,
            cycle=list(cycle),
            severity=self.severity,
        )

    def _module_anchor(
        self,
        cycle: Sequence[str],
        current_module: str,
        imports: Sequence[ResolvedImport],
    ) -> ResolvedImport | None:
        successor = _successor(cycle, current_module)
        if successor is not None:
            for resolved in imports:
                if resolved.target == successor:
                    return resolved

        members = set(cycle)
        for resolved in imports:
            if resolved.target in members:
                return resolved
        return None

    def emit_layer_cycle(
        self,
        layer_cycle: Sequence[str],
        current_module: str,
        imports: Sequence[ResolvedImport],
    ) -> Diagnostic | None:
        """Anchor a layer cycle at one import crossing into the cycle."""
        current_layer = self.layer_of(current_module)
        successor = _successor(layer_cycle, current_layer) if current_layer else None
        members = set(layer_cycle)

        anchor: ResolvedImport | None = None
        for resolved in imports:
            target_layer = self.layer_of(resolved.target)
            if target_layer is None or target_layer == current_layer:
                continue
            if target_layer == successor:
                anchor = resolved
                break
            if anchor is None and target_layer in members:
                anchor = resolved

        if anchor is None:
            return None

        return Diagnostic(
            location=anchor.reference.location,
            message=f"Layer-level circular dependency: {ARROW.join(layer_cycle)}",
            suggestion=SUGGEST_LAYER_CYCLE,
            cycle_kind=CycleKind.LAYER_CYCLE,
            cycle=list(layer_cycle),
            severity=self.severity,
        )


__all__ = [
    "ARROW",
    "DiagnosticEmitter",
    "ResolvedImport",
    "describe_cycle",
    "suggest_fix",
]
