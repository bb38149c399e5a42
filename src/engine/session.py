"""Per-module visitation over one session-scoped dependency graph."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from diagnostics.emitter import DiagnosticEmitter, ResolvedImport
from graph.algos import find_cycle, find_cycles
from graph.layers import (
    DEFAULT_MIN_LAYER_CYCLE_LAYERS,
    find_layer_cycle,
    is_reportable_layer_cycle,
    layer_edges,
    project_to_layer_graph,
)
from graph.store import DependencyGraphStore
from resolve.references import ReferenceResolver, ResolvedModule, Unresolvable
from rules.layers import LayerClassifier
from utils import normalize_path

if TYPE_CHECKING:
    from collections.abc import Sequence

    from diagnostics.models import Diagnostic, ImportReference
    from rules.config import LayerCycleConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphSummary:
    node_count: int
    edge_count: int
    cycles: tuple[tuple[str, ...], ...] = field(default_factory=tuple)
    layers: dict[str, str | None] = field(default_factory=dict)
    layer_edges: tuple[tuple[str, str], ...] = field(default_factory=tuple)


class AnalysisSession:
    """Owns the dependency graph for one analysis run.

    The host calls ``visit`` once per module, in any order. Edge insertion
    and cycle detection run under one lock, so a check always sees a
    consistent graph even when front-end work happens on other threads.
    """

    def __init__(
        self,
        resolver: ReferenceResolver,
        classifier: LayerClassifier,
        *,
        module_cycles: bool = True,
        layer_cycles: bool = True,
        min_layer_cycle_layers: int = DEFAULT_MIN_LAYER_CYCLE_LAYERS,
        severity: str = "warning",
    ) -> None:
        self.resolver = resolver
        self.store = DependencyGraphStore(classifier, resolver.codebase_root)
        self.emitter = DiagnosticEmitter(self.store.layer_of, severity=severity)
        self.module_cycles = module_cycles
        self.layer_cycles = layer_cycles
        self.min_layer_cycle_layers = min_layer_cycle_layers
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: LayerCycleConfig,
        *,
        codebase_root: str,
        package_name: str,
    ) -> AnalysisSession:
        return cls(
            ReferenceResolver(codebase_root, package_name),
            LayerClassifier.from_config(config.layers),
            module_cycles=config.rules.module_cycles,
            layer_cycles=config.rules.layer_cycles,
            min_layer_cycle_layers=config.rules.min_layer_cycle_layers,
            severity=config.severity,
        )

    def visit(
        self, module_path: str, imports: Sequence[ImportReference]
    ) -> list[Diagnostic]:
        """Add a module's edges, then report cycles visible from it."""
        with self._lock:
            module_id, resolved = self._ingest(module_path, imports)
            return self._check(module_id, resolved)

    def ingest(self, module_path: str, imports: Sequence[ImportReference]) -> None:
        """Add a module's edges without checking for cycles."""
        with self._lock:
            self._ingest(module_path, imports)

    def check(
        self, module_path: str, imports: Sequence[ImportReference]
    ) -> list[Diagnostic]:
        """Report cycles visible from a module on the current graph.

        Imports are resolved again for anchoring only; no edge is added.
        """
        with self._lock:
            module_id = normalize_path(module_path)
            return self._check(module_id, self._resolve_all(module_id, imports))

    def _resolve_all(
        self, module_id: str, imports: Sequence[ImportReference]
    ) -> list[ResolvedImport]:
        resolved: list[ResolvedImport] = []
        for reference in imports:
            result = self.resolver.resolve(reference.text, module_id)
            if isinstance(result, ResolvedModule):
                resolved.append(ResolvedImport(reference, result.module_id))
            elif isinstance(result, Unresolvable):
                logger.debug(
                    "Skipping unresolvable reference %r in %s: %s",
                    reference.text,
                    module_id,
                    result.reason,
                )
        return resolved

    def _ingest(
        self, module_path: str, imports: Sequence[ImportReference]
    ) -> tuple[str, list[ResolvedImport]]:
        module_id = normalize_path(module_path)
        if not module_id:
            msg = "module path must be non-empty"
            raise ValueError(msg)

        resolved = self._resolve_all(module_id, imports)
        self.store.add_node(module_id)
        for item in resolved:
            self.store.add_edge(module_id, item.target)
        return module_id, resolved

    def _check(
        self, module_id: str, resolved: Sequence[ResolvedImport]
    ) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []

        if self.module_cycles:
            cycle = find_cycle(module_id, self.store)
            if cycle is not None:
                logger.debug("Module cycle from %s: %s", module_id, cycle)
                diagnostic = self.emitter.emit_module_cycle(cycle, module_id, resolved)
                if diagnostic is not None:
                    diagnostics.append(diagnostic)

        if self.layer_cycles:
            diagnostic = self._check_layers(module_id, resolved)
            if diagnostic is not None:
                diagnostics.append(diagnostic)

        return diagnostics

    def _check_layers(
        self, module_id: str, resolved: Sequence[ResolvedImport]
    ) -> Diagnostic | None:
        current_layer = self.store.layer_of(module_id)
        if current_layer is None:
            return None

        layer_graph = project_to_layer_graph(self.store.edges(), self.store.layer_of)
        layer_cycle = find_layer_cycle(current_layer, layer_graph)
        if not is_reportable_layer_cycle(layer_cycle, self.min_layer_cycle_layers):
            if layer_cycle is not None:
                logger.debug("Layer cycle below reporting threshold: %s", layer_cycle)
            return None

        return self.emitter.emit_layer_cycle(layer_cycle, module_id, resolved)

    def summary(self) -> GraphSummary:
        """Snapshot of the graph: counts, cyclic components and layer edges."""
        with self._lock:
            layer_graph = project_to_layer_graph(
                self.store.edges(), self.store.layer_of
            )
            nodes = sorted(self.store.all_nodes())
            return GraphSummary(
                node_count=len(nodes),
                edge_count=self.store.edge_count,
                cycles=tuple(tuple(scc) for scc in find_cycles(self.store)),
                layers={node: self.store.layer_of(node) for node in nodes},
                layer_edges=tuple(layer_edges(layer_graph)),
            )


__all__ = ["AnalysisSession", "GraphSummary"]
