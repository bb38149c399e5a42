"""Session-scoped dependency graph store."""

from __future__ import annotations

from collections.abc import KeysView, Mapping
from typing import TYPE_CHECKING

from utils import is_within, normalize_path

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rules.layers import LayerClassifier


class DependencyGraphStore(Mapping[str, KeysView[str]]):
    """Monotonically growing module graph plus the module -> layer map.

    Adjacency values are insertion-ordered dicts used as ordered sets, so
    neighbor iteration follows edge discovery order. ``add_edge`` and
    ``add_node`` are the only mutations; nothing is ever removed during a
    session.

    Layers are classified on the module path relative to ``root`` (with the
    leading ``/`` kept), so the checkout location never affects them.

    The store is itself a read-only mapping of module -> targets, so the
    cycle detector can walk it directly.
    """

    def __init__(self, classifier: LayerClassifier, root: str = "") -> None:
        self._classifier = classifier
        self._root = normalize_path(root) if root else ""
        self._adjacency: dict[str, dict[str, None]] = {}
        self._layers: dict[str, str | None] = {}
        self._edge_count = 0

    def add_edge(self, source: str, target: str) -> bool:
        """Record ``source -> target``. Returns False when already present."""
        if not source or not target:
            msg = "module identifiers must be non-empty"
            raise ValueError(msg)

        self.add_node(source)
        self.add_node(target)

        targets = self._adjacency[source]
        if target in targets:
            return False
        targets[target] = None
        self._edge_count += 1
        return True

    def add_node(self, module_id: str) -> None:
        """Register ``module_id`` without edges; a no-op when already known."""
        if module_id not in self._adjacency:
            self._adjacency[module_id] = {}
            self._layers[module_id] = self._classify(module_id)

    def _classify(self, module_id: str) -> str | None:
        # Directories above the codebase root never take part in layer matching.
        if self._root and self._root != "/" and is_within(module_id, self._root):
            module_id = module_id[len(self._root) :] or "/"
        return self._classifier.classify(module_id)

    def layer_of(self, module_id: str) -> str | None:
        if module_id in self._layers:
            return self._layers[module_id]
        return self._classify(module_id)

    def edges_from(self, module_id: str) -> KeysView[str]:
        """Return the targets of ``module_id`` in insertion order."""
        return self._adjacency.get(module_id, {}).keys()

    def all_nodes(self) -> set[str]:
        return set(self._adjacency)

    def edges(self) -> Iterator[tuple[str, str]]:
        for source, targets in self._adjacency.items():
            for target in targets:
                yield source, target

    @property
    def edge_count(self) -> int:
        return self._edge_count

    def __getitem__(self, module_id: str) -> KeysView[str]:
        return self._adjacency[module_id].keys()

    def __iter__(self) -> Iterator[str]:
        return iter(self._adjacency)

    def __len__(self) -> int:
        return len(self._adjacency)

    def as_graph(self) -> dict[str, list[str]]:
        """Plain ``dict`` snapshot of the adjacency, for reporting."""
        return {source: list(targets) for source, targets in self._adjacency.items()}


__all__ = ["DependencyGraphStore"]
