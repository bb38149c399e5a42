"""Projection of the module graph onto architectural layers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph.algos import find_cycle

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

DEFAULT_MIN_LAYER_CYCLE_LAYERS = 3


def project_to_layer_graph(
    edges: Iterable[tuple[str, str]],
    layer_of: Callable[[str], str | None],
) -> dict[str, dict[str, None]]:
    """Collapse module edges into cross-layer edges.

    Edges whose endpoints share a layer, or touch an unclassified module, are
    dropped. Layer adjacency keeps first-seen order like the module store.
    """
    layer_graph: dict[str, dict[str, None]] = {}
    for source, target in edges:
        source_layer = layer_of(source)
        target_layer = layer_of(target)
        if source_layer is None or target_layer is None:
            continue
        if source_layer == target_layer:
            continue
        layer_graph.setdefault(source_layer, {})[target_layer] = None
        layer_graph.setdefault(target_layer, {})
    return layer_graph


def layer_edges(layer_graph: dict[str, dict[str, None]]) -> list[tuple[str, str]]:
    return sorted(
        (source, target) for source, targets in layer_graph.items() for target in targets
    )


def find_layer_cycle(
    start_layer: str, layer_graph: dict[str, dict[str, None]]
) -> list[str] | None:
    return find_cycle(start_layer, layer_graph)


def is_reportable_layer_cycle(
    layer_cycle: list[str] | None,
    min_layers: int = DEFAULT_MIN_LAYER_CYCLE_LAYERS,
) -> bool:
    """Return True when a layer cycle spans at least ``min_layers`` layers.

    A mutual dependency between exactly two layers is left to direction rules.
    """
    if not layer_cycle:
        return False
    return len(set(layer_cycle)) >= min_layers


__all__ = [
    "DEFAULT_MIN_LAYER_CYCLE_LAYERS",
    "find_layer_cycle",
    "is_reportable_layer_cycle",
    "layer_edges",
    "project_to_layer_graph",
]
