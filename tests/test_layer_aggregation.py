from __future__ import annotations

from graph.algos import find_cycle
from graph.layers import (
    find_layer_cycle,
    is_reportable_layer_cycle,
    layer_edges,
    project_to_layer_graph,
)

LAYERS = {
    "A": "domain",
    "B": "infrastructure",
    "C": "domain",
    "D": "application",
    "U": None,
}


def _layer_of(module_id: str) -> str | None:
    return LAYERS.get(module_id)


def test_projection_collapses_modules_and_drops_same_layer_edges() -> None:
    edges = [("A", "B"), ("B", "C"), ("A", "C")]

    layer_graph = project_to_layer_graph(edges, _layer_of)

    assert layer_edges(layer_graph) == [
        ("domain", "infrastructure"),
        ("infrastructure", "domain"),
    ]


def test_unclassified_modules_contribute_no_layer_edges() -> None:
    edges = [("A", "U"), ("U", "B")]

    assert layer_edges(project_to_layer_graph(edges, _layer_of)) == []


def test_two_layer_cycle_is_found_but_not_reportable() -> None:
    layer_graph = project_to_layer_graph([("A", "B"), ("B", "C")], _layer_of)

    cycle = find_layer_cycle("domain", layer_graph)

    assert cycle == ["domain", "infrastructure", "domain"]
    assert is_reportable_layer_cycle(cycle) is False


def test_three_layer_cycle_is_reportable() -> None:
    edges = [("A", "D"), ("D", "B"), ("B", "C")]
    layer_graph = project_to_layer_graph(edges, _layer_of)

    cycle = find_layer_cycle("domain", layer_graph)

    assert cycle == ["domain", "application", "infrastructure", "domain"]
    assert is_reportable_layer_cycle(cycle) is True


def test_layer_cycle_reuses_module_cycle_detector() -> None:
    layer_graph = project_to_layer_graph([("A", "D"), ("D", "A")], _layer_of)

    assert find_layer_cycle("application", layer_graph) == find_cycle(
        "application", layer_graph
    )


def test_threshold_is_configurable() -> None:
    assert is_reportable_layer_cycle(["domain", "infra", "domain"], min_layers=2)
    assert not is_reportable_layer_cycle(None)
    assert not is_reportable_layer_cycle(
        ["domain", "application", "infrastructure", "domain"], min_layers=4
    )
