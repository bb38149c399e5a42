"""Dependency graph storage and algorithms."""

from graph.algos import find_cycle, find_cycles
from graph.layers import (
    find_layer_cycle,
    is_reportable_layer_cycle,
    project_to_layer_graph,
)
from graph.store import DependencyGraphStore

__all__ = [
    "DependencyGraphStore",
    "find_cycle",
    "find_cycles",
    "find_layer_cycle",
    "is_reportable_layer_cycle",
    "project_to_layer_graph",
]
