"""Graph algorithms for layercycle."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping


def _neighbors(graph: Mapping[str, Iterable[str]], node: str) -> Iterator[str]:
    return iter(graph.get(node, ()))


def find_cycle(start: str, graph: Mapping[str, Iterable[str]]) -> list[str] | None:
    """Find a cycle reachable from ``start`` with a depth-first search.

    The search keeps a ``visited`` set and the ordered recursion stack
    ``on_stack``. Neighbors are explored in the order the graph yields them
    and the first back edge wins: the witness is the slice of ``on_stack``
    from the revisited node to the top, closed by that node again. The
    traversal uses an explicit frame stack, so long import chains cannot
    exhaust the interpreter's recursion limit.

    Args:
        start: Node to start from.
        graph: Mapping from node to its successors.

    Returns:
        The cycle as ``[v0, v1, ..., v0]``, or None when no cycle is
        reachable from ``start``.

    Examples:
        >>> find_cycle("a", {"a": ["a"]})
        ['a', 'a']
        >>> find_cycle("a", {"a": ["b"], "b": ["c"], "c": ["b"]})
        ['b', 'c', 'b']
        >>> find_cycle("a", {"a": ["b"], "b": []}) is None
        True
    """
    visited: set[str] = {start}
    on_stack: list[str] = [start]
    stack_index: dict[str, int] = {start: 0}
    frames: list[Iterator[str]] = [_neighbors(graph, start)]

    while frames:
        neighbor = next(frames[-1], None)
        if neighbor is None:
            frames.pop()
            finished = on_stack.pop()
            del stack_index[finished]
            continue

        if neighbor not in visited:
            visited.add(neighbor)
            stack_index[neighbor] = len(on_stack)
            on_stack.append(neighbor)
            frames.append(_neighbors(graph, neighbor))
        elif neighbor in stack_index:
            return [*on_stack[stack_index[neighbor] :], neighbor]

    return None


class _TarjanState:
    """Mutable state container for Tarjan's SCC algorithm."""

    def __init__(self) -> None:
        self.index = 0
        self.indices: dict[str, int] = {}
        self.low_link: dict[str, int] = {}
        self.on_stack: set[str] = set()
        self.stack: list[str] = []
        self.sccs: list[list[str]] = []


def _extract_scc(state: _TarjanState, root: str) -> list[str]:
    """Extract a strongly connected component from the stack."""
    scc: list[str] = []
    while state.stack:
        w = state.stack.pop()
        state.on_stack.remove(w)
        scc.append(w)
        if w == root:
            break
    if root not in scc:
        msg = (
            f"Tarjan algorithm invariant violated: root node {root!r} "
            "not found in stack during SCC extraction."
        )
        raise RuntimeError(msg)
    return scc


def _visit(state: _TarjanState, node: str) -> None:
    state.indices[node] = state.index
    state.low_link[node] = state.index
    state.index += 1
    state.stack.append(node)
    state.on_stack.add(node)


def _strongconnect(
    root: str, graph: Mapping[str, Iterable[str]], state: _TarjanState
) -> None:
    """Process the nodes reachable from ``root`` without recursing."""
    _visit(state, root)
    work: list[tuple[str, Iterator[str]]] = [
        (root, iter(sorted(graph.get(root, ()))))
    ]

    while work:
        node, neighbors = work[-1]
        neighbor = next(neighbors, None)

        if neighbor is not None:
            if neighbor not in state.indices:
                _visit(state, neighbor)
                work.append((neighbor, iter(sorted(graph.get(neighbor, ())))))
            elif neighbor in state.on_stack:
                state.low_link[node] = min(
                    state.low_link[node], state.indices[neighbor]
                )
            continue

        work.pop()
        if work:
            parent = work[-1][0]
            state.low_link[parent] = min(state.low_link[parent], state.low_link[node])

        if state.low_link[node] == state.indices[node]:
            scc = _extract_scc(state, node)
            if len(scc) > 1 or node in graph.get(node, ()):
                state.sccs.append(scc)


def find_cycles(graph: Mapping[str, Iterable[str]]) -> list[list[str]]:
    """Find every cyclic strongly connected component with Tarjan's algorithm.

    Args:
        graph: Mapping from node to its successors.

    Returns:
        Components with more than one node, or a single node with a self
        edge. Each component is sorted and the list is sorted, so the result
        does not depend on insertion order.
    """
    state = _TarjanState()

    for node in sorted(graph):
        if node not in state.indices:
            _strongconnect(node, graph, state)

    return sorted(sorted(scc) for scc in state.sccs)


__all__ = [
    "find_cycle",
    "find_cycles",
]
