"""
Longest simple path search over a contracted junction graph.

The search is an exhaustive depth-first backtracking over a dense integer
form of the graph, with two optional pruning checks that never change the
answer:
- skip an edge if the exit can no longer be reached from where it leads
- skip an edge if an upper bound on what is still collectable cannot beat
  the best length found so far
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass

from junctions import EdgeIndex
from maze_types import Coord, Edge, PathNotFound, SearchTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Route:
    """A simple path through the junction graph."""

    length: int
    nodes: tuple[Coord, ...]
    edges: tuple[Edge, ...]


class CompiledGraph:
    """
    EdgeIndex with each coordinate replaced by a small integer id.

    adjacency[i] lists (target id, length, edge) for edges leaving node i,
    longest first unless longest_first is False.
    max_in[i] is the longest edge arriving at node i.
    """

    def __init__(self, index: EdgeIndex, longest_first: bool = True) -> None:
        self.coords: list[Coord] = sorted(index.coords())
        self.ids: dict[Coord, int] = {coord: i for i, coord in enumerate(self.coords)}
        self.adjacency: list[list[tuple[int, int, Edge]]] = [[] for _ in self.coords]
        self.max_in: list[int] = [0] * len(self.coords)

        for edge in index.edges():
            source, target = self.ids[edge.start], self.ids[edge.end]
            self.adjacency[source].append((target, edge.length, edge))
            self.max_in[target] = max(self.max_in[target], edge.length)

        for outgoing in self.adjacency:
            outgoing.sort(key=lambda item: item[1], reverse=longest_first)

    def __len__(self) -> int:
        return len(self.coords)


def _remaining_bound(
    graph: CompiledGraph,
    source: int,
    goal: int,
    visited: list[bool],
) -> int | None:
    """
    Upper bound on the length still collectable after arriving at source.

    Breadth-first search from source over unvisited nodes. Every further edge
    enters a distinct reachable node, so the sum of their longest incoming
    edges bounds the rest of the path.

    Returns:
        The bound, or None if goal is unreachable
    """
    seen = {source}
    queue = deque([source])
    bound = 0
    while queue:
        node = queue.popleft()
        for target, _, _ in graph.adjacency[node]:
            if visited[target] or target in seen:
                continue
            seen.add(target)
            bound += graph.max_in[target]
            queue.append(target)
    if goal not in seen:
        return None
    return bound


def _search(
    graph: CompiledGraph,
    start: int,
    goal: int,
    prune: bool,
    deadline: float | None,
) -> tuple[int, list[int], list[Edge]] | None:
    """
    Backtracking search with an explicit stack.

    Each stack frame is the index of the next edge to try out of the node at
    the same depth of `path`. visited is set when a frame is pushed and
    cleared when it is popped, so it always holds exactly the current path.
    """
    visited = [False] * len(graph)
    visited[start] = True
    path = [start]
    taken: list[Edge] = []
    cursors = [0]
    total = 0
    frames = 1

    best = -1
    best_path: list[int] = []
    best_edges: list[Edge] = []

    while cursors:
        node = path[-1]
        i = cursors[-1]
        outgoing = graph.adjacency[node]

        if i == len(outgoing):
            cursors.pop()
            path.pop()
            visited[node] = False
            if taken:
                total -= taken.pop().length
            continue

        cursors[-1] = i + 1
        target, length, edge = outgoing[i]
        if visited[target]:
            continue

        reached = total + length
        if target == goal:
            if reached > best:
                best = reached
                best_path = path + [target]
                best_edges = taken + [edge]
            continue

        if prune:
            bound = _remaining_bound(graph, target, goal, visited)
            if bound is None or reached + bound <= best:
                continue

        if deadline is not None and time.monotonic() > deadline:
            raise SearchTimeout(
                f"Longest path search timed out after {frames} frames "
                f"(best so far: {best if best >= 0 else 'none'})"
            )

        visited[target] = True
        path.append(target)
        taken.append(edge)
        cursors.append(0)
        total = reached
        frames += 1

    logger.debug("_search: %d frames pushed, prune=%s", frames, prune)
    if best < 0:
        return None
    return (best, best_path, best_edges)


def longest_route(
    index: EdgeIndex,
    entrance: Coord,
    exit: Coord,
    *,
    prune: bool = True,
    longest_first: bool = True,
    time_limit: float | None = None,
) -> Route | PathNotFound:
    """
    Find the longest simple path from entrance to exit.

    Args:
        index: Contracted junction graph, treated as read-only
        entrance: Start coordinate
        exit: Goal coordinate
        prune: Use reachability and upper-bound pruning
        longest_first: Try longer edges first out of each node
        time_limit: Seconds allowed before SearchTimeout is raised

    Returns:
        The longest Route, or PathNotFound if no simple path exists

    Raises:
        SearchTimeout: If time_limit elapses during the search
    """
    if entrance == exit:
        return Route(0, (entrance,), ())

    graph = CompiledGraph(index, longest_first=longest_first)
    if entrance not in graph.ids or exit not in graph.ids:
        missing = "entrance" if entrance not in graph.ids else "exit"
        return PathNotFound(f"{missing} is not in the graph", f"graph has {len(graph)} nodes")

    deadline = None if time_limit is None else time.monotonic() + time_limit
    found = _search(graph, graph.ids[entrance], graph.ids[exit], prune, deadline)

    if found is None:
        logger.info("longest_route: no path over %d nodes", len(graph))
        return PathNotFound("no simple path", f"{entrance} -> {exit} over {len(graph)} nodes")

    length, path, edges = found
    logger.info("longest_route: length %d through %d nodes", length, len(path))
    return Route(length, tuple(graph.coords[i] for i in path), tuple(edges))


def longest_path(
    index: EdgeIndex,
    entrance: Coord,
    exit: Coord,
    *,
    prune: bool = True,
    longest_first: bool = True,
    time_limit: float | None = None,
) -> int | PathNotFound:
    """Length of the longest simple path from entrance to exit. See longest_route."""
    result = longest_route(
        index,
        entrance,
        exit,
        prune=prune,
        longest_first=longest_first,
        time_limit=time_limit,
    )
    if isinstance(result, PathNotFound):
        return result
    return result.length
