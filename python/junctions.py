"""
Junction graph construction.

Two ways of turning a Maze into an EdgeIndex:
1. build_junction_graph walks every corridor out of every junction
2. build_primitive_graph emits one length-1 edge per allowed step, to be
   simplified by contraction.contract
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from maze_parser import can_move, degree, open_directions, step
from maze_types import (
    Coord,
    Direction,
    Edge,
    Forest,
    GraphConstructionError,
    Maze,
    RuleSet,
)

logger = logging.getLogger(__name__)


def edge_sort_key(edge: Edge) -> tuple[Coord, Coord, str, str, int]:
    """Total order on edges, for reproducible iteration over edge sets."""
    return (edge.start, edge.end, edge.start_dir.value, edge.end_dir.value, edge.length)


class EdgeIndex:
    """
    Directed edges indexed by start and by end coordinate.

    Every edge sits in exactly one starts bucket and one ends bucket.
    insert and remove are the only mutators, so the two maps stay in step.
    """

    def __init__(self, edges: Iterable[Edge] | None = None) -> None:
        self._starts: dict[Coord, set[Edge]] = {}
        self._ends: dict[Coord, set[Edge]] = {}
        for edge in edges or ():
            self.insert(edge)

    def insert(self, edge: Edge) -> None:
        self._starts.setdefault(edge.start, set()).add(edge)
        self._ends.setdefault(edge.end, set()).add(edge)

    def remove(self, edge: Edge) -> None:
        """Remove an edge from both buckets. Raises KeyError if absent."""
        self._remove_one(self._starts, edge.start, edge)
        self._remove_one(self._ends, edge.end, edge)

    @staticmethod
    def _remove_one(buckets: dict[Coord, set[Edge]], key: Coord, edge: Edge) -> None:
        bucket = buckets[key]
        bucket.remove(edge)
        if not bucket:
            del buckets[key]

    def starting_at(self, coord: Coord) -> frozenset[Edge]:
        return frozenset(self._starts.get(coord, ()))

    def ending_at(self, coord: Coord) -> frozenset[Edge]:
        return frozenset(self._ends.get(coord, ()))

    def coords(self) -> set[Coord]:
        """Every coordinate at which some edge starts or ends."""
        return set(self._starts) | set(self._ends)

    def edges(self) -> Iterator[Edge]:
        for coord in sorted(self._starts):
            yield from sorted(self._starts[coord], key=edge_sort_key)

    def copy(self) -> EdgeIndex:
        return EdgeIndex(list(self.edges()))

    def __contains__(self, edge: object) -> bool:
        return isinstance(edge, Edge) and edge in self._starts.get(edge.start, ())

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._starts.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EdgeIndex):
            return NotImplemented
        return set(self.edges()) == set(other.edges())

    def __repr__(self) -> str:
        return f"EdgeIndex({len(self)} edges, {len(self.coords())} coords)"


# =============================================================================
# Junction Walk
# =============================================================================


def junction_coords(maze: Maze) -> set[Coord]:
    """
    Graph nodes of a maze: every cell with three or more open neighbours,
    plus the entrance and exit.

    Dead ends (one open neighbour) are left out; no simple path from the
    entrance to the exit can pass through them.
    """
    nodes = {maze.entrance, maze.exit}
    for y, row in enumerate(maze.tiles):
        for x, tile in enumerate(row):
            if not isinstance(tile, Forest) and degree(maze, (x, y)) >= 3:
                nodes.add((x, y))
    return nodes


def _walk_corridor(
    maze: Maze,
    start: Coord,
    direction: Direction,
    nodes: set[Coord],
    rules: RuleSet,
) -> Edge | None:
    """
    Follow the corridor leaving start in direction until the next node.

    Returns None when the first step is not allowed, the corridor ends in a
    dead end, a slope blocks it, or it loops back to start.
    """
    current = can_move(maze, start, direction, rules)
    if current is None:
        return None
    arrived = direction
    length = 1

    while current not in nodes:
        ahead = [d for d in open_directions(maze, current) if d != arrived.opposite()]
        if len(ahead) != 1:
            # Dead end
            return None
        following = can_move(maze, current, ahead[0], rules)
        if following is None:
            return None
        current = following
        arrived = ahead[0]
        length += 1

    if current == start:
        return None
    return Edge(start, current, direction, arrived, length)


def build_junction_graph(maze: Maze, rules: RuleSet | None = None) -> EdgeIndex:
    """
    Build the junction graph by walking every corridor out of every node.

    A two-way corridor yields one edge in each direction; a corridor with a
    slope yields only the edge running downhill.

    Args:
        maze: The parsed maze
        rules: RuleSet governing slope traversal

    Returns:
        EdgeIndex over junction_coords(maze)

    Raises:
        GraphConstructionError: If the entrance or exit carries no edge
    """
    if rules is None:
        rules = RuleSet()

    nodes = junction_coords(maze)
    index = EdgeIndex()
    discarded = 0
    for node in sorted(nodes):
        for direction in Direction:
            edge = _walk_corridor(maze, node, direction, nodes, rules)
            if edge is None:
                if step(direction, node, maze) is not None:
                    discarded += 1
                continue
            index.insert(edge)

    logger.info(
        "build_junction_graph: %d nodes, %d edges (%d directions without an edge)",
        len(nodes),
        len(index),
        discarded,
    )
    check_terminals(maze, index)
    return index


def check_terminals(maze: Maze, index: EdgeIndex) -> None:
    """Raise GraphConstructionError if the entrance or exit has no edge at all."""
    if maze.entrance == maze.exit:
        return
    for label, coord in (("entrance", maze.entrance), ("exit", maze.exit)):
        if not index.starting_at(coord) and not index.ending_at(coord):
            raise GraphConstructionError(
                f"The {label} at {coord} is not connected to any junction\n"
                f"  Maze size: {maze.cols}x{maze.rows}"
            )


# =============================================================================
# Primitive Scan
# =============================================================================


def _scan_lines(maze: Maze) -> Iterator[tuple[Coord, Direction]]:
    """Starting cell and direction of every border-to-border scan line."""
    width, height = maze.size
    for y in range(height):
        yield ((width - 1, y), Direction.W)
        yield ((0, y), Direction.E)
    for x in range(width):
        yield ((x, height - 1), Direction.N)
        yield ((x, 0), Direction.S)


def build_primitive_graph(maze: Maze, rules: RuleSet | None = None) -> EdgeIndex:
    """
    One length-1 edge for every allowed single step in the maze.

    Each row and column is scanned from border to border in both directions.
    The result is meant to be simplified with contraction.contract.
    """
    if rules is None:
        rules = RuleSet()

    index = EdgeIndex()
    for origin, direction in _scan_lines(maze):
        current: Coord | None = origin
        while current is not None:
            following = can_move(maze, current, direction, rules)
            if following is not None:
                index.insert(Edge(current, following, direction, direction, 1))
            current = step(direction, current, maze)

    logger.info("build_primitive_graph: %d edges over %d cells", len(index), len(index.coords()))
    return index


def corridor_cells(maze: Maze, edge: Edge, rules: RuleSet | None = None) -> list[Coord]:
    """
    Cells of a junction-graph edge, from its start to its end inclusive.

    Raises:
        ValueError: If the walk does not retrace the edge
    """
    if rules is None:
        rules = RuleSet()

    cells = [edge.start]
    current: Coord | None = can_move(maze, edge.start, edge.start_dir, rules)
    arrived = edge.start_dir
    while current is not None and len(cells) < edge.length:
        cells.append(current)
        ahead = [d for d in open_directions(maze, current) if d != arrived.opposite()]
        if len(ahead) != 1:
            current = None
            break
        arrived = ahead[0]
        current = can_move(maze, current, arrived, rules)

    if current != edge.end:
        raise ValueError(
            f"Edge does not follow a corridor of the maze\n"
            f"  Edge: {edge.start} -> {edge.end}, length {edge.length}\n"
            f"  Walk stopped after {len(cells)} cells"
        )
    cells.append(current)
    return cells
