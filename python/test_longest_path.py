"""Tests for the longest simple path search."""

import random

import pytest

from junctions import EdgeIndex, build_junction_graph
from longest_path import CompiledGraph, Route, longest_path, longest_route
from maze_layouts import EXAMPLE, LOOP, ONE_WAY_LOOP
from maze_parser import parse_maze
from maze_types import (
    Coord,
    Direction,
    Edge,
    PathNotFound,
    RuleSet,
    SearchTimeout,
    SlopeRule,
)

ENFORCED = RuleSet(SlopeRule.ENFORCED)
IGNORED = RuleSet(SlopeRule.IGNORED)


def edge(start: int, end: int, length: int) -> Edge:
    """An edge between nodes laid out along row 0; directions are irrelevant to the search."""
    return Edge((start, 0), (end, 0), Direction.E, Direction.E, length)


def random_graph(rng: random.Random, nodes: int, density: float) -> EdgeIndex:
    edges = [
        edge(a, b, rng.randint(1, 20))
        for a in range(nodes)
        for b in range(nodes)
        if a != b and rng.random() < density
    ]
    return EdgeIndex(edges)


def brute_force(index: EdgeIndex, start: Coord, goal: Coord) -> int | None:
    """Plain recursive enumeration of simple paths."""
    best: int | None = None

    def walk(node: Coord, total: int, seen: set[Coord]) -> None:
        nonlocal best
        if node == goal:
            best = total if best is None else max(best, total)
            return
        for e in index.starting_at(node):
            if e.end not in seen:
                seen.add(e.end)
                walk(e.end, total + e.length, seen)
                seen.remove(e.end)

    walk(start, 0, {start})
    return best


# =============================================================================
# Test Compiled Graph
# =============================================================================


class TestCompiledGraph:
    """Tests for the dense search graph."""

    def test_ids_and_adjacency(self) -> None:
        """Each coordinate gets an id; edges are ordered longest first."""
        index = EdgeIndex([edge(0, 1, 2), edge(0, 2, 7), edge(1, 2, 3)])
        graph = CompiledGraph(index)

        assert len(graph) == 3
        start = graph.ids[(0, 0)]
        assert [length for _, length, _ in graph.adjacency[start]] == [7, 2]
        assert graph.max_in[graph.ids[(2, 0)]] == 7

    def test_shortest_first(self) -> None:
        """longest_first=False reverses the edge order."""
        index = EdgeIndex([edge(0, 1, 2), edge(0, 2, 7)])
        graph = CompiledGraph(index, longest_first=False)

        assert [length for _, length, _ in graph.adjacency[graph.ids[(0, 0)]]] == [2, 7]


# =============================================================================
# Test Search
# =============================================================================


class TestLongestPath:
    """Tests for longest_path and longest_route."""

    @pytest.mark.parametrize("prune", [True, False])
    def test_example_enforced(self, prune: bool) -> None:
        """The example maze with slopes enforced: 94 steps."""
        maze = parse_maze(EXAMPLE, ENFORCED)
        graph = build_junction_graph(maze, ENFORCED)

        assert longest_path(graph, maze.entrance, maze.exit, prune=prune) == 94

    @pytest.mark.parametrize("prune", [True, False])
    def test_example_ignored(self, prune: bool) -> None:
        """The example maze with slopes ignored: 154 steps."""
        maze = parse_maze(EXAMPLE, IGNORED)
        graph = build_junction_graph(maze, IGNORED)

        assert longest_path(graph, maze.entrance, maze.exit, prune=prune) == 154

    def test_route_is_simple_and_consistent(self) -> None:
        """The reported route starts at the entrance, ends at the exit, and adds up."""
        maze = parse_maze(EXAMPLE, IGNORED)
        graph = build_junction_graph(maze, IGNORED)

        route = longest_route(graph, maze.entrance, maze.exit)

        assert isinstance(route, Route)
        assert route.nodes[0] == maze.entrance
        assert route.nodes[-1] == maze.exit
        assert len(set(route.nodes)) == len(route.nodes)
        assert sum(e.length for e in route.edges) == route.length
        assert [e.start for e in route.edges] == list(route.nodes[:-1])
        assert [e.end for e in route.edges] == list(route.nodes[1:])
        assert all(e in graph for e in route.edges)

    def test_loop_takes_longer_corridor(self) -> None:
        """Of two corridors the search picks the longer one."""
        maze = parse_maze(LOOP)
        graph = build_junction_graph(maze)

        route = longest_route(graph, maze.entrance, maze.exit)

        assert isinstance(route, Route)
        assert route.length == 10
        assert route.nodes == ((1, 0), (1, 1), (3, 3), (3, 4))

    def test_one_way_forces_shorter_corridor(self) -> None:
        """An uphill slope on the long corridor leaves only the short one."""
        maze = parse_maze(ONE_WAY_LOOP, ENFORCED)
        graph = build_junction_graph(maze, ENFORCED)

        assert longest_path(graph, maze.entrance, maze.exit) == 6

    @pytest.mark.parametrize("rules", [ENFORCED, IGNORED])
    def test_exploration_order_does_not_matter(self, rules: RuleSet) -> None:
        """Longest-first and shortest-first exploration agree."""
        maze = parse_maze(EXAMPLE, rules)
        graph = build_junction_graph(maze, rules)

        first = longest_path(graph, maze.entrance, maze.exit, longest_first=True)
        second = longest_path(graph, maze.entrance, maze.exit, longest_first=False)
        again = longest_path(graph, maze.entrance, maze.exit, longest_first=True)

        assert first == second == again

    def test_does_not_modify_graph(self) -> None:
        """The search treats the graph as read-only."""
        maze = parse_maze(EXAMPLE, IGNORED)
        graph = build_junction_graph(maze, IGNORED)
        snapshot = graph.copy()

        longest_path(graph, maze.entrance, maze.exit)

        assert graph == snapshot


class TestBoundaries:
    """Tests for degenerate and unreachable cases."""

    def test_entrance_is_exit(self) -> None:
        """A coinciding entrance and exit give length 0."""
        route = longest_route(EdgeIndex(), (1, 0), (1, 0))
        assert route == Route(0, ((1, 0),), ())

    def test_no_path(self) -> None:
        """Edges only pointing back at the entrance give PathNotFound, not 0."""
        index = EdgeIndex([edge(1, 0, 4)])
        result = longest_path(index, (0, 0), (1, 0))

        assert isinstance(result, PathNotFound)
        assert result.reason == "no simple path"

    def test_disconnected_components(self) -> None:
        """Entrance and exit in separate components give PathNotFound."""
        index = EdgeIndex([edge(0, 1, 1), edge(1, 0, 1), edge(2, 3, 1), edge(3, 2, 1)])
        assert isinstance(longest_path(index, (0, 0), (3, 0)), PathNotFound)

    def test_entrance_missing_from_graph(self) -> None:
        """An entrance with no edges gives PathNotFound."""
        index = EdgeIndex([edge(1, 2, 1)])
        result = longest_path(index, (0, 0), (2, 0))

        assert isinstance(result, PathNotFound)
        assert "entrance" in result.reason

    def test_time_limit(self) -> None:
        """An already expired time limit stops the search."""
        maze = parse_maze(EXAMPLE, IGNORED)
        graph = build_junction_graph(maze, IGNORED)

        with pytest.raises(SearchTimeout, match="timed out"):
            longest_path(graph, maze.entrance, maze.exit, time_limit=-1.0)

    def test_generous_time_limit(self) -> None:
        """A generous time limit does not change the answer."""
        maze = parse_maze(EXAMPLE, ENFORCED)
        graph = build_junction_graph(maze, ENFORCED)

        assert longest_path(graph, maze.entrance, maze.exit, time_limit=60.0) == 94


class TestPruningEquivalence:
    """Pruning must never change the maximum."""

    @pytest.mark.parametrize("seed", range(40))
    def test_random_graphs(self, seed: int) -> None:
        """Pruned, unpruned and brute-force searches agree on random graphs."""
        rng = random.Random(seed)
        index = random_graph(rng, nodes=rng.randint(2, 8), density=rng.uniform(0.2, 0.7))
        start, goal = (0, 0), (1, 0)

        expected = brute_force(index, start, goal)
        pruned = longest_path(index, start, goal, prune=True)
        unpruned = longest_path(index, start, goal, prune=False)

        if expected is None:
            assert isinstance(pruned, PathNotFound)
            assert isinstance(unpruned, PathNotFound)
        else:
            assert pruned == unpruned == expected
