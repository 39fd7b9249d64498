"""
Longest hike through a slope maze.
Pipeline: parse maze -> build junction graph -> (contract) -> longest path search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from contraction import contract
from junctions import (
    EdgeIndex,
    build_junction_graph,
    build_primitive_graph,
    check_terminals,
    junction_coords,
)
from longest_path import Route, longest_route
from maze_parser import parse_maze
from maze_types import Maze, PathNotFound, RuleSet, SlopeRule

logger = logging.getLogger(__name__)


class GraphStrategy(Enum):
    """How the junction graph is obtained from the maze."""

    JUNCTION_WALK = "junction_walk"  # Walk corridors out of each junction
    CONTRACTION = "contraction"  # Contract a one-step-per-edge scan


@dataclass(frozen=True)
class Hike:
    """Everything computed for one maze under one rule set."""

    maze: Maze
    rules: RuleSet
    graph: EdgeIndex
    result: Route | PathNotFound

    @property
    def length(self) -> int | None:
        return self.result.length if isinstance(self.result, Route) else None


def build_graph(
    maze: Maze,
    rules: RuleSet,
    strategy: GraphStrategy = GraphStrategy.JUNCTION_WALK,
) -> EdgeIndex:
    """
    Junction graph of a maze, built with the given strategy.

    Both strategies yield the same graph.

    Raises:
        GraphConstructionError: If the entrance or exit carries no edge
    """
    if strategy == GraphStrategy.JUNCTION_WALK:
        return build_junction_graph(maze, rules)

    graph = build_primitive_graph(maze, rules)
    contract(graph, protected=junction_coords(maze), prune_dead_ends=True)
    check_terminals(maze, graph)
    return graph


def plan_hike(
    text: str,
    rules: RuleSet | None = None,
    strategy: GraphStrategy = GraphStrategy.JUNCTION_WALK,
    prune: bool = True,
    time_limit: float | None = None,
) -> Hike:
    """
    Run the whole pipeline on maze text.

    Raises:
        MazeParseError: If the text is not a valid maze
        GraphConstructionError: If the entrance or exit is cut off
        SearchTimeout: If time_limit elapses during the search
    """
    if rules is None:
        rules = RuleSet()

    maze = parse_maze(text, rules)
    graph = build_graph(maze, rules, strategy)
    result = longest_route(graph, maze.entrance, maze.exit, prune=prune, time_limit=time_limit)

    logger.info(
        "plan_hike: slopes %s, %s, %d edges -> %s",
        rules.slopes.value,
        strategy.value,
        len(graph),
        result.length if isinstance(result, Route) else result.reason,
    )
    return Hike(maze, rules, graph, result)


def solve(
    text: str,
    rules: RuleSet | None = None,
    strategy: GraphStrategy = GraphStrategy.JUNCTION_WALK,
) -> int | PathNotFound:
    """Longest hike length for maze text, or PathNotFound."""
    hike = plan_hike(text, rules, strategy)
    if isinstance(hike.result, PathNotFound):
        return hike.result
    return hike.result.length


def solve_both(text: str) -> tuple[int | PathNotFound, int | PathNotFound]:
    """Answers with slopes enforced and with slopes ignored."""
    return (
        solve(text, RuleSet(SlopeRule.ENFORCED)),
        solve(text, RuleSet(SlopeRule.IGNORED)),
    )
