"""
ASCII rendering for mazes.

Draws the maze one character per tile, with graph nodes and the cells of a
route overlaid, coloured with simple_chalk.
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from junctions import EdgeIndex, corridor_cells
from longest_path import Route
from maze_parser import SLOPE_CHARS
from maze_types import Coord, Forest, Maze, RuleSet, Slope, Tile

logger = logging.getLogger(__name__)

SLOPE_GLYPHS = {direction: char for char, direction in SLOPE_CHARS.items()}

ROUTE_GLYPH = "O"
NODE_GLYPH = "+"
ENTRANCE_GLYPH = "S"
EXIT_GLYPH = "E"


def tile_glyph(tile: Tile) -> str:
    if isinstance(tile, Forest):
        return "#"
    if isinstance(tile, Slope):
        return SLOPE_GLYPHS[tile.direction]
    return "."


def route_cells(maze: Maze, route: Route, rules: RuleSet | None = None) -> set[Coord]:
    """Every cell walked by a route, junctions included."""
    cells: set[Coord] = set(route.nodes)
    for edge in route.edges:
        cells.update(corridor_cells(maze, edge, rules))
    return cells


def render_maze(
    maze: Maze,
    route: Route | None = None,
    graph: EdgeIndex | None = None,
    rules: RuleSet | None = None,
    color: bool = True,
) -> str:
    """
    Render a maze to a string.

    Args:
        maze: The maze to draw
        route: Optional route whose cells are drawn as 'O'
        graph: Optional junction graph whose nodes are drawn as '+'
        rules: RuleSet the route was found under (needed to retrace corridors)
        color: Emit ANSI colours

    Returns:
        One line per maze row
    """
    walked = route_cells(maze, route, rules) if route is not None else set()
    nodes = graph.coords() if graph is not None else set()

    if route is not None:
        logger.info("render_maze: route of length %d covers %d cells", route.length, len(walked))

    def paint(style: Callable[[str], str], text: str) -> str:
        return style(text) if color else text

    lines = []
    for y, row in enumerate(maze.tiles):
        line = []
        for x, tile in enumerate(row):
            coord = (x, y)
            if coord == maze.entrance:
                line.append(paint(chalk.yellowBright, ENTRANCE_GLYPH))
            elif coord == maze.exit:
                line.append(paint(chalk.yellowBright, EXIT_GLYPH))
            elif coord in walked:
                line.append(paint(chalk.red, ROUTE_GLYPH))
            elif coord in nodes:
                line.append(paint(chalk.cyan, NODE_GLYPH))
            elif isinstance(tile, Forest):
                line.append(paint(chalk.green, tile_glyph(tile)))
            elif isinstance(tile, Slope):
                line.append(paint(chalk.yellow, tile_glyph(tile)))
            else:
                line.append(tile_glyph(tile))
        lines.append("".join(line))
    return "\n".join(lines)
