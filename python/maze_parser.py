"""
Maze parsing and grid movement primitives.

Text format:
- One row per line, all rows the same width
- '#' is forest, '.' is path, '^' 'v' '<' '>' are slopes
- Exactly one opening in the top row (entrance) and in the bottom row (exit)
"""

from __future__ import annotations

from maze_types import (
    Coord,
    Direction,
    Forest,
    Maze,
    MazeParseError,
    Path,
    RuleSet,
    Slope,
    SlopeRule,
    Tile,
)

__all__ = ["parse_maze", "step", "traversable", "can_move", "degree", "open_directions"]

SLOPE_CHARS = {
    "^": Direction.N,
    "v": Direction.S,
    ">": Direction.E,
    "<": Direction.W,
}


def _parse_tile(char: str, rules: RuleSet) -> Tile | None:
    """Map one character to a tile, or None if the character is invalid."""
    if char == "#":
        return Forest()
    if rules.slopes == SlopeRule.IGNORED:
        return Path()
    if char == ".":
        return Path()
    if char in SLOPE_CHARS:
        return Slope(SLOPE_CHARS[char])
    return None


def _find_opening(row: tuple[Tile, ...], row_idx: int, label: str) -> Coord:
    openings = [x for x, tile in enumerate(row) if not isinstance(tile, Forest)]
    if len(openings) != 1:
        found = "none" if not openings else f"columns {openings}"
        raise MazeParseError(
            f"Expected exactly one {label} opening in row {row_idx}\n"
            f"  Found: {found}"
        )
    return (openings[0], row_idx)


def parse_maze(text: str, rules: RuleSet | None = None) -> Maze:
    """
    Parse maze text into a Maze.

    Under SlopeRule.IGNORED every character other than '#' becomes Path.

    Args:
        text: Maze rows separated by newlines; surrounding blank lines are ignored
        rules: RuleSet selecting slope handling (defaults to enforced slopes)

    Returns:
        Maze with entrance in the top row and exit in the bottom row

    Raises:
        MazeParseError: On an empty maze, ragged rows, invalid characters, or
            a top/bottom row without exactly one opening
    """
    if rules is None:
        rules = RuleSet()

    row_strings = text.strip("\n").splitlines()
    if not row_strings or not any(row_strings):
        raise MazeParseError("Empty maze")

    cols = len(row_strings[0])
    mismatched = [(i, len(row)) for i, row in enumerate(row_strings) if len(row) != cols]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths in maze\n"
            f"  Expected: {cols} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of cells"
        raise MazeParseError(error_msg)

    rows: list[tuple[Tile, ...]] = []
    for row_idx, row_str in enumerate(row_strings):
        tiles: list[Tile] = []
        for col_idx, char in enumerate(row_str):
            tile = _parse_tile(char, rules)
            if tile is None:
                raise MazeParseError(
                    f"Invalid character '{char}' in maze\n"
                    f"  Row {row_idx}, column {col_idx}\n"
                    f"  Valid characters: '.', '#', '^', 'v', '<', '>'"
                )
            tiles.append(tile)
        rows.append(tuple(tiles))

    entrance = _find_opening(rows[0], 0, "entrance")
    exit_ = _find_opening(rows[-1], len(rows) - 1, "exit")

    return Maze(tuple(rows), entrance, exit_)


# =============================================================================
# Movement
# =============================================================================


def step(direction: Direction, coord: Coord, maze: Maze) -> Coord | None:
    """The neighbour of coord in direction, or None if it falls off the maze."""
    dx, dy = direction.delta
    x, y = coord[0] + dx, coord[1] + dy
    if 0 <= x < maze.cols and 0 <= y < maze.rows:
        return (x, y)
    return None


def traversable(tile: Tile, direction: Direction, rules: RuleSet | None = None) -> bool:
    """Whether tile may be crossed while moving in direction."""
    if isinstance(tile, Path):
        return True
    if isinstance(tile, Forest):
        return False
    if rules is not None and rules.slopes == SlopeRule.IGNORED:
        return True
    return tile.direction == direction


def can_move(maze: Maze, coord: Coord, direction: Direction, rules: RuleSet) -> Coord | None:
    """
    The cell reached by moving one step from coord, or None if the move is
    not allowed. Both the cell left and the cell entered must be traversable
    in the direction of travel.
    """
    target = step(direction, coord, maze)
    if target is None:
        return None
    if not traversable(maze[coord], direction, rules):
        return None
    if not traversable(maze[target], direction, rules):
        return None
    return target


def open_directions(maze: Maze, coord: Coord) -> list[Direction]:
    """Directions leading to an in-bounds non-forest neighbour, ignoring slopes."""
    result = []
    for direction in Direction:
        neighbour = step(direction, coord, maze)
        if neighbour is not None and not isinstance(maze[neighbour], Forest):
            result.append(direction)
    return result


def degree(maze: Maze, coord: Coord) -> int:
    """
    Structural degree of a cell: its count of non-forest neighbours.

    Slopes are counted whatever their direction, so the set of junctions
    does not depend on the slope rule.
    """
    return len(open_directions(maze, coord))
