"""
Shared type definitions for the hike solver.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """Cardinal direction for traversal."""

    N = "N"  # Up (decreasing y)
    S = "S"  # Down (increasing y)
    E = "E"  # Right (increasing x)
    W = "W"  # Left (decreasing x)

    @property
    def delta(self) -> tuple[int, int]:
        """(dx, dy) for one step in this direction."""
        return _DELTAS[self]

    def clockwise(self) -> Direction:
        return _CLOCKWISE[self]

    def opposite(self) -> Direction:
        return self.clockwise().clockwise()


_DELTAS = {
    Direction.N: (0, -1),
    Direction.S: (0, 1),
    Direction.E: (1, 0),
    Direction.W: (-1, 0),
}

_CLOCKWISE = {
    Direction.N: Direction.E,
    Direction.E: Direction.S,
    Direction.S: Direction.W,
    Direction.W: Direction.N,
}


class SlopeRule(Enum):
    """Whether slope tiles force one-way movement."""

    ENFORCED = "enforced"  # Slope(d) can only be crossed moving in d
    IGNORED = "ignored"  # Slopes behave as plain path


@dataclass(frozen=True)
class RuleSet:
    """Rules governing tile traversability."""

    slopes: SlopeRule = SlopeRule.ENFORCED


# =============================================================================
# Tiles and Maze
# =============================================================================


@dataclass(frozen=True)
class Path:
    """A walkable tile."""

    pass


@dataclass(frozen=True)
class Forest:
    """An impassable tile."""

    pass


@dataclass(frozen=True)
class Slope:
    """A one-way tile, only crossable moving in its direction."""

    direction: Direction


Tile = Path | Forest | Slope

# (x, y), x = column, y = row
Coord = tuple[int, int]


@dataclass(frozen=True)
class Maze:
    """An immutable tile grid with a single entrance and exit."""

    tiles: tuple[tuple[Tile, ...], ...]
    entrance: Coord
    exit: Coord

    @property
    def rows(self) -> int:
        return len(self.tiles)

    @property
    def cols(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    @property
    def size(self) -> tuple[int, int]:
        """(width, height)"""
        return (self.cols, self.rows)

    def __getitem__(self, coord: Coord) -> Tile:
        x, y = coord
        return self.tiles[y][x]


# =============================================================================
# Graph Types
# =============================================================================


@dataclass(frozen=True)
class Edge:
    """
    A directed corridor between two graph nodes.

    start_dir is the direction of the first step out of start, end_dir the
    direction of the last step into end. length counts traversed cells.
    """

    start: Coord
    end: Coord
    start_dir: Direction
    end_dir: Direction
    length: int

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError(f"Edge length must be positive, got {self.length}")


@dataclass(frozen=True)
class PathNotFound:
    """Result returned when no simple path joins entrance and exit."""

    reason: str
    details: str | None = None


# =============================================================================
# Errors
# =============================================================================


class MazeParseError(ValueError):
    """Malformed maze text: ragged rows, bad characters, missing openings."""


class GraphConstructionError(ValueError):
    """Entrance or exit is cut off from the junction graph."""


class SearchTimeout(TimeoutError):
    """The longest-path search ran past its time limit."""
