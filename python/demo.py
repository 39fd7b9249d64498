#!/usr/bin/env python3
"""
Console front end: print the longest hike for both slope rules.

Usage:
    python demo.py                      # the 23x23 example maze
    python demo.py loop --render        # a named layout, drawn with its route
    python demo.py path/to/maze.txt -v  # a maze file, with INFO logging
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_maze
from hike import GraphStrategy, plan_hike
from maze_layouts import LAYOUTS
from maze_types import (
    GraphConstructionError,
    MazeParseError,
    PathNotFound,
    RuleSet,
    SearchTimeout,
    SlopeRule,
)

VARIANTS = (
    ("part 1", RuleSet(SlopeRule.ENFORCED)),
    ("part 2", RuleSet(SlopeRule.IGNORED)),
)


def load_maze_text(source: str) -> str:
    """A named layout, or else the contents of the file at source."""
    if source in LAYOUTS:
        return LAYOUTS[source]
    return Path(source).read_text()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Longest hike through a slope maze.")
    parser.add_argument(
        "maze",
        nargs="?",
        default="example",
        help=f"Maze file, or one of: {', '.join(sorted(LAYOUTS))}",
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in GraphStrategy],
        default=GraphStrategy.JUNCTION_WALK.value,
        help="How the junction graph is built",
    )
    parser.add_argument("--no-prune", action="store_true", help="Search without pruning")
    parser.add_argument("--time-limit", type=float, default=None, help="Seconds per search")
    parser.add_argument("--render", action="store_true", help="Draw the maze with its route")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    console = Console()
    try:
        text = load_maze_text(args.maze)
    except OSError as e:
        console.print(Panel(str(e), title=f"{args.maze} - {type(e).__name__}", border_style="red"))
        return 1
    strategy = GraphStrategy(args.strategy)

    for label, rules in VARIANTS:
        try:
            hike = plan_hike(
                text,
                rules,
                strategy=strategy,
                prune=not args.no_prune,
                time_limit=args.time_limit,
            )
        except (MazeParseError, GraphConstructionError, SearchTimeout) as e:
            console.print(Panel(str(e), title=f"{label} - {type(e).__name__}", border_style="red"))
            return 1

        if isinstance(hike.result, PathNotFound):
            console.print(f"[bold]{label}:[/bold] no path ({hike.result.reason})")
            continue

        console.print(f"[bold]{label}:[/bold] {hike.result.length}")
        if args.render:
            drawing = render_maze(hike.maze, hike.result, hike.graph, rules)
            console.print(
                Panel(
                    Text.from_ansi(drawing),
                    title=f"{label} - slopes {rules.slopes.value}",
                    border_style="green",
                    expand=False,
                )
            )

    return 0


if __name__ == "__main__":
    sys.exit(main())
