"""
Graph contraction: fuse chains of edges through pass-through coordinates.

Works on any EdgeIndex built from grid moves. Coordinates in `protected`
(entrance, exit, junctions) are never simplified. Dead edges are only
removed when asked for with `prune_dead_ends`; by default an edge is never
deleted except through a fuse.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable

from junctions import EdgeIndex, edge_sort_key
from maze_types import Coord, Edge

logger = logging.getLogger(__name__)


@dataclass
class ContractionStats:
    """Counts of the changes made by one contract() call."""

    fused: int = 0
    pruned: int = 0


def continues(head: Edge, tail: Edge) -> bool:
    """Whether tail may follow head, i.e. tail does not turn straight back."""
    return tail.start_dir != head.end_dir.opposite()


def fuse(index: EdgeIndex, head: Edge, tail: Edge) -> Edge | None:
    """
    Replace head and tail with a single edge running from head.start to tail.end.

    A fuse that would close a loop back onto head.start removes both edges
    and inserts nothing, since no simple path can use the loop.

    Returns:
        The merged edge, or None if it was a loop
    """
    merged = Edge(
        start=head.start,
        end=tail.end,
        start_dir=head.start_dir,
        end_dir=tail.end_dir,
        length=head.length + tail.length,
    )
    index.remove(head)
    index.remove(tail)
    if merged.start == merged.end:
        logger.debug("dropping loop %s + %s at %s", head, tail, merged.start)
        return None
    index.insert(merged)
    logger.debug("merging %s and %s into %s", head, tail, merged)
    return merged


def _fusable_pair(heads: list[Edge], tails: list[Edge]) -> tuple[Edge, Edge] | None:
    """
    An incoming/outgoing pair with no ambiguity: head has exactly one
    continuation and that continuation has exactly one predecessor.
    """
    for head in heads:
        options = [tail for tail in tails if continues(head, tail)]
        if len(options) != 1 or options[0] == head:
            continue
        tail = options[0]
        predecessors = [h for h in heads if continues(h, tail)]
        if len(predecessors) == 1:
            return (head, tail)
    return None


def _simplify_at(
    index: EdgeIndex,
    coord: Coord,
    stats: ContractionStats,
    prune_dead_ends: bool,
) -> set[Coord]:
    """
    Fuse pairs (and prune dead edges, if asked) at one coordinate until
    nothing changes.

    Returns the other coordinates whose edges changed.
    """
    touched: set[Coord] = set()
    while True:
        heads = sorted(index.ending_at(coord), key=edge_sort_key)
        tails = sorted(index.starting_at(coord), key=edge_sort_key)

        if prune_dead_ends:
            # Arriving with no way on, or leaving with no way in
            dead = {h for h in heads if not any(continues(h, t) for t in tails)}
            dead |= {t for t in tails if not any(continues(h, t) for h in heads)}
        else:
            dead = set()
        if dead:
            for edge in sorted(dead, key=edge_sort_key):
                index.remove(edge)
                stats.pruned += 1
                touched.add(edge.start if edge.end == coord else edge.end)
                logger.debug("pruned dead edge %s", edge)
            continue

        pair = _fusable_pair(heads, tails)
        if pair is None:
            break
        head, tail = pair
        fuse(index, head, tail)
        stats.fused += 1
        touched.update((head.start, tail.end))

    touched.discard(coord)
    return touched


def contract(
    index: EdgeIndex,
    protected: Iterable[Coord] = (),
    *,
    prune_dead_ends: bool = False,
) -> ContractionStats:
    """
    Contract an EdgeIndex in place until no unprotected coordinate can be
    simplified.

    A work queue is seeded with every unprotected coordinate holding edges;
    coordinates whose edges change are queued again.

    Args:
        index: The graph to simplify, modified in place
        protected: Coordinates that must stay graph nodes
        prune_dead_ends: Also remove edges that arrive with no way on or leave
            with no way in. Only safe when every entrance, exit and junction
            is protected, since a terminal looks like a dead end.

    Returns:
        ContractionStats with the number of fuse operations and pruned edges
    """
    keep = frozenset(protected)
    queue = deque(sorted(c for c in index.coords() if c not in keep))
    queued = set(queue)
    stats = ContractionStats()

    while queue:
        coord = queue.popleft()
        queued.discard(coord)
        for other in sorted(_simplify_at(index, coord, stats, prune_dead_ends)):
            if other not in keep and other not in queued:
                queue.append(other)
                queued.add(other)

    logger.info(
        "contract: %d fuses, %d pruned edges, %d edges over %d coords remain",
        stats.fused,
        stats.pruned,
        len(index),
        len(index.coords()),
    )
    return stats
