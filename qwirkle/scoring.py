"""Placement scoring for Qwirkle."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .board import MAX_LINE_LENGTH, Axis, Board, Placement
from .tiles import Tile

QWIRKLE_BONUS = 6


@dataclass(frozen=True)
class ScoreResult:
    points: int
    qwirkles: int = 0
    affected_lines: Dict[Axis, Tuple[Tile, ...]] = field(default_factory=dict)


def line_points(length: int) -> int:
    """Points for one line of ``length`` tiles (the placed tile included)."""
    if length <= 1:
        return 0
    if length == MAX_LINE_LENGTH:
        return length + QWIRKLE_BONUS
    return length


def score_placement(board: Board, placements: Iterable[Placement]) -> ScoreResult:
    """Score ``placements`` as if applied to ``board``.

    Each placed tile is scored on its own: a line shared by several tiles of
    the same move is counted once per tile, bonus included.
    """
    entries = list(placements)
    pending = [(pos, tile) for pos, tile in entries if board.tile_at(pos) != tile]
    scratch = board.with_tiles(pending)

    points = 0
    qwirkles = 0
    touched: Dict[Axis, List[Tile]] = {Axis.HORIZONTAL: [], Axis.VERTICAL: []}

    for pos, _tile in entries:
        lengths = []
        for axis in Axis:
            line = scratch.line(pos, axis)
            length = len(line) + 1
            lengths.append(length)
            points += line_points(length)
            if length == MAX_LINE_LENGTH:
                qwirkles += 1
            for neighbor in line:
                if neighbor not in touched[axis]:
                    touched[axis].append(neighbor)
        if all(length == 1 for length in lengths):
            points += 1

    return ScoreResult(
        points=points,
        qwirkles=qwirkles,
        affected_lines={axis: tuple(tiles) for axis, tiles in touched.items()},
    )
