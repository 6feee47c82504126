"""Legal move generation for Qwirkle."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from .board import Axis, Board, Placement, Position
from .errors import RuleViolation
from .moves import Move, MoveKind
from .scoring import score_placement
from .tiles import Tile, common_attribute, has_duplicate_faces
from .validation import MAX_MOVE_TILES, check_tile_against_line, validate_move_set, validate_single

# Run directions tried from every candidate position: +x, -x, +y, -y.
DIRECTIONS: Tuple[Tuple[int, int, Axis], ...] = (
    (1, 0, Axis.HORIZONTAL),
    (-1, 0, Axis.HORIZONTAL),
    (0, 1, Axis.VERTICAL),
    (0, -1, Axis.VERTICAL),
)

PERPENDICULAR = {Axis.HORIZONTAL: Axis.VERTICAL, Axis.VERTICAL: Axis.HORIZONTAL}


@dataclass(frozen=True)
class RankedMove:
    move: Move
    points: int
    affected_lines: Dict[Axis, Tuple[Tile, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class AvailableMoves:
    """Ranked placements, or the fallback move kinds when none exist."""

    has_moves: bool
    moves: Tuple[RankedMove, ...] = ()
    fallback: Tuple[MoveKind, ...] = ()

    def best(self) -> RankedMove | None:
        return self.moves[0] if self.moves else None


NO_TILES = AvailableMoves(has_moves=False, fallback=(MoveKind.PASS,))
NO_PLACEMENTS = AvailableMoves(has_moves=False, fallback=(MoveKind.EXCHANGE, MoveKind.PASS))


def tile_combinations(hand: Sequence[Tile]) -> List[Tuple[Tile, ...]]:
    """All size-2..6 subsets of ``hand`` (in hand order) that could form one line.

    A subset qualifies when it has no repeated face and every tile shares
    the same colour or the same shape.
    """
    tiles = list(hand)
    result: List[Tuple[Tile, ...]] = []
    for size in range(2, min(MAX_MOVE_TILES, len(tiles)) + 1):
        for indices in combinations(range(len(tiles)), size):
            combo = tuple(tiles[index] for index in indices)
            if has_duplicate_faces(combo):
                continue
            if common_attribute(combo) is None:
                continue
            result.append(combo)
    return result


def lay_run(combo: Sequence[Tile], start: Position, dx: int, dy: int) -> Tuple[Placement, ...]:
    x, y = start
    return tuple(((x + dx * offset, y + dy * offset), tile) for offset, tile in enumerate(combo))


class _CrossLineCache:
    """Memo of single-tile checks against the line crossing a run.

    A tile laid in a straight run only meets board tiles on the crossing
    axis, so the check can run against the unmodified board.
    """

    def __init__(self, board: Board) -> None:
        self._board = board
        self._lines: Dict[Tuple[Position, Axis], Tuple[Tile, ...]] = {}
        self._verdicts: Dict[Tuple[Position, Axis, Tile], bool] = {}

    def fits(self, pos: Position, axis: Axis, tile: Tile) -> bool:
        key = (pos, axis, tile)
        if key not in self._verdicts:
            line_key = (pos, axis)
            if line_key not in self._lines:
                self._lines[line_key] = self._board.line(pos, axis)
            try:
                check_tile_against_line(tile, self._lines[line_key])
            except RuleViolation:
                self._verdicts[key] = False
            else:
                self._verdicts[key] = True
        return self._verdicts[key]


def _ranked(board: Board, placements: Iterable[Placement]) -> RankedMove:
    move = Move.place(placements)
    score = score_placement(board, move.placements)
    return RankedMove(move=move, points=score.points, affected_lines=score.affected_lines)


def find_available_moves(hand: Iterable[Tile], board: Board) -> AvailableMoves:
    """Enumerate every legal placement for ``hand``, best score first."""
    tiles = list(hand)
    if not tiles:
        return NO_TILES

    positions = sorted(board.possible_positions(), key=lambda pos: (pos[1], pos[0]))
    found: List[RankedMove] = []
    seen: Set[tuple] = set()

    for tile in dict.fromkeys(tiles):
        for pos in positions:
            if not validate_single(board, pos, tile):
                continue
            candidate = _ranked(board, [(pos, tile)])
            signature = candidate.move.signature()
            if signature not in seen:
                seen.add(signature)
                found.append(candidate)

    cross_lines = _CrossLineCache(board)
    for combo in dict.fromkeys(tile_combinations(tiles)):
        for pos in positions:
            for dx, dy, axis in DIRECTIONS:
                run = lay_run(combo, pos, dx, dy)
                if any(cell in board for cell, _ in run):
                    continue
                crossing = PERPENDICULAR[axis]
                if not all(cross_lines.fits(cell, crossing, tile) for cell, tile in run):
                    continue
                signature = Move.place(run).signature()
                if signature in seen:
                    continue
                seen.add(signature)
                if validate_move_set(board, run):
                    found.append(_ranked(board, run))

    if not found:
        return NO_PLACEMENTS
    ranked = sorted(found, key=lambda candidate: -candidate.points)
    return AvailableMoves(has_moves=True, moves=tuple(ranked))
