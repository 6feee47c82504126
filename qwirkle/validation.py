"""Placement legality for single tiles and complete move sets.

Every check works on a board snapshot and never mutates it; multi-tile
checks run against a scratch overlay from ``Board.with_tiles``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .board import MAX_LINE_LENGTH, ORIGIN, Axis, Board, Placement, Position
from .errors import Reason, RuleViolation
from .tiles import Tile, common_attribute, has_duplicate_faces

MAX_MOVE_TILES = 6


@dataclass(frozen=True)
class Verdict:
    ok: bool
    reason: Optional[Reason] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok


ACCEPTED = Verdict(ok=True)


def check_tile_against_line(tile: Tile, line: Sequence[Tile]) -> None:
    """Check that ``tile`` may extend ``line`` (the neighbours on one axis).

    Raises:
        RuleViolation: LINE_TOO_LONG, ATTRIBUTE_MISMATCH or DUPLICATE_TILE.
    """
    if not line:
        return
    if len(line) + 1 > MAX_LINE_LENGTH:
        raise RuleViolation(Reason.LINE_TOO_LONG, f"A line cannot hold more than {MAX_LINE_LENGTH} tiles.")

    if len(line) == 1:
        neighbor = line[0]
        if not tile.shares_attribute(neighbor):
            raise RuleViolation(
                Reason.ATTRIBUTE_MISMATCH,
                f"{tile} must share the colour ({neighbor.color}) or the shape ({neighbor.shape}) of {neighbor}.",
            )
        if tile == neighbor:
            raise RuleViolation(Reason.DUPLICATE_TILE, f"{tile} cannot sit next to an identical tile.")
        return

    colors = {existing.color for existing in line}
    shapes = {existing.shape for existing in line}

    if len(colors) == 1:
        (line_color,) = colors
        if tile.color is not line_color:
            raise RuleViolation(Reason.ATTRIBUTE_MISMATCH, f"The line is {line_color}; {tile} does not match.")
        if tile.shape in shapes:
            raise RuleViolation(Reason.DUPLICATE_TILE, f"The {line_color} line already has a {tile.shape}.")
        return

    if len(shapes) == 1:
        (line_shape,) = shapes
        if tile.shape is not line_shape:
            raise RuleViolation(Reason.ATTRIBUTE_MISMATCH, f"The line is {line_shape}; {tile} does not match.")
        if tile.color in colors:
            raise RuleViolation(Reason.DUPLICATE_TILE, f"The {line_shape} line already has a {tile.color} tile.")
        return

    raise RuleViolation(Reason.ATTRIBUTE_MISMATCH, "The line shares neither a colour nor a shape.")


def check_lines(board: Board, pos: Position, tile: Tile) -> None:
    for axis in Axis:
        check_tile_against_line(tile, board.line(pos, axis))


def check_single(board: Board, pos: Position, tile: Tile) -> None:
    """Raise ``RuleViolation`` unless ``tile`` may be placed alone at ``pos``."""
    if board.is_empty():
        if pos != ORIGIN:
            raise RuleViolation(Reason.NOT_AT_ORIGIN, "The first tile must be placed at (0, 0).")
        return
    if pos in board:
        raise RuleViolation(Reason.CELL_OCCUPIED, f"Position {pos} is already occupied.")
    if not board.has_neighbor(pos):
        raise RuleViolation(Reason.NOT_ADJACENT, f"Position {pos} does not touch any tile.")
    check_lines(board, pos, tile)


def check_colinear(positions: Sequence[Position]) -> None:
    if len(positions) == 1:
        return
    xs = {x for x, _ in positions}
    ys = {y for _, y in positions}
    if len(ys) == 1:
        coords = sorted(x for x, _ in positions)
    elif len(xs) == 1:
        coords = sorted(y for _, y in positions)
    else:
        raise RuleViolation(Reason.NOT_COLINEAR, "Tiles must share a single row or column.")
    for previous, current in zip(coords, coords[1:]):
        if current - previous != 1:
            raise RuleViolation(Reason.NOT_COLINEAR, "Tiles must form a run without gaps.")


def check_move_set(board: Board, placements: Iterable[Placement]) -> None:
    """Raise ``RuleViolation`` unless the whole placement set is legal as one move."""
    entries: List[Placement] = list(placements)
    if not entries:
        raise RuleViolation(Reason.EMPTY_MOVE, "No tiles selected for placement.")
    if len(entries) > MAX_MOVE_TILES:
        raise RuleViolation(Reason.TOO_MANY_TILES, f"At most {MAX_MOVE_TILES} tiles can be placed at once.")
    positions = [pos for pos, _ in entries]
    if len(set(positions)) != len(positions):
        raise RuleViolation(Reason.DUPLICATE_POSITION, "Each tile needs its own position.")

    # Distinct positions mean only a single tile can satisfy this.
    if board.is_empty():
        if any(pos != ORIGIN for pos in positions):
            raise RuleViolation(Reason.NOT_AT_ORIGIN, "The first move must be placed at (0, 0).")
        return

    check_colinear(positions)

    tiles = [tile for _, tile in entries]
    if has_duplicate_faces(tiles):
        raise RuleViolation(Reason.DUPLICATE_TILE, "A move cannot contain the same tile twice.")
    if common_attribute(tiles) is None:
        raise RuleViolation(Reason.ATTRIBUTE_MISMATCH, "Tiles must share a colour or a shape.")

    if not any(board.has_neighbor(pos) for pos in positions):
        raise RuleViolation(Reason.NOT_ADJACENT, "At least one tile must touch the existing layout.")

    scratch = board.with_tiles(entries)
    for pos, tile in entries:
        check_lines(scratch, pos, tile)


def _verdict(check, *args) -> Verdict:
    try:
        check(*args)
    except RuleViolation as exc:
        return Verdict(ok=False, reason=exc.reason, message=exc.message)
    return ACCEPTED


def validate_single(board: Board, pos: Position, tile: Tile) -> Verdict:
    return _verdict(check_single, board, pos, tile)


def validate_move_set(board: Board, placements: Iterable[Placement]) -> Verdict:
    return _verdict(check_move_set, board, list(placements))
