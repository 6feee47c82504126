"""Move representation for Qwirkle turns."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Iterable, List, Mapping, Tuple

from .board import Placement, Position
from .errors import Reason, RuleViolation
from .tiles import Tile, deserialize_tile, serialize_tile


class MoveKind(Enum):
    PLACE = auto()
    EXCHANGE = auto()
    PASS = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Move:
    """A complete turn: tiles placed, tiles exchanged, or a pass."""

    kind: MoveKind
    placements: Tuple[Placement, ...] = ()
    tiles: Tuple[Tile, ...] = ()

    @classmethod
    def place(cls, placements: Iterable[Placement]) -> "Move":
        return cls(MoveKind.PLACE, placements=tuple((tuple(pos), tile) for pos, tile in placements))

    @classmethod
    def exchange(cls, tiles: Iterable[Tile]) -> "Move":
        return cls(MoveKind.EXCHANGE, tiles=tuple(tiles))

    @classmethod
    def pass_turn(cls) -> "Move":
        return cls(MoveKind.PASS)

    def placed_tiles(self) -> List[Tile]:
        return [tile for _, tile in self.placements]

    def positions(self) -> List[Position]:
        return [pos for pos, _ in self.placements]

    def signature(self) -> Tuple[Tuple[Position, Tuple[int, int]], ...]:
        """Order-independent identity of a placement move."""
        return tuple(sorted((pos, tile.sort_key()) for pos, tile in self.placements))


def serialize_placements(placements: Iterable[Placement]) -> List[dict]:
    return [{"x": pos[0], "y": pos[1], "tile": serialize_tile(tile)} for pos, tile in placements]


def serialize_move(move: Move) -> dict:
    payload: dict[str, Any] = {"move_type": str(move.kind)}
    if move.kind is MoveKind.PLACE:
        payload["tiles"] = serialize_placements(move.placements)
    elif move.kind is MoveKind.EXCHANGE:
        payload["tiles"] = [serialize_tile(tile) for tile in move.tiles]
    return payload


def parse_coordinate(value: Any) -> int:
    """Accept whole numbers only; ``1.5`` or ``True`` is not a board coordinate."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid coordinate: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise ValueError(f"Invalid coordinate: {value!r}")


def deserialize_move(payload: Mapping[str, Any]) -> Move:
    """Build a ``Move`` from ``{"move_type": ..., "tiles": [...]}``.

    Raises:
        RuleViolation: unknown move type or malformed tile entries.
    """
    move_type = str(payload.get("move_type", "")).lower()
    try:
        if move_type == "place":
            return Move.place(
                ((parse_coordinate(entry["x"]), parse_coordinate(entry["y"])), deserialize_tile(entry["tile"]))
                for entry in payload.get("tiles") or []
            )
        if move_type == "exchange":
            return Move.exchange(deserialize_tile(item) for item in payload.get("tiles") or [])
    except (KeyError, TypeError, ValueError) as exc:
        raise RuleViolation(Reason.INVALID_MOVE, f"Malformed move data: {exc}") from exc
    if move_type == "pass":
        return Move.pass_turn()
    raise RuleViolation(Reason.INVALID_MOVE, f"Unknown move type: {move_type!r}")
