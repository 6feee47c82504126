"""Reason codes and exceptions shared by the engine layers."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Reason(Enum):
    """Domain rejection codes surfaced to callers unchanged."""

    NOT_YOUR_TURN = "not_your_turn"
    GAME_NOT_ACTIVE = "game_not_active"
    CELL_OCCUPIED = "cell_occupied"
    NOT_ADJACENT = "not_adjacent"
    NOT_AT_ORIGIN = "not_at_origin"
    LINE_TOO_LONG = "line_too_long"
    ATTRIBUTE_MISMATCH = "attribute_mismatch"
    DUPLICATE_TILE = "duplicate_tile"
    NOT_COLINEAR = "not_colinear"
    TILE_NOT_IN_HAND = "tile_not_in_hand"
    INSUFFICIENT_DECK = "insufficient_deck"
    ALREADY_FULL = "already_full"
    NOT_FOUND = "not_found"
    EMPTY_MOVE = "empty_move"
    TOO_MANY_TILES = "too_many_tiles"
    DUPLICATE_POSITION = "duplicate_position"
    INVALID_MOVE = "invalid_move"

    def __str__(self) -> str:
        return self.value


class RuleViolation(ValueError):
    """Raised when a request breaks a game rule. Carries a ``Reason``."""

    def __init__(self, reason: Reason, message: Optional[str] = None) -> None:
        self.reason = reason
        self.message = message or reason.value.replace("_", " ")
        super().__init__(self.message)


class GameNotFound(RuleViolation):
    """Raised when no game exists under the requested id."""

    def __init__(self, game_id: str) -> None:
        super().__init__(Reason.NOT_FOUND, f"Game {game_id} not found.")
        self.game_id = game_id


class StoreError(RuntimeError):
    """Raised when the persistence layer fails. Never a rule problem."""
