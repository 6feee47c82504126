"""Validation schema for Qwirkle rules configuration."""

from __future__ import annotations

from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, Field, validator

from .deck import COPIES_PER_FACE, HAND_SIZE
from .tiles import ALL_FACES
from .validation import MAX_MOVE_TILES

END_GAME_BONUS = 6


class RuleSet(BaseModel):
    hand_size: int = Field(HAND_SIZE, description="Tiles held by each player after drawing.")
    copies_per_face: int = Field(COPIES_PER_FACE, description="Copies of every colour/shape face in the bag.")
    end_game_bonus: int = Field(END_GAME_BONUS, ge=0, description="Bonus for the player who made the last move.")
    tie_break: Literal["first_player", "draw"] = Field(
        "first_player",
        description="Who wins when the final scores are level.",
    )

    @validator("hand_size")
    def validate_hand_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Hand size must be positive.")
        if value > MAX_MOVE_TILES:
            raise ValueError(f"Hand size cannot exceed {MAX_MOVE_TILES}.")
        return value

    @validator("copies_per_face")
    def validate_copies(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Every face needs at least one copy.")
        return value

    @property
    def bag_size(self) -> int:
        return len(ALL_FACES) * self.copies_per_face


DEFAULT_RULES = RuleSet()


def load_rules(payload: Optional[Mapping[str, Any]] = None) -> RuleSet:
    """Build a ``RuleSet`` from a plain mapping, falling back to defaults for missing keys."""
    if not payload:
        return DEFAULT_RULES
    return RuleSet(**dict(payload))
