"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from qwirkle.service import GameStateView

from .base import BotStrategy, placement_payload


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def choose_move(self, view: GameStateView) -> dict:
        available = view.available_moves or {"has_moves": False, "moves": []}
        if available["has_moves"]:
            return placement_payload(self._rng.choice(available["moves"]))
        return self.fallback_move(view)

    def tiles_to_exchange(self, view: GameStateView) -> Optional[Sequence[str]]:
        limit = min(len(view.your_hand), view.remaining_tiles)
        if limit <= 0:
            return None
        count = self._rng.randint(1, limit)
        return self._rng.sample(list(view.your_hand), count)
