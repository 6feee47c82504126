"""Baseline greedy bot."""

from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence

from qwirkle.service import GameStateView
from qwirkle.tiles import deserialize_tiles

from .base import BotStrategy, placement_payload


class GreedyBot(BotStrategy):
    """Plays the highest-scoring placement; on ties prefers laying more tiles."""

    name = "Greedy"

    def choose_move(self, view: GameStateView) -> dict:
        available = view.available_moves or {"has_moves": False, "moves": []}
        if not available["has_moves"]:
            return self.fallback_move(view)
        best = max(available["moves"], key=lambda candidate: (candidate["points"], len(candidate["tiles"])))
        return placement_payload(best)

    def tiles_to_exchange(self, view: GameStateView) -> Optional[Sequence[str]]:
        """Keep the largest colour or shape group and trade the rest."""
        if view.remaining_tiles <= 0 or not view.your_hand:
            return None
        hand = deserialize_tiles(view.your_hand)
        colors = Counter(tile.color for tile in hand)
        shapes = Counter(tile.shape for tile in hand)
        color, color_count = colors.most_common(1)[0]
        shape, shape_count = shapes.most_common(1)[0]
        if color_count >= shape_count:
            keep = {index for index, tile in enumerate(hand) if tile.color is color}
        else:
            keep = {index for index, tile in enumerate(hand) if tile.shape is shape}

        seen = set()
        for index, tile in enumerate(hand):
            if index in keep and tile in seen:
                keep.discard(index)
            seen.add(tile)

        trade = [view.your_hand[index] for index in range(len(hand)) if index not in keep]
        if not trade:
            trade = list(view.your_hand)
        return trade[: view.remaining_tiles]
