"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Optional, Sequence

from qwirkle.service import GameStateView


def placement_payload(candidate: dict) -> dict:
    """Strip a ranked move down to the fields ``submit_move`` accepts."""
    return {"move_type": candidate["move_type"], "tiles": list(candidate.get("tiles", []))}


class BotStrategy:
    """Base class for bot policies.

    Bots see the same ``GameStateView`` a human client gets and answer with a
    move payload for ``GameService.submit_move``.
    """

    name: str = "BaseBot"

    def on_game_start(self, view: GameStateView) -> None:
        """Optional hook invoked once the game becomes active."""
        return None

    def choose_move(self, view: GameStateView) -> dict:
        """Return the top-ranked placement, otherwise exchange or pass."""
        available = view.available_moves or {"has_moves": False, "moves": []}
        if available["has_moves"]:
            return placement_payload(available["moves"][0])
        return self.fallback_move(view)

    def fallback_move(self, view: GameStateView) -> dict:
        tiles = self.tiles_to_exchange(view)
        if tiles:
            return {"move_type": "exchange", "tiles": list(tiles)}
        return {"move_type": "pass"}

    def tiles_to_exchange(self, view: GameStateView) -> Optional[Sequence[str]]:
        """Tiles to trade back into the bag, or None to pass."""
        count = min(len(view.your_hand), view.remaining_tiles)
        if count <= 0:
            return None
        return view.your_hand[:count]
