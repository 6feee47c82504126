"""Simple bot arena for Qwirkle."""

from __future__ import annotations

import argparse
import logging
from random import Random
from typing import Dict, Iterable, Optional

from qwirkle.service import GameService
from qwirkle.store import GameStore

from .base import BotStrategy
from .baseline_greedy import GreedyBot
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "greedy": GreedyBot,
    "random": RandomBot,
}

SEATS = ("bot_a", "bot_b")
MAX_TURNS = 1000


def run_match(
    bot_a: BotStrategy,
    bot_b: BotStrategy,
    *,
    seed: int | None = None,
    max_turns: int = MAX_TURNS,
    store: Optional[GameStore] = None,
) -> dict:
    """Play one full game between two bots through ``GameService``.

    Raises:
        RuntimeError: a bot submitted a move the engine rejected.
    """
    service = GameService(store, rng=Random(seed))
    bots = dict(zip(SEATS, (bot_a, bot_b)))

    game_id = service.create_game(SEATS[0]).game_id
    service.join_game(game_id, SEATS[1])
    for seat, bot in bots.items():
        bot.on_game_start(service.get_game_state(game_id, seat, include_moves=False))

    history = []
    turns = 0
    view = service.get_game_state(game_id, SEATS[0], include_moves=False)
    while view.status != "completed" and turns < max_turns:
        seat = view.current_player
        assert seat is not None
        view = service.get_game_state(game_id, seat)
        if view.status == "completed":
            break
        payload = bots[seat].choose_move(view)
        result = service.submit_move(game_id, seat, payload)
        if not result.ok:
            raise RuntimeError(f"{bots[seat].name} played an illegal move ({result.error}): {payload}")
        history.append({"player": seat, "move_type": payload["move_type"], "points": result.points})
        turns += 1
        view = service.get_game_state(game_id, seat, include_moves=False)

    if view.status != "completed":
        logger.warning("Game %s stopped after %d turns without finishing", game_id, turns)
    return {
        "game_id": game_id,
        "scores": view.scores,
        "winner": view.winner,
        "completed": view.status == "completed",
        "turns": turns,
        "history": history,
        "service": service,
    }


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a bot match.")
    parser.add_argument("--bot-a", default="greedy", choices=BOT_REGISTRY.keys())
    parser.add_argument("--bot-b", default="random", choices=BOT_REGISTRY.keys())
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--max-turns", type=int, default=MAX_TURNS)
    parser.add_argument("--show-board", action="store_true", help="Print the final board.")
    args = parser.parse_args(argv)

    bot_a = BOT_REGISTRY[args.bot_a]()
    bot_b = BOT_REGISTRY[args.bot_b]()
    results = run_match(bot_a, bot_b, seed=args.seed, max_turns=args.max_turns)

    print(f"Scores after {results['turns']} turns: {results['scores']}")
    print(f"Winner: {results['winner'] or 'draw'}")
    if args.show_board:
        session = results["service"].store.load(results["game_id"])
        print(session.board.render())


if __name__ == "__main__":
    main()
