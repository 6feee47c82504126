"""Convenience service layer for the HTTP app, UI and bots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Any, Mapping, Optional, Union

from .errors import Reason, RuleViolation
from .game import GameSession
from .mechanics import AvailableMoves, RankedMove
from .moves import Move, deserialize_move, serialize_move
from .rules_schema import DEFAULT_RULES, RuleSet
from .store import GameStore, InMemoryGameStore
from .tiles import serialize_tile, tile_label

logger = logging.getLogger(__name__)

PASS_MOVE = {"move_type": "pass"}


@dataclass
class MoveResult:
    ok: bool
    error: Optional[str] = None
    message: str = ""
    points: int = 0
    game_over: bool = False


@dataclass
class GameStateView:
    game_id: str
    status: str
    current_player: Optional[str]
    player1: str
    player2: Optional[str]
    your_hand: list[str]
    hand_labels: list[str]
    board_tiles: list[dict]
    scores: dict[str, int]
    remaining_tiles: int
    is_your_turn: bool
    winner: Optional[str]
    end_bonus_player: Optional[str]
    move_history: list[dict] = field(default_factory=list)
    available_moves: Optional[dict] = None


def serialize_ranked_move(ranked: RankedMove) -> dict:
    payload = serialize_move(ranked.move)
    payload["points"] = ranked.points
    payload["labels"] = [tile_label(tile) for tile in ranked.move.placed_tiles()]
    payload["affected_lines"] = {
        str(axis): [serialize_tile(tile) for tile in tiles] for axis, tiles in ranked.affected_lines.items()
    }
    return payload


def serialize_available_moves(available: AvailableMoves) -> dict:
    if available.has_moves:
        return {"has_moves": True, "moves": [serialize_ranked_move(ranked) for ranked in available.moves]}
    return {"has_moves": False, "moves": [{"move_type": str(kind)} for kind in available.fallback]}


class GameService:
    """Facade over a ``GameStore`` exposing the four game operations."""

    def __init__(
        self,
        store: Optional[GameStore] = None,
        *,
        rng: Optional[Random] = None,
        rules: Optional[RuleSet] = None,
    ) -> None:
        self.store = store or InMemoryGameStore()
        self.rng = rng
        self.rules = rules or DEFAULT_RULES

    # Game lifecycle ----------------------------------------------------

    def create_game(self, player_id: str) -> GameStateView:
        game_rng = Random(self.rng.getrandbits(64)) if self.rng is not None else None
        session = GameSession.create(player_id, rng=game_rng, rules=self.rules)
        self.store.add(session)
        return self._view(session, player_id, include_moves=True)

    def join_game(self, game_id: str, player_id: str) -> GameStateView:
        """Seat ``player_id`` in ``game_id``.

        Raises:
            GameNotFound: no such game.
            RuleViolation: ALREADY_FULL when the game cannot take the player.
        """
        with self.store.transaction(game_id) as session:
            if not session.join(player_id):
                raise RuleViolation(Reason.ALREADY_FULL, f"Game {game_id} cannot be joined.")
        return self._view(session, player_id, include_moves=True)

    # Actions -----------------------------------------------------------

    def submit_move(self, game_id: str, player_id: str, move: Union[Move, Mapping[str, Any]]) -> MoveResult:
        try:
            if not isinstance(move, Move):
                move = deserialize_move(move)
            with self.store.transaction(game_id) as session:
                outcome = session.submit_move(player_id, move)
        except RuleViolation as exc:
            logger.info("Game %s: move by %s rejected (%s) %s", game_id, player_id, exc.reason, exc.message)
            return MoveResult(ok=False, error=str(exc.reason), message=exc.message)
        return MoveResult(ok=True, points=outcome.points, game_over=outcome.game_over)

    # Views -------------------------------------------------------------

    def get_game_state(self, game_id: str, player_id: str, include_moves: bool = True) -> GameStateView:
        with self.store.transaction(game_id) as session:
            session.check_termination()
        return self._view(session, player_id, include_moves=include_moves)

    def _view(self, session: GameSession, player_id: str, *, include_moves: bool) -> GameStateView:
        hand = session.hand_of(player_id)
        view = GameStateView(
            game_id=session.game_id,
            status=str(session.status),
            current_player=session.current_player,
            player1=session.player1,
            player2=session.player2,
            your_hand=[serialize_tile(tile) for tile in hand],
            hand_labels=[tile_label(tile) for tile in hand],
            board_tiles=[{"x": pos[0], "y": pos[1], "tile": serialize_tile(tile)} for pos, tile in session.board.tiles()],
            scores=dict(session.scores),
            remaining_tiles=len(session.deck),
            is_your_turn=session.current_player == player_id,
            winner=session.winner(),
            end_bonus_player=session.end_bonus_player,
            move_history=[
                {"player": record.player, "move_type": str(record.kind), "points": record.points}
                for record in session.move_history
            ],
        )
        if include_moves:
            view.available_moves = self._available_moves(session, player_id)
        return view

    def _available_moves(self, session: GameSession, player_id: str) -> dict:
        try:
            return serialize_available_moves(session.available_moves(player_id))
        except Exception:
            logger.exception("Game %s: move generation failed for %s", session.game_id, player_id)
            return {"has_moves": False, "moves": [dict(PASS_MOVE)]}
