"""Turn and termination state machine for a two-player Qwirkle game."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from .board import Board
from .deck import build_bag, draw_tiles, face_counts, remove_from_hand, return_tiles
from .errors import Reason, RuleViolation
from .mechanics import AvailableMoves, find_available_moves
from .moves import Move, MoveKind
from .rules_schema import DEFAULT_RULES, RuleSet
from .scoring import score_placement
from .tiles import Tile
from .validation import check_move_set

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    INITIALIZED = "initialized"
    ACTIVE = "active"
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MoveRecord:
    player: str
    kind: MoveKind
    points: int = 0


@dataclass(frozen=True)
class MoveOutcome:
    kind: MoveKind
    points: int
    drawn: Tuple[Tile, ...]
    game_over: bool


@dataclass
class GameSession:
    """One game record: board, bag, hands, scores and history.

    Every rule check runs before the first mutation, so a rejected move
    leaves the session exactly as it was.
    """

    game_id: str
    player1: str
    rules: RuleSet = field(default_factory=lambda: DEFAULT_RULES)
    rng: Random = field(default_factory=Random, repr=False, compare=False)
    status: GameStatus = GameStatus.INITIALIZED
    player2: Optional[str] = None
    current_player: Optional[str] = None
    board: Board = field(default_factory=Board)
    deck: List[Tile] = field(default_factory=list)
    hands: Dict[str, List[Tile]] = field(default_factory=dict)
    scores: Dict[str, int] = field(default_factory=dict)
    move_history: List[MoveRecord] = field(default_factory=list)
    end_bonus_player: Optional[str] = None

    @classmethod
    def create(
        cls,
        player_id: str,
        *,
        game_id: Optional[str] = None,
        rng: Optional[Random] = None,
        rules: Optional[RuleSet] = None,
    ) -> "GameSession":
        rules = rules or DEFAULT_RULES
        session = cls(game_id=game_id or uuid4().hex, player1=player_id, rules=rules, rng=rng or Random())
        session.deck = build_bag(rules.copies_per_face)
        session.hands[player_id] = draw_tiles(session.deck, rules.hand_size, rng=session.rng)
        session.scores[player_id] = 0
        session.current_player = player_id
        logger.info("Game %s created by %s", session.game_id, player_id)
        return session

    # Players -----------------------------------------------------------

    @property
    def players(self) -> List[str]:
        return [player for player in (self.player1, self.player2) if player is not None]

    def opponent_of(self, player_id: str) -> Optional[str]:
        if player_id == self.player1:
            return self.player2
        if player_id == self.player2:
            return self.player1
        return None

    def hand_of(self, player_id: str) -> List[Tile]:
        return list(self.hands.get(player_id, []))

    def join(self, player_id: str) -> bool:
        """Seat ``player_id`` as the second player and start the game.

        Returns False, leaving the session untouched, when the game already
        started, the seat is taken, the joiner created the game, or the bag
        cannot fill another hand.
        """
        if (
            self.status is not GameStatus.INITIALIZED
            or self.player2 is not None
            or player_id == self.player1
            or len(self.deck) < self.rules.hand_size
        ):
            logger.info("Game %s refused join by %s", self.game_id, player_id)
            return False
        self.player2 = player_id
        self.hands[player_id] = draw_tiles(self.deck, self.rules.hand_size, rng=self.rng)
        self.scores[player_id] = 0
        self.status = GameStatus.ACTIVE
        logger.info("Game %s joined by %s", self.game_id, player_id)
        return True

    # Moves -------------------------------------------------------------

    def available_moves(self, player_id: str) -> AvailableMoves:
        return find_available_moves(self.hand_of(player_id), self.board)

    def submit_move(self, player_id: str, move: Move) -> MoveOutcome:
        if self.status is not GameStatus.ACTIVE:
            raise RuleViolation(Reason.GAME_NOT_ACTIVE, f"Game {self.game_id} is {self.status}.")
        if player_id != self.current_player:
            raise RuleViolation(Reason.NOT_YOUR_TURN, f"It is {self.current_player}'s turn.")

        points = 0
        drawn: List[Tile] = []
        if move.kind is MoveKind.PLACE:
            points, drawn = self._place(player_id, move)
        elif move.kind is MoveKind.EXCHANGE:
            drawn = self._exchange(player_id, move)

        self.move_history.append(MoveRecord(player=player_id, kind=move.kind, points=points))
        self.current_player = self.opponent_of(player_id)
        logger.info("Game %s: %s played %s for %d points", self.game_id, player_id, move.kind, points)
        game_over = self.check_termination()
        return MoveOutcome(kind=move.kind, points=points, drawn=tuple(drawn), game_over=game_over)

    def _place(self, player_id: str, move: Move) -> Tuple[int, List[Tile]]:
        remaining = remove_from_hand(self.hands[player_id], move.placed_tiles())
        if remaining is None:
            raise RuleViolation(Reason.TILE_NOT_IN_HAND, "You can only place tiles from your own hand.")
        check_move_set(self.board, move.placements)
        result = score_placement(self.board, move.placements)

        for pos, tile in move.placements:
            self.board.place(pos, tile)
        drawn = draw_tiles(self.deck, len(move.placements), rng=self.rng)
        self.hands[player_id] = remaining + drawn
        self.scores[player_id] += result.points
        return result.points, drawn

    def _exchange(self, player_id: str, move: Move) -> List[Tile]:
        if not move.tiles:
            raise RuleViolation(Reason.EMPTY_MOVE, "No tiles selected for exchange.")
        remaining = remove_from_hand(self.hands[player_id], move.tiles)
        if remaining is None:
            raise RuleViolation(Reason.TILE_NOT_IN_HAND, "You can only exchange tiles from your own hand.")
        if len(self.deck) < len(move.tiles):
            raise RuleViolation(
                Reason.INSUFFICIENT_DECK,
                f"Only {len(self.deck)} tiles left in the bag; cannot exchange {len(move.tiles)}.",
            )
        return_tiles(self.deck, move.tiles)
        drawn = draw_tiles(self.deck, len(move.tiles), rng=self.rng)
        self.hands[player_id] = remaining + drawn
        return drawn

    # Termination -------------------------------------------------------

    def check_termination(self) -> bool:
        """Complete the game when it can no longer continue.

        The game ends when the bag is empty and a hand has run out, or when
        the two latest moves were both passes. The end-game bonus goes to the
        player of the latest non-pass move, once.
        """
        if self.status is GameStatus.COMPLETED:
            return True
        if self.status is not GameStatus.ACTIVE:
            return False

        out_of_tiles = not self.deck and any(not self.hands.get(player) for player in self.players)
        recent = self.move_history[-2:]
        deadlocked = len(recent) == 2 and all(record.kind is MoveKind.PASS for record in recent)
        if not (out_of_tiles or deadlocked):
            return False

        self.status = GameStatus.COMPLETED
        last_mover = next(
            (record.player for record in reversed(self.move_history) if record.kind is not MoveKind.PASS),
            None,
        )
        if last_mover is not None and self.rules.end_game_bonus:
            self.scores[last_mover] += self.rules.end_game_bonus
            self.end_bonus_player = last_mover
        logger.info(
            "Game %s completed (%s); scores %s",
            self.game_id,
            "out of tiles" if out_of_tiles else "both players passed",
            self.scores,
        )
        return True

    def is_game_over(self) -> bool:
        return self.status is GameStatus.COMPLETED

    def winner(self) -> Optional[str]:
        if not self.is_game_over():
            return None
        if self.player2 is None:
            return self.player1
        first, second = self.scores[self.player1], self.scores[self.player2]
        if first > second:
            return self.player1
        if second > first:
            return self.player2
        return self.player1 if self.rules.tie_break == "first_player" else None

    def face_counts(self) -> Counter:
        """Per-face totals over the bag, both hands and the board."""
        return face_counts(self.deck, *self.hands.values(), (tile for _, tile in self.board.tiles()))
