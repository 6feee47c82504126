"""Conversion between ``GameSession`` records and JSON-compatible dicts."""

from __future__ import annotations

from random import Random
from typing import Any, Dict, Mapping

from .board import Board
from .game import GameSession, GameStatus, MoveRecord
from .moves import MoveKind
from .rules_schema import RuleSet, load_rules
from .tiles import deserialize_tile, deserialize_tiles, serialize_tile

FORMAT_VERSION = 1


def encode_rng(rng: Random) -> list:
    version, internal, gauss = rng.getstate()
    return [version, list(internal), gauss]


def decode_rng(payload) -> Random:
    rng = Random()
    if payload:
        version, internal, gauss = payload
        rng.setstate((version, tuple(internal), gauss))
    return rng


def encode_rules(rules: RuleSet) -> Dict[str, Any]:
    return {
        "hand_size": rules.hand_size,
        "copies_per_face": rules.copies_per_face,
        "end_game_bonus": rules.end_game_bonus,
        "tie_break": rules.tie_break,
    }


def encode_board(board: Board) -> list:
    return [{"x": pos[0], "y": pos[1], "tile": serialize_tile(tile)} for pos, tile in board.tiles()]


def decode_board(payload) -> Board:
    return Board({(int(entry["x"]), int(entry["y"])): deserialize_tile(entry["tile"]) for entry in payload or []})


def session_to_dict(session: GameSession) -> Dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "game_id": session.game_id,
        "status": session.status.value,
        "player1": session.player1,
        "player2": session.player2,
        "current_player": session.current_player,
        "board": encode_board(session.board),
        "deck": [serialize_tile(tile) for tile in session.deck],
        "hands": {player: [serialize_tile(tile) for tile in hand] for player, hand in session.hands.items()},
        "scores": dict(session.scores),
        "move_history": [
            {"player": record.player, "kind": record.kind.name, "points": record.points}
            for record in session.move_history
        ],
        "end_bonus_player": session.end_bonus_player,
        "rules": encode_rules(session.rules),
        "rng": encode_rng(session.rng),
    }


def session_from_dict(payload: Mapping[str, Any]) -> GameSession:
    """Rebuild a session. Raises ``ValueError`` on an unrecognised record."""
    if payload.get("version") != FORMAT_VERSION:
        raise ValueError(f"Unsupported game record version: {payload.get('version')!r}")
    try:
        return GameSession(
            game_id=payload["game_id"],
            player1=payload["player1"],
            rules=load_rules(payload.get("rules")),
            rng=decode_rng(payload.get("rng")),
            status=GameStatus(payload["status"]),
            player2=payload.get("player2"),
            current_player=payload.get("current_player"),
            board=decode_board(payload.get("board")),
            deck=deserialize_tiles(payload.get("deck") or []),
            hands={player: deserialize_tiles(hand) for player, hand in (payload.get("hands") or {}).items()},
            scores={player: int(score) for player, score in (payload.get("scores") or {}).items()},
            move_history=[
                MoveRecord(player=entry["player"], kind=MoveKind[entry["kind"]], points=int(entry["points"]))
                for entry in payload.get("move_history") or []
            ],
            end_bonus_player=payload.get("end_bonus_player"),
        )
    except KeyError as exc:
        raise ValueError(f"Game record is missing {exc}") from exc
