"""REST service to play Qwirkle games between two players."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from qwirkle.errors import Reason, RuleViolation
from qwirkle.service import GameService
from qwirkle.store import GameStore, InMemoryGameStore, SqliteGameStore

logging.basicConfig(level=os.getenv("QWIRKLE_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

STATUS_BY_REASON = {
    Reason.NOT_FOUND: 404,
    Reason.ALREADY_FULL: 409,
}


class CreateGameRequest(BaseModel):
    player_id: str = Field(..., min_length=1)


class JoinGameRequest(BaseModel):
    player_id: str = Field(..., min_length=1)


class MoveRequest(BaseModel):
    player_id: str = Field(..., min_length=1)
    move_type: Literal["place", "exchange", "pass"]
    tiles: List[Any] = Field(default_factory=list)


def build_store() -> GameStore:
    db_path = os.getenv("QWIRKLE_DB")
    if db_path:
        logger.info("Using SQLite game store at %s", db_path)
        return SqliteGameStore(db_path)
    return InMemoryGameStore()


service = GameService(build_store())


app = FastAPI(title="Qwirkle Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(reason: str, message: str) -> JSONResponse:
    status_code = STATUS_BY_REASON.get(Reason(reason), 400)
    return JSONResponse(status_code=status_code, content={"error": reason, "message": message})


@app.exception_handler(RuleViolation)
async def handle_rule_violation(request: Request, exc: RuleViolation) -> JSONResponse:
    return error_response(str(exc.reason), exc.message)


@app.post("/games")
def create_game(request: CreateGameRequest) -> Dict[str, object]:
    view = service.create_game(request.player_id)
    return {"game_id": view.game_id, "state": asdict(view)}


@app.post("/games/{game_id}/join")
def join_game(game_id: str, request: JoinGameRequest) -> Dict[str, object]:
    view = service.join_game(game_id, request.player_id)
    return {"state": asdict(view)}


@app.post("/games/{game_id}/moves")
def submit_move(game_id: str, request: MoveRequest):
    result = service.submit_move(
        game_id,
        request.player_id,
        {"move_type": request.move_type, "tiles": request.tiles},
    )
    if not result.ok:
        assert result.error is not None
        return error_response(result.error, result.message)
    return {
        "ok": True,
        "points": result.points,
        "game_over": result.game_over,
        "state": asdict(service.get_game_state(game_id, request.player_id)),
    }


@app.get("/games/{game_id}")
def get_game_state(game_id: str, player_id: str, include_moves: bool = True) -> Dict[str, object]:
    view = service.get_game_state(game_id, player_id, include_moves=include_moves)
    return {"state": asdict(view)}


def reset_service(store: Optional[GameStore] = None) -> GameService:
    """Replace the module-level service, e.g. with a fresh store."""
    global service
    service = GameService(store or build_store())
    return service
