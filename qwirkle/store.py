"""Game record persistence with per-game transactions."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from .encode import session_from_dict, session_to_dict
from .errors import GameNotFound, StoreError
from .game import GameSession

logger = logging.getLogger(__name__)


class GameStore(ABC):
    """Keyed storage of game records.

    ``transaction`` serialises mutations of one game: it loads a fresh copy
    under that game's lock, yields it, and writes it back only when the
    block exits without an exception.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @abstractmethod
    def _read(self, game_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def _write(self, game_id: str, payload: Dict[str, Any]) -> None:
        ...

    def _lock_for(self, game_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = self._locks[game_id] = threading.Lock()
            return lock

    def add(self, session: GameSession) -> None:
        with self._lock_for(session.game_id):
            if self._read(session.game_id) is not None:
                raise StoreError(f"Game {session.game_id} already exists.")
            self._write(session.game_id, session_to_dict(session))
        logger.debug("Stored new game %s", session.game_id)

    def load(self, game_id: str) -> GameSession:
        payload = self._read(game_id)
        if payload is None:
            raise GameNotFound(game_id)
        return session_from_dict(payload)

    @contextmanager
    def transaction(self, game_id: str) -> Iterator[GameSession]:
        with self._lock_for(game_id):
            session = self.load(game_id)
            yield session
            self._write(game_id, session_to_dict(session))
            logger.debug("Committed game %s", game_id)


class InMemoryGameStore(GameStore):
    """Keeps encoded records in a dict; loads always return independent copies."""

    def __init__(self) -> None:
        super().__init__()
        self._records: Dict[str, str] = {}

    def _read(self, game_id: str) -> Optional[Dict[str, Any]]:
        raw = self._records.get(game_id)
        return json.loads(raw) if raw is not None else None

    def _write(self, game_id: str, payload: Dict[str, Any]) -> None:
        self._records[game_id] = json.dumps(payload)

    def __len__(self) -> int:
        return len(self._records)


def _ensure_db_dir(db_path: str) -> None:
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _ensure_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS games (
            game_id TEXT PRIMARY KEY,
            payload TEXT NOT NULL
        )
        """
    )
    conn.commit()


class SqliteGameStore(GameStore):
    """Stores each game as one JSON row in an SQLite table."""

    def __init__(self, db_path: str) -> None:
        super().__init__()
        self.db_path = db_path
        _ensure_db_dir(db_path)

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_path)
            _ensure_db(conn)
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open game database {self.db_path}: {exc}") from exc
        return conn

    def _read(self, game_id: str) -> Optional[Dict[str, Any]]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT payload FROM games WHERE game_id = ?", (game_id,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot read game {game_id}: {exc}") from exc
        finally:
            conn.close()
        if not row:
            return None
        return json.loads(row[0])

    def _write(self, game_id: str, payload: Dict[str, Any]) -> None:
        conn = self._connect()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO games (game_id, payload) VALUES (?, ?)",
                (game_id, json.dumps(payload)),
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot write game {game_id}: {exc}") from exc
        finally:
            conn.close()
