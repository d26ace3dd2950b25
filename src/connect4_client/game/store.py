from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from connect4_client.errors import ColumnFullError
from connect4_client.game.snapshot import GameSnapshot
from connect4_client.types import Cell, Move

log = logging.getLogger(__name__)

Listener = Callable[[GameSnapshot], None]


@dataclass(frozen=True)
class Rejected:
    column: int
    reason: str = "column full"


class GameStateStore:
    """
    Holds the current GameSnapshot. The renderer reads it, the orchestrator writes it.
    Writes are whole-value swaps under a lock; listeners run after the swap.
    """

    def __init__(self, initial: Optional[GameSnapshot] = None) -> None:
        self._snapshot = initial if initial is not None else GameSnapshot.empty()
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    def current(self) -> GameSnapshot:
        with self._lock:
            return self._snapshot

    def replace(self, next_snapshot: GameSnapshot) -> None:
        with self._lock:
            self._snapshot = next_snapshot
        self._notify(next_snapshot)

    def apply_optimistic_placement(self, column: Move, player: Cell) -> Union[GameSnapshot, Rejected]:
        """
        Drop `player` into the lowest empty row of `column` ahead of the server.
        A full column leaves the store untouched and returns Rejected.
        """
        with self._lock:
            try:
                board = self._snapshot.board.drop(column, player)
            except ColumnFullError:
                return Rejected(int(column))
            updated = self._snapshot.with_board(board)
            self._snapshot = updated
        self._notify(updated)
        return updated

    # ---------- listeners ----------

    def subscribe(self, callback: Listener) -> None:
        with self._lock:
            self._listeners.append(callback)

    def unsubscribe(self, callback: Listener) -> None:
        with self._lock:
            self._listeners = [cb for cb in self._listeners if cb != callback]

    def _notify(self, snapshot: GameSnapshot) -> None:
        with self._lock:
            callbacks = list(self._listeners)
        for callback in callbacks:
            try:
                callback(snapshot)
            except Exception:
                log.exception("Snapshot listener %r failed", callback)
