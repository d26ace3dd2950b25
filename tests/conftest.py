from __future__ import annotations

import os
import threading

os.environ.setdefault("MPLBACKEND", "Agg")

from typing import Iterable, List, Optional  # noqa: E402

import pytest  # noqa: E402

from connect4_client.core.board import Board  # noqa: E402
from connect4_client.game.snapshot import GameSnapshot  # noqa: E402
from connect4_client.types import Cell  # noqa: E402


class FakeServer:
    """
    In-memory stand-in for SyncClient. Plays PLAYER_ONE for /move and
    PLAYER_TWO for /ai-move; errors and canned results can be injected.
    """

    def __init__(self, snapshot: Optional[GameSnapshot] = None) -> None:
        self.snapshot = snapshot or GameSnapshot.empty()
        self.calls: List[object] = []

        self.fetch_error: Optional[Exception] = None
        self.move_error: Optional[Exception] = None
        self.opponent_error: Optional[Exception] = None
        self.reset_error: Optional[Exception] = None

        self.move_result: Optional[GameSnapshot] = None
        self.opponent_result: Optional[GameSnapshot] = None

    def fetch_state(self) -> GameSnapshot:
        self.calls.append("fetch")
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.snapshot

    def post_move(self, column: int) -> GameSnapshot:
        self.calls.append(("move", column))
        if self.move_error is not None:
            raise self.move_error
        if self.move_result is not None:
            self.snapshot = self.move_result
        else:
            self.snapshot = self.snapshot.with_board(self.snapshot.board.drop(column, Cell.PLAYER_ONE))
        return self.snapshot

    def post_opponent_move(self) -> GameSnapshot:
        self.calls.append("ai")
        if self.opponent_error is not None:
            raise self.opponent_error
        if self.opponent_result is not None:
            self.snapshot = self.opponent_result
        else:
            col = self.snapshot.board.valid_moves()[-1]
            self.snapshot = self.snapshot.with_board(self.snapshot.board.drop(col, Cell.PLAYER_TWO))
        return self.snapshot

    def reset_game(self) -> None:
        self.calls.append("reset")
        if self.reset_error is not None:
            raise self.reset_error
        self.snapshot = GameSnapshot.empty()

    def count(self, call: object) -> int:
        return sum(1 for c in self.calls if c == call)


class GatedServer(FakeServer):
    """
    FakeServer whose first call to each gated endpoint ("fetch", "move", "ai",
    "reset") parks the worker thread until `release` is set. `entered` fires
    once a gated call is parked.
    """

    def __init__(self, gated: Iterable[str], snapshot: Optional[GameSnapshot] = None) -> None:
        super().__init__(snapshot)
        self.gated = set(gated)
        self.entered = threading.Event()
        self.release = threading.Event()

    def _gate(self, name: str) -> None:
        if name not in self.gated:
            return
        self.gated.discard(name)
        self.entered.set()
        if not self.release.wait(5):
            raise RuntimeError(f"gated {name} call was never released")

    def fetch_state(self) -> GameSnapshot:
        self._gate("fetch")
        return super().fetch_state()

    def post_move(self, column: int) -> GameSnapshot:
        self._gate("move")
        return super().post_move(column)

    def post_opponent_move(self) -> GameSnapshot:
        self._gate("ai")
        return super().post_opponent_move()

    def reset_game(self) -> None:
        self._gate("reset")
        super().reset_game()


def board_from_rows(rows: List[str]) -> Board:
    """Rows top to bottom, '.' empty, '1'/'2' pieces."""
    values = [0 if ch == "." else int(ch) for row in rows for ch in row]
    return Board.from_cells(values)


def won_by_player_one() -> GameSnapshot:
    board = board_from_rows([
        ".......",
        ".......",
        ".......",
        ".......",
        "222....",
        "1111...",
    ])
    return GameSnapshot(
        board=board,
        is_over=True,
        winner=Cell.PLAYER_ONE,
        winning_cells=frozenset({(5, 0), (5, 1), (5, 2), (5, 3)}),
    )


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def won_snapshot() -> GameSnapshot:
    return won_by_player_one()


@pytest.fixture
def make_board():
    return board_from_rows


@pytest.fixture
def gated_server():
    """Factory: gated_server({"move"}) -> GatedServer."""
    return GatedServer
