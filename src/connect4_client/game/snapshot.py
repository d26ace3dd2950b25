from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import FrozenSet

from connect4_client.core.board import Board
from connect4_client.types import Cell, Coord


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """
    One decoded server state. Always replaced as a whole, never patched,
    so board, status and winning cells cannot come from different responses.
    """
    board: Board = field(default_factory=Board.empty)
    is_over: bool = False
    winner: Cell = Cell.EMPTY
    winning_cells: FrozenSet[Coord] = frozenset()

    def __post_init__(self) -> None:
        if self.winning_cells and not (self.is_over and self.winner != Cell.EMPTY):
            raise ValueError("winning_cells require a finished game with a winner.")

    @classmethod
    def empty(cls) -> "GameSnapshot":
        return cls()

    @property
    def is_draw(self) -> bool:
        return self.is_over and self.winner == Cell.EMPTY

    @property
    def is_won(self) -> bool:
        return self.is_over and self.winner != Cell.EMPTY

    def with_board(self, board: Board) -> "GameSnapshot":
        return replace(self, board=board)
