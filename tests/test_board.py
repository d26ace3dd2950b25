from __future__ import annotations

import pytest

from connect4_client.core.board import Board
from connect4_client.errors import ColumnFullError, InvalidColumnError
from connect4_client.types import Cell, Move


def test_empty_board_is_6x7_and_all_moves_valid():
    b = Board.empty()
    assert (b.rows, b.cols) == (6, 7)
    assert b.cells() == [Cell.EMPTY] * 42
    assert b.valid_moves() == [Move(c) for c in range(7)]
    assert not b.is_full()


def test_drop_lands_in_bottom_row_and_returns_new_board():
    b = Board.empty()
    b2 = b.drop(Move(3), Cell.PLAYER_ONE)

    assert b.at(5, 3) == Cell.EMPTY
    assert b2.at(5, 3) == Cell.PLAYER_ONE

    b3 = b2.drop(Move(3), Cell.PLAYER_TWO)
    assert b3.at(4, 3) == Cell.PLAYER_TWO
    assert b3.count(Cell.PLAYER_ONE) == 1
    assert b3.count(Cell.PLAYER_TWO) == 1


def test_full_column_raises(make_board):
    b = make_board([
        "1......",
        "2......",
        "1......",
        "2......",
        "1......",
        "2......",
    ])
    assert b.lowest_empty_row(Move(0)) is None
    assert Move(0) not in b.valid_moves()
    with pytest.raises(ColumnFullError):
        b.drop(Move(0), Cell.PLAYER_ONE)


@pytest.mark.parametrize("col", [-1, 7])
def test_out_of_range_column(col):
    with pytest.raises(InvalidColumnError):
        Board.empty().drop(Move(col), Cell.PLAYER_ONE)


def test_from_cells_requires_42_values():
    with pytest.raises(ValueError):
        Board.from_cells([0] * 41)
