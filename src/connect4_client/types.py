# src/connect4_client/types.py

from __future__ import annotations
from enum import IntEnum
from typing import NewType, Tuple


class Cell(IntEnum):
    """Cell values as they appear on the wire. Also used for the winner (EMPTY = none)."""
    EMPTY = 0
    PLAYER_ONE = 1
    PLAYER_TWO = 2


Move = NewType("Move", int)   # column index 0..6
Coord = Tuple[int, int]       # (row, col), row 0 is the top
