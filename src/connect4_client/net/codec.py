# src/connect4_client/net/codec.py
"""
Pipe-and-comma wire format spoken by the game server.

    <42 cells, row-major, comma separated>|<isOver>,<winner>|<extra>

<extra> is absent, the literal draw marker, or a flat row,col list of the
winning cells. The server leaves a trailing comma after each list.
"""
from __future__ import annotations

import logging
from typing import FrozenSet, List, Optional, Tuple
from urllib.parse import urlencode

from connect4_client.config import ROWS, COLS, DRAW_MARKER
from connect4_client.core.board import Board
from connect4_client.errors import MalformedBoardError
from connect4_client.game.snapshot import GameSnapshot
from connect4_client.types import Cell, Coord

log = logging.getLogger(__name__)

_CELL_VALUES = {int(c) for c in Cell}


def _tokens(segment: str) -> List[str]:
    return [t.strip() for t in segment.split(",") if t.strip() != ""]


def _ints(segment: str) -> Optional[List[int]]:
    try:
        return [int(t) for t in _tokens(segment)]
    except ValueError:
        return None


def decode_board(segment: str) -> Board:
    values = _ints(segment)
    if values is None:
        raise MalformedBoardError(f"Board segment has non-numeric cells: {segment!r}")
    if len(values) != ROWS * COLS:
        raise MalformedBoardError(f"Board segment has {len(values)} cells, expected {ROWS * COLS}.")
    bad = [v for v in values if v not in _CELL_VALUES]
    if bad:
        raise MalformedBoardError(f"Board segment has invalid cell values: {sorted(set(bad))}")
    return Board.from_cells(values)


def decode_status(segment: Optional[str]) -> Tuple[bool, Cell]:
    """Best effort: anything unreadable means the game is still running."""
    if segment is None:
        return False, Cell.EMPTY

    values = _ints(segment)
    if values is None or len(values) < 2 or values[0] not in (0, 1) or values[1] not in _CELL_VALUES:
        log.debug("Unreadable status segment %r, assuming game in progress", segment)
        return False, Cell.EMPTY

    return bool(values[0]), Cell(values[1])


def decode_winning_cells(segment: Optional[str]) -> FrozenSet[Coord]:
    if segment is None:
        return frozenset()

    s = segment.strip()
    if s.lower() == DRAW_MARKER:
        return frozenset()

    values = _ints(s)
    if values is None:
        log.debug("Unreadable winning cells %r, ignoring", segment)
        return frozenset()

    # an unpaired trailing value is dropped
    pairs = zip(values[0::2], values[1::2])
    cells = frozenset((r, c) for r, c in pairs if 0 <= r < ROWS and 0 <= c < COLS)
    return cells


def decode(raw: str) -> GameSnapshot:
    parts = (raw or "").strip().split("|", 2)

    board = decode_board(parts[0])
    is_over, winner = decode_status(parts[1] if len(parts) > 1 else None)

    winning: FrozenSet[Coord] = frozenset()
    if is_over and winner != Cell.EMPTY:
        winning = decode_winning_cells(parts[2] if len(parts) > 2 else None)

    return GameSnapshot(board=board, is_over=is_over, winner=winner, winning_cells=winning)


def encode_board(board: Board) -> str:
    return ",".join(str(int(v)) for v in board.cells())


def encode(snapshot: GameSnapshot) -> str:
    """Server-format payload for a snapshot (without the trailing commas)."""
    out = f"{encode_board(snapshot.board)}|{int(snapshot.is_over)},{int(snapshot.winner)}"
    if snapshot.is_draw:
        out += f"|{DRAW_MARKER}"
    elif snapshot.is_won:
        coords = sorted(snapshot.winning_cells)
        out += "|" + ",".join(f"{r},{c}" for r, c in coords)
    return out


def encode_move_request(column: int) -> str:
    # Range checks belong to the caller.
    return urlencode({"column": column})
