from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from connect4_client.config import ROWS, COLS
from connect4_client.errors import ColumnFullError, InvalidColumnError
from connect4_client.types import Cell, Move

Grid = Tuple[Tuple[Cell, ...], ...]


def _empty_grid(rows: int, cols: int) -> Grid:
    return tuple(tuple(Cell.EMPTY for _ in range(cols)) for _ in range(rows))


@dataclass(frozen=True, slots=True)
class Board:
    """
    Immutable grid. Row 0 is the top row, so a column is full when row 0 is taken.
    Every "mutation" returns a new Board.
    """
    rows: int = ROWS
    cols: int = COLS
    grid: Grid = field(default=())

    def __post_init__(self) -> None:
        if not self.grid:
            object.__setattr__(self, "grid", _empty_grid(self.rows, self.cols))

    @classmethod
    def empty(cls, rows: int = ROWS, cols: int = COLS) -> "Board":
        return cls(rows, cols)

    @classmethod
    def from_cells(cls, values: Iterable[int], rows: int = ROWS, cols: int = COLS) -> "Board":
        """Build from a row-major flat sequence of rows * cols cell values."""
        flat = [Cell(v) for v in values]
        if len(flat) != rows * cols:
            raise ValueError(f"Expected {rows * cols} cells, got {len(flat)}.")
        grid = tuple(tuple(flat[r * cols:(r + 1) * cols]) for r in range(rows))
        return cls(rows, cols, grid)

    def cells(self) -> List[Cell]:
        return [cell for row in self.grid for cell in row]

    def at(self, row: int, col: int) -> Cell:
        return self.grid[row][col]

    def _check_col(self, col: Move) -> int:
        c = int(col)
        if c < 0 or c >= self.cols:
            raise InvalidColumnError(c, self.cols)
        return c

    def lowest_empty_row(self, col: Move) -> int | None:
        c = self._check_col(col)
        for r in range(self.rows - 1, -1, -1):
            if self.grid[r][c] == Cell.EMPTY:
                return r
        return None

    def drop(self, col: Move, player: Cell) -> "Board":
        r = self.lowest_empty_row(col)
        if r is None:
            raise ColumnFullError(int(col))

        c = int(col)
        row = list(self.grid[r])
        row[c] = player
        grid = self.grid[:r] + (tuple(row),) + self.grid[r + 1:]
        return Board(self.rows, self.cols, grid)

    def valid_moves(self) -> List[Move]:
        return [Move(c) for c in range(self.cols) if self.grid[0][c] == Cell.EMPTY]

    def is_full(self) -> bool:
        return all(self.grid[0][c] != Cell.EMPTY for c in range(self.cols))

    def count(self, player: Cell) -> int:
        return sum(1 for cell in self.cells() if cell == player)
