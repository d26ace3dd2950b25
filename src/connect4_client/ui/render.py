from __future__ import annotations
from typing import List

from connect4_client.config import CLEAR_SCREEN, USE_COLOR
from connect4_client.game.orchestrator import TurnStatus
from connect4_client.game.snapshot import GameSnapshot
from connect4_client.types import Cell
from connect4_client.ui.colors import c, BOLD, DIM, FG_CYAN, FG_GRAY, FG_RED, FG_YELLOW, REVERSE

HUMAN_LABEL = "You"
OPPONENT_LABEL = "AI"


def _piece(cell: Cell, color: bool) -> str:
    if cell == Cell.EMPTY:
        return c("·", FG_GRAY, color)
    if cell == Cell.PLAYER_ONE:
        return c("X", FG_YELLOW, color)
    return c("O", FG_RED, color)


def status_line(snapshot: GameSnapshot, status: TurnStatus) -> str:
    if snapshot.is_draw:
        return "Draw game."
    if snapshot.is_won:
        return f"{HUMAN_LABEL} win!" if snapshot.winner == Cell.PLAYER_ONE else f"{OPPONENT_LABEL} wins!"
    if status in (TurnStatus.OPPONENT_THINKING, TurnStatus.OPPONENT_MOVE_IN_FLIGHT):
        return f"{OPPONENT_LABEL} is thinking..."
    if status is TurnStatus.PLAYER_MOVE_IN_FLIGHT:
        return "Sending move..."
    return "Your turn - drop a piece!"


def format_board(snapshot: GameSnapshot, status: str = "", message: str = "", color: bool = USE_COLOR) -> str:
    board = snapshot.board
    lines: List[str] = [c("CONNECT 4", BOLD, color)]
    lines.append(c(status, FG_CYAN, color) if status else "")

    nums = "   " + " ".join(str(i + 1) for i in range(board.cols))
    lines.append(c(nums, DIM, color))

    for r in range(board.rows):
        parts = []
        for col in range(board.cols):
            p = _piece(board.at(r, col), color)
            if (r, col) in snapshot.winning_cells:
                p = f"{REVERSE}{p}\033[0m" if color else "*"
            parts.append(p)
        lines.append(" | " + " ".join(parts) + " |")

    lines.append(c("   " + "—" * (2 * board.cols - 1), DIM, color))
    if message:
        lines.append(message)
    lines.append(c(f"   Enter 1-{board.cols} to drop, n for a new game, q to quit.", DIM, color))
    return "\n".join(lines)


def clear_screen() -> None:
    if CLEAR_SCREEN:
        print("\033[2J\033[H", end="")


def render(snapshot: GameSnapshot, status: str = "", message: str = "") -> None:
    clear_screen()
    print(format_board(snapshot, status, message))
