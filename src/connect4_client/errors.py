# src/connect4_client/errors.py

from __future__ import annotations


class GameClientError(Exception):
    """Base class for everything the client raises on purpose."""


class MalformedBoardError(GameClientError, ValueError):
    """Board segment of a server payload has the wrong cell count or a bad value."""


class InvalidColumnError(GameClientError, ValueError):
    def __init__(self, column: int, cols: int) -> None:
        super().__init__(f"Column must be between 1 and {cols}.")
        self.column = column


class ColumnFullError(GameClientError, ValueError):
    def __init__(self, column: int) -> None:
        super().__init__(f"Column {column + 1} is full.")
        self.column = column


class TransportError(GameClientError):
    """Non-2xx response or network failure talking to the game server."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MoveSubmissionFailed(GameClientError):
    """A move round trip failed; local state has already been resynchronized."""


class ResetFailed(GameClientError):
    pass
