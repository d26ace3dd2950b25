from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import Literal, Optional, TextIO, Union

from connect4_client.types import Move

log = logging.getLogger(__name__)

NEW_GAME: Literal["new"] = "new"

Command = Union[Move, Literal["new"]]


def parse_command(raw: str, cols: int) -> Optional[Command]:
    """
    "1".."7" -> column Move (0-based), "n" -> NEW_GAME, "q" -> None (quit).
    Anything else raises ValueError with a message fit for the status line.
    """
    s = raw.strip().lower()
    if s in {"q", "quit", "exit"}:
        return None
    if s in {"n", "new", "reset"}:
        return NEW_GAME
    if not s.isdigit():
        raise ValueError(f"Invalid input. Enter 1-{cols}, n or q.")
    col = int(s) - 1
    if col < 0 or col >= cols:
        raise ValueError(f"Column must be between 1 and {cols}.")
    return Move(col)


class LineReader(threading.Thread):
    """
    Dedicated stdin thread:
      - reads lines
      - hands them to the event loop's queue
      - None marks end of input

    A daemon, so a blocked read never keeps the process alive after the loop exits.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, stream: Optional[TextIO] = None) -> None:
        super().__init__(name="stdin-reader", daemon=True)
        self._loop = loop
        self._stream = stream if stream is not None else sys.stdin
        self.lines: "asyncio.Queue[Optional[str]]" = asyncio.Queue()

    def run(self) -> None:
        while True:
            try:
                line = self._stream.readline()
            except (OSError, ValueError) as e:
                log.debug("stdin closed: %s", e)
                line = ""

            if not line:
                self._hand_over(None)
                return
            if not self._hand_over(line.rstrip("\r\n")):
                return

    def _hand_over(self, line: Optional[str]) -> bool:
        try:
            self._loop.call_soon_threadsafe(self.lines.put_nowait, line)
        except RuntimeError:
            # Loop already closed; nobody is listening any more.
            return False
        return True

    async def readline(self, prompt: str = "> ") -> Optional[str]:
        if prompt:
            print(prompt, end="", flush=True)
        return await self.lines.get()
