from __future__ import annotations

import csv
import logging
import time
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from connect4_client.game.snapshot import GameSnapshot
from connect4_client.types import Cell

log = logging.getLogger(__name__)

OUTCOMES = {
    Cell.EMPTY: "draw",
    Cell.PLAYER_ONE: "player_one",
    Cell.PLAYER_TWO: "player_two",
}


@dataclass(frozen=True)
class GameRecord:
    ended_at: str
    outcome: str
    player_one_pieces: int
    player_two_pieces: int
    duration_ms: int

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot, started_at: float, ended_at: float) -> "GameRecord":
        if not snapshot.is_over:
            raise ValueError("Only finished games can be recorded.")
        return cls(
            ended_at=time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(ended_at)),
            outcome=OUTCOMES[snapshot.winner],
            player_one_pieces=snapshot.board.count(Cell.PLAYER_ONE),
            player_two_pieces=snapshot.board.count(Cell.PLAYER_TWO),
            duration_ms=max(0, int((ended_at - started_at) * 1000)),
        )


COLUMNS = [f.name for f in fields(GameRecord)]


class GameHistory:
    """Appends one CSV row per finished game. Header is written when the file is new."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def append(self, record: GameRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        is_new = not self.path.exists() or self.path.stat().st_size == 0

        with open(self.path, "a", newline="") as f:
            w = csv.DictWriter(f, fieldnames=COLUMNS)
            if is_new:
                w.writeheader()
            w.writerow(asdict(record))

        log.info("Recorded %s game in %s", record.outcome, self.path)
