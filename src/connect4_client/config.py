# src/connect4_client/config.py

from __future__ import annotations

import os
from dataclasses import dataclass, replace

ROWS = 6
COLS = 7

# Wire protocol
DEFAULT_SERVER_URL = "http://localhost:8080"
DRAW_MARKER = "draw"
REQUEST_TIMEOUT_SEC = 5.0

# Pacing
OPPONENT_DELAY_SEC = 1.0   # short pause so opponent moves aren't instant
AUTO_RESET_DELAY_SEC = 2.0  # how long the result stays on screen

# UI toggles
USE_COLOR = True
CLEAR_SCREEN = True

LOG_LEVEL = "WARNING"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class ClientSettings:
    server_url: str = DEFAULT_SERVER_URL
    timeout_sec: float = REQUEST_TIMEOUT_SEC
    opponent_delay_sec: float = OPPONENT_DELAY_SEC
    reset_delay_sec: float = AUTO_RESET_DELAY_SEC
    history_path: str | None = None
    log_level: str = LOG_LEVEL

    @classmethod
    def from_env(cls) -> "ClientSettings":
        return cls(
            server_url=os.environ.get("CONNECT4_SERVER_URL", DEFAULT_SERVER_URL),
            timeout_sec=_env_float("CONNECT4_TIMEOUT_SEC", REQUEST_TIMEOUT_SEC),
            opponent_delay_sec=_env_float("CONNECT4_OPPONENT_DELAY_SEC", OPPONENT_DELAY_SEC),
            reset_delay_sec=_env_float("CONNECT4_RESET_DELAY_SEC", AUTO_RESET_DELAY_SEC),
            history_path=os.environ.get("CONNECT4_HISTORY") or None,
            log_level=os.environ.get("CONNECT4_LOG_LEVEL", LOG_LEVEL).upper(),
        )

    def with_overrides(self, **changes: object) -> "ClientSettings":
        # None means "not given on the command line"
        given = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **given)
