from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from ..io.load_history import OUTCOMES


@dataclass(frozen=True)
class Summary:
    games: int
    wins: int
    losses: int
    draws: int
    win_rate: float
    draw_rate: float
    loss_rate: float
    avg_pieces: float | None
    avg_duration_sec: float | None


def _require_cols(df: pd.DataFrame, cols: list[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}. Present: {list(df.columns)}")


def outcome_table(df: pd.DataFrame) -> pd.DataFrame:
    """One row per outcome with count and share, in a fixed order."""
    _require_cols(df, ["outcome"])

    counts = df["outcome"].value_counts().reindex(list(OUTCOMES), fill_value=0)
    out = counts.rename_axis("outcome").reset_index(name="games")
    total = int(out["games"].sum())
    out["share"] = out["games"] / total if total else 0.0
    return out


def _mean_or_none(s: pd.Series) -> float | None:
    s = s.dropna()
    if s.empty:
        return None
    return float(s.mean())


def summarize(df: pd.DataFrame) -> Summary:
    """Results from the human's side: player_one is the local player."""
    table = outcome_table(df).set_index("outcome")["games"]
    games = int(table.sum())
    wins = int(table["player_one"])
    losses = int(table["player_two"])
    draws = int(table["draw"])

    def rate(n: int) -> float:
        return n / games if games else 0.0

    avg_pieces = None
    if {"player_one_pieces", "player_two_pieces"} <= set(df.columns):
        avg_pieces = _mean_or_none(df["player_one_pieces"] + df["player_two_pieces"])

    avg_duration = None
    if "duration_ms" in df.columns:
        ms = _mean_or_none(df["duration_ms"])
        avg_duration = None if ms is None else ms / 1000.0

    return Summary(
        games=games,
        wins=wins,
        losses=losses,
        draws=draws,
        win_rate=rate(wins),
        draw_rate=rate(draws),
        loss_rate=rate(losses),
        avg_pieces=avg_pieces,
        avg_duration_sec=avg_duration,
    )


def rolling_win_rate(df: pd.DataFrame, window: int = 10) -> pd.Series:
    _require_cols(df, ["outcome"])
    wins = (df["outcome"] == "player_one").astype(float)
    return wins.rolling(window, min_periods=1).mean()
