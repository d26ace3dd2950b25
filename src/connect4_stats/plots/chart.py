from __future__ import annotations

from pathlib import Path

import pandas as pd
import matplotlib.pyplot as plt

from ..metrics.summarize import outcome_table, rolling_win_rate


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _finish(fig, outdir: Path, filename: str, *, show: bool) -> Path | None:
    if show:
        plt.show()
        return None
    _ensure_dir(outdir)
    out = outdir / filename
    fig.savefig(out, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return out


def plot_outcomes(df: pd.DataFrame, outdir: Path, *, show: bool) -> Path | None:
    table = outcome_table(df)

    fig = plt.figure()
    plt.bar(table["outcome"], table["games"])
    plt.title("Outcomes")
    plt.xlabel("outcome")
    plt.ylabel("games")

    return _finish(fig, outdir, "outcomes.png", show=show)


def plot_game_lengths(df: pd.DataFrame, outdir: Path, *, show: bool) -> Path | None:
    cols = ["player_one_pieces", "player_two_pieces"]
    if any(c not in df.columns for c in cols):
        return None

    pieces = (df[cols[0]] + df[cols[1]]).dropna()
    if pieces.empty:
        return None

    fig = plt.figure()
    plt.hist(pieces, bins=range(0, 44, 2))
    plt.title("Game length")
    plt.xlabel("pieces on board at the end")
    plt.ylabel("games")

    return _finish(fig, outdir, "game_lengths.png", show=show)


def plot_win_rate_trend(df: pd.DataFrame, outdir: Path, *, window: int, show: bool) -> Path | None:
    if df.empty:
        return None

    trend = rolling_win_rate(df, window=window)

    fig = plt.figure()
    plt.plot(range(1, len(trend) + 1), trend.values)
    plt.ylim(0, 1)
    plt.title(f"Win rate (rolling {window} games)")
    plt.xlabel("game")
    plt.ylabel("win rate")

    return _finish(fig, outdir, "win_rate_trend.png", show=show)
