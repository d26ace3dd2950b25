from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import pandas as pd


REQUIRED_COLS = ["outcome"]

NUMERIC_COLS = [
    "player_one_pieces",
    "player_two_pieces",
    "duration_ms",
]

OUTCOMES = ("player_one", "player_two", "draw")


@dataclass(frozen=True)
class LoadSpec:
    csv_path: Path
    required_cols: tuple[str, ...] = tuple(REQUIRED_COLS)


def _coerce_numeric(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    out = df.copy()
    for c in cols:
        if c in out.columns:
            out[c] = pd.to_numeric(out[c], errors="coerce")
    return out


def load_history(spec: LoadSpec) -> pd.DataFrame:
    if not spec.csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {spec.csv_path}")

    df = pd.read_csv(spec.csv_path)
    df.columns = [c.strip() for c in df.columns]

    missing = [c for c in spec.required_cols if c not in df.columns]
    if missing:
        raise ValueError(f"CSV missing required columns {missing}. Columns: {list(df.columns)}")

    df = _coerce_numeric(df, NUMERIC_COLS)

    # Keep only rows with a known outcome
    df["outcome"] = df["outcome"].astype(str).str.strip().str.lower()
    df = df[df["outcome"].isin(OUTCOMES)].copy()

    if "ended_at" in df.columns:
        df["ended_at"] = pd.to_datetime(df["ended_at"], errors="coerce")

    return df.reset_index(drop=True)


def load_latest_from_dir(history_dir: Path, pattern: str = "*.csv") -> Path:
    if not history_dir.exists():
        raise FileNotFoundError(f"History directory not found: {history_dir}")

    files = sorted(history_dir.glob(pattern), key=lambda p: p.stat().st_mtime)
    if not files:
        raise FileNotFoundError(f"No files matching {pattern} in {history_dir}")

    return files[-1]
