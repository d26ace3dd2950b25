from __future__ import annotations

import argparse
from pathlib import Path

from ..io.load_history import LoadSpec, load_history, load_latest_from_dir
from ..metrics.summarize import outcome_table, summarize
from ..plots.chart import plot_game_lengths, plot_outcomes, plot_win_rate_trend


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="connect4-stats", description="Summarize Connect-4 client game history.")
    ap.add_argument("--csv", type=str, default=None, help="Path to a history CSV. If omitted, uses the newest in --history-dir.")
    ap.add_argument("--history-dir", type=str, default="data/history", help="Directory containing history CSVs")
    ap.add_argument("--pattern", type=str, default="*.csv", help="Glob pattern for selecting the newest file")

    ap.add_argument("--outdir", type=str, default="figures", help="Directory for saving plots")
    ap.add_argument("--show", action="store_true", help="Show plots instead of saving")
    ap.add_argument("--no-plots", action="store_true", help="Print the summary only")
    ap.add_argument("--window", type=int, default=10, help="Rolling window for the win-rate trend")

    return ap


def _fmt(v: float | None, spec: str) -> str:
    return "n/a" if v is None else format(v, spec)


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    if args.csv:
        csv_path = Path(args.csv)
    else:
        csv_path = load_latest_from_dir(Path(args.history_dir), pattern=args.pattern)

    df = load_history(LoadSpec(csv_path=csv_path))

    print(f"\nLoaded: {csv_path}")
    print(f"Games: {len(df):,}")

    print("\n=== Outcomes ===")
    print(outcome_table(df).to_string(index=False))

    s = summarize(df)
    print("\n=== Summary ===")
    print(f"Win rate:   {s.win_rate:.1%}  ({s.wins} won, {s.losses} lost, {s.draws} drawn)")
    print(f"Avg pieces: {_fmt(s.avg_pieces, '.1f')}")
    print(f"Avg length: {_fmt(s.avg_duration_sec, '.1f')} s")

    if args.no_plots:
        return 0

    outdir = Path(args.outdir)
    created = [
        plot_outcomes(df, outdir, show=args.show),
        plot_game_lengths(df, outdir, show=args.show),
        plot_win_rate_trend(df, outdir, window=args.window, show=args.show),
    ]

    if not args.show:
        print(f"\nSaved {sum(p is not None for p in created)} figures to: {outdir.resolve()}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
