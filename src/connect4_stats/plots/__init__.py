from .chart import (
    plot_game_lengths,
    plot_outcomes,
    plot_win_rate_trend,
)

__all__ = [
    "plot_game_lengths",
    "plot_outcomes",
    "plot_win_rate_trend",
]
