from __future__ import annotations

import pytest

from connect4_client.errors import InvalidColumnError
from connect4_client.game.snapshot import GameSnapshot
from connect4_client.game.store import GameStateStore, Rejected
from connect4_client.types import Cell, Move


def test_starts_empty_and_replace_swaps_whole_snapshot(won_snapshot):
    store = GameStateStore()
    assert store.current() == GameSnapshot.empty()

    store.replace(won_snapshot)
    assert store.current() is won_snapshot


def test_optimistic_placement_fills_lowest_row_only():
    store = GameStateStore()
    snap = store.apply_optimistic_placement(Move(2), Cell.PLAYER_ONE)

    assert isinstance(snap, GameSnapshot)
    assert store.current() is snap
    assert snap.board.at(5, 2) == Cell.PLAYER_ONE
    assert snap.board.count(Cell.PLAYER_ONE) == 1
    assert snap.is_over is False
    assert snap.winner == Cell.EMPTY
    assert snap.winning_cells == frozenset()


def test_optimistic_placement_keeps_status_fields(won_snapshot):
    store = GameStateStore(won_snapshot)
    snap = store.apply_optimistic_placement(Move(6), Cell.PLAYER_TWO)

    assert snap.is_over and snap.winner == Cell.PLAYER_ONE
    assert snap.winning_cells == won_snapshot.winning_cells


def test_full_column_is_rejected_without_mutation(make_board):
    full = GameSnapshot(board=make_board([
        "...1...",
        "...2...",
        "...1...",
        "...2...",
        "...1...",
        "...2...",
    ]))
    store = GameStateStore(full)
    seen = []
    store.subscribe(seen.append)

    result = store.apply_optimistic_placement(Move(3), Cell.PLAYER_ONE)

    assert isinstance(result, Rejected)
    assert result.column == 3
    assert store.current() is full
    assert seen == []


def test_out_of_range_column_raises():
    with pytest.raises(InvalidColumnError):
        GameStateStore().apply_optimistic_placement(Move(9), Cell.PLAYER_ONE)


def test_listeners_get_each_new_snapshot_and_errors_are_contained(won_snapshot):
    store = GameStateStore()
    seen = []

    def broken(_snapshot):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(seen.append)

    store.replace(won_snapshot)
    store.apply_optimistic_placement(Move(0), Cell.PLAYER_TWO)
    assert seen[0] is won_snapshot
    assert len(seen) == 2

    store.unsubscribe(seen.append)
    store.replace(GameSnapshot.empty())
    assert len(seen) == 2
