from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, List, Optional, Protocol

from connect4_client.config import AUTO_RESET_DELAY_SEC, OPPONENT_DELAY_SEC
from connect4_client.errors import (
    ColumnFullError,
    GameClientError,
    InvalidColumnError,
    MalformedBoardError,
    MoveSubmissionFailed,
    ResetFailed,
    TransportError,
)
from connect4_client.game.history import GameHistory, GameRecord
from connect4_client.game.snapshot import GameSnapshot
from connect4_client.game.store import GameStateStore, Rejected
from connect4_client.types import Cell, Move

log = logging.getLogger(__name__)

# Failures that end in an authoritative re-fetch rather than a crash.
SYNC_ERRORS = (TransportError, MalformedBoardError)


class TurnStatus(Enum):
    AWAITING_PLAYER = "awaiting_player"
    PLAYER_MOVE_IN_FLIGHT = "player_move_in_flight"
    OPPONENT_THINKING = "opponent_thinking"
    OPPONENT_MOVE_IN_FLIGHT = "opponent_move_in_flight"
    GAME_OVER = "game_over"


class GameServer(Protocol):
    """What the orchestrator needs from a sync client. Calls are blocking."""

    def fetch_state(self) -> GameSnapshot: ...
    def post_move(self, column: int) -> GameSnapshot: ...
    def post_opponent_move(self) -> GameSnapshot: ...
    def reset_game(self) -> None: ...


StatusListener = Callable[[TurnStatus], None]


class MoveOrchestrator:
    """
    Turn-taking state machine between the human player and the server-side opponent.

      AWAITING_PLAYER -> PLAYER_MOVE_IN_FLIGHT -> OPPONENT_THINKING
        -> OPPONENT_MOVE_IN_FLIGHT -> AWAITING_PLAYER

    Any decoded terminal snapshot moves to GAME_OVER and arms the auto-reset.
    reset() is accepted from every state and always ends in AWAITING_PLAYER.

    Runs on one asyncio loop. Blocking server calls go through asyncio.to_thread.
    Each reset bumps an epoch; work armed under an older epoch drops its results.
    """

    def __init__(
        self,
        store: GameStateStore,
        client: GameServer,
        *,
        human: Cell = Cell.PLAYER_ONE,
        opponent_delay_sec: float = OPPONENT_DELAY_SEC,
        reset_delay_sec: float = AUTO_RESET_DELAY_SEC,
        history: Optional[GameHistory] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.client = client
        self.human = human
        self.opponent_delay_sec = opponent_delay_sec
        self.reset_delay_sec = reset_delay_sec
        self.history = history
        self._clock = clock

        self._status = TurnStatus.AWAITING_PLAYER
        self._epoch = 0
        self._syncing = 0  # refresh/reset round trips outstanding; no moves meanwhile
        self._pending_reset: Optional[asyncio.Task[None]] = None
        self._opponent_task: Optional[asyncio.Task[None]] = None
        self._listeners: List[StatusListener] = []
        self._game_started_at = clock()

        self.last_error: Optional[GameClientError] = None

    # ---------- read side ----------

    @property
    def status(self) -> TurnStatus:
        return self._status

    @property
    def pending_reset(self) -> Optional[asyncio.Task[None]]:
        return self._pending_reset

    def can_submit(self) -> bool:
        return self._status is TurnStatus.AWAITING_PLAYER and not self._syncing

    def subscribe(self, callback: StatusListener) -> None:
        self._listeners.append(callback)

    def unsubscribe(self, callback: StatusListener) -> None:
        self._listeners = [cb for cb in self._listeners if cb != callback]

    def _set_status(self, status: TurnStatus) -> None:
        if status is self._status:
            return
        log.debug("Turn status %s -> %s", self._status.name, status.name)
        self._status = status
        for cb in list(self._listeners):
            try:
                cb(status)
            except Exception:
                log.exception("Status listener %r failed", cb)

    # ---------- operations ----------

    async def refresh(self) -> bool:
        """
        Pull the server's current state (startup, or a manual resync).
        Refused while a move is in flight or the opponent is up. Moves are
        refused until the fetch has landed.
        """
        if self._syncing or self._status not in (TurnStatus.AWAITING_PLAYER, TurnStatus.GAME_OVER):
            return False

        epoch = self._epoch
        self._syncing += 1
        try:
            snapshot = await asyncio.to_thread(self.client.fetch_state)
        finally:
            self._syncing -= 1
        if epoch != self._epoch:
            return False

        self.store.replace(snapshot)
        self._settle()
        return True

    async def submit_move(self, column: int) -> bool:
        """
        Play the human move in `column`.

        Returns False without side effects unless it is the player's turn
        and no refresh or reset is outstanding.
        Raises InvalidColumnError / ColumnFullError before anything is sent,
        MoveSubmissionFailed after a failed round trip (state already resynced).
        """
        if not self.can_submit():
            return False

        before = self.store.current()
        cols = before.board.cols
        if not 0 <= column < cols:
            raise InvalidColumnError(column, cols)

        # Guard first, so repeated input can't slip a second move in.
        self._set_status(TurnStatus.PLAYER_MOVE_IN_FLIGHT)

        placed = self.store.apply_optimistic_placement(Move(column), self.human)
        if isinstance(placed, Rejected):
            self._set_status(TurnStatus.AWAITING_PLAYER)
            raise ColumnFullError(column)

        epoch = self._epoch
        try:
            snapshot = await asyncio.to_thread(self.client.post_move, column)
        except SYNC_ERRORS as e:
            if epoch != self._epoch:
                log.debug("Dropping failed move from an abandoned game: %s", e)
                return False
            log.warning("Move in column %d failed: %s; resynchronizing", column + 1, e)
            await self._resync(epoch, fallback=before)
            if epoch == self._epoch:
                self._settle()
            raise MoveSubmissionFailed(f"Move in column {column + 1} failed: {e}") from e

        if epoch != self._epoch:
            log.debug("Dropping move response from an abandoned game")
            return False

        self.store.replace(snapshot)
        if snapshot.is_over:
            self._finish(snapshot)
        else:
            self._set_status(TurnStatus.OPPONENT_THINKING)
            self._opponent_task = asyncio.create_task(self._opponent_turn(epoch))
        return True

    async def _opponent_turn(self, epoch: int) -> None:
        # The delay is pacing only; it is not cancelled, a reset just makes it stale.
        await asyncio.sleep(self.opponent_delay_sec)
        if epoch != self._epoch:
            return

        self._set_status(TurnStatus.OPPONENT_MOVE_IN_FLIGHT)
        try:
            snapshot = await asyncio.to_thread(self.client.post_opponent_move)
        except SYNC_ERRORS as e:
            if epoch != self._epoch:
                return
            log.warning("Opponent move failed: %s; resynchronizing", e)
            self.last_error = e
            await self._resync(epoch, fallback=None)
            if epoch == self._epoch:
                self._settle()
            return

        if epoch != self._epoch:
            return

        self.store.replace(snapshot)
        if snapshot.is_over:
            self._finish(snapshot)
        else:
            self._set_status(TurnStatus.AWAITING_PLAYER)

    async def reset(self) -> None:
        """Hard abort: start a new game on the server no matter what is going on locally."""
        self._cancel_pending_reset()
        await self._reset()

    async def _reset(self) -> None:
        self._epoch += 1
        epoch = self._epoch
        self._syncing += 1
        try:
            await asyncio.to_thread(self.client.reset_game)
            snapshot = await asyncio.to_thread(self.client.fetch_state)
        except SYNC_ERRORS as e:
            if epoch == self._epoch:
                self._set_status(TurnStatus.AWAITING_PLAYER)
            raise ResetFailed(f"Could not start a new game: {e}") from e
        finally:
            self._syncing -= 1

        if epoch != self._epoch:
            return

        self.store.replace(snapshot)
        self._game_started_at = self._clock()
        self._set_status(TurnStatus.AWAITING_PLAYER)

    async def wait_idle(self) -> None:
        """Wait until a scheduled opponent turn (if any) has finished."""
        task = self._opponent_task
        if task is not None:
            await task

    def close(self) -> None:
        self._cancel_pending_reset()

    # ---------- internals ----------

    async def _resync(self, epoch: int, fallback: Optional[GameSnapshot]) -> None:
        """Replace local state with the server's. If that fails too, fall back to `fallback`."""
        try:
            snapshot = await asyncio.to_thread(self.client.fetch_state)
        except SYNC_ERRORS as e:
            log.warning("Authoritative re-fetch failed: %s", e)
            if fallback is not None and epoch == self._epoch:
                self.store.replace(fallback)
            return

        if epoch == self._epoch:
            self.store.replace(snapshot)

    def _settle(self) -> None:
        # Resting status for whatever the store holds; a finished board is
        # not recorded here since its start time may be unknown.
        current = self.store.current()
        if current.is_over:
            self._finish(current, record=False)
        else:
            self._set_status(TurnStatus.AWAITING_PLAYER)

    def _finish(self, snapshot: GameSnapshot, record: bool = True) -> None:
        self._set_status(TurnStatus.GAME_OVER)
        if record:
            self._record(snapshot)
        self._arm_auto_reset()

    def _record(self, snapshot: GameSnapshot) -> None:
        if self.history is None:
            return
        rec = GameRecord.from_snapshot(snapshot, self._game_started_at, self._clock())
        try:
            self.history.append(rec)
        except OSError as e:
            log.warning("Could not write game history to %s: %s", self.history.path, e)

    def _arm_auto_reset(self) -> None:
        if self._pending_reset is not None and not self._pending_reset.done():
            return
        self._pending_reset = asyncio.create_task(self._auto_reset_after(self.reset_delay_sec))

    def _cancel_pending_reset(self) -> None:
        task = self._pending_reset
        self._pending_reset = None
        if task is not None and not task.done():
            log.debug("Cancelling pending auto-reset")
            task.cancel()

    async def _auto_reset_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        # From here on this task is the reset, not a cancellable timer.
        self._pending_reset = None
        try:
            await self._reset()
        except ResetFailed as e:
            log.warning("Automatic reset failed: %s", e)
            self.last_error = e
