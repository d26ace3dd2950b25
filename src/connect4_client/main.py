from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from connect4_client.config import ClientSettings
from connect4_client.errors import GameClientError
from connect4_client.game.history import GameHistory
from connect4_client.game.orchestrator import MoveOrchestrator, TurnStatus
from connect4_client.game.store import GameStateStore
from connect4_client.net.sync_client import SyncClient
from connect4_client.ui.prompts import NEW_GAME, LineReader, parse_command
from connect4_client.ui.render import render, status_line

log = logging.getLogger(__name__)


class TerminalApp:
    """Terminal front end: redraws on every snapshot or status change, reads commands off-loop."""

    def __init__(self, settings: ClientSettings) -> None:
        self.settings = settings
        self.client = SyncClient(settings.server_url, timeout_sec=settings.timeout_sec)
        self.store = GameStateStore()
        history = GameHistory(settings.history_path) if settings.history_path else None
        self.orchestrator = MoveOrchestrator(
            self.store,
            self.client,
            opponent_delay_sec=settings.opponent_delay_sec,
            reset_delay_sec=settings.reset_delay_sec,
            history=history,
        )
        self.message = ""

        self.store.subscribe(lambda _snapshot: self.redraw())
        self.orchestrator.subscribe(self._on_status)

    def redraw(self) -> None:
        snapshot = self.store.current()
        render(snapshot, status_line(snapshot, self.orchestrator.status), self.message)

    def _on_status(self, status: TurnStatus) -> None:
        if status is TurnStatus.AWAITING_PLAYER and self.orchestrator.last_error is not None:
            self.message = str(self.orchestrator.last_error)
            self.orchestrator.last_error = None
        self.redraw()

    def say(self, message: str) -> None:
        self.message = message
        self.redraw()

    async def run(self) -> int:
        try:
            await self.orchestrator.refresh()
        except GameClientError as e:
            log.warning("Initial sync failed: %s", e)
            self.say(f"Could not reach {self.settings.server_url}: {e}")
        else:
            self.redraw()

        reader = LineReader(asyncio.get_running_loop())
        reader.start()
        try:
            while True:
                raw = await reader.readline()
                if raw is None:
                    break

                try:
                    cmd = parse_command(raw, self.store.current().board.cols)
                except ValueError as e:
                    self.say(str(e))
                    continue

                if cmd is None:
                    break

                self.message = ""
                try:
                    if cmd == NEW_GAME:
                        await self.orchestrator.reset()
                    elif not await self.orchestrator.submit_move(int(cmd)):
                        self.say("Wait for your turn.")
                except GameClientError as e:
                    self.say(str(e))
        finally:
            self.orchestrator.close()
            self.client.close()

        print("Bye.")
        return 0


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="connect4-client", description="Play Connect 4 against a remote game server.")
    ap.add_argument("--server", type=str, default=None, help="Base URL of the game server (default: $CONNECT4_SERVER_URL or http://localhost:8080)")
    ap.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    ap.add_argument("--opponent-delay", type=float, default=None, help="Pause before asking the server for the AI move")
    ap.add_argument("--reset-delay", type=float, default=None, help="How long a finished game stays on screen before a new one starts")
    ap.add_argument("--history", type=str, default=None, help="Append finished games to this CSV file")
    ap.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING, ...")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_argparser().parse_args(argv)

    settings = ClientSettings.from_env().with_overrides(
        server_url=args.server,
        timeout_sec=args.timeout,
        opponent_delay_sec=args.opponent_delay,
        reset_delay_sec=args.reset_delay,
        history_path=args.history,
        log_level=args.log_level.upper() if args.log_level else None,
    )

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return asyncio.run(TerminalApp(settings).run())
    except KeyboardInterrupt:
        print("\nBye.")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
