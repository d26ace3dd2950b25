# src/connect4_client/net/sync_client.py

from __future__ import annotations

import logging
from typing import Optional

import requests

from connect4_client.config import DEFAULT_SERVER_URL, REQUEST_TIMEOUT_SEC
from connect4_client.errors import TransportError
from connect4_client.game.snapshot import GameSnapshot
from connect4_client.net.codec import decode, encode_move_request

log = logging.getLogger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class SyncClient:
    """
    One method per server endpoint. Each call either returns a decoded snapshot
    or raises TransportError; retrying is the orchestrator's business.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_SERVER_URL,
        *,
        timeout_sec: float = REQUEST_TIMEOUT_SEC,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self._session = session if session is not None else requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> str:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self.timeout_sec, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if not resp.ok:
            raise TransportError(
                f"{method} {path} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        log.debug("%s %s -> %s %r", method, path, resp.status_code, resp.text)
        return resp.text

    def fetch_state(self) -> GameSnapshot:
        return decode(self._request("GET", "/board"))

    def post_move(self, column: int) -> GameSnapshot:
        body = encode_move_request(column)
        return decode(self._request("POST", "/move", data=body, headers=FORM_HEADERS))

    def post_opponent_move(self) -> GameSnapshot:
        return decode(self._request("POST", "/ai-move"))

    def reset_game(self) -> None:
        self._request("POST", "/reset", headers=FORM_HEADERS)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "SyncClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
