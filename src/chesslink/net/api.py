"""One-shot REST calls to the game/matchmaking service."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from PyQt6.QtCore import QByteArray, QObject, QUrl
from PyQt6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

from chesslink.core.enums import GameType
from chesslink.settings import ClientSettings

_LOGGER = logging.getLogger(__name__)

# Sentinel returned by the service while the player is queued
QUEUED_MATCH_ID = -1


@dataclass(frozen=True, slots=True)
class ApiReply:
    """Outcome of one request: transport success, HTTP status, JSON payload."""

    ok: bool
    status: int | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def match_id(self) -> int | None:
        """``matchId`` from the payload as an int, or None if absent/invalid."""
        value = self.payload.get("matchId")
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                return int(value)
            except ValueError:
                return None
        return None

    @classmethod
    def failure(cls, error: str, status: int | None = None) -> ApiReply:
        return cls(ok=False, status=status, error=error)


ReplyCallback = Callable[[ApiReply], None]


def parse_reply(status: int | None, body: bytes, error: str | None = None) -> ApiReply:
    """Turn raw reply parts into an :class:`ApiReply`.

    An empty body is a valid acknowledgement. A non-object JSON body or
    undecodable text is a failure.
    """
    if error is not None:
        return ApiReply.failure(error, status)
    if status is not None and not 200 <= status < 300:
        return ApiReply.failure(f"HTTP {status}", status)

    text = body.decode("utf-8", errors="replace").strip()
    if not text:
        return ApiReply(ok=True, status=status)
    try:
        data = json.loads(text)
    except ValueError:
        return ApiReply.failure("Invalid JSON in response", status)
    if not isinstance(data, dict):
        return ApiReply.failure("Unexpected response shape", status)
    return ApiReply(ok=True, status=status, payload=data)


# ── Abstract interface ───────────────────────────────────────────────────────


class IMatchApi(ABC):
    """Matchmaking endpoints. Every call completes through its callback."""

    @abstractmethod
    def create_match(self, game_type: GameType, callback: ReplyCallback) -> None:
        """``POST /game``: create a match or join the queue."""

    @abstractmethod
    def check_match(self, callback: ReplyCallback) -> None:
        """``GET /game/check-match``: poll for an assignment."""

    @abstractmethod
    def cancel_waiting(self, callback: ReplyCallback | None = None) -> None:
        """``POST /game/cancel-waiting``: leave the queue."""

    @abstractmethod
    def logout(self, callback: ReplyCallback | None = None) -> None:
        """``POST /api/logout``: end the user session."""


# ── Qt implementation ────────────────────────────────────────────────────────


class QtMatchApi(IMatchApi):
    """:class:`IMatchApi` over ``QNetworkAccessManager``.

    Replies arrive on the Qt event loop; the manager's cookie jar carries the
    session cookie between calls.
    """

    __slots__ = ("_settings", "_manager", "_pending")

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        parent: QObject | None = None,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._manager = QNetworkAccessManager(parent)
        self._pending: set[QNetworkReply] = set()

    # ── IMatchApi impl ───────────────────────────────────────────────────

    def create_match(self, game_type: GameType, callback: ReplyCallback) -> None:
        self._post("/game", {"gameType": game_type.wire_name}, callback)

    def check_match(self, callback: ReplyCallback) -> None:
        reply = self._manager.get(self._request("/game/check-match"))
        self._track(reply, "/game/check-match", callback)

    def cancel_waiting(self, callback: ReplyCallback | None = None) -> None:
        self._post("/game/cancel-waiting", None, callback)

    def logout(self, callback: ReplyCallback | None = None) -> None:
        self._post("/api/logout", None, callback)

    # ── Extra helpers ────────────────────────────────────────────────────

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def abort_all(self) -> None:
        """Abort in-flight requests; their callbacks receive a failure."""
        for reply in list(self._pending):
            reply.abort()

    # ── Internal ─────────────────────────────────────────────────────────

    def _request(self, path: str) -> QNetworkRequest:
        request = QNetworkRequest(QUrl(self._settings.base_url + path))
        request.setHeader(
            QNetworkRequest.KnownHeaders.ContentTypeHeader, "application/json"
        )
        request.setTransferTimeout(self._settings.request_timeout_ms)
        return request

    def _post(
        self,
        path: str,
        body: dict[str, Any] | None,
        callback: ReplyCallback | None,
    ) -> None:
        data = QByteArray(json.dumps(body).encode("utf-8")) if body else QByteArray()
        reply = self._manager.post(self._request(path), data)
        self._track(reply, path, callback)

    def _track(
        self,
        reply: QNetworkReply,
        path: str,
        callback: ReplyCallback | None,
    ) -> None:
        self._pending.add(reply)
        reply.finished.connect(lambda: self._on_finished(reply, path, callback))

    def _on_finished(
        self,
        reply: QNetworkReply,
        path: str,
        callback: ReplyCallback | None,
    ) -> None:
        self._pending.discard(reply)
        status = reply.attribute(QNetworkRequest.Attribute.HttpStatusCodeAttribute)
        error: str | None = None
        if reply.error() != QNetworkReply.NetworkError.NoError:
            error = reply.errorString()
        result = parse_reply(
            status if isinstance(status, int) else None,
            bytes(reply.readAll().data()),
            error,
        )
        reply.deleteLater()

        if not result.ok:
            _LOGGER.warning("Request %s failed: %s", path, result.error)
        else:
            _LOGGER.debug("Request %s -> %s %s", path, result.status, result.payload)
        if callback is not None:
            callback(result)
