"""GameClient — hands a found match from matchmaking to a live session."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from PyQt6.QtCore import QObject

from chesslink.core.enums import Color, GameType
from chesslink.game.controller import MatchSessionController
from chesslink.game.matchmaking import MatchFoundCallback, MatchmakingController
from chesslink.net.api import IMatchApi, ReplyCallback
from chesslink.net.transport import ITransport
from chesslink.settings import ClientSettings

_LOGGER = logging.getLogger(__name__)

SessionCallback = Callable[[MatchSessionController], None]


@dataclass
class ClientEvents:
    on_match_found: list[MatchFoundCallback] = field(default_factory=list)
    on_session_opened: list[SessionCallback] = field(default_factory=list)
    on_session_closed: list[SessionCallback] = field(default_factory=list)


class GameClient:
    """Top-level owner of the matchmaking controller and the current session.

    Search and session never run together: opening a session cancels any
    search, and at most one session is alive. The host decides the player
    color (it comes with the game data) and calls :meth:`open_session` after
    ``on_match_found``.
    """

    __slots__ = (
        "_api",
        "_transport",
        "_settings",
        "_parent",
        "_matchmaking",
        "_session",
        "events",
    )

    def __init__(
        self,
        *,
        api: IMatchApi,
        transport: ITransport,
        settings: ClientSettings | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._api = api
        self._transport = transport
        self._settings = settings or ClientSettings()
        self._parent = parent
        self._matchmaking = MatchmakingController(
            api=api, settings=self._settings, parent=parent
        )
        self._matchmaking.events.on_match_found.append(self._on_match_found)
        self._session: MatchSessionController | None = None
        self.events = ClientEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def matchmaking(self) -> MatchmakingController:
        return self._matchmaking

    @property
    def session(self) -> MatchSessionController | None:
        return self._session

    # ── Public API ───────────────────────────────────────────────────────

    def start_search(self, game_type: GameType) -> None:
        self._matchmaking.start_search(game_type)

    def open_session(
        self,
        match_id: int,
        player_color: Color,
        *,
        game_type: GameType = GameType.STANDARD,
        initial_data: Mapping[str, Any] | None = None,
    ) -> MatchSessionController:
        """Replace the current session with one for *match_id* and enter it."""
        self._matchmaking.cancel_search()
        self.close_session()

        session = MatchSessionController(
            transport=self._transport,
            match_id=match_id,
            player_color=player_color,
            game_type=game_type,
            initial_data=initial_data,
            settings=self._settings,
            parent=self._parent,
        )
        self._session = session
        for cb in self.events.on_session_opened:
            cb(session)
        session.enter()
        return session

    def close_session(self) -> None:
        session, self._session = self._session, None
        if session is None:
            return
        session.shutdown()
        _LOGGER.info("Closed session for match %s", session.match_id)
        for cb in self.events.on_session_closed:
            cb(session)

    def on_connection_changed(self, connected: bool) -> None:
        """Forward a transport state change to the live session."""
        _LOGGER.info("Transport %s", "connected" if connected else "disconnected")
        if self._session is not None:
            self._session.sync_connection()

    def logout(self, callback: ReplyCallback | None = None) -> None:
        """Tear down search and session, then end the server-side session."""
        self._matchmaking.cancel_search()
        self.shutdown()
        self._api.logout(callback)

    def shutdown(self) -> None:
        self._matchmaking.shutdown()
        self.close_session()

    # ── Internal ─────────────────────────────────────────────────────────

    def _on_match_found(self, match_id: int, game_type: GameType) -> None:
        for cb in self.events.on_match_found:
            cb(match_id, game_type)
