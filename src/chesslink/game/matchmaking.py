"""MatchmakingController — finds an opponent through the REST queue.

``IDLE -> SEARCHING -> FOUND | TIMED_OUT | CANCELLED``. A queued search is
polled once per interval and bounded by both a poll budget and a hard
deadline timer; whichever trips first ends the search exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from PyQt6.QtCore import QObject, QTimer

from chesslink.core.enums import GameType
from chesslink.game.interfaces import SearchPhase
from chesslink.net.api import QUEUED_MATCH_ID, ApiReply, IMatchApi
from chesslink.settings import ClientSettings
from chesslink.ui.i18n import t

_LOGGER = logging.getLogger(__name__)

MatchFoundCallback = Callable[[int, GameType], None]
SearchPhaseCallback = Callable[[SearchPhase], None]
NoticeCallback = Callable[[str], None]
PollCallback = Callable[[int], None]  # polls so far


@dataclass
class SearchEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_match_found: list[MatchFoundCallback] = field(default_factory=list)
    on_phase_changed: list[SearchPhaseCallback] = field(default_factory=list)
    on_notice: list[NoticeCallback] = field(default_factory=list)
    on_poll: list[PollCallback] = field(default_factory=list)


class MatchmakingController:
    """Owns the poll and deadline timers of one search at a time.

    Replies are tagged with the search generation that issued them, so a
    reply arriving after cancel, timeout or shutdown is ignored.
    """

    __slots__ = (
        "__weakref__",
        "_api",
        "_settings",
        "_phase",
        "_game_type",
        "_elapsed_polls",
        "_search_id",
        "_poll_timer",
        "_deadline_timer",
        "events",
    )

    def __init__(
        self,
        *,
        api: IMatchApi,
        settings: ClientSettings | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._api = api
        self._settings = settings or ClientSettings()
        self._phase = SearchPhase.IDLE
        self._game_type: GameType | None = None
        self._elapsed_polls = 0
        self._search_id = 0
        self.events = SearchEvents()

        self._poll_timer = QTimer(parent)
        self._poll_timer.setInterval(self._settings.poll_interval_ms)
        self._poll_timer.timeout.connect(self._on_poll_tick)

        self._deadline_timer = QTimer(parent)
        self._deadline_timer.setSingleShot(True)
        self._deadline_timer.setInterval(self._settings.search_deadline_ms)
        self._deadline_timer.timeout.connect(self._on_deadline)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def phase(self) -> SearchPhase:
        return self._phase

    @property
    def game_type(self) -> GameType | None:
        """Variant being searched, or None when not searching."""
        return self._game_type

    @property
    def elapsed_polls(self) -> int:
        return self._elapsed_polls

    @property
    def is_searching(self) -> bool:
        return self._phase == SearchPhase.SEARCHING

    @property
    def is_polling(self) -> bool:
        return self._poll_timer.isActive()

    @property
    def has_deadline(self) -> bool:
        return self._deadline_timer.isActive()

    # ── Public API ───────────────────────────────────────────────────────

    def start_search(self, game_type: GameType) -> None:
        """Start looking for an opponent; the same variant again cancels."""
        if self.is_searching:
            if game_type == self._game_type:
                self.cancel_search()
            else:
                _LOGGER.info(
                    "Ignoring %s search while %s search is running",
                    game_type,
                    self._game_type,
                )
            return

        self._search_id += 1
        search_id = self._search_id
        self._game_type = game_type
        self._elapsed_polls = 0
        self._set_phase(SearchPhase.SEARCHING)
        _LOGGER.info("Requesting %s match", game_type)
        self._api.create_match(
            game_type, lambda reply: self._on_create_reply(search_id, reply)
        )

    def cancel_search(self) -> None:
        """Abandon the running search and release the queue position."""
        if not self.is_searching:
            return
        _LOGGER.info("Cancelling %s search", self._game_type)
        self._end_search()
        self._api.cancel_waiting(self._on_cancel_reply)
        self._set_phase(SearchPhase.CANCELLED)
        self._set_phase(SearchPhase.IDLE)

    def shutdown(self) -> None:
        """Release both timers unconditionally."""
        self._poll_timer.stop()
        self._deadline_timer.stop()
        self._search_id += 1
        if self.is_searching:
            self._game_type = None
            self._elapsed_polls = 0
            self._phase = SearchPhase.IDLE

    # ── Reply handlers ───────────────────────────────────────────────────

    def _on_create_reply(self, search_id: int, reply: ApiReply) -> None:
        if search_id != self._search_id or not self.is_searching:
            _LOGGER.debug("Ignoring stale create-match reply")
            return

        match_id = reply.match_id if reply.ok else None
        if match_id is not None and match_id > 0:
            self._found(match_id)
        elif match_id == QUEUED_MATCH_ID:
            _LOGGER.info("Queued for %s match; polling", self._game_type)
            self._poll_timer.start()
            self._deadline_timer.start()
        else:
            self._end_search()
            self._set_phase(SearchPhase.IDLE)
            if reply.ok:
                _LOGGER.warning("Unexpected create-match reply: %s", reply.payload)
                self._notify(t().notice_match_failed)
            else:
                _LOGGER.error("Create-match request failed: %s", reply.error)
                self._notify(t().notice_search_failed.format(msg=reply.error))

    def _on_poll_reply(self, search_id: int, reply: ApiReply) -> None:
        if search_id != self._search_id or not self.is_searching:
            return
        if not reply.ok:
            _LOGGER.warning("Match poll failed: %s", reply.error)
            return
        match_id = reply.match_id
        if match_id is not None and match_id > 0:
            self._found(match_id)

    def _on_cancel_reply(self, reply: ApiReply) -> None:
        if not reply.ok:
            _LOGGER.error("Cancel-waiting request failed: %s", reply.error)

    # ── Timers ───────────────────────────────────────────────────────────

    def _on_poll_tick(self) -> None:
        if not self.is_searching:
            self._poll_timer.stop()
            return

        self._elapsed_polls += 1
        for cb in self.events.on_poll:
            cb(self._elapsed_polls)
        if self._elapsed_polls >= self._settings.max_poll_attempts:
            self._time_out()
            return

        search_id = self._search_id
        self._api.check_match(lambda reply: self._on_poll_reply(search_id, reply))

    def _on_deadline(self) -> None:
        if self.is_searching:
            self._time_out()

    # ── Internal helpers ─────────────────────────────────────────────────

    def _found(self, match_id: int) -> None:
        game_type = self._game_type
        self._end_search()
        _LOGGER.info("Match %s found (%s)", match_id, game_type)
        self._set_phase(SearchPhase.FOUND)
        if game_type is None:
            return
        for cb in self.events.on_match_found:
            cb(match_id, game_type)

    def _time_out(self) -> None:
        _LOGGER.info("No opponent found for %s search", self._game_type)
        self._end_search()
        self._api.cancel_waiting(self._on_cancel_reply)
        self._set_phase(SearchPhase.TIMED_OUT)
        self._notify(
            t().notice_no_opponent.format(
                seconds=self._settings.search_deadline_ms // 1000
            )
        )

    def _end_search(self) -> None:
        """Stop both timers and invalidate in-flight replies."""
        self._poll_timer.stop()
        self._deadline_timer.stop()
        self._search_id += 1
        self._game_type = None
        self._elapsed_polls = 0

    def _set_phase(self, phase: SearchPhase) -> None:
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _notify(self, text: str) -> None:
        for cb in self.events.on_notice:
            cb(text)
