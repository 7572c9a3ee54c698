"""MatchSessionController — the state machine for one live match.

Consumes broker events for a single match id, keeps :class:`MatchSession`
authoritative, owns the countdown clock, and publishes the local player's
moves and actions. Emits events via simple callbacks so the UI / tests can
subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from PyQt6.QtCore import QObject

from chesslink.core.enums import Color, EndReason, GameType, Winner
from chesslink.game.clock import CountdownClock
from chesslink.game.events import (
    CheckmateEvent,
    DrawOfferEvent,
    DrawResponseEvent,
    EventParseError,
    MoveEvent,
    ResignationEvent,
    SessionEvent,
    StateSnapshotEvent,
    parse_event,
)
from chesslink.game.interfaces import GamePhase, TimeControl
from chesslink.game.state import DrawOfferState, MatchResult, MatchSession
from chesslink.net.topics import (
    ACTION_DRAW,
    ACTION_DRAW_RESPONSE,
    ACTION_RESIGN,
    ACTION_TIMEOUT,
    EventKind,
    action_destination,
    event_topic,
    move_destination,
)
from chesslink.net.transport import ITransport, SubscriptionSet
from chesslink.settings import ClientSettings
from chesslink.ui.i18n import t

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

TextCallback = Callable[[str], None]  # status line / user notice
ResultCallback = Callable[[MatchResult], None]
PhaseCallback = Callable[[GamePhase], None]
MoveCallback = Callable[[MoveEvent], None]
DrawOfferCallback = Callable[[DrawOfferState | None], None]
ClockTickCallback = Callable[[int], None]  # seconds remaining


@dataclass
class SessionEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_status: list[TextCallback] = field(default_factory=list)
    on_notice: list[TextCallback] = field(default_factory=list)
    on_position: list[TextCallback] = field(default_factory=list)
    on_move: list[MoveCallback] = field(default_factory=list)
    on_draw_offer: list[DrawOfferCallback] = field(default_factory=list)
    on_result: list[ResultCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_clock_tick: list[ClockTickCallback] = field(default_factory=list)


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ── Controller ───────────────────────────────────────────────────────────────


class MatchSessionController:
    """Reconciles one match against its event stream.

    Turn ownership is always derived from the latest position. Every
    subscription taken in :meth:`enter` is kept in one
    :class:`SubscriptionSet` and released together by :meth:`leave`,
    :meth:`sync_connection` on disconnect, and :meth:`shutdown`.

    Thread-safety: all methods run on the Qt event loop thread, the same
    thread the transport delivers messages on.
    """

    __slots__ = (
        "_transport",
        "_session",
        "_game_type",
        "_subscriptions",
        "_clock",
        "_handlers",
        "_timestamp",
        "_is_entered",
        "_is_shut_down",
        "events",
    )

    def __init__(
        self,
        *,
        transport: ITransport,
        match_id: int,
        player_color: Color,
        game_type: GameType = GameType.STANDARD,
        initial_data: Mapping[str, Any] | None = None,
        settings: ClientSettings | None = None,
        parent: QObject | None = None,
        timestamp: Callable[[], str] = _utc_timestamp,
    ) -> None:
        settings = settings or ClientSettings()
        initial = dict(initial_data or {})

        self._transport = transport
        self._game_type = game_type
        self._session = MatchSession(
            match_id=match_id,
            player_color=player_color,
            position=initial.get("fen") or None,
            status=initial.get("status") or t().status_game_started,
            turn_hint=_turn_hint(initial),
        )
        self._subscriptions = SubscriptionSet()
        self._timestamp = timestamp
        self._is_entered = False
        self._is_shut_down = False
        self.events = SessionEvents()

        self._clock: CountdownClock | None = None
        time_control = TimeControl.for_game_type(game_type, settings.blitz_seconds)
        if time_control is not None:
            self._clock = CountdownClock(
                time_control, tick_ms=settings.clock_tick_ms, parent=parent
            )
            self._clock.events.on_tick.append(self._on_clock_tick)
            self._clock.events.on_expired.append(self._on_clock_expired)
            self._session.time_remaining = self._clock.remaining

        self._handlers: dict[type, Callable[[Any], None]] = {
            MoveEvent: self._on_move,
            ResignationEvent: self._on_resignation,
            DrawOfferEvent: self._on_draw_offer,
            DrawResponseEvent: self._on_draw_response,
            CheckmateEvent: self._on_checkmate,
            StateSnapshotEvent: self._on_state,
        }

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def session(self) -> MatchSession:
        return self._session

    @property
    def match_id(self) -> int:
        return self._session.match_id

    @property
    def player_color(self) -> Color:
        return self._session.player_color

    @property
    def game_type(self) -> GameType:
        return self._game_type

    @property
    def clock(self) -> CountdownClock | None:
        return self._clock

    @property
    def phase(self) -> GamePhase:
        return self._session.phase

    @property
    def is_connected(self) -> bool:
        return self._transport.is_connected

    @property
    def is_my_turn(self) -> bool:
        return self._session.is_my_turn

    @property
    def is_entered(self) -> bool:
        return self._is_entered

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    # ── Lifecycle ────────────────────────────────────────────────────────

    def enter(self) -> bool:
        """Subscribe to every event channel of the match and start the clock.

        Returns False when the transport is down or a subscription fails;
        in that case nothing stays subscribed. Entering again while held
        subscriptions are dead (the transport reconnected behind our back)
        drops them and subscribes afresh.
        """
        if self._is_shut_down:
            return False
        if not self._transport.is_connected:
            _LOGGER.info("Match %s: transport offline, not entering", self.match_id)
            return False
        if self._is_entered:
            if self._subscriptions.is_live:
                return True
            _LOGGER.info("Match %s: subscriptions lost, re-subscribing", self.match_id)
            self.leave()

        for kind in EventKind:
            topic = event_topic(kind, self.match_id)
            subscription = self._transport.subscribe(topic, self._make_handler(kind))
            if subscription is None:
                _LOGGER.error("Match %s: failed to subscribe to %s", self.match_id, topic)
                self._subscriptions.release_all()
                return False
            self._subscriptions.add(subscription)

        self._is_entered = True
        _LOGGER.info(
            "Entered match %s as %s (%s)",
            self.match_id,
            self.player_color,
            self._game_type,
        )
        self._sync_clock()
        return True

    def leave(self) -> None:
        """Release every subscription and pause the clock."""
        released = self._subscriptions.release_all()
        if released:
            _LOGGER.info("Match %s: released %d subscriptions", self.match_id, released)
        self._is_entered = False
        if self._clock is not None:
            self._clock.stop()

    def sync_connection(self) -> bool:
        """Follow the transport: enter when connected, leave when not."""
        if self._transport.is_connected:
            return self.enter()
        self.leave()
        return False

    def shutdown(self) -> None:
        """Discard the session; later messages and :meth:`enter` are ignored."""
        self.leave()
        self._is_shut_down = True

    # ── Inbound ──────────────────────────────────────────────────────────

    def handle_message(self, kind: EventKind, body: str | bytes) -> None:
        """Parse and apply one raw broker message. Never raises on bad input."""
        if self._is_shut_down:
            _LOGGER.debug("Match %s: dropping %s after shutdown", self.match_id, kind.name)
            return
        try:
            event = parse_event(kind, body)
        except EventParseError as exc:
            _LOGGER.warning(
                "Match %s: dropping malformed %s message: %s",
                self.match_id,
                kind.name,
                exc,
            )
            return
        self.dispatch(event)

    def dispatch(self, event: SessionEvent) -> None:
        """Apply an already-parsed event."""
        _LOGGER.debug("Match %s: %r", self.match_id, event)
        self._handlers[type(event)](event)

    # ── Outbound ─────────────────────────────────────────────────────────

    def submit_move(self, move_data: Mapping[str, Any]) -> bool:
        """Publish the local player's move. Returns True if it was sent.

        The turn only flips when the server echoes the move back.
        """
        if not self.is_connected:
            self._notify(t().notice_not_connected)
            return False
        if self._session.is_terminal:
            self._notify(t().notice_game_over)
            return False
        if not self.is_my_turn:
            self._notify(t().notice_not_your_turn)
            return False

        body = {**move_data, **self._envelope()}
        if not self._transport.publish(move_destination(self.match_id), body):
            self._notify(t().notice_not_connected)
            return False
        _LOGGER.info("Match %s: sent move %s", self.match_id, dict(move_data))
        self._set_status(t().status_waiting)
        return True

    def send_action(self, action: str, data: Mapping[str, Any] | None = None) -> bool:
        """Publish a named action request. No local state changes."""
        if not self.is_connected:
            self._notify(t().notice_not_connected)
            return False
        if not self._publish_action(action, data):
            self._notify(t().notice_not_connected)
            return False
        return True

    def resign(self) -> bool:
        if self._session.is_terminal:
            self._notify(t().notice_game_over)
            return False
        return self.send_action(ACTION_RESIGN)

    def offer_draw(self) -> bool:
        if self._session.is_terminal:
            self._notify(t().notice_game_over)
            return False
        return self.send_action(ACTION_DRAW)

    def respond_to_draw(self, accepted: bool) -> bool:
        """Answer the opponent's offer; the offer clears when the server replies."""
        if self._session.is_terminal:
            self._notify(t().notice_game_over)
            return False
        return self.send_action(ACTION_DRAW_RESPONSE, {"accepted": bool(accepted)})

    # ── Event handlers ───────────────────────────────────────────────────

    def _on_move(self, event: MoveEvent) -> None:
        if event.error is not None:
            _LOGGER.error("Match %s: server rejected move: %s", self.match_id, event.error)
            self._notify(t().notice_move_error.format(error=event.error))
            return
        if self._session.is_terminal:
            _LOGGER.info("Match %s: ignoring move after game end", self.match_id)
            return

        if event.position:
            self._set_position(event.position)
        else:
            _LOGGER.warning("Match %s: move update carries no position", self.match_id)

        if event.player_color == self.player_color:
            self._set_status(t().status_waiting)
        else:
            self._set_status(t().status_your_turn)

        if event.move is not None:
            self._session.ledger.record(event.move)

        for cb in self.events.on_move:
            cb(event)

    def _on_resignation(self, event: ResignationEvent) -> None:
        winner = t().winner_name(event.winner)
        result = MatchResult(
            Winner.of(event.winner), EndReason.RESIGNATION, resigned=event.resigned
        )
        if self._finish(result, t().status_over_resignation.format(winner=winner)):
            self._notify(t().notice_resigned.format(winner=winner))

    def _on_draw_offer(self, event: DrawOfferEvent) -> None:
        if self._session.is_terminal:
            return
        if event.from_color == self.player_color:
            return  # our own offer echoed back
        offer = DrawOfferState(event.from_color)
        self._session.draw_offer = offer
        for cb in self.events.on_draw_offer:
            cb(offer)
        self._notify(
            t().notice_draw_offered.format(color=t().color_name(event.from_color))
        )

    def _on_draw_response(self, event: DrawResponseEvent) -> None:
        self._clear_draw_offer()
        if event.accepted:
            result = MatchResult(Winner.DRAW, EndReason.AGREEMENT)
            if self._finish(result, t().status_over_agreement):
                self._notify(t().notice_draw_agreed)
        elif not self._session.is_terminal:
            self._notify(t().notice_draw_declined)

    def _on_checkmate(self, event: CheckmateEvent) -> None:
        winner = t().winner_name(event.winner)
        result = MatchResult(Winner.of(event.winner), EndReason.CHECKMATE)
        if self._finish(result, t().status_over_checkmate.format(winner=winner)):
            self._notify(t().notice_checkmate.format(winner=winner))

    def _on_state(self, event: StateSnapshotEvent) -> None:
        # Only fields present in the snapshot are applied.
        if event.position:
            self._set_position(event.position)
        if event.status and not self._session.is_terminal:
            self._set_status(event.status)
        if event.result:
            result = MatchResult(None, EndReason.REPORTED, description=event.result)
            status = t().status_over_reported.format(result=event.result)
            if self._finish(result, status):
                self._notify(t().notice_game_over_reported.format(result=event.result))

    # ── Clock ────────────────────────────────────────────────────────────

    def _sync_clock(self) -> None:
        if self._clock is None:
            return
        if self._is_entered and self.is_connected and not self._session.is_terminal:
            self._clock.start()
        else:
            self._clock.stop()

    def _on_clock_tick(self, remaining: int) -> None:
        self._session.time_remaining = remaining
        for cb in self.events.on_clock_tick:
            cb(remaining)

    def _on_clock_expired(self) -> None:
        if self._session.is_terminal:
            return
        _LOGGER.info("Match %s: clock expired", self.match_id)
        if not self._publish_action(ACTION_TIMEOUT):
            _LOGGER.warning("Match %s: could not report timeout", self.match_id)
        result = MatchResult(Winner.DRAW, EndReason.TIMEOUT)
        if self._finish(result, t().status_over_timeout):
            self._notify(t().notice_time_expired)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _make_handler(self, kind: EventKind) -> Callable[[str], None]:
        def handler(body: str) -> None:
            self.handle_message(kind, body)

        return handler

    def _envelope(self) -> dict[str, Any]:
        return {
            "playerColor": str(self.player_color),
            "timestamp": self._timestamp(),
            "matchId": self.match_id,
        }

    def _publish_action(
        self, action: str, data: Mapping[str, Any] | None = None
    ) -> bool:
        if not self._transport.is_connected:
            return False
        body = {**(data or {}), "action": action, **self._envelope()}
        sent = self._transport.publish(action_destination(self.match_id, action), body)
        if sent:
            _LOGGER.info("Match %s: sent %s action", self.match_id, action)
        return sent

    def _finish(self, result: MatchResult, status: str) -> bool:
        had_offer = self._session.draw_offer is not None
        if not self._session.set_result(result):
            _LOGGER.info(
                "Match %s already finished; ignoring %s result",
                self.match_id,
                result.reason,
            )
            return False

        if self._clock is not None:
            self._clock.stop()
        _LOGGER.info(
            "Match %s finished: winner=%s reason=%s",
            self.match_id,
            result.winner,
            result.reason,
        )
        self._set_status(status)
        if had_offer:
            for cb in self.events.on_draw_offer:
                cb(None)
        for cb in self.events.on_result:
            cb(result)
        for cb in self.events.on_phase_changed:
            cb(GamePhase.TERMINAL)
        return True

    def _clear_draw_offer(self) -> None:
        if self._session.draw_offer is None:
            return
        self._session.draw_offer = None
        for cb in self.events.on_draw_offer:
            cb(None)

    def _set_position(self, position: str) -> None:
        if position == self._session.position:
            return
        self._session.position = position
        for cb in self.events.on_position:
            cb(position)

    def _set_status(self, status: str) -> None:
        if status == self._session.status:
            return
        self._session.status = status
        for cb in self.events.on_status:
            cb(status)

    def _notify(self, text: str) -> None:
        for cb in self.events.on_notice:
            cb(text)


def _turn_hint(initial: Mapping[str, Any]) -> bool | None:
    for key in ("isMyTurn", "myTurn"):
        value = initial.get(key)
        if value is not None:
            return bool(value)
    return None
