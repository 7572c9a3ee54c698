"""Inbound match events: one dataclass per channel and a strict parser.

Every broker message is decoded into exactly one member of
:data:`SessionEvent`. Anything that does not fit raises
:class:`EventParseError`; the session drops such messages.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from chesslink.core.enums import Color
from chesslink.net.topics import EventKind

MOVE_ERROR_PREFIX = "ERROR:"


class EventParseError(ValueError):
    """A message body could not be decoded into an event."""


@dataclass(frozen=True, slots=True)
class MovePayload:
    """The ``move`` object inside a move update."""

    piece: str
    move_to: str
    fen: str | None = None
    clock_note: str | None = None  # ``tc``
    time_note: str | None = None  # ``tr``

    @property
    def is_white(self) -> bool:
        """Uppercase piece letters are White's."""
        return self.piece != self.piece.lower()


@dataclass(frozen=True, slots=True)
class MoveEvent:
    kind = EventKind.MOVE

    player_color: Color | None = None
    position: str | None = None
    move: MovePayload | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ResignationEvent:
    kind = EventKind.RESIGNATION

    winner: Color
    resigned: Color | None = None


@dataclass(frozen=True, slots=True)
class DrawOfferEvent:
    kind = EventKind.DRAW_OFFER

    from_color: Color


@dataclass(frozen=True, slots=True)
class DrawResponseEvent:
    kind = EventKind.DRAW_RESPONSE

    accepted: bool


@dataclass(frozen=True, slots=True)
class CheckmateEvent:
    kind = EventKind.CHECKMATE

    winner: Color


@dataclass(frozen=True, slots=True)
class StateSnapshotEvent:
    kind = EventKind.STATE

    position: str | None = None
    status: str | None = None
    result: str | None = None


SessionEvent = (
    MoveEvent
    | ResignationEvent
    | DrawOfferEvent
    | DrawResponseEvent
    | CheckmateEvent
    | StateSnapshotEvent
)


# ── Parsing ──────────────────────────────────────────────────────────────────


def parse_event(kind: EventKind, body: str | bytes) -> SessionEvent:
    """Decode a raw message *body* received on the *kind* channel."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError, RecursionError) as exc:
        raise EventParseError(f"Invalid JSON for {kind.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise EventParseError(f"{kind.name} payload must be an object")
    return _PARSERS[kind](data)


def _opt_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise EventParseError(f"Field {key!r} must be a string")
    return value


def _color(value: object, key: str) -> Color:
    try:
        return Color.from_name(value)
    except ValueError as exc:
        raise EventParseError(f"Field {key!r}: {exc}") from exc


def _parse_move_payload(raw: object) -> MovePayload | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise EventParseError("Field 'move' must be an object")
    piece = raw.get("piece")
    move_to = raw.get("moveTo")
    if not isinstance(piece, str) or not piece:
        raise EventParseError("Move is missing its piece")
    if not isinstance(move_to, str):
        raise EventParseError("Move is missing its target square")
    return MovePayload(
        piece=piece,
        move_to=move_to,
        fen=_opt_str(raw, "fen"),
        clock_note=_opt_note(raw, "tc"),
        time_note=_opt_note(raw, "tr"),
    )


def _opt_note(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or value == "":
        return None
    return str(value)


def _parse_move(data: dict[str, Any]) -> MoveEvent:
    notation = data.get("moveNotation")
    if isinstance(notation, str) and notation.startswith(MOVE_ERROR_PREFIX):
        return MoveEvent(error=notation)

    move = _parse_move_payload(data.get("move"))
    # Observed priority: explicit new position, post-move position, nested move
    position = _opt_str(data, "fen") or _opt_str(data, "fenAfter")
    if position is None and move is not None:
        position = move.fen

    raw_color = data.get("playerColor")
    color = _color(raw_color, "playerColor") if raw_color is not None else None
    return MoveEvent(player_color=color, position=position, move=move)


def _parse_resignation(data: dict[str, Any]) -> ResignationEvent:
    raw_resigned = data.get("playerColor")
    resigned = (
        _color(raw_resigned, "playerColor") if raw_resigned is not None else None
    )
    raw_winner = data.get("winner")
    if raw_winner:
        winner = _color(raw_winner, "winner")
    elif resigned is not None:
        winner = resigned.opposite
    else:
        raise EventParseError("Resignation names neither winner nor resigning side")
    return ResignationEvent(winner=winner, resigned=resigned)


def _parse_draw_offer(data: dict[str, Any]) -> DrawOfferEvent:
    return DrawOfferEvent(from_color=_color(data.get("fromColor"), "fromColor"))


def _parse_draw_response(data: dict[str, Any]) -> DrawResponseEvent:
    return DrawResponseEvent(accepted=bool(data.get("accepted")))


def _parse_checkmate(data: dict[str, Any]) -> CheckmateEvent:
    return CheckmateEvent(winner=_color(data.get("winner"), "winner"))


def _parse_state(data: dict[str, Any]) -> StateSnapshotEvent:
    result = data.get("result")
    return StateSnapshotEvent(
        position=_opt_str(data, "fen"),
        status=_opt_str(data, "status"),
        result=str(result) if result else None,
    )


_PARSERS = {
    EventKind.MOVE: _parse_move,
    EventKind.RESIGNATION: _parse_resignation,
    EventKind.DRAW_OFFER: _parse_draw_offer,
    EventKind.DRAW_RESPONSE: _parse_draw_response,
    EventKind.CHECKMATE: _parse_checkmate,
    EventKind.STATE: _parse_state,
}
