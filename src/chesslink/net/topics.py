"""Broker destinations for one match."""

from __future__ import annotations

from enum import IntEnum, auto


class EventKind(IntEnum):
    """Inbound event channels a session subscribes to."""

    MOVE = auto()
    RESIGNATION = auto()
    DRAW_OFFER = auto()
    DRAW_RESPONSE = auto()
    CHECKMATE = auto()
    STATE = auto()


_STATE_SUFFIXES: dict[EventKind, str] = {
    EventKind.RESIGNATION: "/resignation",
    EventKind.DRAW_OFFER: "/draw-offer",
    EventKind.DRAW_RESPONSE: "/draw-response",
    EventKind.CHECKMATE: "/checkmate",
    EventKind.STATE: "",
}

# Named outbound actions
ACTION_RESIGN = "resign"
ACTION_DRAW = "draw"
ACTION_DRAW_RESPONSE = "draw-response"
ACTION_TIMEOUT = "timeout"


def event_topic(kind: EventKind, match_id: int | str) -> str:
    """Subscription topic carrying *kind* events for *match_id*."""
    if kind == EventKind.MOVE:
        return f"/topic/moves/{match_id}"
    return f"/topic/game-state/{match_id}{_STATE_SUFFIXES[kind]}"


def move_destination(match_id: int | str) -> str:
    return f"/app/game/{match_id}/move"


def action_destination(match_id: int | str, action: str) -> str:
    return f"/app/game/{match_id}/{action}"
