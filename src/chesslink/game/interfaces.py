"""State enums and time-control definitions for the game layer."""

from __future__ import annotations

from enum import IntEnum, auto

from chesslink.core.enums import GameType

# ── FSM states ───────────────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Control state of a match session."""

    ACTIVE = auto()
    TERMINAL = auto()


class SearchPhase(IntEnum):
    """Lifecycle of a matchmaking search."""

    IDLE = auto()
    SEARCHING = auto()
    FOUND = auto()
    TIMED_OUT = auto()
    CANCELLED = auto()


# ── Time control ─────────────────────────────────────────────────────────────


class TimeControl:
    """Immutable countdown definition for one side.

    Args:
        initial_seconds: Starting time on the local clock.
    """

    __slots__ = ("initial_seconds",)

    def __init__(self, initial_seconds: int) -> None:
        self.initial_seconds = initial_seconds

    @classmethod
    def for_game_type(
        cls, game_type: GameType, blitz_seconds: int = 600
    ) -> TimeControl | None:
        """Countdown for *game_type*, or None for untimed variants."""
        if game_type.is_timed:
            return cls(blitz_seconds)
        return None

    def __repr__(self) -> str:
        mins = self.initial_seconds / 60
        return f"TimeControl({mins:.0f}m)"
