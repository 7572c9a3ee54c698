"""Countdown clock driven by a repeating ``QTimer``."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from PyQt6.QtCore import QObject, QTimer

from chesslink.game.interfaces import TimeControl

TickCallback = Callable[[int], None]  # seconds remaining
ExpiredCallback = Callable[[], None]


def format_remaining(seconds: int) -> str:
    """``M:SS`` rendering for a countdown display."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


@dataclass
class ClockEvents:
    on_tick: list[TickCallback] = field(default_factory=list)
    on_expired: list[ExpiredCallback] = field(default_factory=list)


class CountdownClock:
    """Single-owner countdown for the local player.

    Each timer timeout removes one second. Reaching zero stops the timer and
    fires ``on_expired`` exactly once; afterwards the clock cannot be
    restarted. :meth:`stop` pauses and is safe to call from any exit path.
    """

    __slots__ = (
        "__weakref__",
        "_time_control",
        "_remaining",
        "_timer",
        "_expired",
        "events",
    )

    def __init__(
        self,
        time_control: TimeControl,
        *,
        tick_ms: int = 1000,
        parent: QObject | None = None,
    ) -> None:
        self._time_control = time_control
        self._remaining = int(time_control.initial_seconds)
        self._expired = False
        self._timer = QTimer(parent)
        self._timer.setInterval(tick_ms)
        self._timer.timeout.connect(self._on_tick)
        self.events = ClockEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    @property
    def is_expired(self) -> bool:
        return self._expired

    # ── Control ──────────────────────────────────────────────────────────

    def start(self) -> bool:
        """Resume ticking. Returns False once expired."""
        if self._expired:
            return False
        if not self._timer.isActive():
            self._timer.start()
        return True

    def stop(self) -> None:
        self._timer.stop()

    # ── Internal ─────────────────────────────────────────────────────────

    def _on_tick(self) -> None:
        if self._expired:
            self._timer.stop()
            return

        self._remaining = max(0, self._remaining - 1)
        for cb in self.events.on_tick:
            cb(self._remaining)

        if self._remaining == 0:
            self._expired = True
            self._timer.stop()
            for cb in self.events.on_expired:
                cb()
