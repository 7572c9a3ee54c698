"""Tests for CountdownClock."""

import weakref

from chesslink.game.clock import CountdownClock, format_remaining
from chesslink.game.interfaces import TimeControl


class TestClockBasics:
    def test_timer_slot_connects(self) -> None:
        clock = CountdownClock(TimeControl(600))
        assert weakref.ref(clock)() is clock

    def test_initial_remaining(self) -> None:
        clock = CountdownClock(TimeControl(600))
        assert clock.remaining == 600
        assert not clock.is_running

    def test_start_and_stop(self) -> None:
        clock = CountdownClock(TimeControl(600))
        assert clock.start()
        assert clock.is_running
        clock.stop()
        assert not clock.is_running

    def test_tick_decrements(self) -> None:
        clock = CountdownClock(TimeControl(600))
        ticks: list[int] = []
        clock.events.on_tick.append(ticks.append)
        clock.start()
        clock._on_tick()
        clock._on_tick()
        assert clock.remaining == 598
        assert ticks == [599, 598]
        clock.stop()


class TestClockExpiry:
    def test_expires_once_at_zero(self) -> None:
        clock = CountdownClock(TimeControl(2))
        expired: list[bool] = []
        clock.events.on_expired.append(lambda: expired.append(True))
        clock.start()

        for _ in range(5):
            clock._on_tick()

        assert expired == [True]
        assert clock.remaining == 0
        assert clock.is_expired
        assert not clock.is_running

    def test_cannot_restart_after_expiry(self) -> None:
        clock = CountdownClock(TimeControl(1))
        clock.start()
        clock._on_tick()
        assert not clock.start()
        assert not clock.is_running


class TestFormatRemaining:
    def test_minutes_and_seconds(self) -> None:
        assert format_remaining(600) == "10:00"
        assert format_remaining(61) == "1:01"
        assert format_remaining(9) == "0:09"

    def test_negative_clamps(self) -> None:
        assert format_remaining(-3) == "0:00"


class TestTimeControl:
    def test_for_game_type(self) -> None:
        from chesslink.core.enums import GameType

        assert TimeControl.for_game_type(GameType.STANDARD) is None
        blitz = TimeControl.for_game_type(GameType.BLITZ)
        assert blitz is not None and blitz.initial_seconds == 600
