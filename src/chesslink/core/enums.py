"""Core enumerations shared by the session and matchmaking layers."""

from __future__ import annotations

from enum import IntEnum, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def fen_code(self) -> str:
        """Active-color letter used in the second FEN field."""
        return "w" if self == Color.WHITE else "b"

    @classmethod
    def from_name(cls, name: object) -> Color:
        """Parse a wire color name (``"white"`` / ``"black"``).

        Raises:
            ValueError: *name* is not a recognised color.
        """
        if isinstance(name, str):
            key = name.strip().upper()
            if key in cls.__members__:
                return cls[key]
        raise ValueError(f"Invalid color: {name!r}")

    def __str__(self) -> str:
        return self.name.lower()


class Winner(IntEnum):
    """Winning side of a finished match, or a draw."""

    WHITE = 0
    BLACK = 1
    DRAW = 2

    @classmethod
    def of(cls, color: Color) -> Winner:
        return cls(color.value)

    @classmethod
    def from_name(cls, name: object) -> Winner:
        if isinstance(name, str):
            key = name.strip().upper()
            if key in cls.__members__:
                return cls[key]
        raise ValueError(f"Invalid winner: {name!r}")

    def __str__(self) -> str:
        return self.name.lower()


class EndReason(IntEnum):
    """Why a match ended."""

    CHECKMATE = auto()
    RESIGNATION = auto()
    AGREEMENT = auto()
    TIMEOUT = auto()
    REPORTED = auto()  # free-text result pushed in a state snapshot

    def __str__(self) -> str:
        return self.name.lower()


class GameType(IntEnum):
    """Matchmaking variant."""

    STANDARD = 0
    BLITZ = 1

    @property
    def is_timed(self) -> bool:
        return self == GameType.BLITZ

    @property
    def wire_name(self) -> str:
        return self.name.lower()

    @classmethod
    def from_name(cls, name: object) -> GameType:
        if isinstance(name, str):
            key = name.strip().upper()
            if key in cls.__members__:
                return cls[key]
        raise ValueError(f"Invalid game type: {name!r}")

    def __str__(self) -> str:
        return self.wire_name
