"""Core domain layer: colors, variants and position helpers.

Quick start::

    from chesslink.core import Color, STARTING_FEN, is_my_turn

    is_my_turn(STARTING_FEN, Color.WHITE)  # True
"""

from chesslink.core.enums import Color, EndReason, GameType, Winner
from chesslink.core.fen import STARTING_FEN, active_color_of, is_my_turn

__all__ = [
    # Enums
    "Color",
    "EndReason",
    "GameType",
    "Winner",
    # FEN helpers
    "STARTING_FEN",
    "active_color_of",
    "is_my_turn",
]
