"""Side-to-move extraction and turn ownership from FEN strings.

Only the active-color field is interpreted here; piece placement and move
legality belong to the board component.
"""

from __future__ import annotations

from chesslink.core.enums import Color

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_SIDE_CODES = {color.fen_code: color for color in Color}


def active_color_of(fen: str | None) -> Color | None:
    """Return the side to move encoded in *fen*, or ``None`` if unreadable."""
    if not fen or not isinstance(fen, str):
        return None
    parts = fen.split()
    if len(parts) < 2:
        return None
    return _SIDE_CODES.get(parts[1])


def is_my_turn(
    fen: str | None,
    player_color: Color,
    hint: bool | None = None,
) -> bool:
    """Whether *player_color* may move in *fen*.

    Pure: the answer depends only on the arguments. When the position has
    no readable active-color field, the server-supplied *hint* decides; with
    no hint either, White is assumed to move first.
    """
    active = active_color_of(fen)
    if active is not None:
        return active == player_color
    if hint is not None:
        return bool(hint)
    return player_color == Color.WHITE
