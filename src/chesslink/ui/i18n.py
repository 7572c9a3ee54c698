"""Internationalisation strings for Chesslink notices and status lines.

Usage::

    from chesslink.ui.i18n import t, set_language

    set_language("Russian")
    print(t().status_your_turn)        # "Ваш ход!"
    print(t().winner_name(Color.WHITE))
"""

from __future__ import annotations

from dataclasses import dataclass

from chesslink.core.enums import Color


@dataclass(frozen=True)
class Strings:
    # ── Status line ──────────────────────────────────────────────────────
    status_game_started: str
    status_your_turn: str
    status_waiting: str
    status_over_resignation: str  # "Game Over - {winner} wins by resignation"
    status_over_checkmate: str  # "Game Over - {winner} wins by checkmate!"
    status_over_agreement: str
    status_over_timeout: str
    status_over_reported: str  # "Game Over: {result}"

    # ── Session notices ──────────────────────────────────────────────────
    notice_not_connected: str
    notice_not_your_turn: str
    notice_game_over: str
    notice_move_error: str  # "Move rejected: {error}"
    notice_resigned: str  # "{winner} wins! Opponent resigned."
    notice_checkmate: str  # "{winner} wins by checkmate!"
    notice_draw_offered: str  # "{color} offers a draw."
    notice_draw_agreed: str
    notice_draw_declined: str
    notice_time_expired: str
    notice_game_over_reported: str  # "Game Over: {result}"

    # ── Matchmaking notices ──────────────────────────────────────────────
    notice_match_failed: str
    notice_search_failed: str  # "Could not reach the server: {msg}"
    notice_no_opponent: str  # "... within {seconds} seconds."

    color_white: str
    color_black: str

    def color_name(self, color: Color) -> str:
        return self.color_white if color == Color.WHITE else self.color_black

    def winner_name(self, color: Color) -> str:
        """Upper-cased color name used in game-over announcements."""
        return self.color_name(color).upper()


_EN = Strings(
    status_game_started="Game started",
    status_your_turn="Your turn!",
    status_waiting="Waiting for opponent...",
    status_over_resignation="Game Over - {winner} wins by resignation",
    status_over_checkmate="Game Over - {winner} wins by checkmate!",
    status_over_agreement="Game Over - Draw by agreement",
    status_over_timeout="Time's up - Draw!",
    status_over_reported="Game Over: {result}",
    notice_not_connected="Not connected to server!",
    notice_not_your_turn="It's not your turn!",
    notice_game_over="The game is already over.",
    notice_move_error="Move rejected: {error}",
    notice_resigned="{winner} wins! Opponent resigned.",
    notice_checkmate="{winner} wins by checkmate!",
    notice_draw_offered="{color} offers a draw.",
    notice_draw_agreed="Game ended in a draw by mutual agreement!",
    notice_draw_declined="Draw offer declined.",
    notice_time_expired="Time expired! Game ends in a draw.",
    notice_game_over_reported="Game Over: {result}",
    notice_match_failed="Failed to create match.",
    notice_search_failed="Could not reach the server: {msg}",
    notice_no_opponent="Could not find an opponent within {seconds} seconds.",
    color_white="White",
    color_black="Black",
)

_RU = Strings(
    status_game_started="Игра началась",
    status_your_turn="Ваш ход!",
    status_waiting="Ожидание соперника...",
    status_over_resignation="Игра окончена - {winner} побеждают (соперник сдался)",
    status_over_checkmate="Игра окончена - {winner} ставят мат!",
    status_over_agreement="Игра окончена - ничья по соглашению",
    status_over_timeout="Время вышло - ничья!",
    status_over_reported="Игра окончена: {result}",
    notice_not_connected="Нет подключения к серверу!",
    notice_not_your_turn="Сейчас не ваш ход!",
    notice_game_over="Игра уже окончена.",
    notice_move_error="Ход отклонён: {error}",
    notice_resigned="{winner} побеждают! Соперник сдался.",
    notice_checkmate="{winner} ставят мат!",
    notice_draw_offered="{color} предлагают ничью.",
    notice_draw_agreed="Партия завершилась ничьей по взаимному согласию!",
    notice_draw_declined="Предложение ничьей отклонено.",
    notice_time_expired="Время истекло! Партия завершилась ничьей.",
    notice_game_over_reported="Игра окончена: {result}",
    notice_match_failed="Не удалось создать матч.",
    notice_search_failed="Сервер недоступен: {msg}",
    notice_no_opponent="Не удалось найти соперника за {seconds} секунд.",
    color_white="Белые",
    color_black="Чёрные",
)

_LOCALES: dict[str, Strings] = {
    "English": _EN,
    "Russian": _RU,
}

LANGUAGES: list[str] = list(_LOCALES.keys())

_current: Strings = _EN


def t() -> Strings:
    """Return the active locale strings."""
    return _current


def set_language(language: str) -> None:
    """Switch the global locale. Unknown names fall back to English."""
    global _current
    _current = _LOCALES.get(language, _EN)
