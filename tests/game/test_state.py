"""Tests for MatchSession."""

from chesslink.core.enums import Color, EndReason, Winner
from chesslink.core.fen import STARTING_FEN
from chesslink.game.interfaces import GamePhase
from chesslink.game.state import DrawOfferState, MatchResult, MatchSession

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"


class TestMatchSession:
    def test_starts_active(self) -> None:
        session = MatchSession(match_id=1, player_color=Color.WHITE)
        assert session.phase == GamePhase.ACTIVE
        assert not session.is_terminal

    def test_turn_follows_position(self) -> None:
        session = MatchSession(match_id=1, player_color=Color.BLACK, position=STARTING_FEN)
        assert not session.is_my_turn
        session.position = AFTER_E4
        assert session.is_my_turn

    def test_turn_hint_without_position(self) -> None:
        session = MatchSession(match_id=1, player_color=Color.BLACK, turn_hint=True)
        assert session.is_my_turn

    def test_set_result_is_once_only(self) -> None:
        session = MatchSession(match_id=1, player_color=Color.WHITE)
        first = MatchResult(Winner.BLACK, EndReason.RESIGNATION)
        assert session.set_result(first)
        assert not session.set_result(MatchResult(Winner.DRAW, EndReason.AGREEMENT))
        assert session.result == first
        assert session.phase == GamePhase.TERMINAL

    def test_result_clears_draw_offer(self) -> None:
        session = MatchSession(match_id=1, player_color=Color.WHITE)
        session.draw_offer = DrawOfferState(Color.BLACK)
        session.set_result(MatchResult(Winner.DRAW, EndReason.AGREEMENT))
        assert session.draw_offer is None
        assert session.result is not None and session.result.is_draw
