"""Tests for notice/status translations."""

from dataclasses import fields

from chesslink.core.enums import Color
from chesslink.ui.i18n import LANGUAGES, Strings, set_language, t


class TestI18n:
    def test_default_is_english(self) -> None:
        assert t().status_your_turn == "Your turn!"

    def test_switch_language(self) -> None:
        set_language("Russian")
        assert t().status_your_turn != "Your turn!"
        set_language("English")
        assert t().status_your_turn == "Your turn!"

    def test_unknown_language_falls_back(self) -> None:
        set_language("Klingon")
        assert t().notice_not_connected == "Not connected to server!"

    def test_every_locale_is_complete(self) -> None:
        for language in LANGUAGES:
            set_language(language)
            for f in fields(Strings):
                assert getattr(t(), f.name), f"{language}: {f.name}"

    def test_placeholders_match(self) -> None:
        set_language("English")
        english = t()
        for language in LANGUAGES:
            set_language(language)
            for f in fields(Strings):
                for name in ("{winner}", "{color}", "{result}", "{error}", "{msg}", "{seconds}"):
                    assert (name in getattr(english, f.name)) == (
                        name in getattr(t(), f.name)
                    ), f"{language}: {f.name}"

    def test_color_names(self) -> None:
        assert t().color_name(Color.WHITE) == "White"
        assert t().winner_name(Color.BLACK) == "BLACK"
