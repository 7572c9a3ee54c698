"""Tests for ClientSettings environment overrides."""

from chesslink.settings import ClientSettings


class TestClientSettings:
    def test_defaults(self) -> None:
        settings = ClientSettings()
        assert settings.poll_interval_ms == 1000
        assert settings.max_poll_attempts == 90
        assert settings.search_deadline_ms == 90_000
        assert settings.blitz_seconds == 600

    def test_env_overrides(self) -> None:
        settings = ClientSettings.from_env(
            {
                "CHESSLINK_SERVER_URL": "https://chess.example/",
                "CHESSLINK_BLITZ_SECONDS": "300",
                "CHESSLINK_LANGUAGE": "Russian",
            }
        )
        assert settings.server_url == "https://chess.example/"
        assert settings.base_url == "https://chess.example"
        assert settings.blitz_seconds == 300
        assert settings.language == "Russian"

    def test_bad_int_keeps_default(self) -> None:
        settings = ClientSettings.from_env({"CHESSLINK_POLL_INTERVAL_MS": "soon"})
        assert settings.poll_interval_ms == 1000

    def test_unrelated_variables_ignored(self) -> None:
        settings = ClientSettings.from_env({"POLL_INTERVAL_MS": "5"})
        assert settings == ClientSettings()
