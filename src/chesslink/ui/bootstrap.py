"""Qt application bootstrap helpers for the command-line client."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from chesslink.core.enums import GameType
from chesslink.settings import ClientSettings
from chesslink.ui.i18n import LANGUAGES, set_language

if TYPE_CHECKING:
    from PyQt6.QtCore import QCoreApplication

_LOGGER = logging.getLogger(__name__)
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route package logs to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=_LOG_FORMAT,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chesslink", description="Online chess client core"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--server", help="backend base URL")
    parser.add_argument("--language", choices=LANGUAGES, help="notice language")
    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="find an opponent and print the match id")
    search.add_argument(
        "game_type",
        nargs="?",
        default=GameType.STANDARD.wire_name,
        choices=[g.wire_name for g in GameType],
    )
    return parser


def _settings_from_args(args: argparse.Namespace) -> ClientSettings:
    settings = ClientSettings.from_env()
    if args.server:
        settings.server_url = args.server
    if args.language:
        settings.language = args.language
    return settings


def _run_search(app: QCoreApplication, settings: ClientSettings, game_type: GameType) -> int:
    from chesslink.game.interfaces import SearchPhase
    from chesslink.game.matchmaking import MatchmakingController
    from chesslink.net.api import QtMatchApi

    api = QtMatchApi(settings, parent=app)
    matchmaking = MatchmakingController(api=api, settings=settings, parent=app)

    def on_found(match_id: int, found_type: GameType) -> None:
        print(match_id)
        app.exit(0)

    def on_phase(phase: SearchPhase) -> None:
        if phase in (SearchPhase.TIMED_OUT, SearchPhase.IDLE):
            app.exit(1)

    def on_notice(text: str) -> None:
        print(text, file=sys.stderr)

    matchmaking.events.on_match_found.append(on_found)
    matchmaking.events.on_phase_changed.append(on_phase)
    matchmaking.events.on_notice.append(on_notice)
    matchmaking.start_search(game_type)

    try:
        return app.exec()
    finally:
        matchmaking.shutdown()
        api.abort_all()


def run_application(argv: list[str] | None = None) -> int:
    """Parse *argv*, create the Qt core application and run the command."""
    from PyQt6.QtCore import QCoreApplication

    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.verbose)
    settings = _settings_from_args(args)
    set_language(settings.language)

    app = QCoreApplication.instance() or QCoreApplication([sys.argv[0]])
    app.setApplicationName("Chesslink")
    _LOGGER.debug("Using server %s", settings.base_url)

    if args.command == "search":
        return _run_search(app, settings, GameType.from_name(args.game_type))
    return 2
