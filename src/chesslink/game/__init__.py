"""Game management layer: match session, matchmaking, clock, ledger.

Quick start::

    from chesslink.core import Color, GameType
    from chesslink.game import GameClient
    from chesslink.net import MemoryTransport, QtMatchApi

    client = GameClient(api=QtMatchApi(), transport=MemoryTransport())
    client.events.on_match_found.append(
        lambda match_id, game_type: client.open_session(
            match_id, Color.WHITE, game_type=game_type
        )
    )
    client.start_search(GameType.BLITZ)
"""

from chesslink.game.client import GameClient
from chesslink.game.clock import CountdownClock, format_remaining
from chesslink.game.controller import MatchSessionController, SessionEvents
from chesslink.game.events import EventParseError, SessionEvent, parse_event
from chesslink.game.interfaces import GamePhase, SearchPhase, TimeControl
from chesslink.game.ledger import MoveLedger, MoveRow
from chesslink.game.matchmaking import MatchmakingController, SearchEvents
from chesslink.game.state import DrawOfferState, MatchResult, MatchSession

__all__ = [
    # States
    "GamePhase",
    "SearchPhase",
    "TimeControl",
    # Data
    "DrawOfferState",
    "MatchResult",
    "MatchSession",
    "MoveLedger",
    "MoveRow",
    # Events
    "EventParseError",
    "SessionEvent",
    "parse_event",
    # Concrete
    "CountdownClock",
    "GameClient",
    "MatchSessionController",
    "MatchmakingController",
    "SearchEvents",
    "SessionEvents",
    "format_remaining",
]
