"""Match session state: the local view of one live game."""

from __future__ import annotations

from dataclasses import dataclass, field

from chesslink.core.enums import Color, EndReason, Winner
from chesslink.core.fen import is_my_turn
from chesslink.game.interfaces import GamePhase
from chesslink.game.ledger import MoveLedger


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Terminal outcome of a match."""

    winner: Winner | None
    reason: EndReason
    description: str = ""
    resigned: Color | None = None

    @property
    def is_draw(self) -> bool:
        return self.winner == Winner.DRAW


@dataclass(frozen=True, slots=True)
class DrawOfferState:
    """A pending draw offer from the opponent."""

    from_color: Color


@dataclass
class MatchSession:
    """Plain data for one match: position, status, result, ledger, clock.

    Turn ownership is not stored; :attr:`is_my_turn` derives it from
    :attr:`position` on every read.
    """

    match_id: int
    player_color: Color
    position: str | None = None
    status: str = ""
    result: MatchResult | None = None
    draw_offer: DrawOfferState | None = None
    ledger: MoveLedger = field(default_factory=MoveLedger)
    time_remaining: int | None = None
    turn_hint: bool | None = None

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def phase(self) -> GamePhase:
        return GamePhase.ACTIVE if self.result is None else GamePhase.TERMINAL

    @property
    def is_terminal(self) -> bool:
        return self.result is not None

    @property
    def is_my_turn(self) -> bool:
        return is_my_turn(self.position, self.player_color, self.turn_hint)

    # ── Transitions ──────────────────────────────────────────────────────

    def set_result(self, result: MatchResult) -> bool:
        """Finish the match. Returns False if it was already finished."""
        if self.result is not None:
            return False
        self.result = result
        self.draw_offer = None
        return True
