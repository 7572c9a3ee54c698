"""Move ledger: the move list shown beside the board, one row per move pair."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace

from chesslink.game.events import MovePayload

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MoveRow:
    """A White ply and, once played, the Black reply."""

    white_move: str
    black_move: str | None = None
    position_after: str | None = None
    clock_white: str | None = None
    clock_black: str | None = None
    time_note: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.black_move is not None


class MoveLedger:
    """Ordered move rows built from echoed move payloads.

    White plies open a row; Black plies complete the last one. A Black ply
    with no row to complete is logged and dropped.
    """

    __slots__ = ("_rows",)

    def __init__(self) -> None:
        self._rows: list[MoveRow] = []

    # ── Mutation ─────────────────────────────────────────────────────────

    def record(self, move: MovePayload) -> bool:
        """Merge *move* into the ledger. Returns True if the ledger changed."""
        if move.is_white:
            return self._open_row(move)
        return self._complete_row(move)

    def clear(self) -> None:
        self._rows.clear()

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def rows(self) -> tuple[MoveRow, ...]:
        return tuple(self._rows)

    @property
    def last_row(self) -> MoveRow | None:
        return self._rows[-1] if self._rows else None

    @property
    def ply_count(self) -> int:
        return sum(2 if row.is_complete else 1 for row in self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[MoveRow]:
        return iter(self.rows)

    # ── Internal ─────────────────────────────────────────────────────────

    def _open_row(self, move: MovePayload) -> bool:
        last = self.last_row
        if (
            last is not None
            and not last.is_complete
            and move.fen is not None
            and last.white_move == move.move_to
            and last.position_after == move.fen
        ):
            _LOGGER.debug("Ignoring re-delivered white move to %s", move.move_to)
            return False

        self._rows.append(
            MoveRow(
                white_move=move.move_to,
                position_after=move.fen,
                clock_white=move.clock_note,
                time_note=move.time_note,
            )
        )
        return True

    def _complete_row(self, move: MovePayload) -> bool:
        if not self._rows:
            _LOGGER.warning(
                "Black move to %s arrived before any white move; dropped",
                move.move_to,
            )
            return False

        last = self._rows[-1]
        merged = replace(
            last,
            black_move=move.move_to,
            position_after=move.fen,
            clock_black=move.clock_note,
            time_note=move.time_note,
        )
        if merged == last:
            return False
        self._rows[-1] = merged
        return True
