"""Game record - the ordered, immutable ledger of one game's plies.

Every operation returns a *new* :class:`GameRecord`; an existing record is
never changed. Each ply keeps a full snapshot of the position after it, so
undo is a slice rather than an inverse computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chessrules.config import DEFAULT_RULES, RulesConfig
from chessrules.core.enums import Color
from chessrules.core.errors import EmptyHistoryError
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation.fen import position_to_fen
from chessrules.core.notation.san import move_to_san
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.rules import GameStatus, Rules
from chessrules.core.types import Square


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    san: str
    position: Position  # snapshot after the move; treat as read-only
    status: GameStatus  # evaluated for ``position`` at the time of the move

    @property
    def fen_after(self) -> str:
        return position_to_fen(self.position)

    @property
    def was_check(self) -> bool:
        return self.status.in_check

    @property
    def was_capture(self) -> bool:
        return self.move.is_capture


@dataclass(frozen=True, slots=True)
class GameRecord:
    """Starting position plus every applied ply.

    ``redo_moves`` holds plies taken back by :meth:`undo`, most recently
    undone last; applying any new move clears it.
    """

    start: Position
    config: RulesConfig = DEFAULT_RULES
    plies: tuple[MoveRecord, ...] = ()
    redo_moves: tuple[Move, ...] = ()
    start_status: GameStatus = field(default=None, compare=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.start_status is None:
            object.__setattr__(
                self, "start_status", Rules.status(self.start, 1, self.config)
            )

    @classmethod
    def new(
        cls, start: Position | None = None, config: RulesConfig = DEFAULT_RULES
    ) -> GameRecord:
        """Fresh record from *start* (standard opening position by default)."""
        return cls(start=start.copy() if start is not None else Position(), config=config)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        """Current position (read-only snapshot)."""
        return self.plies[-1].position if self.plies else self.start

    @property
    def status(self) -> GameStatus:
        return self.plies[-1].status if self.plies else self.start_status

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.plies)

    @property
    def moves(self) -> list[Move]:
        return [ply.move for ply in self.plies]

    @property
    def sans(self) -> list[str]:
        return [ply.san for ply in self.plies]

    @property
    def last_move(self) -> Move | None:
        return self.plies[-1].move if self.plies else None

    @property
    def can_undo(self) -> bool:
        return bool(self.plies)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_moves)

    def position_at(self, ply: int) -> Position:
        """Position after *ply* half-moves (0 = starting position)."""
        if not 0 <= ply <= len(self.plies):
            raise IndexError(f"ply {ply} outside 0..{len(self.plies)}")
        return self.plies[ply - 1].position if ply else self.start

    def repetition_count(self, ply: int | None = None) -> int:
        """Occurrences of the position at *ply* (default: current) so far.

        Non-consecutive occurrences count; the starting position counts too.
        """
        if ply is None:
            ply = len(self.plies)
        key = self.position_at(ply).repetition_key
        count = 1 if self.start.repetition_key == key else 0
        for record in self.plies[:ply]:
            if record.position.repetition_key == key:
                count += 1
        return count

    def legal_moves(self, from_sq: Square | None = None) -> list[Move]:
        """Legal moves in the current position, optionally from one square."""
        return MoveGenerator(self.position).generate_legal_moves(from_sq)

    def captured_pieces(self, by_color: Color) -> list[Piece]:
        """Pieces captured *by* ``by_color``, in capture order."""
        return [
            ply.move.captured
            for ply in self.plies
            if ply.move.captured is not None and ply.move.piece.color == by_color
        ]

    # ── Transitions ──────────────────────────────────────────────────────

    def apply(self, move: Move) -> GameRecord:
        """Record with *move* appended.

        Raises :class:`~chessrules.core.errors.IllegalMoveError` if *move*
        is not legal in the current position.
        """
        return self._append(move, redo_moves=())

    def undo(self) -> GameRecord:
        """Record without its last ply. Raises :class:`EmptyHistoryError`."""
        if not self.plies:
            raise EmptyHistoryError("No moves to undo")
        return self.truncate(len(self.plies) - 1)

    def redo(self) -> GameRecord:
        """Re-apply the most recently undone ply."""
        if not self.redo_moves:
            raise EmptyHistoryError("No moves to redo")
        return self._append(self.redo_moves[-1], redo_moves=self.redo_moves[:-1])

    def truncate(self, ply: int) -> GameRecord:
        """Record cut back to *ply* half-moves; later snapshots are dropped.

        The removed moves become redoable.
        """
        if not 0 <= ply <= len(self.plies):
            raise IndexError(f"ply {ply} outside 0..{len(self.plies)}")
        removed = tuple(record.move for record in reversed(self.plies[ply:]))
        return GameRecord(
            start=self.start,
            config=self.config,
            plies=self.plies[:ply],
            redo_moves=self.redo_moves + removed,
            start_status=self.start_status,
        )

    def _append(self, move: Move, redo_moves: tuple[Move, ...]) -> GameRecord:
        before = self.position
        after = before.apply(move)
        san = move_to_san(before, move)
        key = after.repetition_key
        repetitions = 1 + sum(
            1
            for snapshot in (self.start, *(r.position for r in self.plies))
            if snapshot.repetition_key == key
        )
        status = Rules.status(after, repetitions, self.config)
        return GameRecord(
            start=self.start,
            config=self.config,
            plies=self.plies + (MoveRecord(move, san, after, status),),
            redo_moves=redo_moves,
            start_status=self.start_status,
        )
