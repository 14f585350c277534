"""Move value object.

A :class:`Move` is a complete, self-describing ply: it names the piece that
moves and what it captures, so applying it needs nothing but the position it
was generated from.
"""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import MoveFlag, PieceType
from chessrules.core.piece import Piece
from chessrules.core.types import Square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move."""

    from_sq: Square
    to_sq: Square
    piece: Piece
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None
    captured: Piece | None = None
    # Equals ``to_sq`` for ordinary captures, the passed pawn's square for
    # en passant and ``None`` when nothing is captured.
    captured_sq: Square | None = None

    # ── Classification ───────────────────────────────────────────────────

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_castle_kingside(self) -> bool:
        return self.flag == MoveFlag.CASTLE_KINGSIDE

    @property
    def is_castle_queenside(self) -> bool:
        return self.flag == MoveFlag.CASTLE_QUEENSIDE

    @property
    def is_castle(self) -> bool:
        return self.is_castle_kingside or self.is_castle_queenside

    @property
    def is_en_passant(self) -> bool:
        return self.flag == MoveFlag.EN_PASSANT

    @property
    def is_double_pawn_push(self) -> bool:
        return self.flag == MoveFlag.DOUBLE_PAWN

    @property
    def is_promotion(self) -> bool:
        return self.promotion is not None

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)
