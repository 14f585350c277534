"""Session-level API consumed by board front-ends.

Every function takes a :class:`GameRecord` and, where the game advances,
returns a new one inside a result object. Transitions never raise: a rejected
load, move, undo or redo comes back as ``success=False`` with the untouched
record and the error, so the UI can flash "invalid move" and carry on.

Queries and :func:`new_game` raise :class:`ChessError` on bad input, such as
an unreadable square name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TypeAlias

from chessrules.config import DEFAULT_RULES, RulesConfig
from chessrules.core.enums import Color, PieceType
from chessrules.core.errors import (
    ChessError,
    EmptyHistoryError,
    IllegalMoveError,
    MalformedPositionError,
)
from chessrules.core.move import Move
from chessrules.core.notation.fen import position_from_fen, position_to_fen
from chessrules.core.notation.pgn import build_pgn, pgn_result_token
from chessrules.core.notation.san import parse_san
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.rules import GameStatus
from chessrules.core.types import Square, coerce_square, square_name
from chessrules.game.record import GameRecord

_LOGGER = logging.getLogger(__name__)

SquareLike: TypeAlias = Square | str

_PROMOTION_LETTERS: dict[str, PieceType] = {
    "q": PieceType.QUEEN,
    "r": PieceType.ROOK,
    "b": PieceType.BISHOP,
    "n": PieceType.KNIGHT,
}
_PROMOTION_TYPES: dict[int, PieceType] = {pt: pt for pt in _PROMOTION_LETTERS.values()}


# ── Result types ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of :func:`apply_move`, :func:`apply_san` and :func:`redo`."""

    success: bool
    record: GameRecord
    move: Move | None = None
    san: str | None = None
    error: ChessError | None = None

    @property
    def status(self) -> GameStatus:
        return self.record.status


@dataclass(frozen=True, slots=True)
class UndoResult:
    """Outcome of :func:`undo` and :func:`undo_to`."""

    success: bool
    record: GameRecord
    undone: tuple[Move, ...] = ()
    error: ChessError | None = None

    @property
    def status(self) -> GameStatus:
        return self.record.status


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Outcome of :func:`load_position`."""

    success: bool
    record: GameRecord | None = None
    error: ChessError | None = None


# ── Game lifecycle ───────────────────────────────────────────────────────────


def new_game(
    start: Position | str | None = None, config: RulesConfig = DEFAULT_RULES
) -> GameRecord:
    """Start a game from the standard position, a :class:`Position` or FEN.

    A malformed FEN raises :class:`MalformedPositionError`; use
    :func:`load_position` for a non-raising variant.
    """
    if isinstance(start, str):
        start = position_from_fen(start)
    record = GameRecord.new(start, config)
    _LOGGER.debug("New game: %s", position_to_fen(record.start))
    return record


def load_position(text: str, config: RulesConfig = DEFAULT_RULES) -> LoadResult:
    """Parse a FEN string into a fresh record."""
    try:
        position = position_from_fen(text)
    except MalformedPositionError as exc:
        _LOGGER.debug("Rejected position %r: %s", text, exc)
        return LoadResult(success=False, error=exc)
    return LoadResult(success=True, record=new_game(position, config))


# ── Queries ──────────────────────────────────────────────────────────────────


def legal_moves(record: GameRecord, square: SquareLike | None = None) -> list[Move]:
    """Legal moves for the side to move, optionally only from *square*."""
    from_sq = coerce_square(square) if square is not None else None
    return record.legal_moves(from_sq)


def legal_destinations(record: GameRecord, square: SquareLike) -> list[str]:
    """Sorted destination names reachable from *square* (for highlighting)."""
    return sorted({square_name(m.to_sq) for m in legal_moves(record, square)})


def is_promotion_move(record: GameRecord, from_sq: SquareLike, to_sq: SquareLike) -> bool:
    """Whether moving *from_sq* → *to_sq* needs a promotion choice."""
    to_idx = coerce_square(to_sq)
    return any(
        m.to_sq == to_idx and m.is_promotion for m in legal_moves(record, from_sq)
    )


def status(record: GameRecord) -> GameStatus:
    return record.status


def piece_at(record: GameRecord, square: SquareLike) -> Piece | None:
    return record.position.board[coerce_square(square)]


def board_grid(record: GameRecord) -> list[list[Piece | None]]:
    """8x8 placement, row 0 = rank 8, column 0 = a-file."""
    return record.position.board.grid()


def captured_pieces(record: GameRecord, by_color: Color) -> list[Piece]:
    return record.captured_pieces(by_color)


# ── Transitions ──────────────────────────────────────────────────────────────


def apply_move(
    record: GameRecord,
    from_sq: SquareLike,
    to_sq: SquareLike,
    promotion: PieceType | int | str | None = None,
) -> MoveResult:
    """Play the legal move matching *from_sq*, *to_sq* and *promotion*.

    *promotion* is only consulted for pawn moves onto the last rank, where
    it is required.
    """
    try:
        move = _match_move(record, from_sq, to_sq, promotion)
        return _commit(record, record.apply(move))
    except ChessError as exc:
        _LOGGER.debug("Rejected move %s-%s: %s", from_sq, to_sq, exc)
        return MoveResult(success=False, record=record, error=exc)


def apply_san(record: GameRecord, san: str) -> MoveResult:
    """Play a move given in SAN, e.g. ``"Nf3"`` or ``"exd8=Q+"``."""
    try:
        move = parse_san(record.position, san)
        return _commit(record, record.apply(move))
    except ChessError as exc:
        _LOGGER.debug("Rejected move %r: %s", san, exc)
        return MoveResult(success=False, record=record, error=exc)


def undo(record: GameRecord) -> UndoResult:
    """Take back the last ply."""
    try:
        previous = record.undo()
    except ChessError as exc:
        _LOGGER.debug("Undo rejected: %s", exc)
        return UndoResult(success=False, record=record, error=exc)
    undone = record.plies[-1]
    _LOGGER.debug("Undid %s", undone.san)
    return UndoResult(success=True, record=previous, undone=(undone.move,))


def undo_to(record: GameRecord, ply: int) -> UndoResult:
    """Take back every ply after *ply* (0 = back to the start)."""
    if not record.plies:
        return undo(record)
    try:
        previous = record.truncate(ply)
    except IndexError as exc:
        error = EmptyHistoryError(str(exc))
        _LOGGER.debug("Undo to ply %d rejected: %s", ply, exc)
        return UndoResult(success=False, record=record, error=error)
    undone = tuple(r.move for r in reversed(record.plies[ply:]))
    _LOGGER.debug("Undid %d plies back to ply %d", len(undone), ply)
    return UndoResult(success=True, record=previous, undone=undone)


def redo(record: GameRecord) -> MoveResult:
    """Re-play the most recently undone ply."""
    try:
        return _commit(record, record.redo())
    except ChessError as exc:
        _LOGGER.debug("Redo rejected: %s", exc)
        return MoveResult(success=False, record=record, error=exc)


# ── Export ───────────────────────────────────────────────────────────────────


def export_notation(record: GameRecord) -> list[str]:
    """SAN of every ply, in order."""
    return record.sans


def export_fen(record: GameRecord) -> str:
    return position_to_fen(record.position)


def export_pgn(record: GameRecord, headers: dict[str, str] | None = None) -> str:
    """Single-game PGN for the record's mainline."""
    start_fen = position_to_fen(record.start)
    default_start = record.start == Position()
    return build_pgn(
        headers or {},
        record.sans,
        pgn_result_token(record.status.result),
        start_fen=None if default_start else start_fen,
        first_ply_black=record.start.side_to_move == Color.BLACK,
        first_move_number=record.start.fullmove_number,
    )


# ── Internal helpers ─────────────────────────────────────────────────────────


def _match_move(
    record: GameRecord,
    from_sq: SquareLike,
    to_sq: SquareLike,
    promotion: PieceType | int | str | None,
) -> Move:
    from_idx = coerce_square(from_sq)
    to_idx = coerce_square(to_sq)
    candidates = [m for m in record.legal_moves(from_idx) if m.to_sq == to_idx]
    if not candidates:
        raise IllegalMoveError(
            f"Illegal move: {square_name(from_idx)}{square_name(to_idx)}"
        )
    if not candidates[0].is_promotion:
        return candidates[0]

    promo_type = _promotion_type(promotion)
    for move in candidates:
        if move.promotion == promo_type:
            return move
    raise IllegalMoveError(
        f"Promotion piece required for {square_name(from_idx)}{square_name(to_idx)}"
    )


def _promotion_type(promotion: PieceType | int | str | None) -> PieceType | None:
    if promotion is None:
        return None
    if isinstance(promotion, str):
        promo_type = _PROMOTION_LETTERS.get(promotion.lower())
    else:
        promo_type = _PROMOTION_TYPES.get(promotion)
    if promo_type is None:
        raise IllegalMoveError(f"Invalid promotion piece: {promotion!r}")
    return promo_type


def _commit(before: GameRecord, after: GameRecord) -> MoveResult:
    ply = after.plies[-1]
    _LOGGER.debug("Played %s -> %s", ply.san, ply.fen_after)
    if ply.status.is_game_over and not before.status.is_game_over:
        _LOGGER.info("Game over after %s: %s", ply.san, ply.status.message)
    return MoveResult(success=True, record=after, move=ply.move, san=ply.san)
