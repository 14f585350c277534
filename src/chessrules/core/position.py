"""Position - one Board State (board + metadata) with make/unmake and apply."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.errors import IllegalMoveError
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, make_square, rank_of
from chessrules.core import zobrist

# Rook home square -> the right that dies when anything moves from / onto it.
ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}


@dataclass(slots=True)
class _PositionState:
    """Snapshot saved before each move so we can undo it."""

    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    zobrist_hash: int


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Two ways to move:

    * :meth:`apply` is the public, pure transform. It validates the move and
      returns a fresh :class:`Position`; ``self`` is untouched.
    * :meth:`make_move` / :meth:`unmake_move` mutate in place via an internal
      undo stack. The move generator uses them to probe king safety and
      always restores the position before returning.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_zobrist_hash",
        "_history",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._zobrist_hash = zobrist.full_key(
            self.board, side_to_move, castling, en_passant
        )
        self._history: list[_PositionState] = []

    # ── Pure transform ───────────────────────────────────────────────────

    def apply(self, move: Move) -> Position:
        """Return the position after the legal *move*.

        Raises :class:`IllegalMoveError` if *move* is not one of this
        position's legal moves.
        """
        from chessrules.core.move_generator import MoveGenerator

        if move not in MoveGenerator(self).generate_legal_moves(move.from_sq):
            raise IllegalMoveError(f"Illegal move in this position: {move}")
        nxt = self.copy()
        nxt.make_move(move)
        nxt._history.clear()
        return nxt

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Apply *move* in place, pushing undo state onto the history stack."""
        self._history.append(
            _PositionState(
                self.castling, self.en_passant, self.halfmove_clock, self._zobrist_hash
            )
        )
        # Castling and en passant keys are swapped out wholesale below.
        self._zobrist_hash ^= self._meta_key()

        piece = move.piece
        self._place(move.from_sq, None)
        if move.captured_sq is not None:
            self._place(move.captured_sq, None)
        if move.promotion is not None:
            self._place(move.to_sq, Piece(piece.color, move.promotion))
        else:
            self._place(move.to_sq, piece)
        if move.is_castle:
            rook_from, rook_to = _rook_castle_squares(move)
            rook = self.board[rook_from]
            self._place(rook_from, None)
            self._place(rook_to, rook)

        # The target only ever survives for the immediate reply.
        self.en_passant = None
        if move.flag == MoveFlag.DOUBLE_PAWN:
            self.en_passant = (move.from_sq + move.to_sq) // 2

        if piece.piece_type == PieceType.KING:
            self.castling &= ~CastlingRights.of(piece.color)
        for sq in (move.from_sq, move.to_sq):
            right = ROOK_CORNERS.get(sq)
            if right is not None:
                self.castling &= ~right

        if piece.piece_type == PieceType.PAWN or move.is_capture:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1
        self.side_to_move = self.side_to_move.opposite

        self._zobrist_hash ^= self._meta_key() ^ zobrist.side_to_move_key()

    def unmake_move(self, move: Move) -> None:
        """Undo the last :meth:`make_move`."""
        state = self._history.pop()

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        board = self.board
        if move.is_castle:
            rook_from, rook_to = _rook_castle_squares(move)
            board[rook_from] = board[rook_to]
            board[rook_to] = None
        board[move.to_sq] = None
        board[move.from_sq] = move.piece
        if move.captured is not None and move.captured_sq is not None:
            board[move.captured_sq] = move.captured

        self.castling = state.castling
        self.en_passant = state.en_passant
        self.halfmove_clock = state.halfmove_clock
        self._zobrist_hash = state.zobrist_hash

    # ── Hash bookkeeping ─────────────────────────────────────────────────

    def _place(self, sq: Square, piece: Piece | None) -> None:
        """Put *piece* (or nothing) on *sq*, keeping the hash in step."""
        previous = self.board[sq]
        if previous is not None:
            self._zobrist_hash ^= zobrist.piece_key(previous, sq)
        if piece is not None:
            self._zobrist_hash ^= zobrist.piece_key(piece, sq)
        self.board[sq] = piece

    def _meta_key(self) -> int:
        key = zobrist.castling_key(self.castling)
        if self.en_passant is not None:
            key ^= zobrist.en_passant_key(self.en_passant)
        return key

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Deep copy without the make/unmake stack."""
        pos = Position.__new__(Position)
        pos.board = self.board.copy()
        pos.side_to_move = self.side_to_move
        pos.castling = self.castling
        pos.en_passant = self.en_passant
        pos.halfmove_clock = self.halfmove_clock
        pos.fullmove_number = self.fullmove_number
        pos._zobrist_hash = self._zobrist_hash
        pos._history = []
        return pos

    @property
    def repetition_key(self) -> int:
        """Zobrist key of (placement, side to move, castling, en passant)."""
        return self._zobrist_hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.board == other.board
            and self.side_to_move == other.side_to_move
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        from chessrules.core.notation.fen import position_to_fen

        return f"Position({position_to_fen(self)!r})"


def _rook_castle_squares(move: Move) -> tuple[Square, Square]:
    r = rank_of(move.from_sq)
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        return make_square(7, r), make_square(5, r)
    return make_square(0, r), make_square(3, r)
