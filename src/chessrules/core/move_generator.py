"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, NamedTuple

from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.move import PROMOTION_TYPES, Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from chessrules.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2),
)  # fmt: skip
BISHOP_DIRS: tuple[tuple[int, int], ...] = ((1, 1), (1, -1), (-1, -1), (-1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS
KING_OFFSETS = QUEEN_DIRS

_Rays = tuple[tuple[tuple[Square, ...], ...], ...]


# -- Precomputed lookup tables ---------------------------------------------


def _walk(sq: Square, df: int, dr: int, limit: int) -> tuple[Square, ...]:
    """Squares stepped through from *sq* along (df, dr), at most *limit*."""
    file, rank = file_of(sq) + df, rank_of(sq) + dr
    path: list[Square] = []
    while 0 <= file < 8 and 0 <= rank < 8 and len(path) < limit:
        path.append(make_square(file, rank))
        file, rank = file + df, rank + dr
    return tuple(path)


def _build_rays(directions: tuple[tuple[int, int], ...], limit: int = 7) -> _Rays:
    """[sq] -> one ray per direction, nearest square first."""
    return tuple(
        tuple(_walk(sq, df, dr, limit) for df, dr in directions) for sq in range(64)
    )


def _flatten(rays: _Rays) -> tuple[tuple[Square, ...], ...]:
    return tuple(tuple(s for ray in square_rays for s in ray) for square_rays in rays)


def _to_mask(squares: tuple[Square, ...]) -> int:
    mask = 0
    for s in squares:
        mask |= 1 << s
    return mask


_KNIGHT_TARGETS = _flatten(_build_rays(KNIGHT_OFFSETS, limit=1))
_KING_TARGETS = _flatten(_build_rays(KING_OFFSETS, limit=1))
_KNIGHT_ATTACK_MASKS = tuple(_to_mask(t) for t in _KNIGHT_TARGETS)
_KING_ATTACK_MASKS = tuple(_to_mask(t) for t in _KING_TARGETS)

# [color][sq] -> squares holding a *color* pawn that would attack *sq*.
# A white attacker sits one rank below the target, a black one a rank above.
_PAWN_ATTACKER_MASKS: tuple[tuple[int, ...], ...] = tuple(
    tuple(_to_mask(t) for t in _flatten(_build_rays(((-1, dr), (1, dr)), limit=1)))
    for dr in (-1, 1)
)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)

# Sliding kinds share one ray walker; only the direction set differs.
_SLIDER_RAYS: dict[PieceType, _Rays] = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _build_rays(QUEEN_DIRS),
}


class _CastlePath(NamedTuple):
    flag: MoveFlag
    king_home: Square
    rook_home: Square
    must_be_empty: tuple[Square, ...]
    # Squares the king crosses; the last one is its destination.
    king_path: tuple[Square, ...]


def _castle_path(flag: MoveFlag, rank: int) -> _CastlePath:
    if flag == MoveFlag.CASTLE_KINGSIDE:
        return _CastlePath(
            flag,
            make_square(4, rank),
            make_square(7, rank),
            (make_square(5, rank), make_square(6, rank)),
            (make_square(5, rank), make_square(6, rank)),
        )
    return _CastlePath(
        flag,
        make_square(4, rank),
        make_square(0, rank),
        (make_square(1, rank), make_square(2, rank), make_square(3, rank)),
        (make_square(3, rank), make_square(2, rank)),
    )


# Per colour, in the order kingside, queenside.
_CASTLE_PATHS: dict[Color, tuple[tuple[CastlingRights, _CastlePath], ...]] = {
    Color.WHITE: (
        (CastlingRights.WHITE_KINGSIDE, _castle_path(MoveFlag.CASTLE_KINGSIDE, 0)),
        (CastlingRights.WHITE_QUEENSIDE, _castle_path(MoveFlag.CASTLE_QUEENSIDE, 0)),
    ),
    Color.BLACK: (
        (CastlingRights.BLACK_KINGSIDE, _castle_path(MoveFlag.CASTLE_KINGSIDE, 7)),
        (CastlingRights.BLACK_QUEENSIDE, _castle_path(MoveFlag.CASTLE_QUEENSIDE, 7)),
    ),
}


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The generator mutates the position via ``make_move`` / ``unmake_move``
    internally but always restores it before returning.
    """

    __slots__ = ("_pos", "_board", "_generators")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board
        self._generators: dict[PieceType, Callable[[Square, Piece, list[Move]], None]] = {
            PieceType.PAWN: self._gen_pawn,
            PieceType.KNIGHT: self._gen_knight,
            PieceType.BISHOP: self._gen_sliding,
            PieceType.ROOK: self._gen_sliding,
            PieceType.QUEEN: self._gen_sliding,
            PieceType.KING: self._gen_king,
        }

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self, from_sq: Square | None = None) -> list[Move]:
        """Strictly legal moves for the side to move.

        With *from_sq*, only moves of the piece standing there (an empty
        square or an opponent's piece yields no moves).
        """
        legal: list[Move] = []
        moving_color = self._pos.side_to_move
        append_legal = legal.append

        for move in self.generate_pseudo_legal_moves(from_sq):
            self._pos.make_move(move)
            if not self.is_in_check(moving_color):
                append_legal(move)
            self._pos.unmake_move(move)
        return legal

    def generate_pseudo_legal_moves(self, from_sq: Square | None = None) -> list[Move]:
        """Pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        board = self._board

        if from_sq is not None:
            piece = board[from_sq]
            if piece is not None and piece.color == color:
                self._generators[piece.piece_type](from_sq, piece, moves)
            return moves

        for sq in board.all_pieces(color):
            piece = board[sq]
            assert piece is not None
            self._generators[piece.piece_type](sq, piece, moves)
        return moves

    def has_legal_move(self) -> bool:
        """Whether the side to move has at least one legal move."""
        moving_color = self._pos.side_to_move
        for move in self.generate_pseudo_legal_moves():
            self._pos.make_move(move)
            safe = not self.is_in_check(moving_color)
            self._pos.unmake_move(move)
            if safe:
                return True
        return False

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return self.is_square_attacked(self._board.king_square(color), color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Pure geometry: no king-safety filtering of the attacker's moves.
        """
        board = self._board
        leapers = (
            (PieceType.PAWN, _PAWN_ATTACKER_MASKS[by_color][sq]),
            (PieceType.KNIGHT, _KNIGHT_ATTACK_MASKS[sq]),
            (PieceType.KING, _KING_ATTACK_MASKS[sq]),
        )
        if any(board.pieces_bitboard(by_color, pt) & mask for pt, mask in leapers):
            return True

        queen = Piece(by_color, PieceType.QUEEN)
        for slider, rays in ((PieceType.BISHOP, _BISHOP_RAYS), (PieceType.ROOK, _ROOK_RAYS)):
            attacker = Piece(by_color, slider)
            for ray in rays[sq]:
                blocker = next((board[s] for s in ray if board[s] is not None), None)
                if blocker == attacker or blocker == queen:
                    return True
        return False

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        forward = 8 if piece.color == Color.WHITE else -8
        home_rank = 1 if piece.color == Color.WHITE else 6
        promotes = rank_of(sq + forward) in (0, 7)

        def add(to_sq: Square, captured: Piece | None = None) -> None:
            captured_sq = to_sq if captured is not None else None
            if promotes:
                for promo in PROMOTION_TYPES:
                    moves.append(
                        Move(sq, to_sq, piece, MoveFlag.PROMOTION, promo, captured, captured_sq)
                    )
            else:
                moves.append(Move(sq, to_sq, piece, captured=captured, captured_sq=captured_sq))

        ahead = sq + forward
        if board.is_empty(ahead):
            add(ahead)
            two_ahead = ahead + forward
            if rank_of(sq) == home_rank and board.is_empty(two_ahead):
                moves.append(Move(sq, two_ahead, piece, MoveFlag.DOUBLE_PAWN))

        for side in (-1, 1):
            if not 0 <= file_of(sq) + side < 8:
                continue
            target_sq = ahead + side
            target = board[target_sq]
            if target is not None:
                if target.color != piece.color:
                    add(target_sq, target)
            elif target_sq == self._pos.en_passant:
                passed_sq = target_sq - forward
                passed = board[passed_sq]
                if passed == Piece(piece.color.opposite, PieceType.PAWN):
                    moves.append(
                        Move(
                            sq,
                            target_sq,
                            piece,
                            MoveFlag.EN_PASSANT,
                            captured=passed,
                            captured_sq=passed_sq,
                        )
                    )

    def _gen_knight(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        self._gen_steps(sq, piece, _KNIGHT_TARGETS[sq], moves)

    def _gen_steps(
        self,
        sq: Square,
        piece: Piece,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq, piece))
            elif target.color != piece.color:
                moves.append(Move(sq, to_sq, piece, captured=target, captured_sq=to_sq))

    def _gen_sliding(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        """Shared ray walker for bishops, rooks and queens."""
        board = self._board
        for ray in _SLIDER_RAYS[piece.piece_type][sq]:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq, piece))
                    continue
                if target.color != piece.color:
                    moves.append(Move(sq, to_sq, piece, captured=target, captured_sq=to_sq))
                break

    def _gen_king(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        self._gen_steps(sq, piece, _KING_TARGETS[sq], moves)
        self._gen_castling(sq, piece, moves)

    def _gen_castling(self, king_sq: Square, king: Piece, moves: list[Move]) -> None:
        paths = [p for right, p in _CASTLE_PATHS[king.color] if self._pos.castling & right]
        # Rights can outlive a missing king or rook in a loaded position.
        paths = [
            p
            for p in paths
            if p.king_home == king_sq
            and self._board[p.rook_home] == Piece(king.color, PieceType.ROOK)
        ]
        if not paths or self.is_in_check(king.color):
            return
        opponent = king.color.opposite
        for path in paths:
            if not all(self._board.is_empty(s) for s in path.must_be_empty):
                continue
            if any(self.is_square_attacked(s, opponent) for s in path.king_path):
                continue
            moves.append(Move(king_sq, path.king_path[-1], king, path.flag))


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth* using make/unmake."""
    if depth == 0:
        return 1
    moves = MoveGenerator(position).generate_legal_moves()
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        position.make_move(move)
        nodes += perft(position, depth - 1)
        position.unmake_move(move)
    return nodes
