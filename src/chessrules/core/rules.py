"""High-level chess rules: check, checkmate, stalemate, draw detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessrules.config import DEFAULT_RULES, RulesConfig
from chessrules.core.enums import Color, DrawReason, GameResult, PieceType
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.types import is_light_square

if TYPE_CHECKING:
    from chessrules.core.position import Position

_HEAVY_OR_PAWN: tuple[PieceType, ...] = (PieceType.PAWN, PieceType.ROOK, PieceType.QUEEN)

_DRAW_MESSAGES: dict[DrawReason, str] = {
    DrawReason.STALEMATE: "Game over! Stalemate",
    DrawReason.THREEFOLD_REPETITION: "Game over! Draw by repetition",
    DrawReason.INSUFFICIENT_MATERIAL: "Game over! Draw by insufficient material",
    DrawReason.FIFTY_MOVE_RULE: "Game over! Draw by fifty-move rule",
}


@dataclass(frozen=True, slots=True)
class GameStatus:
    """Everything the presentation layer needs to describe a position."""

    side_to_move: Color
    in_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False
    # Every draw condition that holds, stalemate first.
    draw_reasons: tuple[DrawReason, ...] = ()

    @property
    def is_draw(self) -> bool:
        return bool(self.draw_reasons)

    @property
    def draw_reason(self) -> DrawReason | None:
        return self.draw_reasons[0] if self.draw_reasons else None

    @property
    def is_game_over(self) -> bool:
        return self.is_checkmate or self.is_draw

    @property
    def result(self) -> GameResult:
        if self.is_checkmate:
            if self.side_to_move == Color.WHITE:
                return GameResult.BLACK_WINS
            return GameResult.WHITE_WINS
        if self.is_draw:
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    @property
    def message(self) -> str:
        """One-line status text, e.g. ``"Black is in check"``."""
        side = "White" if self.side_to_move == Color.WHITE else "Black"
        if self.is_checkmate:
            winner = "Black" if self.side_to_move == Color.WHITE else "White"
            return f"Checkmate! {winner} wins"
        if self.draw_reason is not None:
            return _DRAW_MESSAGES[self.draw_reason]
        if self.in_check:
            return f"{side} is in check"
        return f"{side} to move"


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Repetition needs the game's history, so it is passed in as a count by
    the caller (see :class:`~chessrules.game.record.GameRecord`).
    """

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move) and not gen.has_legal_move()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return not gen.is_in_check(position.side_to_move) and not gen.has_legal_move()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """Neither side can ever deliver mate.

        True when no pawns, rooks or queens remain and either at most one
        minor piece is left, or every minor piece is a bishop and all
        bishops stand on squares of one colour.
        """
        board = position.board
        for color in (Color.WHITE, Color.BLACK):
            for pt in _HEAVY_OR_PAWN:
                if board.has_piece(color, pt):
                    return False

        knights = board.count(Color.WHITE, PieceType.KNIGHT) + board.count(
            Color.BLACK, PieceType.KNIGHT
        )
        bishops = board.pieces(Color.WHITE, PieceType.BISHOP) + board.pieces(
            Color.BLACK, PieceType.BISHOP
        )

        if knights + len(bishops) <= 1:
            return True
        if knights:
            return False
        return len({is_light_square(sq) for sq in bishops}) == 1

    @staticmethod
    def is_fifty_move_rule(
        position: Position, config: RulesConfig = DEFAULT_RULES
    ) -> bool:
        # 100 half-moves = 50 full moves
        return position.halfmove_clock >= config.fifty_move_halfmoves

    @staticmethod
    def is_threefold_repetition(
        repetition_count: int, config: RulesConfig = DEFAULT_RULES
    ) -> bool:
        return repetition_count >= config.repetition_threshold

    @staticmethod
    def status(
        position: Position,
        repetition_count: int = 1,
        config: RulesConfig = DEFAULT_RULES,
    ) -> GameStatus:
        """Evaluate check, mate, stalemate and every draw condition.

        Checkmate wins over any simultaneous draw condition.
        """
        gen = MoveGenerator(position)
        side = position.side_to_move
        in_check = gen.is_in_check(side)
        no_moves = not gen.has_legal_move()

        if in_check and no_moves:
            return GameStatus(side_to_move=side, in_check=True, is_checkmate=True)

        reasons: list[DrawReason] = []
        if no_moves:
            reasons.append(DrawReason.STALEMATE)
        if Rules.is_threefold_repetition(repetition_count, config):
            reasons.append(DrawReason.THREEFOLD_REPETITION)
        if config.detect_insufficient_material and Rules.is_insufficient_material(
            position
        ):
            reasons.append(DrawReason.INSUFFICIENT_MATERIAL)
        if Rules.is_fifty_move_rule(position, config):
            reasons.append(DrawReason.FIFTY_MOVE_RULE)

        return GameStatus(
            side_to_move=side,
            in_check=in_check,
            is_stalemate=no_moves,
            draw_reasons=tuple(reasons),
        )

    @staticmethod
    def game_result(
        position: Position,
        repetition_count: int = 1,
        config: RulesConfig = DEFAULT_RULES,
    ) -> GameResult:
        """Determine the current game result."""
        return Rules.status(position, repetition_count, config).result
