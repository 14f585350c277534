"""Tests for GameRecord and MoveRecord."""

import dataclasses

import pytest

from chessrules.config import RulesConfig
from chessrules.core.enums import Color, DrawReason, PieceType
from chessrules.core.errors import EmptyHistoryError, IllegalMoveError
from chessrules.core.notation import STARTING_FEN, position_from_fen
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.types import parse_square
from chessrules.game.record import GameRecord

KNIGHT_SHUFFLE = "4k2n/8/8/8/8/8/8/4K2N w - - 0 1"


class TestGameRecordSetup:
    def test_new_defaults_to_standard_start(self) -> None:
        record = GameRecord.new()
        assert record.position == Position()
        assert record.ply_count == 0
        assert record.side_to_move == Color.WHITE
        assert record.status.message == "White to move"
        assert record.last_move is None
        assert not record.can_undo
        assert not record.can_redo

    def test_new_from_position_copies_it(self, move_of) -> None:
        start = position_from_fen(KNIGHT_SHUFFLE)
        record = GameRecord.new(start)
        start.make_move(move_of(start, "h1f2"))
        assert record.start == position_from_fen(KNIGHT_SHUFFLE)

    def test_start_status_evaluated(self) -> None:
        record = GameRecord.new(position_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1"))
        assert record.status.is_stalemate

    def test_is_frozen(self) -> None:
        record = GameRecord.new()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.plies = ()  # type: ignore[misc]


class TestGameRecordApply:
    def test_apply_returns_new_record(self, move_of) -> None:
        record = GameRecord.new()
        after = record.apply(move_of(record.position, "e2e4"))
        assert record.ply_count == 0
        assert record.position == Position()
        assert after.ply_count == 1
        assert after.side_to_move == Color.BLACK
        assert after.sans == ["e4"]
        assert after.last_move == move_of(Position(), "e2e4")

    def test_apply_illegal_move_raises(self, move_of) -> None:
        record = GameRecord.new()
        stale = move_of(Position(), "e2e4")
        after = record.apply(stale)
        with pytest.raises(IllegalMoveError):
            after.apply(stale)

    def test_move_record_fields(self, play) -> None:
        record = play("e4", "d5", "exd5")
        ply = record.plies[-1]
        assert ply.san == "exd5"
        assert ply.was_capture
        assert not ply.was_check
        assert ply.fen_after == "rnbqkbnr/ppp1pppp/8/3P4/8/8/PPPP1PPP/RNBQKBNR b KQkq - 0 2"

    def test_check_flag(self, play) -> None:
        record = play("e4", "f5", "Qh5+")
        assert record.plies[-1].was_check
        assert record.status.in_check
        assert record.status.message == "Black is in check"

    def test_position_at(self, play) -> None:
        record = play("e4", "e5")
        assert record.position_at(0) == Position()
        assert record.position_at(1).side_to_move == Color.BLACK
        assert record.position_at(2) == record.position

    @pytest.mark.parametrize("ply", [-1, 3])
    def test_position_at_out_of_range(self, play, ply: int) -> None:
        record = play("e4", "e5")
        with pytest.raises(IndexError):
            record.position_at(ply)

    def test_legal_moves_from_square(self) -> None:
        record = GameRecord.new()
        assert len(record.legal_moves()) == 20
        assert len(record.legal_moves(parse_square("b1"))) == 2


class TestGameRecordUndoRedo:
    def test_undo_restores_previous(self, play) -> None:
        record = play("e4", "e5")
        back = record.undo()
        assert back.ply_count == 1
        assert back.position == record.position_at(1)
        assert back.can_redo
        assert record.ply_count == 2

    def test_undo_empty_raises(self) -> None:
        with pytest.raises(EmptyHistoryError):
            GameRecord.new().undo()

    def test_redo_replays(self, play) -> None:
        record = play("e4", "e5")
        again = record.undo().undo().redo().redo()
        assert again.sans == ["e4", "e5"]
        assert again.position == record.position
        assert not again.can_redo

    def test_redo_empty_raises(self) -> None:
        with pytest.raises(EmptyHistoryError):
            GameRecord.new().redo()

    def test_new_move_clears_redo(self, play) -> None:
        record = play("e4", "e5").undo()
        branched = play("c5", record=record)
        assert not branched.can_redo
        assert branched.sans == ["e4", "c5"]

    def test_truncate_to_start(self, play) -> None:
        record = play("e4", "e5", "Nf3")
        start = record.truncate(0)
        assert start.ply_count == 0
        assert start.position == Position()
        assert len(start.redo_moves) == 3
        assert start.redo().sans == ["e4"]

    def test_truncate_out_of_range(self, play) -> None:
        with pytest.raises(IndexError):
            play("e4").truncate(2)


class TestRepetition:
    SHUFFLE = ("Nf2", "Nf7", "Nh1", "Nh8")

    def test_counts_include_start(self, play) -> None:
        record = play(*self.SHUFFLE, record=GameRecord.new(position_from_fen(KNIGHT_SHUFFLE)))
        assert record.repetition_count() == 2
        assert record.repetition_count(0) == 1
        assert not record.status.is_draw

    def test_threefold(self, play) -> None:
        start = GameRecord.new(position_from_fen(KNIGHT_SHUFFLE))
        record = play(*self.SHUFFLE, *self.SHUFFLE, record=start)
        assert record.repetition_count() == 3
        assert record.status.draw_reasons == (DrawReason.THREEFOLD_REPETITION,)
        assert record.status.message == "Game over! Draw by repetition"

    def test_lost_castling_right_changes_position(self, play) -> None:
        # Same placement, but white can no longer castle.
        record = play("Nf3", "Nf6", "Rg1", "Ng8", "Rh1", "Nf6", "Ng1", "Ng8")
        assert record.position.board == Position().board
        assert record.repetition_count() == 1

    def test_config_threshold(self, play) -> None:
        start = GameRecord.new(config=RulesConfig(repetition_threshold=2))
        record = play("Nf3", "Nf6", "Ng1", "Ng8", record=start)
        assert record.status.draw_reason == DrawReason.THREEFOLD_REPETITION

    def test_undo_drops_draw(self, play) -> None:
        start = GameRecord.new(position_from_fen(KNIGHT_SHUFFLE))
        record = play(*self.SHUFFLE, *self.SHUFFLE, record=start)
        assert not record.undo().status.is_draw


class TestCapturedPieces:
    def test_by_colour(self, play) -> None:
        record = play("e4", "d5", "exd5", "Qxd5")
        assert record.captured_pieces(Color.WHITE) == [Piece(Color.BLACK, PieceType.PAWN)]
        assert record.captured_pieces(Color.BLACK) == [Piece(Color.WHITE, PieceType.PAWN)]

    def test_en_passant_capture(self, play) -> None:
        record = play("e4", "a6", "e5", "d5", "exd6")
        assert record.captured_pieces(Color.WHITE) == [Piece(Color.BLACK, PieceType.PAWN)]
        assert record.position.board[parse_square("d5")] is None

    def test_none_at_start(self) -> None:
        record = GameRecord.new(position_from_fen(STARTING_FEN))
        assert record.captured_pieces(Color.WHITE) == []
