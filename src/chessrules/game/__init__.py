"""Game layer - move history ledger and the session API.

Quick start::

    from chessrules.game import api

    record = api.new_game()
    result = api.apply_move(record, "e2", "e4")
    record = result.record
    print(result.status.message)  # "Black to move"
"""

from chessrules.game import api
from chessrules.game.api import LoadResult, MoveResult, UndoResult
from chessrules.game.record import GameRecord, MoveRecord

__all__ = [
    "api",
    "GameRecord",
    "LoadResult",
    "MoveRecord",
    "MoveResult",
    "UndoResult",
]
