"""PGN export helpers (movetext and single-game documents)."""

from __future__ import annotations

from chessrules.core.enums import GameResult

_SEVEN_TAG_ROSTER: tuple[str, ...] = (
    "Event",
    "Site",
    "Date",
    "Round",
    "White",
    "Black",
    "Result",
)


def pgn_result_token(result: GameResult) -> str:
    """Convert :class:`GameResult` to a PGN result token."""
    if result == GameResult.WHITE_WINS:
        return "1-0"
    if result == GameResult.BLACK_WINS:
        return "0-1"
    if result == GameResult.DRAW:
        return "1/2-1/2"
    return "*"


def pgn_movetext_from_sans(
    sans: list[str],
    result_token: str,
    first_ply_black: bool = False,
    first_move_number: int = 1,
) -> str:
    """Build PGN movetext from SAN moves and a result token.

    A game set up with black to move starts with ``"N..."``.
    """
    parts: list[str] = []
    offset = 1 if first_ply_black else 0
    for ply, san in enumerate(sans, start=offset):
        number = first_move_number + ply // 2
        if ply % 2 == 0:
            parts.append(f"{number}.")
        elif ply == offset:
            parts.append(f"{number}...")
        parts.append(san)
    parts.append(result_token)
    return " ".join(parts)


def build_pgn(
    headers: dict[str, str],
    sans: list[str],
    result_token: str,
    start_fen: str | None = None,
    first_ply_black: bool = False,
    first_move_number: int = 1,
) -> str:
    """Build a single-game PGN document.

    Missing Seven Tag Roster entries are filled with ``"?"``; a non-standard
    start position adds the ``SetUp`` / ``FEN`` pair.
    """
    tags: dict[str, str] = {key: headers.get(key, "?") for key in _SEVEN_TAG_ROSTER}
    tags["Result"] = result_token
    for key, value in headers.items():
        if key not in tags:
            tags[key] = value
    if start_fen is not None:
        tags["SetUp"] = "1"
        tags["FEN"] = start_fen

    lines: list[str] = []
    for key, value in tags.items():
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        lines.append(f'[{key} "{escaped}"]')
    lines.append("")
    lines.append(
        pgn_movetext_from_sans(sans, result_token, first_ply_black, first_move_number)
    )
    lines.append("")
    return "\n".join(lines)
