# manual.py: checks for hand-entered tour moves
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Tuple

from board import Board
from models import Path, Point
from pieces import Piece


class MoveWarning(IntEnum):
    """Ordered from harmless to hard error."""

    OK = 0
    NO_MOVES = 1
    REPEATED = 2
    ALREADY_DONE = 3
    NOT_VALID = 4
    NON_EXISTENT = 5

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def severity(self) -> str:
        if self <= MoveWarning.NO_MOVES:
            return "ok"
        if self <= MoveWarning.NOT_VALID:
            return "warning"
        return "error"


_MESSAGES = {
    MoveWarning.OK: "OK",
    MoveWarning.NO_MOVES: "No moves to judge against",
    MoveWarning.REPEATED: "Cell is the same as the last cell.",
    MoveWarning.ALREADY_DONE: "Cell already passed through",
    MoveWarning.NOT_VALID: "Not a valid piece move",
    MoveWarning.NON_EXISTENT: "Point does not exist on the board",
}


class ManualFreedom(Enum):
    VALID_ONLY = "Only valid"
    ANY_POSSIBLE = "Any possible"
    FREE = "Completely free"

    @property
    def description(self) -> str:
        if self is ManualFreedom.FREE:
            return "Choose any move that is on the board. The most free option available."
        if self is ManualFreedom.ANY_POSSIBLE:
            return "Choose only valid piece moves. Cells may still be visited more than once."
        return (
            "Choose only valid piece moves onto cells not visited yet. "
            "The most restrictive option available."
        )

    def accepts(self, warning: MoveWarning) -> bool:
        if self is ManualFreedom.FREE:
            return warning is not MoveWarning.NON_EXISTENT
        if self is ManualFreedom.ANY_POSSIBLE:
            return warning < MoveWarning.NOT_VALID
        return warning <= MoveWarning.NO_MOVES

    def check_move(self, board: Board, piece: Piece, path: Path, nxt: Point) -> Tuple[bool, MoveWarning]:
        warning = move_warning(board, piece, path, nxt)
        return self.accepts(warning), warning


def move_warning(board: Board, piece: Piece, path: Path, nxt: Point) -> MoveWarning:
    if not board.validate(nxt):
        return MoveWarning.NON_EXISTENT
    last = path.last()
    if last is None:
        return MoveWarning.NO_MOVES
    if last.to == nxt:
        return MoveWarning.REPEATED
    if not piece.is_valid_move(last.to, nxt):
        return MoveWarning.NOT_VALID
    if nxt in path.all_passed_through_points():
        return MoveWarning.ALREADY_DONE
    return MoveWarning.OK


__all__ = ["MoveWarning", "ManualFreedom", "move_warning"]
