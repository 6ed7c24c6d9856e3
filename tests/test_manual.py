import pytest

from board import Board
from manual import ManualFreedom, MoveWarning, move_warning
from models import Move, Path, Point
from pieces import STANDARD_KNIGHT


@pytest.fixture
def board():
    return Board(5, 5)


@pytest.fixture
def path():
    # (1, 1) -> (3, 2) -> (5, 3)
    return Path([Move(Point(1, 1), Point(3, 2)), Move(Point(3, 2), Point(5, 3))])


def test_warning_order():
    assert (
        MoveWarning.OK
        < MoveWarning.NO_MOVES
        < MoveWarning.REPEATED
        < MoveWarning.ALREADY_DONE
        < MoveWarning.NOT_VALID
        < MoveWarning.NON_EXISTENT
    )


@pytest.mark.parametrize(
    "nxt, expected",
    [
        (Point(4, 5), MoveWarning.OK),
        (Point(6, 1), MoveWarning.NON_EXISTENT),
        (Point(5, 3), MoveWarning.REPEATED),
        (Point(3, 2), MoveWarning.ALREADY_DONE),
        (Point(5, 4), MoveWarning.NOT_VALID),
    ],
)
def test_move_warning(board, path, nxt, expected):
    assert move_warning(board, STANDARD_KNIGHT, path, nxt) is expected


def test_empty_path_has_nothing_to_judge(board):
    assert move_warning(board, STANDARD_KNIGHT, Path(), Point(3, 3)) is MoveWarning.NO_MOVES


@pytest.mark.parametrize(
    "freedom, nxt, ok",
    [
        (ManualFreedom.VALID_ONLY, Point(4, 5), True),
        (ManualFreedom.VALID_ONLY, Point(3, 2), False),
        (ManualFreedom.ANY_POSSIBLE, Point(3, 2), True),
        (ManualFreedom.ANY_POSSIBLE, Point(5, 4), False),
        (ManualFreedom.ANY_POSSIBLE, Point(9, 9), False),
        (ManualFreedom.FREE, Point(5, 4), True),
        (ManualFreedom.FREE, Point(9, 9), False),
    ],
)
def test_freedom_levels(board, path, freedom, nxt, ok):
    accepted, warning = freedom.check_move(board, STANDARD_KNIGHT, path, nxt)
    assert accepted is ok
    assert warning is move_warning(board, STANDARD_KNIGHT, path, nxt)


def test_messages_and_severity():
    assert MoveWarning.NON_EXISTENT.severity == "error"
    assert MoveWarning.ALREADY_DONE.severity == "warning"
    assert MoveWarning.NO_MOVES.severity == "ok"
    assert MoveWarning.NOT_VALID.message == "Not a valid piece move"
    assert "restrictive" in ManualFreedom.VALID_ONLY.description
