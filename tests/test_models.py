from board import Board
from models import Move, Path, Point


def test_displace_leaves_positive_quadrant_returns_none():
    p = Point(1, 2)
    assert p.displace((2, 1)) == Point(3, 3)
    assert p.displace((-1, 0)) is None
    assert p.displace((0, -2)) is None


def test_new_checked_respects_board_bounds():
    board = Board(3, 4)
    assert Point.new_checked(3, 4, board) == Point(3, 4)
    assert Point.new_checked(4, 1, board) is None
    assert Move.new_checked(Point(1, 1), Point(3, 2), board) == Move(Point(1, 1), Point(3, 2))
    assert Move.new_checked(Point(1, 1), Point(1, 5), board) is None


def test_point_key_roundtrip_and_str():
    p = Point(7, 12)
    assert Point.from_key(p.key()) == p
    assert str(p) == "(7, 12)"


def test_path_passed_through_points_skips_terminal_marker():
    a, b, c = Point(1, 1), Point(3, 2), Point(5, 1)
    path = Path([Move(a, b), Move(b, c), Move(c, c)])

    assert len(path) == 3
    assert path.tour_length == 2
    assert path.all_passed_through_points() == [a, b, c]
    assert str(path) == "(1, 1) -> (3, 2)\n(3, 2) -> (5, 1)\n(5, 1) -> (5, 1)\n"


def test_single_cell_tour_is_just_the_marker():
    a = Point(2, 2)
    path = Path([Move(a, a)])
    assert path.tour_length == 0
    assert path.all_passed_through_points() == [a]


def test_path_editing():
    a, b = Point(1, 1), Point(2, 3)
    path = Path()
    assert path.last() is None
    assert path.undo() is None
    assert path.all_passed_through_points() == []

    path.append(Move(a, b))
    assert path.last() == Move(a, b)
    assert path.find_index(Move(a, b)) == 0
    assert path.find_index(Move(b, a)) is None
    assert path.undo() == Move(a, b)
    assert len(path) == 0


def test_path_equality_is_structural():
    a, b = Point(1, 1), Point(2, 3)
    assert Path([Move(a, b)]) == Path([Move(a, b)])
    assert hash(Path([Move(a, b)])) == hash(Path([Move(a, b)]))
    assert Path([Move(a, b)]) != Path([Move(b, a)])
