import pytest

from models import Point
from pieces import PRESETS, STANDARD_KNIGHT, custom_piece, leaper, preset


def test_standard_knight_has_eight_moves_in_order():
    assert STANDARD_KNIGHT.moves == (
        (2, 1), (1, 2), (-1, 2), (-2, 1),
        (-2, -1), (-1, -2), (1, -2), (2, -1),
    )


def test_is_valid_move_is_position_independent():
    assert STANDARD_KNIGHT.is_valid_move(Point(1, 1), Point(3, 2))
    assert STANDARD_KNIGHT.is_valid_move(Point(5, 5), Point(3, 4))
    assert not STANDARD_KNIGHT.is_valid_move(Point(1, 1), Point(2, 2))


def test_relative_points_drop_nonpositive_coordinates():
    assert STANDARD_KNIGHT.relative_points(Point(1, 1)) == [Point(3, 2), Point(2, 3)]


def test_square_leaper_collapses_duplicates():
    ferz = leaper(1, 1)
    assert len(ferz.moves) == 4


def test_custom_piece_validation():
    with pytest.raises(ValueError):
        custom_piece([])
    with pytest.raises(ValueError):
        custom_piece([(0, 0), (1, 0)])
    wazir = custom_piece([(1, 0), (0, 1), (1, 0)], "Wazir")
    assert wazir.moves == ((1, 0), (0, 1))


def test_presets_lookup():
    assert set(PRESETS) == {"knight", "camel", "zebra", "giraffe"}
    assert preset(" Camel ") is PRESETS["camel"]
    assert preset("dragon") is None
