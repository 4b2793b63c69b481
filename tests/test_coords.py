import pytest

from mandgrid import Complex, CoordRange, RowCol


def test_coord_range_size_and_portions():
    a = CoordRange(-2.0, 3.0)
    assert a.size() == 5.0
    assert a.get_position_by_portion(0.0) == -2.0
    assert a.get_position_by_portion(0.5) == 0.5
    assert a.get_position_by_portion(1.0) == 3.0


def test_coord_range_extrapolates_outside_unit_interval():
    a = CoordRange(0.0, 2.0)
    assert a.get_position_by_portion(-0.5) == -1.0
    assert a.get_position_by_portion(1.5) == 3.0


def test_coord_range_allows_degenerate_interval():
    a = CoordRange(1.25, 1.25)
    assert a.size() == 0.0
    assert a.get_position_by_portion(0.7) == 1.25


def test_coord_range_rejects_inverted_bounds():
    with pytest.raises(ValueError, match="min <= max"):
        CoordRange(1.0, -1.0)


def test_coord_range_is_immutable():
    a = CoordRange(-1.0, 1.0)
    with pytest.raises(AttributeError):
        a.min = 0.0  # type: ignore[misc]


def test_rowcol_from_index():
    r1 = RowCol.from_index(0, 512, 512)
    assert (r1.row, r1.col) == (0, 0)

    r2 = RowCol.from_index(153_800, 512, 512)
    assert (r2.row, r2.col) == (300, 200)


def test_rowcol_index_round_trips_on_non_square_grid():
    width, height = 7, 3
    for index in range(width * height):
        rc = RowCol.from_index(index, width, height)
        assert 0 <= rc.row < height
        assert 0 <= rc.col < width
        assert rc.index == index


def test_rowcol_to_complex_maps_origin_pixel_to_viewport_corner():
    r1 = RowCol.from_index(0, 512, 512)
    c = r1.to_complex(CoordRange(-2.0, 1.0), CoordRange(-1.5, 1.5))
    assert c == Complex(-2.0, -1.5)


def test_rowcol_to_complex_columns_follow_real_axis():
    rc = RowCol.from_index(6, 4, 2)  # row 1, col 2
    c = rc.to_complex(CoordRange(-1.0, 1.0), CoordRange(-1.0, 1.0))
    assert c == Complex(0.0, 0.0)

    rc = RowCol.from_index(1, 4, 2)  # row 0, col 1
    c = rc.to_complex(CoordRange(-1.0, 1.0), CoordRange(-1.0, 1.0))
    assert c == Complex(-0.5, -1.0)
