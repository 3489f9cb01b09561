import pytest

from carve.clipping import (
    shape_difference,
    shape_intersection,
    shape_offset,
    shape_union,
    shape_xor,
    shapes_union,
)
from carve.config import ClipperConfig, JoinType, OffsetOptions
from carve.errors import ConfigError
from carve.geometry_utils import point_in_polygon, signed_area
from carve.shape import Shape, circle_shape, rect_shape, translate_shape


def _square(size, x=0.0, y=0.0):
    return translate_shape(rect_shape(size, size), x, y)


def _check_orientation(shape):
    assert signed_area(shape.points) > 0
    for hole in shape.holes:
        assert signed_area(hole) < 0
        assert all(point_in_polygon(p, shape.points) for p in hole)


def _area(shape):
    return signed_area(shape.points) + sum(signed_area(h) for h in shape.holes)


class TestBooleans:

    def test_union_of_overlapping_squares(self):
        result = shape_union(_square(10), _square(10, 5, 0))
        _check_orientation(result)
        assert _area(result) == pytest.approx(150.0, rel=1e-3)
        assert result.bounds() == pytest.approx((-5.0, -5.0, 10.0, 5.0))

    def test_difference_makes_washer(self):
        washer = shape_difference(_square(10), _square(4))
        _check_orientation(washer)
        assert len(washer.holes) == 1
        assert _area(washer) == pytest.approx(84.0, rel=1e-3)

    def test_difference_that_removes_everything_returns_first(self):
        small = _square(2)
        assert shape_difference(small, _square(10)) is small

    def test_intersection_lens(self):
        a = translate_shape(circle_shape(5, 64), -2, 0)
        b = translate_shape(circle_shape(5, 64), 2, 0)
        lens = shape_intersection(a, b)
        _check_orientation(lens)
        xmin, _, xmax, _ = lens.bounds()
        assert xmin == pytest.approx(-3.0, abs=0.05)
        assert xmax == pytest.approx(3.0, abs=0.05)

    def test_disjoint_intersection_is_none(self):
        assert shape_intersection(_square(2), _square(2, 10, 10)) is None

    def test_xor_splits_into_regions(self):
        strip = rect_shape(10, 2)
        middle = rect_shape(2, 2)
        pieces = shape_xor(strip, middle)
        assert len(pieces) == 2
        for piece in pieces:
            _check_orientation(piece)
            assert _area(piece) == pytest.approx(8.0, rel=1e-3)

    def test_xor_of_nested_squares_is_washer(self):
        pieces = shape_xor(_square(10), _square(4))
        assert len(pieces) == 1
        _check_orientation(pieces[0])
        assert len(pieces[0].holes) == 1
        assert _area(pieces[0]) == pytest.approx(84.0, rel=1e-3)

    def test_xor_regions_each_keep_their_hole(self):
        left = shape_difference(_square(10, -20, 0), _square(4, -20, 0))
        right = shape_difference(_square(10, 20, 0), _square(4, 20, 0))
        pieces = shape_xor(left, right)
        assert len(pieces) == 2
        for piece in pieces:
            _check_orientation(piece)
            assert len(piece.holes) == 1
            assert _area(piece) == pytest.approx(84.0, rel=1e-3)

    def test_xor_nested_rings_keep_their_own_holes(self):
        ring = shape_difference(_square(20), _square(16))
        island = shape_difference(_square(12), _square(8))
        pieces = shape_xor(ring, island)
        assert len(pieces) == 2
        by_area = {round(signed_area(p.points)): p for p in pieces}
        assert set(by_area) == {400, 144}
        assert [round(signed_area(h)) for h in by_area[400].holes] == [-256]
        assert [round(signed_area(h)) for h in by_area[144].holes] == [-64]
        for piece in pieces:
            _check_orientation(piece)

    def test_xor_identical_returns_first(self):
        sq = _square(4)
        assert shape_xor(sq, sq) == [sq]

    def test_result_keeps_holes_of_operand(self):
        washer = Shape(_square(10).points, [list(reversed(_square(2).points))])
        merged = shape_union(washer, _square(2, 20, 0))
        # the separate square is dropped, the largest region keeps its hole
        assert len(merged.holes) == 1
        _check_orientation(merged)

    def test_shapes_union(self):
        squares = [_square(2, x, 0) for x in (0, 1, 2, 3)]
        merged = shapes_union(squares)
        assert _area(merged) == pytest.approx(10.0, rel=1e-3)
        assert shapes_union([]) is None

    def test_grid_snapping(self):
        coarse = ClipperConfig(scale=1.0)
        result = shape_union(_square(1.2), _square(1.2), coarse)
        assert result.bounds() == pytest.approx((-1.0, -1.0, 1.0, 1.0))
        with pytest.raises(ConfigError):
            ClipperConfig(scale=0)


class TestOffset:

    def test_inset_square(self):
        inset = shape_offset(_square(10), -1.0)
        xmin, ymin, xmax, ymax = inset.bounds()
        assert xmax - xmin == pytest.approx(8.0, abs=1e-3)
        assert ymax - ymin == pytest.approx(8.0, abs=1e-3)
        _check_orientation(inset)

    def test_outset_join_types(self):
        square = _square(10)
        miter = shape_offset(square, 1.0, OffsetOptions(join_type='miter'))
        square_join = shape_offset(square, 1.0, OffsetOptions(join_type=JoinType.SQUARE))
        rounded = shape_offset(square, 1.0)
        assert _area(miter) == pytest.approx(144.0, rel=1e-3)
        assert _area(rounded) < _area(miter)
        assert _area(rounded) - 1e-6 <= _area(square_join) <= _area(miter) + 1e-6
        assert _area(rounded) > 140.0

    def test_shrinking_away_gives_none(self):
        assert shape_offset(_square(2), -2.0) is None

    def test_offset_list_filters_vanished(self):
        shapes = [_square(10), _square(1, 20, 0)]
        grown = shape_offset(shapes, -1.0)
        assert len(grown) == 1
        assert shape_offset([], 1.0) == []

    def test_bad_options(self):
        with pytest.raises(ConfigError):
            OffsetOptions(join_type='bevel')
        with pytest.raises(ConfigError):
            OffsetOptions(miter_limit=0.5)
