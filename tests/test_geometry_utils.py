import math

import pytest

from carve.geometry_utils import (
    assign_holes,
    classify_contours,
    clean_loop,
    cross,
    ensure_ccw,
    ensure_cw,
    normalize,
    plane_basis,
    point_in_polygon,
    polygon_centroid,
    polygon_perimeter,
    resample_polygon,
    signed_area,
    to_plane_local,
    to_vec2,
    to_vec3,
)


def _square(size=4.0, x=0.0, y=0.0):
    return [(x, y), (x + size, y), (x + size, y + size), (x, y + size)]


def _dot(a, b):
    return sum(p * q for p, q in zip(a, b))


def test_to_vec_helpers_reject_short_input():
    assert to_vec2([1, 2, 3]) == (1.0, 2.0)
    assert to_vec3((1, 2, 3, 1)) == (1.0, 2.0, 3.0)
    with pytest.raises(ValueError):
        to_vec2([1])
    with pytest.raises(ValueError):
        to_vec3([1, 2])


def test_signed_area_sign_follows_winding():
    square = _square()
    assert signed_area(square) == pytest.approx(16.0)
    assert signed_area(list(reversed(square))) == pytest.approx(-16.0)
    assert signed_area(square[:2]) == 0.0


def test_ensure_winding():
    square = _square()
    cw = list(reversed(square))
    assert signed_area(ensure_ccw(cw)) > 0
    assert signed_area(ensure_cw(square)) < 0
    assert ensure_ccw(square) == square


def test_point_in_polygon():
    square = _square()
    assert point_in_polygon((2, 2), square)
    assert not point_in_polygon((5, 2), square)
    assert not point_in_polygon((-1, -1), square)


def test_polygon_centroid_is_area_weighted():
    # an L shape: the vertex average differs from the area centroid
    l_shape = [(0, 0), (4, 0), (4, 1), (1, 1), (1, 4), (0, 4)]
    cx, cy = polygon_centroid(l_shape)
    assert cx == pytest.approx(9.5 / 7.0)
    assert cx == pytest.approx(cy)
    sq_cx, sq_cy = polygon_centroid(_square(2.0, 1.0, 1.0))
    assert (sq_cx, sq_cy) == (pytest.approx(2.0), pytest.approx(2.0))


def test_polygon_centroid_degenerate_falls_back_to_average():
    line = [(0, 0), (2, 0), (4, 0)]
    assert polygon_centroid(line) == (pytest.approx(2.0), pytest.approx(0.0))


def test_resample_polygon_even_spacing():
    pts = resample_polygon(_square(), 8)
    expected = [(0, 0), (2, 0), (4, 0), (4, 2), (4, 4), (2, 4), (0, 4), (0, 2)]
    assert len(pts) == 8
    for got, want in zip(pts, expected):
        assert got[0] == pytest.approx(want[0])
        assert got[1] == pytest.approx(want[1])


def test_resample_polygon_keeps_direction():
    cw = list(reversed(_square()))
    pts = resample_polygon(cw, 13)
    assert len(pts) == 13
    assert signed_area(pts) < 0
    assert polygon_perimeter(pts) == pytest.approx(16.0, rel=0.1)


def test_clean_loop_drops_duplicates_and_collinear():
    loop = [(0, 0), (0, 0), (2, 0), (4, 0), (4, 4), (0, 4), (0, 0)]
    cleaned = clean_loop(loop)
    assert cleaned == [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0)]


def test_classify_contours_splits_by_area_sign():
    outer = _square(10.0)
    hole = list(reversed(_square(2.0, 4.0, 4.0)))
    sliver = [(0, 0), (1, 0)]
    outers, holes = classify_contours([outer, hole, sliver])
    assert len(outers) == 1
    assert len(holes) == 1


def test_assign_holes_to_containing_outer():
    left = _square(10.0)
    right = _square(10.0, 20.0, 0.0)
    hole_right = list(reversed(_square(2.0, 24.0, 4.0)))
    stray = list(reversed(_square(1.0, 50.0, 50.0)))
    assigned = assign_holes([left, right], [hole_right, stray])
    assert assigned[0] == []
    assert assigned[1] == [hole_right]


def test_normalize_and_cross():
    assert normalize((0, 3, 4)) == (0.0, pytest.approx(0.6), pytest.approx(0.8))
    assert cross((1, 0, 0), (0, 1, 0)) == (0, 0, 1)
    with pytest.raises(ValueError):
        normalize((0, 0, 0))


@pytest.mark.parametrize('normal', [(0, 0, 1), (0, 0, -1), (1, 0, 0), (0, 1, 0), (1, 2, 3)])
def test_plane_basis_is_right_handed_orthonormal(normal):
    right, up, n = plane_basis(normal)
    for vec in (right, up, n):
        assert math.sqrt(_dot(vec, vec)) == pytest.approx(1.0)
    assert _dot(right, up) == pytest.approx(0.0, abs=1e-12)
    assert _dot(right, n) == pytest.approx(0.0, abs=1e-12)
    assert _dot(up, n) == pytest.approx(0.0, abs=1e-12)
    assert cross(right, up) == pytest.approx(n)


def test_to_plane_local_projects_onto_frame():
    right, up, n = (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)
    local = to_plane_local([(1, 2, 3), (0, 0, 5)], (0, 0, 5), right, up, n)
    assert local.shape == (2, 3)
    assert local[0].tolist() == pytest.approx([1.0, 2.0, -2.0])
    assert local[1].tolist() == pytest.approx([0.0, 0.0, 0.0])


def test_assign_holes_prefers_innermost_outer():
    # island with its own bore sitting inside the hole of a larger region
    big = _square(20.0, -10.0, -10.0)
    big_hole = list(reversed(_square(16.0, -8.0, -8.0)))
    island = _square(12.0, -6.0, -6.0)
    bore = list(reversed(_square(8.0, -4.0, -4.0)))
    assigned = assign_holes([big, island], [bore, big_hole])
    assert assigned[0] == [big_hole]
    assert assigned[1] == [bore]
