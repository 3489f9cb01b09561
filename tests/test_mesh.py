import pytest

from carve.mesh import DEFAULT_CREATION_POSE, Mesh, Pose, box_mesh, concat_meshes
from carve.shape import (
    Shape,
    circle_shape,
    ngon_shape,
    polygon_shape,
    rect_shape,
    reverse_shape,
    scale_shape,
    translate_shape,
)
from carve.geometry_utils import signed_area


def test_box_mesh_counts_and_extent():
    box = box_mesh(2, 4, 6, center=(1, 1, 1))
    assert len(box.vertices) == 8
    assert len(box.faces) == 12
    assert box.indices_in_range()
    xs = [v[0] for v in box.vertices]
    zs = [v[2] for v in box.vertices]
    assert min(xs) == pytest.approx(0.0) and max(xs) == pytest.approx(2.0)
    assert min(zs) == pytest.approx(-2.0) and max(zs) == pytest.approx(4.0)


def test_mesh_rejects_non_triangle_faces():
    with pytest.raises(ValueError):
        Mesh([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)], [(0, 1, 2, 3)])


def test_mesh_defaults():
    mesh = Mesh()
    assert mesh.is_empty
    assert not mesh.has_cache
    assert mesh.creation_pose is None
    assert mesh.material is None


def test_indices_in_range_detects_bad_face():
    mesh = Mesh([(0, 0, 0), (1, 0, 0), (0, 1, 0)], [(0, 1, 7)])
    assert not mesh.indices_in_range()


def test_with_metadata_from_copies_only_set_fields():
    pose = Pose(position=(1, 2, 3))
    source = Mesh(creation_pose=pose)
    target = Mesh(material={'color': 'red'})
    target.with_metadata_from(source)
    assert target.creation_pose == pose
    assert target.material == {'color': 'red'}


def test_pose_moved_to_keeps_orientation():
    pose = Pose(heading=(0, 1, 0)).moved_to((5, 5, 5))
    assert pose.position == (5.0, 5.0, 5.0)
    assert pose.heading == (0.0, 1.0, 0.0)
    assert DEFAULT_CREATION_POSE.up == (0.0, 0.0, 1.0)


def test_concat_meshes_offsets_faces_and_moves_pose():
    a = box_mesh(2, 2, 2, material={'name': 'a'})
    b = box_mesh(2, 2, 2, center=(10, 0, 0))
    merged = concat_meshes([a, b])
    assert len(merged.vertices) == 16
    assert len(merged.faces) == 24
    assert merged.indices_in_range()
    assert merged.faces[12] == tuple(i + 8 for i in b.faces[0])
    assert merged.material == {'name': 'a'}
    assert merged.creation_pose.position == pytest.approx((5.0, 0.0, 0.0))
    assert concat_meshes([]) is None


class TestShapes:

    def test_circle_is_ccw_and_sized(self):
        circle = circle_shape(5.0, 64)
        assert len(circle.points) == 64
        assert circle.centered
        assert signed_area(circle.points) == pytest.approx(3.14159 * 25.0, rel=0.01)

    def test_rect_and_bounds(self):
        rect = rect_shape(4, 2)
        assert rect.bounds() == (-2.0, -1.0, 2.0, 1.0)
        assert signed_area(rect.points) == pytest.approx(8.0)

    def test_ngon_first_vertex(self):
        hexagon = ngon_shape(6, 3.0)
        assert len(hexagon.points) == 6
        assert hexagon.points[0] == (pytest.approx(0.0, abs=1e-12), pytest.approx(-3.0))

    def test_polygon_shape_is_not_centered(self):
        shape = polygon_shape([(0, 0), (1, 0), (0, 1)])
        assert not shape.centered
        assert shape.contours() == [[(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]]

    def test_transforms_touch_holes(self):
        shape = Shape(rect_shape(10, 10).points, [list(reversed(rect_shape(2, 2).points))])
        moved = translate_shape(shape, 5, 0)
        assert moved.bounds() == (0.0, -5.0, 10.0, 5.0)
        assert moved.holes[0][0][0] == pytest.approx(shape.holes[0][0][0] + 5)
        scaled = scale_shape(shape, 2)
        assert signed_area(scaled.points) == pytest.approx(400.0)
        assert signed_area(scaled.holes[0]) == pytest.approx(-16.0)
        flipped = reverse_shape(shape)
        assert signed_area(flipped.points) < 0
        assert signed_area(flipped.holes[0]) > 0
