"""Triangle mesh value type exchanged with the modelling front end."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from carve.config import DEFAULT_HEADING, DEFAULT_POSITION, DEFAULT_UP
from carve.geometry_utils import Vec3, to_vec3

Face = Tuple[int, int, int]


@dataclass(frozen=True)
class Pose:
    """Rigid frame a mesh is stamped with when it is created."""

    position: Vec3 = DEFAULT_POSITION
    heading: Vec3 = DEFAULT_HEADING
    up: Vec3 = DEFAULT_UP

    def __post_init__(self):
        object.__setattr__(self, 'position', to_vec3(self.position))
        object.__setattr__(self, 'heading', to_vec3(self.heading))
        object.__setattr__(self, 'up', to_vec3(self.up))

    def moved_to(self, position: Sequence[float]) -> "Pose":
        return replace(self, position=to_vec3(position))


DEFAULT_CREATION_POSE = Pose()


@dataclass
class Mesh:
    """Vertex list plus triangle index list.

    ``creation_pose`` and ``material`` are carried through boolean results
    from the first operand.  A mesh returned by a boolean operation may hold
    the kernel handle it was built from; that slot is private, owned by the
    mesh, and is consumed by the next boolean the mesh takes part in.
    """

    vertices: List[Vec3] = field(default_factory=list)
    faces: List[Face] = field(default_factory=list)
    creation_pose: Optional[Pose] = None
    material: Optional[Dict[str, Any]] = None
    _native: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        self.vertices = [to_vec3(v) for v in self.vertices]
        faces = []
        for face in self.faces:
            if len(face) != 3:
                raise ValueError(f'faces must be triangles, got {face!r}')
            faces.append((int(face[0]), int(face[1]), int(face[2])))
        self.faces = faces

    @property
    def is_empty(self) -> bool:
        return not self.faces

    @property
    def has_cache(self) -> bool:
        return self._native is not None

    def with_metadata_from(self, other: "Mesh") -> "Mesh":
        """Copy ``creation_pose`` and ``material`` from ``other`` when set."""

        if other.creation_pose is not None:
            self.creation_pose = other.creation_pose
        if other.material is not None:
            self.material = other.material
        return self

    def indices_in_range(self) -> bool:
        count = len(self.vertices)
        return all(0 <= i < count for face in self.faces for i in face)


def box_mesh(sx: float, sy: float, sz: float,
             center: Sequence[float] = (0.0, 0.0, 0.0), **kwargs) -> Mesh:
    """Return a closed 12-triangle box with outward-facing winding."""

    cx, cy, cz = to_vec3(center)
    hx, hy, hz = sx / 2.0, sy / 2.0, sz / 2.0
    vertices = [
        (cx - hx, cy - hy, cz - hz),
        (cx + hx, cy - hy, cz - hz),
        (cx + hx, cy + hy, cz - hz),
        (cx - hx, cy + hy, cz - hz),
        (cx - hx, cy - hy, cz + hz),
        (cx + hx, cy - hy, cz + hz),
        (cx + hx, cy + hy, cz + hz),
        (cx - hx, cy + hy, cz + hz),
    ]
    faces = [
        (0, 2, 1), (0, 3, 2),  # bottom
        (4, 5, 6), (4, 6, 7),  # top
        (0, 1, 5), (0, 5, 4),  # front
        (2, 3, 7), (2, 7, 6),  # back
        (1, 2, 6), (1, 6, 5),  # right
        (0, 4, 7), (0, 7, 3),  # left
    ]
    return Mesh(vertices, faces, **kwargs)


def concat_meshes(meshes: Iterable[Mesh]) -> Optional[Mesh]:
    """Merge meshes into one without any boolean resolution.

    The result is generally not a valid solid, but it is fine for sampling
    and display.  Pose and material come from the first mesh; the pose is
    moved to the centroid of all vertices.
    """

    meshes = list(meshes)
    if not meshes:
        return None

    vertices: List[Vec3] = []
    faces: List[Face] = []
    for mesh in meshes:
        offset = len(vertices)
        vertices.extend(mesh.vertices)
        faces.extend((a + offset, b + offset, c + offset) for a, b, c in mesh.faces)

    first = meshes[0]
    base_pose = first.creation_pose or DEFAULT_CREATION_POSE
    if vertices:
        n = float(len(vertices))
        centroid = (sum(v[0] for v in vertices) / n,
                    sum(v[1] for v in vertices) / n,
                    sum(v[2] for v in vertices) / n)
        pose = base_pose.moved_to(centroid)
    else:
        pose = base_pose
    return Mesh(vertices, faces, creation_pose=pose, material=first.material)


__all__ = ['Face', 'Pose', 'DEFAULT_CREATION_POSE', 'Mesh', 'box_mesh', 'concat_meshes']
