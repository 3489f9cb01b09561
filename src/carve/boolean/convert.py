"""Conversion between :class:`~carve.mesh.Mesh` and kernel mesh buffers.

The kernel takes a flat float32 vertex-property array (three properties per
vertex) and a uint32 triangle-index array.  Vertex order and index
correspondence are preserved exactly in both directions; nothing is
validated here, the kernel reports bad indices through its status.
"""

from __future__ import annotations

import manifold3d
import numpy as np

from carve.mesh import DEFAULT_CREATION_POSE, Mesh

_NUM_PROP = 3


def mesh_to_native(mesh: Mesh) -> "manifold3d.Mesh":
    """Pack ``mesh`` into kernel buffers."""

    verts = np.asarray(mesh.vertices, dtype=np.float32).reshape(-1, _NUM_PROP)
    faces = np.asarray(mesh.faces, dtype=np.int64).reshape(-1, 3)
    return manifold3d.Mesh(vert_properties=np.ascontiguousarray(verts),
                           tri_verts=np.ascontiguousarray(faces.astype(np.uint32)))


def native_to_mesh(native: "manifold3d.Mesh") -> Mesh:
    """Unpack kernel buffers into a :class:`Mesh` with the default pose.

    Only the first three vertex properties (position) are read.
    """

    props = np.asarray(native.vert_properties, dtype=float)
    tris = np.asarray(native.tri_verts, dtype=np.int64)
    if props.size == 0:
        vertices = []
    else:
        vertices = [tuple(row) for row in props.reshape(len(props), -1)[:, :_NUM_PROP].tolist()]
    faces = [tuple(row) for row in tris.reshape(-1, 3).tolist()] if tris.size else []
    return Mesh(vertices, faces, creation_pose=DEFAULT_CREATION_POSE)


__all__ = ['mesh_to_native', 'native_to_mesh']
