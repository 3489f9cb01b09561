# -*- coding: utf-8 -*-
"""Boolean, slicing and tessellation layer for procedurally generated meshes.

The public surface is re-exported here; the kernel-facing pieces live in
:mod:`carve.boolean`, :mod:`carve.slicing`, :mod:`carve.clipping` and
:mod:`carve.voronoi`.
"""

from importlib.metadata import PackageNotFoundError, version

from carve.boolean import (
    difference,
    difference_all,
    extrude_shape,
    hull,
    hull_all,
    hull_from_points,
    intersection,
    intersection_all,
    is_manifold,
    mesh_status,
    release_cache,
    solidify,
    union,
    union_all,
)
from carve.clipping import (
    shape_difference,
    shape_intersection,
    shape_offset,
    shape_union,
    shape_xor,
    shapes_union,
)
from carve.config import JoinType, OffsetOptions, SliceOptions, VoronoiOptions
from carve.mesh import Mesh, Pose, box_mesh, concat_meshes
from carve.shape import Shape, circle_shape, ngon_shape, rect_shape
from carve.slicing import slice_mesh
from carve.voronoi import voronoi_shell

try:
    __version__ = version("carve-geometry")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

__all__ = [
    'Mesh',
    'Pose',
    'Shape',
    'JoinType',
    'OffsetOptions',
    'SliceOptions',
    'VoronoiOptions',
    'box_mesh',
    'concat_meshes',
    'circle_shape',
    'rect_shape',
    'ngon_shape',
    'union',
    'union_all',
    'difference',
    'difference_all',
    'intersection',
    'intersection_all',
    'hull',
    'hull_all',
    'hull_from_points',
    'solidify',
    'extrude_shape',
    'release_cache',
    'is_manifold',
    'mesh_status',
    'slice_mesh',
    'shape_union',
    'shape_difference',
    'shape_intersection',
    'shape_xor',
    'shape_offset',
    'shapes_union',
    'voronoi_shell',
]
