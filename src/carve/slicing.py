"""Planar cross-sections of meshes.

The mesh is moved into the plane's local frame (rows ``right, up, normal``)
and cut by the solid kernel at local ``z = 0``.  The resulting loops are
sorted into filled regions (counter-clockwise) and holes (clockwise); each
hole goes to the region that contains it, so one cut through several
disjoint solids gives one shape per solid.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
from loguru import logger

from carve.boolean.handle import build_handle
from carve.config import SliceOptions
from carve.errors import KernelError
from carve.geometry_utils import (
    assign_holes,
    classify_contours,
    normalize,
    plane_basis,
    to_plane_local,
)
from carve.mesh import Mesh
from carve.shape import Shape

_DEFAULT_OPTIONS = SliceOptions()


def slice_mesh(mesh: Optional[Mesh],
               normal: Sequence[float],
               point: Sequence[float],
               right: Optional[Sequence[float]] = None,
               up: Optional[Sequence[float]] = None,
               options: Optional[SliceOptions] = None) -> List[Shape]:
    """Cut ``mesh`` with the plane through ``point`` perpendicular to ``normal``.

    ``right`` and ``up`` fix the plane's 2D axes; when either is omitted a
    basis is derived from ``normal`` alone.  Returned shapes are in plane
    coordinates (x along ``right``, y along ``up``) and are flagged
    ``preserve_position`` so they stamp back at their absolute location.

    A plane that misses the mesh gives an empty list.
    """

    opts = options or _DEFAULT_OPTIONS
    if mesh is None or mesh.is_empty:
        return []

    if right is None or up is None:
        right, up, unit_normal = plane_basis(normal)
    else:
        unit_normal = normalize(normal)

    # the cached handle, if any, is in world coordinates and cannot be reused
    local = to_plane_local(mesh.vertices, point, right, up, unit_normal)
    local_mesh = Mesh([tuple(v) for v in local.tolist()], mesh.faces)

    try:
        with build_handle(local_mesh, 'slice') as handle:
            section = handle.get().slice(0.0)
            polygons = [np.asarray(p, dtype=float).reshape(-1, 2).tolist()
                        for p in section.to_polygons()]
    except (KernelError, RuntimeError) as exc:
        logger.error(f'slice_mesh failed: {exc}')
        return []

    outers, holes = classify_contours(polygons, opts.min_points)
    if not outers:
        return []

    assigned = assign_holes(outers, holes)
    dropped = len(holes) - sum(len(h) for h in assigned)
    if dropped:
        logger.debug(f'slice_mesh: {dropped} hole(s) outside every region dropped')
    return [Shape(outer, mine, centered=False, preserve_position=True)
            for outer, mine in zip(outers, assigned)]


__all__ = ['slice_mesh']
