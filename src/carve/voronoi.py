"""Procedural Voronoi perforation of 2D shapes.

:func:`voronoi_shell` scatters seeds inside a shape, relaxes them with
Lloyd's algorithm, and turns every Voronoi cell into a hole inset by half
the wall thickness.  Cell borders stay as material.  Every hole is
resampled to the same point count so a sequence of such shapes can be
lofted or extruded slice by slice.

Given the same shape and options the output is identical from run to run:
seeds come from :class:`~carve.rng.Mulberry32` and nothing in the pipeline
depends on hash or set ordering.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from scipy.spatial import QhullError, Voronoi

from carve.clipping import shape_intersection, shape_offset
from carve.config import JoinType, OffsetOptions, VoronoiOptions
from carve.geometry_utils import (
    Vec2,
    bounding_box_2d,
    ensure_ccw,
    ensure_cw,
    point_in_polygon,
    polygon_centroid,
    resample_polygon,
    signed_area,
)
from carve.rng import Mulberry32
from carve.shape import Shape

Bounds = Tuple[float, float, float, float]

_INSET = OffsetOptions(join_type=JoinType.ROUND)


def padded_bounds(points: Sequence[Sequence[float]], margin: float) -> Bounds:
    """Bounding box of ``points`` grown by ``margin`` times its larger span."""

    xmin, ymin, xmax, ymax = bounding_box_2d(points)
    pad = margin * max(xmax - xmin, ymax - ymin)
    return xmin - pad, ymin - pad, xmax + pad, ymax + pad


def generate_seeds(points: Sequence[Sequence[float]], count: int, rng: Mulberry32,
                   attempts_per_cell: int = 100) -> List[Vec2]:
    """Rejection-sample up to ``count`` points inside the loop ``points``.

    Candidates are drawn uniformly from the loop's bounding box.  Sampling
    stops after ``attempts_per_cell * count`` candidates, so very thin or
    concave loops may receive fewer seeds than requested.
    """

    xmin, ymin, xmax, ymax = bounding_box_2d(points)
    xspan = xmax - xmin
    yspan = ymax - ymin
    budget = attempts_per_cell * count
    seeds: List[Vec2] = []
    attempts = 0
    while len(seeds) < count and attempts < budget:
        x = xmin + rng.random() * xspan
        y = ymin + rng.random() * yspan
        attempts += 1
        if point_in_polygon((x, y), points):
            seeds.append((x, y))
    if len(seeds) < count:
        logger.warning(f'voronoi: placed {len(seeds)} of {count} seeds '
                       f'after {attempts} attempts')
    return seeds


def _mirror(seeds: np.ndarray, bounds: Bounds) -> np.ndarray:
    xmin, ymin, xmax, ymax = bounds
    left = seeds.copy()
    left[:, 0] = 2.0 * xmin - left[:, 0]
    right = seeds.copy()
    right[:, 0] = 2.0 * xmax - right[:, 0]
    below = seeds.copy()
    below[:, 1] = 2.0 * ymin - below[:, 1]
    above = seeds.copy()
    above[:, 1] = 2.0 * ymax - above[:, 1]
    return np.vstack([seeds, left, right, below, above])


def voronoi_cells(seeds: Sequence[Sequence[float]], bounds: Bounds) -> List[Optional[List[Vec2]]]:
    """Return one convex, counter-clockwise cell per seed, clipped to ``bounds``.

    Seeds are reflected across the four sides of the rectangle before the
    diagram is built; the bisectors between a seed and its reflections are
    exactly the rectangle's sides, so the cell of every input seed is finite
    and already clipped.  Seeds must lie strictly inside ``bounds``.  A cell
    the diagram cannot produce (e.g. a duplicated seed) is ``None``.
    """

    count = len(seeds)
    if count == 0:
        return []
    xmin, ymin, xmax, ymax = bounds
    pts = np.asarray([(s[0], s[1]) for s in seeds], dtype=np.float64)
    try:
        diagram = Voronoi(_mirror(pts, bounds))
    except QhullError as exc:
        logger.error(f'voronoi: diagram failed for {count} seeds: {exc}')
        return [None] * count

    cells: List[Optional[List[Vec2]]] = []
    for idx in range(count):
        region = diagram.regions[diagram.point_region[idx]]
        if not region or -1 in region:
            cells.append(None)
            continue
        verts = diagram.vertices[region]
        verts[:, 0] = np.clip(verts[:, 0], xmin, xmax)
        verts[:, 1] = np.clip(verts[:, 1], ymin, ymax)
        center = verts.mean(axis=0)
        order = np.argsort(np.arctan2(verts[:, 1] - center[1], verts[:, 0] - center[0]))
        cells.append(ensure_ccw(verts[order].tolist()))
    return cells


def lloyd_relax(seeds: Sequence[Vec2], boundary: Shape, bounds: Bounds,
                iterations: int) -> List[Vec2]:
    """Move each seed to the centroid of its cell clipped to ``boundary``.

    A seed whose clipped cell is empty keeps its position for that
    iteration.
    """

    current = [tuple(s) for s in seeds]
    for _ in range(iterations):
        cells = voronoi_cells(current, bounds)
        moved: List[Vec2] = []
        for seed, cell in zip(current, cells):
            clipped = shape_intersection(Shape(cell), boundary) if cell else None
            if clipped is None:
                logger.debug(f'voronoi: empty cell for seed {seed}, keeping it')
                moved.append(seed)
            else:
                moved.append(polygon_centroid(clipped.points))
        current = moved
    return current


def cell_to_hole(cell: Optional[Sequence[Vec2]], boundary: Shape, wall: float,
                 min_area: float) -> Optional[List[Vec2]]:
    """Clip a cell to ``boundary`` and inset it by ``wall / 2``.

    Returns the inset outline, or ``None`` when the cell vanishes or its
    area does not exceed ``min_area``.
    """

    if not cell:
        return None
    clipped = shape_intersection(Shape(list(cell)), boundary)
    if clipped is None:
        return None
    inset = shape_offset(clipped, -wall / 2.0, _INSET)
    if inset is None or abs(signed_area(inset.points)) <= min_area:
        return None
    return inset.points


def cell_areas(seeds: Sequence[Vec2], boundary: Shape, bounds: Bounds) -> List[float]:
    """Areas of the Voronoi cells of ``seeds`` clipped to ``boundary``."""

    areas = []
    for cell in voronoi_cells(seeds, bounds):
        clipped = shape_intersection(Shape(cell), boundary) if cell else None
        areas.append(abs(signed_area(clipped.points)) if clipped is not None else 0.0)
    return areas


def voronoi_shell(shape: Shape, options: Optional[VoronoiOptions] = None, **overrides) -> Shape:
    """Perforate ``shape`` with a Voronoi cell pattern.

    Options come from ``options`` (defaults to :class:`VoronoiOptions`),
    with any keyword ``overrides`` applied on top.  The returned shape keeps
    the outer loop of ``shape``; its holes are the inset cells, each
    resampled to ``resolution`` points and wound clockwise.  Existing holes
    of ``shape`` are excluded from the cells and replaced by the result.
    """

    opts = options or VoronoiOptions()
    if overrides:
        opts = replace(opts, **overrides)

    outer = list(shape.points)
    bounds = padded_bounds(outer, opts.margin)
    outline = Shape(outer, centered=True)
    boundary = Shape(outer, list(shape.holes), centered=True)

    rng = Mulberry32(opts.seed)
    seeds = generate_seeds(outer, opts.cells, rng, opts.attempts_per_cell)
    seeds = lloyd_relax(seeds, outline, bounds, opts.relax)

    holes = []
    for cell in voronoi_cells(seeds, bounds):
        hole = cell_to_hole(cell, boundary, opts.wall, opts.min_hole_area)
        if hole is not None:
            holes.append(ensure_cw(resample_polygon(hole, opts.resolution)))

    logger.debug(f'voronoi: {len(holes)} holes from {len(seeds)} seeds')
    return replace(shape, points=outer, holes=holes)


__all__ = [
    'padded_bounds',
    'generate_seeds',
    'voronoi_cells',
    'lloyd_relax',
    'cell_to_hole',
    'cell_areas',
    'voronoi_shell',
]
