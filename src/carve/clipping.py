"""Boolean operations and offsetting on 2D shapes.

Shapes are snapped to an integer grid (``ClipperConfig.scale`` steps per
unit) before they reach the polygon kernel and scaled back afterwards, so
features smaller than ``1 / scale`` may be merged.  Kernel output is
normalised on the way out: outer loops are forced counter-clockwise and
holes clockwise whatever the kernel returns.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, Union

import manifold3d
import numpy as np
from loguru import logger

from carve.config import DEFAULT_CLIPPER, ClipperConfig, JoinType, OffsetOptions
from carve.geometry_utils import Vec2, assign_holes, ensure_ccw, ensure_cw, signed_area
from carve.shape import Shape


_DEFAULT_OFFSET = OffsetOptions()

_JOIN_TYPES = {
    JoinType.ROUND: manifold3d.JoinType.Round,
    JoinType.SQUARE: manifold3d.JoinType.Square,
    JoinType.MITER: manifold3d.JoinType.Miter,
}

_Contour = Tuple[List[Vec2], float]


def _to_grid(points: Sequence[Sequence[float]], scale: float) -> np.ndarray:
    pts = np.asarray([(p[0], p[1]) for p in points], dtype=np.float64).reshape(-1, 2)
    return np.round(pts * scale)


def _section(shape: Shape, config: ClipperConfig) -> "manifold3d.CrossSection":
    contours = [_to_grid(c, config.scale) for c in shape.contours() if len(c) >= 3]
    return manifold3d.CrossSection(contours, manifold3d.FillRule.NonZero)


def _contours(section: "manifold3d.CrossSection", config: ClipperConfig) -> Tuple[List[_Contour], List[_Contour]]:
    """Read kernel loops back as ``(outers, holes)`` with signed areas."""

    outers: List[_Contour] = []
    holes: List[_Contour] = []
    for poly in section.to_polygons():
        arr = np.asarray(poly, dtype=np.float64).reshape(-1, 2) / config.scale
        if len(arr) < 3:
            continue
        pts = [(float(x), float(y)) for x, y in arr.tolist()]
        area = signed_area(pts)
        if area > 0:
            outers.append((pts, area))
        elif area < 0:
            holes.append((pts, area))
    return outers, holes


def _single_shape(section: "manifold3d.CrossSection", config: ClipperConfig) -> Optional[Shape]:
    """Collapse a result to one shape: the largest region and its holes."""

    outers, holes = _contours(section, config)
    if not outers:
        return None
    outer = ensure_ccw(max(outers, key=lambda c: c[1])[0])
    kept = [ensure_cw(pts) for pts, _ in holes]
    if len(outers) > 1:
        logger.debug(f'keeping largest of {len(outers)} regions')
        kept = assign_holes([outer], kept)[0]
    return Shape(outer, kept, centered=True)


def _multi_shape(section: "manifold3d.CrossSection", config: ClipperConfig) -> List[Shape]:
    outers, holes = _contours(section, config)
    if not outers:
        return []
    outer_loops = [ensure_ccw(pts) for pts, _ in outers]
    hole_loops = [ensure_cw(pts) for pts, _ in holes]
    if len(outer_loops) == 1:
        return [Shape(outer_loops[0], hole_loops, centered=True)]
    return [Shape(outer, mine, centered=True)
            for outer, mine in zip(outer_loops, assign_holes(outer_loops, hole_loops))]


def _boolean(operation: str, shape_a: Shape, shape_b: Shape,
             config: ClipperConfig) -> Optional["manifold3d.CrossSection"]:
    try:
        a = _section(shape_a, config)
        b = _section(shape_b, config)
        if operation == 'union':
            return a + b
        if operation == 'difference':
            return a - b
        if operation == 'intersection':
            return a ^ b
        if operation == 'xor':
            return (a - b) + (b - a)
    except (RuntimeError, ValueError) as exc:
        logger.error(f'shape {operation} failed: {exc}')
        return None
    raise ValueError(f'unknown shape boolean: {operation}')


def shape_union(shape_a: Shape, shape_b: Shape,
                config: ClipperConfig = DEFAULT_CLIPPER) -> Shape:
    """Union of two shapes; falls back to ``shape_a`` on an empty result."""

    section = _boolean('union', shape_a, shape_b, config)
    result = _single_shape(section, config) if section is not None else None
    return result if result is not None else shape_a


def shape_difference(shape_a: Shape, shape_b: Shape,
                     config: ClipperConfig = DEFAULT_CLIPPER) -> Shape:
    """``shape_a`` with ``shape_b`` cut away.

    When nothing is left the kernel returns no loops, and ``shape_a`` is
    returned unchanged.
    """

    section = _boolean('difference', shape_a, shape_b, config)
    result = _single_shape(section, config) if section is not None else None
    return result if result is not None else shape_a


def shape_intersection(shape_a: Shape, shape_b: Shape,
                       config: ClipperConfig = DEFAULT_CLIPPER) -> Optional[Shape]:
    section = _boolean('intersection', shape_a, shape_b, config)
    return _single_shape(section, config) if section is not None else None


def shape_xor(shape_a: Shape, shape_b: Shape,
              config: ClipperConfig = DEFAULT_CLIPPER) -> List[Shape]:
    """Symmetric difference; may produce several disjoint shapes."""

    section = _boolean('xor', shape_a, shape_b, config)
    shapes = _multi_shape(section, config) if section is not None else []
    return shapes or [shape_a]


def shapes_union(shapes: Sequence[Shape],
                 config: ClipperConfig = DEFAULT_CLIPPER) -> Optional[Shape]:
    """Fold ``shape_union`` over a sequence of shapes."""

    if not shapes:
        return None
    result = shapes[0]
    for other in shapes[1:]:
        result = shape_union(result, other, config)
    return result


def _offset_one(shape: Shape, delta: float, options: OffsetOptions,
                config: ClipperConfig) -> Optional[Shape]:
    try:
        section = _section(shape, config)
        grown = section.offset(delta * config.scale,
                               _JOIN_TYPES[options.join_type],
                               options.miter_limit)
    except (RuntimeError, ValueError) as exc:
        logger.error(f'shape_offset failed: {exc}')
        return None
    return _single_shape(grown, config)


def shape_offset(shape_or_shapes: Union[Shape, Sequence[Shape]],
                 delta: float,
                 options: Optional[OffsetOptions] = None,
                 config: ClipperConfig = DEFAULT_CLIPPER):
    """Grow (``delta > 0``) or shrink (``delta < 0``) shapes.

    A single shape gives a shape, or ``None`` when it shrinks away.  A list
    of shapes (as returned by :func:`shape_xor`) is offset shape by shape
    and the shapes that survive are returned as a list.
    """

    opts = options or _DEFAULT_OFFSET
    if isinstance(shape_or_shapes, Shape):
        return _offset_one(shape_or_shapes, delta, opts, config)
    results = (_offset_one(s, delta, opts, config) for s in shape_or_shapes)
    return [r for r in results if r is not None]


__all__ = [
    'shape_union',
    'shape_difference',
    'shape_intersection',
    'shape_xor',
    'shapes_union',
    'shape_offset',
]
