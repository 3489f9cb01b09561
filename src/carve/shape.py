"""2D profile value type and a handful of built-in profiles.

A shape is a closed outer loop plus zero or more hole loops.  Outer loops
wind counter-clockwise and holes clockwise; the operations in
:mod:`carve.clipping` and :mod:`carve.slicing` always return shapes in that
form.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from carve.geometry_utils import Vec2, bounding_box_2d, to_vec2


@dataclass
class Shape:
    points: List[Vec2]
    holes: List[List[Vec2]] = field(default_factory=list)
    # centered: stamped around the turtle position rather than starting at it
    centered: bool = False
    # preserve_position: coordinates are absolute in the stamping plane
    preserve_position: bool = False

    def __post_init__(self):
        self.points = [to_vec2(p) for p in self.points]
        self.holes = [[to_vec2(p) for p in hole] for hole in (self.holes or [])]

    def bounds(self) -> Tuple[float, float, float, float]:
        return bounding_box_2d(self.points)

    def contours(self) -> List[List[Vec2]]:
        """Return ``[outer, hole1, hole2, ...]``."""

        return [self.points] + list(self.holes)


def circle_shape(radius: float, segments: int = 32) -> Shape:
    """Return a circle centred on the origin."""

    step = 2.0 * math.pi / segments
    points = [(radius * math.cos(i * step), radius * math.sin(i * step))
              for i in range(segments)]
    return Shape(points, centered=True)


def rect_shape(width: float, height: float) -> Shape:
    hw = width / 2.0
    hh = height / 2.0
    return Shape([(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)], centered=True)


def ngon_shape(n: int, radius: float) -> Shape:
    """Regular ``n``-gon whose first vertex sits at ``(0, -radius)``."""

    step = 2.0 * math.pi / n
    points = [(radius * math.cos(i * step - math.pi / 2.0),
               radius * math.sin(i * step - math.pi / 2.0))
              for i in range(n)]
    return Shape(points, centered=True)


def _map_points(shape: Shape, fn) -> Shape:
    return replace(shape,
                   points=[fn(p) for p in shape.points],
                   holes=[[fn(p) for p in hole] for hole in shape.holes])


def translate_shape(shape: Shape, dx: float, dy: float) -> Shape:
    return _map_points(shape, lambda p: (p[0] + dx, p[1] + dy))


def scale_shape(shape: Shape, sx: float, sy: Optional[float] = None) -> Shape:
    if sy is None:
        sy = sx
    return _map_points(shape, lambda p: (p[0] * sx, p[1] * sy))


def reverse_shape(shape: Shape) -> Shape:
    """Flip the winding of the outer loop and of every hole."""

    return replace(shape,
                   points=list(reversed(shape.points)),
                   holes=[list(reversed(hole)) for hole in shape.holes])


def polygon_shape(points: Sequence[Sequence[float]]) -> Shape:
    return Shape(list(points), centered=False)


__all__ = [
    'Shape',
    'circle_shape',
    'rect_shape',
    'ngon_shape',
    'polygon_shape',
    'translate_shape',
    'scale_shape',
    'reverse_shape',
]
