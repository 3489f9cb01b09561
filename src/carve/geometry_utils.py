"""Common geometric helpers shared by the slicer, clipper and tessellator."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]

epsilon = 1e-10


def to_vec2(point_like: Sequence[float]) -> Vec2:
    """Return the XY components of a point as a float tuple."""

    if len(point_like) < 2:
        raise ValueError("value must have at least two components")
    return float(point_like[0]), float(point_like[1])


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point as a float tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def signed_area(points: Sequence[Sequence[float]]) -> float:
    """Return the shoelace area of a closed loop; positive means CCW."""

    n = len(points)
    if n < 3:
        return 0.0
    total = 0.0
    for i in range(n):
        x0, y0 = points[i][0], points[i][1]
        x1, y1 = points[(i + 1) % n][0], points[(i + 1) % n][1]
        total += x0 * y1 - x1 * y0
    return total / 2.0


def ensure_ccw(points: Sequence[Sequence[float]]) -> List[Vec2]:
    loop = [to_vec2(p) for p in points]
    if signed_area(loop) < 0:
        loop.reverse()
    return loop


def ensure_cw(points: Sequence[Sequence[float]]) -> List[Vec2]:
    loop = [to_vec2(p) for p in points]
    if signed_area(loop) > 0:
        loop.reverse()
    return loop


def point_in_polygon(pt: Sequence[float], polygon: Sequence[Sequence[float]]) -> bool:
    """Ray-casting containment test.

    A horizontal ray is cast towards +X and edge crossings are counted.
    Points lying exactly on an edge may land on either side.
    """

    px, py = pt[0], pt[1]
    n = len(polygon)
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        if (yi > py) != (yj > py):
            x_cross = xi + (xj - xi) * (py - yi) / (yj - yi)
            if px < x_cross:
                inside = not inside
        j = i
    return inside


def bounding_box_2d(points: Iterable[Sequence[float]]) -> Tuple[float, float, float, float]:
    """Return ``(xmin, ymin, xmax, ymax)`` of a point set."""

    xmin = ymin = math.inf
    xmax = ymax = -math.inf
    for pt in points:
        x, y = pt[0], pt[1]
        xmin = min(xmin, x)
        ymin = min(ymin, y)
        xmax = max(xmax, x)
        ymax = max(ymax, y)
    return xmin, ymin, xmax, ymax


def polygon_centroid(points: Sequence[Sequence[float]]) -> Vec2:
    """Return the area centroid of a polygon.

    Falls back to the vertex average when the loop has (near) zero area.
    """

    n = len(points)
    if n == 0:
        return 0.0, 0.0
    area = signed_area(points)
    if abs(area) <= epsilon:
        return (sum(p[0] for p in points) / n,
                sum(p[1] for p in points) / n)
    cx = cy = 0.0
    for i in range(n):
        x0, y0 = points[i][0], points[i][1]
        x1, y1 = points[(i + 1) % n][0], points[(i + 1) % n][1]
        cross = x0 * y1 - x1 * y0
        cx += (x0 + x1) * cross
        cy += (y0 + y1) * cross
    return cx / (6.0 * area), cy / (6.0 * area)


def segment_length(p0: Sequence[float], p1: Sequence[float]) -> float:
    return math.hypot(p1[0] - p0[0], p1[1] - p0[1])


def polygon_perimeter(points: Sequence[Sequence[float]]) -> float:
    n = len(points)
    return sum(segment_length(points[i], points[(i + 1) % n]) for i in range(n))


def resample_polygon(points: Sequence[Sequence[float]], count: int) -> List[Vec2]:
    """Return ``count`` points evenly spaced along a closed loop.

    The first output point coincides with the first input point; the
    traversal direction of the input is kept.
    """

    loop = [to_vec2(p) for p in points]
    n = len(loop)
    if n == 0 or count <= 0:
        return []
    lengths = [segment_length(loop[i], loop[(i + 1) % n]) for i in range(n)]
    total = sum(lengths)
    if total <= epsilon:
        return [loop[0]] * count

    step = total / count
    result: List[Vec2] = []
    seg = 0
    walked = 0.0  # perimeter length before segment ``seg``
    for k in range(count):
        target = k * step
        while seg < n - 1 and walked + lengths[seg] < target:
            walked += lengths[seg]
            seg += 1
        seg_len = lengths[seg]
        t = 0.0 if seg_len <= epsilon else (target - walked) / seg_len
        t = max(0.0, min(1.0, t))
        x0, y0 = loop[seg]
        x1, y1 = loop[(seg + 1) % n]
        result.append((x0 + t * (x1 - x0), y0 + t * (y1 - y0)))
    return result


def clean_loop(points: Sequence[Sequence[float]], tol: float = 1e-9) -> List[Vec2]:
    """Drop repeated and collinear vertices from a closed loop."""

    loop: List[Vec2] = []
    for pt in points:
        xy = to_vec2(pt)
        if loop and segment_length(loop[-1], xy) <= tol:
            continue
        loop.append(xy)
    if len(loop) > 1 and segment_length(loop[0], loop[-1]) <= tol:
        loop.pop()

    changed = True
    while changed and len(loop) > 3:
        changed = False
        for i in range(len(loop)):
            a = loop[i - 1]
            b = loop[i]
            c = loop[(i + 1) % len(loop)]
            cross = (b[0] - a[0]) * (c[1] - b[1]) - (b[1] - a[1]) * (c[0] - b[0])
            scale = max(segment_length(a, b) * segment_length(b, c), tol)
            if abs(cross) / scale <= 1e-9:
                del loop[i]
                changed = True
                break
    return loop


def classify_contours(contours: Sequence[Sequence[Sequence[float]]],
                      min_points: int = 3) -> Tuple[List[List[Vec2]], List[List[Vec2]]]:
    """Split loops into ``(outers, holes)`` by the sign of their area.

    Loops are cleaned first; those left with fewer than ``min_points``
    vertices, or with no area, are dropped.
    """

    outers: List[List[Vec2]] = []
    holes: List[List[Vec2]] = []
    for contour in contours:
        loop = clean_loop(contour)
        if len(loop) < min_points:
            continue
        area = signed_area(loop)
        if area > 0:
            outers.append(loop)
        elif area < 0:
            holes.append(loop)
    return outers, holes


def assign_holes(outers: Sequence[Sequence[Vec2]],
                 holes: Sequence[Sequence[Vec2]]) -> List[List[List[Vec2]]]:
    """Return, per outer loop, the holes it directly bounds.

    A hole goes to the smallest outer containing its first point, so the
    bore of an island nested inside another region's hole stays with the
    island.  Holes contained by no outer are dropped.
    """

    areas = [abs(signed_area(outer)) for outer in outers]
    assigned: List[List[List[Vec2]]] = [[] for _ in outers]
    for hole in holes:
        owners = [idx for idx, outer in enumerate(outers)
                  if point_in_polygon(hole[0], outer)]
        if owners:
            best = min(owners, key=lambda idx: areas[idx])
            assigned[best].append(list(hole))
    return assigned


def normalize(vec: Sequence[float]) -> Vec3:
    length = math.sqrt(vec[0] * vec[0] + vec[1] * vec[1] + vec[2] * vec[2])
    if length <= epsilon:
        raise ValueError("cannot normalize a zero-length vector")
    return vec[0] / length, vec[1] / length, vec[2] / length


def cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def plane_basis(normal: Sequence[float]) -> Tuple[Vec3, Vec3, Vec3]:
    """Return an orthonormal ``(right, up, normal)`` frame for ``normal``.

    The seed axis for the cross product is world X when the normal is within
    about 25 degrees of world Z, world Z otherwise.
    """

    n = normalize(normal)
    seed = (1.0, 0.0, 0.0) if abs(n[2]) > 0.9 else (0.0, 0.0, 1.0)
    right = normalize(cross(seed, n))
    up = normalize(cross(n, right))
    return right, up, n


def to_plane_local(vertices: Sequence[Sequence[float]],
                   origin: Sequence[float],
                   right: Sequence[float],
                   up: Sequence[float],
                   normal: Sequence[float]) -> np.ndarray:
    """Express ``vertices`` in a plane frame: ``local = R @ (v - origin)``."""

    rot = np.array([to_vec3(right), to_vec3(up), to_vec3(normal)], dtype=float)
    verts = np.asarray(vertices, dtype=float).reshape(-1, 3)
    return (verts - np.asarray(to_vec3(origin), dtype=float)) @ rot.T


__all__ = [
    'Vec2',
    'Vec3',
    'epsilon',
    'to_vec2',
    'to_vec3',
    'signed_area',
    'ensure_ccw',
    'ensure_cw',
    'point_in_polygon',
    'bounding_box_2d',
    'polygon_centroid',
    'segment_length',
    'polygon_perimeter',
    'resample_polygon',
    'clean_loop',
    'classify_contours',
    'assign_holes',
    'normalize',
    'cross',
    'plane_basis',
    'to_plane_local',
]
