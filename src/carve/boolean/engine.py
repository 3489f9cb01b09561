"""Boolean composition over chains of meshes.

Every pairwise step converts both operands to kernel handles (reusing a
handle cached on a previous result), runs the kernel primitive, converts the
result back and parks the result handle on the output mesh for the next
step.  Input handles are released on every exit path.

Union of many meshes is composed as a balanced binary tree so that each
intermediate result only absorbs half of the remaining operands.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Iterable, List, Optional, Sequence

import manifold3d
import numpy as np
from loguru import logger

from carve.boolean.convert import native_to_mesh
from carve.boolean.diagnostics import kernel_status_name
from carve.boolean.handle import NativeHandle, acquire, attach_cache, build_handle, release_cache
from carve.errors import KernelError
from carve.mesh import Mesh
from carve.shape import Shape


_PAIR_OPS = {
    'union': lambda a, b: a + b,
    'difference': lambda a, b: a - b,
    'intersection': lambda a, b: a ^ b,
}


def _warn_if_not_manifold(handle: NativeHandle, operation: str, role: str) -> None:
    name = kernel_status_name(handle.get())
    if name != 'NoError':
        logger.warning(f'{operation}: {role} operand is not manifold (status {name}); '
                       'relying on kernel repair')


def _finish(raw: "manifold3d.Manifold", base: Mesh, label: str) -> Mesh:
    """Normalize ``raw``, convert it back and attach it to the output mesh."""

    result = NativeHandle(raw.as_original(), label)
    with result.release_on_error():
        output = native_to_mesh(result.get().to_mesh())
        output.with_metadata_from(base)
    return attach_cache(output, result)


def _combine_pair(operation: str, mesh_a: Mesh, mesh_b: Mesh) -> Optional[Mesh]:
    op = _PAIR_OPS[operation]
    try:
        with ExitStack() as stack:
            handle_a = acquire(mesh_a, f'{operation}:a')
            if handle_a is not None:
                stack.enter_context(handle_a)
            handle_b = acquire(mesh_b, f'{operation}:b')
            if handle_b is not None:
                stack.enter_context(handle_b)
            if handle_a is None or handle_b is None:
                logger.debug(f'{operation}: empty operand, no result')
                return None

            _warn_if_not_manifold(handle_a, operation, 'first')
            _warn_if_not_manifold(handle_b, operation, 'second')
            raw = op(handle_a.get(), handle_b.get())
            return _finish(raw, mesh_a, operation)
    except KernelError as exc:
        logger.error(f'{operation} failed: {exc}')
    except RuntimeError as exc:
        logger.error(f'{operation} failed inside the kernel: {exc}')
    return None


def _tree_union(meshes: Sequence[Mesh]) -> Optional[Mesh]:
    count = len(meshes)
    if count == 0:
        return None
    if count == 1:
        return meshes[0]
    if count == 2:
        return _combine_pair('union', meshes[0], meshes[1])
    mid = count // 2
    left = _tree_union(meshes[:mid])
    right = _tree_union(meshes[mid:])
    if left is None or right is None:
        release_cache(left)
        release_cache(right)
        return None
    return _combine_pair('union', left, right)


def _reduce(operation: str, meshes: Sequence[Mesh]) -> Optional[Mesh]:
    result = meshes[0]
    for operand in meshes[1:]:
        result = _combine_pair(operation, result, operand)
        if result is None:
            return None
    return result


def _as_list(meshes: Iterable[Mesh]) -> List[Mesh]:
    items = list(meshes)
    for item in items:
        if not isinstance(item, Mesh):
            raise TypeError(f'expected Mesh, got {type(item).__name__}')
    return items


def _drop_empty(operation: str, meshes: Sequence[Mesh]) -> List[Mesh]:
    """Remove operands with no faces; their cached handles are released."""

    kept = []
    for mesh in meshes:
        if mesh.is_empty:
            logger.warning(f'{operation}: ignoring empty operand')
            release_cache(mesh)
        else:
            kept.append(mesh)
    return kept


def union_all(meshes: Iterable[Mesh]) -> Optional[Mesh]:
    """Union of a sequence of meshes; one mesh comes back untouched.

    Empty meshes add nothing and are skipped.  If any pairwise step fails
    the whole union is ``None``.
    """

    items = _as_list(meshes)
    if len(items) == 1:
        return items[0]
    items = _drop_empty('union', items)
    if len(items) > 2:
        logger.debug(f'union: tree composition of {len(items)} meshes')
    return _tree_union(items)


def difference_all(meshes: Iterable[Mesh]) -> Optional[Mesh]:
    """``meshes[0] - meshes[1] - meshes[2] - ...``.

    Empty cutters subtract nothing and are skipped.
    """

    items = _as_list(meshes)
    if not items:
        return None
    if len(items) > 1:
        items = items[:1] + _drop_empty('difference', items[1:])
    if len(items) == 1:
        return items[0]
    return _reduce('difference', items)


def intersection_all(meshes: Iterable[Mesh]) -> Optional[Mesh]:
    """Common volume of all meshes; an empty operand gives ``None``."""

    items = _as_list(meshes)
    if not items:
        return None
    if len(items) == 1:
        return items[0]
    return _reduce('intersection', items)


def hull_all(meshes: Iterable[Mesh]) -> Optional[Mesh]:
    """Convex hull of every mesh in the sequence.

    Unlike the other operations a single mesh is sent through the kernel,
    since the hull of one concave mesh differs from the mesh.
    """

    items = _as_list(meshes)
    if not items:
        return None
    try:
        with ExitStack() as stack:
            handles = []
            for idx, mesh in enumerate(items):
                handle = acquire(mesh, f'hull:{idx}')
                if handle is None:
                    continue
                stack.enter_context(handle)
                handles.append(handle)
            if not handles:
                return None
            raw = manifold3d.Manifold.batch_hull([h.get() for h in handles])
            return _finish(raw, items[0], 'hull')
    except KernelError as exc:
        logger.error(f'hull failed: {exc}')
    except RuntimeError as exc:
        logger.error(f'hull failed inside the kernel: {exc}')
    return None


def union(*meshes: Mesh) -> Optional[Mesh]:
    return union_all(meshes)


def difference(*meshes: Mesh) -> Optional[Mesh]:
    return difference_all(meshes)


def intersection(*meshes: Mesh) -> Optional[Mesh]:
    return intersection_all(meshes)


def hull(*meshes: Mesh) -> Optional[Mesh]:
    return hull_all(meshes)


def hull_from_points(points: Iterable[Sequence[float]],
                     base: Optional[Mesh] = None) -> Optional[Mesh]:
    """Convex hull of raw 3D points; at least four are required.

    ``base`` supplies pose and material for the result.
    """

    pts = np.asarray([tuple(p[:3]) for p in points], dtype=np.float64).reshape(-1, 3)
    if len(pts) < 4:
        return None
    try:
        raw = manifold3d.Manifold.hull_points(pts)
        handle = NativeHandle(raw.as_original(), 'hull_points')
        with handle:
            output = native_to_mesh(handle.get().to_mesh())
    except RuntimeError as exc:
        logger.error(f'hull_from_points failed: {exc}')
        return None
    if base is not None:
        output.with_metadata_from(base)
    return output


def solidify(mesh: Mesh) -> Mesh:
    """Resolve self-intersections through a self-union ``A + A``.

    Returns ``mesh`` unchanged when the kernel cannot process it.
    """

    if mesh.is_empty:
        return mesh
    try:
        with build_handle(mesh, 'solidify:a') as first, build_handle(mesh, 'solidify:b') as second:
            raw = first.get() + second.get()
            return _finish(raw, mesh, 'solidify')
    except (KernelError, RuntimeError) as exc:
        logger.warning(f'solidify failed, keeping input: {exc}')
        return mesh


def extrude_shape(shape: Shape, height: float) -> Optional[Mesh]:
    """Extrude a shape (holes included) along +Z through the kernel."""

    contours = [np.asarray(c, dtype=np.float64).reshape(-1, 2) for c in shape.contours()
                if len(c) >= 3]
    if not contours:
        return None
    try:
        section = manifold3d.CrossSection(contours, manifold3d.FillRule.Positive)
        raw = manifold3d.Manifold.extrude(section, height)
        with NativeHandle(raw, 'extrude') as handle:
            return native_to_mesh(handle.get().to_mesh())
    except RuntimeError as exc:
        logger.error(f'extrude_shape failed: {exc}')
        return None


__all__ = [
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
]
