"""Validity and measurement queries built on the solid kernel's status."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from carve.boolean.handle import borrow
from carve.errors import KernelError
from carve.mesh import Mesh


class StatusKind(Enum):
    OK = 'ok'
    NON_FINITE_VERTEX = 'non-finite-vertex'
    NOT_MANIFOLD = 'not-manifold'
    VERTEX_INDEX_OUT_OF_BOUNDS = 'vertex-index-out-of-bounds'
    MALFORMED_PROPERTIES = 'malformed-properties'
    MERGE_ERROR = 'merge-error'
    TRANSFORM_ERROR = 'transform-error'
    UNKNOWN = 'unknown'
    FAILED_TO_CREATE = 'failed-to-create'


_KERNEL_STATUS = {
    'NoError': StatusKind.OK,
    'NonFiniteVertex': StatusKind.NON_FINITE_VERTEX,
    'NotManifold': StatusKind.NOT_MANIFOLD,
    'VertexOutOfBounds': StatusKind.VERTEX_INDEX_OUT_OF_BOUNDS,
    'PropertiesWrongLength': StatusKind.MALFORMED_PROPERTIES,
    'MissingPositionProperties': StatusKind.MALFORMED_PROPERTIES,
    'RunIndexWrongLength': StatusKind.MALFORMED_PROPERTIES,
    'FaceIDWrongLength': StatusKind.MALFORMED_PROPERTIES,
    'MergeVectorsDifferentLengths': StatusKind.MERGE_ERROR,
    'MergeIndexOutOfBounds': StatusKind.MERGE_ERROR,
    'TransformWrongLength': StatusKind.TRANSFORM_ERROR,
}


def kernel_status_name(manifold) -> str:
    """Return the kernel's status enum member name, e.g. ``'NoError'``."""

    status = manifold.status()
    name = getattr(status, 'name', None)
    if not name:
        name = str(status).rsplit('.', 1)[-1]
    return name


def classify_status(name: str) -> StatusKind:
    return _KERNEL_STATUS.get(name, StatusKind.UNKNOWN)


@dataclass(frozen=True)
class MeshStatus:
    ok: bool
    kind: StatusKind
    volume: float
    surface_area: float

    def __bool__(self) -> bool:
        return self.ok


_FAILED = MeshStatus(False, StatusKind.FAILED_TO_CREATE, 0.0, 0.0)


def mesh_status(mesh: Mesh) -> MeshStatus:
    """Return ``ok``/``kind``/``volume``/``surface_area`` for ``mesh``.

    ``ok`` requires both a clean kernel status and a strictly positive
    volume: an empty or flat solid passes the kernel's checks but is not a
    usable solid.
    """

    try:
        with borrow(mesh, 'status') as manifold:
            if manifold is None:
                return _FAILED
            kind = classify_status(kernel_status_name(manifold))
            volume = float(manifold.volume())
            area = float(manifold.surface_area())
    except KernelError as exc:
        logger.error(f'mesh_status: {exc}')
        return _FAILED
    return MeshStatus(kind is StatusKind.OK and volume > 0, kind, volume, area)


def is_manifold(mesh: Optional[Mesh]) -> bool:
    """Return ``True`` if ``mesh`` is a watertight solid with volume."""

    if mesh is None:
        return False
    return mesh_status(mesh).ok


__all__ = [
    'StatusKind',
    'MeshStatus',
    'kernel_status_name',
    'classify_status',
    'mesh_status',
    'is_manifold',
]
