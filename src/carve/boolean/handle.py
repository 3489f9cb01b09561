"""Owning guard for native solid-kernel handles.

Kernel objects are created on demand for every boolean, diagnostic or slice
call.  Each one is wrapped in a :class:`NativeHandle` that must be released
exactly once; the ``with`` form releases on every exit path.  A handle may
also be parked on a result :class:`~carve.mesh.Mesh` so the next boolean in
a chain can reuse it instead of rebuilding from buffers.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import manifold3d
from loguru import logger

from carve.boolean.convert import mesh_to_native
from carve.errors import HandleReleasedError, KernelError
from carve.mesh import Mesh

_live_handles = 0


def live_handle_count() -> int:
    """Return the number of handles created and not yet released."""

    return _live_handles


class NativeHandle:
    """Exclusive owner of one ``manifold3d.Manifold``."""

    __slots__ = ('_manifold', '_released', 'label')

    def __init__(self, manifold: "manifold3d.Manifold", label: str = ''):
        global _live_handles
        if manifold is None:
            raise KernelError('cannot wrap an empty kernel handle')
        self._manifold = manifold
        self._released = False
        self.label = label
        _live_handles += 1

    def __repr__(self):
        state = 'released' if self._released else 'live'
        return f'NativeHandle({self.label or "anonymous"}, {state})'

    @property
    def released(self) -> bool:
        return self._released

    def get(self) -> "manifold3d.Manifold":
        if self._released:
            raise HandleReleasedError(f'{self!r} used after release')
        return self._manifold

    def release(self) -> None:
        global _live_handles
        if self._released:
            raise HandleReleasedError(f'{self!r} released twice')
        self._manifold = None
        self._released = True
        _live_handles -= 1

    def __enter__(self) -> "NativeHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._released:
            self.release()

    @contextmanager
    def release_on_error(self) -> Iterator["NativeHandle"]:
        """Release the handle only if the managed block raises."""

        try:
            yield self
        except BaseException:
            if not self._released:
                self.release()
            raise


def build_handle(mesh: Mesh, label: str = '') -> NativeHandle:
    """Construct a fresh kernel handle from ``mesh``'s buffers.

    Raises :class:`KernelError` when the buffers cannot be handed to the
    kernel at all.  Meshes the kernel merely flags as invalid still produce
    a handle; callers inspect its status.
    """

    try:
        native = mesh_to_native(mesh)
        manifold = manifold3d.Manifold(native)
    except (ValueError, TypeError, OverflowError, RuntimeError) as exc:
        raise KernelError(f'kernel rejected mesh buffers: {exc}') from exc
    return NativeHandle(manifold, label)


def take_cache(mesh: Mesh) -> Optional[NativeHandle]:
    """Move the cached handle out of ``mesh``; the caller now owns it."""

    handle = mesh._native
    mesh._native = None
    if handle is not None and handle.released:
        logger.debug('discarding released handle cached on mesh')
        return None
    return handle


def acquire(mesh: Mesh, label: str = '') -> Optional[NativeHandle]:
    """Return an owned handle for ``mesh``, reusing its cache if present.

    Empty meshes have no solid to hand over and give ``None``.
    """

    cached = take_cache(mesh)
    if cached is not None:
        return cached
    if mesh.is_empty or not mesh.vertices:
        return None
    return build_handle(mesh, label)


@contextmanager
def borrow(mesh: Mesh, label: str = '') -> Iterator[Optional["manifold3d.Manifold"]]:
    """Yield a kernel object for ``mesh`` without consuming its cache.

    A cached handle stays with the mesh; a freshly built one is released
    when the block exits.
    """

    cached = mesh._native
    if cached is not None and not cached.released:
        yield cached.get()
        return
    if mesh.is_empty or not mesh.vertices:
        yield None
        return
    with build_handle(mesh, label) as handle:
        yield handle.get()


def attach_cache(mesh: Mesh, handle: NativeHandle) -> Mesh:
    """Park ``handle`` on ``mesh``; ownership moves to the mesh."""

    previous = mesh._native
    if previous is not None and previous is not handle and not previous.released:
        previous.release()
    mesh._native = handle
    return mesh


def release_cache(mesh: Optional[Mesh]) -> None:
    """Release the handle cached on ``mesh``, if any (end of a chain)."""

    if mesh is None:
        return
    handle = take_cache(mesh)
    if handle is not None:
        handle.release()


__all__ = [
    'NativeHandle',
    'live_handle_count',
    'build_handle',
    'take_cache',
    'acquire',
    'borrow',
    'attach_cache',
    'release_cache',
]
