"""Solid-kernel side of carve: conversion, handles, booleans, diagnostics."""

from carve.boolean.convert import mesh_to_native, native_to_mesh
from carve.boolean.diagnostics import MeshStatus, StatusKind, is_manifold, mesh_status
from carve.boolean.engine import (
    difference,
    difference_all,
    extrude_shape,
    hull,
    hull_all,
    hull_from_points,
    intersection,
    intersection_all,
    solidify,
    union,
    union_all,
)
from carve.boolean.handle import NativeHandle, live_handle_count, release_cache

__all__ = [
    'mesh_to_native',
    'native_to_mesh',
    'NativeHandle',
    'live_handle_count',
    'release_cache',
    'MeshStatus',
    'StatusKind',
    'is_manifold',
    'mesh_status',
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
