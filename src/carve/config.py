"""Option records and shared constants.

Every operation that used to take loose keyword options takes one of the
frozen records below instead.  Each record lists all recognised options with
their defaults and validates itself on construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from carve.errors import ConfigError

Vec3 = Tuple[float, float, float]


class JoinType(Enum):
    """Corner treatment used when offsetting 2D shapes."""

    ROUND = 'round'
    SQUARE = 'square'
    MITER = 'miter'

    @classmethod
    def coerce(cls, value) -> "JoinType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigError(f'unknown join type: {value!r}') from None


@dataclass(frozen=True)
class ClipperConfig:
    """Integer grid used by the 2D polygon layer.

    Coordinates are multiplied by ``scale`` and rounded before they reach
    the clipping kernel, so points closer than ``1 / scale`` may merge.
    """

    scale: float = 1000.0

    def __post_init__(self):
        if not self.scale > 0:
            raise ConfigError(f'clipper scale must be positive, got {self.scale}')


@dataclass(frozen=True)
class OffsetOptions:
    join_type: JoinType = JoinType.ROUND
    miter_limit: float = 2.0

    def __post_init__(self):
        object.__setattr__(self, 'join_type', JoinType.coerce(self.join_type))
        if self.miter_limit < 1.0:
            raise ConfigError(f'miter_limit must be >= 1, got {self.miter_limit}')


@dataclass(frozen=True)
class SliceOptions:
    # contours with fewer points are numerical noise
    min_points: int = 3

    def __post_init__(self):
        if self.min_points < 3:
            raise ConfigError(f'min_points must be >= 3, got {self.min_points}')


@dataclass(frozen=True)
class VoronoiOptions:
    """Parameters for :func:`carve.voronoi.voronoi_shell`.

    ``cells``
        number of seeds requested (fewer may be placed on awkward shapes)
    ``wall``
        material thickness left between neighbouring holes
    ``seed``
        integer seed of the deterministic generator
    ``relax``
        Lloyd relaxation iterations
    ``resolution``
        point count every hole is resampled to
    ``margin``
        padding of the Voronoi bounding rectangle, as a fraction of the
        larger bounding-box span
    ``attempts_per_cell``
        rejection-sampling budget per requested seed
    """

    cells: int = 20
    wall: float = 1.5
    seed: int = 0
    relax: int = 2
    resolution: int = 16
    margin: float = 0.05
    attempts_per_cell: int = 100

    def __post_init__(self):
        if self.cells < 0:
            raise ConfigError(f'cells must be >= 0, got {self.cells}')
        if not self.wall > 0:
            raise ConfigError(f'wall must be positive, got {self.wall}')
        if self.relax < 0:
            raise ConfigError(f'relax must be >= 0, got {self.relax}')
        if self.resolution < 3:
            raise ConfigError(f'resolution must be >= 3, got {self.resolution}')
        if self.margin < 0:
            raise ConfigError(f'margin must be >= 0, got {self.margin}')
        if self.attempts_per_cell < 1:
            raise ConfigError(f'attempts_per_cell must be >= 1, got {self.attempts_per_cell}')

    @property
    def min_hole_area(self) -> float:
        return self.wall * self.wall * 0.5


DEFAULT_CLIPPER = ClipperConfig()

# +X forward, +Z up, matching the turtle's rest pose
DEFAULT_POSITION: Vec3 = (0.0, 0.0, 0.0)
DEFAULT_HEADING: Vec3 = (1.0, 0.0, 0.0)
DEFAULT_UP: Vec3 = (0.0, 0.0, 1.0)


__all__ = [
    'JoinType',
    'ClipperConfig',
    'OffsetOptions',
    'SliceOptions',
    'VoronoiOptions',
    'DEFAULT_CLIPPER',
    'DEFAULT_POSITION',
    'DEFAULT_HEADING',
    'DEFAULT_UP',
]
