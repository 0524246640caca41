"""
Arena bounds and edge-proximity checks.

The arena is an axis-aligned box fixed for the whole session. Only the
horizontal extent (x, z) matters for gameplay: movement is clamped into the
box and the boundary monitor measures distance to the four vertical walls.
"""

from dataclasses import dataclass, field
import random

import numpy as np
from numpy.typing import ArrayLike, NDArray

Vec3 = NDArray[np.float64]


def as_vec3(value: ArrayLike) -> Vec3:
    """Coerce a 3-sequence to a float64 vector (always a fresh copy)."""
    vec = np.array(value, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3D point, got shape {vec.shape}")
    return vec


@dataclass(frozen=True)
class BoundsVolume:
    """
    Immutable axis-aligned box describing the playable arena.

    Attributes:
        min: Lowest corner (x, y, z)
        max: Highest corner (x, y, z)

    Raises:
        ValueError: if min.x >= max.x, min.z >= max.z or min.y > max.y
    """

    min: tuple[float, float, float]
    max: tuple[float, float, float]
    _lo: Vec3 = field(init=False, repr=False, compare=False)
    _hi: Vec3 = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lo = as_vec3(self.min)
        hi = as_vec3(self.max)
        if not (lo[0] < hi[0] and lo[2] < hi[2]):
            raise ValueError(f"Invalid arena bounds: min={self.min} max={self.max}")
        if lo[1] > hi[1]:
            raise ValueError(f"Invalid arena height: min.y={lo[1]} > max.y={hi[1]}")
        lo.flags.writeable = False
        hi.flags.writeable = False
        object.__setattr__(self, "min", tuple(float(v) for v in lo))
        object.__setattr__(self, "max", tuple(float(v) for v in hi))
        object.__setattr__(self, "_lo", lo)
        object.__setattr__(self, "_hi", hi)

    @classmethod
    def centered(cls, width: float, length: float, floor: float = 0.0, ceiling: float = 10.0) -> "BoundsVolume":
        """Box of the given horizontal size centered on the origin."""
        return cls((-width / 2, floor, -length / 2), (width / 2, ceiling, length / 2))

    @property
    def center(self) -> Vec3:
        return (self._lo + self._hi) / 2

    @property
    def size(self) -> Vec3:
        return self._hi - self._lo

    def clamp(self, point: ArrayLike) -> Vec3:
        """Clamp each axis of a point independently into [min, max]."""
        return np.clip(as_vec3(point), self._lo, self._hi)

    def contains(self, point: ArrayLike) -> bool:
        p = as_vec3(point)
        return bool(np.all(p >= self._lo) and np.all(p <= self._hi))

    def edge_distances(self, point: ArrayLike) -> tuple[float, float, float, float]:
        """Distances to the (min x, max x, min z, max z) walls."""
        p = as_vec3(point)
        return (
            float(abs(p[0] - self._lo[0])),
            float(abs(p[0] - self._hi[0])),
            float(abs(p[2] - self._lo[2])),
            float(abs(p[2] - self._hi[2])),
        )

    def random_point(self, rng: random.Random, height: float) -> Vec3:
        """Uniformly random point over the horizontal extent at a fixed height."""
        return np.array([
            rng.uniform(self._lo[0], self._hi[0]),
            height,
            rng.uniform(self._lo[2], self._hi[2]),
        ])


class BoundaryMonitor:
    """
    Flags proximity of a position to any arena wall.

    Stateless apart from its configuration: the same position always gives
    the same answer.
    """

    def __init__(self, bounds: BoundsVolume, threshold: float = 1.2) -> None:
        if threshold < 0:
            raise ValueError("Collision threshold must be non-negative")
        self.bounds = bounds
        self.threshold = float(threshold)

    def min_edge_distance(self, position: ArrayLike) -> float:
        return min(self.bounds.edge_distances(position))

    def is_colliding(self, position: ArrayLike) -> bool:
        """True if the nearest wall is strictly closer than the threshold."""
        return bool(self.min_edge_distance(position) < self.threshold)


def is_colliding(position: ArrayLike, bounds: BoundsVolume, threshold: float) -> bool:
    """Functional form of BoundaryMonitor.is_colliding."""
    return bool(min(bounds.edge_distances(position)) < threshold)
