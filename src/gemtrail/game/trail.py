"""Tail trail: position history and evenly spaced trailing segments."""

import logging

import numpy as np
from numpy.typing import ArrayLike, NDArray

from gemtrail.world.bounds import Vec3, as_vec3

logger = logging.getLogger(__name__)

MAX_HISTORY = 300
SEGMENT_SPACING = 5
GROUND_HEIGHT = 0.5


class TailTrail:
    """
    Fixed-capacity history of player positions, newest first.

    Samples live in a preallocated (capacity, 3) array addressed as a ring:
    recording writes one row and moves the head, so the cost per tick does
    not depend on the history length.
    """

    def __init__(
        self,
        capacity: int = MAX_HISTORY,
        spacing: int = SEGMENT_SPACING,
        height: float = GROUND_HEIGHT,
    ) -> None:
        if capacity < 1:
            raise ValueError("Trail capacity must be at least 1")
        if spacing < 1:
            raise ValueError("Segment spacing must be at least 1")
        self.capacity = capacity
        self.spacing = spacing
        self.height = float(height)
        self._buffer: NDArray[np.float64] = np.zeros((capacity, 3))
        self._head = 0
        self._length = 0

    def __len__(self) -> int:
        return self._length

    @property
    def max_segments(self) -> int:
        """Largest segment count that still reads distinct history slots."""
        return max(0, (self.capacity - 1) // self.spacing)

    def record(self, position: ArrayLike) -> None:
        """Push a position (projected to the trail height) as the newest sample."""
        sample = as_vec3(position)
        sample[1] = self.height
        self._head = (self._head - 1) % self.capacity
        self._buffer[self._head] = sample
        if self._length < self.capacity:
            self._length += 1

    def sample(self, index: int) -> Vec3:
        """History entry at index (0 = newest)."""
        if not 0 <= index < self._length:
            raise IndexError(f"Trail index {index} out of range (length {self._length})")
        return self._buffer[(self._head + index) % self.capacity].copy()

    def history(self) -> NDArray[np.float64]:
        """All samples as an (n, 3) array, newest first."""
        rows = (self._head + np.arange(self._length)) % self.capacity
        return self._buffer[rows].copy()

    def segments_for(self, count: int) -> list[Vec3]:
        """
        Positions for count tail segments.

        Segment i reads history index min((i + 1) * spacing, len - 1), so a
        short history repeats its oldest sample instead of reading past the
        end. An empty history yields no segments.
        """
        if count <= 0 or self._length == 0:
            return []
        last = self._length - 1
        return [self.sample(min((i + 1) * self.spacing, last)) for i in range(count)]

    def clear(self) -> None:
        self._head = 0
        self._length = 0

    def reset(self, origin: ArrayLike) -> None:
        """Drop all history and seed it with a single sample at origin."""
        self.clear()
        self.record(origin)
        logger.debug("Tail trail reset")


def segment_style(index: int) -> tuple[tuple[float, float, float], float]:
    """Colour (RGB 0-1) and edge size for a tail segment; brighter and smaller further back."""
    blue = min(0.6 + index * 0.03, 1.0)
    size = 0.25 * max(0.8, 1 - index * 0.015)
    return (0.3, 0.3, blue), size
