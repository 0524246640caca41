"""
Camera pose and ray casting against the ground.

Pointer input arrives as normalized device coordinates (x right, y up,
both in [-1, 1]). A perspective camera turns that pair into a world-space
ray, which is intersected with the ground plane to get a steering target.
"""

from dataclasses import dataclass, field
import math

import numpy as np
from numpy.typing import ArrayLike

from gemtrail.world.bounds import Vec3, as_vec3

_PARALLEL_EPS = 1e-12


@dataclass
class Ray:
    """Half-line from origin along a unit direction."""

    origin: Vec3
    direction: Vec3

    def __post_init__(self) -> None:
        self.origin = as_vec3(self.origin)
        direction = as_vec3(self.direction)
        length = float(np.linalg.norm(direction))
        if length == 0:
            raise ValueError("Ray direction must be non-zero")
        self.direction = direction / length

    def at(self, t: float) -> Vec3:
        return self.origin + self.direction * t


@dataclass(frozen=True, eq=False)
class Plane:
    """Immutable plane satisfying dot(normal, p) + constant == 0."""

    normal: Vec3 = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    constant: float = 0.0

    def __post_init__(self) -> None:
        normal = as_vec3(self.normal)
        length = float(np.linalg.norm(normal))
        if length == 0:
            raise ValueError("Plane normal must be non-zero")
        normal /= length
        normal.flags.writeable = False
        object.__setattr__(self, "normal", normal)
        object.__setattr__(self, "constant", float(self.constant) / length)

    def distance_to_point(self, point: ArrayLike) -> float:
        return float(np.dot(self.normal, as_vec3(point))) + self.constant


GROUND_PLANE = Plane()


def intersect_plane(ray: Ray, plane: Plane = GROUND_PLANE) -> Vec3 | None:
    """
    Intersect a ray with a plane.

    Returns None when the ray runs parallel to the plane (unless its origin
    lies on it) or when the plane is behind the ray origin.
    """
    denominator = float(np.dot(plane.normal, ray.direction))
    if abs(denominator) < _PARALLEL_EPS:
        if plane.distance_to_point(ray.origin) == 0:
            return ray.origin.copy()
        return None

    t = -(float(np.dot(ray.origin, plane.normal)) + plane.constant) / denominator
    if t < 0:
        return None
    return ray.at(t)


@dataclass
class CameraPose:
    """
    Perspective camera described by where it sits and what it looks at.

    Attributes:
        position: Camera location in world space
        target: Point the camera looks at
        up: Approximate up direction used to build the view basis
        fov: Vertical field of view in degrees
        aspect: Viewport width / height
    """

    position: Vec3
    target: Vec3
    up: Vec3 = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    fov: float = 50.0
    aspect: float = 16 / 9

    def __post_init__(self) -> None:
        self.position = as_vec3(self.position)
        self.target = as_vec3(self.target)
        self.up = as_vec3(self.up)
        if np.allclose(self.position, self.target):
            raise ValueError("Camera position and target must differ")
        if not 0 < self.fov < 180:
            raise ValueError(f"Invalid field of view: {self.fov}")
        if self.aspect <= 0:
            raise ValueError(f"Invalid aspect ratio: {self.aspect}")

    @classmethod
    def follow(
        cls,
        subject: ArrayLike,
        offset: ArrayLike = (0.0, 12.0, 8.0),
        **kwargs,
    ) -> "CameraPose":
        """Camera at a fixed offset from a subject, looking at it."""
        subject = as_vec3(subject)
        return cls(position=subject + as_vec3(offset), target=subject, **kwargs)

    def basis(self) -> tuple[Vec3, Vec3, Vec3]:
        """Return unit (forward, right, up) vectors of the view."""
        forward = self.target - self.position
        forward = forward / np.linalg.norm(forward)

        right = np.cross(forward, self.up)
        if np.linalg.norm(right) < 1e-9:
            # Looking along the up vector; pick -z as screen up
            right = np.cross(forward, np.array([0.0, 0.0, -1.0]))
        right = right / np.linalg.norm(right)

        true_up = np.cross(right, forward)
        return forward, right, true_up

    def _half_extents(self) -> tuple[float, float]:
        tan_half = math.tan(math.radians(self.fov) / 2)
        return tan_half * self.aspect, tan_half

    def ray_from_ndc(self, x: float, y: float) -> Ray:
        """Ray from the camera through a normalized device coordinate."""
        forward, right, up = self.basis()
        half_w, half_h = self._half_extents()
        direction = forward + right * (x * half_w) + up * (y * half_h)
        return Ray(self.position.copy(), direction)

    def project(self, point: ArrayLike) -> tuple[float, float] | None:
        """Normalized device coordinate of a world point, None if behind."""
        forward, right, up = self.basis()
        offset = as_vec3(point) - self.position
        depth = float(np.dot(offset, forward))
        if depth <= 0:
            return None
        half_w, half_h = self._half_extents()
        return (
            float(np.dot(offset, right)) / (depth * half_w),
            float(np.dot(offset, up)) / (depth * half_h),
        )
