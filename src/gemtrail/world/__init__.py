"""World geometry: arena bounds, camera and ground ray casting."""

from gemtrail.world.bounds import BoundsVolume, BoundaryMonitor, Vec3, as_vec3, is_colliding
from gemtrail.world.camera import CameraPose, GROUND_PLANE, Plane, Ray, intersect_plane

__all__ = [
    "BoundsVolume",
    "BoundaryMonitor",
    "Vec3",
    "as_vec3",
    "is_colliding",
    "CameraPose",
    "GROUND_PLANE",
    "Plane",
    "Ray",
    "intersect_plane",
]
