"""
Player locomotion.

Each tick the pointer is cast onto the ground to find where the player
should head. The player turns a fraction of the way toward that point
(smoothed heading) and slides a fixed distance along the direction,
clamped to the arena.
"""

from dataclasses import dataclass, field
from typing import NamedTuple
import logging
import math

import numpy as np

from gemtrail.world.bounds import BoundsVolume, Vec3, as_vec3
from gemtrail.world.camera import CameraPose, GROUND_PLANE, Plane, intersect_plane

logger = logging.getLogger(__name__)

TWO_PI = math.pi * 2

DEFAULT_DEAD_ZONE = 0.1
DEFAULT_TURN_RATE = 0.1


@dataclass
class PlayerState:
    """
    Player pose.

    Attributes:
        position: World position; y stays at the ground offset
        heading: Facing angle about the vertical axis (radians, 0 = +z)
        speed: Distance moved per tick, set by the driver every tick
    """
    position: Vec3 = field(default_factory=lambda: np.array([0.0, 0.5, 0.0]))
    heading: float = 0.0
    speed: float = 0.08

    def __post_init__(self) -> None:
        self.position = as_vec3(self.position)

    @classmethod
    def spawn(cls, origin: Vec3, ground_offset: float = 0.5, speed: float = 0.08) -> "PlayerState":
        """Fresh player standing at an arena origin."""
        position = as_vec3(origin)
        position[1] = ground_offset
        return cls(position=position, heading=0.0, speed=speed)


class MoveResult(NamedTuple):
    """Outcome of one movement update."""
    position: Vec3
    heading: float
    moved: bool
    target: Vec3 | None = None


def shortest_angle_between(current: float, target: float) -> float:
    """Signed angle from current to target, wrapped into (-pi, pi]."""
    diff = (target - current) % TWO_PI
    if diff > math.pi:
        diff -= TWO_PI
    return diff


def speed_for_tail(
    segments: int,
    base_speed: float = 0.08,
    decay: float = 0.001,
    min_speed: float = 0.03,
) -> float:
    """Per-tick speed, slowing down as the tail grows."""
    return max(min_speed, base_speed - decay * max(0, segments))


class MovementController:
    """
    Turns pointer input into player motion.

    The controller holds only configuration. Every update reads the current
    player pose and returns a new one; nothing is mutated in place.
    """

    def __init__(
        self,
        bounds: BoundsVolume,
        dead_zone: float = DEFAULT_DEAD_ZONE,
        turn_rate: float = DEFAULT_TURN_RATE,
        ground: Plane = GROUND_PLANE,
    ) -> None:
        if dead_zone < 0:
            raise ValueError("Dead zone must be non-negative")
        if not 0 < turn_rate <= 1:
            raise ValueError("Turn rate must be in (0, 1]")
        self.bounds = bounds
        self.dead_zone = float(dead_zone)
        self.turn_rate = float(turn_rate)
        self.ground = ground

    def pick_target(self, pointer: tuple[float, float], camera: CameraPose) -> Vec3 | None:
        """World point under the pointer, or None if the ray misses the ground."""
        ray = camera.ray_from_ndc(pointer[0], pointer[1])
        return intersect_plane(ray, self.ground)

    def steer(self, player: PlayerState, target: Vec3, speed: float) -> MoveResult:
        """
        Move the player one step toward a ground target.

        Inside the dead zone (planar distance <= dead_zone) the pose is
        returned unchanged. moved is True only if the position changed, so a
        player pinned against the arena clamp turns without moving.
        """
        direction = as_vec3(target) - player.position
        direction[1] = 0.0

        length = float(np.linalg.norm(direction))
        if length <= self.dead_zone:
            return MoveResult(player.position.copy(), player.heading, False, target)

        direction /= length

        target_angle = math.atan2(direction[0], direction[2])
        heading = player.heading + shortest_angle_between(player.heading, target_angle) * self.turn_rate

        candidate = player.position + direction * speed
        position = self.bounds.clamp(candidate)
        moved = not np.array_equal(position, player.position)

        return MoveResult(position, heading, moved, target)

    def update(
        self,
        player: PlayerState | None,
        pointer: tuple[float, float] | None,
        camera: CameraPose | None,
        speed: float,
    ) -> MoveResult | None:
        """
        Full per-tick update from pointer input.

        Returns None when there is nothing to move (no player, camera or
        pointer yet). A ray that misses the ground gives an unchanged pose.
        """
        if player is None or camera is None or pointer is None:
            logger.debug("Movement skipped: missing player, camera or pointer")
            return None

        target = self.pick_target(pointer, camera)
        if target is None:
            logger.debug(f"Pointer ray {pointer} does not hit the ground")
            return MoveResult(player.position.copy(), player.heading, False, None)

        return self.steer(player, target, speed)
