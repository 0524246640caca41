"""
Gem population.

Gems are scattered over the arena. When the player comes close, a gem
stops being idle and flies into the player along a short arc; when the
flight finishes the gem is removed and counts as collected. The field tops
itself back up to its target size every few ticks.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
import logging
import math
import random

from numpy.typing import ArrayLike

from gemtrail.world.bounds import BoundsVolume, Vec3, as_vec3

logger = logging.getLogger(__name__)

TARGET_COUNT = 40
ATTRACTION_DISTANCE = 1.8
ANIMATION_SPEED = 0.04
REPLENISH_INTERVAL = 30
GEM_HEIGHT = 0.5
ARC_HEIGHT = 0.5

GEM_COLORS: tuple[tuple[int, int, int], ...] = (
    (255, 85, 85),
    (85, 255, 85),
    (85, 85, 255),
    (255, 255, 85),
    (255, 85, 255),
    (85, 255, 255),
    (255, 153, 85),
    (170, 85, 255),
    (85, 255, 170),
)


class GemStatus(Enum):
    """Gem lifecycle states."""
    IDLE = auto()
    BEING_COLLECTED = auto()


@dataclass(frozen=True)
class GemLook:
    """Cosmetic attributes rolled once when the gem spawns."""
    color: tuple[int, int, int]
    pulse_speed: float
    scale_offset: float

    @classmethod
    def roll(cls, rng: random.Random) -> "GemLook":
        return cls(
            color=rng.choice(GEM_COLORS),
            pulse_speed=1 + rng.random() * 0.5,
            scale_offset=rng.random() * math.pi * 2,
        )


@dataclass(eq=False)
class Gem:
    """
    A single collectible.

    Attributes:
        id: Unique, monotonically assigned by the owning field
        position: Current world position (moves during collection)
        look: Frozen cosmetic attributes
        state: Lifecycle state
        origin: Where the gem rested before collection began
        collection_ticks: Ticks spent in BEING_COLLECTED
        collection_progress: 0.0 to 1.0, meaningful only while collecting
    """
    id: int
    position: Vec3
    look: GemLook
    state: GemStatus = GemStatus.IDLE
    origin: Vec3 = field(init=False)
    collection_ticks: int = 0
    collection_progress: float = 0.0

    def __post_init__(self) -> None:
        self.position = as_vec3(self.position)
        self.origin = self.position.copy()

    @property
    def is_idle(self) -> bool:
        return self.state == GemStatus.IDLE

    @property
    def is_being_collected(self) -> bool:
        return self.state == GemStatus.BEING_COLLECTED

    def planar_distance(self, point: ArrayLike) -> float:
        p = as_vec3(point)
        return math.hypot(self.position[0] - p[0], self.position[2] - p[2])

    def begin_collection(self) -> None:
        self.state = GemStatus.BEING_COLLECTED
        self.origin = self.position.copy()
        self.collection_ticks = 0
        self.collection_progress = 0.0

    def scale(self, elapsed: float) -> float:
        """Render scale: gentle pulse while idle, shrinking while collected."""
        if self.is_being_collected:
            return max(0.1, 1 - self.collection_progress * 0.9)
        return 1 + math.sin(elapsed * self.look.pulse_speed + self.look.scale_offset) * 0.05

    def bob_height(self, elapsed: float) -> float:
        """Render height including the idle bob."""
        if self.is_being_collected:
            return float(self.position[1])
        return float(self.position[1]) + math.sin(elapsed * 2) * 0.1


class GemField:
    """
    Sole owner of the active gems.

    Per tick:
        1. Idle gems closer than attraction_distance (planar) start collecting.
        2. Collecting gems advance by animation_speed and follow the player;
           finished ones are removed and returned as collected.
        3. Every replenish_interval ticks the population is topped up.

    A gem that starts collecting on a tick begins advancing on the next one,
    so with the default speed it is removed exactly 25 ticks after starting.
    """

    def __init__(
        self,
        bounds: BoundsVolume,
        target_count: int = TARGET_COUNT,
        attraction_distance: float = ATTRACTION_DISTANCE,
        animation_speed: float = ANIMATION_SPEED,
        replenish_interval: int = REPLENISH_INTERVAL,
        height: float = GEM_HEIGHT,
        despawn_distance: float | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if target_count < 0:
            raise ValueError("Target count must be non-negative")
        if not 0 < animation_speed <= 1:
            raise ValueError("Animation speed must be in (0, 1]")
        if replenish_interval < 1:
            raise ValueError("Replenish interval must be at least 1 tick")

        self.bounds = bounds
        self.target_count = target_count
        self.attraction_distance = float(attraction_distance)
        self.animation_speed = float(animation_speed)
        self.replenish_interval = replenish_interval
        self.height = float(height)
        self.despawn_distance = despawn_distance

        self._rng = rng or random.Random()
        self._gems: list[Gem] = []
        self._next_id = 0
        self._ticks = 0
        # Integer tick budget so float accumulation never adds a tick
        self._ticks_to_collect = math.ceil(1 / self.animation_speed - 1e-9)

    @property
    def gems(self) -> tuple[Gem, ...]:
        """Read-only snapshot of the active gems."""
        return tuple(self._gems)

    @property
    def active_count(self) -> int:
        return len(self._gems)

    @property
    def ticks_to_collect(self) -> int:
        return self._ticks_to_collect

    def spawn(self, position: ArrayLike | None = None) -> Gem:
        """Create a gem at position, or at a random arena point."""
        if position is None:
            point = self.bounds.random_point(self._rng, self.height)
        else:
            point = as_vec3(position)
        gem = Gem(id=self._next_id, position=point, look=GemLook.roll(self._rng))
        self._next_id += 1
        self._gems.append(gem)
        return gem

    def populate(self) -> list[Gem]:
        """Spawn gems until the target count is reached."""
        shortfall = self.target_count - len(self._gems)
        return [self.spawn() for _ in range(max(0, shortfall))]

    def replenish(self, player_position: ArrayLike | None = None) -> int:
        """
        Drop far idle gems (if despawning is enabled) and refill to target.

        Returns:
            Number of gems spawned
        """
        if self.despawn_distance is not None and player_position is not None:
            kept = [
                g for g in self._gems
                if not g.is_idle or g.planar_distance(player_position) < self.despawn_distance
            ]
            if len(kept) < len(self._gems):
                logger.debug(f"Despawned {len(self._gems) - len(kept)} distant gems")
            self._gems = kept

        spawned = self.populate()
        if spawned:
            logger.debug(f"Spawned {len(spawned)} gems ({len(self._gems)} active)")
        return len(spawned)

    def tick(self, player_position: ArrayLike) -> list[Gem]:
        """
        Advance gem collection by one tick.

        Returns:
            Gems whose collection finished this tick (already removed)
        """
        player = as_vec3(player_position)
        completed: list[Gem] = []

        for gem in self._gems:
            if gem.is_idle:
                if gem.planar_distance(player) < self.attraction_distance:
                    gem.begin_collection()
                continue

            gem.collection_ticks += 1
            progress = min(1.0, gem.collection_ticks * self.animation_speed)
            gem.collection_progress = progress

            position = gem.origin + (player - gem.origin) * progress
            position[1] += ARC_HEIGHT * math.sin(progress * math.pi)
            gem.position = position

            if gem.collection_ticks >= self._ticks_to_collect:
                gem.collection_progress = 1.0
                completed.append(gem)

        if completed:
            done = {g.id for g in completed}
            self._gems = [g for g in self._gems if g.id not in done]

        self._ticks += 1
        if self._ticks % self.replenish_interval == 0:
            self.replenish(player)

        return completed

    def clear(self) -> None:
        """Remove every gem. Ids keep counting up."""
        self._gems = []
        self._ticks = 0
