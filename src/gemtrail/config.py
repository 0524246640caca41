"""
Game settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested sections use a double underscore, e.g. GEMTRAIL_GEMS__TARGET_COUNT=60.
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gemtrail.world.bounds import BoundsVolume


class ArenaSettings(BaseModel):
    """Playable area, centered on the world origin."""

    width: float = Field(default=80.0, gt=0)
    length: float = Field(default=80.0, gt=0)

    # Vertical extent only needs to contain the player's ground offset
    floor: float = 0.0
    ceiling: float = 10.0

    @model_validator(mode="after")
    def _check_vertical(self) -> "ArenaSettings":
        if self.ceiling < self.floor:
            raise ValueError("arena ceiling must not be below floor")
        return self


class PlayerSettings(BaseModel):
    """Player locomotion tuning."""

    ground_offset: float = 0.5
    base_speed: float = Field(default=0.08, gt=0)
    speed_decay: float = Field(default=0.001, ge=0)  # per tail segment
    min_speed: float = Field(default=0.03, gt=0)
    dead_zone: float = Field(default=0.1, ge=0)
    turn_rate: float = Field(default=0.1, gt=0, le=1.0)


class TailSettings(BaseModel):
    """Tail trail sampling."""

    max_history: int = Field(default=300, gt=1)
    segment_spacing: int = Field(default=5, gt=0)
    max_segments: int | None = Field(default=None, ge=0)


class GemSettings(BaseModel):
    """Gem population and collection animation."""

    target_count: int = Field(default=40, ge=0)
    attraction_distance: float = Field(default=1.8, gt=0)
    animation_speed: float = Field(default=0.04, gt=0, le=1.0)
    replenish_interval: int = Field(default=30, gt=0)  # ticks
    height: float = 0.5
    despawn_distance: float | None = Field(default=None, gt=0)


class BoundarySettings(BaseModel):
    """Arena edge collision."""

    collision_threshold: float = Field(default=1.2, ge=0)


class Settings(BaseSettings):
    """Main game settings."""

    model_config = SettingsConfigDict(
        env_prefix="GEMTRAIL_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    env: Literal["simulator", "headless"] = "simulator"
    debug: bool = False

    # Loop
    fps: int = Field(default=60, gt=0)
    headless_ticks: int = Field(default=600, ge=0)
    audio: bool = True

    # Nested settings
    arena: ArenaSettings = Field(default_factory=ArenaSettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)
    tail: TailSettings = Field(default_factory=TailSettings)
    gems: GemSettings = Field(default_factory=GemSettings)
    boundary: BoundarySettings = Field(default_factory=BoundarySettings)

    def bounds(self) -> BoundsVolume:
        """Build the arena volume described by the arena section."""
        half_w = self.arena.width / 2
        half_l = self.arena.length / 2
        return BoundsVolume(
            (-half_w, self.arena.floor, -half_l),
            (half_w, self.arena.ceiling, half_l),
        )

    @property
    def is_headless(self) -> bool:
        """Check if running without a window."""
        return self.env == "headless"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
