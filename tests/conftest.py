"""Shared fixtures for the GemTrail test suite."""

import random

import pytest

from gemtrail.config import Settings
from gemtrail.world.bounds import BoundsVolume
from gemtrail.world.camera import CameraPose


class RecordingAudio:
    """AudioCues implementation that counts cue calls."""

    def __init__(self) -> None:
        self.collect = 0
        self.game_over = 0
        self.restart = 0

    def play_collect_sound(self) -> None:
        self.collect += 1

    def play_game_over_sound(self) -> None:
        self.game_over += 1

    def play_restart_sound(self) -> None:
        self.restart += 1


def overhead_camera(x: float = 0.0, z: float = 0.0, height: float = 30.0) -> CameraPose:
    """Square-aspect camera looking straight down at (x, 0, z)."""
    return CameraPose(position=(x, height, z), target=(x, 0.0, z), aspect=1.0)


def make_settings(**overrides) -> Settings:
    """Settings that ignore any local .env file."""
    return Settings(_env_file=None, **overrides)


@pytest.fixture
def bounds() -> BoundsVolume:
    return BoundsVolume.centered(80, 80)


@pytest.fixture
def rng() -> random.Random:
    return random.Random()


@pytest.fixture
def audio() -> RecordingAudio:
    return RecordingAudio()


@pytest.fixture
def camera() -> CameraPose:
    return overhead_camera()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def empty_settings() -> Settings:
    """Default arena with no gems, so tests place every gem themselves."""
    return make_settings(gems={"target_count": 0})
