"""Tests for pointer-driven player movement."""

import math
import random

import numpy as np
import pytest

from gemtrail.game.movement import (
    MovementController,
    PlayerState,
    shortest_angle_between,
    speed_for_tail,
)
from gemtrail.world.camera import CameraPose

from conftest import overhead_camera


@pytest.mark.parametrize("current, target, expected", [
    (0.0, 0.5, 0.5),
    (0.5, 0.0, -0.5),
    (0.0, math.pi, math.pi),
    (0.0, -math.pi, math.pi),
    (3.0, -3.0, 2 * math.pi - 6.0),
    (-3.0, 3.0, 6.0 - 2 * math.pi),
    (0.0, 4 * math.pi + 0.25, 0.25),
    (1.0, 1.0, 0.0),
])
def test_shortest_angle_between(current, target, expected):
    assert shortest_angle_between(current, target) == pytest.approx(expected)


def test_shortest_angle_stays_in_half_open_range():
    rng = random.Random(7)
    for _ in range(500):
        diff = shortest_angle_between(rng.uniform(-20, 20), rng.uniform(-20, 20))
        assert -math.pi < diff <= math.pi


@pytest.mark.parametrize("segments, expected", [
    (0, 0.08),
    (10, 0.07),
    (50, 0.03),
    (500, 0.03),
    (-3, 0.08),
])
def test_speed_for_tail(segments, expected):
    assert speed_for_tail(segments) == pytest.approx(expected)


class TestSteer:

    @pytest.fixture
    def controller(self, bounds):
        return MovementController(bounds)

    def test_moves_toward_target_and_turns_a_tenth(self, controller):
        player = PlayerState(position=(0, 0.5, 0), heading=0.0)
        result = controller.steer(player, np.array([10.0, 0.0, 0.0]), 0.08)

        assert result.moved
        assert result.position == pytest.approx([0.08, 0.5, 0.0])
        assert result.heading == pytest.approx(math.pi / 20)

    def test_does_not_mutate_player(self, controller):
        player = PlayerState(position=(0, 0.5, 0))
        controller.steer(player, np.array([10.0, 0.0, 0.0]), 0.08)
        assert player.position == pytest.approx([0, 0.5, 0])
        assert player.heading == 0.0

    def test_dead_zone_boundary_is_inclusive(self, controller):
        player = PlayerState(position=(0, 0.5, 0), heading=1.0)
        result = controller.steer(player, np.array([0.1, 0.0, 0.0]), 0.08)
        assert not result.moved
        assert result.position == pytest.approx([0, 0.5, 0])
        assert result.heading == 1.0

    def test_just_outside_dead_zone_moves(self, controller):
        player = PlayerState(position=(0, 0.5, 0))
        result = controller.steer(player, np.array([0.1001, 0.0, 0.0]), 0.08)
        assert result.moved

    def test_target_on_player_is_ignored(self, controller):
        player = PlayerState(position=(3, 0.5, 3), heading=0.4)
        result = controller.steer(player, np.array([3.0, 0.0, 3.0]), 0.08)
        assert not result.moved
        assert result.heading == 0.4

    def test_vertical_offset_is_ignored(self, controller):
        # Target straight below: zero planar distance
        player = PlayerState(position=(0, 0.5, 0))
        result = controller.steer(player, np.array([0.0, -50.0, 0.0]), 0.08)
        assert not result.moved

    def test_pinned_against_wall_turns_without_moving(self, controller):
        player = PlayerState(position=(40, 0.5, 0), heading=0.0)
        result = controller.steer(player, np.array([50.0, 0.0, 0.0]), 0.08)
        assert not result.moved
        assert result.position == pytest.approx([40, 0.5, 0])
        assert result.heading == pytest.approx(math.pi / 20)

    def test_position_always_clamped(self, controller, bounds):
        rng = random.Random(11)
        for _ in range(300):
            player = PlayerState(position=bounds.random_point(rng, 0.5))
            target = np.array([rng.uniform(-200, 200), 0.0, rng.uniform(-200, 200)])
            result = controller.steer(player, target, rng.uniform(0.01, 5.0))
            assert bounds.contains(result.position)
            assert result.position[1] == pytest.approx(0.5)

    def test_heading_converges_toward_target(self, controller):
        player = PlayerState(position=(0, 0.5, 0), heading=0.0)
        target = np.array([-20.0, 0.0, 0.0])  # angle -pi/2
        for _ in range(100):
            result = controller.steer(player, target, 0.01)
            player.position, player.heading = result.position, result.heading
        assert player.heading == pytest.approx(-math.pi / 2, abs=1e-3)


class TestUpdate:

    def test_missing_inputs_give_none(self, bounds, camera):
        controller = MovementController(bounds)
        player = PlayerState()
        assert controller.update(player, None, camera, 0.08) is None
        assert controller.update(player, (0.0, 0.0), None, 0.08) is None
        assert controller.update(None, (0.0, 0.0), camera, 0.08) is None

    def test_pointer_under_target_point(self, bounds):
        controller = MovementController(bounds)
        camera = overhead_camera()
        pointer = camera.project((10, 0, 0))
        player = PlayerState(position=(0, 0.5, 0))

        result = controller.update(player, pointer, camera, 0.08)

        assert result.target == pytest.approx([10, 0, 0], abs=1e-9)
        assert result.position == pytest.approx([0.08, 0.5, 0], abs=1e-9)
        assert result.moved

    def test_screen_up_moves_toward_minus_z(self, bounds, camera):
        controller = MovementController(bounds)
        result = controller.update(PlayerState(position=(0, 0.5, 0)), (0.0, 0.5), camera, 0.08)
        assert result.position[2] < 0
        assert result.position[0] == pytest.approx(0.0, abs=1e-9)

    def test_ray_missing_ground_keeps_pose(self, bounds):
        controller = MovementController(bounds)
        camera = CameraPose(position=(0, 5, 0), target=(10, 5, 0))
        player = PlayerState(position=(1, 0.5, 1), heading=0.3)

        result = controller.update(player, (0.0, 0.0), camera, 0.08)

        assert result.target is None
        assert not result.moved
        assert result.position == pytest.approx([1, 0.5, 1])
        assert result.heading == 0.3

    @pytest.mark.parametrize("kwargs", [{"dead_zone": -1}, {"turn_rate": 0}, {"turn_rate": 1.5}])
    def test_invalid_configuration(self, bounds, kwargs):
        with pytest.raises(ValueError):
            MovementController(bounds, **kwargs)


def test_spawn_sets_ground_offset():
    player = PlayerState.spawn((5, 5, -2), ground_offset=0.5, speed=0.06)
    assert player.position == pytest.approx([5, 0.5, -2])
    assert player.heading == 0.0
    assert player.speed == 0.06
