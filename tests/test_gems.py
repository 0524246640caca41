"""Tests for gem spawning, attraction and the collection animation."""

import dataclasses
import random

import numpy as np
import pytest

from gemtrail.game.gems import GEM_COLORS, Gem, GemField, GemLook, GemStatus

PLAYER = np.array([0.0, 0.5, 0.0])


def empty_field(bounds, **kwargs) -> GemField:
    kwargs.setdefault("target_count", 0)
    return GemField(bounds, rng=random.Random(3), **kwargs)


class TestPopulation:

    def test_populate_fills_to_target(self, bounds):
        field = GemField(bounds, target_count=40, rng=random.Random(1))
        spawned = field.populate()
        assert len(spawned) == 40
        assert field.active_count == 40
        assert field.populate() == []

    def test_ids_unique_and_increasing(self, bounds):
        field = GemField(bounds, target_count=25, rng=random.Random(1))
        field.populate()
        ids = [g.id for g in field.gems]
        assert ids == sorted(set(ids))

    def test_spawned_gems_sit_inside_at_gem_height(self, bounds):
        field = GemField(bounds, target_count=100, height=0.5, rng=random.Random(2))
        field.populate()
        for gem in field.gems:
            assert gem.is_idle
            assert gem.position[1] == 0.5
            assert bounds.contains(gem.position)
            assert gem.look.color in GEM_COLORS

    def test_gems_snapshot_is_read_only(self, bounds):
        field = empty_field(bounds)
        field.spawn((5, 0.5, 5))
        snapshot = field.gems
        assert isinstance(snapshot, tuple)
        assert field.active_count == 1

    def test_ids_keep_counting_after_clear(self, bounds):
        field = empty_field(bounds)
        first = field.spawn((5, 0.5, 5))
        field.clear()
        assert field.active_count == 0
        assert field.spawn((5, 0.5, 5)).id == first.id + 1


class TestCollection:

    def test_attraction_is_strictly_below_distance(self, bounds):
        field = empty_field(bounds)
        near = field.spawn((1.79, 0.5, 0))
        edge = field.spawn((0, 0.5, 1.8))

        field.tick(PLAYER)

        assert near.is_being_collected
        assert edge.is_idle

    def test_attraction_uses_planar_distance(self, bounds):
        field = empty_field(bounds)
        gem = field.spawn((1.0, 9.0, 0))
        field.tick(PLAYER)
        assert gem.is_being_collected

    def test_removed_exactly_25_ticks_after_starting(self, bounds):
        field = empty_field(bounds)
        field.spawn((1.0, 0.5, 0))
        assert field.ticks_to_collect == 25

        assert field.tick(PLAYER) == []  # starts collecting
        for _ in range(24):
            assert field.tick(PLAYER) == []
            assert field.active_count == 1
        completed = field.tick(PLAYER)

        assert len(completed) == 1
        assert completed[0].collection_progress == 1.0
        assert field.active_count == 0

    def test_arc_midpoint(self, bounds):
        field = empty_field(bounds, animation_speed=0.25)
        gem = field.spawn((1.0, 0.5, 0))

        field.tick(PLAYER)
        field.tick(PLAYER)
        assert gem.collection_progress == pytest.approx(0.25)
        field.tick(PLAYER)

        assert gem.collection_progress == pytest.approx(0.5)
        assert gem.position == pytest.approx([0.5, 1.0, 0.0])

    def test_gem_follows_moving_player(self, bounds):
        field = empty_field(bounds, animation_speed=0.5)
        gem = field.spawn((1.0, 0.5, 0))
        field.tick(PLAYER)
        field.tick(np.array([0.0, 0.5, 2.0]))
        assert gem.position[2] == pytest.approx(1.0)

    def test_several_gems_finish_in_one_tick(self, bounds):
        field = empty_field(bounds, animation_speed=0.5)
        for x in (0.5, -0.5, 1.0):
            field.spawn((x, 0.5, 0))
        keeper = field.spawn((20, 0.5, 20))

        field.tick(PLAYER)
        field.tick(PLAYER)
        completed = field.tick(PLAYER)

        assert len(completed) == 3
        assert field.gems == (keeper,)

    def test_collecting_gem_never_reattracted(self, bounds):
        field = empty_field(bounds)
        gem = field.spawn((1.0, 0.5, 0))
        field.tick(PLAYER)
        field.tick(PLAYER)
        assert gem.collection_ticks == 1
        assert gem.state is GemStatus.BEING_COLLECTED


class TestReplenish:

    def test_refills_on_interval(self, bounds):
        field = GemField(bounds, target_count=5, replenish_interval=30, rng=random.Random(4))
        field.populate()
        far = np.array([1000.0, 0.5, 1000.0])  # nothing gets collected
        field._gems = field._gems[:2]

        for _ in range(29):
            field.tick(far)
        assert field.active_count == 2
        field.tick(far)
        assert field.active_count == 5

    def test_never_exceeds_target(self, bounds):
        field = GemField(bounds, target_count=10, replenish_interval=1, rng=random.Random(5))
        field.populate()
        far = np.array([1000.0, 0.5, 1000.0])
        for _ in range(100):
            field.tick(far)
            assert field.active_count <= 10

    def test_despawn_drops_far_idle_gems(self, bounds):
        field = empty_field(bounds, despawn_distance=10.0)
        field.spawn((1.0, 0.5, 0))
        field.spawn((30.0, 0.5, 30.0))

        field.replenish(PLAYER)

        assert [tuple(g.position) for g in field.gems] == [(1.0, 0.5, 0.0)]

    def test_despawn_disabled_by_default(self, bounds):
        field = empty_field(bounds)
        field.spawn((30.0, 0.5, 30.0))
        field.replenish(PLAYER)
        assert field.active_count == 1


class TestGem:

    def test_look_is_frozen(self):
        look = GemLook.roll(random.Random(0))
        with pytest.raises(dataclasses.FrozenInstanceError):
            look.pulse_speed = 3.0
        assert 1.0 <= look.pulse_speed <= 1.5

    def test_scale_while_collecting_shrinks_to_floor(self):
        gem = Gem(id=0, position=(0, 0.5, 0), look=GemLook((255, 85, 85), 1.2, 0.0))
        gem.begin_collection()
        gem.collection_progress = 0.5
        assert gem.scale(0.0) == pytest.approx(0.55)
        gem.collection_progress = 1.0
        assert gem.scale(0.0) == pytest.approx(0.1)

    def test_idle_scale_pulses_gently(self):
        gem = Gem(id=0, position=(0, 0.5, 0), look=GemLook((255, 85, 85), 1.2, 0.0))
        for t in np.linspace(0, 10, 50):
            assert 0.95 <= gem.scale(t) <= 1.05
            assert 0.4 <= gem.bob_height(t) <= 0.6


@pytest.mark.parametrize("kwargs", [
    {"target_count": -1},
    {"animation_speed": 0},
    {"animation_speed": 1.5},
    {"replenish_interval": 0},
])
def test_invalid_configuration(bounds, kwargs):
    with pytest.raises(ValueError):
        GemField(bounds, **kwargs)
