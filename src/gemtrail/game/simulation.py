"""
Per-frame simulation.

All mutable game data lives in one SimulationState. step() advances it by
exactly one tick in a fixed order:

    movement -> tail recording -> boundary check -> gem update

and returns a TickReport describing what happened. While the game is over
only the game-over timer runs. The Simulation class wraps a state together
with its audio and event collaborators for the window and HUD.
"""

from dataclasses import dataclass, field
from typing import NamedTuple
import logging
import random

from gemtrail.audio.cues import AudioCues, SilentAudio
from gemtrail.config import Settings, get_settings
from gemtrail.core.events import (
    Event,
    EventBus,
    EventType,
    game_over_event,
    gem_collected_event,
)
from gemtrail.core.state import GameContext, GameState, GameStateMachine
from gemtrail.game.gems import Gem, GemField
from gemtrail.game.movement import MovementController, PlayerState, speed_for_tail
from gemtrail.game.trail import TailTrail
from gemtrail.world.bounds import BoundaryMonitor, BoundsVolume, Vec3
from gemtrail.world.camera import CameraPose

logger = logging.getLogger(__name__)


@dataclass
class FrameInput:
    """
    Everything the outside world hands to one tick.

    Attributes:
        pointer: Normalized device coordinates (x, y), None before the first move
        camera: Current camera pose, None if not set up yet
        speed: Explicit per-tick speed; derived from tail length when None
        delta: Seconds since the previous frame
        elapsed: Clock time in seconds, for cosmetic oscillation only
    """
    pointer: tuple[float, float] | None = None
    camera: CameraPose | None = None
    speed: float | None = None
    delta: float = 1 / 60
    elapsed: float = 0.0


@dataclass
class TickReport:
    """What happened during one tick."""
    tick: int
    moved: bool = False
    target: Vec3 | None = None
    collected: list[Gem] = field(default_factory=list)
    game_over: bool = False
    suspended: bool = False


class SpeedCurve(NamedTuple):
    """Speed as a function of tail length."""
    base: float = 0.08
    decay: float = 0.001
    minimum: float = 0.03

    def at(self, segments: int) -> float:
        return speed_for_tail(segments, self.base, self.decay, self.minimum)


@dataclass
class SimulationState:
    """All state one tick reads and writes."""
    bounds: BoundsVolume
    player: PlayerState
    trail: TailTrail
    gems: GemField
    game: GameStateMachine
    movement: MovementController
    boundary: BoundaryMonitor
    speed_curve: SpeedCurve = field(default_factory=SpeedCurve)
    ground_offset: float = 0.5
    max_segments: int | None = None
    tick: int = 0
    elapsed: float = 0.0


def new_state(settings: Settings | None = None, rng: random.Random | None = None) -> SimulationState:
    """Build a fresh, populated session from settings."""
    settings = settings or get_settings()
    bounds = settings.bounds()
    player_cfg = settings.player
    gem_cfg = settings.gems

    player = PlayerState.spawn(bounds.center, player_cfg.ground_offset, player_cfg.base_speed)
    trail = TailTrail(
        capacity=settings.tail.max_history,
        spacing=settings.tail.segment_spacing,
        height=player_cfg.ground_offset,
    )
    trail.reset(player.position)

    gems = GemField(
        bounds,
        target_count=gem_cfg.target_count,
        attraction_distance=gem_cfg.attraction_distance,
        animation_speed=gem_cfg.animation_speed,
        replenish_interval=gem_cfg.replenish_interval,
        height=gem_cfg.height,
        despawn_distance=gem_cfg.despawn_distance,
        rng=rng,
    )
    gems.populate()

    return SimulationState(
        bounds=bounds,
        player=player,
        trail=trail,
        gems=gems,
        game=GameStateMachine(),
        movement=MovementController(bounds, player_cfg.dead_zone, player_cfg.turn_rate),
        boundary=BoundaryMonitor(bounds, settings.boundary.collision_threshold),
        speed_curve=SpeedCurve(player_cfg.base_speed, player_cfg.speed_decay, player_cfg.min_speed),
        ground_offset=player_cfg.ground_offset,
        max_segments=settings.tail.max_segments,
    )


def tail_segment_count(state: SimulationState) -> int:
    """One segment per collected gem, capped by what the history can space out."""
    cap = state.trail.max_segments
    if state.max_segments is not None:
        cap = min(cap, state.max_segments)
    return min(state.game.collected_gems, cap)


def step(state: SimulationState, frame: FrameInput, cues: AudioCues | None = None) -> TickReport:
    """Advance the session by one tick."""
    cues = cues or SilentAudio()
    report = TickReport(tick=state.tick)
    state.elapsed = frame.elapsed

    if not state.game.is_playing:
        state.game.update(frame.delta)
        report.suspended = True
        return report

    speed = frame.speed if frame.speed is not None else state.speed_curve.at(tail_segment_count(state))
    state.player.speed = speed

    move = state.movement.update(state.player, frame.pointer, frame.camera, speed)
    if move is not None:
        report.target = move.target
        state.player.heading = move.heading
        if move.moved:
            state.player.position = move.position
            state.trail.record(move.position)
            report.moved = True

    if state.boundary.is_colliding(state.player.position):
        if state.game.trigger_game_over():
            cues.play_game_over_sound()
            report.game_over = True
        state.tick += 1
        return report

    collected = state.gems.tick(state.player.position)
    for _ in collected:
        state.game.record_collection()
        cues.play_collect_sound()
    report.collected = collected

    state.tick += 1
    return report


def restart(state: SimulationState) -> None:
    """Start a new session in place: origin, empty tail, zero score, fresh gems."""
    state.player = PlayerState.spawn(state.bounds.center, state.ground_offset, state.speed_curve.base)
    state.trail.reset(state.player.position)
    state.gems.clear()
    state.gems.populate()
    state.tick = 0
    state.game.restart()


class Simulation:
    """
    Session facade for the window, HUD and audio.

    Owns a SimulationState, forwards ticks to step() and publishes
    GEM_COLLECTED / GAME_OVER / RESTART / STATE_CHANGED events.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        audio: AudioCues | None = None,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.audio = audio or SilentAudio()
        self.event_bus = event_bus or EventBus()
        self.state = new_state(self.settings, rng)
        self.state.game.add_listener(self._on_state_change)
        logger.info(
            f"Simulation created: arena {self.state.bounds.min} .. {self.state.bounds.max}, "
            f"{self.state.gems.active_count} gems"
        )

    def step(self, frame: FrameInput) -> TickReport:
        report = step(self.state, frame, self.audio)

        total = self.collected_gems - len(report.collected)
        for gem in report.collected:
            total += 1
            self.event_bus.emit(gem_collected_event(gem.id, total))

        if report.game_over:
            position = tuple(float(v) for v in self.state.player.position)
            logger.info(f"Game over at {position} with {self.collected_gems} gems")
            self.event_bus.emit(game_over_event(self.collected_gems, position))

        return report

    def restart(self) -> None:
        restart(self.state)
        self.audio.play_restart_sound()
        self.event_bus.emit(Event(EventType.RESTART))

    def follow_camera(self, **kwargs) -> CameraPose:
        """Camera trailing the player; the camera is derived, never the source of truth."""
        return CameraPose.follow(self.state.player.position, **kwargs)

    def _on_state_change(self, old: GameState, new: GameState, context: GameContext) -> None:
        self.event_bus.emit(Event(
            EventType.STATE_CHANGED,
            data={"from": old, "to": new, "collected": context.collected_gems},
        ))

    # Read-only views for collaborators

    @property
    def game_state(self) -> GameState:
        return self.state.game.state

    @property
    def is_playing(self) -> bool:
        return self.state.game.is_playing

    @property
    def collected_gems(self) -> int:
        return self.state.game.collected_gems

    @property
    def game_over_time(self) -> float:
        return self.state.game.context.game_over_time

    @property
    def player_position(self) -> Vec3:
        return self.state.player.position.copy()

    @property
    def player_heading(self) -> float:
        return self.state.player.heading

    @property
    def active_gem_count(self) -> int:
        return self.state.gems.active_count

    def gem_positions(self) -> list[tuple[int, Vec3]]:
        """(id, position) for every active gem."""
        return [(gem.id, gem.position.copy()) for gem in self.state.gems.gems]

    def tail_segments(self) -> list[Vec3]:
        return self.state.trail.segments_for(tail_segment_count(self.state))
