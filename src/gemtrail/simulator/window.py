"""
Simulator window using pygame.

Top-down desktop view of the arena for playing and debugging the
simulation. The overhead camera is the same perspective camera the
simulation casts pointer rays through, so what is under the mouse is
exactly where the player heads.
"""

import pygame
import asyncio
import logging
import math
import time
from dataclasses import dataclass

from ..audio.cues import AudioCues
from ..core.events import Event, EventType
from ..core.state import GameState
from ..game.simulation import FrameInput, Simulation
from ..game.trail import segment_style
from ..world.camera import CameraPose

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Simulator window configuration."""
    width: int = 960
    height: int = 960
    title: str = "GemTrail Simulator"
    fps: int = 60
    fov: float = 50.0

    # Colors
    bg_color: tuple[int, int, int] = (10, 25, 41)
    floor_color: tuple[int, int, int] = (26, 59, 109)
    edge_color: tuple[int, int, int] = (200, 200, 220)
    player_color: tuple[int, int, int] = (76, 158, 255)
    nose_color: tuple[int, int, int] = (255, 51, 51)
    text_color: tuple[int, int, int] = (200, 200, 220)
    alert_color: tuple[int, int, int] = (255, 80, 80)


class SimulatorWindow:
    """
    Main simulator window.

    Controls:
        Mouse: Steer the player
        R: Restart
        M: Toggle mute
        ESC: Exit simulator
    """

    def __init__(
        self,
        simulation: Simulation,
        config: WindowConfig | None = None,
        audio: AudioCues | None = None,
    ) -> None:
        self.config = config or WindowConfig()
        self.simulation = simulation
        self.audio = audio

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._running = False
        self._frame_count = 0
        self._start_time = 0.0
        self._pointer: tuple[float, float] | None = None
        self._camera = self._overhead_camera()

        self.simulation.event_bus.subscribe(EventType.GAME_OVER, self._on_game_over)
        logger.info("SimulatorWindow created")

    def _overhead_camera(self) -> CameraPose:
        """Camera straight above the arena center, high enough to see all of it."""
        bounds = self.simulation.state.bounds
        center = bounds.center
        center[1] = 0.0
        size = bounds.size
        aspect = self.config.width / self.config.height
        tan_half = math.tan(math.radians(self.config.fov) / 2)
        # Ten percent margin around the arena
        height = 1.1 * max(size[2] / 2, size[0] / 2 / aspect) / tan_half
        return CameraPose(
            position=center + [0.0, height, 0.0],
            target=center,
            fov=self.config.fov,
            aspect=aspect,
        )

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)
        self._screen = pygame.display.set_mode((self.config.width, self.config.height), pygame.DOUBLEBUF)
        self._clock = pygame.time.Clock()
        self._font = pygame.font.Font(None, 28)

    def _to_ndc(self, pos: tuple[int, int]) -> tuple[float, float]:
        return (
            pos[0] / self.config.width * 2 - 1,
            -(pos[1] / self.config.height * 2 - 1),
        )

    def _to_screen(self, point) -> tuple[int, int] | None:
        ndc = self._camera.project(point)
        if ndc is None:
            return None
        return (
            int((ndc[0] + 1) / 2 * self.config.width),
            int((1 - ndc[1]) / 2 * self.config.height),
        )

    def _pixels_per_unit(self) -> float:
        a = self._to_screen((0.0, 0.0, 0.0))
        b = self._to_screen((1.0, 0.0, 0.0))
        if a is None or b is None:
            return 1.0
        return float(abs(b[0] - a[0]))

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)
            elif event.type == pygame.MOUSEMOTION:
                # Pointer is only listened to while playing
                if self.simulation.is_playing:
                    self._pointer = self._to_ndc(event.pos)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        if event.key == pygame.K_ESCAPE:
            self._running = False
        elif event.key == pygame.K_r:
            self.simulation.restart()
            self._pointer = None
        elif event.key == pygame.K_m and self.audio is not None:
            toggle = getattr(self.audio, "toggle_mute", None)
            if toggle is not None:
                logger.info(f"Muted: {toggle()}")

    def _on_game_over(self, event: Event) -> None:
        self._pointer = None

    def _render(self, elapsed: float) -> None:
        screen = self._screen
        cfg = self.config
        sim = self.simulation
        scale = self._pixels_per_unit()

        screen.fill(cfg.bg_color)

        bounds = sim.state.bounds
        top_left = self._to_screen((bounds.min[0], 0.0, bounds.min[2]))
        bottom_right = self._to_screen((bounds.max[0], 0.0, bounds.max[2]))
        if top_left and bottom_right:
            rect = pygame.Rect(top_left, (bottom_right[0] - top_left[0], bottom_right[1] - top_left[1]))
            pygame.draw.rect(screen, cfg.floor_color, rect)
            pygame.draw.rect(screen, cfg.edge_color, rect, 2)

        for gem in sim.state.gems.gems:
            pos = self._to_screen(gem.position)
            if pos:
                radius = max(2, int(0.3 * scale * gem.scale(elapsed)))
                pygame.draw.circle(screen, gem.look.color, pos, radius)

        for index, segment in enumerate(sim.tail_segments()):
            pos = self._to_screen(segment)
            if pos:
                color, size = segment_style(index)
                rgb = tuple(int(c * 255) for c in color)
                pygame.draw.circle(screen, rgb, pos, max(2, int(size * scale)))

        player = sim.player_position
        pos = self._to_screen(player)
        if pos:
            pygame.draw.circle(screen, cfg.player_color, pos, max(3, int(0.3 * scale)))
            heading = sim.player_heading
            nose = player + [math.sin(heading) * 0.5, 0.0, math.cos(heading) * 0.5]
            nose_pos = self._to_screen(nose)
            if nose_pos:
                pygame.draw.line(screen, cfg.nose_color, pos, nose_pos, 3)

        self._render_hud()
        pygame.display.flip()

    def _render_hud(self) -> None:
        sim = self.simulation
        lines = [
            f"Gems: {sim.collected_gems}",
            f"On field: {sim.active_gem_count}",
        ]
        for i, text in enumerate(lines):
            surface = self._font.render(text, True, self.config.text_color)
            self._screen.blit(surface, (12, 12 + i * 24))

        if sim.game_state == GameState.GAME_OVER:
            surface = self._font.render("GAME OVER - press R", True, self.config.alert_color)
            rect = surface.get_rect(center=(self.config.width // 2, self.config.height // 2))
            self._screen.blit(surface, rect)

    async def run(self) -> None:
        """Main simulator loop."""
        self._init_pygame()
        self._running = True
        self._start_time = time.monotonic()

        logger.info("Simulator started")

        while self._running:
            self._handle_events()

            delta = self._clock.get_time() / 1000.0 if self._clock else 0.0
            elapsed = time.monotonic() - self._start_time
            self.simulation.step(FrameInput(
                pointer=self._pointer,
                camera=self._camera,
                delta=delta,
                elapsed=elapsed,
            ))

            self._render(elapsed)

            if self._clock:
                self._clock.tick(self.config.fps)

            self._frame_count += 1

            # Yield to other tasks
            await asyncio.sleep(0)

        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        pygame.quit()
        logger.info(f"Simulator stopped after {self._frame_count} frames")

    def stop(self) -> None:
        """Stop the simulator."""
        self._running = False
