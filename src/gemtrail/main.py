"""
Main entry point for GemTrail.

Runs either the pygame simulator window or a headless session driven by
a scripted pointer, depending on GEMTRAIL_ENV.
"""

import asyncio
import logging
import math
import sys

from gemtrail.config import Settings, get_settings
from gemtrail.core.events import Event, EventType
from gemtrail.game.simulation import FrameInput, Simulation


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def scripted_pointer(tick: int, period: int = 240, radius: float = 0.6) -> tuple[float, float]:
    """Pointer sweeping a slow circle around the screen center."""
    angle = 2 * math.pi * (tick % period) / period
    return (radius * math.cos(angle), radius * math.sin(angle))


def run_headless(settings: Settings, ticks: int | None = None) -> Simulation:
    """Drive the simulation without a window and log a summary."""
    logger = logging.getLogger(__name__)
    ticks = settings.headless_ticks if ticks is None else ticks
    simulation = Simulation(settings)

    def on_collect(event: Event) -> None:
        logger.debug(f"Collected gem {event.data['gem_id']} (total {event.data['total']})")

    simulation.event_bus.subscribe(EventType.GEM_COLLECTED, on_collect)

    dt = 1.0 / settings.fps
    for tick in range(ticks):
        simulation.step(FrameInput(
            pointer=scripted_pointer(tick),
            camera=simulation.follow_camera(),
            delta=dt,
            elapsed=tick * dt,
        ))

    logger.info(
        f"Headless run: {ticks} ticks, state={simulation.game_state.name}, "
        f"collected={simulation.collected_gems}, gems on field={simulation.active_gem_count}"
    )
    return simulation


async def run_simulator(settings: Settings) -> None:
    """Run the pygame window."""
    from gemtrail.audio.engine import get_audio_engine
    from gemtrail.simulator.window import SimulatorWindow, WindowConfig

    audio = get_audio_engine()
    if settings.audio:
        audio.init()

    simulation = Simulation(settings, audio=audio)
    window = SimulatorWindow(simulation, WindowConfig(fps=settings.fps), audio=audio)

    try:
        await window.run()
    finally:
        audio.cleanup()


def main() -> None:
    """Main entry point."""
    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("GemTrail starting...")

    try:
        if settings.is_headless:
            logger.info("Running headless")
            run_headless(settings)
        else:
            logger.info("Running in simulator mode")
            asyncio.run(run_simulator(settings))

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("GemTrail stopped")


if __name__ == "__main__":
    main()
