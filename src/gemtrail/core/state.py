"""
State machine for the game session.

States:
    PLAYING: Simulation advances every tick
    GAME_OVER: Player touched the arena edge; updates suspended until restart
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Session states."""
    PLAYING = auto()
    GAME_OVER = auto()


@dataclass
class GameContext:
    """Per-session data reset on restart."""
    collected_gems: int = 0
    game_over_time: float = 0.0  # seconds spent in GAME_OVER


StateListener = Callable[[GameState, GameState, GameContext], None]


class GameStateMachine:
    """
    Holds the session state and the collected-gem score.

    Only PLAYING -> GAME_OVER is a regular transition. Leaving GAME_OVER
    happens through restart(), which also wipes the context.
    """

    VALID_TRANSITIONS: list[tuple[GameState, GameState]] = [
        (GameState.PLAYING, GameState.GAME_OVER),
    ]

    def __init__(self, initial_state: GameState = GameState.PLAYING) -> None:
        self._state = initial_state
        self._context = GameContext()
        self._listeners: list[StateListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.info(f"GameStateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> GameState:
        """Get current state."""
        return self._state

    @property
    def context(self) -> GameContext:
        """Get current context."""
        return self._context

    @property
    def is_playing(self) -> bool:
        return self._state == GameState.PLAYING

    @property
    def is_game_over(self) -> bool:
        return self._state == GameState.GAME_OVER

    @property
    def collected_gems(self) -> int:
        return self._context.collected_gems

    def can_transition(self, to_state: GameState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: GameState) -> bool:
        """
        Attempt to transition to a new state.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state
        logger.info(f"State transition: {old_state.name} -> {to_state.name}")
        self._notify(old_state, to_state)
        return True

    def trigger_game_over(self) -> bool:
        """
        Enter GAME_OVER after a boundary breach.

        Returns False without side effects if the game is already over, so a
        breach that persists across ticks fires exactly once.
        """
        if self._state == GameState.GAME_OVER:
            logger.debug("Game over already triggered")
            return False
        return self.transition(GameState.GAME_OVER)

    def record_collection(self, count: int = 1) -> int:
        """Add collected gems to the score. Ignored outside PLAYING."""
        if self._state != GameState.PLAYING or count <= 0:
            return self._context.collected_gems
        self._context.collected_gems += count
        return self._context.collected_gems

    def update(self, delta: float) -> None:
        """Advance the game-over timer by the frame delta (seconds)."""
        if self._state == GameState.GAME_OVER and delta > 0:
            self._context.game_over_time += delta

    def restart(self) -> None:
        """Return to PLAYING with a fresh context, from any state."""
        old_state = self._state
        self._state = GameState.PLAYING
        self._context = GameContext()
        logger.info(f"Restart from {old_state.name}")
        self._notify(old_state, GameState.PLAYING)

    def add_listener(self, callback: StateListener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, old_state: GameState, new_state: GameState) -> None:
        for listener in list(self._listeners):
            try:
                listener(old_state, new_state, self._context)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")
