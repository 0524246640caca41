"""Core framework components for the game."""

from .state import GameState, GameContext, GameStateMachine
from .events import EventBus, Event, EventType

__all__ = ["GameState", "GameContext", "GameStateMachine", "EventBus", "Event", "EventType"]
