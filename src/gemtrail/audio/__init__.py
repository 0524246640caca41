"""
Audio for the game.

The simulation only talks to the AudioCues interface; AudioEngine is the
pygame implementation used by the simulator window.
"""

from .cues import AudioCues, SilentAudio
from .engine import AudioEngine, get_audio_engine

__all__ = ["AudioCues", "SilentAudio", "AudioEngine", "get_audio_engine"]
