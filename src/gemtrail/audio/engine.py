"""
Chiptune sound effects for the game.

Sounds are synthesized at start-up from simple waveforms and played
through pygame's mixer. If the mixer cannot start (no audio device,
headless CI) the engine stays silent and every cue is a no-op.
"""

import pygame
import array
import math
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100


def square(t: float, freq: float) -> float:
    """Square wave oscillator."""
    return 1 if (t * freq) % 1 < 0.5 else -1


def triangle(t: float, freq: float) -> float:
    """Triangle wave oscillator."""
    p = (t * freq) % 1
    return 4 * abs(p - 0.5) - 1


def sine(t: float, freq: float) -> float:
    """Sine wave oscillator."""
    return math.sin(2 * math.pi * freq * t)


def render(duration: float, voice) -> array.array:
    """Render voice(t) -> [-1, 1] into signed 16-bit mono samples."""
    samples = array.array('h')
    for i in range(int(SAMPLE_RATE * duration)):
        t = i / SAMPLE_RATE
        val = max(-1.0, min(1.0, voice(t)))
        samples.append(int(val * 32767))
    return samples


def collect_voice(t: float) -> float:
    """Rising blip with a sparkle on top."""
    freq = 880 + t * 3000
    env = max(0, 1 - t * 8)
    return (square(t, freq) * 0.2 + sine(t, freq * 2) * 0.1) * env


def game_over_voice(t: float) -> float:
    """Sad descending tone."""
    freq = 400 - t * 250
    env = max(0, 1 - t * 1.6)
    return (square(t, freq) * 0.25 + triangle(t, freq / 2) * 0.15) * env


def restart_voice(t: float) -> float:
    """Short two-tone confirm."""
    freq = 523 if t < 0.08 else 784
    env = max(0, 1 - (t % 0.08) * 10)
    return square(t, freq) * 0.2 * env


class AudioEngine:
    """
    pygame-backed implementation of the AudioCues interface.

    Cue methods never raise: an uninitialised, muted or failed engine
    simply plays nothing.
    """

    SOUNDS = {
        "gem_collect": (0.12, collect_voice),
        "game_over": (0.6, game_over_voice),
        "restart": (0.16, restart_voice),
    }

    def __init__(self) -> None:
        self._initialized = False
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self._volume_master = 1.0
        self._volume_sfx = 1.0
        self._muted = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def init(self) -> bool:
        """Initialize the mixer and synthesize all sounds."""
        try:
            pygame.mixer.pre_init(SAMPLE_RATE, -16, 2, 1024)
            pygame.mixer.init()
            pygame.mixer.set_num_channels(8)
        except pygame.error as e:
            logger.error(f"Failed to initialize audio: {e}")
            return False

        self._initialized = True
        for name, (duration, voice) in self.SOUNDS.items():
            self._sounds[name] = self._create_sound(render(duration, voice))
        logger.info(f"Audio engine initialized ({len(self._sounds)} sounds)")
        return True

    def _create_sound(self, samples: array.array) -> pygame.mixer.Sound:
        """Create a pygame Sound from mono samples (auto-converted to stereo)."""
        stereo = array.array('h')
        for s in samples:
            stereo.append(s)
            stereo.append(s)
        return pygame.mixer.Sound(buffer=stereo)

    def play(self, sound_name: str, volume: float = 1.0) -> Optional[pygame.mixer.Channel]:
        """Play a sound effect."""
        if not self._initialized or self._muted:
            return None

        sound = self._sounds.get(sound_name)
        if not sound:
            logger.warning(f"Sound not found: {sound_name}")
            return None

        sound.set_volume(volume * self._volume_sfx * self._volume_master)
        return sound.play()

    def play_collect_sound(self) -> None:
        self.play("gem_collect", volume=0.7)

    def play_game_over_sound(self) -> None:
        self.play("game_over")

    def play_restart_sound(self) -> None:
        self.play("restart", volume=0.8)

    def set_volume(self, volume: float) -> None:
        """Set master volume (0.0 - 1.0)."""
        self._volume_master = max(0.0, min(1.0, volume))

    def get_volume(self) -> float:
        return self._volume_master

    def is_muted(self) -> bool:
        return self._muted

    def toggle_mute(self) -> bool:
        """Toggle mute state."""
        self._muted = not self._muted
        if self._initialized:
            if self._muted:
                pygame.mixer.pause()
            else:
                pygame.mixer.unpause()
        return self._muted

    def cleanup(self) -> None:
        """Cleanup audio resources."""
        if self._initialized:
            pygame.mixer.quit()
            self._initialized = False
            self._sounds.clear()
            logger.info("Audio engine cleaned up")


# Global audio engine instance
_audio_engine: Optional[AudioEngine] = None


def get_audio_engine() -> AudioEngine:
    """Get the global audio engine instance."""
    global _audio_engine
    if _audio_engine is None:
        _audio_engine = AudioEngine()
    return _audio_engine
