"""Audio cue interface consumed by the simulation."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class AudioCues(Protocol):
    """Fire-and-forget sound triggers."""

    def play_collect_sound(self) -> None:
        ...

    def play_game_over_sound(self) -> None:
        ...

    def play_restart_sound(self) -> None:
        ...


class SilentAudio:
    """Cue sink that plays nothing (headless runs, tests)."""

    def play_collect_sound(self) -> None:
        pass

    def play_game_over_sound(self) -> None:
        pass

    def play_restart_sound(self) -> None:
        pass
