"""GemTrail: real-time simulation core of a pointer-steered gem collection game."""

__version__ = "0.1.0"
