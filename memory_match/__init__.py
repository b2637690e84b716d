"""Memory Match: a single-player memory card game engine."""

__version__ = "0.1.0"
