"""A falling-block puzzle game for the terminal: rules, drawing and main loop."""

__version__ = "1.0.0"
__all__ = ["app", "game", "screen", "terminal"]