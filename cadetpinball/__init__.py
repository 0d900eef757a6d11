"""Core logic of a 3D space-themed pinball table: geometry, projection,
bitmaps, MIDS-to-MIDI conversion, settings and high scores."""

__version__ = "0.1.0"