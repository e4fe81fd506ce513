"""Procedural pool sketch: distorted grid, Worley ripples and drifting rings."""

__version__ = "0.1.0"
