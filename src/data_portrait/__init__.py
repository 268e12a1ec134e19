"""Data Portrait: layered images that react to head movement in webcam video."""

__version__ = "0.1.0"
