"""Canvas, image layers, and pose-driven compositing."""

from data_portrait.render.assets import load_image, load_layers
from data_portrait.render.canvas import Canvas
from data_portrait.render.compositor import Compositor, liveliness

__all__ = ["Canvas", "Compositor", "liveliness", "load_image", "load_layers"]
