"""Layered image compositing driven by head pose."""

from __future__ import annotations

from collections.abc import Sequence

from data_portrait.core.config import CompositorSettings
from data_portrait.core.logging import get_logger
from data_portrait.core.types import HeadPose, Layer
from data_portrait.render.canvas import Canvas

logger = get_logger(__name__)


def liveliness(index: int, step: float = 0.75) -> float:
    """Rotation multiplier for the layer at index.

    Later layers turn proportionally faster than earlier ones.
    """
    return 1.0 + index * step


class Compositor:
    """Draws the layer stack following the viewer's head.

    Every layer is placed at the pose centre, scaled by the pose scale and
    rotated by the pose angle times its liveliness.
    """

    def __init__(self, layers: Sequence[Layer], settings: CompositorSettings | None = None) -> None:
        """Initialize compositor.

        Args:
            layers: Decoded layers in draw order
            settings: Compositor settings (uses defaults if None)
        """
        self.settings = settings or CompositorSettings()
        self._layers = list(layers)

    @property
    def layers(self) -> list[Layer]:
        return list(self._layers)

    def liveliness(self, index: int) -> float:
        return liveliness(index, self.settings.liveliness_step)

    def layer_rotation(self, angle: float, index: int) -> float:
        """Rotation applied to the layer at index for a pose angle."""
        return angle * self.liveliness(index)

    def draw(self, canvas: Canvas, pose: HeadPose) -> None:
        """Draw all layers for one frame.

        Args:
            canvas: Target canvas, already cleared for this frame
            pose: Smoothed head pose
        """
        for layer in self._layers:
            with canvas.pushed():
                canvas.translate(pose.centre.x * canvas.width, pose.centre.y * canvas.height)
                canvas.scale(pose.scale)
                canvas.rotate(self.layer_rotation(pose.angle, layer.index))
                if not canvas.draw_image(layer.image):
                    logger.debug("Layer %s skipped: degenerate transform", layer.name)
