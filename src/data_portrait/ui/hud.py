"""Heads-up display (HUD) rendering for the inference frame rate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import cv2
import numpy as np

from data_portrait.core.config import UISettings

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass
class HUDLayout:
    """Layout configuration for HUD elements."""

    # FPS counter (top-left)
    counter_x: int = 10
    counter_y: int = 10
    padding: int = 5

    font_scale: float = 0.6
    thickness: int = 1

    # Colors (BGR)
    color_text: tuple[int, int, int] = (255, 255, 255)
    color_bg: tuple[int, int, int] = (0, 0, 0)


class HUDRenderer:
    """Draws the user-visible FPS counter onto the canvas."""

    def __init__(
        self,
        settings: UISettings | None = None,
        layout: HUDLayout | None = None,
    ) -> None:
        """Initialize HUD renderer.

        Args:
            settings: UI settings
            layout: HUD layout configuration
        """
        self.settings = settings or UISettings()
        self.layout = layout or HUDLayout()
        self.show_fps = self.settings.show_fps

    def toggle_fps(self) -> bool:
        """Flip FPS counter visibility and return the new state."""
        self.show_fps = not self.show_fps
        return self.show_fps

    def render_fps_counter(self, image: NDArray[np.uint8], label: str) -> None:
        """Draw the counter label in the top-left corner.

        Args:
            image: Image to draw on (modified in place)
            label: Counter text, e.g. "24 FPS"; nothing is drawn if empty
        """
        if not self.show_fps or not label:
            return

        font = cv2.FONT_HERSHEY_SIMPLEX
        (text_w, text_h), baseline = cv2.getTextSize(
            label, font, self.layout.font_scale, self.layout.thickness
        )
        pad = self.layout.padding
        x = self.layout.counter_x + pad
        y = self.layout.counter_y + pad + text_h

        cv2.rectangle(
            image,
            (self.layout.counter_x, self.layout.counter_y),
            (x + text_w + pad, y + baseline + pad),
            self.layout.color_bg,
            -1,
        )
        cv2.putText(
            image,
            label,
            (x, y),
            font,
            self.layout.font_scale,
            self.layout.color_text,
            self.layout.thickness,
        )
