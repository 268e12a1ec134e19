"""OpenCV window management for canvas display."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

import cv2
import numpy as np

from data_portrait.core.config import UISettings
from data_portrait.core.logging import get_logger

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = get_logger(__name__)


class KeyAction(Enum):
    """Actions triggered by keyboard input."""

    NONE = auto()
    QUIT = auto()
    RESET = auto()
    TOGGLE_FPS = auto()


# Key mappings (ASCII codes)
KEY_BINDINGS: dict[int, KeyAction] = {
    ord("q"): KeyAction.QUIT,
    ord("Q"): KeyAction.QUIT,
    27: KeyAction.QUIT,  # ESC
    ord("r"): KeyAction.RESET,
    ord("R"): KeyAction.RESET,
    ord("f"): KeyAction.TOGGLE_FPS,
    ord("F"): KeyAction.TOGGLE_FPS,
}


@dataclass
class WindowState:
    """Current state of the display window."""

    is_open: bool = False
    width: int = 1280
    height: int = 720


class DisplayWindow:
    """Manages the OpenCV window the canvas is shown in.

    Handles window creation, frame display, resize tracking and keyboard
    input.
    """

    WINDOW_NAME = "Data Portrait"

    def __init__(self, settings: UISettings | None = None) -> None:
        """Initialize display window.

        Args:
            settings: UI settings (uses defaults if None)
        """
        self.settings = settings or UISettings()
        self._state = WindowState(
            width=self.settings.display_width,
            height=self.settings.display_height,
        )

    @property
    def is_open(self) -> bool:
        """Check if window is open."""
        return self._state.is_open

    def open(self) -> None:
        """Create and show the display window."""
        cv2.namedWindow(self.WINDOW_NAME, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(self.WINDOW_NAME, self._state.width, self._state.height)
        self._state.is_open = True
        logger.info(
            "Display window opened (%dx%d)",
            self._state.width,
            self._state.height,
        )

    def close(self) -> None:
        """Close and destroy the display window."""
        if not self._state.is_open:
            return
        cv2.destroyWindow(self.WINDOW_NAME)
        self._state.is_open = False
        logger.info("Display window closed")

    def window_size(self) -> tuple[int, int]:
        """Current client area size as (width, height).

        Falls back to the last known size when the backend cannot report
        it.
        """
        if self._state.is_open:
            _, _, width, height = cv2.getWindowImageRect(self.WINDOW_NAME)
            if width > 0 and height > 0:
                self._state.width = width
                self._state.height = height
        return self._state.width, self._state.height

    def show_frame(self, image: NDArray[np.uint8]) -> None:
        """Display an image in the window.

        Args:
            image: BGR image array to display
        """
        if not self._state.is_open:
            self.open()

        cv2.imshow(self.WINDOW_NAME, image)

    def poll_key(self, wait_ms: int = 1) -> KeyAction:
        """Poll for keyboard input.

        Args:
            wait_ms: Milliseconds to wait for key (1 for non-blocking)

        Returns:
            KeyAction corresponding to pressed key
        """
        key = cv2.waitKey(wait_ms) & 0xFF

        if key == 255:  # No key pressed
            return KeyAction.NONE

        return KEY_BINDINGS.get(key, KeyAction.NONE)

    def __enter__(self) -> DisplayWindow:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()
