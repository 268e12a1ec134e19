"""Webcam capture as a source of Frame objects."""

from __future__ import annotations

import time
from collections.abc import Generator

import cv2
import numpy as np

from data_portrait.core.config import CameraSettings
from data_portrait.core.exceptions import CameraError
from data_portrait.core.logging import get_logger
from data_portrait.core.types import Frame

logger = get_logger(__name__)


class Webcam:
    """OpenCV webcam wrapper.

    Provides frames as Frame dataclass instances with metadata.
    """

    def __init__(self, settings: CameraSettings | None = None) -> None:
        """Initialize webcam with settings.

        Args:
            settings: Camera settings (uses defaults if None)
        """
        self.settings = settings or CameraSettings()
        self._capture: cv2.VideoCapture | None = None
        self._frame_idx = 0
        self._start_time: float | None = None

    @property
    def is_open(self) -> bool:
        """Check if the capture device is open."""
        return self._capture is not None

    @property
    def frame_count(self) -> int:
        """Number of frames captured so far."""
        return self._frame_idx

    def open(self) -> None:
        """Open the capture device.

        Raises:
            CameraError: If the device cannot be opened
        """
        if self._capture is not None:
            return

        capture = cv2.VideoCapture(self.settings.device)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Cannot open camera {self.settings.device}")

        if self.settings.width is not None:
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.settings.width)
        if self.settings.height is not None:
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.settings.height)

        self._capture = capture
        self._start_time = time.time()
        self._frame_idx = 0
        logger.info(
            "Camera %d opened (%dx%d)",
            self.settings.device,
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

    def release(self) -> None:
        """Release the capture device."""
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Camera released (captured %d frames)", self._frame_idx)

    def read(self) -> Frame:
        """Read the next frame.

        Returns:
            Next captured Frame

        Raises:
            CameraError: If the camera is closed or the read fails
        """
        if self._capture is None:
            raise CameraError("Camera not open")

        ok, image = self._capture.read()
        if not ok or image is None:
            raise CameraError("Failed to read frame")

        frame = Frame(
            image=np.asarray(image, dtype=np.uint8),
            timestamp=time.time() - (self._start_time or time.time()),
            index=self._frame_idx,
        )
        self._frame_idx += 1
        return frame

    def frames(self) -> Generator[Frame, None, None]:
        """Generate frames until the camera is released.

        Yields:
            Frame objects with image data and metadata
        """
        if self._capture is None:
            self.open()

        while self._capture is not None:
            yield self.read()

    def __iter__(self) -> Generator[Frame, None, None]:
        """Allow direct iteration over the camera."""
        return self.frames()

    def __enter__(self) -> Webcam:
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
        self.release()
