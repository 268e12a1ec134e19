"""Raster canvas with a 2D transform stack."""

from __future__ import annotations

import math
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import cv2
import numpy as np
from numpy.typing import NDArray

from data_portrait.core.exceptions import RenderError

# Below this the transform collapses the image to a line or a point
MIN_DETERMINANT = 1e-9


def to_bgra(image: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """Convert a grayscale, BGR or BGRA image to BGRA."""
    if image.ndim == 2:
        return np.asarray(cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA), dtype=np.uint8)
    if image.shape[2] == 3:
        return np.asarray(cv2.cvtColor(image, cv2.COLOR_BGR2BGRA), dtype=np.uint8)
    if image.shape[2] == 4:
        return image
    raise RenderError(f"Unsupported channel count: {image.shape[2]}")


def translation_matrix(dx: float, dy: float) -> NDArray[np.floating[Any]]:
    return np.array([[1.0, 0.0, dx], [0.0, 1.0, dy], [0.0, 0.0, 1.0]])


def rotation_matrix(angle: float) -> NDArray[np.floating[Any]]:
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    return np.array([[cos_a, -sin_a, 0.0], [sin_a, cos_a, 0.0], [0.0, 0.0, 1.0]])


def scale_matrix(sx: float, sy: float) -> NDArray[np.floating[Any]]:
    return np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])


class Canvas:
    """BGR drawing surface with translate/rotate/scale transforms.

    The origin starts at the top-left corner with y pointing down, so a
    positive rotation turns clockwise on screen. Transforms compose in
    call order: each call applies in the local coordinate system left by
    the previous ones. push()/pop() save and restore the transform.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background: tuple[int, int, int] = (0, 0, 0),
    ) -> None:
        """Initialize canvas.

        Args:
            width: Width in pixels
            height: Height in pixels
            background: BGR colour used by clear()
        """
        self.background = background
        self._image: NDArray[np.uint8] = self._blank(width, height)
        self._matrix: NDArray[np.floating[Any]] = np.eye(3)
        self._stack: list[NDArray[np.floating[Any]]] = []

    @property
    def image(self) -> NDArray[np.uint8]:
        """The pixel buffer (BGR)."""
        return self._image

    @property
    def width(self) -> int:
        return int(self._image.shape[1])

    @property
    def height(self) -> int:
        return int(self._image.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """Canvas dimensions as (width, height)."""
        return self.width, self.height

    @property
    def transform(self) -> NDArray[np.floating[Any]]:
        """Copy of the current 3x3 transform matrix."""
        return self._matrix.copy()

    @property
    def depth(self) -> int:
        """Number of saved transforms on the stack."""
        return len(self._stack)

    def _blank(self, width: int, height: int) -> NDArray[np.uint8]:
        image = np.empty((height, width, 3), dtype=np.uint8)
        image[:] = self.background
        return image

    def clear(self) -> None:
        """Fill with the background and reset all transform state."""
        self._image[:] = self.background
        self._matrix = np.eye(3)
        self._stack.clear()

    def resize(self, width: int, height: int) -> None:
        """Replace the pixel buffer with a blank one of a new size."""
        self._image = self._blank(width, height)
        self._matrix = np.eye(3)
        self._stack.clear()

    def push(self) -> None:
        """Save the current transform."""
        self._stack.append(self._matrix.copy())

    def pop(self) -> None:
        """Restore the most recently saved transform.

        Raises:
            RenderError: If there is no saved transform
        """
        if not self._stack:
            raise RenderError("pop() without matching push()")
        self._matrix = self._stack.pop()

    @contextmanager
    def pushed(self) -> Iterator[Canvas]:
        """Scope transforms to a with-block."""
        self.push()
        try:
            yield self
        finally:
            self.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._matrix = self._matrix @ translation_matrix(dx, dy)

    def rotate(self, angle: float) -> None:
        """Rotate by angle radians about the current origin."""
        self._matrix = self._matrix @ rotation_matrix(angle)

    def scale(self, sx: float, sy: float | None = None) -> None:
        """Scale about the current origin (uniformly if sy is omitted)."""
        self._matrix = self._matrix @ scale_matrix(sx, sx if sy is None else sy)

    def image_placement(self, width: int, height: int) -> NDArray[np.floating[Any]]:
        """Matrix mapping image pixels to canvas pixels for a centred draw."""
        return self._matrix @ translation_matrix(-width / 2, -height / 2)

    def draw_image(self, source: NDArray[np.uint8]) -> bool:
        """Draw an image centred on the current origin.

        Alpha is respected; images without an alpha channel are opaque.

        Args:
            source: Grayscale, BGR or BGRA image

        Returns:
            False if the transform is degenerate and nothing was drawn
        """
        bgra = to_bgra(source)
        height, width = bgra.shape[:2]
        matrix = self.image_placement(width, height)

        if abs(np.linalg.det(matrix[:2, :2])) < MIN_DETERMINANT:
            return False

        warped = cv2.warpAffine(
            bgra,
            matrix[:2],
            (self.width, self.height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )

        alpha = warped[..., 3:4].astype(np.float32) / 255.0
        blended = warped[..., :3].astype(np.float32) * alpha + self._image.astype(np.float32) * (
            1.0 - alpha
        )
        self._image[:] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
        return True
