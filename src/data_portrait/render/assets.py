"""Image layer loading."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import cv2
import numpy as np
from numpy.typing import NDArray

from data_portrait.core.exceptions import AssetLoadError, RenderError
from data_portrait.core.logging import get_logger
from data_portrait.core.types import Layer
from data_portrait.render.canvas import to_bgra

logger = get_logger(__name__)


def load_image(path: Path) -> NDArray[np.uint8]:
    """Decode an image file to BGRA, keeping any alpha channel.

    Raises:
        AssetLoadError: If the file is missing or cannot be decoded
    """
    if not path.is_file():
        raise AssetLoadError(f"Image not found: {path}")

    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise AssetLoadError(f"Cannot decode image: {path}")

    if image.dtype != np.uint8:
        # 16-bit PNGs
        image = (image / 257).astype(np.uint8)

    try:
        return to_bgra(np.asarray(image, dtype=np.uint8))
    except RenderError as e:
        raise AssetLoadError(f"{path}: {e}") from e


def load_layers(paths: Iterable[Path]) -> list[Layer]:
    """Decode every layer image, in draw order.

    Args:
        paths: Image files; the first is drawn first (bottom)

    Returns:
        Layers indexed by their position in paths

    Raises:
        AssetLoadError: If any image fails to load
    """
    layers = [
        Layer(index=index, name=path.name, image=load_image(path))
        for index, path in enumerate(paths)
    ]
    logger.info("Loaded %d image layers: %s", len(layers), ", ".join(lay.name for lay in layers))
    return layers
