#!/usr/bin/env python3
"""Generate placeholder image layers for the data portrait.

Writes semi-transparent PNGs (a street grid, radar rings and an activity
trace) into the asset directory so the sketch can run before real
personal-data images are chosen.
"""

from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path

import cv2
import numpy as np
from numpy.typing import NDArray

from data_portrait.core.config import get_settings
from data_portrait.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


def make_grid(size: int) -> NDArray[np.uint8]:
    """Map-like street grid."""
    image = np.zeros((size, size, 4), dtype=np.uint8)
    step = size // 12
    for offset in range(0, size, step):
        cv2.line(image, (offset, 0), (offset, size - 1), (200, 200, 200, 160), 2)
        cv2.line(image, (0, offset), (size - 1, offset), (200, 200, 200, 160), 2)
    cv2.line(image, (0, size), (size, 0), (90, 180, 255, 220), 6)
    return image


def make_radar(size: int) -> NDArray[np.uint8]:
    """Concentric rings with a coloured blob, like a weather radar."""
    image = np.zeros((size, size, 4), dtype=np.uint8)
    centre = (size // 2, size // 2)
    for radius in range(size // 10, size // 2, size // 10):
        cv2.circle(image, centre, radius, (80, 220, 80, 180), 2)
    cv2.ellipse(
        image,
        (size // 3, size // 2),
        (size // 6, size // 10),
        30,
        0,
        360,
        (60, 60, 230, 140),
        -1,
    )
    return image


def make_trace(size: int) -> NDArray[np.uint8]:
    """Looping route, like a fitness tracker activity."""
    image = np.zeros((size, size, 4), dtype=np.uint8)
    points = []
    for i in range(240):
        t = i / 240 * math.tau
        r = size * (0.3 + 0.08 * math.sin(5 * t))
        points.append((int(size / 2 + r * math.cos(t)), int(size / 2 + r * math.sin(t))))
    cv2.polylines(image, [np.array(points, dtype=np.int32)], True, (0, 120, 255, 255), 5)
    return image


GENERATORS = {
    "maps.png": make_grid,
    "radar.png": make_radar,
    "strava.png": make_trace,
}


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate placeholder image layers")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output directory (default: COMPOSITOR_ASSET_DIR)",
    )
    parser.add_argument("--size", type=int, default=400, help="Layer edge length in pixels")
    parser.add_argument("--force", action="store_true", help="Overwrite existing files")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.logging.level)

    output_dir = args.output or settings.compositor.asset_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    for name, generate in GENERATORS.items():
        path = output_dir / name
        if path.exists() and not args.force:
            logger.info("Skipping existing %s", path)
            continue
        if not cv2.imwrite(str(path), generate(args.size)):
            logger.error("Could not write %s", path)
            return 1
        logger.info("Wrote %s", path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
