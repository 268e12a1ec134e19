"""Signal filtering utilities for landmark smoothing."""

from __future__ import annotations

import math

from data_portrait.core.config import SmoothingSettings
from data_portrait.core.logging import get_logger
from data_portrait.core.types import FaceLandmarks, Point

logger = get_logger(__name__)


def lerp(start: float, stop: float, amount: float) -> float:
    """Linear interpolation from start toward stop.

    Args:
        start: Value at amount 0
        stop: Value at amount 1
        amount: Interpolation fraction

    Returns:
        Interpolated value
    """
    return start + (stop - start) * amount


def lerp_point(start: Point, stop: Point, amount: float) -> Point:
    """Interpolate both coordinates of a point."""
    return Point(lerp(start.x, stop.x, amount), lerp(start.y, stop.y, amount))


def unwrap_angle(angle: float, previous: float) -> float:
    """Shift angle by whole turns so it lies within pi of previous.

    atan2 jumps from +pi to -pi when the eye line crosses the branch cut,
    and the smoothed angle may have wound several turns away from the
    atan2 range; unwrapping keeps it continuous either way.

    Args:
        angle: Raw angle in radians, as returned by atan2
        previous: Previous smoothed angle in radians

    Returns:
        Equivalent angle whose delta to previous is within [-pi, pi]
    """
    return previous + math.remainder(angle - previous, math.tau)


class LandmarkSmoother:
    """Exponential smoothing for the eye and nose landmarks.

    Each update moves every coordinate part of the way (the smoothing
    factor) toward the raw detection. Frames without a face leave the
    state untouched.
    """

    def __init__(self, settings: SmoothingSettings | None = None) -> None:
        """Initialize landmark smoother.

        Args:
            settings: Smoothing settings (uses defaults if None)
        """
        self.settings = settings or SmoothingSettings()
        self._landmarks = FaceLandmarks.initial()

    @property
    def landmarks(self) -> FaceLandmarks:
        """Current smoothed landmarks."""
        return self._landmarks

    def update(self, raw: FaceLandmarks | None) -> FaceLandmarks:
        """Blend a new detection into the smoothed landmarks.

        Args:
            raw: Landmarks from the current frame, or None if no face

        Returns:
            Updated smoothed landmarks
        """
        if raw is None:
            return self._landmarks

        amount = self.settings.factor
        previous = self._landmarks
        self._landmarks = FaceLandmarks(
            right_eye=lerp_point(previous.right_eye, raw.right_eye, amount),
            left_eye=lerp_point(previous.left_eye, raw.left_eye, amount),
            nose=lerp_point(previous.nose, raw.nose, amount),
        )
        return self._landmarks

    def reset(self) -> None:
        """Restore the initial landmarks."""
        self._landmarks = FaceLandmarks.initial()
        logger.debug("Landmark smoother reset")
