"""Head pose estimation from eye and nose landmarks."""

from __future__ import annotations

import math

from data_portrait.core.config import HeadPoseSettings, SmoothingSettings
from data_portrait.core.logging import get_logger
from data_portrait.core.types import FaceLandmarks, HeadPose, Point
from data_portrait.vision.filters import lerp, unwrap_angle

logger = get_logger(__name__)


def map_range(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
) -> float:
    """Linearly map value from one range onto another (unclamped)."""
    return out_min + (value - in_min) * (out_max - out_min) / (in_max - in_min)


class HeadPoseEstimator:
    """Derives a smoothed angle, scale and centre from face landmarks.

    - Angle: orientation of the line between the eyes
    - Scale: distance between the eyes, mapped onto a multiplier
      (0-1 shrinks, 1-2 enlarges)
    - Centre: nose position as a fraction of the camera frame

    Each value is smoothed against its previous value on every update.
    """

    def __init__(
        self,
        settings: HeadPoseSettings | None = None,
        smoothing: SmoothingSettings | None = None,
    ) -> None:
        """Initialize estimator.

        Args:
            settings: Eye-gap calibration (uses defaults if None)
            smoothing: Smoothing settings (uses defaults if None)
        """
        self.settings = settings or HeadPoseSettings()
        self.smoothing = smoothing or SmoothingSettings()
        self._pose = HeadPose.initial()

    @property
    def pose(self) -> HeadPose:
        """Most recent smoothed pose."""
        return self._pose

    def raw_angle(self, landmarks: FaceLandmarks) -> float:
        """Angle of the vector from the left eye to the right eye."""
        dx = landmarks.right_eye.x - landmarks.left_eye.x
        dy = landmarks.right_eye.y - landmarks.left_eye.y
        return math.atan2(dy, dx)

    def raw_scale(self, landmarks: FaceLandmarks) -> float:
        """Eye distance mapped through the calibration range."""
        return map_range(
            landmarks.eye_distance,
            self.settings.eye_gap_min,
            self.settings.eye_gap_max,
            self.settings.scale_min,
            self.settings.scale_max,
        )

    def raw_centre(self, landmarks: FaceLandmarks, frame_width: int, frame_height: int) -> Point:
        """Nose position normalized by the camera frame dimensions."""
        return Point(landmarks.nose.x / frame_width, landmarks.nose.y / frame_height)

    def estimate_angle(self, landmarks: FaceLandmarks) -> float:
        """Smoothed, unwrapped angle for the given landmarks."""
        previous = self._pose.angle
        angle = unwrap_angle(self.raw_angle(landmarks), previous)
        return lerp(previous, angle, self.smoothing.factor)

    def estimate_scale(self, landmarks: FaceLandmarks) -> float:
        """Smoothed scale for the given landmarks."""
        return lerp(self._pose.scale, self.raw_scale(landmarks), self.smoothing.factor)

    def estimate_centre(
        self,
        landmarks: FaceLandmarks,
        frame_width: int,
        frame_height: int,
    ) -> Point:
        """Smoothed normalized centre for the given landmarks."""
        previous = self._pose.centre
        raw = self.raw_centre(landmarks, frame_width, frame_height)
        amount = self.smoothing.factor
        return Point(lerp(previous.x, raw.x, amount), lerp(previous.y, raw.y, amount))

    def update(self, landmarks: FaceLandmarks, frame_width: int, frame_height: int) -> HeadPose:
        """Recompute the pose from smoothed landmarks.

        Args:
            landmarks: Smoothed eye and nose landmarks in frame pixels
            frame_width: Camera frame width in pixels
            frame_height: Camera frame height in pixels

        Returns:
            Updated smoothed pose
        """
        self._pose = HeadPose(
            angle=self.estimate_angle(landmarks),
            scale=self.estimate_scale(landmarks),
            centre=self.estimate_centre(landmarks, frame_width, frame_height),
        )
        return self._pose

    def reset(self) -> None:
        """Restore the initial pose."""
        self._pose = HeadPose.initial()
        logger.debug("Head pose reset")
