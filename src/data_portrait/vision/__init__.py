"""Computer vision operations: face detection, smoothing, and head pose."""

from data_portrait.vision.detector import FaceDetector
from data_portrait.vision.filters import LandmarkSmoother, lerp, unwrap_angle
from data_portrait.vision.head_pose import HeadPoseEstimator, map_range

__all__ = [
    "FaceDetector",
    "LandmarkSmoother",
    "HeadPoseEstimator",
    "lerp",
    "unwrap_angle",
    "map_range",
]
