"""Core infrastructure: config, types, exceptions, and logging."""

from data_portrait.core.config import Settings, get_settings
from data_portrait.core.exceptions import (
    AssetLoadError,
    CameraError,
    DataPortraitError,
    LandmarkModelError,
    RenderError,
)
from data_portrait.core.logging import get_logger, setup_logging
from data_portrait.core.types import (
    FaceDetection,
    FaceLandmarks,
    Frame,
    HeadPose,
    InferenceResult,
    KeypointIndex,
    Layer,
    Point,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "Point",
    "KeypointIndex",
    "FaceLandmarks",
    "FaceDetection",
    "HeadPose",
    "Frame",
    "InferenceResult",
    "Layer",
    # Exceptions
    "DataPortraitError",
    "CameraError",
    "LandmarkModelError",
    "AssetLoadError",
    "RenderError",
    # Logging
    "setup_logging",
    "get_logger",
]
