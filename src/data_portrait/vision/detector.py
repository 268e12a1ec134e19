"""BlazeFace face detector wrapper using the MediaPipe Tasks API."""

from __future__ import annotations

import urllib.request
from pathlib import Path
from typing import Any

import cv2
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from data_portrait.core.config import DetectorSettings
from data_portrait.core.exceptions import LandmarkModelError
from data_portrait.core.logging import get_logger
from data_portrait.core.types import FaceDetection, Frame, KeypointIndex, Point

logger = get_logger(__name__)

KEYPOINT_COUNT = len(KeypointIndex)


def download_model(settings: DetectorSettings) -> Path:
    """Download the face detector model if not present.

    Args:
        settings: Detector settings with model URL and local path

    Returns:
        Path to the model file

    Raises:
        LandmarkModelError: If download fails
    """
    model_path = settings.model_path
    if model_path.exists():
        return model_path

    logger.info("Downloading BlazeFace model...")
    model_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        urllib.request.urlretrieve(settings.model_url, model_path)
        logger.info("Model downloaded to %s", model_path)
        return model_path
    except Exception as e:
        raise LandmarkModelError(f"Failed to download model: {e}") from e


class FaceDetector:
    """Wrapper for the MediaPipe BlazeFace detector.

    Converts MediaPipe detections to FaceDetection values with keypoints
    in frame pixel coordinates, so MediaPipe objects stay inside this
    module.
    """

    def __init__(self, settings: DetectorSettings | None = None) -> None:
        """Initialize detector with settings.

        Args:
            settings: Detector settings (uses defaults if None)
        """
        self.settings = settings or DetectorSettings()
        self._detector: vision.FaceDetector | None = None
        self._last_timestamp_ms = -1

    @property
    def is_initialized(self) -> bool:
        """Check if the model is loaded."""
        return self._detector is not None

    def initialize(self) -> None:
        """Load the BlazeFace model.

        Raises:
            LandmarkModelError: If the model fails to load
        """
        if self._detector is not None:
            return

        try:
            model_path = download_model(self.settings)

            options = vision.FaceDetectorOptions(
                base_options=python.BaseOptions(model_asset_path=str(model_path)),
                running_mode=vision.RunningMode.VIDEO,
                min_detection_confidence=self.settings.min_detection_confidence,
                min_suppression_threshold=self.settings.min_suppression_threshold,
            )

            self._detector = vision.FaceDetector.create_from_options(options)
            self._last_timestamp_ms = -1
            logger.info("MediaPipe FaceDetector initialized (%s)", model_path.name)

        except LandmarkModelError:
            raise
        except Exception as e:
            raise LandmarkModelError(f"Failed to initialize MediaPipe: {e}") from e

    def close(self) -> None:
        """Release MediaPipe resources."""
        if self._detector is not None:
            self._detector.close()
            self._detector = None

    def detect(self, frame: Frame) -> list[FaceDetection]:
        """Find faces in a frame.

        Args:
            frame: Input video frame

        Returns:
            Detected faces (possibly empty), in detector order

        Raises:
            LandmarkModelError: If the detector is not initialized or fails
        """
        if self._detector is None:
            raise LandmarkModelError("Face detector not initialized")

        try:
            rgb_image = cv2.cvtColor(frame.image, cv2.COLOR_BGR2RGB)
            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_image)

            # VIDEO mode rejects non-increasing timestamps
            timestamp_ms = max(int(frame.timestamp * 1000), self._last_timestamp_ms + 1)
            self._last_timestamp_ms = timestamp_ms

            result = self._detector.detect_for_video(mp_image, timestamp_ms)

        except Exception as e:
            raise LandmarkModelError(f"Detection failed: {e}") from e

        return self.convert_detections(result.detections, frame.width, frame.height)

    @staticmethod
    def convert_detections(detections: list[Any], width: int, height: int) -> list[FaceDetection]:
        """Convert MediaPipe detections to FaceDetection values.

        Args:
            detections: MediaPipe Detection objects with normalized keypoints
            width: Frame width in pixels
            height: Frame height in pixels

        Returns:
            Faces with pixel-space keypoints; detections missing keypoints
            are skipped
        """
        faces: list[FaceDetection] = []

        for detection in detections or []:
            keypoints = detection.keypoints or []
            if len(keypoints) < KEYPOINT_COUNT:
                continue

            points = tuple(
                Point(float(kp.x) * width, float(kp.y) * height)
                for kp in keypoints[:KEYPOINT_COUNT]
            )
            categories = detection.categories or []
            score = float(categories[0].score) if categories else 1.0
            faces.append(FaceDetection(keypoints=points, score=score))

        return faces

    def __enter__(self) -> FaceDetector:
        """Context manager entry."""
        self.initialize()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()
