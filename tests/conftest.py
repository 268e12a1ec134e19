"""Pytest fixtures for Data Portrait tests."""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Iterator

import numpy as np
import pytest
from numpy.typing import NDArray

from data_portrait.core.config import (
    CompositorSettings,
    HeadPoseSettings,
    SmoothingSettings,
    UISettings,
)
from data_portrait.core.types import FaceDetection, FaceLandmarks, Frame, Layer, Point
from data_portrait.ui.display import KeyAction

FRAME_WIDTH = 640
FRAME_HEIGHT = 480


def make_detection(
    right_eye: tuple[float, float] = (370.0, 200.0),
    left_eye: tuple[float, float] = (270.0, 200.0),
    nose: tuple[float, float] = (320.0, 240.0),
    score: float = 0.9,
) -> FaceDetection:
    """Create a face with the given eyes and nose; mouth and ears are filler."""
    keypoints = (
        Point(*right_eye),
        Point(*left_eye),
        Point(*nose),
        Point(nose[0], nose[1] + 40.0),
        Point(right_eye[0] + 60.0, right_eye[1]),
        Point(left_eye[0] - 60.0, left_eye[1]),
    )
    return FaceDetection(keypoints=keypoints, score=score)


def landmarks_at_angle(
    angle: float,
    distance: float = 100.0,
    centre: tuple[float, float] = (320.0, 200.0),
    nose: tuple[float, float] = (320.0, 240.0),
) -> FaceLandmarks:
    """Landmarks whose left-to-right eye vector points along angle."""
    half_dx = math.cos(angle) * distance / 2
    half_dy = math.sin(angle) * distance / 2
    return FaceLandmarks(
        right_eye=Point(centre[0] + half_dx, centre[1] + half_dy),
        left_eye=Point(centre[0] - half_dx, centre[1] - half_dy),
        nose=Point(*nose),
    )


def solid_image(
    width: int,
    height: int,
    bgr: tuple[int, int, int],
    alpha: int = 255,
) -> NDArray[np.uint8]:
    """BGRA image filled with one colour."""
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[:] = (*bgr, alpha)
    return image


class FakeCamera:
    """Frame source producing blank frames of a fixed size."""

    def __init__(self, width: int = FRAME_WIDTH, height: int = FRAME_HEIGHT) -> None:
        self.width = width
        self.height = height
        self.is_open = False
        self.reads = 0
        self.events: list[str] = []

    def open(self) -> None:
        self.is_open = True
        self.events.append("camera.open")

    def release(self) -> None:
        self.is_open = False
        self.events.append("camera.release")

    def read(self) -> Frame:
        image = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        frame = Frame(image=image, timestamp=self.reads / 30.0, index=self.reads)
        self.reads += 1
        return frame


class FakeDetector:
    """Landmark model replaying scripted detections.

    The last script entry repeats once the script is exhausted.
    """

    def __init__(
        self,
        script: list[list[FaceDetection]] | None = None,
        events: list[str] | None = None,
        fail_on_initialize: Exception | None = None,
        fail_on_detect: Exception | None = None,
    ) -> None:
        self.script = script or [[]]
        self.events = events if events is not None else []
        self.fail_on_initialize = fail_on_initialize
        self.fail_on_detect = fail_on_detect
        self.calls = 0
        self.closed = False

    def initialize(self) -> None:
        self.events.append("detector.initialize")
        if self.fail_on_initialize is not None:
            raise self.fail_on_initialize

    def close(self) -> None:
        self.closed = True

    def detect(self, frame: Frame) -> list[FaceDetection]:
        self.events.append("detector.detect")
        if self.fail_on_detect is not None:
            raise self.fail_on_detect
        faces = self.script[min(self.calls, len(self.script) - 1)]
        self.calls += 1
        return faces


class SlowDetector(FakeDetector):
    """Detector whose model call blocks its worker thread for a while.

    Records whether close() was called while a detection was running.
    """

    def __init__(self, delay: float = 0.2) -> None:
        super().__init__()
        self.delay = delay
        self.in_detect = threading.Event()
        self.closed_during_detect = False
        self.finished = 0

    def detect(self, frame: Frame) -> list[FaceDetection]:
        self.in_detect.set()
        try:
            time.sleep(self.delay)
            faces = super().detect(frame)
            self.finished += 1
            return faces
        finally:
            self.in_detect.clear()

    def close(self) -> None:
        self.closed_during_detect = self.in_detect.is_set()
        super().close()


class FakeDisplay:
    """Display that quits after a fixed number of frames."""

    def __init__(
        self,
        quit_after: int = 3,
        size: tuple[int, int] = (64, 48),
        keys: list[KeyAction] | None = None,
    ) -> None:
        self.quit_after = quit_after
        self.size = size
        self.keys: Iterator[KeyAction] = iter(keys or [])
        self.shown: list[NDArray[np.uint8]] = []
        self.is_open = False
        self.closed = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.closed = True

    def window_size(self) -> tuple[int, int]:
        return self.size

    def show_frame(self, image: NDArray[np.uint8]) -> None:
        self.shown.append(image.copy())

    def poll_key(self, wait_ms: int = 1) -> KeyAction:
        if len(self.shown) >= self.quit_after:
            return KeyAction.QUIT
        return next(self.keys, KeyAction.NONE)


@pytest.fixture
def smoothing_settings() -> SmoothingSettings:
    """Create smoothing settings for testing."""
    return SmoothingSettings()


@pytest.fixture
def head_pose_settings() -> HeadPoseSettings:
    """Create head pose calibration settings for testing."""
    return HeadPoseSettings()


@pytest.fixture
def compositor_settings() -> CompositorSettings:
    """Create compositor settings for testing."""
    return CompositorSettings()


@pytest.fixture
def ui_settings() -> UISettings:
    """Small, fast-refreshing display settings."""
    return UISettings(display_width=64, display_height=48, refresh_rate=1000.0)


@pytest.fixture
def sample_detection() -> FaceDetection:
    """A level face centred in a 640x480 frame."""
    return make_detection()


@pytest.fixture
def red_layer() -> Layer:
    """Opaque 8x8 red layer."""
    return Layer(index=0, name="red.png", image=solid_image(8, 8, (0, 0, 255)))


@pytest.fixture
def fake_camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def fake_display() -> FakeDisplay:
    return FakeDisplay()
