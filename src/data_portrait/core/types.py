"""Core data types and structures."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, slots=True)
class Point:
    """A 2D point in pixel or normalized coordinates."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)


# BlazeFace keypoint order
class KeypointIndex(Enum):
    """Face detector keypoint indices."""

    RIGHT_EYE = 0
    LEFT_EYE = 1
    NOSE = 2
    MOUTH = 3
    RIGHT_EAR = 4
    LEFT_EAR = 5


@dataclass(frozen=True, slots=True)
class FaceLandmarks:
    """The three landmarks the head pose is derived from.

    Coordinates are pixels in camera-frame space.
    """

    right_eye: Point
    left_eye: Point
    nose: Point

    @classmethod
    def initial(cls) -> FaceLandmarks:
        """Placeholder landmarks used before any face has been seen."""
        return cls(right_eye=Point(1.0, 1.0), left_eye=Point(1.0, 1.0), nose=Point(1.0, 1.0))

    @property
    def eye_distance(self) -> float:
        """Distance between the eyes in pixels."""
        return self.left_eye.distance_to(self.right_eye)


@dataclass(frozen=True, slots=True)
class FaceDetection:
    """A single detected face.

    Attributes:
        keypoints: Six pixel-space keypoints in KeypointIndex order
        score: Detection confidence [0, 1]
    """

    keypoints: tuple[Point, ...]
    score: float = 1.0

    def keypoint(self, index: KeypointIndex) -> Point:
        """Get a keypoint by its enum index."""
        return self.keypoints[index.value]

    @property
    def right_eye(self) -> Point:
        return self.keypoint(KeypointIndex.RIGHT_EYE)

    @property
    def left_eye(self) -> Point:
        return self.keypoint(KeypointIndex.LEFT_EYE)

    @property
    def nose(self) -> Point:
        return self.keypoint(KeypointIndex.NOSE)

    @property
    def mouth(self) -> Point:
        return self.keypoint(KeypointIndex.MOUTH)

    @property
    def right_ear(self) -> Point:
        return self.keypoint(KeypointIndex.RIGHT_EAR)

    @property
    def left_ear(self) -> Point:
        return self.keypoint(KeypointIndex.LEFT_EAR)

    def landmarks(self) -> FaceLandmarks:
        """Extract the eyes and nose as a named landmark set."""
        return FaceLandmarks(right_eye=self.right_eye, left_eye=self.left_eye, nose=self.nose)


@dataclass(frozen=True, slots=True)
class HeadPose:
    """Head orientation and proximity derived from landmarks.

    Attributes:
        angle: Eye-line angle in radians, continuous across +/-pi
        scale: Unitless multiplier from the distance between the eyes
        centre: Nose position normalized by camera frame dimensions
    """

    angle: float
    scale: float
    centre: Point

    @classmethod
    def initial(cls) -> HeadPose:
        """Pose used before any face has been seen."""
        return cls(angle=1.0, scale=1.0, centre=Point(1.0, 1.0))


@dataclass(slots=True)
class Frame:
    """A video frame with metadata.

    Attributes:
        image: BGR image array (OpenCV format)
        timestamp: Frame timestamp in seconds
        index: Frame sequence number
    """

    image: NDArray[np.uint8]
    timestamp: float
    index: int

    @property
    def width(self) -> int:
        """Frame width in pixels."""
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        """Frame height in pixels."""
        return int(self.image.shape[0])

    @property
    def dimensions(self) -> tuple[int, int]:
        """Frame dimensions as (width, height)."""
        return self.width, self.height


@dataclass(frozen=True, slots=True)
class InferenceResult:
    """Output of one inference cycle.

    Attributes:
        faces: Detected faces, in detector order
        frame_width: Width of the camera frame the faces were found in
        frame_height: Height of the camera frame the faces were found in
        cycle: Inference cycle number, starting at 1
        duration: Seconds spent in the detector
    """

    faces: tuple[FaceDetection, ...]
    frame_width: int
    frame_height: int
    cycle: int
    duration: float = 0.0

    @property
    def primary_face(self) -> FaceDetection | None:
        """First detected face; any others are ignored."""
        return self.faces[0] if self.faces else None


@dataclass(slots=True)
class Layer:
    """A pre-decoded image in the compositing stack.

    Attributes:
        index: Position in the draw order
        name: Source file name
        image: BGRA image array
    """

    index: int
    name: str
    image: NDArray[np.uint8] = field(repr=False)

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])
