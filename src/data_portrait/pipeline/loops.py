"""The inference and render loops."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from data_portrait.core.config import UISettings
from data_portrait.core.logging import get_logger
from data_portrait.core.types import FaceDetection, Frame, HeadPose, InferenceResult
from data_portrait.pipeline.channel import DetectionChannel
from data_portrait.pipeline.fps import FpsMeter
from data_portrait.ui.display import KeyAction
from data_portrait.ui.hud import HUDRenderer
from data_portrait.vision.filters import LandmarkSmoother
from data_portrait.vision.head_pose import HeadPoseEstimator

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from data_portrait.render.canvas import Canvas
    from data_portrait.render.compositor import Compositor

logger = get_logger(__name__)

Clock = Callable[[], float]


class FrameSource(Protocol):
    def read(self) -> Frame: ...


class LandmarkModel(Protocol):
    def detect(self, frame: Frame) -> list[FaceDetection]: ...


class Display(Protocol):
    def show_frame(self, image: NDArray[np.uint8]) -> None: ...

    def poll_key(self, wait_ms: int = 1) -> KeyAction: ...

    def window_size(self) -> tuple[int, int]: ...


class InferenceLoop:
    """Feeds camera frames to the face detector as fast as it allows.

    Camera reads and model calls run in a worker thread; results are
    published on the event loop thread. A worker thread cannot be
    interrupted, so stopping is cooperative: stop() lets the current cycle
    finish and run() returns before starting the next one.
    """

    def __init__(
        self,
        camera: FrameSource,
        detector: LandmarkModel,
        channel: DetectionChannel,
        fps_meter: FpsMeter,
        clock: Clock = time.perf_counter,
    ) -> None:
        self.camera = camera
        self.detector = detector
        self.channel = channel
        self.fps_meter = fps_meter
        self._clock = clock
        self._cycle = 0
        self._stop_requested = asyncio.Event()

    @property
    def cycle(self) -> int:
        """Number of completed inference cycles."""
        return self._cycle

    @property
    def stopping(self) -> bool:
        """Check if stop() has been called."""
        return self._stop_requested.is_set()

    def stop(self) -> None:
        """Ask run() to return after the current cycle."""
        self._stop_requested.set()

    async def step(self) -> InferenceResult:
        """Run one capture-and-detect cycle and publish the result."""
        frame = await asyncio.to_thread(self.camera.read)

        start = self._clock()
        faces = await asyncio.to_thread(self.detector.detect, frame)
        duration = self._clock() - start

        self._cycle += 1
        result = InferenceResult(
            faces=tuple(faces),
            frame_width=frame.width,
            frame_height=frame.height,
            cycle=self._cycle,
            duration=duration,
        )
        self.channel.publish(result)
        self.fps_meter.record(duration)

        logger.debug("Cycle %d: %d face(s) in %.1f ms", self._cycle, len(faces), duration * 1000)
        return result

    async def run(self) -> None:
        """Repeat until stopped; errors propagate and end the loop."""
        logger.info("Inference loop started")
        while not self.stopping:
            await self.step()
            # Let the render loop run between cycles
            await asyncio.sleep(0)
        logger.info("Inference loop stopped after %d cycles", self._cycle)


class RenderLoop:
    """Redraws the canvas at the display refresh rate.

    Each frame reads the latest inference result without waiting for a new
    one. When a face is present, its landmarks and the derived pose are
    smoothed and the layers drawn; otherwise the canvas stays blank and the
    smoothed state is kept.
    """

    def __init__(
        self,
        canvas: Canvas,
        compositor: Compositor,
        channel: DetectionChannel,
        fps_meter: FpsMeter,
        display: Display,
        smoother: LandmarkSmoother | None = None,
        estimator: HeadPoseEstimator | None = None,
        hud: HUDRenderer | None = None,
        settings: UISettings | None = None,
        clock: Clock = time.perf_counter,
    ) -> None:
        self.settings = settings or UISettings()
        self.canvas = canvas
        self.compositor = compositor
        self.channel = channel
        self.fps_meter = fps_meter
        self.display = display
        self.smoother = smoother or LandmarkSmoother()
        self.estimator = estimator or HeadPoseEstimator()
        self.hud = hud or HUDRenderer(self.settings)
        self._clock = clock
        self._frames = 0

    @property
    def frames(self) -> int:
        """Number of rendered frames."""
        return self._frames

    def render_frame(self) -> HeadPose | None:
        """Clear and redraw the canvas from the latest inference result.

        Returns:
            The pose the layers were drawn with, or None if no face
        """
        self.canvas.clear()
        self._frames += 1

        pose = None
        result = self.channel.latest
        face = result.primary_face if result is not None else None

        if result is not None and face is not None:
            landmarks = self.smoother.update(face.landmarks())
            pose = self.estimator.update(landmarks, result.frame_width, result.frame_height)
            self.compositor.draw(self.canvas, pose)

        self.hud.render_fps_counter(self.canvas.image, self.fps_meter.label)
        return pose

    def handle_key(self, action: KeyAction) -> bool:
        """Apply a key action.

        Returns:
            False if the loop should stop
        """
        if action == KeyAction.QUIT:
            logger.info("Quit requested")
            return False

        if action == KeyAction.RESET:
            self.smoother.reset()
            self.estimator.reset()
            logger.info("Smoothing state reset")
        elif action == KeyAction.TOGGLE_FPS:
            logger.info("FPS counter %s", "shown" if self.hud.toggle_fps() else "hidden")

        return True

    def sync_size(self) -> None:
        """Resize the canvas to follow the display window."""
        size = self.display.window_size()
        if size != self.canvas.size:
            self.canvas.resize(*size)
            logger.debug("Canvas resized to %dx%d", *size)

    async def run(self) -> None:
        """Render until the user quits."""
        period = 1.0 / self.settings.refresh_rate
        logger.info("Render loop started (%.0f Hz)", self.settings.refresh_rate)

        while True:
            start = self._clock()

            self.sync_size()
            self.render_frame()
            self.display.show_frame(self.canvas.image)

            if not self.handle_key(self.display.poll_key()):
                break

            await asyncio.sleep(max(0.0, period - (self._clock() - start)))
