"""Application lifecycle: load assets, start the loops, clean up."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol

from data_portrait.capture.camera import Webcam
from data_portrait.core.config import Settings, get_settings
from data_portrait.core.logging import get_logger
from data_portrait.core.types import Layer
from data_portrait.pipeline.channel import DetectionChannel
from data_portrait.pipeline.fps import FpsMeter
from data_portrait.pipeline.loops import (
    Display,
    FrameSource,
    InferenceLoop,
    LandmarkModel,
    RenderLoop,
)
from data_portrait.render.assets import load_layers
from data_portrait.render.canvas import Canvas
from data_portrait.render.compositor import Compositor
from data_portrait.ui.display import DisplayWindow
from data_portrait.ui.hud import HUDRenderer
from data_portrait.vision.detector import FaceDetector
from data_portrait.vision.filters import LandmarkSmoother
from data_portrait.vision.head_pose import HeadPoseEstimator

logger = get_logger(__name__)


class Camera(FrameSource, Protocol):
    def open(self) -> None: ...

    def release(self) -> None: ...


class Model(LandmarkModel, Protocol):
    def initialize(self) -> None: ...

    def close(self) -> None: ...


class Window(Display, Protocol):
    def open(self) -> None: ...

    def close(self) -> None: ...


class PortraitApp:
    """Runs the data portrait.

    Lifecycle:
    1. Decode the image layers
    2. Start the render loop
    3. Open the camera and load the model (initialize)
    4. Only then spawn the inference loop

    If step 3 or the inference loop fails, the error is logged and the
    render loop keeps going with whatever it last saw.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        camera: Camera | None = None,
        detector: Model | None = None,
        display: Window | None = None,
        layers: Sequence[Layer] | None = None,
    ) -> None:
        """Initialize app with settings and optional collaborators.

        Args:
            settings: Application settings (uses defaults if None)
            camera: Frame source (webcam if None)
            detector: Landmark model (BlazeFace if None)
            display: Output window (OpenCV window if None)
            layers: Pre-decoded layers (loaded from settings if None)
        """
        self.settings = settings or get_settings()
        self.camera: Camera = camera or Webcam(self.settings.camera)
        self.detector: Model = detector or FaceDetector(self.settings.detector)
        self.display: Window = display or DisplayWindow(self.settings.ui)
        self._layers = list(layers) if layers is not None else None

        self.channel = DetectionChannel()
        self.fps_meter = FpsMeter(self.settings.ui.fps_update_interval)
        self._inference_loop: InferenceLoop | None = None
        self._inference_task: asyncio.Task[None] | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if camera and model are ready."""
        return self._initialized

    @property
    def inference_task(self) -> asyncio.Task[None] | None:
        return self._inference_task

    async def initialize(self) -> None:
        """Open the camera and wait for the model to load."""
        await asyncio.to_thread(self.camera.open)
        await asyncio.to_thread(self.detector.initialize)
        self._initialized = True
        logger.info("Camera and face model ready")

    def build_render_loop(self, layers: Sequence[Layer]) -> RenderLoop:
        """Wire the canvas, compositor and smoothing state."""
        ui = self.settings.ui
        return RenderLoop(
            canvas=Canvas(ui.display_width, ui.display_height, ui.background),
            compositor=Compositor(layers, self.settings.compositor),
            channel=self.channel,
            fps_meter=self.fps_meter,
            display=self.display,
            smoother=LandmarkSmoother(self.settings.smoothing),
            estimator=HeadPoseEstimator(self.settings.head_pose, self.settings.smoothing),
            hud=HUDRenderer(ui),
            settings=ui,
        )

    def build_inference_loop(self) -> InferenceLoop:
        return InferenceLoop(self.camera, self.detector, self.channel, self.fps_meter)

    async def _start_and_run_inference(self, loop: InferenceLoop) -> None:
        await self.initialize()
        if loop.stopping:
            return
        await loop.run()

    def start_inference(self) -> asyncio.Task[None]:
        """Spawn initialization followed by the inference loop."""
        loop = self.build_inference_loop()
        task = asyncio.create_task(self._start_and_run_inference(loop), name="inference")
        task.add_done_callback(self._on_inference_done)
        self._inference_loop = loop
        self._inference_task = task
        return task

    @staticmethod
    def _on_inference_done(task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Inference stopped: %s", error, exc_info=error)

    async def run(self) -> None:
        """Run until the user quits the render loop."""
        layers = self._layers
        if layers is None:
            layers = load_layers(self.settings.compositor.layer_paths)

        render_loop = self.build_render_loop(layers)
        self.display.open()
        self.start_inference()

        try:
            await render_loop.run()
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Stop the inference task and release all resources.

        The camera and model are released only after any in-flight read or
        detection has returned, since neither may be closed under a running
        worker thread.
        """
        task = self._inference_task
        if self._inference_loop is not None:
            self._inference_loop.stop()
        if task is not None and not task.done():
            logger.debug("Waiting for the current inference cycle to finish")
            # Outcome already reported by the done callback
            await asyncio.gather(task, return_exceptions=True)

        self.detector.close()
        self.camera.release()
        self.display.close()
        self._initialized = False
        logger.info("Data portrait stopped")
