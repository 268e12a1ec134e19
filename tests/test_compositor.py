"""Tests for the canvas and layer compositor."""

from __future__ import annotations

import math

import numpy as np
import pytest
from conftest import solid_image
from numpy.typing import NDArray

from data_portrait.core.config import CompositorSettings
from data_portrait.core.exceptions import RenderError
from data_portrait.core.types import HeadPose, Layer, Point
from data_portrait.render.canvas import Canvas
from data_portrait.render.compositor import Compositor, liveliness

RED = (0, 0, 255)
GREEN = (0, 255, 0)
WHITE = (255, 255, 255)


class RecordingCanvas(Canvas):
    """Canvas that records the transform used for every draw."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(width, height)
        self.draws: list[tuple[np.ndarray, int]] = []

    def draw_image(self, source: NDArray[np.uint8]) -> bool:
        self.draws.append((self.transform, self.depth))
        return super().draw_image(source)


def _layers(count: int) -> list[Layer]:
    return [
        Layer(index=i, name=f"layer{i}.png", image=solid_image(4, 4, WHITE)) for i in range(count)
    ]


class TestCanvas:
    """Tests for the canvas transform stack and drawing."""

    def test_initial_state(self) -> None:
        canvas = Canvas(40, 30, background=(10, 20, 30))

        assert canvas.size == (40, 30)
        assert canvas.image.shape == (30, 40, 3)
        assert (canvas.image == (10, 20, 30)).all()
        np.testing.assert_array_equal(canvas.transform, np.eye(3))

    def test_push_pop_restores_transform(self) -> None:
        canvas = Canvas(40, 30)
        canvas.translate(5, 6)
        saved = canvas.transform

        canvas.push()
        canvas.rotate(1.0)
        canvas.scale(3.0)
        canvas.pop()

        np.testing.assert_allclose(canvas.transform, saved)
        assert canvas.depth == 0

    def test_pop_without_push(self) -> None:
        canvas = Canvas(40, 30)

        with pytest.raises(RenderError):
            canvas.pop()

    def test_pushed_restores_on_error(self) -> None:
        canvas = Canvas(40, 30)

        with pytest.raises(ValueError), canvas.pushed():
            canvas.translate(10, 10)
            raise ValueError("boom")

        np.testing.assert_array_equal(canvas.transform, np.eye(3))

    def test_transforms_compose_in_call_order(self) -> None:
        """Translate then rotate rotates about the translated origin."""
        canvas = Canvas(40, 30)
        canvas.translate(10, 0)
        canvas.rotate(math.pi / 2)

        point = canvas.transform @ np.array([1.0, 0.0, 1.0])

        np.testing.assert_allclose(point[:2], [10.0, 1.0], atol=1e-12)

    def test_clear_resets_pixels_and_transforms(self) -> None:
        canvas = Canvas(40, 30)
        canvas.translate(20, 15)
        canvas.push()
        canvas.draw_image(solid_image(6, 6, WHITE))

        canvas.clear()

        assert (canvas.image == 0).all()
        assert canvas.depth == 0
        np.testing.assert_array_equal(canvas.transform, np.eye(3))

    def test_resize(self) -> None:
        canvas = Canvas(40, 30)

        canvas.resize(80, 20)

        assert canvas.size == (80, 20)
        assert canvas.image.shape == (20, 80, 3)

    def test_draw_image_centred_on_origin(self) -> None:
        canvas = Canvas(100, 100)
        canvas.translate(50, 50)

        assert canvas.draw_image(solid_image(10, 10, WHITE))

        assert tuple(canvas.image[50, 50]) == WHITE
        assert tuple(canvas.image[47, 53]) == WHITE
        assert tuple(canvas.image[10, 10]) == (0, 0, 0)
        assert tuple(canvas.image[50, 70]) == (0, 0, 0)

    def test_draw_bgr_image_is_opaque(self) -> None:
        canvas = Canvas(20, 20)
        canvas.translate(10, 10)
        bgr = np.full((6, 6, 3), 200, dtype=np.uint8)

        canvas.draw_image(bgr)

        assert tuple(canvas.image[10, 10]) == (200, 200, 200)

    def test_transparent_pixels_leave_background(self) -> None:
        canvas = Canvas(20, 20, background=(5, 5, 5))
        canvas.translate(10, 10)

        canvas.draw_image(solid_image(6, 6, WHITE, alpha=0))

        assert (canvas.image == 5).all()

    def test_half_transparent_blends(self) -> None:
        canvas = Canvas(20, 20)
        canvas.translate(10, 10)

        canvas.draw_image(solid_image(6, 6, (200, 100, 0), alpha=128))

        b, g, r = canvas.image[10, 10]
        assert b == pytest.approx(100, abs=1)
        assert g == pytest.approx(50, abs=1)
        assert r == 0

    def test_rotation_turns_clockwise(self) -> None:
        """A quarter turn maps a horizontal bar onto a vertical one."""
        canvas = Canvas(100, 100)
        canvas.translate(50, 50)
        canvas.rotate(math.pi / 2)

        canvas.draw_image(solid_image(40, 4, WHITE))

        assert tuple(canvas.image[65, 50]) == WHITE
        assert tuple(canvas.image[35, 50]) == WHITE
        assert tuple(canvas.image[50, 65]) == (0, 0, 0)

    def test_zero_scale_draws_nothing(self) -> None:
        canvas = Canvas(20, 20)
        canvas.translate(10, 10)
        canvas.scale(0.0)

        assert not canvas.draw_image(solid_image(6, 6, WHITE))
        assert (canvas.image == 0).all()


class TestLiveliness:
    """Tests for per-layer rotation multipliers."""

    @pytest.mark.parametrize(("index", "expected"), [(0, 1.0), (1, 1.75), (2, 2.5)])
    def test_default_step(self, index: int, expected: float) -> None:
        assert liveliness(index) == pytest.approx(expected)

    def test_layer_rotation(self, compositor_settings: CompositorSettings) -> None:
        compositor = Compositor(_layers(3), compositor_settings)

        assert compositor.layer_rotation(0.4, 0) == pytest.approx(0.4)
        assert compositor.layer_rotation(0.4, 2) == pytest.approx(0.4 * 2.5)

    def test_custom_step(self) -> None:
        compositor = Compositor(_layers(2), CompositorSettings(liveliness_step=1.0))

        assert compositor.liveliness(1) == pytest.approx(2.0)


class TestCompositor:
    """Tests for drawing the layer stack."""

    def test_per_layer_transforms(self, compositor_settings: CompositorSettings) -> None:
        """Each layer: translate to centre, scale, rotate by angle times liveliness."""
        canvas = RecordingCanvas(200, 100)
        compositor = Compositor(_layers(3), compositor_settings)
        pose = HeadPose(angle=0.3, scale=1.5, centre=Point(0.25, 0.6))

        compositor.draw(canvas, pose)

        assert len(canvas.draws) == 3
        for index, (matrix, depth) in enumerate(canvas.draws):
            rotation = 0.3 * (1 + index * 0.75)
            assert depth == 1
            np.testing.assert_allclose(
                matrix,
                [
                    [1.5 * math.cos(rotation), -1.5 * math.sin(rotation), 50.0],
                    [1.5 * math.sin(rotation), 1.5 * math.cos(rotation), 60.0],
                    [0.0, 0.0, 1.0],
                ],
                atol=1e-12,
            )

    def test_transforms_do_not_leak(self, compositor_settings: CompositorSettings) -> None:
        canvas = Canvas(200, 100)
        compositor = Compositor(_layers(3), compositor_settings)

        compositor.draw(canvas, HeadPose(angle=1.0, scale=2.0, centre=Point(0.5, 0.5)))

        assert canvas.depth == 0
        np.testing.assert_array_equal(canvas.transform, np.eye(3))

    def test_places_layer_at_pose_centre(
        self,
        red_layer: Layer,
        compositor_settings: CompositorSettings,
    ) -> None:
        canvas = Canvas(200, 100)
        compositor = Compositor([red_layer], compositor_settings)

        compositor.draw(canvas, HeadPose(angle=0.0, scale=1.0, centre=Point(0.25, 0.5)))

        assert tuple(canvas.image[50, 50]) == RED
        assert tuple(canvas.image[50, 100]) == (0, 0, 0)

    def test_scale_enlarges_layer(
        self,
        red_layer: Layer,
        compositor_settings: CompositorSettings,
    ) -> None:
        canvas = Canvas(200, 100)
        compositor = Compositor([red_layer], compositor_settings)

        compositor.draw(canvas, HeadPose(angle=0.0, scale=4.0, centre=Point(0.5, 0.5)))

        # Pixel centres of the 8px layer land on x = 84, 88, ..., 112
        assert tuple(canvas.image[50, 88]) == RED
        assert tuple(canvas.image[50, 112]) == RED
        assert tuple(canvas.image[50, 125]) == (0, 0, 0)

    def test_later_layers_on_top(self, compositor_settings: CompositorSettings) -> None:
        canvas = Canvas(40, 40)
        layers = [
            Layer(index=0, name="red.png", image=solid_image(10, 10, RED)),
            Layer(index=1, name="green.png", image=solid_image(10, 10, GREEN)),
        ]

        Compositor(layers, compositor_settings).draw(
            canvas, HeadPose(angle=0.0, scale=1.0, centre=Point(0.5, 0.5))
        )

        assert tuple(canvas.image[20, 20]) == GREEN

    def test_no_layers(self, compositor_settings: CompositorSettings) -> None:
        canvas = Canvas(40, 40)

        Compositor([], compositor_settings).draw(canvas, HeadPose.initial())

        assert (canvas.image == 0).all()
