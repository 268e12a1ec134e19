"""Latest-value handoff between the inference and render loops."""

from __future__ import annotations

from data_portrait.core.types import InferenceResult


class DetectionChannel:
    """Holds the most recent inference result.

    The inference loop is the only writer and the render loop the only
    reader. Both run on the event loop thread, so a plain attribute is
    enough: readers always see whatever was published last and never wait.
    """

    def __init__(self) -> None:
        self._latest: InferenceResult | None = None
        self._published = 0

    @property
    def latest(self) -> InferenceResult | None:
        """Last published result, or None before the first cycle."""
        return self._latest

    @property
    def published(self) -> int:
        """Number of results published so far."""
        return self._published

    def publish(self, result: InferenceResult) -> None:
        """Replace the latest result."""
        self._latest = result
        self._published += 1
