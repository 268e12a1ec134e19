"""Inference frame rate estimate."""

from __future__ import annotations

from data_portrait.core.logging import get_logger

logger = get_logger(__name__)


class FpsMeter:
    """Frame rate of the inference loop, refreshed every few cycles.

    The estimate comes from the duration of a single model call, so it
    reflects model throughput independently of the render refresh rate.
    """

    def __init__(self, update_interval: int = 5) -> None:
        """Initialize meter.

        Args:
            update_interval: Recompute the estimate every this many cycles
        """
        if update_interval < 1:
            raise ValueError("update_interval must be at least 1")
        self.update_interval = update_interval
        self._cycles = 0
        self._fps: int | None = None

    @property
    def fps(self) -> int | None:
        """Latest estimate, or None before the first update."""
        return self._fps

    @property
    def cycles(self) -> int:
        """Number of recorded cycles."""
        return self._cycles

    @property
    def label(self) -> str:
        """User-visible counter text, e.g. "24 FPS"."""
        return "" if self._fps is None else f"{self._fps} FPS"

    def record(self, elapsed: float) -> int | None:
        """Record one inference cycle.

        Args:
            elapsed: Wall-clock seconds the cycle's model call took

        Returns:
            The new estimate if this cycle refreshed it, else None
        """
        self._cycles += 1
        if self._cycles % self.update_interval != 0 or elapsed <= 0:
            return None

        self._fps = int(1.0 / elapsed)
        logger.debug("Inference rate: %s", self.label)
        return self._fps
