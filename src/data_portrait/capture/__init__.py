"""Webcam capture."""

from data_portrait.capture.camera import Webcam

__all__ = ["Webcam"]
