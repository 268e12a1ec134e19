"""Inference/render loop orchestration."""

from data_portrait.pipeline.app import PortraitApp
from data_portrait.pipeline.channel import DetectionChannel
from data_portrait.pipeline.fps import FpsMeter
from data_portrait.pipeline.loops import InferenceLoop, RenderLoop

__all__ = ["DetectionChannel", "FpsMeter", "InferenceLoop", "PortraitApp", "RenderLoop"]
