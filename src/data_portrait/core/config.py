"""Application configuration via Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CameraSettings(BaseSettings):
    """Webcam capture settings."""

    model_config = SettingsConfigDict(env_prefix="CAMERA_")

    device: int = 0
    width: int | None = None
    height: int | None = None


class DetectorSettings(BaseSettings):
    """BlazeFace face detector settings (MediaPipe Tasks)."""

    model_config = SettingsConfigDict(env_prefix="DETECTOR_")

    model_url: str = (
        "https://storage.googleapis.com/mediapipe-models/face_detector/"
        "blaze_face_short_range/float16/latest/blaze_face_short_range.tflite"
    )
    model_dir: Path = Path("data/models")
    model_filename: str = "blaze_face_short_range.tflite"
    min_detection_confidence: float = 0.75
    min_suppression_threshold: float = 0.3

    @property
    def model_path(self) -> Path:
        """Local path of the detector model file."""
        return self.model_dir / self.model_filename


class SmoothingSettings(BaseSettings):
    """Exponential smoothing applied to landmarks and pose."""

    model_config = SettingsConfigDict(env_prefix="SMOOTHING_")

    factor: float = Field(default=0.5, ge=0.0, le=1.0)


class HeadPoseSettings(BaseSettings):
    """Calibration of eye distance onto a scale multiplier."""

    model_config = SettingsConfigDict(env_prefix="HEAD_POSE_")

    eye_gap_min: float = 0.0
    eye_gap_max: float = 300.0
    scale_min: float = 0.0
    scale_max: float = 2.0

    @model_validator(mode="after")
    def _check_eye_gap_range(self) -> "HeadPoseSettings":
        """The eye-gap range is a divisor in the scale mapping."""
        if self.eye_gap_max <= self.eye_gap_min:
            raise ValueError(
                f"eye_gap_max ({self.eye_gap_max}) must be greater than "
                f"eye_gap_min ({self.eye_gap_min})"
            )
        return self


class CompositorSettings(BaseSettings):
    """Image layer stack settings."""

    model_config = SettingsConfigDict(env_prefix="COMPOSITOR_")

    asset_dir: Path = Path("assets")
    layers: list[str] = Field(default_factory=lambda: ["maps.png", "radar.png", "strava.png"])
    liveliness_step: float = 0.75

    @property
    def layer_paths(self) -> list[Path]:
        """Layer files resolved against the asset directory, in draw order."""
        return [self.asset_dir / name for name in self.layers]


class UISettings(BaseSettings):
    """Display window and canvas settings."""

    model_config = SettingsConfigDict(env_prefix="", populate_by_name=True)

    display_width: int = Field(default=1280, alias="DISPLAY_WIDTH")
    display_height: int = Field(default=720, alias="DISPLAY_HEIGHT")
    refresh_rate: float = Field(default=60.0, gt=0.0, alias="REFRESH_RATE")
    show_fps: bool = Field(default=True, alias="SHOW_FPS")
    fps_update_interval: int = Field(default=5, ge=1, alias="FPS_UPDATE_INTERVAL")
    background: tuple[int, int, int] = Field(default=(0, 0, 0), alias="BACKGROUND")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    camera: CameraSettings = Field(default_factory=CameraSettings)
    detector: DetectorSettings = Field(default_factory=DetectorSettings)
    smoothing: SmoothingSettings = Field(default_factory=SmoothingSettings)
    head_pose: HeadPoseSettings = Field(default_factory=HeadPoseSettings)
    compositor: CompositorSettings = Field(default_factory=CompositorSettings)
    ui: UISettings = Field(default_factory=UISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()
