"""Custom exceptions for Data Portrait."""


class DataPortraitError(Exception):
    """Base exception for all Data Portrait errors."""

    pass


class CameraError(DataPortraitError):
    """Failed to open the webcam or read a frame from it."""

    def __init__(self, message: str = "Camera error") -> None:
        self.message = message
        super().__init__(self.message)


class LandmarkModelError(DataPortraitError):
    """Face landmark model failed to load or run."""

    def __init__(self, message: str = "Landmark model error") -> None:
        self.message = message
        super().__init__(self.message)


class AssetLoadError(DataPortraitError):
    """An image layer could not be read or decoded."""

    def __init__(self, message: str = "Failed to load image asset") -> None:
        self.message = message
        super().__init__(self.message)


class RenderError(DataPortraitError):
    """Canvas misuse, such as popping an empty transform stack."""

    def __init__(self, message: str = "Render error") -> None:
        self.message = message
        super().__init__(self.message)
