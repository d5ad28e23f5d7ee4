from typing import List, Optional


class ContentError(Exception):
    """Base for every recoverable error raised by the content layer."""

    def __init__(self, message: str, *, error_type: str) -> None:
        self.error_type = error_type
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.args[0]


class ValidationError(ContentError):
    def __init__(self, message: str, *, errors: Optional[List[str]] = None) -> None:
        self.errors = list(errors) if errors else [message]
        super().__init__(message, error_type="validation")


class NotFoundError(ContentError):
    def __init__(self, message: str) -> None:
        super().__init__(message, error_type="not_found")


class InvalidTransitionError(ContentError):
    def __init__(self, message: str, *, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(message, error_type="invalid_transition")


class ImageGenerationBusyError(ContentError):
    def __init__(self, message: str = "image generation already in progress") -> None:
        super().__init__(message, error_type="busy")


class ExternalServiceError(ContentError):
    # only raised inside the image service; callers always get a fallback instead
    def __init__(self, message: str) -> None:
        super().__init__(message, error_type="external_service")


__all__ = [
    "ContentError",
    "ValidationError",
    "NotFoundError",
    "InvalidTransitionError",
    "ImageGenerationBusyError",
    "ExternalServiceError",
]
