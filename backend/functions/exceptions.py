"""
Thumbnail pipeline exceptions.

Adapters (storage, codec, colors) raise these with the original error
chained via ``from e``; the pipeline fills in the object name and the
step that failed, logs once and re-raises to the trigger dispatcher.
"""

from typing import Optional


class ThumbnailError(Exception):
    """Base exception for every failure inside one pipeline invocation."""

    def __init__(
        self,
        message: str,
        object_name: Optional[str] = None,
        step: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.object_name = object_name
        self.step = step

    def __str__(self) -> str:
        context = []
        if self.object_name:
            context.append(f"object={self.object_name}")
        if self.step:
            context.append(f"step={self.step}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class DownloadError(ThumbnailError):
    """Source object or its metadata could not be fetched."""


class DecodeError(ThumbnailError):
    """The codec could not read, resize or blur the image."""


class FormatError(ThumbnailError):
    """Encoded stream is missing the markers that frame the payload."""


class InvalidInput(ThumbnailError):
    """Non-positive or degenerate dimensions, or invalid configuration."""


class UploadError(ThumbnailError):
    """The artifact could not be written to the output bucket."""


class ColorAnalysisError(ThumbnailError):
    """The dominant color service returned an error."""


class InvocationTimeout(ThumbnailError):
    """The invocation ran past its time budget."""
