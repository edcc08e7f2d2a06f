"""Dominant color lookup through the Cloud Vision image properties feature."""

from typing import Optional

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import vision
from loguru import logger

from exceptions import ColorAnalysisError
from sizing import round_half_up


def to_hex(red: float, green: float, blue: float) -> str:
    channels = (max(0, min(255, round_half_up(c))) for c in (red, green, blue))
    return "#{:02x}{:02x}{:02x}".format(*channels)


class VisionColorAnalyzer:
    def __init__(self, client: Optional[vision.ImageAnnotatorClient] = None, timeout: float = 60):
        self._client = client
        self.timeout = timeout

    @property
    def client(self) -> vision.ImageAnnotatorClient:
        if self._client is None:
            self._client = vision.ImageAnnotatorClient()
        return self._client

    def dominant_color(self, bucket_name: str, object_name: str) -> Optional[str]:
        """Hex color with the highest score, or None when Vision finds none."""
        image = vision.Image()
        image.source.image_uri = f"gs://{bucket_name}/{object_name}"

        try:
            response = self.client.image_properties(image=image, timeout=self.timeout)
        except (GoogleAPIError, GoogleAuthError) as e:
            raise ColorAnalysisError(f"Vision request failed: {e}", step="dominant_color") from e

        if response.error.message:
            raise ColorAnalysisError(f"Vision error: {response.error.message}", step="dominant_color")

        colors = response.image_properties_annotation.dominant_colors.colors
        if not colors:
            logger.warning(f"No dominant color found for {object_name}")
            return None

        best = max(colors, key=lambda info: info.score)
        return to_hex(best.color.red, best.color.green, best.color.blue)
