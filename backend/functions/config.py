import os

from pydantic import ValidationError

from exceptions import InvalidInput
from schemas import PipelineConfig

DEFAULT_OUTPUT_BUCKET = "qvik-gcf-thumbnails-output"

# 'Pixel budget' is the maximum amount of pixels in the thumbnail
DEFAULT_PIXEL_BUDGET = 50 * 50

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def load_config(environ=None) -> PipelineConfig:
    """Build the pipeline configuration from environment variables."""
    env = os.environ if environ is None else environ
    try:
        return PipelineConfig(
            output_bucket=env.get("OUTPUT_BUCKET", DEFAULT_OUTPUT_BUCKET),
            pixel_budget=env.get("PIXEL_BUDGET", DEFAULT_PIXEL_BUDGET),
            dominant_color_enabled=env.get("DOMINANT_COLOR_ENABLED", "true"),
            timeout=env.get("INVOCATION_TIMEOUT", 60),
        )
    except ValidationError as e:
        raise InvalidInput(f"Invalid configuration: {e}") from e
