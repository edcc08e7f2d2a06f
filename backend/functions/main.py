import asyncio
import sys
from functools import lru_cache

import functions_framework
from loguru import logger
from pydantic import ValidationError

from codec import PillowCodec
from colors import VisionColorAnalyzer
from config import LOG_LEVEL, load_config
from gcs import GcsStorage
from pipeline import ThumbnailPipeline
from schemas import StorageObjectEvent

logger.remove()
logger.add(sys.stderr, level=LOG_LEVEL)


@lru_cache(maxsize=1)
def get_pipeline() -> ThumbnailPipeline:
    # Clients are created on first use and shared by later invocations
    config = load_config()
    return ThumbnailPipeline(
        config,
        storage=GcsStorage(config.output_bucket, timeout=config.timeout),
        codec=PillowCodec(),
        color_analyzer=VisionColorAnalyzer(timeout=config.timeout),
    )


def handle_event(data, pipeline=None):
    """Process one storage notification payload. Returns the ProcessResult or None when skipped."""
    try:
        event = StorageObjectEvent.model_validate(data or {})
    except ValidationError as e:
        # Acknowledge so the event is not redelivered
        logger.warning(f"⚠️ Ignoring malformed storage event: {e}")
        return None

    reason = event.skip_reason()
    if reason:
        logger.info(reason)
        return None

    logger.info(f"File {event.name} uploaded.")
    pipeline = pipeline or get_pipeline()
    return asyncio.run(pipeline.process(event.bucket, event.name))


@functions_framework.cloud_event
def thumbnails(cloud_event):
    """Storage trigger: write ``<name>.thumbdata`` for every newly created image."""
    handle_event(cloud_event.data)
