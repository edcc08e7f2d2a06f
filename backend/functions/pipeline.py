"""Thumbnail data pipeline.

One ``process`` call handles one source object, strictly in order:

    download -> identify -> plan -> dominant color -> metadata -> resize
    -> identify -> blur -> extract -> upload

Any failure stops the run and propagates; the upload is the last step so
a failed run never leaves an artifact behind. Blocking I/O runs in worker
threads so concurrent invocations on the same instance don't wait on each
other. Scratch files live in a per-call temporary directory.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Optional

from loguru import logger

from exceptions import InvocationTimeout, ThumbnailError
from schemas import THUMBDATA_SUFFIX, PipelineConfig
from sizing import plan_size
from thumbdata import extract_thumb_data

DOMINANT_COLOR_KEY = "dominantColor"
THUMBDATA_CONTENT_TYPE = "application/octet-stream"


@dataclass
class ProcessResult:
    destination: str
    width: int
    height: int
    record_size: int
    dominant_color: Optional[str] = None


def merge_metadata(dominant_color: Optional[str], original: Dict[str, str]) -> Dict[str, str]:
    """Computed values first, original object metadata wins on conflicts."""
    merged: Dict[str, str] = {}
    if dominant_color:
        merged[DOMINANT_COLOR_KEY] = dominant_color
    merged.update(original)
    return merged


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _write_bytes(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)


async def _blocking(executor: Executor, func, *args):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, func, *args)


class ThumbnailPipeline:
    def __init__(self, config: PipelineConfig, storage, codec, color_analyzer=None):
        """
        Args:
            config: Output bucket, pixel budget and time limit.
            storage: Object with ``download``, ``get_metadata`` and ``upload``.
            codec: Object with ``identify``, ``resize_and_encode`` and ``blur``.
            color_analyzer: Optional object with ``dominant_color``; skipped when
                None or when disabled in config.
        """
        self.config = config
        self.storage = storage
        self.codec = codec
        self.color_analyzer = color_analyzer if config.dominant_color_enabled else None

    async def process(self, bucket: str, name: str) -> ProcessResult:
        progress = {"step": "start"}
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="thumbdata")
        try:
            return await asyncio.wait_for(
                self._run(bucket, name, progress, executor), timeout=self.config.timeout
            )
        except asyncio.TimeoutError as e:
            error = InvocationTimeout(
                f"Gave up after {self.config.timeout}s",
                object_name=name,
                step=progress["step"],
            )
            logger.error(f"❌ {error}")
            raise error from e
        except ThumbnailError as e:
            e.object_name = e.object_name or name
            e.step = e.step or progress["step"]
            logger.error(f"❌ Processing failed: {e}")
            raise
        except Exception:
            logger.exception(f"❌ Unexpected error processing {name} at step {progress['step']}")
            raise
        finally:
            # A call cut off by the timeout keeps its thread, the invocation does not wait for it
            executor.shutdown(wait=False, cancel_futures=True)

    async def _run(self, bucket: str, name: str, progress: Dict[str, str], executor: Executor) -> ProcessResult:
        logger.info(f"Processing input file: gs://{bucket}/{name}")

        with tempfile.TemporaryDirectory(prefix="thumbdata-", ignore_cleanup_errors=True) as scratch:
            source_path = os.path.join(scratch, "source")
            record_path = os.path.join(scratch, "record" + THUMBDATA_SUFFIX)

            progress["step"] = "download"
            await _blocking(executor, self.storage.download, bucket, name, source_path)

            progress["step"] = "identify"
            width, height = await _blocking(executor, self.codec.identify, source_path)

            progress["step"] = "plan"
            thumb_width, thumb_height = plan_size(width, height, self.config.pixel_budget)
            logger.debug(f"{name}: {width}x{height} -> planned {thumb_width}x{thumb_height}")

            dominant_color = None
            if self.color_analyzer is not None:
                progress["step"] = "dominant_color"
                dominant_color = await _blocking(executor, self.color_analyzer.dominant_color, bucket, name)

            progress["step"] = "metadata"
            original_metadata = await _blocking(executor, self.storage.get_metadata, bucket, name)
            metadata = merge_metadata(dominant_color, original_metadata)

            progress["step"] = "resize"
            await _blocking(executor, self.codec.resize_and_encode, source_path, thumb_width, thumb_height)

            # The codec may round differently from the plan
            progress["step"] = "identify_resized"
            final_width, final_height = await _blocking(executor, self.codec.identify, source_path)

            progress["step"] = "blur"
            await _blocking(executor, self.codec.blur, source_path)

            progress["step"] = "extract"
            encoded = await _blocking(executor, _read_bytes, source_path)
            record = extract_thumb_data(encoded, final_width, final_height)
            await _blocking(executor, _write_bytes, record_path, bytes(record))

            progress["step"] = "upload"
            destination = name + THUMBDATA_SUFFIX
            await _blocking(
                executor, self.storage.upload, record_path, destination, THUMBDATA_CONTENT_TYPE, metadata
            )

        progress["step"] = "done"
        logger.info(f"✅ {destination} written ({len(record)} bytes, {final_width}x{final_height})")
        return ProcessResult(
            destination=destination,
            width=final_width,
            height=final_height,
            record_size=len(record),
            dominant_color=dominant_color,
        )
