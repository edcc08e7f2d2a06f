"""Pillow codec adapter.

The JPEG settings below must produce the same tables as the reference
header template handed to thumb record consumers. Changing any of them
means regenerating that template.
"""

from typing import Tuple

from loguru import logger
from PIL import Image, ImageFilter

from exceptions import DecodeError
from sizing import round_half_up

JPEG_QUALITY = 30
JPEG_OPTIMIZE = False  # keep the standard Huffman tables
JPEG_PROGRESSIVE = False
JPEG_SUBSAMPLING = 2  # 4:2:0
BLUR_RADIUS = 5

_CODEC_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def _save_jpeg(image: Image.Image, path: str) -> None:
    # Strip metadata carried over from the source: no EXIF, ICC profile or comment segments
    image.info = {}
    image.save(
        path,
        format="JPEG",
        quality=JPEG_QUALITY,
        optimize=JPEG_OPTIMIZE,
        progressive=JPEG_PROGRESSIVE,
        subsampling=JPEG_SUBSAMPLING,
    )


def _fit(size: Tuple[int, int], box: Tuple[int, int]) -> Tuple[int, int]:
    """Largest size with the aspect of ``size`` that fits inside ``box``."""
    width, height = size
    scale = min(box[0] / width, box[1] / height)
    return max(1, round_half_up(width * scale)), max(1, round_half_up(height * scale))


class PillowCodec:
    def identify(self, path: str) -> Tuple[int, int]:
        try:
            with Image.open(path) as image:
                return image.size
        except _CODEC_ERRORS as e:
            raise DecodeError(f"Cannot identify image: {e}", step="identify") from e

    def resize_and_encode(self, path: str, width: int, height: int) -> Tuple[int, int]:
        """Resize ``path`` in place to fit ``width`` x ``height`` and re-encode as JPEG.

        The result keeps the source aspect ratio, so it may be a pixel off
        the request; callers re-read the size with ``identify``.
        """
        try:
            with Image.open(path) as image:
                if image.mode != "RGB":
                    image = image.convert("RGB")
                target = _fit(image.size, (width, height))
                resized = image.resize(target, Image.LANCZOS)
            _save_jpeg(resized, path)
        except _CODEC_ERRORS as e:
            raise DecodeError(f"Cannot resize image: {e}", step="resize") from e

        logger.debug(f"Resized {path} to {resized.size[0]}x{resized.size[1]}")
        return resized.size

    def blur(self, path: str, radius: float = BLUR_RADIUS) -> None:
        try:
            with Image.open(path) as image:
                if image.mode != "RGB":
                    image = image.convert("RGB")
                blurred = image.filter(ImageFilter.GaussianBlur(radius))
            _save_jpeg(blurred, path)
        except _CODEC_ERRORS as e:
            raise DecodeError(f"Cannot blur image: {e}", step="blur") from e
