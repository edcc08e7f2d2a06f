import math
from typing import Tuple

from exceptions import InvalidInput


def round_half_up(value: float) -> int:
    # Same rounding the reference tooling uses; built-in round() is half-to-even
    return int(math.floor(value + 0.5))


def plan_size(width: int, height: int, pixel_budget: int) -> Tuple[int, int]:
    """Scale ``width`` x ``height`` so the area is close to ``pixel_budget``.

    Aspect ratio is preserved. Raises InvalidInput for non-positive input or
    when rounding collapses one side to zero.
    """
    if width <= 0 or height <= 0:
        raise InvalidInput(f"Image dimensions must be positive, got {width}x{height}")
    if pixel_budget <= 0:
        raise InvalidInput(f"Pixel budget must be positive, got {pixel_budget}")

    ratio = math.sqrt(pixel_budget / (width * height))
    thumb_width = round_half_up(ratio * width)
    thumb_height = round_half_up(ratio * height)

    if thumb_width <= 0 or thumb_height <= 0:
        raise InvalidInput(
            f"Degenerate thumbnail size {thumb_width}x{thumb_height} "
            f"for {width}x{height} under budget {pixel_budget}"
        )
    return thumb_width, thumb_height
