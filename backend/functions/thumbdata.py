"""Thumb record builder.

A thumb record is a 4 byte header followed by the entropy-coded JPEG scan
with the container stripped off:

    [0x01, 0x01, width & 0xFF, height & 0xFF] + jpeg[sos + 2 : eoi]

Consumers rebuild a viewable JPEG by prepending a shared reference header
that was produced with the same encoder settings as ``codec.py``. The size
bytes only carry the low 8 bits of each side; the header layout is fixed by
that reconstruction tool.
"""

from dataclasses import dataclass

from exceptions import FormatError
from markers import EOI, NOT_FOUND, SOS, find_marker

RECORD_VERSION = 0x01
RECORD_FORMAT = 0x01


@dataclass(frozen=True)
class ThumbRecord:
    width: int
    height: int
    payload: bytes

    @property
    def header(self) -> bytes:
        return bytes([RECORD_VERSION, RECORD_FORMAT, self.width & 0xFF, self.height & 0xFF])

    def __bytes__(self) -> bytes:
        return self.header + self.payload

    def __len__(self) -> int:
        return len(self.header) + len(self.payload)


def extract_thumb_data(buffer: bytes, width: int, height: int) -> ThumbRecord:
    """Cut the compressed scan out of an encoded JPEG ``buffer``."""
    start = find_marker(SOS, 0, buffer)
    if start == NOT_FOUND:
        raise FormatError("start marker not found")

    end = find_marker(EOI, start, buffer)
    if end == NOT_FOUND:
        raise FormatError("end marker not found")

    return ThumbRecord(width=width, height=height, payload=bytes(buffer[start + 2:end]))
