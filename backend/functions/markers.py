"""Byte-level marker search for baseline JPEG streams."""

# Every JPEG control marker is introduced by this byte
ESCAPE = 0xFF

SOS = 0xDA  # start of scan
EOI = 0xD9  # end of image

NOT_FOUND = -1


def find_marker(marker: int, start: int, buffer: bytes) -> int:
    """Return the index of the ``0xFF`` byte of the first ``0xFF <marker>``
    pair at or after ``start``, or ``NOT_FOUND``.

    Single forward pass keeping only the previous byte.
    """
    previous = None
    for index in range(max(start, 0), len(buffer)):
        current = buffer[index]
        if previous == ESCAPE and current == marker:
            return index - 1
        previous = current
    return NOT_FOUND
