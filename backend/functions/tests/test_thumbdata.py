import pytest

from exceptions import FormatError
from thumbdata import ThumbRecord, extract_thumb_data


def synthetic_stream():
    # header junk, SOS at 4, scan bytes, EOI at 10, trailing junk
    return bytes([0xFF, 0xD8, 0xAA, 0xBB, 0xFF, 0xDA, 0x01, 0x02, 0x03, 0x04, 0xFF, 0xD9, 0x99])


@pytest.mark.unit
class TestExtractThumbData:
    def test_payload_is_bytes_between_markers(self):
        buffer = synthetic_stream()
        record = extract_thumb_data(buffer, 54, 37)

        assert record.payload == buffer[6:10]
        assert bytes(record) == bytes([0x01, 0x01, 54, 37, 0x01, 0x02, 0x03, 0x04])
        assert len(record) == 8

    def test_size_bytes_are_truncated_to_one_byte(self):
        record = extract_thumb_data(synthetic_stream(), 300, 256)
        assert record.header == bytes([0x01, 0x01, 300 % 256, 0])
        assert record.width == 300

    def test_end_marker_before_start_is_ignored(self):
        buffer = bytes([0xFF, 0xD9, 0xFF, 0xDA, 0x05, 0x06, 0xFF, 0xD9])
        assert extract_thumb_data(buffer, 1, 1).payload == bytes([0x05, 0x06])

    def test_empty_scan(self):
        buffer = bytes([0xFF, 0xDA, 0xFF, 0xD9])
        assert bytes(extract_thumb_data(buffer, 2, 3)) == bytes([0x01, 0x01, 2, 3])

    def test_missing_start_marker(self):
        with pytest.raises(FormatError, match="start marker not found"):
            extract_thumb_data(bytes([0x00, 0xDA, 0xFF, 0xD9]), 10, 10)

    def test_missing_end_marker(self):
        with pytest.raises(FormatError, match="end marker not found"):
            extract_thumb_data(bytes([0xFF, 0xDA, 0x01, 0x02, 0xD9]), 10, 10)


@pytest.mark.unit
def test_record_header_layout():
    record = ThumbRecord(width=61, height=41, payload=b"\x10\x20")
    assert record.header == b"\x01\x01\x3d\x29"
    assert bytes(record) == b"\x01\x01\x3d\x29\x10\x20"
