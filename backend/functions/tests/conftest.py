import os
import shutil
import sys
from unittest.mock import MagicMock

import pytest
from PIL import Image

# Function modules are deployed flat, make them importable the same way
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from schemas import PipelineConfig


def make_image(path, size=(400, 300), mode="RGB", fmt="JPEG", **save_kwargs):
    """Write a gradient test image and return its path."""
    width, height = size
    image = Image.new("RGB", size)
    image.putdata([((x * 255) // width, (y * 255) // height, 128) for y in range(height) for x in range(width)])
    if mode != "RGB":
        image = image.convert(mode)
    image.save(path, format=fmt, **save_kwargs)
    return str(path)


@pytest.fixture
def source_jpeg(tmp_path):
    """400x300 JPEG source image"""
    return make_image(tmp_path / "source.jpg")


@pytest.fixture
def pipeline_config():
    return PipelineConfig(
        output_bucket="test-output",
        pixel_budget=2500,
        dominant_color_enabled=True,
        timeout=30,
    )


@pytest.fixture
def fake_storage(source_jpeg):
    """Storage double: serves ``source_jpeg`` and keeps every upload in ``uploads``"""
    storage = MagicMock()
    storage.uploads = []
    storage.downloaded_to = []

    def download(bucket_name, object_name, destination):
        storage.downloaded_to.append(destination)
        shutil.copyfile(source_jpeg, destination)
        return destination

    def upload(source, destination, content_type, metadata):
        with open(source, "rb") as f:
            body = f.read()
        storage.uploads.append({
            "destination": destination,
            "content_type": content_type,
            "metadata": dict(metadata),
            "body": body,
        })

    storage.download.side_effect = download
    storage.upload.side_effect = upload
    storage.get_metadata.return_value = {"author": "tester"}
    return storage


@pytest.fixture
def fake_color_analyzer():
    analyzer = MagicMock()
    analyzer.dominant_color.return_value = "#336699"
    return analyzer
