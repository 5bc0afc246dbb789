"""Shared test fixtures for the painting recognition service."""

import struct
import zlib
from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from catalog import PaintingCatalog, apply_migrations
from extractor import FeatureExtractor


def mean_color_model(module_url):
    """Stand-in for a TF-Hub classifier: mean RGB of the batch."""
    def predict(batch):
        return np.asarray(batch).mean(axis=(1, 2))
    return predict


def png_bytes(color, size=(64, 64)):
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def oversized_png_header(width=20000, height=20000):
    """PNG signature plus an IHDR chunk declaring a huge image, no pixel data."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    chunk = b"IHDR" + ihdr
    return (
        b"\x89PNG\r\n\x1a\n"
        + struct.pack(">I", len(ihdr)) + chunk
        + struct.pack(">I", zlib.crc32(chunk) & 0xFFFFFFFF)
    )


@pytest.fixture
def red_image():
    return png_bytes((200, 30, 30))


@pytest.fixture
def blue_image():
    return png_bytes((30, 30, 200))


@pytest.fixture
def framed_image():
    """A 200x200 white image with a dark 100x100 'painting' in the middle."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    img[50:150, 50:150] = [40, 60, 120]
    return Image.fromarray(img)


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "catalog.db")
    apply_migrations(path)
    return path


@pytest.fixture
def catalog(db_path):
    return PaintingCatalog(db_path)


@pytest.fixture
def extractor():
    ext = FeatureExtractor("test://mean-color", image_size=32, loader=mean_color_model)
    ext.load()
    return ext
