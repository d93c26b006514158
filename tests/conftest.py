"""Shared pytest fixtures for price_label tests."""

from typing import List

import pytest
from PIL import Image as PIL_Image

from helpers import dark_image, textured_label
from price_label.config import AnalyzerConfig
from price_label.geometry import Rect
from price_label.models import TextBlock


def pytest_configure(config):
    """Register the markers declared in tests/markers.py."""
    for name, description in (
        ("unit", "fast tests without external binaries"),
        ("integration", "tests spanning several pipeline stages"),
        ("region_detection", "white label region detection"),
        ("extraction", "product name, weight and price extraction"),
    ):
        config.addinivalue_line("markers", f"{name}: {description}")


# ===== Configuration Fixtures =====


@pytest.fixture
def config():
    """Default thresholds, independent of the test process environment."""
    return AnalyzerConfig(
        probe_block_size=50,
        brightness_threshold=200,
        block_white_ratio=0.7,
        edge_white_ratio=0.6,
        min_label_width=80,
        max_label_width=500,
        min_label_height=60,
        max_label_height=400,
        region_overlap_ratio=0.3,
        proximity_distance=200.0,
        column_offset=150.0,
        min_products=2,
        max_image_width=1920,
        max_image_height=1080,
        ocr_language="spa",
        tesseract_config="--oem 3 --psm 11",
    )


# ===== Image Fixtures =====


@pytest.fixture
def label_pixels():
    """400x300 dark shelf with one 200x150 label at (100, 75)."""
    return textured_label(dark_image(400, 300), 100, 75, 300, 225)


@pytest.fixture
def two_label_pixels():
    """800x400 dark shelf with two separate 200x150 labels."""
    image = dark_image(800, 400)
    textured_label(image, 50, 100, 250, 250)
    textured_label(image, 500, 100, 700, 250)
    return image


@pytest.fixture
def label_image(label_pixels):
    return PIL_Image.fromarray(label_pixels)


# ===== Text Block Fixtures =====


@pytest.fixture
def two_label_blocks() -> List[TextBlock]:
    """OCR blocks for the labels in ``two_label_pixels``."""
    return [
        TextBlock("Tomate Pera", Rect(70, 110, 230, 140)),
        TextBlock("500G\n1,39€", Rect(70, 150, 230, 200)),
        TextBlock("Tomate rama", Rect(520, 110, 680, 140)),
        TextBlock("2,29€/Kg", Rect(520, 150, 680, 200)),
    ]


@pytest.fixture
def side_by_side_blocks() -> List[TextBlock]:
    """Two placards close enough to merge into one proximity cluster."""
    return [
        TextBlock("Naranja\n1,99€", Rect(0, 0, 100, 60)),
        TextBlock("Manzana\n2,49€", Rect(160, 0, 260, 60)),
    ]
