"""Tests for white label region detection."""

import numpy as np
import pytest
from PIL import Image as PIL_Image

from helpers import WHITE, dark_image, textured_label
from markers import region_detection, unit
from price_label.geometry import Rect
from price_label.regions import (
    WhiteLabelRegionDetector,
    brightness_mask,
    merge_overlapping_regions,
)


@unit
@region_detection
class TestMergeOverlappingRegions:
    def test_overlapping_pair_merges_to_union(self):
        merged = merge_overlapping_regions(
            [Rect(0, 0, 100, 100), Rect(50, 50, 150, 150)]
        )

        assert merged == [Rect(0, 0, 150, 150)]

    def test_merges_to_fixed_point(self):
        # The outer two only intersect after the middle one joins them
        merged = merge_overlapping_regions(
            [Rect(0, 0, 10, 10), Rect(20, 0, 30, 10), Rect(5, 0, 25, 10)]
        )

        assert merged == [Rect(0, 0, 30, 10)]

    def test_touching_regions_stay_apart(self):
        merged = merge_overlapping_regions(
            [Rect(10, 0, 20, 10), Rect(0, 0, 10, 10)]
        )

        assert merged == [Rect(0, 0, 10, 10), Rect(10, 0, 20, 10)]

    def test_duplicates_collapse(self):
        region = Rect(5, 5, 50, 50)

        assert merge_overlapping_regions([region, region, region]) == [region]

    def test_empty(self):
        assert merge_overlapping_regions([]) == []

    def test_result_has_no_intersecting_pair(self):
        regions = [
            Rect(x, y, x + 40, y + 30)
            for x in range(0, 300, 35)
            for y in range(0, 200, 70)
        ]
        merged = merge_overlapping_regions(regions)

        for i, a in enumerate(merged):
            for b in merged[i + 1:]:
                assert not a.intersects(b)


@unit
@region_detection
class TestWhiteLabelRegionDetector:
    def test_brightness_mask_uses_integer_mean(self):
        pixels = np.array([[[201, 201, 201], [200, 200, 202]]], dtype=np.uint8)

        assert brightness_mask(pixels, 200).tolist() == [[True, False]]

    def test_label_sized_region_is_found(self, config, label_pixels):
        regions = WhiteLabelRegionDetector(config).detect(label_pixels)

        assert regions == [Rect(100, 75, 300, 225)]

    def test_accepts_pillow_images(self, config, label_image):
        regions = WhiteLabelRegionDetector(config).detect(label_image)

        assert regions == [Rect(100, 75, 300, 225)]

    def test_two_labels(self, config, two_label_pixels):
        regions = WhiteLabelRegionDetector(config).detect(two_label_pixels)

        assert regions == [Rect(50, 100, 250, 250), Rect(500, 100, 700, 250)]

    def test_oversized_white_area_is_discarded(self, config):
        pixels = np.full((600, 600, 3), WHITE, dtype=np.uint8)

        assert WhiteLabelRegionDetector(config).detect(pixels) == []

    def test_undersized_white_area_is_discarded(self, config):
        pixels = textured_label(dark_image(300, 300), 100, 100, 170, 170)

        assert WhiteLabelRegionDetector(config).detect(pixels) == []

    def test_dark_image_has_no_regions(self, config):
        assert WhiteLabelRegionDetector(config).detect(dark_image(300, 300)) == []

    def test_image_smaller_than_probe(self, config):
        pixels = np.full((40, 40, 3), WHITE, dtype=np.uint8)

        assert WhiteLabelRegionDetector(config).detect(pixels) == []

    def test_deterministic(self, config, two_label_pixels):
        detector = WhiteLabelRegionDetector(config)

        assert detector.detect(two_label_pixels) == detector.detect(
            two_label_pixels.copy()
        )

    def test_greyscale_image(self, config, label_pixels):
        grey = PIL_Image.fromarray(np.ascontiguousarray(label_pixels[:, :, 0]))

        assert WhiteLabelRegionDetector(config).detect(grey) == [
            Rect(100, 75, 300, 225)
        ]
