"""
Locate bright, label-sized rectangles in a shelf photograph.

Shelf price labels are printed on white card, so candidate regions are
grown from square probe blocks that are mostly white and kept when the
result has a plausible label size.
"""

import logging
from typing import Iterable, List, Optional

import numpy as np

from price_label.config import DEFAULT_CONFIG, AnalyzerConfig
from price_label.geometry import Rect
from price_label.image import to_rgb_array

logger = logging.getLogger(__name__)


def brightness_mask(pixels, threshold: int) -> np.ndarray:
    """Boolean mask of pixels whose integer channel mean exceeds threshold."""
    rgb = to_rgb_array(pixels).astype(np.int32)
    return (rgb.sum(axis=2) // 3) > threshold


def merge_overlapping_regions(regions: Iterable[Rect]) -> List[Rect]:
    """
    Merge intersecting regions until no two of them intersect.

    Args:
        regions: Candidate regions in any order, duplicates allowed

    Returns:
        List[Rect]: Disjoint regions sorted by top then left edge
    """
    merged = list(dict.fromkeys(regions))
    changed = True
    while changed:
        changed = False
        for i in range(len(merged)):
            for j in range(i + 1, len(merged)):
                if merged[i].intersects(merged[j]):
                    merged[i] = merged[i].union(merged.pop(j))
                    changed = True
                    break
            if changed:
                break
    return sorted(merged, key=lambda r: (r.top, r.left))


class WhiteLabelRegionDetector:
    """
    Detects white label regions in an RGB image.

    The image is probed with square blocks at half-block stride. Every
    block whose white-pixel fraction exceeds ``block_white_ratio`` is grown
    left, right, up and down, one column or row at a time, while the next
    edge line is whiter than ``edge_white_ratio``. Grown regions outside the
    label size envelope are dropped and the rest are merged.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def detect(self, pixels) -> List[Rect]:
        """Return the merged label regions found in ``pixels``."""
        mask = brightness_mask(pixels, self.config.brightness_threshold)
        height, width = mask.shape
        block = self.config.probe_block_size
        stride = max(block // 2, 1)

        white = mask.astype(np.int64)
        # integral[y, x] counts white pixels in mask[:y, :x]
        integral = np.zeros((height + 1, width + 1), dtype=np.int64)
        integral[1:, 1:] = white.cumsum(axis=0).cumsum(axis=1)
        # columns[y, x] counts white pixels in mask[:y, x]
        columns = np.zeros((height + 1, width), dtype=np.int64)
        columns[1:, :] = white.cumsum(axis=0)
        # rows[y, x] counts white pixels in mask[y, :x]
        rows = np.zeros((height, width + 1), dtype=np.int64)
        rows[:, 1:] = white.cumsum(axis=1)

        candidates = []
        seeds = 0
        for top in range(0, height - block, stride):
            for left in range(0, width - block, stride):
                bottom = top + block
                right = left + block
                count = (
                    integral[bottom, right]
                    - integral[top, right]
                    - integral[bottom, left]
                    + integral[top, left]
                )
                if count / (block * block) <= self.config.block_white_ratio:
                    continue
                seeds += 1
                region = self._expand(columns, rows, left, top, right, bottom)
                if self._is_label_sized(region):
                    candidates.append(region)

        regions = merge_overlapping_regions(candidates)
        logger.info(
            f"Detected {len(regions)} label regions from {seeds} white blocks "
            f"in {width}x{height} image"
        )
        return regions

    def _expand(
        self,
        columns: np.ndarray,
        rows: np.ndarray,
        left: int,
        top: int,
        right: int,
        bottom: int,
    ) -> Rect:
        ratio = self.config.edge_white_ratio
        height, width = rows.shape[0], columns.shape[1]

        column_white = (columns[bottom] - columns[top]) / (bottom - top)
        failing = np.nonzero(column_white[:left] <= ratio)[0]
        left = int(failing[-1]) + 1 if failing.size else 0

        failing = np.nonzero(column_white[right:] <= ratio)[0]
        right = right + int(failing[0]) if failing.size else width

        row_white = (rows[:, right] - rows[:, left]) / (right - left)
        failing = np.nonzero(row_white[:top] <= ratio)[0]
        top = int(failing[-1]) + 1 if failing.size else 0

        failing = np.nonzero(row_white[bottom:] <= ratio)[0]
        bottom = bottom + int(failing[0]) if failing.size else height

        return Rect(left, top, right, bottom)

    def _is_label_sized(self, region: Rect) -> bool:
        config = self.config
        return (
            config.min_label_width < region.width() < config.max_label_width
            and config.min_label_height
            < region.height()
            < config.max_label_height
        )
