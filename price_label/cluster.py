import logging
import math
from typing import List, Sequence, Tuple

from price_label.geometry import Rect, overlap_fraction, union_all
from price_label.models import TextBlock

logger = logging.getLogger(__name__)


def _center_distance(box1: Rect, box2: Rect) -> float:
    dx = box2.center_x() - box1.center_x()
    dy = box2.center_y() - box1.center_y()
    return math.sqrt(dx * dx + dy * dy)


def filter_blocks_in_regions(
    blocks: Sequence[TextBlock],
    regions: Sequence[Rect],
    min_overlap: float = 0.3,
) -> List[TextBlock]:
    """
    Keeps the blocks that lie mostly inside a detected label region.

    Args:
        blocks (Sequence[TextBlock]): OCR text blocks in reading order.
        regions (Sequence[Rect]): Detected label regions.
        min_overlap (float, optional): Share of a block's own area that must
            fall inside one region. Defaults to 0.3.

    Returns:
        List[TextBlock]: The retained blocks, in their original order.
    """
    return [
        block
        for block in blocks
        if any(
            overlap_fraction(block.box, region) > min_overlap
            for region in regions
        )
    ]


def group_by_proximity(
    blocks: Sequence[TextBlock], max_distance: float = 200.0
) -> List[List[TextBlock]]:
    """
    Groups blocks around seed blocks in a single greedy pass.

    Each unvisited block seeds a new cluster and absorbs every later
    unvisited block whose box centre is closer than ``max_distance`` to the
    seed's centre. Only seed-to-candidate distances are checked, so a chain
    of blocks that are each near the next may still be split.

    Args:
        blocks (Sequence[TextBlock]): Blocks in reading order.
        max_distance (float, optional): Exclusive centre distance threshold.
            Defaults to 200.

    Returns:
        List[List[TextBlock]]: Clusters in seed order; members keep input
            order.
    """
    n = len(blocks)
    visited = [False] * n
    clusters: List[List[TextBlock]] = []

    for i in range(n):
        if visited[i]:
            continue
        visited[i] = True
        cluster = [blocks[i]]

        for j in range(n):
            if visited[j]:
                continue
            if _center_distance(blocks[i].box, blocks[j].box) < max_distance:
                cluster.append(blocks[j])
                visited[j] = True

        clusters.append(cluster)

    logger.debug(f"Grouped {n} blocks into {len(clusters)} proximity clusters")
    return clusters


def group_by_columns(
    blocks: Sequence[TextBlock], max_offset: float = 150.0
) -> List[List[TextBlock]]:
    """
    Groups side-by-side placards into vertical columns.

    Blocks are visited from left to right and attached to the first column
    whose seed block is horizontally centred within ``max_offset``; each
    column is then ordered top to bottom.
    """
    columns: List[List[TextBlock]] = []

    for block in sorted(blocks, key=lambda b: b.box.left):
        for column in columns:
            seed = column[0]
            if abs(block.box.center_x() - seed.box.center_x()) < max_offset:
                column.append(block)
                break
        else:
            columns.append([block])

    for column in columns:
        column.sort(key=lambda b: b.box.top)

    logger.debug(f"Created {len(columns)} columns from {len(blocks)} blocks")
    return columns


def combine_cluster(cluster: Sequence[TextBlock]) -> Tuple[str, Rect]:
    """Flatten a non-empty cluster to newline-joined text and a union box."""
    if not cluster:
        raise ValueError("Cannot combine an empty cluster")
    text = "\n".join(block.text for block in cluster)
    box = union_all(block.box for block in cluster)
    return text, box
