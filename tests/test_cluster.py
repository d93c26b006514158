"""Tests for grouping text blocks into per-label clusters."""

import pytest

from price_label.cluster import (
    combine_cluster,
    filter_blocks_in_regions,
    group_by_columns,
    group_by_proximity,
)
from price_label.geometry import Rect
from price_label.models import TextBlock


def block(text, left, top, width=100, height=40):
    return TextBlock(text, Rect.from_xywh(left, top, width, height))


def texts(clusters):
    return [[b.text for b in cluster] for cluster in clusters]


@pytest.mark.unit
class TestFilterBlocksInRegions:
    def test_keeps_blocks_mostly_inside_a_region(self):
        region = Rect(0, 0, 200, 200)
        blocks = [
            block("inside", 10, 10),
            block("half", 150, 10),  # 50% inside
            block("sliver", 180, 10),  # 20% inside
            block("outside", 300, 300),
        ]

        kept = filter_blocks_in_regions(blocks, [region])

        assert [b.text for b in kept] == ["inside", "half"]

    def test_threshold_is_exclusive(self):
        # Exactly 30% of the block lies inside the region
        blocks = [block("edge", 170, 0)]

        assert filter_blocks_in_regions(blocks, [Rect(0, 0, 200, 200)]) == []

    def test_zero_area_blocks_are_dropped(self):
        blocks = [TextBlock("line", Rect(10, 10, 10, 50))]

        assert filter_blocks_in_regions(blocks, [Rect(0, 0, 100, 100)]) == []

    def test_any_region_counts(self):
        blocks = [block("a", 10, 10), block("b", 510, 10)]
        regions = [Rect(0, 0, 200, 200), Rect(500, 0, 700, 200)]

        assert filter_blocks_in_regions(blocks, regions) == blocks

    def test_no_regions(self):
        assert filter_blocks_in_regions([block("a", 0, 0)], []) == []


@pytest.mark.unit
class TestGroupByProximity:
    def test_near_blocks_join_the_seed(self):
        blocks = [
            block("name", 0, 0),
            block("far", 1000, 0),
            block("price", 0, 60),
        ]

        assert texts(group_by_proximity(blocks)) == [["name", "price"], ["far"]]

    def test_distance_threshold_is_exclusive(self):
        blocks = [block("a", 0, 0), block("b", 200, 0)]

        assert texts(group_by_proximity(blocks)) == [["a"], ["b"]]

    def test_not_transitive(self):
        # b is near a and c, but c is too far from the seed a
        blocks = [block("a", 0, 0), block("b", 150, 0), block("c", 300, 0)]

        assert texts(group_by_proximity(blocks)) == [["a", "b"], ["c"]]

    def test_every_block_lands_in_exactly_one_cluster(self):
        blocks = [block(str(i), (i * 97) % 600, (i * 53) % 400) for i in range(25)]

        clusters = group_by_proximity(blocks)
        flattened = [b for cluster in clusters for b in cluster]

        assert sorted(flattened, key=lambda b: int(b.text)) == blocks

    def test_identical_blocks_are_tracked_by_position(self):
        same = block("1,39€", 0, 0)

        assert texts(group_by_proximity([same, same, same])) == [
            ["1,39€", "1,39€", "1,39€"]
        ]

    def test_custom_distance(self):
        blocks = [block("a", 0, 0), block("b", 0, 60)]

        assert texts(group_by_proximity(blocks, max_distance=50)) == [
            ["a"],
            ["b"],
        ]

    def test_empty(self):
        assert group_by_proximity([]) == []


@pytest.mark.unit
class TestGroupByColumns:
    def test_columns_sorted_left_to_right_and_top_to_bottom(self):
        blocks = [
            block("right price", 400, 300),
            block("left price", 0, 300),
            block("left name", 10, 0),
            block("right name", 390, 0),
        ]

        assert texts(group_by_columns(blocks)) == [
            ["left name", "left price"],
            ["right name", "right price"],
        ]

    def test_offset_is_exclusive(self):
        blocks = [block("a", 0, 0), block("b", 150, 0)]

        assert texts(group_by_columns(blocks)) == [["a"], ["b"]]

    def test_attaches_to_first_matching_column(self):
        blocks = [
            block("a", 0, 0),
            block("b", 120, 0, width=200),
            block("c", 130, 50, width=40),
        ]

        # c is within reach of both seeds; a's column was created first
        assert texts(group_by_columns(blocks)) == [["a", "c"], ["b"]]

    def test_empty(self):
        assert group_by_columns([]) == []


@pytest.mark.unit
class TestCombineCluster:
    def test_text_and_union_box(self):
        cluster = [
            TextBlock("Tomate Pera", Rect(10, 10, 110, 40)),
            TextBlock("1,39€", Rect(30, 50, 90, 80)),
        ]

        text, box = combine_cluster(cluster)

        assert text == "Tomate Pera\n1,39€"
        assert box == Rect(10, 10, 110, 80)

    def test_empty_cluster(self):
        with pytest.raises(ValueError):
            combine_cluster([])
