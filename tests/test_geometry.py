"""Tests for rectangles and the overlay anchor."""

import pytest

from price_label.geometry import Rect, anchor_for, overlap_fraction, union_all


@pytest.mark.unit
class TestRect:
    def test_dimensions_and_center(self):
        rect = Rect(10, 20, 111, 61)

        assert rect.width() == 101
        assert rect.height() == 41
        assert rect.area() == 101 * 41
        assert rect.center_x() == 60
        assert rect.center_y() == 40

    def test_rejects_inverted_edges(self):
        with pytest.raises(ValueError, match="right"):
            Rect(10, 0, 5, 10)
        with pytest.raises(ValueError, match="bottom"):
            Rect(0, 10, 10, 5)

    @pytest.mark.parametrize("bad", [1.5, "1", True, None])
    def test_rejects_non_integer_coordinates(self, bad):
        with pytest.raises(ValueError, match="must be int"):
            Rect(bad, 0, 10, 10)

    def test_intersection_of_overlapping_rects(self):
        a = Rect(0, 0, 100, 100)
        b = Rect(50, 50, 150, 150)

        assert a.intersects(b)
        assert a.intersection(b) == Rect(50, 50, 100, 100)

    def test_touching_rects_do_not_intersect(self):
        a = Rect(0, 0, 10, 10)
        b = Rect(10, 0, 20, 10)

        assert not a.intersects(b)
        assert a.intersection(b) is None

    def test_union(self):
        assert Rect(0, 0, 100, 100).union(Rect(50, 50, 150, 150)) == Rect(
            0, 0, 150, 150
        )

    def test_dict_round_trip(self):
        rect = Rect(1, 2, 3, 4)

        assert rect.to_dict() == {"left": 1, "top": 2, "right": 3, "bottom": 4}
        assert Rect.from_dict(rect.to_dict()) == rect

    def test_from_xywh(self):
        assert Rect.from_xywh(10, 20, 30, 40) == Rect(10, 20, 40, 60)


@pytest.mark.unit
class TestRectHelpers:
    def test_union_all(self):
        rects = [Rect(5, 5, 10, 10), Rect(0, 7, 3, 20), Rect(8, 1, 12, 4)]

        assert union_all(rects) == Rect(0, 1, 12, 20)
        assert union_all([]) is None

    def test_overlap_fraction(self):
        box = Rect(0, 0, 10, 10)

        assert overlap_fraction(box, Rect(0, 0, 10, 10)) == 1.0
        assert overlap_fraction(box, Rect(5, 0, 20, 10)) == 0.5
        assert overlap_fraction(box, Rect(20, 20, 30, 30)) == 0.0

    def test_overlap_fraction_of_empty_box_is_zero(self):
        assert overlap_fraction(Rect(5, 5, 5, 10), Rect(0, 0, 20, 20)) == 0.0


@pytest.mark.unit
class TestAnchor:
    def test_anchor_sits_above_label(self):
        label = Rect(100, 200, 300, 260)

        assert anchor_for(label) == Rect(175, 135, 225, 185)

    def test_anchor_is_square_of_fixed_size(self):
        anchor = anchor_for(Rect(0, 500, 41, 600))

        assert anchor.width() == 50
        assert anchor.height() == 50
        assert anchor.center_x() == 20
        assert anchor.bottom == 500 - 15

    def test_missing_label_uses_default_box(self):
        assert anchor_for(None) == Rect(25, -65, 75, -15)
