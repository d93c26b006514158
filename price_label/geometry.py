"""Integer pixel rectangles and the overlay anchor transform.

All coordinates are image pixels with the origin at the top-left corner.
Rectangles are half-open on the right and bottom edges, matching the
bounding boxes reported by OCR engines.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from price_label.constants import (
    ANCHOR_HALF_EXTENT,
    ANCHOR_OFFSET_ABOVE_LABEL,
    DEFAULT_LABEL_BOX,
)


@dataclass(frozen=True)
class Rect:
    """
    Immutable axis-aligned rectangle in integer pixel units.

    Attributes:
        left: Left edge x coordinate
        top: Top edge y coordinate
        right: Right edge x coordinate
        bottom: Bottom edge y coordinate
    """

    left: int
    top: int
    right: int
    bottom: int

    def __post_init__(self) -> None:
        """Validate that all edges are integers and not inverted."""
        for field_name in ("left", "top", "right", "bottom"):
            val = getattr(self, field_name)
            if isinstance(val, bool) or not isinstance(val, int):
                raise ValueError(
                    f"{field_name} must be int, got {type(val).__name__}"
                )
        if self.right < self.left:
            raise ValueError(
                f"right ({self.right}) must be >= left ({self.left})"
            )
        if self.bottom < self.top:
            raise ValueError(
                f"bottom ({self.bottom}) must be >= top ({self.top})"
            )

    def width(self) -> int:
        return self.right - self.left

    def height(self) -> int:
        return self.bottom - self.top

    def area(self) -> int:
        return self.width() * self.height()

    def center_x(self) -> int:
        return (self.left + self.right) // 2

    def center_y(self) -> int:
        return (self.top + self.bottom) // 2

    def intersects(self, other: "Rect") -> bool:
        """Return True if the rectangles share a region of positive area.

        Rectangles that only touch along an edge do not intersect.
        """
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        """Return the overlapping rectangle, or None when disjoint."""
        if not self.intersects(other):
            return None
        return Rect(
            max(self.left, other.left),
            max(self.top, other.top),
            min(self.right, other.right),
            min(self.bottom, other.bottom),
        )

    def union(self, other: "Rect") -> "Rect":
        """Return the tight bounding rectangle of both rectangles."""
        return Rect(
            min(self.left, other.left),
            min(self.top, other.top),
            max(self.right, other.right),
            max(self.bottom, other.bottom),
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "left": self.left,
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Rect":
        """
        Create from dictionary.

        Args:
            d: Dict with 'left', 'top', 'right' and 'bottom' keys

        Returns:
            Rect instance
        """
        return cls(
            left=int(d["left"]),
            top=int(d["top"]),
            right=int(d["right"]),
            bottom=int(d["bottom"]),
        )

    @classmethod
    def from_xywh(cls, x: int, y: int, width: int, height: int) -> "Rect":
        """Create from a top-left corner and dimensions."""
        return cls(int(x), int(y), int(x) + int(width), int(y) + int(height))


def union_all(rects: Iterable[Rect]) -> Optional[Rect]:
    """Return the tight union of all rectangles, or None if there are none."""
    combined: Optional[Rect] = None
    for rect in rects:
        combined = rect if combined is None else combined.union(rect)
    return combined


def overlap_fraction(box: Rect, region: Rect) -> float:
    """Fraction of ``box``'s own area that lies inside ``region``."""
    box_area = box.area()
    if box_area <= 0:
        return 0.0
    overlap = box.intersection(region)
    if overlap is None:
        return 0.0
    return overlap.area() / box_area


def anchor_for(label_box: Optional[Rect]) -> Rect:
    """Place a small square marker centred above a price label.

    The marker is centred horizontally on the label and vertically
    ``ANCHOR_OFFSET_ABOVE_LABEL`` pixels above its top edge. Scaling into
    screen space is left to the presentation layer.

    Args:
        label_box: Bounding box of the source label, or None when the
            record came from a whole-text parse.

    Returns:
        Rect: The marker rectangle in image pixels.
    """
    if label_box is None:
        label_box = Rect(*DEFAULT_LABEL_BOX)
    center_x = label_box.center_x()
    center_y = label_box.top - ANCHOR_OFFSET_ABOVE_LABEL
    return Rect(
        center_x - ANCHOR_HALF_EXTENT,
        center_y - ANCHOR_HALF_EXTENT,
        center_x + ANCHOR_HALF_EXTENT,
        center_y + ANCHOR_HALF_EXTENT,
    )
