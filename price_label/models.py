"""
Value objects exchanged between the analysis stages and their callers.

Classes:
    TextBlock: One OCR-recognised text region with its bounding box
    ProductRecord: One product extracted from a price label
    AnalysisResult: Ordered products found in one image
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from price_label.constants import DEFAULT_WEIGHT_KG, DEFAULT_WEIGHT_UNIT
from price_label.geometry import Rect


@dataclass(frozen=True)
class TextBlock:
    """
    Immutable OCR text block.

    Attributes:
        text: Recognised text, possibly spanning several lines
        box: Bounding box in image pixel coordinates
    """

    text: str
    box: Rect

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise ValueError(
                f"text must be str, got {type(self.text).__name__}"
            )
        if not isinstance(self.box, Rect):
            raise ValueError(
                f"box must be Rect, got {type(self.box).__name__}"
            )


@dataclass(frozen=True)
class ProductRecord:
    """
    A product read from a single price label.

    ``price_per_kg`` equals ``displayed_price`` when the label shows a
    per-kilogram price; otherwise it is the displayed price divided by the
    package weight, rounded to the cent.

    Attributes:
        name: Canonical product name or the generic placeholder
        displayed_price: Most prominent price on the label (0 if none read)
        weight_kg: Package weight in kilograms
        weight_unit: Unit the weight was written in ("kg" or "g")
        price_per_kg: Normalised price per kilogram
        is_price_per_kg: Whether the displayed price is itself per kilogram
        is_deceptive: Result of the deceptive-pricing heuristic
        confidence: Heuristic score in [0, 1]
        anchor: Marker rectangle placed above the source label
        declared_unit_price: Per-kilogram price printed on the label, if read
    """

    name: str
    displayed_price: float
    price_per_kg: float
    anchor: Rect
    weight_kg: float = DEFAULT_WEIGHT_KG
    weight_unit: str = DEFAULT_WEIGHT_UNIT
    is_price_per_kg: bool = False
    is_deceptive: bool = False
    confidence: float = 0.0
    declared_unit_price: Optional[float] = None

    def __post_init__(self) -> None:
        if self.displayed_price < 0:
            raise ValueError(
                f"displayed_price must be >= 0, got {self.displayed_price}"
            )
        if self.price_per_kg < 0:
            raise ValueError(
                f"price_per_kg must be >= 0, got {self.price_per_kg}"
            )
        if self.weight_kg <= 0:
            raise ValueError(f"weight_kg must be > 0, got {self.weight_kg}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"confidence must be 0-1, got {self.confidence}"
            )

    @property
    def has_price(self) -> bool:
        return self.displayed_price > 0

    def summary(self) -> str:
        """One-line description used by product lists."""
        text = f"{self.price_per_kg:.2f}€/kg"
        if self.weight_kg != DEFAULT_WEIGHT_KG:
            text += f" • {self.weight_kg}{self.weight_unit}"
        if self.is_deceptive:
            text += " ⚠️ POSIBLE ENGAÑO"
        return text

    def details(self, number: Optional[int] = None) -> str:
        """Multi-line description shown when a product marker is opened."""
        lines = []
        if number is not None:
            lines.extend([f"Producto #{number}", ""])
        lines.extend(
            [
                f"Nombre: {self.name}",
                f"Precio: {self.displayed_price}€",
                f"Peso: {self.weight_kg} {self.weight_unit}",
                f"Precio por kg: {self.price_per_kg:.2f}€",
                f"Confianza: {int(self.confidence * 100)}%",
            ]
        )
        if self.is_deceptive:
            lines.extend(["", "⚠️ Posible precio engañoso"])
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "displayed_price": self.displayed_price,
            "weight_kg": self.weight_kg,
            "weight_unit": self.weight_unit,
            "price_per_kg": self.price_per_kg,
            "is_price_per_kg": self.is_price_per_kg,
            "is_deceptive": self.is_deceptive,
            "confidence": self.confidence,
            "anchor": self.anchor.to_dict(),
            "declared_unit_price": self.declared_unit_price,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Products extracted from one image, in extraction order."""

    products: Tuple[ProductRecord, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "products", tuple(self.products))

    @property
    def count(self) -> int:
        return len(self.products)

    @property
    def has_deceptive_products(self) -> bool:
        return any(product.is_deceptive for product in self.products)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "products": [product.to_dict() for product in self.products],
        }
