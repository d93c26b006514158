"""Currency rounding, the deceptive-pricing heuristic and confidence scoring."""

import logging
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Optional, Sequence

from price_label.constants import (
    DEFAULT_WEIGHT_KG,
    PRICE_SPREAD_THRESHOLD,
    SMALL_PRINT_MARKERS,
    SUSPICIOUS_WEIGHT_TOLERANCE,
    SUSPICIOUS_WEIGHTS,
    UNIT_PRICE_TOLERANCE,
)

logger = logging.getLogger(__name__)

NAME_ONLY_CONFIDENCE = 0.3

# Confidence is accumulated in tenths so the result is an exact decimal
_BASE_TENTHS = 3
_PRICE_TENTHS = 2
_WEIGHT_TENTHS = 2
_UNIT_PRICE_TENTHS = 1
_NAME_TENTHS = 2
_MAX_TENTHS = 10

# Wide enough to quantize any finite float to the cent
_CURRENCY_CONTEXT = Context(prec=400)


def round2(value: float) -> float:
    """Round a currency value half-up on the cent.

    The value goes through its shortest decimal representation first, so
    ``round2(2.675) == 2.68`` even though the binary float is slightly
    below 2.675.

    Infinities raise ``decimal.InvalidOperation``.
    """
    return float(
        Decimal(str(value)).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP, context=_CURRENCY_CONTEXT
        )
    )


def is_deceptive(
    price: float,
    candidate_prices: Sequence[float],
    weight_kg: float,
    declared_unit_price: Optional[float],
    has_declared_unit_price: bool,
    raw_text: str,
) -> bool:
    """
    Decide whether a label's presentation is likely to mislead a shopper.

    Rules are evaluated in order and the first one that holds wins:

    1. The package weight is anything other than the 1 kg default.
    2. More than one price was seen and the largest and smallest differ by
       more than ``PRICE_SPREAD_THRESHOLD``.
    3. A declared €/kg price differs from ``price / weight_kg`` by more
       than ``UNIT_PRICE_TOLERANCE``.
    4. The text mentions kilograms while the package weighs under 1 kg.
    5. The weight is close to a suspicious fraction of a kilogram.

    Args:
        price: Displayed price
        candidate_prices: Every raw price read from the label
        weight_kg: Package weight in kilograms
        declared_unit_price: €/kg figure printed on the label, if any
        has_declared_unit_price: Whether a €/kg figure was read
        raw_text: Full label text

    Returns:
        bool: True when any rule holds
    """
    if weight_kg != DEFAULT_WEIGHT_KG:
        logger.debug(f"Deceptive: non-default weight {weight_kg}")
        return True

    if len(candidate_prices) > 1:
        spread = max(candidate_prices) - min(candidate_prices)
        if spread > PRICE_SPREAD_THRESHOLD:
            logger.debug(f"Deceptive: price spread {spread:.2f}")
            return True

    if has_declared_unit_price and declared_unit_price is not None:
        if abs(declared_unit_price - price / weight_kg) > UNIT_PRICE_TOLERANCE:
            logger.debug(
                f"Deceptive: declared {declared_unit_price} vs "
                f"computed {price / weight_kg:.2f}"
            )
            return True

    lowered = raw_text.lower()
    if weight_kg < 1.0 and any(
        marker in lowered for marker in SMALL_PRINT_MARKERS
    ):
        return True

    return any(
        abs(weight_kg - fraction) < SUSPICIOUS_WEIGHT_TOLERANCE
        for fraction in SUSPICIOUS_WEIGHTS
    )


def score_confidence(
    price_found: bool,
    weight_kg: float,
    has_declared_unit_price: bool,
    has_product_name: bool,
) -> float:
    """Additive extraction confidence, clamped to 1.0."""
    tenths = _BASE_TENTHS
    if price_found:
        tenths += _PRICE_TENTHS
    if weight_kg != DEFAULT_WEIGHT_KG:
        tenths += _WEIGHT_TENTHS
    if has_declared_unit_price:
        tenths += _UNIT_PRICE_TENTHS
    if has_product_name:
        tenths += _NAME_TENTHS
    return min(tenths, _MAX_TENTHS) / 10
