"""
Product extraction from the text of one price label.

``extract_product`` reads the name, package weight and prices from a
cluster of OCR text and assembles a ``ProductRecord``. ``parse_whole_text``
is the coarse single-placard parse used when no cluster yields a product.
"""

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Match, Optional, Sequence, Tuple

from price_label.constants import (
    DEFAULT_PRODUCT_NAME,
    DEFAULT_WEIGHT_KG,
    DEFAULT_WEIGHT_UNIT,
    GRAM_UNIT,
    LEGACY_MAX_BARE_PRICE,
)
from price_label.geometry import Rect, anchor_for
from price_label.models import ProductRecord
from price_label.patterns import (
    FRAGMENT_RULE_LABEL,
    LEGACY_BARE_PRICE,
    LEGACY_EURO_PRICE,
    LEGACY_UNIT_PRICE,
    LEGACY_WEIGHT,
    NAME_OVERRIDES,
    PRICE_PER_KG_RULES,
    PRICE_RULES,
    PRODUCT_RULES,
    WEIGHT_RULES,
    WORD_NUMERALS,
    PatternRule,
    normalize,
)
from price_label.scoring import (
    NAME_ONLY_CONFIDENCE,
    is_deceptive,
    round2,
    score_confidence,
)

logger = logging.getLogger(__name__)

Weight = Tuple[float, str]

_THOUSAND = Decimal(1000)
_HUNDRED = Decimal(100)


def _split_lines(text: str) -> List[str]:
    lines = (normalize(raw) for raw in text.split("\n"))
    return [line for line in lines if line]


def _finite_float(text: str) -> Optional[float]:
    value = float(text)
    return value if math.isfinite(value) else None


def _per_kg(price: float, weight_kg: float) -> Optional[float]:
    """``price / weight_kg`` on the cent, or None if it overflows."""
    value = price / weight_kg
    if not math.isfinite(value):
        return None
    return round2(value)


# ── Resolvers: match → value, None when the match is unusable ──


def _fraction_weight(match: Match) -> Optional[Weight]:
    return 0.5, DEFAULT_WEIGHT_UNIT


def _numeral_weight(match: Match) -> Optional[Weight]:
    return WORD_NUMERALS[match.group(1)], DEFAULT_WEIGHT_UNIT


def _decimal_weight(match: Match) -> Optional[Weight]:
    return float(Decimal(match.group(1))), DEFAULT_WEIGHT_UNIT


def _unit_weight(match: Match) -> Optional[Weight]:
    value = Decimal(match.group(1))
    if value <= 0:
        return None
    unit = match.group(2)
    if unit.startswith("k"):
        return float(value), DEFAULT_WEIGHT_UNIT
    return float(value / _THOUSAND), GRAM_UNIT


_WEIGHT_RESOLVERS: Dict[str, Callable[[Match], Optional[Weight]]] = {
    "fraction": _fraction_weight,
    "word_numeral": _numeral_weight,
    "decimal_kg": _decimal_weight,
    "number_unit": _unit_weight,
}


def _amount(match: Match) -> Decimal:
    return Decimal(match.group(1))


def _euros_and_cents(match: Match) -> Decimal:
    return Decimal(match.group(1)) + Decimal(match.group(2)) / _HUNDRED


def _cents(match: Match) -> Decimal:
    return Decimal(match.group(1)) / _HUNDRED


def _truncated_cents(match: Match) -> Optional[Decimal]:
    digits = int(match.group(1))
    if digits < 100:
        return None
    return Decimal(digits) / _HUNDRED


_PRICE_RESOLVERS: Dict[str, Callable[[Match], Optional[Decimal]]] = {
    "amount": _amount,
    "euros_and_cents": _euros_and_cents,
    "cents": _cents,
    "truncated_cents": _truncated_cents,
}


def _first_positive(
    rule: PatternRule, text: str, resolvers: Dict[str, Callable]
):
    """First positive finite value a match of ``rule`` resolves to."""
    resolve = resolvers[rule.label]
    for match in rule.pattern.finditer(text):
        try:
            value = resolve(match)
        except (ValueError, InvalidOperation, KeyError):
            continue
        if value is None:
            continue
        number = value[0] if isinstance(value, tuple) else value
        if number > 0 and math.isfinite(float(number)):
            return value
    return None


# ── Field resolution ───────────────────────────────────────────


def resolve_name(lines: Sequence[str]) -> Optional[str]:
    """Canonical product name from the first line any product rule matches."""
    for line in lines:
        for rule in PRODUCT_RULES:
            if not rule.search(line):
                continue
            name = rule.label
            for words, override in NAME_OVERRIDES:
                if all(word in line for word in words):
                    name = override
                    break
            logger.debug(f"Name '{name}' from line '{line}'")
            return name
    return None


def resolve_weight(lines: Sequence[str]) -> Optional[Weight]:
    """Package weight in kilograms and the unit it was written in."""
    for line in lines:
        for rule in WEIGHT_RULES:
            weight = _first_positive(rule, line, _WEIGHT_RESOLVERS)
            if weight is not None:
                logger.debug(f"Weight {weight} from '{line}' ({rule.label})")
                return weight
    return None


def resolve_unit_price(lines: Sequence[str]) -> Optional[float]:
    """The €/kg price printed on the label, if any line carries one."""
    for line in lines:
        for rule in PRICE_PER_KG_RULES:
            value = _first_positive(rule, line, _PRICE_RESOLVERS)
            if value is not None:
                logger.debug(f"Unit price {value}/kg from '{line}'")
                return round2(float(value))
    return None


def _strip_unit_prices(text: str) -> str:
    for rule in PRICE_PER_KG_RULES:
        text = rule.pattern.sub(" ", text)
    return text.strip()


def _match_price(text: str) -> Optional[float]:
    for rule in PRICE_RULES:
        value = _first_positive(rule, text, _PRICE_RESOLVERS)
        if value is not None:
            return round2(float(value))

    fragment_rules = [r for r in PRICE_RULES if r.label == FRAGMENT_RULE_LABEL]
    for fragment in text.split("\n"):
        fragment = fragment.strip()
        if not fragment or fragment == text:
            continue
        for rule in fragment_rules:
            value = _first_positive(rule, fragment, _PRICE_RESOLVERS)
            if value is not None:
                return round2(float(value))
    return None


def resolve_plain_price(
    lines: Sequence[str], whole_text: str
) -> Tuple[Optional[float], List[float]]:
    """
    Run the plain price cascade over each line, then over the whole text.

    €/kg fragments are removed first so they are not read as package
    prices.

    Returns:
        Tuple of the first price found (or None) and the first price of
        every line that has one.
    """
    price = None
    candidates: List[float] = []
    for line in lines:
        value = _match_price(_strip_unit_prices(line))
        if value is None:
            continue
        candidates.append(value)
        if price is None:
            logger.debug(f"Price {value} from '{line}'")
            price = value

    if price is None:
        joined = "\n".join(
            _strip_unit_prices(line) for line in whole_text.split("\n")
        )
        price = _match_price(joined.strip())
    return price, candidates


# ── Record assembly ────────────────────────────────────────────


def extract_product(
    cluster_text: str, cluster_box: Optional[Rect]
) -> Optional[ProductRecord]:
    """
    Extract one product from the text of a label cluster.

    When the label prints a €/kg price it is displayed as a per-kilogram
    record, unless the label also states a package weight and a separate
    package price; then the package price is displayed and the €/kg figure
    is kept as ``declared_unit_price``.

    Args:
        cluster_text: Newline-joined text of the cluster's blocks
        cluster_box: Union of the cluster's block boxes

    Returns:
        A full record when a price was read, a name-only record when only
        the product name was read, otherwise None.
    """
    lines = _split_lines(cluster_text)
    if not lines:
        return None

    name = resolve_name(lines)
    weight_kg, weight_unit = resolve_weight(lines) or (
        DEFAULT_WEIGHT_KG,
        DEFAULT_WEIGHT_UNIT,
    )
    declared = resolve_unit_price(lines)
    plain, candidates = resolve_plain_price(lines, normalize(cluster_text))
    anchor = anchor_for(cluster_box)

    explicit_weight = weight_kg != DEFAULT_WEIGHT_KG
    if declared is not None and plain is not None and explicit_weight:
        price, per_kg = plain, False
    elif declared is not None:
        price, per_kg = declared, True
    else:
        price, per_kg = plain, False

    price_per_kg = price
    if price is not None and not per_kg:
        price_per_kg = _per_kg(price, weight_kg)
        if price_per_kg is None:
            logger.debug(
                f"€/kg price overflows at weight {weight_kg}; using 1 kg"
            )
            weight_kg, weight_unit = DEFAULT_WEIGHT_KG, DEFAULT_WEIGHT_UNIT
            if declared is not None:
                price, per_kg = declared, True
            price_per_kg = price

    if price is None:
        if name is None:
            return None
        return ProductRecord(
            name=name,
            displayed_price=0.0,
            price_per_kg=0.0,
            anchor=anchor,
            confidence=NAME_ONLY_CONFIDENCE,
        )

    if declared is not None:
        candidates.append(declared)

    return ProductRecord(
        name=name or DEFAULT_PRODUCT_NAME,
        displayed_price=price,
        price_per_kg=price_per_kg,
        anchor=anchor,
        weight_kg=weight_kg,
        weight_unit=weight_unit,
        is_price_per_kg=per_kg,
        is_deceptive=is_deceptive(
            price,
            candidates,
            weight_kg,
            declared,
            declared is not None,
            cluster_text,
        ),
        confidence=score_confidence(
            price_found=True,
            weight_kg=weight_kg,
            has_declared_unit_price=declared is not None,
            has_product_name=name is not None,
        ),
        declared_unit_price=declared,
    )


def parse_whole_text(text: str) -> Optional[ProductRecord]:
    """
    Coarse parse of all recognised text as a single placard.

    Every euro price is collected (bare decimals only until a price has
    been seen), the last weight mention wins, and the largest price is
    displayed. The record is only flagged deceptive when a weight was read.
    """
    prices: List[float] = []
    weight = 0.0
    weight_unit = ""
    unit_price: Optional[float] = None

    for line in _split_lines(text):
        for match in LEGACY_EURO_PRICE.finditer(line):
            for group in match.groups():
                value = _finite_float(group) if group else None
                if value:
                    prices.append(value)

        if not prices:
            for match in LEGACY_BARE_PRICE.finditer(line):
                value = _finite_float(match.group(1))
                if value and value < LEGACY_MAX_BARE_PRICE:
                    prices.append(value)

        weight_match = LEGACY_WEIGHT.search(line)
        value = _finite_float(weight_match.group(1)) if weight_match else None
        if value is not None:
            if weight_match.group(2).startswith("k"):
                weight, weight_unit = value, DEFAULT_WEIGHT_UNIT
            else:
                weight, weight_unit = value / 1000, GRAM_UNIT

        unit_match = LEGACY_UNIT_PRICE.search(line)
        if unit_match:
            unit_price = _finite_float(unit_match.group(1))

    if not prices:
        logger.info("No prices found in text")
        return None

    price = round2(max(prices))
    effective_weight = weight if weight > 0 else DEFAULT_WEIGHT_KG
    price_per_kg = _per_kg(price, effective_weight)
    if price_per_kg is None:
        logger.info(f"Ignoring weight {weight}: the €/kg price overflows")
        weight, weight_unit = 0.0, ""
        effective_weight = DEFAULT_WEIGHT_KG
        price_per_kg = price
    logger.info(
        f"Whole-text parse found prices {prices}, weight {weight}, "
        f"displaying {price}"
    )
    deceptive = is_deceptive(
        price,
        prices,
        effective_weight,
        unit_price,
        unit_price is not None,
        text,
    )
    return ProductRecord(
        name=DEFAULT_PRODUCT_NAME,
        displayed_price=price,
        price_per_kg=price_per_kg,
        anchor=anchor_for(None),
        weight_kg=effective_weight,
        weight_unit=weight_unit or DEFAULT_WEIGHT_UNIT,
        is_deceptive=deceptive and weight > 0,
        confidence=score_confidence(
            price_found=True,
            weight_kg=effective_weight,
            has_declared_unit_price=unit_price is not None,
            has_product_name=False,
        ),
        declared_unit_price=(
            round2(unit_price) if unit_price is not None else None
        ),
    )
