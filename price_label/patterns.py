"""
Declarative pattern tables for Spanish shelf price labels.

Every table is an ordered tuple of immutable ``PatternRule`` records and is
evaluated first-match-wins. Patterns are written against normalised text
(see ``normalize``): lower case, with decimal commas turned into dots.

For product rules the label is the canonical product name. For weight and
price rules the label names the resolver that turns the match into a
number (see ``price_label.extraction``).
"""

import re
from dataclasses import dataclass
from typing import Dict, Pattern, Tuple


@dataclass(frozen=True)
class PatternRule:
    """A compiled pattern and the label it resolves to."""

    pattern: Pattern[str]
    label: str

    def search(self, text: str):
        return self.pattern.search(text)


def _rules(*pairs: Tuple[str, str], prefix: str = "") -> Tuple[PatternRule, ...]:
    return tuple(
        PatternRule(re.compile(prefix + regex), label) for regex, label in pairs
    )


def normalize(text: str) -> str:
    """Lower-case a label line and use dots as the decimal separator."""
    return text.strip().lower().replace(",", ".")


# ── Product names ──────────────────────────────────────────────
# Compound varieties come before their bare words, and bare variety words
# before the generic "tomate". Every pattern starts at a word boundary.
PRODUCT_RULES = _rules(
    (r"tomate\s+pera", "Tomate Pera"),
    (r"tomate\s+rama", "Tomate Rama"),
    (r"tomate\s+cherry", "Tomate Cherry"),
    (r"tomate\s+natural", "Tomate"),
    (r"pera\s+fruta", "Pera"),
    (r"pera", "Tomate Pera"),
    (r"rama", "Tomate Rama"),
    (r"cherry", "Tomate Cherry"),
    (r"tomate", "Tomate"),
    (r"patata\s+(?:blanca|roja|nueva)", "Patata"),
    (r"patata", "Patata"),
    (r"cebolla", "Cebolla"),
    (r"lechuga", "Lechuga"),
    (r"zanahoria", "Zanahoria"),
    (r"pimiento", "Pimiento"),
    (r"calabac[íi]n", "Calabacín"),
    (r"berenjena", "Berenjena"),
    (r"pepino", "Pepino"),
    (r"apio", "Apio"),
    (r"br[óo]coli", "Brócoli"),
    (r"coliflor", "Coliflor"),
    (r"espinaca", "Espinaca"),
    (r"r[úu]cula", "Rúcula"),
    (r"acelga", "Acelga"),
    (r"nabo", "Nabo"),
    (r"r[áa]bano", "Rábano"),
    (r"puerro", "Puerro"),
    (r"ajo", "Ajo"),
    (r"jengibre", "Jengibre"),
    (r"lim[óo]n", "Limón"),
    (r"naranja", "Naranja"),
    (r"manzana", "Manzana"),
    (r"pl[áa]tano", "Plátano"),
    (r"melocot[óo]n", "Melocotón"),
    (r"albaricoque", "Albaricoque"),
    (r"ciruela", "Ciruela"),
    (r"uva", "Uva"),
    (r"fresa", "Fresa"),
    (r"sand[íi]a", "Sandía"),
    (r"mel[óo]n", "Melón"),
    (r"pi[ñn]a", "Piña"),
    (r"kiwi", "Kiwi"),
    (r"aguacate", "Aguacate"),
    (r"mango", "Mango"),
    (r"papaya", "Papaya"),
    prefix=r"\b",
)

# A line containing every listed word resolves to the compound name,
# whichever rule matched it.
NAME_OVERRIDES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("tomate", "pera"), "Tomate Pera"),
    (("tomate", "rama"), "Tomate Rama"),
    (("tomate", "cherry"), "Tomate Cherry"),
)

# ── Weights ────────────────────────────────────────────────────
WORD_NUMERALS: Dict[str, float] = {
    "un": 1.0,
    "1": 1.0,
    "dos": 2.0,
    "2": 2.0,
    "tres": 3.0,
    "3": 3.0,
}

WEIGHT_RULES = _rules(
    # "medio kilo", "1/2 kg", "½ kg"
    (r"(medio|media|1/2|½)\s*(kilo|kg|kilogramo)", "fraction"),
    # "un kilo", "2 kg", "tres kilos"
    (r"(?<![\w.])(un|1|dos|2|tres|3)\s*(kilo|kg|kilogramo)", "word_numeral"),
    # "0.5 kg", "1.5 kilo"
    (r"(?<![\d.])(0\.5|0\.25|0\.75|1\.5|2\.5)\s*(kg|kilo|kilogramo)", "decimal_kg"),
    # "500g", "250 gramos", "1.2 kg"
    (r"(\d+(?:\.\d+)?)\s*(gr?a?m?o?s?|kg|kilo|kilogramo)", "number_unit"),
)

# ── Prices ─────────────────────────────────────────────────────
PRICE_PER_KG_RULES = _rules(
    # "2.78€/kg", "2.78/kg"
    (r"(\d+\.\d{1,2})\s*€?\s*/\s*k?g", "amount"),
    # "€2.78/kg"
    (r"€\s*(\d+\.\d{1,2})\s*/\s*k?g", "amount"),
)

PRICE_RULES = _rules(
    # "€1.39"
    (r"€\s*(\d+\.\d{1,2})", "amount"),
    # "1.39€"
    (r"(\d+\.\d{1,2})\s*€", "amount"),
    # "1 euro y 39 céntimos"
    (r"(\d+)\s*euros?\s*(?:y\s*)?(\d+)\s*c[eé]ntimos?", "euros_and_cents"),
    # "1.39 euros"
    (r"(\d+)\.(\d{2})\s*euros?", "euros_and_cents"),
    # "139 céntimos"
    (r"(\d+)\s*c[eé]ntimos?", "cents"),
    # "159." printed with the decimal point lost
    (r"^(\d{3})[.:]\s*$", "truncated_cents"),
    # "2.19", "1.39:"
    (r"(?:^|\s)(\d{1,2}\.\d{2})[.:]?\s*$", "amount"),
)

# Label of the rule that is also tried on newline-separated fragments
FRAGMENT_RULE_LABEL = "truncated_cents"

# ── Legacy whole-text parse ────────────────────────────────────
LEGACY_EURO_PRICE = re.compile(
    r"(?:€\s*)?(\d+\.\d{1,2})\s*€?|€\s*(\d+\.\d{1,2})"
)
LEGACY_BARE_PRICE = re.compile(r"(\d+\.\d{1,2})")
LEGACY_WEIGHT = re.compile(
    r"(\d+(?:\.\d+)?)\s*(gr?|g|kg|kilo|gramo|kilogramo)"
)
LEGACY_UNIT_PRICE = re.compile(r"€\s*(\d+\.\d{1,2})\s*/\s*(kg|kilo)")
