"""Constants shared across the price label analysis modules."""

# Placeholder name used when no product pattern matches a label
DEFAULT_PRODUCT_NAME = "Producto"

# ── Weight defaults ────────────────────────────────────────────
DEFAULT_WEIGHT_KG = 1.0
DEFAULT_WEIGHT_UNIT = "kg"
GRAM_UNIT = "g"

# ── Overlay anchor geometry (image pixels) ─────────────────────
ANCHOR_OFFSET_ABOVE_LABEL = 40
ANCHOR_HALF_EXTENT = 25
# (left, top, right, bottom) used when a record has no source label box
DEFAULT_LABEL_BOX = (0, 0, 100, 50)

# ── Deception heuristic thresholds ─────────────────────────────
PRICE_SPREAD_THRESHOLD = 0.5
UNIT_PRICE_TOLERANCE = 0.1
SUSPICIOUS_WEIGHTS = (0.5, 0.75, 0.25, 0.33, 0.66)
SUSPICIOUS_WEIGHT_TOLERANCE = 0.05
SMALL_PRINT_MARKERS = ("kilo", "kg", "/kg")

# ── Legacy whole-text parse ────────────────────────────────────
LEGACY_MAX_BARE_PRICE = 1000.0
