"""Custom exceptions for price label analysis."""


class PriceLabelError(Exception):
    """Base exception for all price_label errors."""


class RecognitionError(PriceLabelError):
    """Raised when the external text recognizer fails to process an image.

    The analysis pipeline never retries a failed recognition; it reports
    "no result" to its caller instead.
    """


class InvalidImageError(PriceLabelError, ValueError):
    """Raised when a pixel buffer cannot be interpreted as an RGB image."""
