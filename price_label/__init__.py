"""
Price Label - Reads Spanish shelf price labels and flags deceptive pricing.
"""

from .config import AnalyzerConfig, create_config_from_env
from .exceptions import InvalidImageError, PriceLabelError, RecognitionError
from .extraction import extract_product, parse_whole_text
from .geometry import Rect, anchor_for
from .models import AnalysisResult, ProductRecord, TextBlock
from .ocr import TesseractRecognizer, TextRecognizer
from .pipeline import LabelAnalyzer
from .regions import WhiteLabelRegionDetector
from .scoring import is_deceptive, round2, score_confidence
from .version import __version__

__all__ = [
    "LabelAnalyzer",
    "AnalyzerConfig",
    "create_config_from_env",
    "Rect",
    "anchor_for",
    "TextBlock",
    "ProductRecord",
    "AnalysisResult",
    "WhiteLabelRegionDetector",
    "extract_product",
    "parse_whole_text",
    "is_deceptive",
    "score_confidence",
    "round2",
    "TextRecognizer",
    "TesseractRecognizer",
    "PriceLabelError",
    "RecognitionError",
    "InvalidImageError",
    "__version__",
]
