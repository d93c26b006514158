"""Price Label Analyzer Configuration.

Thresholds for region detection, block grouping and the stage cascade,
plus the recognizer settings. Every value can be overridden through a
``PRICE_LABEL_*`` environment variable for tuning against new stores.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


@dataclass
class AnalyzerConfig:
    """Configuration for the label analysis pipeline."""

    # === White Label Detection ===

    # Side of the square probe block, in pixels (stride is half of it)
    probe_block_size: int = field(
        default_factory=lambda: int(
            os.getenv("PRICE_LABEL_PROBE_BLOCK_SIZE", "50")
        )
    )

    # Pixels whose mean channel value exceeds this are "white"
    brightness_threshold: int = field(
        default_factory=lambda: int(
            os.getenv("PRICE_LABEL_BRIGHTNESS_THRESHOLD", "200")
        )
    )

    # Fraction of white pixels a probe block needs to seed a region
    block_white_ratio: float = field(
        default_factory=lambda: float(
            os.getenv("PRICE_LABEL_BLOCK_WHITE_RATIO", "0.7")
        )
    )

    # Fraction of white pixels an edge column/row needs to keep expanding
    edge_white_ratio: float = field(
        default_factory=lambda: float(
            os.getenv("PRICE_LABEL_EDGE_WHITE_RATIO", "0.6")
        )
    )

    # Exclusive label size envelope, in pixels
    min_label_width: int = field(
        default_factory=lambda: int(
            os.getenv("PRICE_LABEL_MIN_WIDTH", "80")
        )
    )
    max_label_width: int = field(
        default_factory=lambda: int(
            os.getenv("PRICE_LABEL_MAX_WIDTH", "500")
        )
    )
    min_label_height: int = field(
        default_factory=lambda: int(
            os.getenv("PRICE_LABEL_MIN_HEIGHT", "60")
        )
    )
    max_label_height: int = field(
        default_factory=lambda: int(
            os.getenv("PRICE_LABEL_MAX_HEIGHT", "400")
        )
    )

    # === Block Grouping ===

    # Share of a block's area that must lie inside a label region
    region_overlap_ratio: float = field(
        default_factory=lambda: float(
            os.getenv("PRICE_LABEL_REGION_OVERLAP", "0.3")
        )
    )

    # Centre-to-centre distance for proximity clusters
    proximity_distance: float = field(
        default_factory=lambda: float(
            os.getenv("PRICE_LABEL_PROXIMITY_DISTANCE", "200")
        )
    )

    # Centre-x offset for column clusters
    column_offset: float = field(
        default_factory=lambda: float(
            os.getenv("PRICE_LABEL_COLUMN_OFFSET", "150")
        )
    )

    # Records a grouping stage must yield to be accepted outright
    min_products: int = field(
        default_factory=lambda: int(
            os.getenv("PRICE_LABEL_MIN_PRODUCTS", "2")
        )
    )

    # === Image Acquisition ===

    max_image_width: int = field(
        default_factory=lambda: int(
            os.getenv("PRICE_LABEL_MAX_IMAGE_WIDTH", "1920")
        )
    )
    max_image_height: int = field(
        default_factory=lambda: int(
            os.getenv("PRICE_LABEL_MAX_IMAGE_HEIGHT", "1080")
        )
    )

    # === Text Recognition ===

    ocr_language: str = field(
        default_factory=lambda: os.getenv("PRICE_LABEL_OCR_LANGUAGE", "spa")
    )
    tesseract_config: str = field(
        default_factory=lambda: os.getenv(
            "PRICE_LABEL_TESSERACT_CONFIG", "--oem 3 --psm 11"
        )
    )

    def validate(self) -> None:
        """Validate configuration values are reasonable."""
        if self.probe_block_size < 2:
            raise ValueError(
                f"probe_block_size must be >= 2, got {self.probe_block_size}"
            )

        if not 0 <= self.brightness_threshold <= 255:
            raise ValueError(
                f"brightness_threshold must be 0-255, got {self.brightness_threshold}"
            )

        for name in (
            "block_white_ratio",
            "edge_white_ratio",
            "region_overlap_ratio",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be 0-1, got {value}")

        if not 0 <= self.min_label_width < self.max_label_width:
            raise ValueError(
                f"label width envelope ({self.min_label_width}, "
                f"{self.max_label_width}) is empty"
            )

        if not 0 <= self.min_label_height < self.max_label_height:
            raise ValueError(
                f"label height envelope ({self.min_label_height}, "
                f"{self.max_label_height}) is empty"
            )

        if self.proximity_distance <= 0:
            raise ValueError(
                f"proximity_distance must be > 0, got {self.proximity_distance}"
            )

        if self.column_offset <= 0:
            raise ValueError(
                f"column_offset must be > 0, got {self.column_offset}"
            )

        if self.min_products < 1:
            raise ValueError(
                f"min_products must be >= 1, got {self.min_products}"
            )

        if self.max_image_width <= 0 or self.max_image_height <= 0:
            raise ValueError(
                f"max image size must be positive, got "
                f"{self.max_image_width}x{self.max_image_height}"
            )

        if not self.ocr_language:
            raise ValueError("ocr_language must not be empty")


# Default configuration instance
DEFAULT_CONFIG = AnalyzerConfig()


def create_config_from_env(env_file: Optional[str] = None) -> AnalyzerConfig:
    """Create configuration from environment variables.

    Variables already set in the process environment take precedence over
    those read from ``env_file`` (or a ``.env`` found from the working
    directory when no file is given).
    """
    load_dotenv(dotenv_path=env_file)
    config = AnalyzerConfig()
    config.validate()
    return config
