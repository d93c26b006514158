"""
Text recognition boundary.

The analysis pipeline only needs text blocks with bounding boxes. Any
object with an ``async recognize(image)`` method returning ``TextBlock``
objects can act as the recognizer; ``TesseractRecognizer`` is the bundled
implementation.
"""

import asyncio
import logging
from typing import Any, Dict, List, Protocol

import pytesseract
from PIL import Image as PIL_Image

from price_label.exceptions import RecognitionError
from price_label.geometry import Rect, union_all
from price_label.models import TextBlock

logger = logging.getLogger(__name__)


class TextRecognizer(Protocol):
    """Protocol for the OCR engine the analyzer awaits once per image."""

    async def recognize(self, image: PIL_Image.Image) -> List[TextBlock]:
        ...


def blocks_from_tesseract_data(data: Dict[str, List[Any]]) -> List[TextBlock]:
    """
    Build text blocks from ``pytesseract.image_to_data`` dictionary output.

    Words are grouped by Tesseract block number. Words on the same line are
    joined with spaces, lines with newlines, and the block box is the union
    of its word boxes. Empty words are skipped.

    Args:
        data: Output of ``image_to_data(..., output_type=Output.DICT)``

    Returns:
        List[TextBlock]: Blocks in Tesseract's reading order
    """
    blocks: Dict[Any, Dict[Any, List[str]]] = {}
    boxes: Dict[Any, List[Rect]] = {}

    for i in range(len(data["text"])):
        text = str(data["text"][i]).strip()
        if not text:
            continue
        block_key = (data["page_num"][i], data["block_num"][i])
        line_key = (data["par_num"][i], data["line_num"][i])
        blocks.setdefault(block_key, {}).setdefault(line_key, []).append(text)
        boxes.setdefault(block_key, []).append(
            Rect.from_xywh(
                data["left"][i],
                data["top"][i],
                data["width"][i],
                data["height"][i],
            )
        )

    return [
        TextBlock(
            text="\n".join(" ".join(words) for words in lines.values()),
            box=union_all(boxes[block_key]),
        )
        for block_key, lines in blocks.items()
    ]


def blocks_from_ocr_dict(ocr_data: Dict[str, Any]) -> List[TextBlock]:
    """Build text blocks from cached OCR JSON with a ``blocks`` list."""
    return [
        TextBlock(text=block["text"], box=Rect.from_dict(block["box"]))
        for block in ocr_data.get("blocks", [])
    ]


class TesseractRecognizer:
    """Recognizes text with the local Tesseract binary."""

    def __init__(self, language: str = "spa", config: str = "--oem 3 --psm 11"):
        self.language = language
        self.config = config

    def _image_to_data(self, image: PIL_Image.Image) -> Dict[str, List[Any]]:
        return pytesseract.image_to_data(
            image,
            lang=self.language,
            config=self.config,
            output_type=pytesseract.Output.DICT,
        )

    async def recognize(self, image: PIL_Image.Image) -> List[TextBlock]:
        """Run Tesseract in a worker thread and return its text blocks.

        Raises:
            RecognitionError: If Tesseract is missing or fails
        """
        try:
            data = await asyncio.to_thread(self._image_to_data, image)
        except (pytesseract.TesseractError, OSError) as e:
            raise RecognitionError(f"Tesseract failed: {e}") from e

        blocks = blocks_from_tesseract_data(data)
        logger.info(f"Tesseract recognized {len(blocks)} text blocks")
        return blocks
