"""
Label analysis pipeline.

``LabelAnalyzer`` ties region detection, block grouping and product
extraction together behind a fallback cascade:

1. blocks inside detected white label regions, grouped by proximity
2. all blocks grouped by proximity
3. all blocks grouped into columns
4. a single whole-text parse

A grouping stage is accepted as soon as it yields ``min_products``
records. If none does, the first grouping stage with any record wins, then
the whole-text parse. With nothing extracted the result is ``None``.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from PIL import Image as PIL_Image

from price_label.cluster import (
    combine_cluster,
    filter_blocks_in_regions,
    group_by_columns,
    group_by_proximity,
)
from price_label.config import DEFAULT_CONFIG, AnalyzerConfig
from price_label.exceptions import RecognitionError
from price_label.extraction import extract_product, parse_whole_text
from price_label.image import downscale, to_rgb_array
from price_label.models import AnalysisResult, ProductRecord, TextBlock
from price_label.ocr import TextRecognizer
from price_label.regions import WhiteLabelRegionDetector

logger = logging.getLogger(__name__)


class LabelAnalyzer:
    """
    Turns a shelf photograph into product price records.

    Args:
        recognizer: Text recognizer awaited by ``analyze_image``. Not needed
            when blocks are supplied directly to ``analyze``.
        config: Thresholds; defaults to ``DEFAULT_CONFIG``
    """

    def __init__(
        self,
        recognizer: Optional[TextRecognizer] = None,
        config: Optional[AnalyzerConfig] = None,
    ):
        self.recognizer = recognizer
        self.config = config or DEFAULT_CONFIG
        self.detector = WhiteLabelRegionDetector(self.config)

    def extract_clusters(
        self, clusters: Sequence[Sequence[TextBlock]]
    ) -> List[ProductRecord]:
        """Extract at most one product per non-empty cluster, in order."""
        products = []
        for index, cluster in enumerate(clusters):
            if not cluster:
                continue
            text, box = combine_cluster(cluster)
            product = extract_product(text, box)
            if product is not None:
                price = (
                    f"{product.displayed_price}€"
                    if product.has_price
                    else "no price"
                )
                logger.debug(f"Cluster {index}: {product.name} {price}")
                products.append(product)
        return products

    def analyze(
        self, pixels, blocks: Sequence[TextBlock]
    ) -> Optional[AnalysisResult]:
        """
        Run the fallback cascade over already-recognized text blocks.

        Args:
            pixels: RGB image (Pillow image or numpy array) used for region
                detection, or None to skip the region stage
            blocks: Recognized text blocks

        Returns:
            AnalysisResult, or None when no product could be extracted
        """
        if not blocks:
            logger.info("No text blocks to analyze")
            return None

        config = self.config
        stages = []
        if pixels is not None:
            regions = self.detector.detect(pixels)
            if regions:
                inside = filter_blocks_in_regions(
                    blocks, regions, config.region_overlap_ratio
                )
                stages.append(
                    (
                        "regions",
                        lambda: group_by_proximity(
                            inside, config.proximity_distance
                        ),
                    )
                )
        stages.append(
            (
                "proximity",
                lambda: group_by_proximity(blocks, config.proximity_distance),
            )
        )
        stages.append(
            ("columns", lambda: group_by_columns(blocks, config.column_offset))
        )

        fallback: Optional[List[ProductRecord]] = None
        for name, group in stages:
            products = self.extract_clusters(group())
            logger.info(f"Stage '{name}' extracted {len(products)} products")
            if len(products) >= config.min_products:
                return AnalysisResult(products)
            if products and fallback is None:
                fallback = products

        if fallback:
            return AnalysisResult(fallback)

        product = parse_whole_text("\n".join(block.text for block in blocks))
        if product is None:
            logger.info("No products found")
            return None
        logger.info("Using whole-text parse")
        return AnalysisResult([product])

    async def analyze_image(self, image) -> Optional[AnalysisResult]:
        """
        Recognize text in ``image`` once and analyze it.

        The image is downscaled to the configured bounds first. The
        cascade runs in a worker thread so region detection does not block
        the event loop. A recognition failure is logged and yields None.

        Raises:
            ValueError: If the analyzer has no recognizer
        """
        if self.recognizer is None:
            raise ValueError("analyze_image requires a text recognizer")

        if not isinstance(image, PIL_Image.Image):
            image = PIL_Image.fromarray(to_rgb_array(image))
        image = downscale(
            image.convert("RGB"),
            self.config.max_image_width,
            self.config.max_image_height,
        )
        pixels = to_rgb_array(image)

        try:
            blocks = await self.recognizer.recognize(image)
        except RecognitionError as e:
            logger.error(f"Text recognition failed: {e}", exc_info=True)
            return None

        return await asyncio.to_thread(self.analyze, pixels, blocks)
