"""OCR parsing of scanned tests with Azure Document Intelligence."""

import os
from collections import defaultdict
from dataclasses import dataclass
from typing import BinaryIO, Dict, List, Optional, Union
from azure.core.credentials import AzureKeyCredential
from azure.ai.documentintelligence import DocumentIntelligenceClient

from solver.extractors.base import Page
from .base import BaseDocumentParser, ParsedDocument

LAYOUT_MODEL = "prebuilt-layout"
DEFAULT_PAGE_HEIGHT = 11.0  # inches, US letter


@dataclass
class MarginFilter:
    """Drops running headers and footers, given as fractions of page height."""
    top: float = 0.10
    bottom: float = 0.10

    def is_in_margin(self, y_center: float, page_height: float) -> bool:
        relative_y = y_center / page_height
        return relative_y < self.top or relative_y > 1 - self.bottom


def _y_center(region) -> Optional[float]:
    """Vertical midpoint of a bounding polygon [x1, y1, ..., x4, y4]."""
    polygon = region.polygon or []
    ys = polygon[1::2]
    if len(ys) < 4:
        return None
    return sum(ys) / len(ys)


class AzureDocumentParser(BaseDocumentParser):
    """
    Layout-model OCR, regrouped into one text Page per document page.

    Paragraphs without a bounding region are assigned to page 1 and never
    margin-filtered.
    """

    def __init__(self, margin_filter: Optional[MarginFilter] = None, client=None):
        if client is None:
            endpoint = os.getenv("DI_ENDPOINT")
            key = os.getenv("DI_KEY")
            if not endpoint or not key:
                raise ValueError("Azure Document Intelligence parser needs DI_ENDPOINT and DI_KEY")
            client = DocumentIntelligenceClient(endpoint=endpoint, credential=AzureKeyCredential(key))

        self.client = client
        self.margin_filter = margin_filter

    def parse(self, file_content: Union[bytes, BinaryIO]) -> ParsedDocument:
        result = self.client.begin_analyze_document(LAYOUT_MODEL, file_content).result()

        heights = {p.page_number: p.height or DEFAULT_PAGE_HEIGHT for p in result.pages}
        by_page: Dict[int, List[str]] = defaultdict(list)
        dropped = 0

        for paragraph in result.paragraphs or []:
            regions = getattr(paragraph, "bounding_regions", None)
            region = regions[0] if regions else None
            page_number = region.page_number if region else 1

            if region and self._in_margin(region, heights):
                dropped += 1
                continue
            by_page[page_number].append(paragraph.content)

        pages = [
            Page(page_number=number, text="\n\n".join(by_page.get(number, [])))
            for number in range(1, len(result.pages) + 1)
        ]

        return ParsedDocument(
            pages=pages,
            format="plain_text",
            metadata={
                "parser": "azure_document_intelligence",
                "paragraphs_count": sum(len(texts) for texts in by_page.values()),
                "margin_paragraphs_dropped": dropped,
                "filtered_margins": self.margin_filter is not None,
            }
        )

    def _in_margin(self, region, heights: Dict[int, float]) -> bool:
        if self.margin_filter is None:
            return False
        y_center = _y_center(region)
        if y_center is None:
            return False
        page_height = heights.get(region.page_number, DEFAULT_PAGE_HEIGHT)
        return self.margin_filter.is_in_margin(y_center, page_height)
