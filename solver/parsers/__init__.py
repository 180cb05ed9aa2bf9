"""Document parser abstraction for PDFs (pymupdf4llm, Azure Document Intelligence) and images."""

from .factory import create_parser, parser_for_media_type, is_supported_media_type
from .base import BaseDocumentParser, ParsedDocument

__all__ = [
    "create_parser",
    "parser_for_media_type",
    "is_supported_media_type",
    "BaseDocumentParser",
    "ParsedDocument",
]
