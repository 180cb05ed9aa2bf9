"""Factory for creating document parsers."""

import os
from typing import Optional
from .base import BaseDocumentParser
from .azure_parser import AzureDocumentParser, MarginFilter
from .pymupdf_parser import PyMuPDFParser
from .image_parser import ImageParser, IMAGE_MEDIA_TYPES

PDF_MEDIA_TYPE = "application/pdf"


def create_parser(parser_type: Optional[str] = None) -> BaseDocumentParser:
    """ Create PDF parser based on configuration. """
    if parser_type is None:
        parser_type = os.getenv("DOCUMENT_PARSER", "pymupdf").lower()
    else:
        parser_type = parser_type.lower()

    if parser_type == "azure":
        return AzureDocumentParser(margin_filter=MarginFilter())

    elif parser_type == "pymupdf":
        return PyMuPDFParser()

    elif parser_type == "pymupdf_text":
        return PyMuPDFParser(markdown=False)

    else:
        raise ValueError(
            f"Unknown document parser: {parser_type}. Use 'azure', 'pymupdf' or 'pymupdf_text'"
        )


def is_supported_media_type(media_type: Optional[str]) -> bool:
    media_type = (media_type or "").split(";")[0].strip().lower()
    return media_type == PDF_MEDIA_TYPE or media_type in IMAGE_MEDIA_TYPES


def parser_for_media_type(media_type: str, parser_type: Optional[str] = None) -> BaseDocumentParser:
    """
    Pick the parser for an upload's declared media type.

    Raises:
        ValueError: the media type is neither a PDF nor a supported image
    """
    media_type = (media_type or "").split(";")[0].strip().lower()

    if media_type == PDF_MEDIA_TYPE:
        return create_parser(parser_type)

    if media_type in IMAGE_MEDIA_TYPES:
        return ImageParser(media_type="image/jpeg" if media_type == "image/jpg" else media_type)

    raise ValueError(f"Unsupported media type: {media_type or 'unknown'}")
