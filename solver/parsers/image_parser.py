"""Image upload parser."""

import base64
from typing import Union, BinaryIO

from solver.extractors.base import Page
from .base import BaseDocumentParser, ParsedDocument

IMAGE_MEDIA_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/gif", "image/webp"}


class ImageParser(BaseDocumentParser):
    """
    Wraps a single uploaded image as a one-page document.

    The image is passed to the vision model as a base64 data URL, so the
    whole image is one extraction unit.
    """

    def __init__(self, media_type: str = "image/png"):
        self.media_type = media_type

    def parse(self, file_content: Union[bytes, BinaryIO]) -> ParsedDocument:
        if hasattr(file_content, "read"):
            file_content = file_content.read()

        encoded = base64.b64encode(file_content).decode("ascii")
        image_url = f"data:{self.media_type};base64,{encoded}"

        return ParsedDocument(
            pages=[Page(page_number=1, image_url=image_url)],
            format='image',
            metadata={'parser': 'image', 'media_type': self.media_type, 'bytes': len(file_content)}
        )
