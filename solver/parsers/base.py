"""Common result type and interface for upload parsers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, List, Union, BinaryIO

from solver.extractors.base import Page


@dataclass
class ParsedDocument:
    """
    Pages produced from one upload, whichever parser ran.

    The pipeline only sees ``pages``; ``format`` and ``metadata`` are for logs.
    """
    pages: List[Page] # One entry per page, 1-based and contiguous
    format: str # 'plain_text', 'markdown' or 'image'
    metadata: Dict[str, Any] = field(default_factory=dict) # Parser-specific metadata

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def content(self) -> str:
        """All page text joined, for language detection and logging."""
        return "\n\n".join(p.text for p in self.pages if p.text)

    @property
    def has_content(self) -> bool:
        return any(p.has_content for p in self.pages)


class BaseDocumentParser(ABC):
    """Turns uploaded bytes into pages. Runs in a worker thread."""

    @abstractmethod
    def parse(self, file_content: Union[bytes, BinaryIO]) -> ParsedDocument:
        """
        Split the upload into numbered pages.

        Args:
            file_content: Document as bytes or file-like object

        Returns:
            ParsedDocument with one Page per document page
        """
        pass
