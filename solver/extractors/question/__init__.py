"""
Question extractors.

This package contains the strategies for extracting questions from document pages.
"""

from .batch_llm import BatchLLMQuestionExtractor

__all__ = ["BatchLLMQuestionExtractor"]
