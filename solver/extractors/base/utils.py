"""
Shared utility functions for the extraction and solving stages.

This module provides common functionality used across stages, such as
page batching, response cleanup and rate limiting.
"""

import asyncio
import json
import logging
import re
from typing import Any, Iterable, List, Optional

from .models import Page, Batch

logger = logging.getLogger(__name__)


# =============================================================================
# PAGE BATCHING
# =============================================================================

def plan_batches(pages: Iterable[Page], batch_size: int = 3) -> List[Batch]:
    """
    Group an ordered sequence of pages into contiguous batches.

    Every batch holds ``batch_size`` pages except possibly the last one.
    Concatenating the batches reproduces the input order exactly.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be a positive integer, got {batch_size}")

    batches = []
    current = []

    for page in pages:
        current.append(page)
        if len(current) == batch_size:
            batches.append(Batch(pages=tuple(current)))
            current = []

    if current:
        batches.append(Batch(pages=tuple(current)))

    return batches


def join_pages(batch: Batch, page_marker: str = "=== PAGE {page_number} ===") -> str:
    """ Concatenate a batch's page text with a marker naming each page. """
    parts = []
    for page in batch.pages:
        parts.append(page_marker.format(page_number=page.page_number))
        parts.append(page.text.strip())
    return "\n".join(parts)


# =============================================================================
# RESPONSE CLEANUP
# =============================================================================

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """ Remove a surrounding ```json fence some models add despite JSON mode. """
    text = text.strip()
    match = _FENCE_PATTERN.match(text)
    if match:
        return match.group(1)
    return text


def load_json_object(text: Optional[str]) -> Any:
    """
    Parse a model response as JSON.

    Raises ValueError for empty or non-JSON content so callers can turn it
    into a tagged failure.
    """
    if not text or not text.strip():
        raise ValueError("Empty response from model")
    try:
        return json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise ValueError(f"Response is not valid JSON: {e.msg}") from e


def truncate(text: str, limit: int = 200) -> str:
    """ Shorten text for log messages. """
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


# =============================================================================
# RATE LIMITING
# =============================================================================

async def rate_limit(delay: float = 0.2):
    """ Simple rate limiting via a non-blocking sleep. """
    if delay > 0:
        await asyncio.sleep(delay)


# =============================================================================
# LOGGING HELPERS
# =============================================================================

def log_extraction_stats(
    stage_name: str,
    num_items: int,
    processing_time: float,
    api_calls: int = 0,
    failures: int = 0
):
    """
    Log stage statistics.

    Args:
        stage_name: Name of the stage
        num_items: Number of items produced
        processing_time: Time taken in seconds
        api_calls: Number of API calls made
        failures: Number of calls that failed and were recovered
    """
    logger.info(
        f"{stage_name} produced {num_items} items in {processing_time:.2f}s "
        f"({api_calls} API calls, {failures} failures)"
    )
