"""
Shared buffer between the extraction producer and the solving consumer.

One producer pushes whole batches of questions; one consumer pops them in
FIFO groups. Both run on the same event loop, so a push is never observed
half-done by the consumer. Pushes and the completion signal also set an
asyncio.Event so the consumer can wake as soon as work arrives instead of
sleeping out its full idle wait.
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Iterable, List

from ..extractors.base import QuestionRecord

logger = logging.getLogger(__name__)


class QuestionQueue:
    """Order-preserving queue of pending questions with a completion signal."""

    def __init__(self):
        self._pending: Deque[QuestionRecord] = deque()
        self._extraction_done = False
        self._changed = asyncio.Event()
        self.pushed_count = 0

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def extraction_done(self) -> bool:
        return self._extraction_done

    def push(self, records: Iterable[QuestionRecord]):
        """Append records to the tail in one step."""
        records = list(records)
        if not records:
            return
        if self._extraction_done:
            raise RuntimeError("Cannot push after extraction has been marked done")
        self._pending.extend(records)
        self.pushed_count += len(records)
        self._changed.set()
        logger.debug(f"Queued {len(records)} questions ({len(self._pending)} pending)")

    def pop_up_to(self, n: int) -> List[QuestionRecord]:
        """Remove and return up to n records from the head; empty list if none."""
        if n < 1:
            raise ValueError(f"n must be a positive integer, got {n}")
        popped = []
        while self._pending and len(popped) < n:
            popped.append(self._pending.popleft())
        return popped

    def mark_extraction_done(self):
        """Signal that no more records will be pushed. Idempotent."""
        if not self._extraction_done:
            logger.debug(f"Extraction done after {self.pushed_count} questions")
        self._extraction_done = True
        self._changed.set()

    def is_drained(self) -> bool:
        """True once extraction is done and nothing is pending."""
        return self._extraction_done and not self._pending

    async def wait_for_items(self, timeout: float):
        """
        Wait up to ``timeout`` seconds for a push or the completion signal.

        Returns immediately if records are pending or extraction is done.
        """
        if self._pending or self._extraction_done:
            return
        self._changed.clear()
        try:
            await asyncio.wait_for(self._changed.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            pass
