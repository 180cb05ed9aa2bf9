"""
Pipeline coordinator for page-batched extraction and solving.

Extraction runs sequentially over page batches (bounded external-call
volume) and pushes questions onto a QuestionQueue, while the SolvingStage
drains that queue concurrently. Total latency is roughly the extraction
critical path rather than extraction followed by solving.

Usage:
    coordinator = PipelineCoordinator(extractor, solver, PipelineConfig())
    answers = await coordinator.run(pages)
"""

import asyncio
import logging
import re
import time
from typing import List, Optional, Sequence

from ..extractors.base import (
    AnswerRecord,
    DocumentSolver,
    Page,
    PipelineConfig,
    QuestionExtractor,
    QuestionSolver,
    ResultSummary,
    SolveResult,
    log_extraction_stats,
    plan_batches,
    rate_limit
)
from .exceptions import EmptyDocumentError, NoAnswersProducedError
from .queue import QuestionQueue
from .solving import SolvingStage

logger = logging.getLogger(__name__)


def _natural_key(value: Optional[str]):
    """Sort "2" before "10" and "3a" before "3b"."""
    parts = re.split(r"(\d+)", value or "")
    return [int(p) if p.isdigit() else p for p in parts]


def sort_answers(answers: List[AnswerRecord]) -> List[AnswerRecord]:
    """Order answers by page, then question number."""
    return sorted(
        answers,
        key=lambda a: (a.page_number or 0, _natural_key(a.question_number))
    )


class PipelineCoordinator(DocumentSolver):
    """
    Runs the extraction producer and the solving consumer for one document.

    A coordinator instance handles one run; the queue, dedup set and results
    from the last run stay available on the instance for inspection.
    """

    def __init__(
        self,
        extractor: QuestionExtractor,
        solver: QuestionSolver,
        config: Optional[PipelineConfig] = None,
        queue: Optional[QuestionQueue] = None
    ):
        self.extractor = extractor
        self.solver = solver
        self.config = config or PipelineConfig()
        self._injected_queue = queue
        self.queue: Optional[QuestionQueue] = None
        self.solving_stage: Optional[SolvingStage] = None
        self.batches_planned = 0

    @property
    def strategy_name(self) -> str:
        return "pipeline"

    async def run(self, pages: Sequence[Page]) -> List[AnswerRecord]:
        """
        Extract and answer every question in the given pages.

        Raises:
            EmptyDocumentError: no page has content
            NoAnswersProducedError: the run finished without a single answer
        """
        pages = [p for p in pages if p.has_content]
        if not pages:
            raise EmptyDocumentError("No pages with extractable content")

        self.queue = self._injected_queue if self._injected_queue is not None else QuestionQueue()
        self.solving_stage = SolvingStage(self.solver, self.config.solver)
        consumer = asyncio.create_task(self.solving_stage.run(self.queue))

        try:
            await self._produce(pages)
        except BaseException:
            consumer.cancel()
            await asyncio.gather(consumer, return_exceptions=True)
            raise
        finally:
            self.queue.mark_extraction_done()

        answers = await consumer

        if not answers:
            raise NoAnswersProducedError("Pipeline completed without producing answers")

        if self.config.sort_results:
            answers = sort_answers(answers)
        return answers

    async def _produce(self, pages: List[Page]):
        """Extract each batch in order, pausing between batches."""
        batches = plan_batches(pages, self.config.extractor.batch_size)
        self.batches_planned = len(batches)
        logger.info(f"Extracting {len(pages)} pages in {len(batches)} batches")

        for i, batch in enumerate(batches):
            await self.extractor.extract(batch, queue=self.queue)
            if i < len(batches) - 1:
                await rate_limit(self.config.inter_batch_delay)

    async def solve(self, pages: Sequence[Page], filename: Optional[str] = None) -> SolveResult:
        """Run the pipeline and wrap the answers with a summary."""
        start = time.perf_counter()
        answers = await self.run(pages)
        elapsed = time.perf_counter() - start

        failed_batches = len(getattr(self.extractor, "failed_batches", []))
        api_calls = getattr(self.extractor, "api_calls", 0) + getattr(self.solver, "api_calls", 0)
        log_extraction_stats(self.strategy_name, len(answers), elapsed, api_calls=api_calls, failures=failed_batches)

        return SolveResult(
            answers=answers,
            summary=ResultSummary.from_answers(answers, document_type="test", failed_batches=failed_batches),
            metadata={
                "strategy": self.strategy_name,
                "batches": self.batches_planned,
                "questions_extracted": getattr(self.extractor, "questions_extracted", 0),
                "questions_queued": self.queue.pushed_count,
                "duplicates_skipped": self.solving_stage.duplicates_skipped,
                "groups_failed": self.solving_stage.groups_failed,
            },
        )
