"""
Solving stage: the consumer side of the pipeline.

Drains the QuestionQueue in small groups while extraction is still running,
skips questions it has already seen, answers each group in parallel and
collects the answers. A question that fails to solve still gets a
placeholder answer; a group that fails as a whole is logged and skipped.
"""

import asyncio
import logging
from typing import List, Optional, Set

from ..extractors.base import (
    AnswerRecord,
    QuestionRecord,
    QuestionSolver,
    SolverConfig,
    rate_limit
)
from .queue import QuestionQueue

logger = logging.getLogger(__name__)


class SolvingStage:
    """
    Consumer loop answering queued questions until the queue is drained.

    The dedup set and the results list belong to this stage for the lifetime
    of one pipeline run.
    """

    def __init__(self, solver: QuestionSolver, config: Optional[SolverConfig] = None):
        self.solver = solver
        self.config = config or getattr(solver, "config", None) or SolverConfig()
        self.seen_keys: Set[str] = set()
        self.results: List[AnswerRecord] = []
        self.duplicates_skipped = 0
        self.groups_processed = 0
        self.groups_failed = 0

    @property
    def placeholder_count(self) -> int:
        return sum(1 for a in self.results if a.is_placeholder)

    def deduplicate(self, questions: List[QuestionRecord]) -> List[QuestionRecord]:
        """Drop questions whose key was seen before and remember the rest."""
        unique = []
        for question in questions:
            key = question.dedup_key
            if key in self.seen_keys:
                self.duplicates_skipped += 1
                logger.debug(f"Skipping duplicate question {question.question_number}")
                continue
            self.seen_keys.add(key)
            unique.append(question)
        return unique

    async def solve_group(self, questions: List[QuestionRecord]) -> List[AnswerRecord]:
        """Answer a group of questions concurrently."""
        return list(await asyncio.gather(*(self._solve_one(q) for q in questions)))

    async def _solve_one(self, question: QuestionRecord) -> AnswerRecord:
        try:
            return await self.solver.solve(question)
        except Exception as e:
            # Solvers return placeholders themselves; this covers ones that raise.
            if hasattr(self.solver, "placeholder"):
                return self.solver.placeholder(question, f"answering call failed: {e}")
            logger.error(f"Failed to answer question {question.question_number}: {e}")
            return AnswerRecord(
                question_text=question.question_text,
                answer_text=self.config.placeholder_answer,
                confidence=self.config.placeholder_confidence,
                reasoning=f"The solver could not produce an answer ({type(e).__name__}).",
                question_number=question.question_number,
                page_number=question.page_number,
                is_placeholder=True,
            )

    async def run(self, queue: QuestionQueue) -> List[AnswerRecord]:
        """
        Consume the queue until extraction is done and nothing is pending.

        Returns:
            The collected answers, in group completion order
        """
        logger.info("Solving stage started")

        while not queue.is_drained():
            if not len(queue):
                await queue.wait_for_items(self.config.idle_wait)
                continue

            group = queue.pop_up_to(self.config.group_size)
            unique = self.deduplicate(group)
            if not unique:
                continue

            try:
                answers = await self.solve_group(unique)
                self.results.extend(answers)
                self.groups_processed += 1
                logger.debug(f"Solved group of {len(answers)} ({len(self.results)} answers so far)")
            except Exception as e:
                self.groups_failed += 1
                logger.error(f"Failed to solve group of {len(unique)} questions: {e}", exc_info=True)

            await rate_limit(self.config.group_pause)

        logger.info(
            f"Solving stage finished: {len(self.results)} answers, "
            f"{self.duplicates_skipped} duplicates skipped, {self.placeholder_count} placeholders"
        )
        return self.results
