"""
Base interfaces for the extraction and solving stages.

This module defines the abstract base classes that extractors and solvers
must implement, so strategies can be swapped without touching the pipeline.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from .models import (
    AnswerRecord,
    Batch,
    Page,
    QuestionRecord,
    SolveResult,
)


class BaseStage(ABC):
    """ Base class for all LLM-backed stages. """

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        pass


class QuestionExtractor(BaseStage):
    """ Base class for question extraction strategies. """

    @abstractmethod
    async def extract(self, batch: Batch, queue=None) -> List[QuestionRecord]:
        """ Extract questions from one batch of pages. Never raises. """
        pass


class QuestionSolver(BaseStage):
    """ Base class for single-question answering strategies. """

    @abstractmethod
    async def solve(self, question: QuestionRecord) -> AnswerRecord:
        """ Answer one question, returning a placeholder on failure. """
        pass


class DocumentSolver(BaseStage):
    """ Base class for whole-document solving strategies. """

    @abstractmethod
    async def solve(self, pages: Sequence[Page], filename: Optional[str] = None) -> SolveResult:
        """ Extract and answer every question in the document. """
        pass
