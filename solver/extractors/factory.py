"""
Factory for creating extractor and solver instances.
"""

from typing import Optional
import logging

from solver.llm import BaseLLMClient

from .base import (
    DocumentSolver,
    PipelineConfig,
    QuestionExtractor,
    QuestionExtractorConfig,
    QuestionSolver,
    SolverConfig,
)
from .question.batch_llm import BatchLLMQuestionExtractor
from .qa.single import LLMQuestionSolver
from .qa.direct import DirectDocumentSolver

logger = logging.getLogger(__name__)


class ExtractorFactory:
    """
    Factory for creating stage instances using simple dictionaries.

    Usage:
        factory = ExtractorFactory()
        solver = factory.create_document_solver("pipeline")
        result = await solver.solve(pages)

    An optional ``client`` is shared by every stage the factory builds;
    otherwise each stage creates its own from its config.
    """

    _QUESTION_EXTRACTORS = {
        "batch_llm": BatchLLMQuestionExtractor,
    }

    _QUESTION_SOLVERS = {
        "single_question": LLMQuestionSolver,
    }

    _DOCUMENT_SOLVERS = ("pipeline", "direct")

    def __init__(self, client: Optional[BaseLLMClient] = None):
        self.client = client

    @staticmethod
    def _lookup(registry: dict, strategy: str, kind: str):
        try:
            return registry[strategy]
        except KeyError:
            raise ValueError(
                f"Unknown {kind}: {strategy}. Available: {list(registry)}"
            ) from None

    def create_question_extractor(
        self,
        strategy: str = "batch_llm",
        config: Optional[QuestionExtractorConfig] = None
    ) -> QuestionExtractor:
        """Create the producer-side extractor."""
        extractor_class = self._lookup(self._QUESTION_EXTRACTORS, strategy, "question extractor")
        logger.debug(f"Creating question extractor: {strategy}")
        return extractor_class(config=config or QuestionExtractorConfig(), client=self.client)

    def create_question_solver(
        self,
        strategy: str = "single_question",
        config: Optional[SolverConfig] = None
    ) -> QuestionSolver:
        """Create the consumer-side single-question solver."""
        solver_class = self._lookup(self._QUESTION_SOLVERS, strategy, "question solver")
        logger.debug(f"Creating question solver: {strategy}")
        return solver_class(config=config or SolverConfig(), client=self.client)

    def create_document_solver(
        self,
        strategy: str = "pipeline",
        config: Optional[PipelineConfig] = None
    ) -> DocumentSolver:
        """Create a whole-document solver ("pipeline" or "direct")."""
        if strategy not in self._DOCUMENT_SOLVERS:
            raise ValueError(
                f"Unknown document solver: {strategy}. Available: {list(self._DOCUMENT_SOLVERS)}"
            )

        config = config or PipelineConfig()
        logger.debug(f"Creating document solver: {strategy}")

        if strategy == "direct":
            return DirectDocumentSolver(config=config.solver, client=self.client)

        # Imported here: the coordinator module itself imports this package.
        from solver.core.pipeline import PipelineCoordinator

        return PipelineCoordinator(
            extractor=self.create_question_extractor(config=config.extractor),
            solver=self.create_question_solver(config=config.solver),
            config=config,
        )
