"""
Extraction and solving strategies for test documents.

This package provides a strategy-based architecture for turning document
pages into answered questions. It supports three kinds of stages:

- QuestionExtractor: Extracts questions from a batch of pages
- QuestionSolver: Answers a single extracted question
- DocumentSolver: Produces every answer for a whole document

Document solver strategies:
- pipeline: page-batched extraction with concurrent per-question solving
- direct: the whole document answered in one call

Usage:
    from solver.extractors import ExtractorFactory

    factory = ExtractorFactory()
    document_solver = factory.create_document_solver("pipeline")
    result = await document_solver.solve(pages)
"""

# Export public API
from .base import (
    # Interfaces
    BaseStage,
    QuestionExtractor,
    QuestionSolver,
    DocumentSolver,
    # Models - Enums
    QuestionType,
    ConfidenceLevel,
    # Models - Data Classes
    Page,
    Batch,
    QuestionRecord,
    AnswerRecord,
    ResultSummary,
    SolveResult,
    # Config
    ExtractorConfig,
    QuestionExtractorConfig,
    SolverConfig,
    PipelineConfig,
)

from .factory import ExtractorFactory

__all__ = [
    # Main API
    "ExtractorFactory",
    # Interfaces
    "BaseStage",
    "QuestionExtractor",
    "QuestionSolver",
    "DocumentSolver",
    # Models - Enums
    "QuestionType",
    "ConfidenceLevel",
    # Models - Data Classes
    "Page",
    "Batch",
    "QuestionRecord",
    "AnswerRecord",
    "ResultSummary",
    "SolveResult",
    # Config
    "ExtractorConfig",
    "QuestionExtractorConfig",
    "SolverConfig",
    "PipelineConfig",
]
