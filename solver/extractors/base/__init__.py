"""
Base module for extraction and solving stages.

Exports core interfaces, models, and utilities used by all stages.
"""

from .interfaces import (
    BaseStage,
    QuestionExtractor,
    QuestionSolver,
    DocumentSolver
)

from .models import (
    QuestionType,
    ConfidenceLevel,
    Page,
    Batch,
    QuestionRecord,
    AnswerRecord,
    ExtractionBatchFailure,
    AnsweringFailure,
    ExtractionOutcome,
    AnswerOutcome,
    ResultSummary,
    SolveResult,
    clamp_confidence,
    MIN_CONFIDENCE,
    MAX_CONFIDENCE
)

from .config import (
    ExtractorConfig,
    QuestionExtractorConfig,
    SolverConfig,
    PipelineConfig
)

from .utils import (
    plan_batches,
    join_pages,
    load_json_object,
    strip_code_fences,
    truncate,
    rate_limit,
    log_extraction_stats
)

__all__ = [
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
    "ExtractionBatchFailure",
    "AnsweringFailure",
    "ExtractionOutcome",
    "AnswerOutcome",
    "ResultSummary",
    "SolveResult",
    "clamp_confidence",
    "MIN_CONFIDENCE",
    "MAX_CONFIDENCE",
    # Config
    "ExtractorConfig",
    "QuestionExtractorConfig",
    "SolverConfig",
    "PipelineConfig",
    # Utils
    "plan_batches",
    "join_pages",
    "load_json_object",
    "strip_code_fences",
    "truncate",
    "rate_limit",
    "log_extraction_stats",
]
