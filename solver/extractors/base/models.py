"""
Shared data models for the extraction and solving stages.

This module defines the common data structures passed between the
document parsers, the question extractor, the question queue and the
solver, ensuring consistency and interoperability.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any, Tuple
from enum import Enum


MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.95
DEDUP_KEY_TEXT_LENGTH = 50


# =============================================================================
# ENUMERATIONS
# =============================================================================

class QuestionType(str, Enum):
    """Type of test question detected."""
    MULTIPLE_CHOICE = "multiple_choice"
    MATH = "math"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"
    TRUE_FALSE = "true_false"
    FILL_BLANK = "fill_blank"
    GENERAL = "general"

    @classmethod
    def normalize(cls, value: Optional[str]) -> "QuestionType":
        """Map a raw model value onto a known type, falling back to GENERAL."""
        if not value:
            return cls.GENERAL
        cleaned = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(cleaned)
        except ValueError:
            return cls.GENERAL


class ConfidenceLevel(str, Enum):
    """Confidence level for an answer."""
    HIGH = "high"       # > 0.8
    MEDIUM = "medium"   # 0.5 - 0.8
    LOW = "low"         # < 0.5


def clamp_confidence(value: Any, default: float = 0.5) -> float:
    """
    Clamp a raw confidence value into [MIN_CONFIDENCE, MAX_CONFIDENCE].

    Values outside the range are clipped, not rejected. Non-numeric input
    falls back to ``default`` (which is clamped as well).
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = default
    if number != number:  # NaN
        number = default
    return min(max(number, MIN_CONFIDENCE), MAX_CONFIDENCE)


# =============================================================================
# DATA MODELS
# =============================================================================

@dataclass(frozen=True)
class Page:
    """
    One page of an uploaded document.

    PDF pages carry their text; an uploaded image becomes a single
    synthetic page carrying the image as a data URL.
    """
    page_number: int
    text: str = ""
    image_url: Optional[str] = None

    def __post_init__(self):
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")

    @property
    def has_content(self) -> bool:
        """Check if there is anything on this page worth extracting."""
        return bool(self.text and self.text.strip()) or bool(self.image_url)


@dataclass
class Batch:
    """
    A contiguous group of pages processed together in one extraction call.
    """
    pages: Tuple[Page, ...]

    def __post_init__(self):
        self.pages = tuple(self.pages)
        if not self.pages:
            raise ValueError("A batch must contain at least one page")

    def __len__(self) -> int:
        return len(self.pages)

    @property
    def first_page_number(self) -> int:
        return self.pages[0].page_number

    @property
    def page_numbers(self) -> List[int]:
        return [p.page_number for p in self.pages]

    @property
    def is_visual(self) -> bool:
        """True when the batch carries image content instead of text."""
        return any(p.image_url for p in self.pages)

    def __repr__(self) -> str:
        numbers = self.page_numbers
        if len(numbers) == 1:
            return f"Batch(page {numbers[0]})"
        return f"Batch(pages {numbers[0]}-{numbers[-1]})"


@dataclass
class QuestionRecord:
    """
    Canonical, normalized representation of one extracted question.

    ``question_text`` and ``question_number`` are always present; the
    extractor synthesizes them when the model omits them.
    """
    question_text: str
    question_number: str
    page_number: int
    question_type: QuestionType = QuestionType.GENERAL
    choices: Optional[List[str]] = None
    context: Optional[str] = None
    section_label: Optional[str] = None
    points: Optional[str] = None

    def __post_init__(self):
        if not self.question_text:
            raise ValueError("question_text is required")
        if not self.question_number:
            raise ValueError("question_number is required")

    @property
    def dedup_key(self) -> str:
        """Identity used to suppress duplicate processing of the same question."""
        return f"{self.question_number}:{self.question_text[:DEDUP_KEY_TEXT_LENGTH]}"


@dataclass
class AnswerRecord:
    """
    Canonical, normalized representation of one produced answer.

    Confidence is clamped into [0.1, 0.95] on construction regardless of
    what the model reported.
    """
    question_text: str
    answer_text: str
    confidence: float
    reasoning: Optional[str] = None
    question_number: Optional[str] = None
    page_number: Optional[int] = None
    is_placeholder: bool = False

    def __post_init__(self):
        self.confidence = clamp_confidence(self.confidence)

    @property
    def confidence_level(self) -> ConfidenceLevel:
        """Get the confidence level category."""
        if self.confidence > 0.8:
            return ConfidenceLevel.HIGH
        elif self.confidence >= 0.5:
            return ConfidenceLevel.MEDIUM
        else:
            return ConfidenceLevel.LOW

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the response shape consumed by the front end."""
        return {
            "question": self.question_text,
            "answer": self.answer_text,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "question_number": self.question_number,
            "page_number": self.page_number,
        }


@dataclass
class ExtractionBatchFailure:
    """Diagnostic for a batch whose extraction call or parse failed."""
    page_numbers: List[int]
    reason: str


@dataclass
class AnsweringFailure:
    """Diagnostic for a question whose answering call or parse failed."""
    question_number: str
    reason: str


@dataclass
class ExtractionOutcome:
    """
    Tagged result of validating an extraction response.

    Exactly one of ``questions`` (on success) or ``error`` is meaningful.
    """
    ok: bool
    questions: List[Dict[str, Any]] = field(default_factory=list)
    page_context: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, questions: List[Dict[str, Any]], page_context: Optional[str] = None) -> "ExtractionOutcome":
        return cls(ok=True, questions=questions, page_context=page_context)

    @classmethod
    def failure(cls, error: str) -> "ExtractionOutcome":
        return cls(ok=False, error=error)


@dataclass
class AnswerOutcome:
    """Tagged result of validating a single-question answering response."""
    ok: bool
    answer: Optional[str] = None
    confidence: float = 0.5
    reasoning: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, answer: str, confidence: float, reasoning: Optional[str] = None) -> "AnswerOutcome":
        return cls(ok=True, answer=answer, confidence=confidence, reasoning=reasoning)

    @classmethod
    def failure(cls, error: str) -> "AnswerOutcome":
        return cls(ok=False, error=error)


@dataclass
class ResultSummary:
    """Summary returned alongside the answers."""
    total_questions: int
    average_confidence: float
    document_type: Optional[str] = None
    language: Optional[str] = None
    text_direction: Optional[str] = None
    failed_batches: int = 0
    placeholder_answers: int = 0
    low_confidence_answers: int = 0

    @classmethod
    def from_answers(cls, answers: List[AnswerRecord], **kwargs) -> "ResultSummary":
        total = len(answers)
        average = sum(a.confidence for a in answers) / total if total else 0.0
        return cls(
            total_questions=total,
            average_confidence=round(average, 4),
            placeholder_answers=sum(1 for a in answers if a.is_placeholder),
            low_confidence_answers=sum(1 for a in answers if a.confidence_level is ConfidenceLevel.LOW),
            **kwargs
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SolveResult:
    """Answers plus summary for one processed document."""
    answers: List[AnswerRecord]
    summary: ResultSummary
    metadata: Dict[str, Any] = field(default_factory=dict)
