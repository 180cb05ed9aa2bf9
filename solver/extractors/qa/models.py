"""Pydantic models for answering-model replies."""

from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..base import AnswerOutcome, load_json_object


# =============================================================================
# PYDANTIC MODELS FOR STRUCTURED OUTPUT
# =============================================================================

class PydanticAnswer(BaseModel):
    """Reply for a single question."""
    model_config = ConfigDict(extra="ignore")

    answer: str = Field(..., description="Direct, complete answer")
    confidence: float = Field(0.5, description="Model certainty, clamped downstream")
    reasoning: Optional[str] = Field(None, description="Explanation of the solution approach")

    @field_validator("answer", mode="before")
    @classmethod
    def _answer_to_text(cls, v: Union[str, int, float, bool, list, None]):
        if v is None:
            raise ValueError("answer is missing")
        if isinstance(v, bool):
            v = "True" if v else "False"
        elif isinstance(v, list):
            v = ", ".join(str(item) for item in v)
        v = str(v).strip()
        if not v:
            raise ValueError("answer is empty")
        return v

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_number(cls, v):
        if v is None:
            return 0.5
        if isinstance(v, str) and v.strip().endswith("%"):
            return float(v.strip().rstrip("%")) / 100
        return v

    @field_validator("reasoning", mode="before")
    @classmethod
    def _reasoning_text(cls, v):
        if v is None:
            return None
        return str(v).strip() or None


class DocumentAnswer(PydanticAnswer):
    """One entry of a whole-document reply."""
    question: Optional[str] = Field(None, description="Original question text")
    question_number: Optional[str] = Field(None, description="Question number as printed")

    @field_validator("question", "question_number", mode="before")
    @classmethod
    def _label_text(cls, v):
        if v is None:
            return None
        return str(v).strip() or None


class DocumentSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    total_questions: Optional[int] = None
    average_confidence: Optional[float] = None
    document_type: Optional[str] = None


class DocumentSolution(BaseModel):
    """Reply for a whole document: every answer plus a summary."""
    model_config = ConfigDict(extra="ignore")

    answers: List[DocumentAnswer]
    summary: Optional[DocumentSummary] = None


def parse_answer_response(raw: Optional[str]) -> AnswerOutcome:
    """ Validate a single-question reply into a tagged outcome. Never raises. """
    try:
        data = load_json_object(raw)
        parsed = PydanticAnswer.model_validate(data)
    except (ValueError, ValidationError) as e:
        return AnswerOutcome.failure(str(e))

    return AnswerOutcome.success(
        answer=parsed.answer,
        confidence=parsed.confidence,
        reasoning=parsed.reasoning
    )
