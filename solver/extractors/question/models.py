from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..base import ExtractionOutcome, load_json_object


# =============================================================================
# PYDANTIC MODELS FOR QUESTION EXTRACTION LLM
# =============================================================================

def _optional_str(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class PydanticQuestion(BaseModel):
    """One raw question entry as returned by the extraction model."""
    model_config = ConfigDict(extra="ignore")

    question: Optional[str] = Field(None, description="Complete question text including any setup")
    type: Optional[str] = Field(None, description="Question type")
    choices: Optional[List[str]] = Field(None, description="Answer choices for multiple choice")
    context: Optional[str] = Field(None, description="Additional context specific to this question")
    question_number: Optional[str] = Field(None, description="Question number as printed")
    page_number: Optional[int] = Field(None, ge=1, description="Page the question appears on")
    section: Optional[str] = Field(None, description="Section heading the question belongs to")
    points: Optional[str] = Field(None, description="Marks or points awarded")

    @field_validator("question", "type", "context", "section", mode="before")
    @classmethod
    def _strip_text(cls, v):
        return _optional_str(v)

    @field_validator("question_number", "points", mode="before")
    @classmethod
    def _coerce_label(cls, v: Union[str, int, float, None]):
        return _optional_str(v)

    @field_validator("choices", mode="before")
    @classmethod
    def _clean_choices(cls, v):
        if v is None:
            return None
        if isinstance(v, dict):
            v = [f"{key}. {value}" for key, value in v.items()]
        if not isinstance(v, list):
            raise ValueError("choices must be a list")
        cleaned = [str(c).strip() for c in v if c is not None and str(c).strip()]
        return cleaned or None

    @field_validator("page_number", mode="before")
    @classmethod
    def _coerce_page(cls, v):
        if v in (None, ""):
            return None
        try:
            number = int(v)
        except (TypeError, ValueError):
            return None
        return number if number >= 1 else None


class ExtractionResponse(BaseModel):
    """Container for extraction results."""
    model_config = ConfigDict(extra="ignore")

    page_context: Optional[str] = None
    questions: List[PydanticQuestion]

    @field_validator("page_context", mode="before")
    @classmethod
    def _strip_context(cls, v):
        return _optional_str(v)


def parse_extraction_response(raw: Optional[str]) -> ExtractionOutcome:
    """ Validate a raw extraction reply into a tagged outcome. Never raises. """
    try:
        data = load_json_object(raw)
        parsed = ExtractionResponse.model_validate(data)
    except (ValueError, ValidationError) as e:
        return ExtractionOutcome.failure(str(e))

    return ExtractionOutcome.success(
        questions=[q.model_dump() for q in parsed.questions],
        page_context=_optional_str(parsed.page_context)
    )
