"""
Direct Document Solver.

Sends the whole document (all page text, or the uploaded image) to the LLM
in a single call and asks for every answer at once. This is the simple
baseline; the page-batched pipeline is used for large multi-page PDFs.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence
from pydantic import ValidationError
from solver.llm import BaseLLMClient, create_llm_client
from solver.core.exceptions import EmptyDocumentError, NoAnswersProducedError

from .models import DocumentSolution
from ..base import (
    DocumentSolver,
    AnswerRecord,
    Batch,
    Page,
    ResultSummary,
    SolveResult,
    ExtractorConfig,
    join_pages,
    load_json_object,
    log_extraction_stats
)

logger = logging.getLogger(__name__)


# =============================================================================
# SYSTEM PROMPT
# =============================================================================

SYSTEM_PROMPT = """You are an expert Test Solving Agent. You receive a complete test document
(page text or an image) and must find and solve every question in it.

ANSWER FORMAT RULES:
- Multiple choice: ONLY the letter (A, B, C, D, ...)
- True/False: ONLY "True" or "False"
- Math: the numerical answer or simplified expression
- Short answer / fill-in-blank: concise, exact answer
- Essay: a structured, comprehensive response

Assign each answer a confidence between 0 and 1.

You must respond with ONLY a valid JSON object:
{
  "answers": [
    {
      "question_number": "1",
      "question": "Original question text (truncated if very long)",
      "answer": "Direct, complete answer",
      "confidence": 0.9,
      "reasoning": "Explanation of the solution approach"
    }
  ],
  "summary": {
    "total_questions": 5,
    "average_confidence": 0.87,
    "document_type": "quiz|exam|worksheet|test"
  }
}"""

TEXT_USER_PROMPT = "Please analyze this complete test document and solve all questions found within it:\n\n{pages}"

IMAGE_USER_PROMPT = "Please analyze this test image and solve all questions found within it."


class DirectDocumentSolver(DocumentSolver):
    """ Whole-document solving in one LLM call. """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        client: Optional[BaseLLMClient] = None
    ):
        """ Initialize the solver. """
        self.config = config or ExtractorConfig()

        if client is None:
            if not self.config.validate():
                logger.warning("LLM configuration incomplete. Solving may fail.")
            client = create_llm_client(self.config)
        self.client = client

    @property
    def strategy_name(self) -> str:
        """Return the name of this strategy."""
        return "direct"

    async def solve(self, pages: Sequence[Page], filename: Optional[str] = None) -> SolveResult:
        """
        Solve every question in the document with one call.

        Raises:
            EmptyDocumentError: no page has content
            NoAnswersProducedError: the reply is unusable or holds no answers
        """
        pages = [p for p in pages if p.has_content]
        if not pages:
            raise EmptyDocumentError("No pages with extractable content")

        start = time.perf_counter()
        batch = Batch(pages=tuple(pages))
        raw = await self.client.chat_completion_json(
            model=self._model_for(batch),
            messages=self._build_messages(batch),
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

        try:
            solution = DocumentSolution.model_validate(load_json_object(raw))
        except (ValueError, ValidationError) as e:
            logger.error(f"Failed to parse solver response for {filename or 'document'}: {e}")
            raise NoAnswersProducedError("Invalid solver response structure") from e

        answers: List[AnswerRecord] = [
            AnswerRecord(
                question_text=entry.question or f"Question {entry.question_number or index}",
                answer_text=entry.answer,
                confidence=entry.confidence,
                reasoning=entry.reasoning,
                question_number=entry.question_number or str(index),
            )
            for index, entry in enumerate(solution.answers, start=1)
        ]

        if not answers:
            raise NoAnswersProducedError("Solver returned no answers")

        log_extraction_stats(self.strategy_name, len(answers), time.perf_counter() - start, api_calls=1)

        document_type = solution.summary.document_type if solution.summary else None
        return SolveResult(
            answers=answers,
            summary=ResultSummary.from_answers(answers, document_type=document_type or "test"),
            metadata={"strategy": self.strategy_name, "pages": len(pages)},
        )

    def _model_for(self, batch: Batch) -> str:
        if batch.is_visual:
            return self.config.llm_vision_model or self.config.llm_model
        return self.config.llm_model

    def _build_messages(self, batch: Batch) -> List[Dict[str, Any]]:
        if batch.is_visual:
            content: List[Dict[str, Any]] = [{"type": "text", "text": IMAGE_USER_PROMPT}]
            for page in batch.pages:
                if page.image_url:
                    content.append({
                        "type": "image_url",
                        "image_url": {"url": page.image_url, "detail": "high"}
                    })
            user_message = {"role": "user", "content": content}
        else:
            user_message = {"role": "user", "content": TEXT_USER_PROMPT.format(pages=join_pages(batch))}

        return [{"role": "system", "content": SYSTEM_PROMPT}, user_message]
