"""
Batch LLM Question Extractor.

This extractor is the producer side of the solving pipeline. It receives a
batch of consecutive pages, asks the LLM for every question on them, and
pushes the normalized questions onto the shared queue.

Approach:
1. Join the batch's pages with page markers (or attach the image)
2. Extract questions from the batch using the LLM in JSON mode
3. Validate the reply; a bad reply costs only this batch
4. Fill in missing numbers/pages and push the batch onto the queue
"""

import logging
from typing import Any, Dict, List, Optional
from solver.llm import BaseLLMClient, create_llm_client

from .models import parse_extraction_response
from ..base import (
    QuestionExtractor,
    QuestionRecord,
    QuestionType,
    Batch,
    ExtractionBatchFailure,
    QuestionExtractorConfig,
    join_pages,
    truncate
)

logger = logging.getLogger(__name__)


# =============================================================================
# BATCH LLM QUESTION EXTRACTOR
# =============================================================================

SYSTEM_PROMPT = """You are a specialized Question Extraction Agent for tests, exams and quizzes.

Extract EVERY question from the provided pages.

# Input Format Handling

The input is either page text separated by markers such as `=== PAGE 3 ===`,
or a single image of a test page. Page text may be plain text or markdown
depending on the parser used.

## Critical Rules

1. **One Entry Per Question**
   - Multi-part questions (1a, 1b, ...) become separate entries
   - Shared setup paragraphs are repeated in each part's `context`

2. **Question Stem vs Choices**
   - For multiple choice, `question` is the stem only
   - Put the options in `choices`, keeping their letters: `["A. 12", "B. 14"]`

3. **Textual Fidelity**
   - Extract the question text VERBATIM; do not rephrase or solve
   - Remove markdown syntax (`**`, `#`, `|`) from the output
   - Keep the question number exactly as printed (e.g. "3", "4b", "Q7")

4. **Page Numbers**
   - Use the number from the nearest preceding `=== PAGE n ===` marker

What to EXTRACT:
✓ Numbered or lettered questions
✓ Instructions that require an answer ("Solve for x", "Explain why...")
✓ True/false statements and fill-in-the-blank sentences

What NOT to extract:
✗ Section headers and general instructions ("Answer all questions")
✗ Answer choices as separate questions
✗ Page headers, footers and page numbers

You must respond with ONLY a valid JSON object with this structure:
{
  "page_context": "Overall context for these pages" or null,
  "questions": [
    {
      "question": "Complete question text",
      "type": "multiple_choice|math|short_answer|essay|true_false|fill_blank|general",
      "choices": ["A. First choice", "B. Second choice"] or null,
      "context": "Setup or passage this question depends on" or null,
      "question_number": "1" or null,
      "page_number": 1 or null,
      "section": "Section heading" or null,
      "points": "5 marks" or null
    }
  ]
}"""

TEXT_USER_PROMPT = "Extract all questions from these test pages:\n\n{pages}"

IMAGE_USER_PROMPT = (
    "Analyze this test image carefully. Extract ALL questions, including "
    "multi-part questions that may share context. Return ONLY valid JSON "
    "with the specified structure."
)


class BatchLLMQuestionExtractor(QuestionExtractor):
    """
    Page-batched LLM question extraction.

    Failures are isolated per batch: the batch contributes no questions,
    the failure is recorded in ``failed_batches`` and nothing is raised.
    """

    def __init__(
        self,
        config: Optional[QuestionExtractorConfig] = None,
        client: Optional[BaseLLMClient] = None
    ):
        """Initialize the extractor."""
        self.config = config or QuestionExtractorConfig()

        if client is None:
            if not self.config.validate():
                logger.warning("LLM configuration incomplete. Extraction may fail.")
            client = create_llm_client(self.config)
        self.client = client

        self.questions_extracted = 0
        self.api_calls = 0
        self.failed_batches: List[ExtractionBatchFailure] = []

    @property
    def strategy_name(self) -> str:
        """Return the name of this strategy."""
        return "batch_llm"

    async def extract(self, batch: Batch, queue=None) -> List[QuestionRecord]:
        """
        Extract questions from one batch and push them onto the queue.

        Args:
            batch: Consecutive pages to process in one call
            queue: Optional QuestionQueue to receive the batch's questions

        Returns:
            List of QuestionRecord objects (empty if the batch failed)
        """
        logger.debug(f"Extracting questions from {batch!r}...")

        try:
            self.api_calls += 1
            raw = await self.client.chat_completion_json(
                model=self._model_for(batch),
                messages=self._build_messages(batch),
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except Exception as e:
            return self._fail(batch, f"extraction call failed: {e}")

        outcome = parse_extraction_response(raw)
        if not outcome.ok:
            logger.debug(f"Unparseable extraction reply for {batch!r}: {truncate(raw or '')}")
            return self._fail(batch, f"invalid extraction response: {outcome.error}")

        records = [
            self._to_record(entry, index, batch, outcome.page_context)
            for index, entry in enumerate(outcome.questions, start=1)
        ]

        if queue is not None and records:
            queue.push(records)

        self.questions_extracted += len(records)
        logger.info(f"Extracted {len(records)} questions from {batch!r}")

        return records

    def _model_for(self, batch: Batch) -> str:
        if batch.is_visual:
            return self.config.llm_vision_model or self.config.llm_model
        return self.config.llm_model

    def _build_messages(self, batch: Batch) -> List[Dict[str, Any]]:
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]

        if batch.is_visual:
            content = [{"type": "text", "text": IMAGE_USER_PROMPT}]
            for page in batch.pages:
                if page.image_url:
                    content.append({
                        "type": "image_url",
                        "image_url": {"url": page.image_url, "detail": "high"}
                    })
            messages.append({"role": "user", "content": content})
        else:
            pages_text = join_pages(batch, self.config.page_marker)
            messages.append({"role": "user", "content": TEXT_USER_PROMPT.format(pages=pages_text)})

        return messages

    def _to_record(
        self,
        entry: Dict[str, Any],
        index: int,
        batch: Batch,
        page_context: Optional[str] = None
    ) -> QuestionRecord:
        """Map a validated raw entry onto a QuestionRecord, filling gaps."""
        page_number = entry.get("page_number") or batch.first_page_number
        question_number = entry.get("question_number") or f"{page_number}-{index}"
        question_text = entry.get("question") or f"Question {question_number} (text not extracted)"

        return QuestionRecord(
            question_text=question_text,
            question_number=question_number,
            page_number=page_number,
            question_type=QuestionType.normalize(entry.get("type")),
            choices=entry.get("choices"),
            context=entry.get("context") or page_context,
            section_label=entry.get("section"),
            points=entry.get("points"),
        )

    def _fail(self, batch: Batch, reason: str) -> List[QuestionRecord]:
        logger.error(f"Failed to extract from {batch!r}: {reason}")
        self.failed_batches.append(
            ExtractionBatchFailure(page_numbers=batch.page_numbers, reason=reason)
        )
        return []
