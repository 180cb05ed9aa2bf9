"""
Single-Question Solver.

Answers one extracted question per LLM call. The prompt is kept minimal:
question text, choices, type, and the question's context only when it is
short, so prompt size stays bounded whatever the extractor returned.

A failed call or unusable reply never drops the question: the solver
returns a low-confidence placeholder answer with a diagnostic reasoning.
"""

import json
import logging
from typing import Any, Dict, List, Optional
from solver.llm import BaseLLMClient, create_llm_client

from .models import parse_answer_response
from ..base import (
    QuestionSolver,
    QuestionRecord,
    AnswerRecord,
    AnsweringFailure,
    SolverConfig,
    truncate
)

logger = logging.getLogger(__name__)


# =============================================================================
# SYSTEM PROMPT
# =============================================================================

SYSTEM_PROMPT = """You are an expert Test Solving Agent for academic exams, quizzes and assessments.

Answer the question you are given accurately and concisely.

ANSWER FORMAT RULES:
- multiple_choice: ONLY the letter of the correct choice (A, B, C, ...)
- true_false: ONLY "True" or "False"
- math: the numerical answer or simplified expression
- short_answer: a concise, complete answer
- fill_blank: the exact word(s) or phrase needed
- essay: a structured, comprehensive response

CONFIDENCE SCORING:
- 0.9-0.95: Very confident, straightforward question
- 0.8-0.89: Confident, some interpretation needed
- 0.7-0.79: Moderately confident, multiple valid approaches
- 0.6-0.69: Less confident, ambiguous or very complex
- Below 0.6: Uncertain, insufficient information

You must respond with ONLY a valid JSON object:
{
  "answer": "Direct answer",
  "confidence": 0.9,
  "reasoning": "Brief explanation of why this answer is correct"
}"""


class LLMQuestionSolver(QuestionSolver):
    """
    One LLM call per question.

    Failures are recorded in ``failures`` and answered with a placeholder.
    """

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        client: Optional[BaseLLMClient] = None
    ):
        """ Initialize the solver. """
        self.config = config or SolverConfig()

        if client is None:
            if not self.config.validate():
                logger.warning("LLM configuration incomplete. Solving may fail.")
            client = create_llm_client(self.config)
        self.client = client

        self.api_calls = 0
        self.failures: List[AnsweringFailure] = []

    @property
    def strategy_name(self) -> str:
        """Return the name of this strategy."""
        return "single_question"

    def build_prompt(self, question: QuestionRecord) -> Dict[str, Any]:
        """Build the minimal payload sent for one question."""
        payload: Dict[str, Any] = {"question": question.question_text}
        if question.choices:
            payload["choices"] = question.choices
        payload["type"] = question.question_type.value
        if question.context and len(question.context) < self.config.context_char_limit:
            payload["context"] = question.context
        return payload

    async def solve(self, question: QuestionRecord) -> AnswerRecord:
        """
        Answer one question.

        Args:
            question: The normalized question to answer

        Returns:
            AnswerRecord (a placeholder if the call or reply failed)
        """
        payload = self.build_prompt(question)

        try:
            self.api_calls += 1
            raw = await self.client.chat_completion_json(
                model=self.config.llm_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": f"Solve this question:\n\n{json.dumps(payload, ensure_ascii=False)}"}
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except Exception as e:
            return self.placeholder(question, f"answering call failed: {e}")

        outcome = parse_answer_response(raw)
        if not outcome.ok:
            logger.debug(f"Unparseable answer for question {question.question_number}: {truncate(raw or '')}")
            return self.placeholder(question, f"invalid answer response: {outcome.error}")

        return AnswerRecord(
            question_text=question.question_text,
            answer_text=outcome.answer,
            confidence=outcome.confidence,
            reasoning=outcome.reasoning,
            question_number=question.question_number,
            page_number=question.page_number,
        )

    def placeholder(self, question: QuestionRecord, reason: str) -> AnswerRecord:
        """Answer recorded when a question could not be solved."""
        logger.error(f"Failed to answer question {question.question_number}: {reason}")
        self.failures.append(AnsweringFailure(question_number=question.question_number, reason=reason))
        return AnswerRecord(
            question_text=question.question_text,
            answer_text=self.config.placeholder_answer,
            confidence=self.config.placeholder_confidence,
            reasoning=f"The solver could not produce an answer ({reason.split(':')[0]}).",
            question_number=question.question_number,
            page_number=question.page_number,
            is_placeholder=True,
        )
