"""
Shared fixtures for the test suite.

The LLM is replaced by ScriptedLLMClient, which answers extraction calls
per batch (keyed on the first page marker in the prompt) and solving calls
per question text.
"""

from __future__ import annotations

import json
import re
from typing import Callable, Dict, List, Optional, Union

import pytest

from solver.extractors.base import (
    Page,
    PipelineConfig,
    QuestionExtractorConfig,
    SolverConfig,
)
from solver.extractors.question.batch_llm import SYSTEM_PROMPT as EXTRACTION_PROMPT
from solver.extractors.qa.direct import SYSTEM_PROMPT as DIRECT_PROMPT
from solver.llm import BaseLLMClient

PAGE_MARKER = re.compile(r"=== PAGE (\d+) ===")

Reply = Union[str, Exception, Callable[[], str]]


class ScriptedLLMClient(BaseLLMClient):
    """In-memory BaseLLMClient with canned replies."""

    def __init__(
        self,
        extraction: Optional[Dict[int, Reply]] = None,
        answers: Optional[Dict[str, Reply]] = None,
        default_answer: Optional[Reply] = None,
        direct: Optional[Reply] = None,
    ):
        self.extraction = extraction or {}
        self.answers = answers or {}
        self.default_answer = default_answer
        self.direct = direct
        self.calls: List[dict] = []

    async def chat_completion_json(self, model, messages, temperature=0.0, max_tokens=None, **kwargs):
        self.calls.append({"model": model, "messages": messages})
        system = messages[0]["content"]
        user = messages[-1]["content"]

        if system == EXTRACTION_PROMPT:
            if isinstance(user, list):
                reply = self.extraction.get(1)
            else:
                first_page = int(PAGE_MARKER.search(user).group(1))
                reply = self.extraction.get(first_page, json.dumps({"questions": []}))
        elif system == DIRECT_PROMPT:
            reply = self.direct
        else:
            payload = json.loads(user.split("\n\n", 1)[1])
            reply = self.answers.get(payload["question"], self.default_answer)
            if reply is None:
                reply = answer_json(f"answer to {payload['question']}", 0.8)

        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply()
        return reply

    def calls_with_prompt(self, prompt: str) -> List[dict]:
        return [c for c in self.calls if c["messages"][0]["content"] == prompt]


def questions_json(*questions: dict, page_context: Optional[str] = None) -> str:
    return json.dumps({"page_context": page_context, "questions": list(questions)})


def answer_json(answer, confidence=0.9, reasoning="because") -> str:
    return json.dumps({"answer": answer, "confidence": confidence, "reasoning": reasoning})


def make_pages(count: int, start: int = 1) -> List[Page]:
    return [Page(page_number=n, text=f"Text of page {n}") for n in range(start, start + count)]


def llm_settings() -> dict:
    return {"llm_provider": "openai", "llm_api_key": "sk-test", "llm_model": "test-model", "llm_vision_model": "vision-model"}


@pytest.fixture
def extractor_config() -> QuestionExtractorConfig:
    return QuestionExtractorConfig(batch_size=3, **llm_settings())


@pytest.fixture
def solver_config() -> SolverConfig:
    return SolverConfig(group_size=3, idle_wait=0.01, group_pause=0.0, **llm_settings())


@pytest.fixture
def pipeline_config(extractor_config, solver_config) -> PipelineConfig:
    return PipelineConfig(extractor=extractor_config, solver=solver_config, inter_batch_delay=0.0)
