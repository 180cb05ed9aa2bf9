"""
Tests for DocumentProcessor: limits, parsing, error mapping and responses.
"""

import asyncio
import time

import pytest

from solver.config import Config
from solver.core.exceptions import SolverError
from solver.core.processor import DocumentProcessor
from solver.extractors.base import DocumentSolver, Page
from solver.parsers import BaseDocumentParser, ParsedDocument

from conftest import ScriptedLLMClient, make_pages, questions_json


class StaticParser(BaseDocumentParser):
    """Returns fixed pages whatever the input."""

    def __init__(self, pages=None, delay=0.0, error=None):
        self.pages = pages if pages is not None else make_pages(2)
        self.delay = delay
        self.error = error

    def parse(self, file_content):
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return ParsedDocument(pages=self.pages, format="plain_text")


class SlowSolver(DocumentSolver):
    @property
    def strategy_name(self):
        return "slow"

    async def solve(self, pages, filename=None):
        await asyncio.sleep(2)


class BrokenSolver(DocumentSolver):
    @property
    def strategy_name(self):
        return "broken"

    async def solve(self, pages, filename=None):
        raise KeyError("answers")


@pytest.fixture
def service_config(monkeypatch, tmp_path):
    for name in ("SOLVER_MODE", "MAX_UPLOAD_BYTES", "PARSE_TIMEOUT_SECONDS", "REQUEST_TIMEOUT_SECONDS", "DOCUMENT_PARSER"):
        monkeypatch.delenv(name, raising=False)
    return Config(env_file=tmp_path / ".env.local")


def _process(processor, content=b"%PDF-1.7 test", mime_type="application/pdf"):
    return asyncio.run(processor.process_document(content, mime_type, filename="quiz.pdf"))


def _scripted_client():
    return ScriptedLLMClient(extraction={1: questions_json(
        {"question": "What is 2+2?", "question_number": "1", "page_number": 1},
        {"question": "Name a primary color.", "question_number": "2", "page_number": 2},
    )})


class TestSuccessfulProcessing:
    """Happy paths through parsing and solving."""

    def test_pipeline_response(self, service_config, pipeline_config):
        processor = DocumentProcessor(
            config=service_config, pipeline_config=pipeline_config,
            client=_scripted_client(), parser=StaticParser(),
        )

        result = _process(processor)
        body = result.to_response()

        assert result.success is True
        assert result.status_code == 200
        assert result.answer_count == 2
        assert body["success"] is True
        assert set(body["answers"][0]) == {"question", "answer", "confidence", "reasoning", "question_number", "page_number"}
        assert body["metadata"]["total_questions"] == 2
        assert body["metadata"]["document_type"] == "test"
        assert body["metadata"]["language"] == "en"
        assert body["metadata"]["text_direction"] == "ltr"

    def test_rtl_document(self, service_config, pipeline_config):
        pages = [Page(1, "מה התשובה? 2+2")]
        client = ScriptedLLMClient(extraction={1: questions_json({"question": "מה התשובה?"})})
        processor = DocumentProcessor(
            config=service_config, pipeline_config=pipeline_config,
            client=client, parser=StaticParser(pages),
        )

        metadata = _process(processor).to_response()["metadata"]

        assert metadata["language"] == "he"
        assert metadata["text_direction"] == "rtl"

    def test_image_upload_goes_through_vision_extraction(self, service_config, pipeline_config):
        client = ScriptedLLMClient(extraction={1: questions_json({"question": "Solve for x: 2x = 4"})})
        processor = DocumentProcessor(config=service_config, pipeline_config=pipeline_config, client=client)

        result = _process(processor, content=b"\x89PNG fake image", mime_type="image/png")

        assert result.success is True
        assert result.answer_count == 1
        assert client.calls[0]["model"] == "vision-model"
        assert result.result.summary.language is None

    def test_direct_mode(self, service_config, pipeline_config, monkeypatch):
        monkeypatch.setenv("SOLVER_MODE", "direct")
        client = ScriptedLLMClient(direct='{"answers": [{"question": "2+2?", "answer": "4", "confidence": 0.9}]}')
        processor = DocumentProcessor(
            config=service_config, pipeline_config=pipeline_config,
            client=client, parser=StaticParser(),
        )

        result = _process(processor)

        assert result.success is True
        assert result.result.metadata["strategy"] == "direct"
        assert len(client.calls) == 1

    def test_file_like_content(self, service_config, pipeline_config, tmp_path):
        upload = tmp_path / "quiz.pdf"
        upload.write_bytes(b"%PDF-1.7 test")
        processor = DocumentProcessor(
            config=service_config, pipeline_config=pipeline_config,
            client=_scripted_client(), parser=StaticParser(),
        )

        with open(upload, "rb") as f:
            result = asyncio.run(processor.process_document(f, "application/pdf"))

        assert result.success is True

    def test_llm_client_is_built_once_and_reused(self, service_config, pipeline_config, monkeypatch):
        built = []

        def fake_create_llm_client(config):
            built.append(config)
            return _scripted_client()

        monkeypatch.setattr("solver.core.processor.create_llm_client", fake_create_llm_client)
        processor = DocumentProcessor(
            config=service_config, pipeline_config=pipeline_config, parser=StaticParser(),
        )

        first = _process(processor)
        second = _process(processor)

        assert first.success is True
        assert second.success is True
        assert built == [pipeline_config.extractor]
        assert processor.client is not None


class TestErrorMapping:
    """Document-level failures become user-facing errors with status codes."""

    def _processor(self, service_config, pipeline_config, **kwargs):
        kwargs.setdefault("client", _scripted_client())
        return DocumentProcessor(config=service_config, pipeline_config=pipeline_config, **kwargs)

    def test_empty_upload(self, service_config, pipeline_config):
        result = _process(self._processor(service_config, pipeline_config, parser=StaticParser()), content=b"")
        assert result.status_code == 400
        assert result.to_response() == {"success": False, "error": result.message}

    def test_too_large(self, service_config, pipeline_config, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_BYTES", "10")
        result = _process(self._processor(service_config, pipeline_config, parser=StaticParser()), content=b"x" * 11)
        assert result.status_code == 413
        assert "too large" in result.message

    def test_unsupported_media_type(self, service_config, pipeline_config):
        result = _process(self._processor(service_config, pipeline_config), mime_type="text/plain")
        assert result.status_code == 415

    def test_parse_failure(self, service_config, pipeline_config):
        parser = StaticParser(error=ValueError("cannot open broken document"))
        result = _process(self._processor(service_config, pipeline_config, parser=parser))
        assert result.status_code == 422
        assert "corrupted" in result.message

    def test_no_text(self, service_config, pipeline_config):
        parser = StaticParser(pages=[Page(1, ""), Page(2, "   ")])
        result = _process(self._processor(service_config, pipeline_config, parser=parser))
        assert result.status_code == 400

    def test_no_answers(self, service_config, pipeline_config):
        processor = self._processor(service_config, pipeline_config, client=ScriptedLLMClient(), parser=StaticParser())
        result = _process(processor)
        assert result.success is False
        assert result.status_code == 500

    def test_parse_timeout(self, service_config, pipeline_config, monkeypatch):
        monkeypatch.setenv("PARSE_TIMEOUT_SECONDS", "0.05")
        result = _process(self._processor(service_config, pipeline_config, parser=StaticParser(delay=0.5)))
        assert result.status_code == 504

    def test_request_timeout(self, service_config, pipeline_config, monkeypatch):
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "0.05")
        processor = self._processor(service_config, pipeline_config, parser=StaticParser(), document_solver=SlowSolver())
        result = _process(processor)
        assert result.status_code == 504
        assert "timed out" in result.message

    def test_unexpected_error_is_generic(self, service_config, pipeline_config):
        processor = self._processor(service_config, pipeline_config, parser=StaticParser(), document_solver=BrokenSolver())
        result = _process(processor)
        assert result.status_code == 500
        assert result.message == SolverError.user_message
        assert "answers" not in result.to_response()
