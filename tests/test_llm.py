"""
Tests for LLM client construction and JSON-mode calls.
"""

import asyncio
from types import SimpleNamespace

import pytest

from solver.extractors.base import ExtractorConfig
from solver.llm import create_llm_client
from solver.llm.client import AzureLLMClient, OpenAIClient


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class TestCreateLLMClient:
    """Provider selection."""

    def test_openai(self):
        config = ExtractorConfig(llm_provider="openai", llm_api_key="sk-test", llm_model="gpt-4o-mini")
        assert isinstance(create_llm_client(config), OpenAIClient)

    def test_azure(self):
        config = ExtractorConfig(
            llm_provider="azure",
            llm_endpoint="https://example.openai.azure.com",
            llm_api_key="key",
            llm_model="deployment",
        )
        assert isinstance(create_llm_client(config), AzureLLMClient)

    def test_missing_settings(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValueError):
            create_llm_client(ExtractorConfig(llm_provider="openai"))

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_llm_client(ExtractorConfig(llm_provider="anthropic"))


class TestJsonMode:
    """Calls go out in JSON mode and return the raw content."""

    def test_request_shape(self):
        client = OpenAIClient(api_key="sk-test")
        completions = FakeCompletions('{"answer": "4"}')
        client.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))

        raw = asyncio.run(client.chat_completion_json(
            model="gpt-4o-mini",
            messages=[{"role": "user", "content": "2+2?"}],
        ))

        assert raw == '{"answer": "4"}'
        assert completions.kwargs["response_format"] == {"type": "json_object"}
        assert completions.kwargs["temperature"] == 0.0
        assert completions.kwargs["model"] == "gpt-4o-mini"

    def test_empty_content(self):
        client = OpenAIClient(api_key="sk-test")
        client.client = SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(None)))

        assert asyncio.run(client.chat_completion_json(model="m", messages=[])) == ""
