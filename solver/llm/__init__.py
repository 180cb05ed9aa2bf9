"""Async LLM client abstraction for Azure OpenAI and OpenAI."""

from .factory import create_llm_client
from .client import BaseLLMClient

__all__ = ["create_llm_client", "BaseLLMClient"]
