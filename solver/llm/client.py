"""Async LLM clients returning raw JSON-mode replies from Azure OpenAI or OpenAI."""

from abc import ABC, abstractmethod
from typing import List, Optional
from openai import AsyncAzureOpenAI, AsyncOpenAI

JSON_RESPONSE_FORMAT = {"type": "json_object"}


class BaseLLMClient(ABC):
    """Interface the extraction and solving stages talk to."""

    @abstractmethod
    async def chat_completion_json(
        self,
        model: str,
        messages: List[dict],
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> str:
        """
        Send one chat request in JSON mode.

        Returns the reply text unparsed ("" if the model sent nothing); the
        caller validates it into a tagged outcome.
        """
        pass


class _ChatCompletionsClient(BaseLLMClient):
    """Shared request path for both SDK flavors."""

    async def chat_completion_json(
        self,
        model: str,
        messages: List[dict],
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> str:
        completion = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            response_format=JSON_RESPONSE_FORMAT,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


class AzureLLMClient(_ChatCompletionsClient):
    """Azure OpenAI; ``model`` is the deployment name."""

    def __init__(
        self,
        azure_endpoint: str,
        api_key: str,
        api_version: str,
        timeout: float = 60.0,
        max_retries: int = 2
    ):
        self.client = AsyncAzureOpenAI(
            azure_endpoint=azure_endpoint,
            api_key=api_key,
            api_version=api_version,
            timeout=timeout,
            max_retries=max_retries
        )


class OpenAIClient(_ChatCompletionsClient):
    """OpenAI platform API; ``model`` is the model id."""

    def __init__(self, api_key: str, timeout: float = 60.0, max_retries: int = 2):
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=max_retries)
