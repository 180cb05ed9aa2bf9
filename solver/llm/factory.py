"""Builds the LLM client a stage config points at."""

from .client import BaseLLMClient, AzureLLMClient, OpenAIClient


def _azure(config) -> BaseLLMClient:
    return AzureLLMClient(
        azure_endpoint=config.llm_endpoint,
        api_key=config.llm_api_key,
        api_version=config.llm_api_version,
        timeout=config.request_timeout,
        max_retries=config.max_retries
    )


def _openai(config) -> BaseLLMClient:
    return OpenAIClient(
        api_key=config.llm_api_key,
        timeout=config.request_timeout,
        max_retries=config.max_retries
    )


_BUILDERS = {
    "azure": _azure,
    "openai": _openai,
}


def create_llm_client(config) -> BaseLLMClient:
    """
    Create the client for ``config.llm_provider``.

    Raises:
        ValueError: unknown provider, or required settings are missing
    """
    provider = (config.llm_provider or "").lower()
    builder = _BUILDERS.get(provider)
    if builder is None:
        raise ValueError(f"Unknown LLM provider: {provider!r}. Available: {sorted(_BUILDERS)}")

    missing = config.missing_settings()
    if missing:
        raise ValueError(f"{provider} provider is missing settings: {', '.join(missing)}")

    return builder(config)
