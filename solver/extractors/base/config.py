"""
Stage configuration for the extraction and solving pipeline.

LLM connection settings come from the environment of the selected provider;
batching, grouping and pacing knobs have code defaults overridable via env
in PipelineConfig.from_env().
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


_SAME_AS_TEXT = object()

# (field, env var, default) per provider, applied only to fields left as None.
_PROVIDER_ENV = {
    "azure": (
        ("llm_endpoint", "OPENAI_ENDPOINT", None),
        ("llm_api_key", "OPENAI_KEY", None),
        ("llm_model", "OPENAI_DEPLOYMENT", None),
        ("llm_vision_model", "OPENAI_VISION_DEPLOYMENT", _SAME_AS_TEXT),
    ),
    "openai": (
        ("llm_api_key", "OPENAI_API_KEY", None),
        ("llm_model", "OPENAI_MODEL", "gpt-4o-mini"),
        ("llm_vision_model", "OPENAI_VISION_MODEL", "gpt-4o"),
    ),
}

_REQUIRED_FIELDS = {
    "azure": ("llm_endpoint", "llm_api_key", "llm_model"),
    "openai": ("llm_api_key", "llm_model"),
}


@dataclass
class ExtractorConfig:
    """
    Base configuration for all LLM-backed stages.

    Shared by the extractor and the solver: which provider, which models,
    generation parameters and per-call transport limits.
    """
    # LLM Provider Selection
    llm_provider: Optional[str] = None  # "azure" or "openai"

    # LLM Configuration (provider-agnostic)
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None  # Deployment (Azure) or model (OpenAI) for text
    llm_vision_model: Optional[str] = None  # Used when a batch carries an image

    # Azure-specific
    llm_endpoint: Optional[str] = None
    llm_api_version: str = "2024-08-01-preview"

    # Generation Parameters
    temperature: float = 0.0  # Deterministic by default
    max_tokens: Optional[int] = None

    # Transport
    request_timeout: float = 60.0  # Seconds per LLM call, before SDK retries
    max_retries: int = 2  # SDK-level retries on 429/5xx

    def __post_init__(self):
        """Fill unset LLM fields from the provider's environment variables."""
        self.llm_provider = (self.llm_provider or os.getenv("LLM_PROVIDER", "openai")).lower()

        for attr, env_name, default in _PROVIDER_ENV.get(self.llm_provider, ()):
            if getattr(self, attr) is None:
                # Azure falls back to the text deployment for vision.
                fallback = self.llm_model if default is _SAME_AS_TEXT else default
                setattr(self, attr, os.getenv(env_name, fallback))

    def missing_settings(self) -> List[str]:
        """Names of the required fields that are still empty."""
        required = _REQUIRED_FIELDS.get(self.llm_provider)
        if required is None:
            return ["llm_provider"]
        return [attr for attr in required if not getattr(self, attr)]

    def validate(self) -> bool:
        """Validate that required configuration is present based on provider."""
        return not self.missing_settings()


@dataclass
class QuestionExtractorConfig(ExtractorConfig):
    """
    Configuration for the batch question extractor.

    Extends base config with the page batching parameters.
    """
    batch_size: int = 3  # Pages per extraction call
    page_marker: str = "=== PAGE {page_number} ==="


@dataclass
class SolverConfig(ExtractorConfig):
    """
    Configuration for the question solver.

    Extends base config with grouping and prompt-size settings.
    """
    group_size: int = 3  # Questions answered in parallel per iteration
    idle_wait: float = 0.1  # Seconds to wait when the queue is empty
    group_pause: float = 0.2  # Seconds between groups
    context_char_limit: int = 200  # Context is only sent when shorter than this
    placeholder_answer: str = "Unable to process this question"
    placeholder_confidence: float = 0.1


@dataclass
class PipelineConfig:
    """
    Complete configuration for one extraction/solving pipeline run.

    Composes the extractor and solver configs with the coordinator's own
    settings.
    """
    extractor: QuestionExtractorConfig = field(default_factory=QuestionExtractorConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    inter_batch_delay: float = 1.0  # Seconds between extraction calls
    sort_results: bool = False  # Order answers by page/question number

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """
        Create pipeline config from environment variables.

        LLM settings are auto-loaded by the nested ExtractorConfig classes.
        """
        extractor = QuestionExtractorConfig(
            batch_size=_env_int("EXTRACTION_BATCH_SIZE", 3),
        )
        solver = SolverConfig(
            group_size=_env_int("SOLVER_GROUP_SIZE", 3),
            idle_wait=_env_float("SOLVER_IDLE_WAIT", 0.1),
            group_pause=_env_float("SOLVER_GROUP_PAUSE", 0.2),
            context_char_limit=_env_int("SOLVER_CONTEXT_LIMIT", 200),
        )
        return cls(
            extractor=extractor,
            solver=solver,
            inter_batch_delay=_env_float("INTER_BATCH_DELAY", 1.0),
            sort_results=os.getenv("SORT_RESULTS", "false").lower() in ("true", "1", "yes"),
        )
