# config.py
"""
Centralized service configuration.
Supports both the Azure Functions environment and local .env files.

LLM connection settings live with the stage configs in
solver.extractors.base.config; this module covers the request-level knobs.
"""

import os
from pathlib import Path

SOLVER_MODES = ("pipeline", "direct")

DEFAULT_ENV_FILE = Path(__file__).resolve().parent.parent / ".env.local"


def load_env_file(env_file: Path):
    """
    Copy KEY=VALUE lines from a local env file into os.environ.

    Variables already set in the environment win; surrounding quotes on
    values are removed. A missing file is not an error.
    """
    if not env_file.is_file():
        return
    for raw in env_file.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        os.environ.setdefault(key, value.strip("\"'"))


class Config:
    """Configuration manager that handles environment variables."""

    def __init__(self, env_file: Path = None):
        load_env_file(env_file or DEFAULT_ENV_FILE)

    # Solving Configuration
    @property
    def solver_mode(self) -> str:
        """Get solving strategy: 'pipeline' (page-batched) or 'direct' (one call)."""
        return os.environ.get("SOLVER_MODE", "pipeline").lower()

    @property
    def document_parser(self) -> str:
        """Get PDF parser: 'pymupdf', 'pymupdf_text' or 'azure'."""
        return os.environ.get("DOCUMENT_PARSER", "pymupdf").lower()

    # Request Limits
    @property
    def max_upload_bytes(self) -> int:
        """Get maximum accepted upload size (default 50MB)."""
        return int(os.environ.get("MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)))

    @property
    def parse_timeout_seconds(self) -> float:
        """Get time limit for turning the upload into pages."""
        return float(os.environ.get("PARSE_TIMEOUT_SECONDS", "120"))

    @property
    def request_timeout_seconds(self) -> float:
        """Get time limit for the whole request."""
        return float(os.environ.get("REQUEST_TIMEOUT_SECONDS", "300"))

    # OpenAI Configuration
    @property
    def llm_provider(self) -> str:
        return os.environ.get("LLM_PROVIDER", "openai").lower()

    @property
    def openai_api_key(self) -> str:
        """Get OpenAI API key (direct provider)."""
        return os.environ.get("OPENAI_API_KEY", "")

    @property
    def openai_endpoint(self) -> str:
        """Get Azure OpenAI endpoint."""
        return os.environ.get("OPENAI_ENDPOINT", "")

    @property
    def openai_key(self) -> str:
        """Get Azure OpenAI API key."""
        return os.environ.get("OPENAI_KEY", "")

    @property
    def openai_deployment(self) -> str:
        """Get Azure OpenAI chat deployment name."""
        return os.environ.get("OPENAI_DEPLOYMENT", "")

    # Azure Document Intelligence Configuration
    @property
    def di_endpoint(self) -> str:
        """Get Document Intelligence endpoint."""
        return os.environ.get("DI_ENDPOINT", "")

    @property
    def di_key(self) -> str:
        """Get Document Intelligence API key."""
        return os.environ.get("DI_KEY", "")

    # Logging Configuration
    @property
    def log_level(self) -> str:
        """Get logging level."""
        return os.environ.get("LOG_LEVEL", "INFO").upper()

    def validate(self) -> tuple[bool, list[str]]:
        """
        Check that every setting the selected modes depend on is present.

        Returns:
            (is_valid, names of missing or invalid environment variables)
        """
        needed = {"OPENAI_API_KEY": self.openai_api_key}
        if self.llm_provider == "azure":
            needed = {
                "OPENAI_ENDPOINT": self.openai_endpoint,
                "OPENAI_KEY": self.openai_key,
                "OPENAI_DEPLOYMENT": self.openai_deployment,
            }
        if self.document_parser == "azure":
            needed.update(DI_ENDPOINT=self.di_endpoint, DI_KEY=self.di_key)

        missing = [name for name, value in needed.items() if not value]
        if self.solver_mode not in SOLVER_MODES:
            missing.append(f"SOLVER_MODE ({'|'.join(SOLVER_MODES)})")
        return not missing, missing

    def describe(self) -> dict:
        """Effective settings with secrets masked, for the health endpoint."""
        return {
            "solver_mode": self.solver_mode,
            "document_parser": self.document_parser,
            "llm_provider": self.llm_provider,
            "max_upload_bytes": self.max_upload_bytes,
            "parse_timeout_seconds": self.parse_timeout_seconds,
            "request_timeout_seconds": self.request_timeout_seconds,
            "openai_api_key": self._mask(self.openai_api_key),
            "openai_key": self._mask(self.openai_key),
            "di_key": self._mask(self.di_key),
        }

    @staticmethod
    def _mask(value: str, show_chars: int = 4) -> str:
        """Keep the first and last few characters of a secret."""
        if not value or len(value) <= show_chars * 2:
            return "***"
        return f"{value[:show_chars]}...{value[-show_chars:]}"


config = Config()
