"""Runtime configuration for task generation and provider access."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from task_master.ai.models import ProviderConfig

SUPPORTED_BACKOFFS = ("none", "exponential")
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class ProviderSettings:
    """AI provider selection, credentials, and request parameters."""

    provider: str = "cursor-claude"
    fallback_provider: str = "claude"
    model: str = "claude-3-7-sonnet-20250219"
    max_tokens: int = 4096
    temperature: float = 0.7
    anthropic_api_key: str = ""
    anthropic_api_endpoint: str = "https://api.anthropic.com/v1/messages"
    cursor_api_key: str = ""
    cursor_api_endpoint: str = "https://api.cursor.sh/v1/chat/completions"
    cursor_model: str = "cursor-fast"
    openai_api_key: str = ""
    openai_api_endpoint: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-4o"
    perplexity_api_key: str = ""
    perplexity_api_endpoint: str = "https://api.perplexity.ai/chat/completions"
    perplexity_model: str = "sonar-pro"
    verify_tls: bool = True
    request_timeout_seconds: float = 120.0


@dataclass(slots=True)
class RetrySettings:
    """Retry budget and backoff for provider calls."""

    max_retries: int = 2
    backoff: str = "none"
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 30.0
    retry_parse_failures: bool = True


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    tasks_path: Path = Path("tasks/tasks.json")
    project_name: str = "PRD Implementation"
    default_num_tasks: int = 10
    default_subtasks: int = 3
    log_level: str = "INFO"
    provider: ProviderSettings = field(default_factory=ProviderSettings)
    retry: RetrySettings = field(default_factory=RetrySettings)

    @classmethod
    def from_env(cls, tasks_path: Path | None = None) -> Settings:
        """Load settings from environment, falling back to static defaults."""

        defaults = ProviderSettings()
        return cls(
            tasks_path=tasks_path
            or Path(os.getenv("TASK_MASTER_TASKS_PATH", "tasks/tasks.json")),
            project_name=os.getenv("TASK_MASTER_PROJECT_NAME", "PRD Implementation"),
            default_num_tasks=_env_int("TASK_MASTER_DEFAULT_NUM_TASKS", 10),
            default_subtasks=_env_int("TASK_MASTER_DEFAULT_SUBTASKS", 3),
            log_level=os.getenv("TASK_MASTER_LOG_LEVEL", "INFO").strip().upper(),
            provider=ProviderSettings(
                provider=os.getenv("AI_PROVIDER", defaults.provider).strip() or defaults.provider,
                fallback_provider=os.getenv(
                    "TASK_MASTER_FALLBACK_PROVIDER",
                    defaults.fallback_provider,
                ).strip(),
                model=os.getenv("MODEL", defaults.model),
                max_tokens=_env_int("MAX_TOKENS", defaults.max_tokens),
                temperature=_env_float("TEMPERATURE", defaults.temperature),
                anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
                anthropic_api_endpoint=os.getenv(
                    "ANTHROPIC_API_ENDPOINT",
                    defaults.anthropic_api_endpoint,
                ),
                cursor_api_key=os.getenv("CURSOR_API_KEY", ""),
                cursor_api_endpoint=os.getenv("CURSOR_API_ENDPOINT", defaults.cursor_api_endpoint),
                cursor_model=os.getenv("CURSOR_MODEL", defaults.cursor_model),
                openai_api_key=os.getenv("OPENAI_API_KEY", ""),
                openai_api_endpoint=os.getenv("OPENAI_API_ENDPOINT", defaults.openai_api_endpoint),
                openai_model=os.getenv("OPENAI_MODEL", defaults.openai_model),
                perplexity_api_key=os.getenv("PERPLEXITY_API_KEY", ""),
                perplexity_api_endpoint=os.getenv(
                    "PERPLEXITY_API_ENDPOINT",
                    defaults.perplexity_api_endpoint,
                ),
                perplexity_model=os.getenv("PERPLEXITY_MODEL", defaults.perplexity_model),
                verify_tls=_env_bool("TASK_MASTER_VERIFY_TLS", default=True),
                request_timeout_seconds=_env_float("TASK_MASTER_REQUEST_TIMEOUT_SECONDS", 120.0),
            ),
            retry=RetrySettings(
                max_retries=_env_int("TASK_MASTER_MAX_RETRIES", 2),
                backoff=os.getenv("TASK_MASTER_RETRY_BACKOFF", "none").strip().lower(),
                backoff_base_seconds=_env_float("TASK_MASTER_RETRY_BACKOFF_BASE_SECONDS", 1.0),
                backoff_max_seconds=_env_float("TASK_MASTER_RETRY_BACKOFF_MAX_SECONDS", 30.0),
                retry_parse_failures=_env_bool(
                    "TASK_MASTER_RETRY_PARSE_FAILURES",
                    default=True,
                ),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error if any value is out of range."""

        if self.provider.max_tokens <= 0:
            raise ValueError("MAX_TOKENS must be a positive integer.")
        if not 0.0 <= self.provider.temperature <= 1.0:
            raise ValueError("TEMPERATURE must be between 0 and 1.")
        if self.provider.request_timeout_seconds <= 0:
            raise ValueError("TASK_MASTER_REQUEST_TIMEOUT_SECONDS must be > 0.")
        if not self.provider.fallback_provider:
            raise ValueError("TASK_MASTER_FALLBACK_PROVIDER must not be empty.")
        for name, url in (
            ("ANTHROPIC_API_ENDPOINT", self.provider.anthropic_api_endpoint),
            ("CURSOR_API_ENDPOINT", self.provider.cursor_api_endpoint),
            ("OPENAI_API_ENDPOINT", self.provider.openai_api_endpoint),
            ("PERPLEXITY_API_ENDPOINT", self.provider.perplexity_api_endpoint),
        ):
            _validate_endpoint(name, url)
        if self.retry.max_retries < 0:
            raise ValueError("TASK_MASTER_MAX_RETRIES must be >= 0.")
        if self.retry.backoff not in SUPPORTED_BACKOFFS:
            raise ValueError(
                f"Unsupported TASK_MASTER_RETRY_BACKOFF: {self.retry.backoff!r}. "
                f"Use one of {SUPPORTED_BACKOFFS}.",
            )
        if self.retry.backoff_base_seconds < 0 or self.retry.backoff_max_seconds < 0:
            raise ValueError("Retry backoff seconds must be >= 0.")
        if self.default_num_tasks < 1:
            raise ValueError("TASK_MASTER_DEFAULT_NUM_TASKS must be >= 1.")
        if self.default_subtasks < 1:
            raise ValueError("TASK_MASTER_DEFAULT_SUBTASKS must be >= 1.")
        if self.log_level not in SUPPORTED_LOG_LEVELS:
            raise ValueError(f"Unsupported TASK_MASTER_LOG_LEVEL: {self.log_level!r}")

    def provider_config(self, provider_override: str | None = None) -> ProviderConfig:
        """Snapshot the provider parameters used for one invocation."""

        return ProviderConfig(
            provider_name=provider_override or self.provider.provider,
            model_name=self.provider.model,
            max_tokens=self.provider.max_tokens,
            temperature=self.provider.temperature,
        )


def _validate_endpoint(name: str, value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(
            f"Invalid {name}: {value!r}. Expected an absolute URL with http:// or https:// scheme.",
        )


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as error:
        raise ValueError(f"Invalid number value for {name}: {value!r}") from error
