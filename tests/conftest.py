"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from task_master.ai.models import ProviderConfig, RawProviderResponse, TaskSpecRequest

_ENV_KEYS = (
    "AI_PROVIDER",
    "MODEL",
    "MAX_TOKENS",
    "TEMPERATURE",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_API_ENDPOINT",
    "CURSOR_API_KEY",
    "CURSOR_API_ENDPOINT",
    "CURSOR_MODEL",
    "OPENAI_API_KEY",
    "OPENAI_API_ENDPOINT",
    "OPENAI_MODEL",
    "PERPLEXITY_API_KEY",
    "PERPLEXITY_API_ENDPOINT",
    "PERPLEXITY_MODEL",
    "TASK_MASTER_FALLBACK_PROVIDER",
    "TASK_MASTER_VERIFY_TLS",
    "TASK_MASTER_REQUEST_TIMEOUT_SECONDS",
    "TASK_MASTER_MAX_RETRIES",
    "TASK_MASTER_RETRY_BACKOFF",
    "TASK_MASTER_RETRY_BACKOFF_BASE_SECONDS",
    "TASK_MASTER_RETRY_BACKOFF_MAX_SECONDS",
    "TASK_MASTER_RETRY_PARSE_FAILURES",
    "TASK_MASTER_TASKS_PATH",
    "TASK_MASTER_PROJECT_NAME",
    "TASK_MASTER_DEFAULT_NUM_TASKS",
    "TASK_MASTER_DEFAULT_SUBTASKS",
    "TASK_MASTER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials and overrides out of every test."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def provider_config() -> ProviderConfig:
    return ProviderConfig(
        provider_name="claude",
        model_name="claude-test",
        max_tokens=4000,
        temperature=0.7,
    )


@pytest.fixture()
def spec_request() -> TaskSpecRequest:
    return TaskSpecRequest(source_content="x", source_identifier="f.txt", requested_task_count=5)


class ScriptedInvoker:
    """Invoker double replaying a fixed sequence of errors and envelopes."""

    def __init__(
        self,
        name: str,
        outcomes: list[BaseException | dict[str, Any]],
        *,
        label: str | None = None,
    ) -> None:
        self.name = name
        self.label = label or name.capitalize()
        self.credential_hint = f"{self.label} API key"
        self.outcomes = list(outcomes)
        self.calls: list[tuple[ProviderConfig, TaskSpecRequest]] = []

    def invoke(self, config: ProviderConfig, request: TaskSpecRequest) -> RawProviderResponse:
        self.calls.append((config, request))
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return RawProviderResponse(provider=self.name, envelope=outcome)

    def describe(self) -> str:
        return f"{self.name}: scripted"


@pytest.fixture()
def scripted_invoker():
    return ScriptedInvoker
