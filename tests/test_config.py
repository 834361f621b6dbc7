from __future__ import annotations

from pathlib import Path

import allure
import pytest

from task_master.config import ProviderSettings, RetrySettings, Settings

pytestmark = [
    allure.epic("Configuration"),
    allure.feature("Settings"),
]


def test_from_env_uses_static_defaults() -> None:
    settings = Settings.from_env()

    assert settings.tasks_path == Path("tasks/tasks.json")
    assert settings.provider.provider == "cursor-claude"
    assert settings.provider.fallback_provider == "claude"
    assert settings.provider.max_tokens == 4096
    assert settings.provider.temperature == 0.7
    assert settings.provider.verify_tls is True
    assert settings.retry.max_retries == 2
    assert settings.retry.backoff == "none"
    assert settings.retry.retry_parse_failures is True
    settings.validate()


def test_from_env_environment_takes_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AI_PROVIDER", "cursor")
    monkeypatch.setenv("MODEL", "claude-env")
    monkeypatch.setenv("MAX_TOKENS", "8000")
    monkeypatch.setenv("TEMPERATURE", "0.2")
    monkeypatch.setenv("CURSOR_API_KEY", "cursor-key")
    monkeypatch.setenv("CURSOR_API_ENDPOINT", "https://cursor.example/v1")
    monkeypatch.setenv("CURSOR_MODEL", "cursor-env")
    monkeypatch.setenv("PERPLEXITY_API_KEY", "pplx-key")
    monkeypatch.setenv("TASK_MASTER_VERIFY_TLS", "off")
    monkeypatch.setenv("TASK_MASTER_RETRY_BACKOFF", "Exponential")
    monkeypatch.setenv("TASK_MASTER_RETRY_PARSE_FAILURES", "no")

    settings = Settings.from_env()

    assert settings.provider.provider == "cursor"
    assert settings.provider.model == "claude-env"
    assert settings.provider.max_tokens == 8000
    assert settings.provider.temperature == 0.2
    assert settings.provider.cursor_api_key == "cursor-key"
    assert settings.provider.cursor_api_endpoint == "https://cursor.example/v1"
    assert settings.provider.cursor_model == "cursor-env"
    assert settings.provider.perplexity_api_key == "pplx-key"
    assert settings.provider.verify_tls is False
    assert settings.retry.backoff == "exponential"
    assert settings.retry.retry_parse_failures is False
    settings.validate()


def test_from_env_rejects_invalid_boolean(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASK_MASTER_VERIFY_TLS", "maybe")
    with pytest.raises(ValueError, match="Invalid boolean value for TASK_MASTER_VERIFY_TLS"):
        Settings.from_env()


@pytest.mark.parametrize(
    ("key", "value", "message"),
    [
        ("MAX_TOKENS", "lots", "Invalid integer value for MAX_TOKENS: 'lots'"),
        ("TASK_MASTER_MAX_RETRIES", "2.5", "Invalid integer value for TASK_MASTER_MAX_RETRIES"),
        ("TEMPERATURE", "warm", "Invalid number value for TEMPERATURE: 'warm'"),
        (
            "TASK_MASTER_REQUEST_TIMEOUT_SECONDS",
            "soon",
            "Invalid number value for TASK_MASTER_REQUEST_TIMEOUT_SECONDS",
        ),
    ],
)
def test_from_env_rejects_non_numeric_values_naming_the_key(
    monkeypatch: pytest.MonkeyPatch,
    key: str,
    value: str,
    message: str,
) -> None:
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError, match=message):
        Settings.from_env()


def test_from_env_tasks_path_argument_overrides_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASK_MASTER_TASKS_PATH", "env/tasks.json")
    assert Settings.from_env().tasks_path == Path("env/tasks.json")
    assert Settings.from_env(tasks_path=Path("cli.json")).tasks_path == Path("cli.json")


@pytest.mark.parametrize(
    ("settings", "message"),
    [
        (Settings(provider=ProviderSettings(max_tokens=0)), "MAX_TOKENS"),
        (Settings(provider=ProviderSettings(temperature=1.5)), "TEMPERATURE"),
        (Settings(provider=ProviderSettings(fallback_provider="")), "FALLBACK_PROVIDER"),
        (
            Settings(provider=ProviderSettings(cursor_api_endpoint="ftp://cursor")),
            "Invalid CURSOR_API_ENDPOINT",
        ),
        (Settings(retry=RetrySettings(max_retries=-1)), "MAX_RETRIES"),
        (Settings(retry=RetrySettings(backoff="linear")), "RETRY_BACKOFF"),
        (Settings(default_subtasks=0), "DEFAULT_SUBTASKS"),
        (Settings(log_level="LOUD"), "LOG_LEVEL"),
    ],
)
def test_validate_rejects_out_of_range_values(settings: Settings, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        settings.validate()


def test_provider_config_snapshot_and_override() -> None:
    settings = Settings(provider=ProviderSettings(provider="claude", model="m", max_tokens=10))

    config = settings.provider_config()
    assert (config.provider_name, config.model_name, config.max_tokens) == ("claude", "m", 10)
    assert settings.provider_config("perplexity").provider_name == "perplexity"
