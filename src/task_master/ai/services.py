"""Wiring of settings, HTTP clients, and invokers into a dispatcher."""

from __future__ import annotations

from task_master.ai.backend import (
    AnthropicMessagesInvoker,
    ChatCompletionsInvoker,
    ClientRegistry,
    CursorInvoker,
)
from task_master.ai.dispatcher import TaskGenerationDispatcher
from task_master.ai.indicator import LoadingIndicator, silent_indicator
from task_master.ai.retry import RetryPolicy
from task_master.ai.routing import (
    PROVIDER_CLAUDE,
    PROVIDER_CURSOR,
    PROVIDER_CURSOR_CLAUDE,
    PROVIDER_OPENAI,
    PROVIDER_PERPLEXITY,
    InvokerRegistry,
)
from task_master.config import ProviderSettings, Settings


def build_invoker_registry(
    settings: ProviderSettings,
    *,
    clients: ClientRegistry,
    indicator: LoadingIndicator = silent_indicator,
) -> InvokerRegistry:
    """Register every implemented provider against a shared client registry."""

    registry = InvokerRegistry(fallback_provider=settings.fallback_provider)
    registry.register(
        AnthropicMessagesInvoker(
            name=PROVIDER_CLAUDE,
            label="Claude",
            credential_hint="Anthropic API key",
            endpoint=settings.anthropic_api_endpoint,
            api_key=settings.anthropic_api_key,
            clients=clients,
            indicator=indicator,
        ),
    )
    registry.register(
        CursorInvoker(
            name=PROVIDER_CURSOR,
            label="Cursor",
            credential_hint="Cursor API key",
            endpoint=settings.cursor_api_endpoint,
            api_key=settings.cursor_api_key,
            clients=clients,
            indicator=indicator,
            model=settings.cursor_model,
        ),
    )
    registry.register(
        CursorInvoker(
            name=PROVIDER_CURSOR_CLAUDE,
            label="Cursor (Claude model)",
            credential_hint="Cursor API key",
            endpoint=settings.cursor_api_endpoint,
            api_key=settings.cursor_api_key,
            clients=clients,
            indicator=indicator,
        ),
    )
    registry.register(
        ChatCompletionsInvoker(
            name=PROVIDER_OPENAI,
            label="OpenAI",
            credential_hint="OpenAI API key",
            endpoint=settings.openai_api_endpoint,
            api_key=settings.openai_api_key,
            clients=clients,
            indicator=indicator,
            model=settings.openai_model,
        ),
    )
    registry.register(
        ChatCompletionsInvoker(
            name=PROVIDER_PERPLEXITY,
            label="Perplexity",
            credential_hint="Perplexity API key",
            endpoint=settings.perplexity_api_endpoint,
            api_key=settings.perplexity_api_key,
            clients=clients,
            indicator=indicator,
            model=settings.perplexity_model,
        ),
    )
    return registry


def build_dispatcher(
    settings: Settings,
    *,
    clients: ClientRegistry,
    indicator: LoadingIndicator = silent_indicator,
) -> TaskGenerationDispatcher:
    return TaskGenerationDispatcher(
        registry=build_invoker_registry(settings.provider, clients=clients, indicator=indicator),
        retry_policy=RetryPolicy.from_settings(settings.retry),
    )
