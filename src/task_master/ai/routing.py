"""Provider name resolution for task generation."""

from __future__ import annotations

import logging

from task_master.ai.backend.base import ProviderInvoker

logger = logging.getLogger(__name__)

PROVIDER_CLAUDE = "claude"
PROVIDER_OPENAI = "openai"
PROVIDER_PERPLEXITY = "perplexity"
PROVIDER_CODY = "cody"
PROVIDER_CONTINUE = "continue"
PROVIDER_CURSOR = "cursor"
PROVIDER_CURSOR_CLAUDE = "cursor-claude"

KNOWN_PROVIDERS = (
    PROVIDER_CLAUDE,
    PROVIDER_OPENAI,
    PROVIDER_PERPLEXITY,
    PROVIDER_CODY,
    PROVIDER_CONTINUE,
    PROVIDER_CURSOR,
    PROVIDER_CURSOR_CLAUDE,
)
UNCONFIGURED_PROVIDERS = (PROVIDER_CODY, PROVIDER_CONTINUE)


class UnsupportedProviderError(ValueError):
    """Provider cannot be used for task generation."""


class InvokerRegistry:
    """Maps provider names to invokers, with an explicit fallback for unknown names."""

    def __init__(self, *, fallback_provider: str) -> None:
        self.fallback_provider = _normalize_provider(fallback_provider)
        self._invokers: dict[str, ProviderInvoker] = {}

    def register(self, invoker: ProviderInvoker) -> None:
        name = _normalize_provider(invoker.name)
        if name in self._invokers:
            raise ValueError(f"Provider already registered: {name!r}")
        self._invokers[name] = invoker

    def names(self) -> tuple[str, ...]:
        return tuple(self._invokers)

    def invokers(self) -> list[ProviderInvoker]:
        return list(self._invokers.values())

    def resolve(self, provider_name: str) -> ProviderInvoker:
        """Return the invoker for a provider name.

        Matching is exact after trimming and lowercasing. Providers that are
        known but need extra setup raise ``UnsupportedProviderError``; any
        other unknown name resolves to the fallback provider.
        """

        name = _normalize_provider(provider_name)
        invoker = self._invokers.get(name)
        if invoker is not None:
            return invoker
        if name in UNCONFIGURED_PROVIDERS:
            raise UnsupportedProviderError(f"Provider {name} requires additional configuration")

        fallback = self._invokers.get(self.fallback_provider)
        if fallback is None:
            raise UnsupportedProviderError(
                f"Unsupported AI provider: {provider_name!r} and fallback provider "
                f"{self.fallback_provider!r} is not registered. "
                f"Registered providers: {', '.join(self._invokers) or 'none'}.",
            )
        logger.warning(
            "Unknown AI provider %r; falling back to %s",
            provider_name,
            self.fallback_provider,
        )
        return fallback


def _normalize_provider(value: str) -> str:
    return value.strip().lower()
