from __future__ import annotations

import allure
import pytest

from task_master.ai.routing import InvokerRegistry, UnsupportedProviderError

pytestmark = [
    allure.epic("AI Providers"),
    allure.feature("Provider Routing"),
]


def _registry(scripted_invoker) -> InvokerRegistry:
    registry = InvokerRegistry(fallback_provider="Claude")
    registry.register(scripted_invoker("claude", [{}]))
    registry.register(scripted_invoker("cursor", [{}]))
    return registry


def test_resolve_is_case_insensitive_exact_match(scripted_invoker) -> None:
    registry = _registry(scripted_invoker)
    assert registry.resolve("  CURSOR ").name == "cursor"
    assert registry.resolve("claude").name == "claude"


def test_unknown_provider_falls_back(scripted_invoker, caplog: pytest.LogCaptureFixture) -> None:
    registry = _registry(scripted_invoker)
    with caplog.at_level("WARNING"):
        invoker = registry.resolve("gemini")
    assert invoker.name == "claude"
    assert "falling back to claude" in caplog.text


def test_unconfigured_known_provider_is_unsupported(scripted_invoker) -> None:
    registry = _registry(scripted_invoker)
    with pytest.raises(UnsupportedProviderError, match="requires additional configuration"):
        registry.resolve("cody")


def test_missing_fallback_is_unsupported(scripted_invoker) -> None:
    registry = InvokerRegistry(fallback_provider="claude")
    registry.register(scripted_invoker("cursor", [{}]))
    with pytest.raises(UnsupportedProviderError, match="fallback provider 'claude'"):
        registry.resolve("mystery")


def test_register_rejects_duplicates(scripted_invoker) -> None:
    registry = _registry(scripted_invoker)
    with pytest.raises(ValueError, match="already registered"):
        registry.register(scripted_invoker("Cursor", [{}]))
    assert registry.names() == ("claude", "cursor")
