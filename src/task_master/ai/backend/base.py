"""Provider invoker interface for task generation."""

from __future__ import annotations

from typing import Protocol

from task_master.ai.models import ProviderConfig, RawProviderResponse, TaskSpecRequest


class ProviderInvoker(Protocol):
    """Protocol implemented by provider invokers."""

    name: str
    label: str
    credential_hint: str

    def invoke(self, config: ProviderConfig, request: TaskSpecRequest) -> RawProviderResponse:
        """Send one generation request and return the decoded response body."""

    def describe(self) -> str:
        """Return a one-line human-readable summary of the invoker."""
