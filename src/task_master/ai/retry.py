"""Retry budget and backoff strategies for provider calls."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Protocol

from task_master.ai.models import FaultKind, ProviderFault
from task_master.config import RetrySettings

DEFAULT_MAX_RETRIES = 2


class BackoffStrategy(Protocol):
    """Computes the pause before a retry."""

    def delay_seconds(self, retry_number: int) -> float:
        """Return seconds to wait before retry ``retry_number`` (1-based)."""


@dataclass(slots=True, frozen=True)
class NoBackoff:
    """Retry immediately."""

    def delay_seconds(self, retry_number: int) -> float:  # noqa: ARG002
        return 0.0


@dataclass(slots=True)
class ExponentialBackoff:
    """Capped exponential delay, optionally with full jitter."""

    base_seconds: float = 1.0
    max_seconds: float = 30.0
    jitter: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def delay_seconds(self, retry_number: int) -> float:
        cap = min(self.max_seconds, self.base_seconds * (2 ** max(retry_number - 1, 0)))
        if self.jitter:
            return self.rng.uniform(0, cap)
        return cap


@dataclass(slots=True)
class RetryPolicy:
    """Decides whether a classified fault gets another attempt."""

    max_retries: int = DEFAULT_MAX_RETRIES
    backoff: BackoffStrategy = field(default_factory=NoBackoff)
    retry_parse_failures: bool = True

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> RetryPolicy:
        return cls(
            max_retries=settings.max_retries,
            backoff=build_backoff(
                settings.backoff,
                base_seconds=settings.backoff_base_seconds,
                max_seconds=settings.backoff_max_seconds,
            ),
            retry_parse_failures=settings.retry_parse_failures,
        )

    def should_retry(self, *, retry_count: int, fault: ProviderFault) -> bool:
        if retry_count >= self.max_retries:
            return False
        if fault.kind is FaultKind.UNSUPPORTED:
            return False
        if fault.kind is FaultKind.PARSE_FAILURE:
            return self.retry_parse_failures
        return True


def build_backoff(name: str, *, base_seconds: float, max_seconds: float) -> BackoffStrategy:
    normalized = name.strip().lower()
    if normalized == "none":
        return NoBackoff()
    if normalized == "exponential":
        return ExponentialBackoff(base_seconds=base_seconds, max_seconds=max_seconds)
    raise ValueError(f"Unsupported retry backoff: {name!r}. Use none or exponential.")
