"""Domain models for AI provider invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FaultKind(str, Enum):
    """Normalized provider failure categories."""

    AUTH = "auth"
    BAD_REQUEST = "bad_request"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    NETWORK = "network"
    PARSE_FAILURE = "parse_failure"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


@dataclass(slots=True, frozen=True)
class ProviderConfig:
    """Provider parameters, immutable for the duration of one invocation."""

    provider_name: str
    model_name: str
    max_tokens: int
    temperature: float

    def __post_init__(self) -> None:
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be > 0, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be in [0, 1], got {self.temperature}")


@dataclass(slots=True, frozen=True)
class TaskSpecRequest:
    """One task-generation request built from a source document."""

    source_content: str
    source_identifier: str
    requested_task_count: int

    def __post_init__(self) -> None:
        if self.requested_task_count < 1:
            raise ValueError(
                f"requested_task_count must be >= 1, got {self.requested_task_count}",
            )


@dataclass(slots=True)
class RawProviderResponse:
    """Decoded JSON body returned by a provider, before normalization."""

    provider: str
    envelope: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ProviderFault:
    """Classified provider failure with a user-facing message."""

    kind: FaultKind
    raw_message: str
    user_message: str
    status_code: int | None = None
