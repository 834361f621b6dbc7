"""Provider dispatch with bounded retries for task generation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from task_master.ai.failure_classifier import classify_provider_failure
from task_master.ai.models import ProviderConfig, ProviderFault, TaskSpecRequest
from task_master.ai.normalizer import normalize_response
from task_master.ai.retry import RetryPolicy
from task_master.ai.routing import InvokerRegistry

logger = logging.getLogger(__name__)


class ProviderCallError(RuntimeError):
    """Task generation failed with a classified provider fault."""

    def __init__(self, message: str, *, fault: ProviderFault, attempts: int) -> None:
        super().__init__(message)
        self.fault = fault
        self.attempts = attempts


class RetriesExhaustedError(ProviderCallError):
    """Every attempt allowed by the retry budget failed."""


@dataclass(slots=True)
class GenerationReport:
    """Outcome of one successful generation call."""

    provider: str
    payload: dict[str, Any]
    attempts: int
    faults: list[ProviderFault] = field(default_factory=list)

    @property
    def retries(self) -> int:
        return self.attempts - 1


class TaskGenerationDispatcher:
    """Routes a generation request to one provider and applies the retry policy."""

    def __init__(
        self,
        *,
        registry: InvokerRegistry,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.registry = registry
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    def generate(self, config: ProviderConfig, request: TaskSpecRequest) -> dict[str, Any]:
        """Return the normalized task-set payload produced by the configured provider."""

        return self.generate_with_report(config, request).payload

    def generate_with_report(
        self,
        config: ProviderConfig,
        request: TaskSpecRequest,
    ) -> GenerationReport:
        invoker = self.registry.resolve(config.provider_name)
        logger.info("Using AI provider: %s", invoker.name)

        faults: list[ProviderFault] = []
        retry_count = 0
        while True:
            try:
                raw = invoker.invoke(config, request)
                payload = normalize_response(raw.envelope, provider_label=invoker.label)
            except Exception as error:  # noqa: BLE001
                fault = classify_provider_failure(
                    error,
                    provider_label=invoker.label,
                    credential_hint=invoker.credential_hint,
                )
                faults.append(fault)
                logger.error(
                    "%s call failed [%s]: %s (%s)",
                    invoker.label,
                    fault.kind.value,
                    fault.user_message,
                    fault.raw_message,
                )
                if not self.retry_policy.should_retry(retry_count=retry_count, fault=fault):
                    raise self._final_error(
                        invoker_label=invoker.label,
                        request=request,
                        fault=fault,
                        attempts=retry_count + 1,
                    ) from error
                retry_count += 1
                logger.info("Retrying (%d/%d)...", retry_count, self.retry_policy.max_retries)
                delay = self.retry_policy.backoff.delay_seconds(retry_count)
                if delay > 0:
                    self._sleep(delay)
                continue

            return GenerationReport(
                provider=invoker.name,
                payload=payload,
                attempts=retry_count + 1,
                faults=faults,
            )

    def _final_error(
        self,
        *,
        invoker_label: str,
        request: TaskSpecRequest,
        fault: ProviderFault,
        attempts: int,
    ) -> ProviderCallError:
        message = (
            f"Failed to analyze {request.source_identifier} with {invoker_label}: "
            f"{fault.user_message}"
        )
        if attempts > self.retry_policy.max_retries:
            return RetriesExhaustedError(message, fault=fault, attempts=attempts)
        return ProviderCallError(message, fault=fault, attempts=attempts)
