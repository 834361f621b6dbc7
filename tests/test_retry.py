from __future__ import annotations

import random

import allure
import pytest

from task_master.ai.models import FaultKind, ProviderFault
from task_master.ai.retry import (
    ExponentialBackoff,
    NoBackoff,
    RetryPolicy,
    build_backoff,
)
from task_master.config import RetrySettings

pytestmark = [
    allure.epic("AI Providers"),
    allure.feature("Retry Policy"),
]


def _fault(kind: FaultKind) -> ProviderFault:
    return ProviderFault(kind=kind, raw_message="x", user_message="x")


def test_default_policy_allows_two_retries() -> None:
    policy = RetryPolicy()
    fault = _fault(FaultKind.SERVER_ERROR)
    assert policy.should_retry(retry_count=0, fault=fault)
    assert policy.should_retry(retry_count=1, fault=fault)
    assert not policy.should_retry(retry_count=2, fault=fault)


def test_policy_retries_auth_and_parse_failures_by_default() -> None:
    policy = RetryPolicy()
    assert policy.should_retry(retry_count=0, fault=_fault(FaultKind.AUTH))
    assert policy.should_retry(retry_count=0, fault=_fault(FaultKind.PARSE_FAILURE))


def test_policy_can_stop_retrying_parse_failures() -> None:
    policy = RetryPolicy(retry_parse_failures=False)
    assert not policy.should_retry(retry_count=0, fault=_fault(FaultKind.PARSE_FAILURE))
    assert policy.should_retry(retry_count=0, fault=_fault(FaultKind.NETWORK))


def test_policy_never_retries_unsupported_provider() -> None:
    assert not RetryPolicy().should_retry(retry_count=0, fault=_fault(FaultKind.UNSUPPORTED))


def test_no_backoff_is_flat() -> None:
    backoff = NoBackoff()
    assert [backoff.delay_seconds(n) for n in (1, 2, 3)] == [0.0, 0.0, 0.0]


def test_exponential_backoff_doubles_up_to_cap() -> None:
    backoff = ExponentialBackoff(base_seconds=1.0, max_seconds=5.0)
    assert [backoff.delay_seconds(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 5.0]


def test_exponential_backoff_jitter_stays_within_cap() -> None:
    backoff = ExponentialBackoff(
        base_seconds=2.0,
        max_seconds=10.0,
        jitter=True,
        rng=random.Random(7),
    )
    for retry_number in range(1, 6):
        cap = min(10.0, 2.0 * 2 ** (retry_number - 1))
        assert 0.0 <= backoff.delay_seconds(retry_number) <= cap


def test_build_backoff_rejects_unknown_strategy() -> None:
    assert isinstance(build_backoff("none", base_seconds=1, max_seconds=2), NoBackoff)
    exponential = build_backoff(" Exponential ", base_seconds=1, max_seconds=2)
    assert isinstance(exponential, ExponentialBackoff)
    with pytest.raises(ValueError, match="Unsupported retry backoff"):
        build_backoff("linear", base_seconds=1, max_seconds=2)


def test_policy_from_settings() -> None:
    policy = RetryPolicy.from_settings(
        RetrySettings(
            max_retries=4,
            backoff="exponential",
            backoff_base_seconds=0.5,
            backoff_max_seconds=3.0,
            retry_parse_failures=False,
        ),
    )
    assert policy.max_retries == 4
    assert isinstance(policy.backoff, ExponentialBackoff)
    assert policy.backoff.delay_seconds(3) == 2.0
    assert policy.retry_parse_failures is False
