"""Provider-independent classification of task generation failures."""

from __future__ import annotations

from task_master.ai.models import FaultKind, ProviderFault
from task_master.ai.normalizer import ResponseParseError
from task_master.ai.routing import UnsupportedProviderError

FAILURE_CLASSIFIER_VERSION = 1

_STATUS_KINDS: dict[int, FaultKind] = {
    400: FaultKind.BAD_REQUEST,
    401: FaultKind.AUTH,
    429: FaultKind.RATE_LIMIT,
}
_SERVER_ERROR_THRESHOLD = 500

_USER_MESSAGES: dict[FaultKind, str] = {
    FaultKind.AUTH: "Authentication failed. Please check your {credential_hint}.",
    FaultKind.BAD_REQUEST: "Bad request to {label} API. Please check your parameters.",
    FaultKind.RATE_LIMIT: "Rate limit exceeded with {label} API. Please try again later.",
    FaultKind.SERVER_ERROR: (
        "{label} API service is experiencing issues. Please try again later."
    ),
    FaultKind.NETWORK: "Could not reach {label} API. Please check your network connection.",
    FaultKind.PARSE_FAILURE: "{label} returned a response that is not the expected JSON.",
    FaultKind.UNSUPPORTED: "{label} cannot be used for task generation.",
    FaultKind.UNKNOWN: "An error occurred while calling {label}",
}


def classify_provider_failure(
    error: BaseException,
    *,
    provider_label: str = "the AI provider",
    credential_hint: str = "API key",
) -> ProviderFault:
    """Map any raised error to exactly one fault kind."""

    status_code = _status_code(error)
    kind = _classify_kind(error, status_code)
    return ProviderFault(
        kind=kind,
        raw_message=str(error) or type(error).__name__,
        user_message=user_message_for(
            kind,
            provider_label=provider_label,
            credential_hint=credential_hint,
        ),
        status_code=status_code,
    )


def user_message_for(kind: FaultKind, *, provider_label: str, credential_hint: str) -> str:
    return _USER_MESSAGES[kind].format(label=provider_label, credential_hint=credential_hint)


def _classify_kind(error: BaseException, status_code: int | None) -> FaultKind:
    if isinstance(error, ResponseParseError):
        return FaultKind.PARSE_FAILURE
    if isinstance(error, UnsupportedProviderError):
        return FaultKind.UNSUPPORTED
    if status_code is not None:
        if status_code >= _SERVER_ERROR_THRESHOLD:
            return FaultKind.SERVER_ERROR
        return _STATUS_KINDS.get(status_code, FaultKind.UNKNOWN)
    if _response_of(error) is None and _request_of(error) is not None:
        return FaultKind.NETWORK
    return FaultKind.UNKNOWN


def _status_code(error: BaseException) -> int | None:
    response = _response_of(error)
    for owner, attribute in (
        (response, "status_code"),
        (response, "status"),
        (error, "status_code"),
        (error, "status"),
    ):
        if owner is None:
            continue
        value = getattr(owner, attribute, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _response_of(error: BaseException) -> object | None:
    try:
        return getattr(error, "response", None)
    except RuntimeError:
        # httpx raises when the attribute was never populated.
        return None


def _request_of(error: BaseException) -> object | None:
    try:
        return getattr(error, "request", None)
    except RuntimeError:
        return None
