"""Strict JSON payload extraction from provider response envelopes."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


class ResponseParseError(ValueError):
    """Provider response carried no usable JSON payload."""


def normalize_response(
    envelope: Mapping[str, Any],
    *,
    provider_label: str = "provider",
) -> dict[str, Any]:
    """Extract the JSON document from an envelope and parse it strictly.

    Content lookup order, first non-empty match wins:

    1. direct text field: ``content`` as a string, or ``content[0].text``
    2. ``message.content``
    3. ``choices[0].message.content``

    The extracted text must be a bare JSON object. Markdown fences and
    trailing commas are rejected like any other invalid JSON.
    """

    content = extract_content(envelope)
    if content is None:
        logger.error("Error parsing %s response: no content field", provider_label)
        raise ResponseParseError(f"No content found in {provider_label} response")

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as error:
        logger.error("Error parsing %s response: %s", provider_label, error)
        raise ResponseParseError(f"Failed to parse {provider_label} response: {error}") from error

    if not isinstance(parsed, dict):
        raise ResponseParseError(
            f"Failed to parse {provider_label} response: "
            f"expected a JSON object, got {type(parsed).__name__}",
        )
    return parsed


def extract_content(envelope: Mapping[str, Any]) -> str | None:
    """Return the JSON-bearing text of an envelope, or None when absent."""

    for candidate in (
        _direct_content(envelope),
        _message_content(envelope.get("message")),
        _choices_content(envelope.get("choices")),
    ):
        if candidate:
            return candidate
    return None


def _direct_content(envelope: Mapping[str, Any]) -> str | None:
    content = envelope.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list) and content:
        first = content[0]
        if isinstance(first, Mapping) and isinstance(first.get("text"), str):
            return first["text"]
    return None


def _message_content(message: object) -> str | None:
    if not isinstance(message, Mapping):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def _choices_content(choices: object) -> str | None:
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, Mapping):
        return None
    return _message_content(first.get("message"))
