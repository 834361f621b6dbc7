"""HTTP invokers for chat-completion style AI providers."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from task_master.ai.backend.clients import ClientRegistry
from task_master.ai.indicator import LoadingIndicator, silent_indicator
from task_master.ai.models import ProviderConfig, RawProviderResponse, TaskSpecRequest
from task_master.ai.normalizer import ResponseParseError
from task_master.ai.prompts import render_task_generation_prompt

logger = logging.getLogger(__name__)

ANTHROPIC_API_VERSION = "2023-06-01"
_CERTIFICATE_MARKERS = ("certificate", "self-signed", "self signed")


class HttpProviderInvoker:
    """Shared request/response cycle for JSON-over-HTTP providers."""

    def __init__(  # noqa: PLR0913
        self,
        *,
        name: str,
        label: str,
        credential_hint: str,
        endpoint: str,
        api_key: str,
        clients: ClientRegistry,
        indicator: LoadingIndicator = silent_indicator,
        model: str | None = None,
    ) -> None:
        self.name = name
        self.label = label
        self.credential_hint = credential_hint
        self.endpoint = endpoint
        self.api_key = api_key
        self.model = model
        self._clients = clients
        self._indicator = indicator

    def describe(self) -> str:
        model = self.model or "configured MODEL"
        return f"{self.name}: {self.label} at {self.endpoint} (model: {model})"

    def resolve_model(self, config: ProviderConfig) -> str:
        return self.model or config.model_name

    def invoke(self, config: ProviderConfig, request: TaskSpecRequest) -> RawProviderResponse:
        system_prompt = render_task_generation_prompt(
            num_tasks=request.requested_task_count,
            source_identifier=request.source_identifier,
        )
        model = self.resolve_model(config)
        logger.debug("Calling %s with system prompt: %s", self.label, system_prompt)
        logger.debug("Using model: %s", model)
        if not self.api_key:
            logger.warning(
                "No API key configured for %s; expect an authentication error",
                self.label,
            )

        body = self.build_body(
            config=config,
            model=model,
            system_prompt=system_prompt,
            user_content=request.source_content,
        )
        client = self._clients.get(self.name)
        try:
            with self._indicator(f"Analyzing with {self.label}..."):
                response = client.post(self.endpoint, json=body, headers=self.build_headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as error:
            logger.error(
                "%s API error (%s): %s",
                self.label,
                error.response.status_code,
                _error_detail(error.response),
            )
            raise
        except httpx.RequestError as error:
            logger.error("%s API network error: %s", self.label, error)
            if any(marker in str(error).lower() for marker in _CERTIFICATE_MARKERS):
                logger.warning(
                    "SSL certificate issue detected. Consider setting TASK_MASTER_VERIFY_TLS=0 "
                    "for testing purposes only.",
                )
            raise

        try:
            envelope = response.json()
        except ValueError as error:
            # JSONDecodeError and UnicodeDecodeError are both ValueError.
            raise ResponseParseError(f"{self.label} returned a non-JSON body: {error}") from error
        if not isinstance(envelope, dict):
            raise ResponseParseError(f"{self.label} returned a non-object JSON body")
        logger.debug("%s response: %s", self.label, json.dumps(envelope)[:2000])
        return RawProviderResponse(provider=self.name, envelope=envelope)

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def build_body(
        self,
        *,
        config: ProviderConfig,
        model: str,
        system_prompt: str,
        user_content: str,
    ) -> dict[str, Any]:
        return {
            "model": model,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_content}],
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }


class AnthropicMessagesInvoker(HttpProviderInvoker):
    """Claude through the Anthropic Messages API."""

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_API_VERSION,
        }


class CursorInvoker(HttpProviderInvoker):
    """Cursor API; with ``model=None`` the configured Claude model is requested."""


class ChatCompletionsInvoker(HttpProviderInvoker):
    """OpenAI-compatible ``/chat/completions`` endpoint."""

    def build_body(
        self,
        *,
        config: ProviderConfig,
        model: str,
        system_prompt: str,
        user_content: str,
    ) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(payload, dict) and "error" in payload:
        return str(payload["error"])
    return json.dumps(payload)[:500]
