"""Lazily created HTTP clients, one per provider."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120.0
DEFAULT_USER_AGENT = "task-master/1.0"


class ClientRegistry:
    """Owns one reusable ``httpx.Client`` per provider name.

    Clients are created on first use and kept until ``close``. TLS
    verification is strict unless explicitly disabled.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        verify_tls: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_seconds, connect=10.0)
        self._verify_tls = verify_tls
        self._user_agent = user_agent
        self._transport = transport
        self._clients: dict[str, httpx.Client] = {}

    @property
    def verify_tls(self) -> bool:
        return self._verify_tls

    def get(self, provider: str) -> httpx.Client:
        client = self._clients.get(provider)
        if client is None:
            client = self._create(provider)
            self._clients[provider] = client
        return client

    def cached_providers(self) -> tuple[str, ...]:
        return tuple(self._clients)

    def _create(self, provider: str) -> httpx.Client:
        if not self._verify_tls:
            logger.warning(
                "TLS certificate verification is disabled for %s. "
                "Use TASK_MASTER_VERIFY_TLS=0 for development only.",
                provider,
            )
        logger.debug("Creating HTTP client for %s", provider)
        return httpx.Client(
            timeout=self._timeout,
            headers={"User-Agent": self._user_agent},
            verify=self._verify_tls,
            transport=self._transport,
        )

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()

    def __enter__(self) -> ClientRegistry:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
