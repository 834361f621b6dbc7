"""Provider invoker implementations."""

from task_master.ai.backend.base import ProviderInvoker
from task_master.ai.backend.clients import ClientRegistry
from task_master.ai.backend.http_backend import (
    AnthropicMessagesInvoker,
    ChatCompletionsInvoker,
    CursorInvoker,
    HttpProviderInvoker,
)

__all__ = [
    "AnthropicMessagesInvoker",
    "ChatCompletionsInvoker",
    "ClientRegistry",
    "CursorInvoker",
    "HttpProviderInvoker",
    "ProviderInvoker",
]
