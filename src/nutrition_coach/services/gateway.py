"""Language-model gateway interface and shared response handling."""

import re
from typing import Protocol

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


class GatewayError(RuntimeError):
    """Raised when the chat-completion backend fails to answer."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ModelGateway(Protocol):
    """Interface for a hosted chat-completion capability."""

    async def invoke(
        self, system: str | None, prompt: str, *, timeout: float | None = None
    ) -> str:
        """Send a system/user message pair and return normalized text."""


def build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
    """Build the chat message list with an optional system message."""
    messages: list[dict[str, str]] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    return messages


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapped around model output."""
    stripped = _LEADING_FENCE.sub("", text, count=1)
    stripped = _TRAILING_FENCE.sub("", stripped, count=1)
    return stripped.strip()
