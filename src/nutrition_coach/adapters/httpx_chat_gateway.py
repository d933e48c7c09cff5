"""Chat-completion gateway over plain HTTP (OpenRouter-compatible)."""

import logging
from dataclasses import dataclass

import httpx

from nutrition_coach.services.gateway import (
    GatewayError,
    ModelGateway,
    build_messages,
    strip_code_fences,
)

_logger = logging.getLogger(__name__)


@dataclass
class HttpxChatGateway(ModelGateway):
    """HTTPX-backed chat-completion gateway."""

    api_key: str
    base_url: str
    model: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 60.0

    @classmethod
    def create(
        cls, api_key: str, base_url: str, model: str, timeout_seconds: float = 60.0
    ) -> "HttpxChatGateway":
        """Create a gateway with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            model=model,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def invoke(
        self, system: str | None, prompt: str, *, timeout: float | None = None
    ) -> str:
        """POST a chat completion request and return normalized text."""
        url = f"{self.base_url}/chat/completions"
        try:
            response = await self.http_client.post(
                url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={"model": self.model, "messages": build_messages(system, prompt)},
                timeout=timeout if timeout is not None else self.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise GatewayError(f"Chat completion request failed: {exc}") from exc
        if not response.is_success:
            _logger.error(
                "Chat completion error: status=%s body=%s",
                response.status_code,
                response.text,
            )
            raise GatewayError(
                f"Chat completion returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise GatewayError(
                "Chat completion returned a non-JSON body",
                status_code=response.status_code,
                body=response.text,
            ) from exc
        if not isinstance(payload, dict):
            raise GatewayError(
                "Chat completion returned an unexpected payload",
                status_code=response.status_code,
                body=response.text,
            )
        return strip_code_fences(_first_choice_text(payload))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _first_choice_text(payload: dict[str, object]) -> str:
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict):
        return ""
    message = first.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""
