"""Chat-completion gateway backed by the OpenAI SDK."""

from dataclasses import dataclass

from openai import APIError, APIStatusError, AsyncOpenAI

from nutrition_coach.services.gateway import (
    GatewayError,
    ModelGateway,
    build_messages,
    strip_code_fences,
)


@dataclass
class OpenAIChatGateway(ModelGateway):
    """Gateway using the OpenAI chat completions API."""

    client: AsyncOpenAI
    model: str
    timeout_seconds: float = 60.0

    @classmethod
    def create(
        cls, api_key: str, base_url: str, model: str, timeout_seconds: float = 60.0
    ) -> "OpenAIChatGateway":
        """Create a gateway with an OpenAI client pointed at base_url."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0),
            model=model,
            timeout_seconds=timeout_seconds,
        )

    async def invoke(
        self, system: str | None, prompt: str, *, timeout: float | None = None
    ) -> str:
        """Call chat.completions.create and return normalized text."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=build_messages(system, prompt),
                timeout=timeout if timeout is not None else self.timeout_seconds,
            )
        except APIStatusError as exc:
            raise GatewayError(
                f"Chat completion returned HTTP {exc.status_code}",
                status_code=exc.status_code,
                body=exc.response.text,
            ) from exc
        except APIError as exc:
            raise GatewayError(f"Chat completion request failed: {exc}") from exc
        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        return strip_code_fences(content)

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()
