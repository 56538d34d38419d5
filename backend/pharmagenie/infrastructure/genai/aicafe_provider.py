"""HCL AI Cafe client — implements the GenAIProvider interface.

Talks to the AI Cafe gateway, an Azure-OpenAI-compatible deployment API,
using httpx for both non-streaming and SSE streaming chat completions.
"""

import json
import logging
from collections.abc import AsyncIterator

import httpx

from pharmagenie.application.interfaces.genai_provider import GenAIConfig, GenAIProvider
from pharmagenie.domain.entities import GenAIRequest, GenAIResponse, StreamEvent, TokenUsage
from pharmagenie.domain.exceptions import GenAIProviderError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://aicafe.hcl.com/AICafeService/api/v1/subscription/openai"
DEFAULT_API_VERSION = "2024-12-01-preview"


class AICafeProvider(GenAIProvider):
    """Infrastructure adapter — connects to the HCL AI Cafe gateway.

    The deployment name doubles as the model name. An injected
    ``http_client`` is reused and never closed here.
    """

    def __init__(
        self,
        config: GenAIConfig,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        api_version: str = DEFAULT_API_VERSION,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(config)
        self._endpoint = endpoint.rstrip("/")
        self._api_version = api_version
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "hcl-aicafe"

    @property
    def url(self) -> str:
        return (
            f"{self._endpoint}/deployments/{self._config.model}/chat/completions"
            f"?api-version={self._api_version}"
        )

    def _get_headers(self) -> dict[str, str]:
        """Standard headers for AI Cafe requests."""
        return {
            "Content-Type": "application/json",
            "api-key": self._config.api_key,
        }

    def _build_payload(self, request: GenAIRequest, *, stream: bool = False) -> dict:
        """Build the request payload for the chat completions API."""
        payload: dict = {
            "model": self._config.model,
            "messages": self.build_messages(request),
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "top_p": self._config.top_p,
        }
        if stream:
            payload["stream"] = True
        return payload

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=120.0)

    async def generate(self, request: GenAIRequest) -> GenAIResponse:
        """Send a non-streaming chat completion to AI Cafe."""
        payload = self._build_payload(request)

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(
                self.url, headers=self._get_headers(), json=payload
            )

            if response.status_code != 200:
                self._raise_provider_error(response)

            return self._parse_completion_response(response.json())

        except httpx.HTTPError as exc:
            logger.error("AI Cafe request failed: %s", exc)
            raise GenAIProviderError(
                provider=self.provider_name,
                status_code=502,
                message=f"Failed to reach AI Cafe: {exc}",
            ) from exc

        finally:
            if should_close:
                await client.aclose()

    async def stream_generate(self, request: GenAIRequest) -> AsyncIterator[StreamEvent]:
        """Stream a chat completion from AI Cafe.

        Parses ``data: {...}`` SSE lines into chunk events; ``data: [DONE]``
        ends the stream with a ``done`` event carrying the full reply.
        """
        payload = self._build_payload(request, stream=True)

        client = await self._get_client()
        should_close = self._http_client is None
        parts: list[str] = []

        try:
            async with client.stream(
                "POST", self.url, headers=self._get_headers(), json=payload
            ) as response:
                if response.status_code != 200:
                    body = await response.aread()
                    self._raise_provider_error_from_bytes(
                        response.status_code, body
                    )

                async for line in response.aiter_lines():
                    # Skip empty lines and keepalive comments
                    if not line or line.startswith(":"):
                        continue
                    if not line.startswith("data: "):
                        continue

                    data = line[len("data: "):].strip()
                    if data == "[DONE]":
                        break

                    content = self._delta_content(data)
                    if content:
                        parts.append(content)
                        yield StreamEvent(type="chunk", content=content)

        except httpx.HTTPError as exc:
            logger.error("AI Cafe stream failed: %s", exc)
            raise GenAIProviderError(
                provider=self.provider_name,
                status_code=502,
                message=f"Failed to reach AI Cafe: {exc}",
            ) from exc

        finally:
            if should_close:
                await client.aclose()

        yield StreamEvent(type="done", content="".join(parts))

    @staticmethod
    def _delta_content(data: str) -> str:
        """Content of one streamed delta; malformed chunks yield ""."""
        try:
            parsed = json.loads(data)
        except json.JSONDecodeError:
            logger.debug("Skipping malformed stream chunk: %s", data[:200])
            return ""
        choices = parsed.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("delta") or {}).get("content") or ""

    def _parse_completion_response(self, data: dict) -> GenAIResponse:
        """Parse the chat completions JSON response into a domain entity."""
        if "error" in data:
            error = data["error"]
            raise GenAIProviderError(
                provider=self.provider_name,
                status_code=error.get("code", 500) if isinstance(error.get("code"), int) else 500,
                message=error.get("message", "Unknown error"),
            )

        choices = data.get("choices", [])
        if not choices:
            raise GenAIProviderError(
                provider=self.provider_name,
                status_code=500,
                message="No choices in response",
            )

        choice = choices[0]
        message = choice.get("message", {})
        usage_data = data.get("usage", {}) or {}

        return GenAIResponse(
            content=message.get("content", "") or "",
            model=data.get("model") or self._config.model,
            provider=self.provider_name,
            finish_reason=choice.get("finish_reason", "stop") or "stop",
            usage=TokenUsage(
                prompt_tokens=usage_data.get("prompt_tokens", 0),
                completion_tokens=usage_data.get("completion_tokens", 0),
                total_tokens=usage_data.get("total_tokens", 0),
            ),
        )

    def _raise_provider_error(self, response: httpx.Response) -> None:
        """Raise GenAIProviderError from a non-200 httpx Response."""
        try:
            data = response.json()
            error = data.get("error", {})
            message = error.get("message", response.text)
        except Exception:
            message = response.text

        raise GenAIProviderError(
            provider=self.provider_name,
            status_code=response.status_code,
            message=message,
        )

    def _raise_provider_error_from_bytes(
        self, status_code: int, body: bytes
    ) -> None:
        """Raise GenAIProviderError from raw response bytes."""
        try:
            data = json.loads(body)
            error = data.get("error", {})
            message = error.get("message", body.decode())
        except Exception:
            message = body.decode(errors="replace")

        raise GenAIProviderError(
            provider=self.provider_name,
            status_code=status_code,
            message=message,
        )
