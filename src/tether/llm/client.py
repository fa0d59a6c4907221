"""Built-in OpenAI-compatible async httpx client with tenacity retry.

Implements the CompletionClient protocol for OpenAI-compatible chat
completion APIs. Reads configuration from constructor arguments or
environment variables.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import httpx
import tenacity

from tether.exceptions import TransportError
from tether.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)
from tether.llm.protocols import CompletionResponse
from tether.models.messages import Text, ToolCall

if TYPE_CHECKING:
    from tether.models.messages import Content
    from tether.request import CompletionRequest

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_AUTH_ERROR_STATUS_CODES = {401, 403}


def _is_retryable(exc: BaseException) -> bool:
    """Check if an exception is retryable.

    Retryable: 429, 500, 502, 503, 504, connection errors.
    Not retryable: 401, 403, 400, other client errors.
    """
    if isinstance(exc, LLMAuthError):
        return False
    if isinstance(exc, LLMRateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


def parse_chat_response(data: dict) -> CompletionResponse:
    """Convert an OpenAI chat-completions response dict to a CompletionResponse.

    Non-empty text content becomes a leading Text item; each entry of
    ``tool_calls`` becomes a ToolCall, in source order. Tool-call arguments
    are kept as the raw JSON string the API returned.

    Raises:
        LLMResponseError: If the response has no choices, no message, or
            neither text nor tool calls.
    """
    try:
        message = data["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as exc:
        raise LLMResponseError(
            f"Cannot extract message from response: {exc}. Response: {data}"
        ) from exc

    content: list[Content] = []
    text = message.get("content")
    if isinstance(text, str) and text:
        content.append(Text(text))

    for raw in message.get("tool_calls") or []:
        try:
            func = raw["function"]
            arguments = func.get("arguments") or "{}"
            if not isinstance(arguments, str):
                raise TypeError(f"arguments must be a JSON string, got {type(arguments).__name__}")
            content.append(ToolCall(id=raw["id"], name=func["name"], arguments=arguments))
        except (KeyError, TypeError) as exc:
            raise LLMResponseError(f"Malformed tool call in response: {raw!r}") from exc

    if not content:
        raise LLMResponseError(f"Response has neither text nor tool calls. Response: {data}")
    return CompletionResponse(
        content=tuple(content),
        model=data.get("model"),
        usage=data.get("usage"),
    )


class OpenAIClient:
    """Async httpx client for OpenAI-compatible chat completions.

    Implements the CompletionClient protocol. Supports retry with exponential
    backoff for transient errors (429, 5xx, connection failures). Fails
    immediately on authentication errors (401, 403).

    Usage::

        async with OpenAIClient(api_key="sk-...") as client:
            response = await client.complete(request)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
        max_retries: int = 3,
    ) -> None:
        """Initialize the OpenAI-compatible client.

        Args:
            api_key: API key. Falls back to TETHER_OPENAI_API_KEY, then
                OPENAI_API_KEY env vars.
            base_url: API base URL. Falls back to TETHER_OPENAI_BASE_URL env var,
                then to https://api.openai.com/v1.
            timeout: Request timeout in seconds.
            max_retries: Maximum number of attempts for retryable errors.

        Raises:
            LLMConfigError: If no API key is provided or found in environment.
        """
        self._api_key = (
            api_key
            or os.environ.get("TETHER_OPENAI_API_KEY")
            or os.environ.get("OPENAI_API_KEY", "")
        )
        if not self._api_key:
            raise LLMConfigError(
                "No API key provided. Pass api_key= or set TETHER_OPENAI_API_KEY "
                "(or OPENAI_API_KEY) environment variable."
            )
        self._base_url = (
            base_url
            or os.environ.get("TETHER_OPENAI_BASE_URL", "https://api.openai.com/v1")
        ).rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_wait: tenacity.wait.wait_base = (
            tenacity.wait_exponential(multiplier=1, min=1, max=30)
            + tenacity.wait_random(0, 2)
        )
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Send a completion request with retry.

        Uses tenacity.AsyncRetrying programmatically (not as decorator) so that
        max_retries is configurable per-instance.

        Raises:
            LLMAuthError: On 401/403 (no retry).
            LLMRateLimitError: On 429 after all retries exhausted.
            LLMResponseError: On unexpected response format.
            LLMClientError: On other HTTP errors.
            TransportError: If the endpoint cannot be reached.
        """
        retryer = tenacity.AsyncRetrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=self._retry_wait,
            stop=tenacity.stop_after_attempt(self._max_retries),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        payload = request.to_openai()
        try:
            data = await retryer(self._do_complete, payload)
        except httpx.HTTPStatusError as exc:
            raise LLMClientError(
                f"Completion request failed: HTTP {exc.response.status_code} - "
                f"{exc.response.text}"
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(
                f"Cannot reach completion endpoint {self._base_url}: {exc}"
            ) from exc
        response = parse_chat_response(data)
        logger.debug(
            "Completion from %s: %d content item(s), usage=%s",
            response.model, len(response.content), response.usage,
        )
        return response

    async def _do_complete(self, payload: dict[str, Any]) -> dict:
        """Execute a single chat completion request (no retry)."""
        response = await self._client.post(
            f"{self._base_url}/chat/completions",
            json=payload,
        )

        # Check for auth errors before raise_for_status
        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise LLMAuthError(
                f"Authentication failed: HTTP {response.status_code} - "
                f"{response.text}"
            )

        if response.status_code == 429:
            retry_after_raw = response.headers.get("Retry-After")
            retry_after: float | None = None
            if retry_after_raw is not None:
                try:
                    retry_after = float(retry_after_raw)
                except (ValueError, TypeError):
                    pass
            raise LLMRateLimitError(
                f"Rate limited: HTTP 429 - {response.text}",
                retry_after=retry_after,
            )

        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMResponseError(f"Response is not JSON: {response.text[:200]}") from exc
        if not isinstance(data, dict) or "choices" not in data:
            raise LLMResponseError(
                f"Unexpected response format: missing 'choices' key. "
                f"Response: {data}"
            )
        return data

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def __aenter__(self) -> OpenAIClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
