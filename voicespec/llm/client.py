"""Chat completion HTTP client (transport only)."""

import asyncio
import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from voicespec.config import BuilderConfig

BASE_DELAY = 1.0  # seconds
RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)

logger = logging.getLogger(__name__)


class ChatClientError(Exception):
    """Error from the chat completion API."""

    pass


class LLMResponse(BaseModel):
    """Assistant reply from a chat completion."""

    content: str
    model: Optional[str] = None


class ChatClient:
    """Async client for an OpenAI-compatible chat completions endpoint.

    Responsibilities:
    - Request construction and bearer authentication
    - Per-request timeout
    - Retry logic with exponential backoff
    - Error normalization

    Not responsible for:
    - Prompt construction
    - Parsing the assistant's content
    """

    def __init__(
        self,
        config: BuilderConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = config.openai_api_key
        self._api_url = config.api_url
        self._default_model = config.call_flow_model
        self._temperature = config.temperature
        self._timeout = config.request_timeout
        self._max_retries = config.max_retries
        self._client = http_client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def call(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """Make a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model ID to use, or None for the configured model
            temperature: Sampling temperature, or None for the configured value

        Returns:
            LLMResponse with the assistant's content

        Raises:
            ChatClientError: On API errors after retries exhausted
        """
        payload = {
            "model": model if model else self._default_model,
            "temperature": self._temperature if temperature is None else temperature,
            "messages": messages,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        last_error: Optional[Exception] = None
        client = self._get_client()

        for attempt in range(self._max_retries):
            try:
                response = await client.post(
                    self._api_url,
                    headers=headers,
                    json=payload,
                    timeout=self._timeout,
                )

                if response.status_code == 200:
                    return self._parse_response(response)

                # Rate limit or server error - retry
                if response.status_code in RETRYABLE_STATUS_CODES:
                    last_error = ChatClientError(
                        f"HTTP {response.status_code}: {response.text}"
                    )
                    logger.warning(
                        "Chat completion attempt %d/%d failed: HTTP %d",
                        attempt + 1,
                        self._max_retries,
                        response.status_code,
                    )
                    await self._backoff(attempt)
                    continue

                # Client error - don't retry
                raise ChatClientError(
                    f"HTTP {response.status_code}: {response.text}"
                )

            except httpx.RequestError as e:
                last_error = ChatClientError(f"Request failed: {e}")
                last_error.__cause__ = e
                logger.warning(
                    "Chat completion attempt %d/%d failed: %s",
                    attempt + 1,
                    self._max_retries,
                    e,
                )
                await self._backoff(attempt)
                continue

        raise last_error or ChatClientError("Max retries exceeded")

    async def _backoff(self, attempt: int) -> None:
        # No sleep after the final attempt
        if attempt + 1 < self._max_retries:
            await asyncio.sleep(BASE_DELAY * (2**attempt))

    @staticmethod
    def _parse_response(response: httpx.Response) -> LLMResponse:
        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ChatClientError(f"Malformed chat completion response: {e}") from e
        return LLMResponse(
            content=(content or "").strip(),
            model=data.get("model"),
        )
