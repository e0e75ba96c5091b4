"""Resilient Anthropic Client — wraps AsyncAnthropic with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, 529, connection): max_retries retries with exponential backoff
    - Client errors (4xx except 429): immediate failure, no retry
    - All failures mapped to AnthropicAPIError (core/errors.py)

Design Decisions:
    - Wrapper over raw client: isolates retry logic from the field generator
    - ±25% jitter on backoff: spreads retries from concurrent requests
    - These retries cover transport failures only; language retries are
      owned by services/language_enforcement.py
"""

import asyncio
import logging
import random

import anthropic
from anthropic import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from langpolicy.core.errors import AnthropicAPIError, ErrorContext

logger = logging.getLogger(__name__)

_RATE_LIMIT = "rate_limit"
_TRANSIENT = "connection_error"

# HTTP 529 Overloaded has no dedicated exception class in every SDK version.
_OVERLOADED_STATUS = 529


def _retry_kind(e: APIError) -> str | None:
    """Which retry budget an API error falls under; None means fail now."""
    if isinstance(e, RateLimitError):
        return _RATE_LIMIT
    if isinstance(e, (APIConnectionError, InternalServerError)):
        return _TRANSIENT
    if isinstance(e, APIStatusError) and e.status_code == _OVERLOADED_STATUS:
        return _TRANSIENT
    return None


class ResilientAnthropicClient:
    """Wraps Anthropic client with retry logic, timeouts, and error mapping."""

    def __init__(
        self,
        api_key: str,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 60_000,
        timeout_seconds: int = 120,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        system: str,
        tools: list,
        messages: list,
        tool_choice: dict | None = None,
        context: ErrorContext | None = None,
    ):
        """Create message with automatic retry on transient failures."""
        kwargs = {
            "model": model,
            "max_tokens": max_tokens,
            "system": system,
            "tools": tools,
            "messages": messages,
        }
        if tool_choice is not None:
            kwargs["tool_choice"] = tool_choice

        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.messages.create(**kwargs)
            except APITimeoutError:
                raise AnthropicAPIError("API timeout", "timeout", context=context)
            except APIError as e:
                kind = _retry_kind(e)
                if kind is None:
                    raise AnthropicAPIError(str(e), "client_error", context=context)
                await self._wait_before_retry(e, kind, attempt, context)
                continue

            logger.info(
                "Anthropic API success",
                extra={
                    "attempt": attempt + 1,
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                },
            )
            return response

    async def _wait_before_retry(
        self, e: APIError, kind: str, attempt: int, context: ErrorContext | None,
    ) -> None:
        """Sleep before the next attempt, or raise once retries are spent."""
        retry_after_ms = (
            self._extract_retry_after(e) if kind == _RATE_LIMIT else None
        )
        if attempt >= self.max_retries:
            if kind == _RATE_LIMIT:
                message = "Rate limit exceeded after retries"
            else:
                message = f"Transient failure after {self.max_retries} retries: {e}"
            raise AnthropicAPIError(
                message, kind, retry_after_ms=retry_after_ms, context=context,
            )

        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"Anthropic {kind}, retry {attempt + 1}/{self.max_retries} in {delay}ms",
            extra={"attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, error: APIError) -> int | None:
        """Retry-After header in milliseconds, when present and numeric."""
        response = getattr(error, "response", None)
        if response is None:
            return None
        val = response.headers.get("retry-after")
        if val and val.isdigit():
            return int(val) * 1000
        return None
