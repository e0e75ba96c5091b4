"""Resilient Anthropic client tests — retry and error mapping without network.

Tests cover:
    - Success on first call passes tool_choice through
    - Rate limit, 5xx, 529 and connection errors retried up to max_retries
    - Timeouts and 4xx client errors fail immediately
    - Retry-After header parsed into milliseconds
"""

from types import SimpleNamespace

import httpx
import pytest
from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    BadRequestError,
    InternalServerError,
    RateLimitError,
)

from langpolicy.core.errors import AnthropicAPIError
from langpolicy.infrastructure.anthropic_client import ResilientAnthropicClient

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
_OK = SimpleNamespace(
    content=[], usage=SimpleNamespace(input_tokens=10, output_tokens=5),
)


def _response(status: int, headers: dict | None = None) -> httpx.Response:
    return httpx.Response(status, headers=headers or {}, request=_REQUEST)


def _rate_limit(retry_after: str | None = None) -> RateLimitError:
    headers = {"retry-after": retry_after} if retry_after else {}
    return RateLimitError("rate limited", response=_response(429, headers), body=None)


class _ScriptedMessages:
    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _client(*outcomes, max_retries: int = 2):
    client = ResilientAnthropicClient(
        api_key="sk-test", max_retries=max_retries, base_delay_ms=0, max_delay_ms=0,
    )
    messages = _ScriptedMessages(outcomes)
    client.client = SimpleNamespace(messages=messages)
    return client, messages


async def _call(client):
    return await client.create_message(
        model="m",
        max_tokens=10,
        system="s",
        tools=[],
        messages=[{"role": "user", "content": "hi"}],
        tool_choice={"type": "tool", "name": "emit_event_fields"},
    )


async def test_success_forwards_tool_choice():
    client, messages = _client(_OK)
    assert await _call(client) is _OK
    assert messages.calls[0]["tool_choice"]["name"] == "emit_event_fields"


async def test_tool_choice_omitted_when_not_given():
    client, messages = _client(_OK)
    await client.create_message(
        model="m", max_tokens=10, system="s", tools=[], messages=[],
    )
    assert "tool_choice" not in messages.calls[0]


@pytest.mark.parametrize("error", [
    _rate_limit(),
    InternalServerError("boom", response=_response(500), body=None),
    APIStatusError("overloaded", response=_response(529), body=None),
    APIConnectionError(request=_REQUEST),
])
async def test_transient_errors_are_retried(error):
    client, messages = _client(error, _OK)
    assert await _call(client) is _OK
    assert len(messages.calls) == 2


async def test_rate_limit_exhausted_raises():
    client, messages = _client(_rate_limit("0"), _rate_limit("0"), max_retries=1)
    with pytest.raises(AnthropicAPIError) as exc_info:
        await _call(client)
    assert exc_info.value.code == "ANTHROPIC_API_ERROR"
    assert len(messages.calls) == 2


async def test_connection_errors_exhausted_raise():
    client, messages = _client(
        APIConnectionError(request=_REQUEST),
        APIConnectionError(request=_REQUEST),
        max_retries=1,
    )
    with pytest.raises(AnthropicAPIError, match="Transient failure"):
        await _call(client)


async def test_timeout_fails_immediately():
    client, messages = _client(APITimeoutError(request=_REQUEST), _OK)
    with pytest.raises(AnthropicAPIError, match="timeout"):
        await _call(client)
    assert len(messages.calls) == 1


async def test_client_error_fails_immediately():
    client, messages = _client(
        BadRequestError("bad", response=_response(400), body=None), _OK,
    )
    with pytest.raises(AnthropicAPIError):
        await _call(client)
    assert len(messages.calls) == 1


def test_retry_after_header_in_milliseconds():
    client, _ = _client()
    assert client._extract_retry_after(_rate_limit("3")) == 3000
    assert client._extract_retry_after(_rate_limit()) is None
    assert client._extract_retry_after(_rate_limit("soon")) is None
