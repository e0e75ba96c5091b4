"""Field generator tests — FieldGenerator against a mocked Anthropic client.

Tests cover:
    - emit_event_fields tool input parsed into GeneratedFields
    - The tool is offered and forced on every call
    - Missing tool call, unknown action, or non-object input raise GenerationOutputError
    - Non-string fields degrade to empty strings
"""

import pytest

from langpolicy.core.domain_types import GeneratedFields, GenerationAction
from langpolicy.core.errors import GenerationOutputError
from langpolicy.services.generate_fields import (
    EMIT_FIELDS_TOOL_SCHEMA,
    FieldGenerator,
    parse_generated_fields,
)

from tests.services.mock_anthropic import (
    MockAnthropicClient,
    fields_response,
    text_response,
    tool_response,
)


async def test_generate_parses_tool_input():
    client = MockAnthropicClient([fields_response(
        "create", title=" פגישת צוות ", description="מחר נבדוק את ההשקה", location="",
    )])
    generator = FieldGenerator(client, model="claude-test")

    fields = await generator.generate("prompt")

    assert fields == GeneratedFields(
        action=GenerationAction.CREATE,
        title="פגישת צוות",
        description="מחר נבדוק את ההשקה",
        location="",
    )


async def test_generate_forces_emit_tool_and_sends_prompt():
    client = MockAnthropicClient([fields_response("none")])
    generator = FieldGenerator(client, model="claude-test", max_tokens=256)

    await generator.generate("the prompt")

    call = client.calls[0]
    assert call["model"] == "claude-test"
    assert call["max_tokens"] == 256
    assert call["tools"] == [EMIT_FIELDS_TOOL_SCHEMA]
    assert call["tool_choice"] == {"type": "tool", "name": "emit_event_fields"}
    assert call["messages"] == [{"role": "user", "content": "the prompt"}]


async def test_generate_without_tool_call_raises():
    client = MockAnthropicClient([text_response("No event here.")])
    generator = FieldGenerator(client, model="claude-test")

    with pytest.raises(GenerationOutputError) as exc_info:
        await generator.generate("prompt")
    assert exc_info.value.http_status == 502


def test_other_tool_is_ignored():
    response = tool_response("some_other_tool", {"action": "create"})
    with pytest.raises(GenerationOutputError):
        parse_generated_fields(response)


def test_unknown_action_raises():
    with pytest.raises(GenerationOutputError) as exc_info:
        parse_generated_fields(fields_response("reschedule"))
    assert exc_info.value.code == "GENERATION_OUTPUT_INVALID"


def test_non_object_input_raises():
    with pytest.raises(GenerationOutputError):
        parse_generated_fields(tool_response("emit_event_fields", ["create"]))


def test_missing_action_defaults_to_none():
    fields = parse_generated_fields(tool_response("emit_event_fields", {}))
    assert fields.action == GenerationAction.NONE


def test_non_string_fields_become_empty():
    fields = parse_generated_fields(fields_response("update", title=42, location=None))
    assert fields.title == ""
    assert fields.location == ""
