"""Field Generator — asks Claude for the event fields of a triggering message.

Invariants:
    - Exactly one tool (emit_event_fields) is offered and forced via tool_choice
    - Output is parsed into GeneratedFields; missing or malformed tool input
      raises GenerationOutputError
    - No language logic here: prompts arrive fully built from core/

Design Decisions:
    - Tool use over free-text JSON: the SDK returns the input already parsed
      and the schema constrains the action enum
    - FieldGenerator takes the client by injection so tests pass a mock
"""

import logging

from langpolicy.core.domain_types import GeneratedFields, GenerationAction
from langpolicy.core.errors import ErrorContext, GenerationOutputError
from langpolicy.core.format_generation_prompt import EMIT_FIELDS_TOOL

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You turn chat messages and emails into calendar event fields. "
    "Decide whether the message asks to create, update or delete an event, "
    "or needs no action, then call the provided tool exactly once. "
    "Follow any output language requirement in the user message."
)

EMIT_FIELDS_TOOL_SCHEMA = {
    "name": EMIT_FIELDS_TOOL,
    "description": (
        "Returns the calendar action for the message and its user-facing "
        "fields. Leave fields empty when they do not apply."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "action": {
                "type": "string",
                "enum": [a.value for a in GenerationAction],
                "description": "Calendar action implied by the message",
            },
            "title": {
                "type": "string",
                "description": "Short event title",
            },
            "description": {
                "type": "string",
                "description": "One or two sentence event description",
            },
            "location": {
                "type": "string",
                "description": "Physical place or meeting link",
            },
        },
        "required": ["action"],
    },
}


class FieldGenerator:
    """Generates GeneratedFields from a prompt via the Anthropic API."""

    def __init__(self, client, model: str, max_tokens: int = 1024):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def generate(self, prompt: str) -> GeneratedFields:
        response = await self.client.create_message(
            model=self.model,
            max_tokens=self.max_tokens,
            system=SYSTEM_PROMPT,
            tools=[EMIT_FIELDS_TOOL_SCHEMA],
            tool_choice={"type": "tool", "name": EMIT_FIELDS_TOOL},
            messages=[{"role": "user", "content": prompt}],
        )
        return parse_generated_fields(response)


def parse_generated_fields(response) -> GeneratedFields:
    """Extract GeneratedFields from the emit_event_fields tool_use block."""
    for block in response.content:
        if block.type == "tool_use" and block.name == EMIT_FIELDS_TOOL:
            return _fields_from_input(block.input)
    raise GenerationOutputError(
        f"Generator response contained no {EMIT_FIELDS_TOOL} call",
    )


def _fields_from_input(tool_input) -> GeneratedFields:
    if not isinstance(tool_input, dict):
        raise GenerationOutputError("Tool input is not an object")

    raw_action = tool_input.get("action", GenerationAction.NONE.value)
    try:
        action = GenerationAction(raw_action)
    except ValueError:
        raise GenerationOutputError(
            f"Unknown action '{raw_action}'",
            ErrorContext(debug_info={"action": raw_action}),
        )

    return GeneratedFields(
        action=action,
        title=_as_text(tool_input.get("title")),
        description=_as_text(tool_input.get("description")),
        location=_as_text(tool_input.get("location")),
    )


def _as_text(value) -> str:
    return value.strip() if isinstance(value, str) else ""
