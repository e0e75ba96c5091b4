"""Generation route tests — POST /api/v1/generation/fields with a fake generator.

Tests cover:
    - Matching output returned after one generator call
    - Mismatched output regenerated once (default retry budget)
    - First-call generator failure surfaces as a structured error response
      and is logged with the detected language and attempt
    - Empty text rejected at the boundary
"""

import json
import logging

from langpolicy.api.routes.generation import get_field_generator
from langpolicy.core.domain_types import GeneratedFields, GenerationAction
from langpolicy.core.errors import AnthropicAPIError, GenerationOutputError
from langpolicy.infrastructure.observability import JSONFormatter
from langpolicy.main import app

ENGLISH_FIELDS = GeneratedFields(
    action=GenerationAction.CREATE,
    title="Team meeting tomorrow",
    description="Weekly sync",
)
HEBREW_FIELDS = GeneratedFields(
    action=GenerationAction.CREATE,
    title="פגישת צוות",
    description="מחר נבדוק את ההשקה",
    location="https://zoom.us/j/123",
)


def _use(generator):
    app.dependency_overrides[get_field_generator] = lambda: generator
    return generator


async def test_generate_matching_fields(client, fake_generator):
    generator = _use(fake_generator(HEBREW_FIELDS))

    res = await client.post(
        "/api/v1/generation/fields", json={"text": "ניפגש מחר בשעה חמש לפגישה"},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["target"]["code"] == "he"
    assert body["fields"]["title"] == "פגישת צוות"
    assert body["fields"]["action"] == "create"
    assert body["validation"]["is_match"] is True
    assert body["attempts"] == 1
    assert body["retried"] is False
    assert len(generator.prompts) == 1


async def test_generate_retries_mismatched_fields(client, fake_generator):
    generator = _use(fake_generator(ENGLISH_FIELDS, HEBREW_FIELDS))

    res = await client.post(
        "/api/v1/generation/fields", json={"text": "ניפגש מחר בשעה חמש לפגישה"},
    )

    body = res.json()
    assert body["retried"] is True
    assert body["attempts"] == 2
    assert body["fields"]["description"] == "מחר נבדוק את ההשקה"
    assert "## Correction Required" in generator.prompts[1]


async def test_generate_first_call_failure_returns_error(client, fake_generator):
    _use(fake_generator(AnthropicAPIError("boom", "connection_error")))

    res = await client.post(
        "/api/v1/generation/fields", json={"text": "ניפגש מחר בשעה חמש לפגישה"},
    )

    assert res.status_code == 503
    assert res.json()["error"]["code"] == "ANTHROPIC_API_ERROR"


async def test_generate_rejects_blank_text(client, fake_generator):
    _use(fake_generator())

    res = await client.post("/api/v1/generation/fields", json={"text": "   "})

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_output_error_logged_with_policy_context(client, fake_generator, caplog):
    _use(fake_generator(GenerationOutputError("Generator response contained no tool call")))

    with caplog.at_level(logging.ERROR, logger="langpolicy.api.error_handlers"):
        res = await client.post(
            "/api/v1/generation/fields", json={"text": "ניפגש מחר בשעה חמש לפגישה"},
        )

    assert res.status_code == 502
    body = res.json()["error"]
    assert body["code"] == "GENERATION_OUTPUT_INVALID"
    assert body["context"] == {"language_code": "he", "attempt": 1}

    record = next(r for r in caplog.records if r.name == "langpolicy.api.error_handlers")
    line = json.loads(JSONFormatter().format(record))
    assert line["level"] == "ERROR"
    assert line["error_code"] == "GENERATION_OUTPUT_INVALID"
    assert line["path"] == "/api/v1/generation/fields"
    assert line["language_code"] == "he"
    assert line["attempt"] == 1
