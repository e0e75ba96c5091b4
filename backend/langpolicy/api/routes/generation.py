"""Generation Routes — enforced field generation for a triggering message.

Invariants:
    - Generator failures on the first attempt surface as LangPolicyError
      responses; failures on language retries fall back to earlier output
    - Retry budget comes from settings.language_max_retries

Design Decisions:
    - FieldGenerator provided via Depends(get_field_generator): tests swap in a
      fake through app.dependency_overrides without touching Anthropic
"""

from functools import lru_cache

from fastapi import APIRouter, Depends

from langpolicy.config import get_settings
from langpolicy.infrastructure.anthropic_client import ResilientAnthropicClient
from langpolicy.schemas.language import (
    GeneratedFieldsModel,
    GenerateFieldsRequest,
    GenerateFieldsResponse,
    TargetLanguageModel,
    ValidationResultModel,
)
from langpolicy.services.generate_fields import FieldGenerator
from langpolicy.services.language_enforcement import generate_with_language_policy

router = APIRouter(prefix="/api/v1/generation", tags=["generation"])


@lru_cache
def get_field_generator() -> FieldGenerator:
    """Process-wide generator built from settings."""
    settings = get_settings()
    client = ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )
    return FieldGenerator(
        client,
        model=settings.generation_model,
        max_tokens=settings.generation_max_tokens,
    )


@router.post("/fields", response_model=GenerateFieldsResponse)
async def generate_fields(
    body: GenerateFieldsRequest,
    generator: FieldGenerator = Depends(get_field_generator),
):
    """Generate event fields in the language of the triggering message."""
    outcome = await generate_with_language_policy(
        generator,
        body.text,
        subject=body.subject,
        max_retries=get_settings().language_max_retries,
    )
    return GenerateFieldsResponse(
        target=TargetLanguageModel.from_domain(outcome.target),
        fields=GeneratedFieldsModel.from_domain(outcome.fields),
        validation=ValidationResultModel.from_domain(outcome.validation),
        attempts=outcome.attempts,
        retried=outcome.retried,
    )
