"""Language Routes — HTTP surface for the four language-policy operations.

Invariants:
    - Every endpoint is a pure call into core/; nothing is stored
    - Unreliable targets produce empty instructions and all-zero validations,
      never an error response

Design Decisions:
    - POST for all operations: inputs are free text and field maps that do
      not fit query strings
"""

from fastapi import APIRouter

from langpolicy.core.detect_language import detect_target_language_from_parts
from langpolicy.core.enforce_language import validate_fields_language
from langpolicy.core.language_strings import (
    build_corrective_retry_instruction,
    build_language_instruction,
)
from langpolicy.schemas.language import (
    CorrectiveInstructionRequest,
    DetectRequest,
    InstructionRequest,
    InstructionResponse,
    TargetLanguageModel,
    ValidateRequest,
    ValidationResultModel,
)

router = APIRouter(prefix="/api/v1/language", tags=["language"])


@router.post("/detect", response_model=TargetLanguageModel)
async def detect(body: DetectRequest):
    """Detect the target language of triggering text."""
    target = detect_target_language_from_parts(body.subject, body.text)
    return TargetLanguageModel.from_domain(target)


@router.post("/instruction", response_model=InstructionResponse)
async def initial_instruction(body: InstructionRequest):
    """Directive to append to the initial generation prompt."""
    return InstructionResponse(
        instruction=build_language_instruction(body.target.to_domain()),
    )


@router.post("/validate", response_model=ValidationResultModel)
async def validate(body: ValidateRequest):
    """Validate generated fields against a previously detected target."""
    result = validate_fields_language(body.target.to_domain(), body.fields)
    return ValidationResultModel.from_domain(result)


@router.post("/corrective-instruction", response_model=InstructionResponse)
async def corrective_instruction(body: CorrectiveInstructionRequest):
    """Directive to append to a regeneration prompt after a failed validation."""
    return InstructionResponse(
        instruction=build_corrective_retry_instruction(
            body.target.to_domain(), body.validation.to_domain(),
        ),
    )
