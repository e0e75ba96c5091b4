"""Language Schemas — Pydantic models for the language-policy API boundary.

Invariants:
    - TargetLanguageModel.confidence bounded 0.0–1.0; script limited to known buckets
    - Field maps capped at MAX_FIELDS entries; texts capped at MAX_TEXT_CHARS
    - to_domain()/from_domain() are the only bridges to core value types

Design Decisions:
    - Literal for script over the core Enum: Pydantic validates natively and
      the OpenAPI schema lists the allowed values
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from langpolicy.core.domain_types import (
    FieldMismatch,
    GeneratedFields,
    Script,
    TargetLanguage,
    UNKNOWN_LABEL,
    ValidationResult,
)

MAX_TEXT_CHARS = 20_000
MAX_FIELDS = 50

ScriptName = Literal["hebrew", "arabic", "cyrillic", "latin", ""]


class TargetLanguageModel(BaseModel):
    """Detected target language as exchanged with callers."""
    code: str = Field("", max_length=8)
    label: str = Field(UNKNOWN_LABEL, max_length=40)
    script: ScriptName = ""
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    reliable: bool = False

    @classmethod
    def from_domain(cls, target: TargetLanguage) -> "TargetLanguageModel":
        return cls(
            code=target.code,
            label=target.label,
            script=Script(target.script).value,
            confidence=target.confidence,
            reliable=target.reliable,
        )

    def to_domain(self) -> TargetLanguage:
        return TargetLanguage(
            code=self.code,
            label=self.label,
            script=Script(self.script),
            confidence=self.confidence,
            reliable=self.reliable,
        )


class FieldMismatchModel(BaseModel):
    field: str
    detected_code: str
    detected_label: str
    reason: str


class ValidationResultModel(BaseModel):
    """Validation outcome; is_match is derived from mismatches."""
    checked_fields: int = Field(0, ge=0)
    matched_fields: int = Field(0, ge=0)
    skipped_fields: int = Field(0, ge=0)
    mismatches: list[FieldMismatchModel] = Field(default_factory=list)
    is_match: bool = True

    @classmethod
    def from_domain(cls, result: ValidationResult) -> "ValidationResultModel":
        return cls(
            checked_fields=result.checked_fields,
            matched_fields=result.matched_fields,
            skipped_fields=result.skipped_fields,
            mismatches=[
                FieldMismatchModel(
                    field=m.field,
                    detected_code=m.detected_code,
                    detected_label=m.detected_label,
                    reason=m.reason,
                )
                for m in result.mismatches
            ],
            is_match=result.is_match(),
        )

    def to_domain(self) -> ValidationResult:
        return ValidationResult(
            checked_fields=self.checked_fields,
            matched_fields=self.matched_fields,
            skipped_fields=self.skipped_fields,
            mismatches=tuple(
                FieldMismatch(
                    field=m.field,
                    detected_code=m.detected_code,
                    detected_label=m.detected_label,
                    reason=m.reason,
                )
                for m in self.mismatches
            ),
        )


# --- Requests -----------------------------------------------------------------


class DetectRequest(BaseModel):
    """Triggering text; subject is classified together with the body."""
    text: str = Field(max_length=MAX_TEXT_CHARS)
    subject: str = Field("", max_length=1000)


class InstructionRequest(BaseModel):
    target: TargetLanguageModel


class ValidateRequest(BaseModel):
    target: TargetLanguageModel
    fields: dict[str, str] = Field(max_length=MAX_FIELDS)

    @field_validator("fields")
    @classmethod
    def cap_field_text(cls, v: dict[str, str]) -> dict[str, str]:
        for name, value in v.items():
            if len(value) > MAX_TEXT_CHARS:
                raise ValueError(f"field '{name}' exceeds {MAX_TEXT_CHARS} characters")
        return v


class CorrectiveInstructionRequest(BaseModel):
    target: TargetLanguageModel
    validation: ValidationResultModel


class GenerateFieldsRequest(BaseModel):
    """Triggering message for the enforced generation loop."""
    text: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)
    subject: str = Field("", max_length=1000)

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("text cannot be empty or whitespace")
        return v


# --- Responses ----------------------------------------------------------------


class InstructionResponse(BaseModel):
    """Directive for the generator; empty when no language is enforced."""
    instruction: str


class GeneratedFieldsModel(BaseModel):
    action: str
    title: str = ""
    description: str = ""
    location: str = ""

    @classmethod
    def from_domain(cls, fields: GeneratedFields) -> "GeneratedFieldsModel":
        return cls(
            action=fields.action.value,
            title=fields.title,
            description=fields.description,
            location=fields.location,
        )


class GenerateFieldsResponse(BaseModel):
    target: TargetLanguageModel
    fields: GeneratedFieldsModel
    validation: ValidationResultModel
    attempts: int
    retried: bool
