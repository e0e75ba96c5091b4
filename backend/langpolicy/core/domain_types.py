"""Domain Types — value types shared by the detection, validation and instruction layers.

Invariants:
    - TargetLanguage is immutable; reliable=True implies a non-empty code
    - ValidationResult.mismatches preserves sorted field-name order
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - Frozen dataclasses over Pydantic models: core stays free of validation
      machinery; Pydantic lives at the API boundary (schemas/)
    - str Enums: compare equal to their plain string values and serialize to
      JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class Script(str, Enum):
    """Unicode writing-system buckets used for coarse classification."""
    HEBREW = "hebrew"
    ARABIC = "arabic"
    CYRILLIC = "cyrillic"
    LATIN = "latin"
    NONE = ""


class GenerationAction(str, Enum):
    """Action chosen by the external generator for the triggering text."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NONE = "none"


UNKNOWN_LABEL = "Unknown"


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class TargetLanguage:
    """Detected language for a piece of text. Constructed fresh per call."""
    code: str = ""
    label: str = UNKNOWN_LABEL
    script: Script = Script.NONE
    confidence: float = 0.0
    reliable: bool = False

    @property
    def enforceable(self) -> bool:
        """True when callers may enforce this language on generated text."""
        return self.reliable and self.code != ""


@dataclass(frozen=True)
class FieldMismatch:
    """One generated field whose language did not match the target."""
    field: str
    detected_code: str
    detected_label: str
    reason: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking generated fields against a target language."""
    checked_fields: int = 0
    matched_fields: int = 0
    skipped_fields: int = 0
    mismatches: tuple[FieldMismatch, ...] = ()

    def is_match(self) -> bool:
        return len(self.mismatches) == 0

    @property
    def mismatched_field_names(self) -> list[str]:
        return [m.field for m in self.mismatches]


@dataclass(frozen=True)
class GeneratedFields:
    """User-facing fields produced by the external generator."""
    action: GenerationAction = GenerationAction.NONE
    title: str = ""
    description: str = ""
    location: str = ""

    def user_facing(self) -> dict[str, str]:
        """Fields subject to language enforcement."""
        return {
            "title": self.title,
            "description": self.description,
            "location": self.location,
        }
