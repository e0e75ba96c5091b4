"""Language Strings tests — initial and corrective generation directives.

Tests cover:
    - Unreliable or codeless targets produce no instruction
    - Initial instruction names the language and the untranslated categories
    - Corrective instruction lists mismatched fields in order
    - Corrective instruction falls back to a generic field description
"""

from langpolicy.core.domain_types import (
    FieldMismatch,
    Script,
    TargetLanguage,
    ValidationResult,
)
from langpolicy.core.language_strings import (
    DEFAULT_RETRY_FIELDS,
    build_corrective_retry_instruction,
    build_language_instruction,
)

HEBREW = TargetLanguage(code="he", label="Hebrew", script=Script.HEBREW, reliable=True)


def _mismatch(field: str) -> FieldMismatch:
    return FieldMismatch(field=field, detected_code="en", detected_label="English", reason="")


# --- Initial instruction ------------------------------------------------------

def test_initial_instruction_empty_for_unreliable_target():
    assert build_language_instruction(TargetLanguage()) == ""


def test_initial_instruction_empty_for_unresolved_latin():
    target = TargetLanguage(script=Script.LATIN, confidence=0.45)
    assert build_language_instruction(target) == ""


def test_initial_instruction_names_language_and_code():
    instruction = build_language_instruction(HEBREW)
    assert "Hebrew (he)" in instruction
    assert "title, description, and location" in instruction
    assert "latest triggering discussion language" in instruction


def test_initial_instruction_protects_proper_nouns():
    instruction = build_language_instruction(HEBREW)
    assert "Do not translate proper nouns" in instruction
    assert "URLs, email addresses, or quoted literals" in instruction


# --- Corrective instruction ---------------------------------------------------

def test_corrective_instruction_lists_fields_in_order():
    validation = ValidationResult(mismatches=(_mismatch("title"), _mismatch("description")))
    correction = build_corrective_retry_instruction(HEBREW, validation)
    assert "title, description" in correction
    assert "Hebrew (he)" in correction


def test_corrective_instruction_without_mismatches_uses_generic_fields():
    correction = build_corrective_retry_instruction(HEBREW, ValidationResult())
    assert DEFAULT_RETRY_FIELDS in correction


def test_corrective_instruction_keeps_literals_unchanged():
    correction = build_corrective_retry_instruction(HEBREW, ValidationResult())
    assert "Keep proper nouns, URLs, email addresses, and quoted literals unchanged" in correction


def test_corrective_instruction_empty_for_unreliable_target():
    validation = ValidationResult(mismatches=(_mismatch("title"),))
    assert build_corrective_retry_instruction(TargetLanguage(), validation) == ""
