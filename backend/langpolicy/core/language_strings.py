"""Language Strings — generation directives for the detected target language.

Invariants:
    - Pure string rendering, no IO
    - Unreliable or codeless targets produce "" (no instruction needed)
    - Corrective instructions list mismatched fields in validation order

Design Decisions:
    - Directives stay in English: they are read by the generator, not the user,
      and name the target language explicitly as "Label (code)"
    - Proper nouns, URLs, emails and quoted literals are always exempted so the
      generator never translates names it was given verbatim
"""

from langpolicy.core.domain_types import TargetLanguage, ValidationResult

DEFAULT_RETRY_FIELDS = "the user-facing text fields"

_LANGUAGE_INSTRUCTION = (
    "Generate all user-facing text fields (title, description, and location "
    "when applicable) in {label} ({code}), matching the latest triggering "
    "discussion language. Do not translate proper nouns, URLs, email "
    "addresses, or quoted literals."
)

_CORRECTIVE_INSTRUCTION = (
    "Your previous output language did not match. Re-run and return {fields} "
    "in {label} ({code}). Keep proper nouns, URLs, email addresses, and "
    "quoted literals unchanged."
)


def build_language_instruction(target: TargetLanguage) -> str:
    """Directive appended to the initial generation prompt."""
    if not target.enforceable:
        return ""
    return _LANGUAGE_INSTRUCTION.format(label=target.label, code=target.code)


def build_corrective_retry_instruction(
    target: TargetLanguage, validation: ValidationResult,
) -> str:
    """Directive appended to a regeneration prompt after a failed validation."""
    if not target.enforceable:
        return ""

    field_names = validation.mismatched_field_names
    fields = ", ".join(field_names) if field_names else DEFAULT_RETRY_FIELDS
    return _CORRECTIVE_INSTRUCTION.format(
        fields=fields, label=target.label, code=target.code,
    )
