"""Language Enforcement — validates generated text fields against a target language.

Invariants:
    - Unreliable or codeless targets are never enforced (all-zero result)
    - Fields are visited in sorted name order, so mismatch order is reproducible
    - Neutral fields (empty, URL, email, letterless, short single token) are
      skipped, never checked or mismatched
    - A checked field whose own detection is unreliable is also counted as
      skipped and yields neither a match nor a mismatch
    - Never raises

Design Decisions:
    - Weakly detected Latin variants (confidence < 0.8) are compatible with a
      different Latin target: short field text often lands on the English
      fallback and must not trigger a retry
    - Retry decision lives here (pure) so the services layer only orchestrates
"""

import re
from collections.abc import Mapping

from langpolicy.core.classify_script import count_letters, tokenize
from langpolicy.core.detect_language import detect_target_language
from langpolicy.core.domain_types import (
    FieldMismatch,
    GeneratedFields,
    GenerationAction,
    Script,
    TargetLanguage,
    ValidationResult,
)

WEAK_LATIN_CONFIDENCE = 0.8
NEUTRAL_MAX_TOKENS = 1
NEUTRAL_MAX_LETTERS = 8

# Word characters and boundaries are ASCII-only: a local part written in
# another script is prose, not an address.
_URL_PATTERN = re.compile(r"(https?://|www\.)", re.IGNORECASE | re.ASCII)
_EMAIL_PATTERN = re.compile(
    r"\b[\w.%+\-]+@[\w.\-]+\.[a-z]{2,}\b", re.IGNORECASE | re.ASCII,
)

_ENFORCED_ACTIONS = frozenset({GenerationAction.CREATE, GenerationAction.UPDATE})


def validate_fields_language(
    target: TargetLanguage, fields: Mapping[str, str],
) -> ValidationResult:
    """Check every language-bearing field against the target language."""
    if not target.enforceable:
        return ValidationResult()

    checked = matched = skipped = 0
    mismatches: list[FieldMismatch] = []

    for name in sorted(fields):
        value = (fields[name] or "").strip()
        if is_neutral_field(value):
            skipped += 1
            continue

        checked += 1
        detected = detect_target_language(value)
        if not detected.enforceable:
            skipped += 1
            continue

        if is_language_compatible(target, detected):
            matched += 1
            continue

        mismatches.append(FieldMismatch(
            field=name,
            detected_code=detected.code,
            detected_label=detected.label,
            reason=_mismatch_reason(target, detected),
        ))

    return ValidationResult(
        checked_fields=checked,
        matched_fields=matched,
        skipped_fields=skipped,
        mismatches=tuple(mismatches),
    )


def is_neutral_field(value: str) -> bool:
    """True when a field carries no enforceable prose.

    Short single tokens are usually names or brands (Zoom, WeWork).
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return True
    if _EMAIL_PATTERN.search(trimmed) or _URL_PATTERN.search(trimmed):
        return True

    letters = count_letters(trimmed)
    if letters == 0:
        return True
    return len(tokenize(trimmed)) <= NEUTRAL_MAX_TOKENS and letters <= NEUTRAL_MAX_LETTERS


def is_language_compatible(target: TargetLanguage, detected: TargetLanguage) -> bool:
    """Whether a field detected as `detected` satisfies `target`."""
    if target.script != Script.LATIN:
        return detected.script == target.script

    if detected.script != Script.LATIN:
        return False
    if not target.code or not detected.code:
        return True
    if target.code == detected.code:
        return True
    return detected.confidence < WEAK_LATIN_CONFIDENCE


def should_retry_for_language(
    target: TargetLanguage, generated: GeneratedFields | None,
) -> tuple[bool, ValidationResult]:
    """Decide whether generated output must be regenerated in the target language.

    Only create/update actions carry user-facing prose worth enforcing.
    """
    if generated is None or not target.enforceable:
        return False, ValidationResult()
    if generated.action not in _ENFORCED_ACTIONS:
        return False, ValidationResult()

    validation = validate_fields_language(target, generated.user_facing())
    return not validation.is_match(), validation


def format_mismatches(validation: ValidationResult) -> str:
    """Compact 'field(code), ...' rendering for log lines."""
    if validation.is_match():
        return "none"
    return ", ".join(
        f"{m.field}({m.detected_code})" for m in validation.mismatches
    )


def _mismatch_reason(target: TargetLanguage, detected: TargetLanguage) -> str:
    if target.script != detected.script:
        return (
            f"expected {Script(target.script).value} script, "
            f"got {Script(detected.script).value} script"
        )
    return f"expected {target.label}, got {detected.label}"
