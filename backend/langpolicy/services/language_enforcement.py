"""Language Enforcement Loop — detect, instruct, generate, validate, correct.

Invariants:
    - At most 1 + max_retries generator calls per request
    - Output already matching the target (or not enforceable) is returned as-is
    - A failed regeneration (LangPolicyError) falls back to the last
      successful output; it never fails the request
    - When retries run out, the last regenerated output is returned with its
      failing validation attached

Design Decisions:
    - Impureim sandwich: every decision (retry or not, instruction text) comes
      from core/enforce_language.py and core/language_strings.py; this module
      only sequences generator calls and logs
    - Regeneration is a callable taking the corrective instruction, so the
      caller decides how the retry prompt is assembled
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from langpolicy.core.detect_language import detect_target_language_from_parts
from langpolicy.core.domain_types import (
    GeneratedFields,
    TargetLanguage,
    ValidationResult,
)
from langpolicy.core.enforce_language import (
    format_mismatches,
    should_retry_for_language,
)
from langpolicy.core.errors import LangPolicyError
from langpolicy.core.format_generation_prompt import build_generation_prompt
from langpolicy.core.language_strings import (
    build_corrective_retry_instruction,
    build_language_instruction,
)

logger = logging.getLogger(__name__)

Regenerate = Callable[[str], Awaitable[GeneratedFields]]


@dataclass(frozen=True)
class EnforcementOutcome:
    """Final generated fields plus how the policy got there."""
    target: TargetLanguage
    fields: GeneratedFields
    validation: ValidationResult
    attempts: int
    retried: bool


async def enforce_language_policy(
    target: TargetLanguage,
    initial: GeneratedFields,
    regenerate: Regenerate,
    max_retries: int = 1,
) -> EnforcementOutcome:
    """Regenerate mismatched fields until they match or retries run out."""
    current = initial
    attempts = 1
    needs_retry, validation = should_retry_for_language(target, current)

    for retry in range(1, max_retries + 1):
        if not needs_retry:
            break
        logger.info(
            "Language validation failed, retrying",
            extra=_log_extra(target, current, validation, attempt=retry),
        )
        correction = build_corrective_retry_instruction(target, validation)
        try:
            candidate = await regenerate(correction)
        except LangPolicyError as e:
            _attach_policy_context(e, target, attempt=attempts + 1)
            logger.warning(
                f"Language retry failed, keeping previous output: {e.message}",
                extra={"error_code": e.code, **e.context.public_fields()},
            )
            break

        attempts += 1
        current = candidate
        needs_retry, validation = should_retry_for_language(target, current)

    if needs_retry:
        logger.warning(
            "Language validation still failing, returning last output",
            extra=_log_extra(target, current, validation, attempt=attempts),
        )
    elif target.enforceable:
        logger.info(
            "Language validation passed",
            extra=_log_extra(target, current, validation, attempt=attempts),
        )

    return EnforcementOutcome(
        target=target,
        fields=current,
        validation=validation,
        attempts=attempts,
        retried=attempts > 1,
    )


async def generate_with_language_policy(
    generator,
    trigger_text: str,
    *,
    subject: str = "",
    max_retries: int = 1,
) -> EnforcementOutcome:
    """Full pipeline: detect the target, generate, then enforce it."""
    target = detect_target_language_from_parts(subject, trigger_text)
    instruction = build_language_instruction(target)
    if target.enforceable:
        logger.info(
            "Language target detected",
            extra={
                "language_code": target.code,
                "script": target.script.value,
                "confidence": round(target.confidence, 2),
                "source": "email" if subject else "message",
            },
        )

    try:
        initial = await generator.generate(build_generation_prompt(
            trigger_text, instruction, subject=subject,
        ))
    except LangPolicyError as e:
        _attach_policy_context(e, target, attempt=1)
        raise

    async def regenerate(correction: str) -> GeneratedFields:
        return await generator.generate(build_generation_prompt(
            trigger_text, instruction, correction, subject=subject,
        ))

    return await enforce_language_policy(target, initial, regenerate, max_retries)


def _attach_policy_context(
    error: LangPolicyError, target: TargetLanguage, *, attempt: int,
) -> None:
    if target.code and error.context.language_code is None:
        error.context.language_code = target.code
    error.context.attempt = attempt


def _log_extra(
    target: TargetLanguage,
    fields: GeneratedFields,
    validation: ValidationResult,
    *,
    attempt: int,
) -> dict:
    return {
        "language_code": target.code,
        "action": fields.action.value,
        "attempt": attempt,
        "checked_fields": validation.checked_fields,
        "skipped_fields": validation.skipped_fields,
        "mismatches": format_mismatches(validation),
    }
