"""Generation Prompt — assembles the user prompt sent to the field generator.

Invariants:
    - Pure: the clock is injected via `now` (defaults to current UTC time)
    - Language sections are present only when their instruction is non-empty
    - Triggering text longer than MAX_TRIGGER_CHARS is truncated with a marker

Design Decisions:
    - Language requirement placed after the content it governs: the directive
      is the last thing the generator reads before the tool call instruction
"""

from datetime import datetime, timezone

MAX_TRIGGER_CHARS = 8000
TRUNCATION_MARKER = "\n\n[... content truncated ...]"

LANGUAGE_SECTION_HEADER = "## Output Language Requirement"
CORRECTION_SECTION_HEADER = "## Correction Required"
EMIT_FIELDS_TOOL = "emit_event_fields"


def truncate_text(text: str, max_chars: int = MAX_TRIGGER_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def format_language_sections(language_instruction: str, retry_instruction: str) -> str:
    """Render the language requirement and correction sections, if any."""
    parts = []
    if language_instruction:
        parts.append(f"\n{LANGUAGE_SECTION_HEADER}\n\n{language_instruction}\n")
    if retry_instruction:
        parts.append(f"\n{CORRECTION_SECTION_HEADER}\n\n{retry_instruction}\n")
    return "".join(parts)


def build_generation_prompt(
    trigger_text: str,
    language_instruction: str = "",
    retry_instruction: str = "",
    *,
    subject: str = "",
    now: datetime | None = None,
) -> str:
    """Build the prompt asking the generator for event fields."""
    now = now or datetime.now(timezone.utc)
    lines = ["## Message to Analyze\n"]
    if subject:
        lines.append(f"**Subject:** {subject}\n")
    lines.append(truncate_text(trigger_text or ""))
    prompt = "\n".join(lines)

    prompt += "\n\n## Current Date/Time Reference\n\n"
    prompt += f"Current time: {now.strftime('%Y-%m-%d %H:%M:%S %A %z')}\n"
    prompt += format_language_sections(language_instruction, retry_instruction)
    prompt += (
        f"\nAnalyze this message and call {EMIT_FIELDS_TOOL} with the action to "
        "take and the user-facing event fields."
    )
    return prompt
