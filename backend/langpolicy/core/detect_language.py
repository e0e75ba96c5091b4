"""Language Detection — deterministic text-to-target-language mapping.

Pipeline: classify scripts -> resolve a strong non-Latin script -> otherwise
disambiguate among Latin languages (diacritics, then keywords, then a weak
English fallback).

Invariants:
    - Always returns a TargetLanguage (never None, never raises)
    - reliable=True implies a non-empty code
    - Empty, letterless or non-Latin-but-weak text returns the fully-Unknown
      result (empty script); Latin text with no usable signal returns
      Unknown with script="latin" and confidence 0.45
    - Confidence caps: 0.98 strong script, 0.95 keywords, 0.9 diacritics,
      0.62 weak fallback, 0.45 unresolved Latin

Design Decisions:
    - Heuristics over statistical language-ID: short chat messages give
      n-gram models too little text, and results must be reproducible
    - Thresholds are policy constants shared with downstream callers; they
      are not read from settings
    - Cyrillic maps to Russian, the only Cyrillic language supported
"""

from langpolicy.core.classify_script import ScriptCounts, count_scripts, tokenize
from langpolicy.core.domain_types import Script, TargetLanguage
from langpolicy.core.language_hints import (
    DIACRITIC_HINTS,
    LATIN_KEYWORD_HINTS,
    language_label,
)

# Strong-script resolution
STRONG_SCRIPT_MIN_LETTERS = 2
STRONG_SCRIPT_MIN_RATIO = 0.35
STRONG_SCRIPT_BASE_CONFIDENCE = 0.7
STRONG_SCRIPT_RATIO_WEIGHT = 0.28
STRONG_SCRIPT_MAX_CONFIDENCE = 0.98

# Latin disambiguation
LATIN_SIGNAL_MIN_SCORE = 2
LATIN_SIGNAL_MIN_MARGIN = 1
DIACRITIC_CONFIDENCE = 0.9
KEYWORD_BASE_CONFIDENCE = 0.72
KEYWORD_MARGIN_WEIGHT = 0.08
KEYWORD_MAX_CONFIDENCE = 0.95
FALLBACK_MIN_LATIN_LETTERS = 8
FALLBACK_MIN_TOKENS = 2
FALLBACK_CODE = "en"
FALLBACK_CONFIDENCE = 0.62
UNRESOLVED_LATIN_CONFIDENCE = 0.45

_SCRIPT_PRIORITY = (Script.HEBREW, Script.ARABIC, Script.CYRILLIC, Script.LATIN)

_STRONG_SCRIPT_CODES = {
    Script.HEBREW: "he",
    Script.ARABIC: "ar",
    Script.CYRILLIC: "ru",
}


# --- Public API ---------------------------------------------------------------


def detect_target_language(text: str) -> TargetLanguage:
    """Infer the language generated content should be written in.

    Never raises. Callers must gate enforcement on `reliable`.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        return TargetLanguage()

    counts = count_scripts(trimmed)
    if counts.total_letters == 0:
        return TargetLanguage()

    strong = resolve_strong_script(counts)
    if strong is not None:
        return strong

    if counts.latin == 0:
        return TargetLanguage()

    return disambiguate_latin(trimmed.lower(), counts.latin)


def detect_target_language_from_parts(*parts: str) -> TargetLanguage:
    """Detect from several pieces of one message (e.g. subject and body).

    Parts are classified together so a single localized token in one part
    cannot flip the verdict for the whole message.
    """
    joined = "\n".join(p.strip() for p in parts if p and p.strip())
    return detect_target_language(joined)


# --- Strong-script resolver ---------------------------------------------------


def dominant_script(counts: ScriptCounts) -> tuple[Script, int]:
    """Script with the highest count; earlier priority wins exact ties."""
    best_script = Script.NONE
    best_count = 0
    for script in _SCRIPT_PRIORITY:
        count = counts.for_script(script)
        if count > best_count:
            best_script, best_count = script, count
    return best_script, best_count


def resolve_strong_script(counts: ScriptCounts) -> TargetLanguage | None:
    """Return the language of a decisively dominant non-Latin script, if any."""
    script, count = dominant_script(counts)
    code = _STRONG_SCRIPT_CODES.get(script)
    if code is None or counts.total_letters == 0:
        return None

    ratio = count / counts.total_letters
    if count < STRONG_SCRIPT_MIN_LETTERS or ratio < STRONG_SCRIPT_MIN_RATIO:
        return None
    return _build_target(code, script, confidence_from_ratio(ratio))


# --- Latin disambiguator ------------------------------------------------------


def disambiguate_latin(lower: str, latin_count: int) -> TargetLanguage:
    """Pick among the Latin-script languages for lower-cased text."""
    code = detect_latin_by_diacritics(lower)
    if code is not None:
        return _build_target(code, Script.LATIN, DIACRITIC_CONFIDENCE)

    tokens = tokenize(lower)
    best_code, best, second = score_latin_keywords(tokens)
    if _is_decisive(best, second):
        return _build_target(
            best_code, Script.LATIN, confidence_from_keyword_margin(best, second),
        )

    if latin_count >= FALLBACK_MIN_LATIN_LETTERS and len(tokens) >= FALLBACK_MIN_TOKENS:
        return _build_target(FALLBACK_CODE, Script.LATIN, FALLBACK_CONFIDENCE)

    return TargetLanguage(
        script=Script.LATIN, confidence=UNRESOLVED_LATIN_CONFIDENCE,
    )


def detect_latin_by_diacritics(lower: str) -> str | None:
    """Language code from language-specific characters, or None.

    A lone accented letter (e.g. one localized word in an English invite)
    must not flip the verdict, so at least two hits and a margin of one over
    the runner-up are required.
    """
    counts = {code: 0 for code, _ in DIACRITIC_HINTS}
    for ch in lower:
        for code, chars in DIACRITIC_HINTS:
            if ch in chars:
                counts[code] += 1
                break

    best_code, best, second = _best_and_second(
        (code, counts[code]) for code, _ in DIACRITIC_HINTS
    )
    if _is_decisive(best, second):
        return best_code
    return None


def score_latin_keywords(tokens: list[str]) -> tuple[str, int, int]:
    """Return (best_code, best_score, second_score) over the keyword tables."""
    scores = [
        (code, sum(1 for token in tokens if token in hints))
        for code, hints in LATIN_KEYWORD_HINTS
    ]
    return _best_and_second(scores)


# --- Confidence scorer --------------------------------------------------------


def confidence_from_ratio(ratio: float) -> float:
    return min(
        STRONG_SCRIPT_MAX_CONFIDENCE,
        STRONG_SCRIPT_BASE_CONFIDENCE + ratio * STRONG_SCRIPT_RATIO_WEIGHT,
    )


def confidence_from_keyword_margin(best: int, second: int) -> float:
    return min(
        KEYWORD_MAX_CONFIDENCE,
        KEYWORD_BASE_CONFIDENCE + (best - second) * KEYWORD_MARGIN_WEIGHT,
    )


# --- Helpers ------------------------------------------------------------------


def _is_decisive(best: int, second: int) -> bool:
    return best >= LATIN_SIGNAL_MIN_SCORE and best >= second + LATIN_SIGNAL_MIN_MARGIN


def _best_and_second(scores) -> tuple[str, int, int]:
    best_code, best, second = "", 0, 0
    for code, score in scores:
        if score > best:
            second = best
            best_code, best = code, score
        elif score > second:
            second = score
    return best_code, best, second


def _build_target(code: str, script: Script, confidence: float) -> TargetLanguage:
    return TargetLanguage(
        code=code,
        label=language_label(code),
        script=script,
        confidence=confidence,
        reliable=True,
    )
