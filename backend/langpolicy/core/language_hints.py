"""Language Hints — read-only lookup tables for Latin-script disambiguation.

Invariants:
    - All tables are pure data, built once at import, never mutated
    - Every code in LATIN_KEYWORD_HINTS and DIACRITIC_HINTS has a label
    - Hint words are lower-case letter runs (they are matched against tokens)

Design Decisions:
    - MappingProxyType + frozenset: concurrent readers need no locking because
      writes are impossible, not merely absent
    - Tuples of (code, values) fix the scan order; earlier entries win exact
      ties when picking best/second-best scores
"""

from types import MappingProxyType

from langpolicy.core.domain_types import UNKNOWN_LABEL


LANGUAGE_LABELS = MappingProxyType({
    "he": "Hebrew",
    "ar": "Arabic",
    "ru": "Russian",
    "es": "Spanish",
    "fr": "French",
    "pt": "Portuguese",
    "de": "German",
    "it": "Italian",
    "en": "English",
})


# --- Diacritic / special-character hints --------------------------------------
# Scan order: pt, de, fr, it, es. 'ü' belongs to German only.

DIACRITIC_HINTS: tuple[tuple[str, frozenset[str]], ...] = (
    ("pt", frozenset("ãõ")),
    ("de", frozenset("äöüß")),
    ("fr", frozenset("àâçèêëîïôûùÿœæ")),
    ("it", frozenset("ìò")),
    ("es", frozenset("ñ¿¡áíóú")),
)


# --- Keyword hints ------------------------------------------------------------
# Temporal, meeting and politeness words common in scheduling messages.

LATIN_KEYWORD_HINTS: tuple[tuple[str, frozenset[str]], ...] = (
    ("en", frozenset({
        "tomorrow", "today", "meeting", "please",
        "remind", "with", "about", "schedule",
    })),
    ("es", frozenset({
        "mañana", "hoy", "reunión", "reunion",
        "recordar", "equipo", "gracias", "por",
    })),
    ("fr", frozenset({
        "demain", "aujourd", "réunion", "rappel",
        "bonjour", "avec", "merci", "pour",
    })),
    ("pt", frozenset({
        "amanhã", "hoje", "reunião", "lembrete",
        "obrigado", "com", "para", "equipe",
    })),
    ("de", frozenset({
        "morgen", "heute", "besprechung", "erinnerung",
        "danke", "mit", "bitte", "termin",
    })),
    ("it", frozenset({
        "domani", "oggi", "riunione", "promemoria",
        "grazie", "con", "per", "incontro",
    })),
)


def language_label(code: str) -> str:
    """Human-readable name for a language code, or 'Unknown'."""
    return LANGUAGE_LABELS.get(code, UNKNOWN_LABEL)
