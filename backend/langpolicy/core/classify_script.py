"""Script Classifier — per-script letter counts and letter-run tokenization.

Invariants:
    - Only letters (Unicode category L*) are counted; digits, punctuation,
      marks and emoji are ignored
    - Letters of scripts outside the four buckets count toward total_letters only
    - Empty or letterless input yields all-zero counts
    - O(len(text)), no state between calls

Design Decisions:
    - `regex` over `re`: stdlib `re` has no Unicode Script property support,
      and hand-maintained code-point ranges drift from the Unicode database
    - Lookahead on \\p{L} before the script alternatives: script membership
      alone would also match script-specific punctuation (e.g. Hebrew maqaf)
"""

from dataclasses import dataclass

import regex

from langpolicy.core.domain_types import Script

_LETTER_PATTERN = regex.compile(
    r"(?=\p{L})(?:"
    r"(?P<hebrew>\p{Script=Hebrew})"
    r"|(?P<arabic>\p{Script=Arabic})"
    r"|(?P<cyrillic>\p{Script=Cyrillic})"
    r"|(?P<latin>\p{Script=Latin})"
    r"|.)",
)

_TOKEN_PATTERN = regex.compile(r"[\p{L}\p{M}]+")


@dataclass(frozen=True)
class ScriptCounts:
    """Letter counts per script bucket for one text."""
    hebrew: int = 0
    arabic: int = 0
    cyrillic: int = 0
    latin: int = 0
    total_letters: int = 0

    def for_script(self, script: Script) -> int:
        if script == Script.NONE:
            return 0
        return getattr(self, script.value)


def count_scripts(text: str) -> ScriptCounts:
    """Count letters per script bucket and in total."""
    counts = {"hebrew": 0, "arabic": 0, "cyrillic": 0, "latin": 0}
    total = 0
    for match in _LETTER_PATTERN.finditer(text or ""):
        total += 1
        if match.lastgroup is not None:
            counts[match.lastgroup] += 1
    return ScriptCounts(total_letters=total, **counts)


def count_letters(text: str) -> int:
    """Number of Unicode letters (category L*) in text."""
    return sum(1 for _ in _LETTER_PATTERN.finditer(text or ""))


def tokenize(text: str) -> list[str]:
    """Split text into maximal runs of letters and combining marks."""
    return _TOKEN_PATTERN.findall(text or "")
