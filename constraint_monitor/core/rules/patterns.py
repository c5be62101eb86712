# constraint_monitor/core/rules/patterns.py
"""
Rule pattern compilation

Rule patterns may carry a leading inline case-insensitivity marker, e.g.
``(?i)password\\s*=``. The marker is stripped into a flags value here, before
the matcher is built, so the matching code only ever sees plain patterns.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Pattern, Tuple

from ..errors import ConstraintMonitorError, codes


INLINE_FLAG_MARKERS = {
    "(?i)": re.IGNORECASE,
}

FLAG_LETTERS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


def parse_flag_letters(letters: str) -> int:
    """Convert flag letters (``"im"``) into ``re`` flags; unknown letters are ignored"""
    value = 0
    for letter in (letters or "").lower():
        value |= FLAG_LETTERS.get(letter, 0)
    return value


def extract_inline_flags(pattern: str) -> Tuple[str, int]:
    """
    Strip leading inline flag markers.

    Returns:
        (pattern without markers, extracted re flags)
    """
    flags = 0
    stripped = True
    while stripped:
        stripped = False
        for marker, flag in INLINE_FLAG_MARKERS.items():
            if pattern.startswith(marker):
                pattern = pattern[len(marker):]
                flags |= flag
                stripped = True
    return pattern, flags


@lru_cache(maxsize=512)
def compile_pattern(pattern: str, flag_letters: str = "") -> Pattern[str]:
    """
    Compile a rule pattern with explicit flags plus any extracted inline flag.

    Raises:
        ConstraintMonitorError: PATTERN_INVALID if the regex does not compile
    """
    body, inline_flags = extract_inline_flags(pattern)
    try:
        return re.compile(body, parse_flag_letters(flag_letters) | inline_flags)
    except re.error as e:
        raise ConstraintMonitorError.rule(
            f"Invalid pattern {pattern!r}: {e}",
            error_code=codes.PATTERN_INVALID,
            cause=e,
        ) from e


@dataclass(frozen=True)
class RegexMatch:
    """All occurrences of one rule pattern in one target text"""
    matches: Tuple[str, ...]
    spans: Tuple[Tuple[int, int], ...]

    @property
    def count(self) -> int:
        return len(self.matches)

    @property
    def first(self) -> str:
        return self.matches[0] if self.matches else ""

    @property
    def first_span(self) -> Tuple[int, int]:
        return self.spans[0] if self.spans else (0, 0)

    def __bool__(self) -> bool:
        return bool(self.matches)


def find_all(compiled: Pattern[str], text: str) -> RegexMatch:
    """Global match: collect every occurrence, not just the first"""
    matches: List[str] = []
    spans: List[Tuple[int, int]] = []
    for m in compiled.finditer(text):
        matches.append(m.group(0))
        spans.append(m.span())
    return RegexMatch(matches=tuple(matches), spans=tuple(spans))


__all__ = [
    "parse_flag_letters",
    "extract_inline_flags",
    "compile_pattern",
    "RegexMatch",
    "find_all",
]
