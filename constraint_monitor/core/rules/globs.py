# constraint_monitor/core/rules/globs.py
"""
Path/Glob matching for rule exceptions and whitelists

Semantics:
- ``**`` matches any number of path segments, including zero
- ``*`` matches a run of characters excluding the separator
- ``?`` matches exactly one non-separator character
- the whole pattern must match the whole path

Both operands are normalised to ``/`` separators before comparison.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Optional, Pattern


def normalize_path(path: str) -> str:
    """Normalise separators to ``/`` and drop a leading ``./``"""
    normalized = path.replace("\\", "/")
    normalized = re.sub(r"/{2,}", "/", normalized)
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def translate(glob: str) -> str:
    """Translate a glob into an (unanchored) regular expression source"""
    glob = normalize_path(glob)
    parts = []
    i, n = 0, len(glob)
    while i < n:
        c = glob[i]
        if c == "*":
            if glob.startswith("**", i):
                i += 2
                # Collapse runs like "***"
                while i < n and glob[i] == "*":
                    i += 1
                if i < n and glob[i] == "/":
                    i += 1
                    parts.append("(?:.*/)?")
                else:
                    parts.append(".*")
                continue
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(c))
        i += 1
    return "".join(parts)


@lru_cache(maxsize=1024)
def compile_glob(glob: str) -> Pattern[str]:
    return re.compile(translate(glob), re.DOTALL)


def matches(path: str, glob: str) -> bool:
    """Whole-path glob match"""
    return compile_glob(glob).fullmatch(normalize_path(path)) is not None


def first_match(path: Optional[str], globs: Iterable[str]) -> Optional[str]:
    """Return the first glob that matches ``path`` (None if no path or no match)"""
    if not path:
        return None
    for glob in globs:
        if matches(path, glob):
            return glob
    return None


def matches_any(path: Optional[str], globs: Iterable[str]) -> bool:
    return first_match(path, globs) is not None


__all__ = [
    "normalize_path",
    "translate",
    "compile_glob",
    "matches",
    "first_match",
    "matches_any",
]
