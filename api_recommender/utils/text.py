"""
Keyword matching helpers shared by the deterministic fallbacks.

Matching is case-insensitive and word-bounded so that "car" does not match
"card" and "id" does not match "paid".
"""

import re
from functools import lru_cache
from typing import Iterable, List, Optional

_SUFFIXES = r"(?:s|es|d|ed|ing)?"


@lru_cache(maxsize=512)
def _phrase_pattern(phrase: str, inflected: bool, prefix: bool) -> re.Pattern:
    body = r"\s+".join(re.escape(part) for part in phrase.lower().split())
    if prefix:
        return re.compile(rf"(?<![a-z0-9]){body}")
    suffix = _SUFFIXES if inflected else ""
    return re.compile(rf"(?<![a-z0-9]){body}{suffix}(?![a-z0-9])")


def tokenize(text: str) -> List[str]:
    """Split on whitespace, the way token counts are measured."""
    return text.split()


def words(text: str) -> List[str]:
    """Lower-cased word tokens without punctuation."""
    return re.findall(r"[a-z0-9_]+", text.lower())


def is_short(text: str, max_tokens: int) -> bool:
    return len(tokenize(text)) <= max_tokens


def contains_phrase(text: str, phrase: str, inflected: bool = False) -> bool:
    """Whole-word (or whole-phrase) match, optionally allowing simple inflections."""
    return _phrase_pattern(phrase, inflected, False).search(text.lower()) is not None


def contains_any(text: str, phrases: Iterable[str], inflected: bool = False) -> bool:
    return any(contains_phrase(text, phrase, inflected) for phrase in phrases)


def contains_prefix(text: str, stems: Iterable[str]) -> bool:
    """Match stems at the start of a word ("token" matches "tokenized")."""
    lowered = text.lower()
    return any(_phrase_pattern(stem, False, True).search(lowered) for stem in stems)


def find_phrase(text: str, phrase: str, inflected: bool = False, last: bool = True) -> Optional[re.Match]:
    """Return the last (or first) match of phrase in text, or None."""
    matches = list(_phrase_pattern(phrase, inflected, False).finditer(text.lower()))
    if not matches:
        return None
    return matches[-1] if last else matches[0]
