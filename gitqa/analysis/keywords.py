"""Keyword matching for commit messages."""

import re
from functools import lru_cache
from typing import Any

from gitqa.config import DEFAULT_KEYWORDS
from gitqa.models import MatchMode


@lru_cache(maxsize=256)
def _boundary_pattern(keyword: str) -> re.Pattern:
    # No word character may touch the keyword on either side
    return re.compile(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)")


def _coerce_mode(mode: Any) -> MatchMode | None:
    if isinstance(mode, MatchMode):
        return mode
    for candidate in MatchMode:
        if mode == candidate.value:
            return candidate
    return None


def matches(text: Any, keyword: Any, mode: MatchMode | str = MatchMode.WORD_BOUNDARY) -> bool:
    """Check whether a keyword occurs in a message.

    Both sides are compared lower-cased and the keyword is trimmed.

    Args:
        text: Message to search
        keyword: Keyword to look for
        mode: ``SUBSTRING`` matches anywhere, including inside longer
            words; ``WORD_BOUNDARY`` requires non-word characters (or the
            ends of the text) on both sides of the keyword

    Returns:
        True if the keyword matches. Non-string input, blank keywords and
        unknown modes never match.
    """
    if not isinstance(text, str) or not isinstance(keyword, str):
        return False

    needle = keyword.strip().lower()
    if not needle:
        return False

    match_mode = _coerce_mode(mode)
    haystack = text.lower()

    if match_mode is MatchMode.SUBSTRING:
        return needle in haystack
    if match_mode is MatchMode.WORD_BOUNDARY:
        return _boundary_pattern(needle).search(haystack) is not None
    return False


def find_keywords(
    text: Any, keywords: Any, mode: MatchMode | str = MatchMode.WORD_BOUNDARY
) -> list[str]:
    """Find every configured keyword present in a message.

    Args:
        text: Message to search
        keywords: Keywords to look for, in reporting order
        mode: Matching mode passed through to ``matches``

    Returns:
        Matched keywords in their original spelling, in keyword order,
        each at most once
    """
    if not isinstance(keywords, (list, tuple)):
        return []

    found: list[str] = []
    for keyword in keywords:
        if keyword in found:
            continue
        if matches(text, keyword, mode):
            found.append(keyword)
    return found


def normalize_keywords(keywords: Any) -> list[str]:
    """Clean a keyword configuration.

    Accepts a list or a comma-separated string. Blank and non-string
    entries are dropped and duplicates (ignoring case and surrounding
    whitespace) keep their first spelling.

    Returns:
        The cleaned keywords, or the default set when nothing is left
    """
    if isinstance(keywords, str):
        keywords = [part.strip() for part in keywords.split(",")]
    if not isinstance(keywords, (list, tuple)):
        return list(DEFAULT_KEYWORDS)

    cleaned: list[str] = []
    seen: set[str] = set()
    for keyword in keywords:
        if not isinstance(keyword, str):
            continue
        key = keyword.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        cleaned.append(keyword)

    return cleaned or list(DEFAULT_KEYWORDS)
