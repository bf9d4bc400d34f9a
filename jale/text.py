"""Text normalisation and the token-overlap similarity used across Jale."""

from __future__ import annotations

import re
from collections.abc import Iterable

# Common misspellings seen in worker/employer chats -> correct word.
TYPO_CORRECTIONS: dict[str, str] = {
    "constrution": "construction",
    "constuction": "construction",
    "electrcian": "electrician",
    "electrian": "electrician",
    "pluming": "plumbing",
    "plumer": "plumber",
    "carpintry": "carpentry",
    "weldr": "welder",
    "hw": "how",
    "wat": "what",
    "wen": "when",
    "ned": "need",
    "tomorow": "tomorrow",
    "tommorrow": "tomorrow",
    "tommorow": "tomorrow",
    "intrview": "interview",
    "intervew": "interview",
    "interveiw": "interview",
    "shedule": "schedule",
    "scedule": "schedule",
}

_TYPO_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(t) for t in sorted(TYPO_CORRECTIONS, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)

_phrase_cache: dict[str, re.Pattern[str]] = {}


def normalize(raw: str) -> str:
    """Replace known typos, whole words only and case-insensitively."""
    return _TYPO_PATTERN.sub(lambda m: TYPO_CORRECTIONS[m.group(0).lower()], raw)


def tokenize(text: str) -> list[str]:
    """Lowercased whitespace tokens."""
    return text.lower().split()


def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    pattern = _phrase_cache.get(phrase)
    if pattern is None:
        words = (re.escape(w) for w in phrase.lower().split())
        pattern = re.compile(r"(?<!\w)" + r"\s+".join(words) + r"(?!\w)")
        _phrase_cache[phrase] = pattern
    return pattern


def contains_phrase(text: str, phrases: Iterable[str]) -> bool:
    """True if *text* contains any of *phrases* as whole words."""
    lowered = text.lower()
    return any(_phrase_pattern(p).search(lowered) for p in phrases)


def _tokens_match(a: str, b: str) -> bool:
    if a == b:
        return True
    return (len(a) > 3 and a in b) or (len(b) > 3 and b in a)


def similarity(a: str, b: str) -> float:
    """Share of tokens in *a* that have a counterpart in *b*.

    A token matches when *b* holds an identical token, or when either token
    is longer than three characters and contained in the other.  The count is
    divided by the token count of the longer string, so the result lies in
    ``[0, 1]``.  An empty string on either side scores 0.
    """
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)
    if not tokens_a or not tokens_b:
        return 0.0

    matched = sum(1 for ta in tokens_a if any(_tokens_match(ta, tb) for tb in tokens_b))
    return matched / max(len(tokens_a), len(tokens_b))
