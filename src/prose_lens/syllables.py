from __future__ import annotations

import re

_NON_ALPHA_RE = re.compile(r"[^a-z]")
_SILENT_ENDING_RE = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_LEADING_Y_RE = re.compile(r"^y")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]{1,2}")


def syllable_count(word: str) -> int:
    """
    Estimate the number of syllables in a word.

    Heuristic only: strips a silent trailing "e"/"es"/"ed" and a leading "y",
    then counts groups of one or two vowels. Words of three letters or fewer
    always count as one syllable.
    """
    cleaned = _NON_ALPHA_RE.sub("", word.lower())
    if len(cleaned) <= 3:
        return 1
    cleaned = _SILENT_ENDING_RE.sub("", cleaned, count=1)
    cleaned = _LEADING_Y_RE.sub("", cleaned, count=1)
    groups = _VOWEL_GROUP_RE.findall(cleaned)
    return len(groups) if groups else 1
