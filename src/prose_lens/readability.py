from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple

from .syllables import syllable_count

# (minimum Flesch score, note), checked top to bottom.
FLESCH_DIFFICULTY_BANDS: Tuple[Tuple[float, str], ...] = (
    (90.0, "Very easy"),
    (80.0, "Easy"),
    (70.0, "Fairly easy"),
    (60.0, "Standard"),
    (50.0, "Fairly difficult"),
    (30.0, "Difficult"),
    (10.0, "Very difficult"),
)
FLESCH_FLOOR_NOTE = "Extremely difficult"


def total_syllables(words: Iterable[str]) -> int:
    return sum(syllable_count(word) for word in words)


def flesch_reading_ease(words: Sequence[str], sentence_count: int) -> float:
    """
    Flesch Reading Ease for the given words spread over sentence_count sentences.

    Returns 0 when there are no words or no sentences and never goes below 0.
    """
    word_count = len(words)
    if word_count == 0 or sentence_count == 0:
        return 0.0
    avg_words_per_sentence = word_count / sentence_count
    avg_syllables_per_word = total_syllables(words) / word_count
    raw = 206.835 - 1.015 * avg_words_per_sentence - 84.6 * avg_syllables_per_word
    return max(0.0, raw)


def grade_level(letter_count: int, word_count: int, sentence_count: int) -> int:
    """Coleman-Liau style grade estimate; may be negative for very simple text."""
    if word_count == 0 or sentence_count == 0:
        return 0
    raw = (
        4.71 * (letter_count / word_count)
        + 0.5 * (word_count / sentence_count)
        - 21.43
    )
    return _round_half_up(raw)


def difficulty_note(flesch_score: float) -> str:
    """Map a Flesch score to a human-readable difficulty band."""
    for minimum, note in FLESCH_DIFFICULTY_BANDS:
        if flesch_score >= minimum:
            return note
    return FLESCH_FLOOR_NOTE


def _round_half_up(value: float) -> int:
    # Halves round toward positive infinity, e.g. -2.5 -> -2 and 2.5 -> 3.
    return int(math.floor(value + 0.5))
