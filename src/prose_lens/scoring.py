from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .models import Issue, IssueType
from .syllables import syllable_count


@dataclass(frozen=True, slots=True)
class PenaltyWeights:
    """Thresholds and weights used by the composite quality score."""

    adverb_allowance: int = 2
    adverb_weight: float = 2.0
    passive_allowance: int = 4
    passive_weight: float = 2.0
    hard_word_syllables: int = 3
    hard_word_weight: float = 15.0
    very_hard_word_syllables: int = 4
    very_hard_word_weight: float = 25.0
    complex_weight: float = 1.0


PENALTY_WEIGHTS = PenaltyWeights()
MAX_SCORE = 100.0


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    adverbs: float
    passive: float
    hard_words: float
    very_hard_words: float
    complex_sentences: float

    @property
    def total(self) -> float:
        return (
            self.adverbs
            + self.passive
            + self.hard_words
            + self.very_hard_words
            + self.complex_sentences
        )


def compute_penalties(
    words: Sequence[str],
    issues: Sequence[Issue],
    weights: PenaltyWeights = PENALTY_WEIGHTS,
) -> ScoreBreakdown:
    """Compute each penalty term from the word list and detected issues."""
    adverb_count = sum(1 for issue in issues if issue.type is IssueType.ADVERB)
    passive_count = sum(1 for issue in issues if issue.type is IssueType.PASSIVE)
    complex_count = sum(1 for issue in issues if issue.type is IssueType.COMPLEX)

    syllables = [syllable_count(word) for word in words]
    hard_words = sum(1 for count in syllables if count >= weights.hard_word_syllables)
    very_hard_words = sum(
        1 for count in syllables if count >= weights.very_hard_word_syllables
    )
    denominator = max(len(words), 1)

    return ScoreBreakdown(
        adverbs=max(0, adverb_count - weights.adverb_allowance) * weights.adverb_weight,
        passive=max(0, passive_count - weights.passive_allowance)
        * weights.passive_weight,
        hard_words=(hard_words / denominator) * weights.hard_word_weight,
        very_hard_words=(very_hard_words / denominator)
        * weights.very_hard_word_weight,
        complex_sentences=complex_count * weights.complex_weight,
    )


def composite_score(
    words: Sequence[str],
    issues: Sequence[Issue],
    weights: PenaltyWeights = PENALTY_WEIGHTS,
) -> float:
    """Overall quality score in [0, 100], independent of the Flesch score."""
    breakdown = compute_penalties(words, issues, weights)
    return max(0.0, MAX_SCORE - breakdown.total)
