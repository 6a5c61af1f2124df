from __future__ import annotations

import logging
from typing import List, Tuple

from .issues import detect_issues
from .models import AnalysisResult, IssueType
from .readability import flesch_reading_ease, grade_level
from .scoring import composite_score
from .tokenization import segment_text

logger = logging.getLogger(__name__)

READING_WORDS_PER_MINUTE = 250


def analyze_text(text: str) -> AnalysisResult:
    """Compute readability metrics and style issues for text."""
    segments = segment_text(text)
    word_count = segments.word_count
    sentence_count = segments.sentence_count

    issues = detect_issues(text, segments)
    result = AnalysisResult(
        char_count=segments.char_count,
        word_count=word_count,
        sentence_count=sentence_count,
        paragraph_count=segments.paragraph_count,
        reading_time=word_count / READING_WORDS_PER_MINUTE,
        flesch_score=flesch_reading_ease(segments.words, sentence_count),
        score=composite_score(segments.words, issues),
        grade_level=grade_level(segments.letter_count, word_count, sentence_count),
        issues=tuple(issues),
    )
    logger.debug(
        "Analyzed %s chars: words=%s sentences=%s issues=%s score=%.1f",
        result.char_count,
        word_count,
        sentence_count,
        len(issues),
        result.score,
    )
    return result


analyze = analyze_text


def highlight_spans(
    result: AnalysisResult, issue_type: IssueType | str
) -> List[Tuple[int, int]]:
    """Return (start, end) character spans for every issue of issue_type."""
    return [
        (issue.position, issue.position + len(issue.text))
        for issue in result.issues_of_type(issue_type)
    ]
