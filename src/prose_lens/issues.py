"""
Pattern-based style checks.

Each pass is a plain function taking the analyzed text and its segments and
returning the issues it found. ``detect_issues`` concatenates the passes in a
fixed order, so the same span may be reported by more than one pass.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Pattern, Sequence, Tuple

from .models import Issue, IssueType
from .tokenization import TextSegments

ISSUE_SUGGESTIONS: Dict[IssueType, str] = {
    IssueType.ADVERB: "Consider if this adverb is necessary",
    IssueType.PASSIVE: "Consider active voice",
    IssueType.COMPLEX: "Break into shorter sentences",
    IssueType.QUALIFIER: "Use stronger language",
}

# Scanned in this order; results follow table order, not text order.
QUALIFIER_PHRASES: Tuple[str, ...] = (
    "I think",
    "we think",
    "I believe",
    "we believe",
    "maybe",
    "perhaps",
    "possibly",
    "probably",
    "I guess",
    "we guess",
    "kind of",
    "sort of",
    "a bit",
    "a little",
    "really",
    "extremely",
    "incredibly",
)

COMPLEX_SENTENCE_MAX_TOKENS = 25

ADVERB_PATTERN = re.compile(r"\b\w+ly\b", re.IGNORECASE | re.ASCII)
PASSIVE_PATTERN = re.compile(
    r"\b(is|are|was|were|be|been|being)\s+(\w+ed|\w+en)\b",
    re.IGNORECASE | re.ASCII,
)
_WHITESPACE_RE = re.compile(r"\s+")

DetectionPass = Callable[[str, TextSegments], List[Issue]]


def _compile_phrase(phrase: str) -> Pattern[str]:
    return re.compile(r"\b" + re.escape(phrase) + r"\b", re.IGNORECASE | re.ASCII)


QUALIFIER_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
    (phrase, _compile_phrase(phrase)) for phrase in QUALIFIER_PHRASES
)


def _scan(pattern: Pattern[str], text: str, issue_type: IssueType) -> List[Issue]:
    suggestion = ISSUE_SUGGESTIONS[issue_type]
    return [
        Issue(
            type=issue_type,
            text=match.group(0),
            position=match.start(),
            suggestion=suggestion,
        )
        for match in pattern.finditer(text)
    ]


def find_adverbs(text: str, segments: TextSegments) -> List[Issue]:
    """Flag every word ending in "ly"."""
    return _scan(ADVERB_PATTERN, text, IssueType.ADVERB)


def find_passive_voice(text: str, segments: TextSegments) -> List[Issue]:
    """Flag a "to be" auxiliary followed by a word ending in -ed or -en."""
    return _scan(PASSIVE_PATTERN, text, IssueType.PASSIVE)


def find_complex_sentences(text: str, segments: TextSegments) -> List[Issue]:
    """
    Flag sentences longer than COMPLEX_SENTENCE_MAX_TOKENS whitespace tokens.

    The position is the first verbatim occurrence of the sentence, so a
    repeated sentence points at its earliest copy.
    """
    issues: List[Issue] = []
    suggestion = ISSUE_SUGGESTIONS[IssueType.COMPLEX]
    for sentence in segments.sentences:
        token_count = len(_WHITESPACE_RE.split(sentence))
        if token_count <= COMPLEX_SENTENCE_MAX_TOKENS:
            continue
        issues.append(
            Issue(
                type=IssueType.COMPLEX,
                text=sentence.strip(),
                position=text.find(sentence),
                suggestion=suggestion,
            )
        )
    return issues


def find_qualifiers(text: str, segments: TextSegments) -> List[Issue]:
    """Flag hedging phrases; the issue text is the phrase as listed."""
    issues: List[Issue] = []
    suggestion = ISSUE_SUGGESTIONS[IssueType.QUALIFIER]
    for phrase, pattern in QUALIFIER_PATTERNS:
        for match in pattern.finditer(text):
            issues.append(
                Issue(
                    type=IssueType.QUALIFIER,
                    text=phrase,
                    position=match.start(),
                    suggestion=suggestion,
                )
            )
    return issues


DETECTION_PASSES: Tuple[DetectionPass, ...] = (
    find_adverbs,
    find_passive_voice,
    find_complex_sentences,
    find_qualifiers,
)


def detect_issues(
    text: str,
    segments: TextSegments,
    passes: Sequence[DetectionPass] = DETECTION_PASSES,
) -> List[Issue]:
    """Run every detection pass in order and concatenate their results."""
    issues: List[Issue] = []
    for detection_pass in passes:
        issues.extend(detection_pass(text, segments))
    return issues
