from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class IssueType(str, Enum):
    """Closed set of stylistic issue categories."""

    ADVERB = "adverb"
    PASSIVE = "passive"
    COMPLEX = "complex"
    QUALIFIER = "qualifier"


@dataclass(frozen=True, slots=True)
class Document:
    """Represents an input document."""

    doc_id: str
    text: str


@dataclass(frozen=True, slots=True)
class Issue:
    """A single stylistic occurrence and its character offset."""

    type: IssueType
    text: str
    position: int
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.type.value,
            "text": self.text,
            "position": self.position,
        }
        if self.suggestion is not None:
            payload["suggestion"] = self.suggestion
        return payload


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Readability metrics and detected issues for one version of a text."""

    char_count: int
    word_count: int
    sentence_count: int
    paragraph_count: int
    reading_time: float
    flesch_score: float
    score: float
    grade_level: int
    issues: tuple[Issue, ...] = ()

    def issues_of_type(self, issue_type: IssueType | str) -> list[Issue]:
        wanted = IssueType(issue_type)
        return [issue for issue in self.issues if issue.type is wanted]

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON payload consumed by editor front-ends."""
        return {
            "charCount": self.char_count,
            "wordCount": self.word_count,
            "sentenceCount": self.sentence_count,
            "paragraphCount": self.paragraph_count,
            "readingTime": self.reading_time,
            "fleschScore": self.flesch_score,
            "score": self.score,
            "gradeLevel": self.grade_level,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True, slots=True)
class Provider:
    """An LLM endpoint that can evaluate documents."""

    id: str
    name: str
    api_key_required: bool
    base_url: str | None = None
    models: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "api_key_required": self.api_key_required,
            "base_url": self.base_url,
            "models": list(self.models),
        }


@dataclass(frozen=True, slots=True)
class EvaluationScores:
    grammar: int = 0
    clarity: int = 0
    overall: int = 0


@dataclass(slots=True)
class EvaluationResult:
    """Scores and suggestions returned by a remote evaluation."""

    scores: EvaluationScores
    suggestions: list[str] = field(default_factory=list)
    time_taken: int = 0
    tokens_used: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": {
                "grammar": self.scores.grammar,
                "clarity": self.scores.clarity,
                "overall": self.scores.overall,
            },
            "suggestions": list(self.suggestions),
            "time_taken": self.time_taken,
            "tokens_used": self.tokens_used,
        }
