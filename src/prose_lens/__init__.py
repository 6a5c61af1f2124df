"""
prose_lens package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .analysis import analyze, analyze_text, highlight_spans
from .config import ProseLensConfig, config_from_dict, config_from_yaml, load_config
from .evaluation import build_evaluator, parse_evaluation_response
from .models import AnalysisResult, EvaluationResult, Issue, IssueType
from .readability import difficulty_note

__all__ = [
    "AnalysisResult",
    "EvaluationResult",
    "Issue",
    "IssueType",
    "ProseLensConfig",
    "analyze",
    "analyze_text",
    "build_evaluator",
    "config_from_dict",
    "config_from_yaml",
    "difficulty_note",
    "highlight_spans",
    "load_config",
    "parse_evaluation_response",
]

__version__ = "0.1.0"
