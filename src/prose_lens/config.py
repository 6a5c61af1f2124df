from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping

import yaml

from .models import IssueType


@dataclass(slots=True)
class EvaluationSettings:
    """Configuration block for LLM-backed document evaluation."""

    provider: str = "openai"
    model: str | None = None
    api_key: str | None = None
    api_key_env: str | None = None
    base_url: str | None = None
    temperature: float = 0.7
    max_tokens: int = 500
    request_timeout: float = 60.0
    max_attempts: int = 3
    parallel_requests: int = 1
    secure_only: bool = False
    app_title: str = "Markdown Editor"
    referer: str = ""


@dataclass(slots=True)
class ProseLensConfig:
    """Configuration options for analysis output and remote evaluation."""

    issue_types: List[str] = field(
        default_factory=lambda: [issue_type.value for issue_type in IssueType]
    )
    max_listed_issues: int | None = None
    include_difficulty_note: bool = True
    evaluation: EvaluationSettings = field(default_factory=EvaluationSettings)

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(ProseLensConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    if "issue_types" in kwargs:
        if kwargs["issue_types"] is None:
            # An empty YAML key keeps the default issue types.
            kwargs.pop("issue_types")
        else:
            kwargs["issue_types"] = _validate_issue_types(kwargs["issue_types"])
    if "evaluation" in data:
        evaluation_value = data["evaluation"]
        if isinstance(evaluation_value, EvaluationSettings):
            kwargs["evaluation"] = evaluation_value
        elif isinstance(evaluation_value, Mapping):
            kwargs["evaluation"] = _build_evaluation_settings(evaluation_value)
        else:
            kwargs.pop("evaluation", None)
    return kwargs


def _build_evaluation_settings(data: Mapping[str, Any]) -> EvaluationSettings:
    evaluation_allowed = {field.name for field in fields(EvaluationSettings)}
    filtered = {key: data[key] for key in data if key in evaluation_allowed}
    return EvaluationSettings(**filtered)


def _validate_issue_types(values: Any) -> List[str]:
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, (list, tuple)):
        raise ValueError(
            f"issue_types must be a list of issue types, got {type(values).__name__}."
        )
    validated: List[str] = []
    for value in values:
        try:
            validated.append(IssueType(str(value).lower()).value)
        except ValueError as exc:
            raise ValueError(f"Unknown issue type '{value}'.") from exc
    return validated


def config_from_dict(data: Mapping[str, Any] | None) -> ProseLensConfig:
    """Build a ProseLensConfig from a dictionary-like input."""
    if data is None:
        return ProseLensConfig()
    return ProseLensConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> ProseLensConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> ProseLensConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return ProseLensConfig()
    return config_from_yaml(path)
