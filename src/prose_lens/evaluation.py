from __future__ import annotations

import logging
import os
import re
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Tuple

from .config import EvaluationSettings
from .llm.client import ProviderClient
from .llm.providers import DEFAULT_API_KEY_ENVS, get_provider, initialize_providers
from .models import EvaluationResult, EvaluationScores, Provider

logger = logging.getLogger(__name__)

EVALUATION_PROMPT_TEMPLATE = (
    "Evaluate the following markdown text for grammar, clarity, and overall "
    "quality. Provide scores out of 100 and up to 3 suggestions for improvement.\n"
    "\n"
    "Format your response exactly like this:\n"
    "Grammar: [score]\n"
    "Clarity: [score]\n"
    "Overall: [score]\n"
    "Suggestions:\n"
    "- [suggestion1]\n"
    "- [suggestion2]\n"
    "- [suggestion3]\n"
    "\n"
    "Text:\n"
    "{text}"
)

SCORE_MIN = 0
SCORE_MAX = 100

_LEADING_INT_RE = re.compile(r"^[+-]?\d+", re.ASCII)


def build_prompt(text: str) -> str:
    return EVALUATION_PROMPT_TEMPLATE.format(text=text)


def parse_evaluation_response(response: str) -> Tuple[EvaluationScores, List[str]]:
    """
    Parse the fixed "Grammar/Clarity/Overall/Suggestions" reply format.

    Labels match case-insensitively at the start of a trimmed line and the
    value is the leading integer after the first colon. Missing or malformed
    scores become 0; all scores are clamped to [0, 100]. Only "-" lines after
    the "Suggestions:" marker are collected.
    """
    grammar = clarity = overall = 0
    suggestions: List[str] = []
    in_suggestions = False

    for raw_line in response.split("\n"):
        line = raw_line.strip()
        lowered = line.lower()
        if lowered.startswith("grammar:"):
            grammar = _parse_score(line)
        elif lowered.startswith("clarity:"):
            clarity = _parse_score(line)
        elif lowered.startswith("overall:"):
            overall = _parse_score(line)
        elif lowered.startswith("suggestions:"):
            in_suggestions = True
        elif in_suggestions and line.startswith("-"):
            suggestions.append(line[1:].strip())

    scores = EvaluationScores(
        grammar=_clamp(grammar),
        clarity=_clamp(clarity),
        overall=_clamp(overall),
    )
    return scores, suggestions


def _parse_score(line: str) -> int:
    value = line.split(":")[1].strip()
    match = _LEADING_INT_RE.match(value)
    return int(match.group(0)) if match else 0


def _clamp(value: int) -> int:
    return max(SCORE_MIN, min(SCORE_MAX, value))


class Evaluator(ABC):
    """Abstract interface for scoring a document remotely."""

    @abstractmethod
    def evaluate(self, text: str) -> EvaluationResult:
        """Return scores and suggestions for text."""
        raise NotImplementedError


class CallableEvaluator(Evaluator):
    """Adapt a function returning the raw reply text into the Evaluator interface."""

    def __init__(self, func: Callable[[str], str]) -> None:
        self._func = func

    def evaluate(self, text: str) -> EvaluationResult:
        started = time.monotonic()
        reply = self._func(build_prompt(text))
        scores, suggestions = parse_evaluation_response(reply)
        return EvaluationResult(
            scores=scores,
            suggestions=suggestions,
            time_taken=_elapsed_ms(started),
        )


class LLMEvaluator(Evaluator):
    """Evaluator backed by a remote LLM provider."""

    def __init__(
        self,
        client: ProviderClient,
        model: str,
        *,
        prompt_template: str = EVALUATION_PROMPT_TEMPLATE,
    ) -> None:
        self._client = client
        self._model = model
        self._prompt_template = prompt_template

    @property
    def model(self) -> str:
        return self._model

    def evaluate(self, text: str) -> EvaluationResult:
        prompt = self._prompt_template.format(text=text)
        logger.info(
            "Evaluating %s chars with provider=%s model=%s",
            len(text),
            self._client.provider.id,
            self._model,
        )
        started = time.monotonic()
        completion = self._client.complete(prompt, model=self._model)
        scores, suggestions = parse_evaluation_response(completion.text)
        return EvaluationResult(
            scores=scores,
            suggestions=suggestions,
            time_taken=_elapsed_ms(started),
            tokens_used=completion.tokens_used,
        )


def resolve_api_key(provider: Provider, settings: EvaluationSettings) -> str | None:
    """Resolve the API key from explicit config or the provider's environment variable."""
    if settings.api_key:
        return settings.api_key
    env_name = settings.api_key_env or DEFAULT_API_KEY_ENVS.get(provider.id)
    if env_name and os.environ.get(env_name):
        return os.environ[env_name]
    if provider.api_key_required:
        raise ValueError(
            f"API key for {provider.name} not provided. Set evaluation.api_key or "
            f"the {env_name or 'configured'} environment variable."
        )
    return None


def build_evaluator(settings: EvaluationSettings) -> LLMEvaluator:
    """Instantiate the evaluator described by settings."""
    initialize_providers(secure_only=settings.secure_only)
    provider = get_provider(settings.provider)
    model = settings.model or (provider.models[0] if provider.models else None)
    if not model:
        raise ValueError(f"No model configured for provider '{provider.id}'.")
    api_key = resolve_api_key(provider, settings)
    client = ProviderClient(provider, settings, api_key=api_key)
    return LLMEvaluator(client, model)


def _elapsed_ms(started: float) -> int:
    return int(round((time.monotonic() - started) * 1000))
