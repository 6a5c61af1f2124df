from __future__ import annotations

import importlib
import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, cast

import requests

from ..config import EvaluationSettings
from ..models import Provider

logger = logging.getLogger(__name__)

OpenAI: Callable[..., Any] | None = None

ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_PROBE_MODEL = "claude-3-haiku-20240307"
# Local OpenAI-compatible servers ignore the key but the SDK insists on one.
KEYLESS_PLACEHOLDER = "not-needed"
# Client errors that are still worth retrying.
RETRYABLE_STATUS_CODES = frozenset({408, 409, 429})


class EvaluationError(RuntimeError):
    """Raised when a provider cannot produce a usable completion."""


class ProviderRequestError(EvaluationError):
    """Raised for failures that retrying the same request cannot fix."""


@dataclass(slots=True)
class Completion:
    """Raw text returned by a provider plus the token usage it reported."""

    text: str
    tokens_used: int = 0


class ProviderClient:
    """Send single-prompt completions to an evaluation provider with retries."""

    def __init__(
        self,
        provider: Provider,
        settings: EvaluationSettings,
        api_key: str | None = None,
    ) -> None:
        if provider.api_key_required and not (api_key and api_key.strip()):
            raise ValueError(f"API key is required for {provider.name}.")
        base_url = settings.base_url or provider.base_url
        if not base_url:
            raise ValueError(f"No base URL configured for {provider.name}.")
        self._provider = provider
        self._settings = settings
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client: Any | None = None
        self._semaphore: threading.BoundedSemaphore | None = None
        if settings.parallel_requests > 0:
            self._semaphore = threading.BoundedSemaphore(settings.parallel_requests)
        self._max_attempts = max(1, settings.max_attempts)

    @property
    def provider(self) -> Provider:
        return self._provider

    @property
    def settings(self) -> EvaluationSettings:
        return self._settings

    @property
    def base_url(self) -> str:
        return self._base_url

    def complete(self, prompt: str, *, model: str) -> Completion:
        """Send prompt as a single user message and return the reply."""
        attempt = 0
        last_error: Exception | None = None
        while attempt < self._max_attempts:
            attempt += 1
            try:
                with self._acquire_slot():
                    if self._provider.id == "anthropic":
                        completion = self._complete_anthropic(prompt, model)
                    else:
                        completion = self._complete_openai_compatible(prompt, model)
                logger.debug(
                    "%s completion succeeded model=%s tokens=%s",
                    self._provider.id,
                    model,
                    completion.tokens_used,
                )
                return completion
            except ProviderRequestError:
                raise
            except Exception as exc:  # pragma: no cover - network-related
                status = getattr(exc, "status_code", None)
                if isinstance(status, int) and _is_permanent_status(status):
                    raise ProviderRequestError(
                        f"{self._provider.name} rejected the request: {exc}"
                    ) from exc
                last_error = exc
                logger.warning(
                    "%s completion failed model=%s (attempt %s/%s): %s",
                    self._provider.id,
                    model,
                    attempt,
                    self._max_attempts,
                    exc,
                )
                if attempt >= self._max_attempts:
                    break
                time.sleep(min(2 ** (attempt - 1), 5))
        raise EvaluationError(
            f"{self._provider.name} evaluation failed after {attempt} attempt(s)."
        ) from last_error

    def _complete_openai_compatible(self, prompt: str, model: str) -> Completion:
        client = self._ensure_client()
        extra_headers: dict[str, str] = {}
        if self._provider.id == "openrouter":
            extra_headers["HTTP-Referer"] = self._settings.referer
            extra_headers["X-Title"] = self._settings.app_title
        response: Any = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self._settings.temperature,
            max_tokens=self._settings.max_tokens,
            timeout=self._settings.request_timeout,
            extra_headers=extra_headers or None,
        )
        choices = getattr(response, "choices", None)
        if not choices:
            raise EvaluationError(f"{self._provider.name} response has no choices.")
        message = getattr(choices[0], "message", None)
        text = getattr(message, "content", None) or ""
        usage = getattr(response, "usage", None)
        tokens = getattr(usage, "total_tokens", None) or 0
        return Completion(text=text, tokens_used=int(tokens))

    def _complete_anthropic(self, prompt: str, model: str) -> Completion:
        response = requests.post(
            f"{self._base_url}/v1/messages",
            headers=_anthropic_headers(self._api_key or ""),
            json={
                "model": model,
                "max_tokens": self._settings.max_tokens,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": self._settings.temperature,
            },
            timeout=self._settings.request_timeout,
        )
        if not response.ok:
            message = f"Anthropic API error: {response.status_code} {response.reason}"
            if _is_permanent_status(response.status_code):
                raise ProviderRequestError(message)
            raise EvaluationError(message)
        data = response.json()
        content = data.get("content") or [{}]
        text = content[0].get("text") or ""
        tokens = (data.get("usage") or {}).get("output_tokens") or 0
        return Completion(text=text, tokens_used=int(tokens))

    def _ensure_client(self) -> Any:
        if self._client is None:
            factory = _load_openai_factory()
            self._client = factory(
                api_key=self._api_key or KEYLESS_PLACEHOLDER,
                base_url=self._base_url,
                max_retries=0,
            )
        return self._client

    @contextmanager
    def _acquire_slot(self) -> Iterator[None]:
        if self._semaphore is None:
            yield
            return
        self._semaphore.acquire()
        try:
            yield
        finally:
            self._semaphore.release()


def test_connection(
    provider: Provider,
    api_key: str | None = None,
    base_url: str | None = None,
    timeout: float = 10.0,
) -> bool:
    """Return True when the provider answers a minimal authenticated request."""
    effective_base = (base_url or provider.base_url or "").rstrip("/")
    if not effective_base:
        return False
    has_key = bool(api_key and api_key.strip())
    if provider.api_key_required and not has_key:
        return False
    try:
        if provider.id == "anthropic":
            response = requests.post(
                f"{effective_base}/v1/messages",
                headers=_anthropic_headers(api_key or ""),
                json={
                    "model": ANTHROPIC_PROBE_MODEL,
                    "max_tokens": 1,
                    "messages": [{"role": "user", "content": "test"}],
                },
                timeout=timeout,
            )
        else:
            headers = {"Content-Type": "application/json"}
            if has_key:
                headers["Authorization"] = f"Bearer {api_key}"
            response = requests.get(
                f"{effective_base}/models", headers=headers, timeout=timeout
            )
    except requests.RequestException as exc:
        logger.warning("Connection test for %s failed: %s", provider.id, exc)
        return False
    if not response.ok:
        logger.warning(
            "Connection test for %s returned %s", provider.id, response.status_code
        )
    return bool(response.ok)


# Not a pytest test despite the name.
test_connection.__test__ = False  # type: ignore[attr-defined]


def _anthropic_headers(api_key: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "x-api-key": api_key,
        "anthropic-version": ANTHROPIC_VERSION,
    }


def _load_openai_factory() -> Callable[..., Any]:
    """Dynamically import the OpenAI client factory to avoid hard dependency at import."""
    global OpenAI
    if OpenAI is not None:
        return OpenAI
    try:
        module = importlib.import_module("openai")
    except Exception as exc:
        raise ProviderRequestError(
            "openai package is not installed. Install extras via 'pip install .[llm-openai]'."
        ) from exc
    openai_cls = getattr(module, "OpenAI", None)
    if openai_cls is None:  # pragma: no cover - defensive
        raise ProviderRequestError(
            "openai.OpenAI client class is unavailable in this environment."
        )
    OpenAI = cast(Callable[..., Any], openai_cls)
    return OpenAI


def _is_permanent_status(status_code: int) -> bool:
    return 400 <= status_code < 500 and status_code not in RETRYABLE_STATUS_CODES
