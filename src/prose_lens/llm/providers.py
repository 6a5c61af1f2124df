from __future__ import annotations

import logging
import threading
from typing import Dict, Tuple

from ..models import Provider

logger = logging.getLogger(__name__)

BUILTIN_PROVIDERS: Tuple[Provider, ...] = (
    Provider(
        id="openai",
        name="OpenAI",
        api_key_required=True,
        base_url="https://api.openai.com/v1",
        models=("gpt-4", "gpt-3.5-turbo"),
    ),
    Provider(
        id="anthropic",
        name="Anthropic",
        api_key_required=True,
        base_url="https://api.anthropic.com",
        models=("claude-3-sonnet", "claude-3-haiku"),
    ),
    Provider(
        id="openrouter",
        name="OpenRouter",
        api_key_required=True,
        base_url="https://openrouter.ai/api/v1",
        models=(
            "anthropic/claude-3.5-sonnet",
            "openai/gpt-4o",
            "openai/gpt-4-turbo",
            "google/gemini-pro-1.5",
            "meta-llama/llama-3.1-405b-instruct",
        ),
    ),
    Provider(
        id="lmstudio",
        name="LM Studio (Local)",
        api_key_required=False,
        base_url="http://localhost:1234/v1",
        models=("local-model",),
    ),
    Provider(
        id="ollama",
        name="Ollama (Local)",
        api_key_required=False,
        base_url="http://localhost:11434/v1",
        models=("llama2", "codellama", "mistral"),
    ),
)

# Environment variables consulted for keys when the config names none.
DEFAULT_API_KEY_ENVS: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}


class ProviderRegistry:
    """
    Process-wide, read-only list of evaluation providers.

    The list is built once, either explicitly through ``initialize`` or lazily
    on the first ``get_providers`` call, and never changes afterwards. With
    ``secure_only`` the plain-HTTP (local) providers are left out, which is
    what a deployment served over HTTPS can reach.
    """

    def __init__(self, providers: Tuple[Provider, ...] = BUILTIN_PROVIDERS) -> None:
        self._source = providers
        self._providers: Tuple[Provider, ...] | None = None
        self._secure_only = False
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._providers is not None

    @property
    def secure_only(self) -> bool:
        return self._secure_only

    def initialize(self, *, secure_only: bool = False) -> Tuple[Provider, ...]:
        """Build the provider list; later calls return the existing list."""
        with self._lock:
            if self._providers is None:
                if secure_only:
                    providers = tuple(
                        p
                        for p in self._source
                        if not (p.base_url or "").startswith("http://")
                    )
                else:
                    providers = tuple(self._source)
                self._providers = providers
                self._secure_only = secure_only
                logger.debug(
                    "Initialized %s providers (secure_only=%s)",
                    len(providers),
                    secure_only,
                )
            elif secure_only != self._secure_only:
                logger.warning(
                    "Provider registry already initialized with secure_only=%s; "
                    "ignoring secure_only=%s",
                    self._secure_only,
                    secure_only,
                )
            return self._providers

    def get_providers(self) -> Tuple[Provider, ...]:
        if self._providers is None:
            return self.initialize()
        return self._providers

    def get(self, provider_id: str) -> Provider:
        normalized = provider_id.lower().strip()
        for provider in self.get_providers():
            if provider.id == normalized:
                return provider
        raise ValueError(f"Unknown provider '{provider_id}'.")

    def reset(self) -> None:
        """Drop the built list so the next access rebuilds it (tests only)."""
        with self._lock:
            self._providers = None
            self._secure_only = False


_REGISTRY = ProviderRegistry()


def get_registry() -> ProviderRegistry:
    return _REGISTRY


def initialize_providers(*, secure_only: bool = False) -> Tuple[Provider, ...]:
    return _REGISTRY.initialize(secure_only=secure_only)


def get_providers() -> Tuple[Provider, ...]:
    """Return the process-wide provider list, building it on first use."""
    return _REGISTRY.get_providers()


def get_provider(provider_id: str) -> Provider:
    return _REGISTRY.get(provider_id)
