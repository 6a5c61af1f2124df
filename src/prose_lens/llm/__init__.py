from .client import (
    Completion,
    EvaluationError,
    ProviderClient,
    ProviderRequestError,
    test_connection,
)
from .providers import (
    BUILTIN_PROVIDERS,
    ProviderRegistry,
    get_provider,
    get_providers,
    initialize_providers,
)

__all__ = [
    "BUILTIN_PROVIDERS",
    "Completion",
    "EvaluationError",
    "ProviderClient",
    "ProviderRegistry",
    "ProviderRequestError",
    "get_provider",
    "get_providers",
    "initialize_providers",
    "test_connection",
]
