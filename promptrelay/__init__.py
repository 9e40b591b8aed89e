from promptrelay.client import Client, new_client
from promptrelay.config import ClientConfig, Platform
from promptrelay.llm.providers.base import (
    LLMProviderError,
    NoCandidatesError,
    NoChoicesError,
    ProviderAPIError,
    ProxyURLError,
    UnknownPlatformError,
)

__all__ = [
    "Client",
    "ClientConfig",
    "LLMProviderError",
    "NoCandidatesError",
    "NoChoicesError",
    "Platform",
    "ProviderAPIError",
    "ProxyURLError",
    "UnknownPlatformError",
    "new_client",
]
