from __future__ import annotations

from typing import Callable, Optional

import httpx


# Builds the network transport for one exchange. Receives the parsed proxy URL,
# or None for a direct connection.
TransportFactory = Callable[[Optional[str]], httpx.BaseTransport]


def default_transport_factory(proxy: Optional[str]) -> httpx.BaseTransport:
    return httpx.HTTPTransport(proxy=proxy)


class LLMProviderError(RuntimeError):
    pass


class UnknownPlatformError(LLMProviderError):
    pass


class ProxyURLError(LLMProviderError, ValueError):
    pass


class NoCandidatesError(LLMProviderError):
    pass


class NoChoicesError(LLMProviderError):
    pass


class ProviderAPIError(LLMProviderError):
    """Non-2xx reply from a provider endpoint."""

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"{provider} HTTP {status_code}: {message}")

    @classmethod
    def from_response(cls, provider: str, r: httpx.Response) -> "ProviderAPIError":
        # Both providers wrap failures as {"error": {"message": ...}}.
        message = r.text[:300]
        try:
            body = r.json()
        except ValueError:
            body = None
        err = body.get("error") if isinstance(body, dict) else None
        if isinstance(err, dict) and err.get("message"):
            message = str(err["message"])
        return cls(provider, r.status_code, message)


class LLMProvider:
    """Provider interface.

    One instance serves one exchange: it is built from an immutable
    ``ClientConfig`` and discarded after ``generate`` returns.
    """

    name: str

    def generate(self, prompt: str) -> str:
        raise NotImplementedError
