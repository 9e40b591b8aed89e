from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from promptrelay.config import (
    ClientConfig,
    DEFAULT_OPENAI_BASE_URL,
    OPENAI_TEMPERATURE,
    REQUEST_TIMEOUT_S,
)
from .base import (
    LLMProvider,
    LLMProviderError,
    NoChoicesError,
    ProviderAPIError,
    TransportFactory,
    default_transport_factory,
)
from .transport import parse_proxy_url

logger = logging.getLogger(__name__)


class OpenAIClient(LLMProvider):
    """GPT-style Chat Completions client via REST.

    Uses the widely supported ``/chat/completions`` endpoint so that any
    OpenAI-compatible server can sit behind ``base_url``. A base URL override
    switches the client to the ``CUSTOM`` API type: plain bearer auth against
    the given root, with no vendor-specific path rewriting.

    Without a proxy the default transport is used with no timeout; with one,
    all traffic goes through it and the exchange is bounded to 30 seconds.
    """

    name = "openai"

    def __init__(self, config: ClientConfig, transport_factory: Optional[TransportFactory] = None):
        self.config = config
        self._factory = transport_factory or default_transport_factory
        if config.base_url:
            self.base_url = config.base_url.rstrip("/")
            self.api_type = "CUSTOM"
        else:
            self.base_url = DEFAULT_OPENAI_BASE_URL
            self.api_type = "OPEN_AI"

    def _http_client(self) -> httpx.Client:
        if self.config.proxy:
            proxy = parse_proxy_url(self.config.proxy)
            return httpx.Client(transport=self._factory(proxy), timeout=REQUEST_TIMEOUT_S)
        return httpx.Client(transport=self._factory(None), timeout=None)

    def generate(self, prompt: str) -> str:
        model = self.config.resolved_model()
        url = f"{self.base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": model,
            "temperature": OPENAI_TEMPERATURE,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

        logger.debug("openai request model=%s api_type=%s proxy=%s", model, self.api_type, bool(self.config.proxy))
        with self._http_client() as client:
            r = client.post(url, json=payload, headers=headers)
        if r.status_code >= 400:
            raise ProviderAPIError.from_response(self.name, r)

        raw = r.json()
        if not isinstance(raw, dict):
            raise LLMProviderError("unexpected response shape")
        choices = raw.get("choices") or []
        if not choices:
            raise NoChoicesError("no choices found")
        message = choices[0].get("message") if isinstance(choices, list) and isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise LLMProviderError("unexpected response shape")
        return message.get("content") or ""
