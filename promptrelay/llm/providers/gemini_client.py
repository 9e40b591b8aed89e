from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from promptrelay.config import ClientConfig, DEFAULT_GEMINI_BASE_URL, REQUEST_TIMEOUT_S
from .base import LLMProvider, LLMProviderError, NoCandidatesError, ProviderAPIError, TransportFactory
from .transport import AuthenticatedTransport

logger = logging.getLogger(__name__)


GEMINI_API_VERSION = "v1beta"


def model_resource(model: str) -> str:
    """Bare names live under ``models/``; qualified names (``tunedModels/x``) are used as given."""
    return model if "/" in model else f"models/{model}"


def join_text_parts(parts: List[Dict[str, Any]]) -> str:
    """Concatenate the text parts of a candidate, skipping inline data, calls, etc."""
    return "".join(p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str))


class GeminiClient(LLMProvider):
    """Gemini Generative Language API client via REST.

    Endpoint style (v1beta), where ``base_url`` is the service root:
      {base_url}/v1beta/models/{model}:generateContent?key=...

    The key, content type and user agent are added by AuthenticatedTransport,
    which also handles the optional proxy. Every exchange is bounded to 30 seconds.
    """

    name = "gemini"

    def __init__(self, config: ClientConfig, transport_factory: Optional[TransportFactory] = None):
        self.config = config
        self._factory = transport_factory
        self.base_url = (config.base_url or DEFAULT_GEMINI_BASE_URL).rstrip("/")

    def generate(self, prompt: str) -> str:
        model = self.config.resolved_model()
        url = f"{self.base_url}/{GEMINI_API_VERSION}/{model_resource(model)}:generateContent"
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }

        transport = AuthenticatedTransport(
            api_key=self.config.api_key,
            proxy=self.config.proxy,
            transport_factory=self._factory,
        )
        logger.debug("gemini request model=%s proxy=%s", model, bool(self.config.proxy))
        with httpx.Client(transport=transport, timeout=REQUEST_TIMEOUT_S) as client:
            r = client.post(url, json=payload)
        if r.status_code >= 400:
            raise ProviderAPIError.from_response(self.name, r)

        raw = r.json()
        if not isinstance(raw, dict):
            raise LLMProviderError("unexpected response shape")
        candidates = raw.get("candidates") or []
        if not candidates:
            raise NoCandidatesError("no candidates found")
        if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
            raise LLMProviderError("unexpected response shape")
        content = candidates[0].get("content") or {}
        parts = (content.get("parts") or []) if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise LLMProviderError("unexpected response shape")
        return join_text_parts(parts)
