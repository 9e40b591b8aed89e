from __future__ import annotations

from typing import Dict, Optional, Type

from promptrelay.config import ClientConfig, Platform, coerce_platform
from .base import LLMProvider, TransportFactory, UnknownPlatformError
from .gemini_client import GeminiClient
from .openai_client import OpenAIClient

PROVIDERS: Dict[Platform, Type[LLMProvider]] = {
    Platform.OPENAI: OpenAIClient,
    Platform.GEMINI: GeminiClient,
}


def get_provider(config: ClientConfig, transport_factory: Optional[TransportFactory] = None) -> LLMProvider:
    platform = coerce_platform(config.platform)
    if platform is None or platform not in PROVIDERS:
        raise UnknownPlatformError(f"unknown client type: {config.platform}")
    return PROVIDERS[platform](config, transport_factory=transport_factory)
