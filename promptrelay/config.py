from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from promptrelay.llm.providers.base import LLMProviderError


class Platform(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"


DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"

REQUEST_TIMEOUT_S = 30.0
OPENAI_TEMPERATURE = 0.8

DEFAULT_MODELS: Dict[Platform, str] = {
    Platform.OPENAI: DEFAULT_OPENAI_MODEL,
    Platform.GEMINI: DEFAULT_GEMINI_MODEL,
}

API_KEY_ENV: Dict[Platform, str] = {
    Platform.OPENAI: "OPENAI_API_KEY",
    Platform.GEMINI: "GEMINI_API_KEY",
}


def coerce_platform(value: Any) -> Optional[Platform]:
    """Return the matching Platform, or None for an unrecognised selector.

    Selectors match exactly: " Gemini " is not "gemini".
    """
    if isinstance(value, Platform):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Platform(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class ClientConfig:
    """Everything a send needs. Empty strings mean "use the provider default"."""

    platform: Any
    api_key: str
    base_url: str = ""
    proxy: str = ""
    model: str = ""

    def resolved_model(self) -> str:
        if self.model:
            return self.model
        platform = coerce_platform(self.platform)
        return DEFAULT_MODELS[platform] if platform is not None else ""


class ClientSettings(BaseModel):
    """On-disk client configuration, validated before it becomes a ClientConfig."""

    platform: Platform = Field(..., description="Provider selector")
    api_key: str = ""
    base_url: str = ""
    proxy: str = ""
    model: str = ""

    def to_config(self, env: Optional[Mapping[str, str]] = None) -> ClientConfig:
        env = os.environ if env is None else env
        api_key = self.api_key or env.get(API_KEY_ENV[self.platform], "")
        if not api_key:
            name = self.platform.value.capitalize()
            raise LLMProviderError(
                f"Missing {name} API key (set {API_KEY_ENV[self.platform]} or pass api_key)"
            )
        return ClientConfig(
            platform=self.platform,
            api_key=api_key,
            base_url=self.base_url,
            proxy=self.proxy,
            model=self.model,
        )


def load_client_settings(path: str) -> ClientSettings:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict) and "client" in data:
        data = data["client"]
    if not isinstance(data, dict):
        raise ValueError("Client config YAML must be a mapping or contain a 'client:' mapping")
    return ClientSettings.model_validate(data)
