from __future__ import annotations

import logging
from typing import Any, Optional

from promptrelay.config import ClientConfig
from promptrelay.llm.providers.base import TransportFactory
from promptrelay.llm.providers.registry import get_provider

logger = logging.getLogger(__name__)


class Client:
    """Send one prompt to one provider and get its text back.

    Configuration is frozen at construction. Every ``send_message`` call builds
    its own provider client and transport, so one instance can be shared
    across threads.

    ``transport_factory`` replaces the network transport (tests inject
    ``httpx.MockTransport`` through it).
    """

    def __init__(
        self,
        platform: Any,
        api_key: str,
        base_url: str = "",
        proxy: str = "",
        model: str = "",
        *,
        transport_factory: Optional[TransportFactory] = None,
    ):
        self._config = ClientConfig(
            platform=platform,
            api_key=api_key,
            base_url=base_url,
            proxy=proxy,
            model=model,
        )
        self._transport_factory = transport_factory

    @classmethod
    def from_config(cls, config: ClientConfig, *, transport_factory: Optional[TransportFactory] = None) -> "Client":
        return cls(
            config.platform,
            config.api_key,
            config.base_url,
            config.proxy,
            config.model,
            transport_factory=transport_factory,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    def send_message(self, prompt: str) -> str:
        provider = get_provider(self._config, transport_factory=self._transport_factory)
        logger.debug(
            "dispatching to %s (model=%s, base_url override=%s)",
            provider.name,
            self._config.resolved_model(),
            bool(self._config.base_url),
        )
        return provider.generate(prompt)


def new_client(platform: Any, api_key: str, base_url: str, proxy: str, model: str) -> Client:
    return Client(platform, api_key, base_url, proxy, model)
