from __future__ import annotations

import threading
from typing import List, Optional

import httpx

from .base import ProxyURLError, TransportFactory, default_transport_factory


PROXY_SCHEMES = ("http", "https", "socks5", "socks5h")

# The Generative Language endpoint rejects requests whose user agent it does
# not recognise when a key is passed as a query parameter.
GEMINI_USER_AGENT = "google-api-go-client"


def parse_proxy_url(proxy: str) -> str:
    """Validate ``scheme://host[:port][/...]`` and return it unchanged."""
    try:
        url = httpx.URL(proxy)
    except (httpx.InvalidURL, TypeError) as e:
        raise ProxyURLError(f"invalid proxy URL {proxy!r}: {e}") from e
    if url.scheme not in PROXY_SCHEMES:
        raise ProxyURLError(
            f"invalid proxy URL {proxy!r}: scheme must be one of {', '.join(PROXY_SCHEMES)}"
        )
    if not url.host:
        raise ProxyURLError(f"invalid proxy URL {proxy!r}: missing host")
    try:
        url.port
    except (httpx.InvalidURL, ValueError) as e:
        raise ProxyURLError(f"invalid proxy URL {proxy!r}: {e}") from e
    return proxy


class AuthenticatedTransport(httpx.BaseTransport):
    """Transport that authenticates Gemini requests with a ``key`` query parameter.

    A custom ``httpx.Client`` bypasses any key handling a caller might expect
    from the endpoint defaults, so the key and the headers the endpoint
    requires are injected here on every request. Each request gets a freshly
    built inner transport, optionally routed through ``proxy``.
    """

    def __init__(
        self,
        api_key: str,
        proxy: str = "",
        transport_factory: Optional[TransportFactory] = None,
    ):
        self.api_key = api_key
        self.proxy = proxy
        self._factory = transport_factory or default_transport_factory
        self._lock = threading.Lock()
        self._open: List[httpx.BaseTransport] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        proxy = parse_proxy_url(self.proxy) if self.proxy else None
        transport = self._factory(proxy)
        with self._lock:
            self._open.append(transport)

        headers = request.headers.copy()
        headers["Content-Type"] = "application/json"
        headers["User-Agent"] = GEMINI_USER_AGENT
        authed = httpx.Request(
            request.method,
            request.url.copy_set_param("key", self.api_key),
            headers=headers,
            stream=request.stream,
            extensions=dict(request.extensions),
        )
        return transport.handle_request(authed)

    def close(self) -> None:
        # Responses are read by the owning client after handle_request returns,
        # so inner transports live until the client itself is closed.
        with self._lock:
            open_transports, self._open = self._open, []
        for transport in open_transports:
            transport.close()
