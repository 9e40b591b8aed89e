import json

import httpx
import pytest

from promptrelay.config import ClientConfig, DEFAULT_GEMINI_MODEL, Platform
from promptrelay.llm.providers.base import LLMProviderError, NoCandidatesError, ProviderAPIError, ProxyURLError
from promptrelay.llm.providers.gemini_client import GeminiClient, join_text_parts, model_resource


def _client(reply, captured, **cfg):
    def handler(request):
        captured.append(request)
        return reply if isinstance(reply, httpx.Response) else httpx.Response(200, json=reply)

    def factory(proxy):
        captured.append(("proxy", proxy))
        return httpx.MockTransport(handler)

    config = ClientConfig(platform=Platform.GEMINI, api_key="g-key", **cfg)
    return GeminiClient(config, transport_factory=factory)


def _requests(captured):
    return [c for c in captured if isinstance(c, httpx.Request)]


def _candidate(*parts):
    return {"candidates": [{"content": {"role": "model", "parts": list(parts)}}]}


def test_concatenates_text_parts_and_skips_others():
    captured = []
    reply = _candidate(
        {"text": "Hello, "},
        {"inlineData": {"mimeType": "image/png", "data": "AAAA"}},
        {"text": "world"},
    )
    assert _client(reply, captured).generate("hi") == "Hello, world"


def test_request_shape_and_default_model():
    captured = []
    _client(_candidate({"text": "ok"}), captured).generate("say ok")
    req = _requests(captured)[0]
    assert req.method == "POST"
    assert req.url.host == "generativelanguage.googleapis.com"
    assert req.url.path == f"/v1beta/models/{DEFAULT_GEMINI_MODEL}:generateContent"
    assert req.url.params["key"] == "g-key"
    assert req.headers["User-Agent"] == "google-api-go-client"
    body = json.loads(req.content)
    assert body["contents"][0]["parts"] == [{"text": "say ok"}]


def test_explicit_model_and_base_url_override():
    captured = []
    _client(
        _candidate({"text": "ok"}),
        captured,
        base_url="https://gw.example/",
        model="gemini-1.5-pro",
    ).generate("x")
    req = _requests(captured)[0]
    assert str(req.url).startswith("https://gw.example/v1beta/models/gemini-1.5-pro:generateContent?")


@pytest.mark.parametrize(
    "model, path",
    [
        ("tunedModels/my-tune", "/v1beta/tunedModels/my-tune:generateContent"),
        ("models/gemini-1.5-pro", "/v1beta/models/gemini-1.5-pro:generateContent"),
    ],
)
def test_qualified_model_names_are_used_as_given(model, path):
    captured = []
    _client(_candidate({"text": "ok"}), captured, model=model).generate("x")
    assert _requests(captured)[0].url.path == path


def test_model_resource():
    assert model_resource("gemini-1.5-flash") == "models/gemini-1.5-flash"
    assert model_resource("tunedModels/x") == "tunedModels/x"


@pytest.mark.parametrize(
    "reply",
    [
        ["not", "an", "object"],
        {"candidates": ["text"]},
        {"candidates": [{"content": {"parts": "hello"}}]},
        {"candidates": [{"content": "hello"}]},
    ],
)
def test_unexpected_response_shape_is_a_typed_error(reply):
    captured = []
    with pytest.raises(LLMProviderError, match="unexpected response shape"):
        _client(reply, captured).generate("x")


def test_zero_candidates_is_an_error():
    captured = []
    with pytest.raises(NoCandidatesError, match="no candidates found"):
        _client({"candidates": []}, captured).generate("x")
    with pytest.raises(NoCandidatesError):
        _client({"promptFeedback": {"blockReason": "SAFETY"}}, captured).generate("x")


def test_candidate_without_parts_yields_empty_text():
    captured = []
    assert _client({"candidates": [{"finishReason": "STOP"}]}, captured).generate("x") == ""


def test_http_error_surfaces_provider_message():
    captured = []
    reply = httpx.Response(400, json={"error": {"code": 400, "message": "API key not valid."}})
    with pytest.raises(ProviderAPIError) as exc:
        _client(reply, captured).generate("x")
    assert exc.value.status_code == 400
    assert exc.value.provider == "gemini"
    assert exc.value.message == "API key not valid."


def test_proxy_is_handed_to_transport():
    captured = []
    _client(_candidate({"text": "ok"}), captured, proxy="http://127.0.0.1:7890").generate("x")
    assert ("proxy", "http://127.0.0.1:7890") in captured


def test_malformed_proxy_fails_without_request():
    captured = []
    with pytest.raises(ProxyURLError):
        _client(_candidate({"text": "ok"}), captured, proxy="::not-a-url::").generate("x")
    assert _requests(captured) == []


def test_transport_errors_propagate_unchanged():
    def factory(proxy):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        return httpx.MockTransport(handler)

    client = GeminiClient(ClientConfig(platform=Platform.GEMINI, api_key="k"), transport_factory=factory)
    with pytest.raises(httpx.ConnectError):
        client.generate("x")


def test_join_text_parts():
    assert join_text_parts([]) == ""
    assert join_text_parts([{"text": "a"}, {"functionCall": {"name": "f"}}, {"text": "b"}]) == "ab"
