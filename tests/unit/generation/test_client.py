"""Tests for OpenRouterClient using httpx.MockTransport."""

import json
from collections.abc import Callable

import httpx
import pytest

from distill.config import load_config
from distill.exceptions import GenerationError
from distill.generation import SYSTEM_PROMPT, MessageGenerator, OpenRouterClient

BASE_URL = "https://openrouter.test/api/v1/"

Handler = Callable[[httpx.Request], httpx.Response]


def _completion(content: object) -> dict[str, object]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _client(handler: Handler) -> OpenRouterClient:
    http_client = httpx.Client(
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
        headers={"Authorization": "Bearer sk-or-test"},
    )
    return OpenRouterClient("sk-or-test", model="test/model", http_client=http_client)


class TestGenerate:
    def test_returns_stripped_content(self) -> None:
        client = _client(
            lambda _: httpx.Response(200, json=_completion("  feat: add x\n\n"))
        )
        assert client.generate("diff") == "feat: add x"

    def test_sends_model_prompt_and_diff(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_completion("fix: y"))

        _ = _client(handler).generate("--- a/x b/x\n+y\n")

        request = requests[0]
        assert request.method == "POST"
        assert request.url == "https://openrouter.test/api/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-or-test"
        body = json.loads(request.content)
        assert body["model"] == "test/model"
        assert body["messages"] == [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "--- a/x b/x\n+y\n"},
        ]

    def test_http_error_status_raises(self) -> None:
        client = _client(lambda _: httpx.Response(401, text="invalid key"))

        with pytest.raises(GenerationError) as exc_info:
            _ = client.generate("diff")

        assert exc_info.value.status_code == 401
        assert "401" in str(exc_info.value)
        assert "invalid key" in str(exc_info.value)

    def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GenerationError) as exc_info:
            _ = _client(handler).generate("diff")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(GenerationError, match="timed out"):
            _ = _client(handler).generate("diff")

    def test_invalid_json_raises(self) -> None:
        client = _client(lambda _: httpx.Response(200, text="<html>"))
        with pytest.raises(GenerationError, match="not valid JSON"):
            _ = client.generate("diff")

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"choices": []},
            {"choices": ["text"]},
            {"choices": [{"message": None}]},
            _completion(None),
            _completion("   "),
            [],
        ],
    )
    def test_malformed_response_raises(self, body: object) -> None:
        client = _client(lambda _: httpx.Response(200, json=body))
        with pytest.raises(GenerationError, match="did not contain"):
            _ = client.generate("diff")

    def test_does_not_retry(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        with pytest.raises(GenerationError):
            _ = _client(handler).generate("diff")

        assert len(calls) == 1


class TestClientConstruction:
    def test_satisfies_message_generator_protocol(self) -> None:
        with OpenRouterClient("k") as client:
            assert isinstance(client, MessageGenerator)

    def test_from_config(self) -> None:
        config = load_config(
            {"OPENROUTER_API_KEY": "k", "DISTILL_MODEL": "other/model"}
        )
        with OpenRouterClient.from_config(config) as client:
            assert client.model == "other/model"

    def test_owned_client_sends_attribution_headers(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_completion("chore: z"))

        original = httpx.Client

        def _client_with_transport(**kwargs: object) -> httpx.Client:
            transport = httpx.MockTransport(handler)
            return original(transport=transport, **kwargs)  # pyright: ignore[reportArgumentType]

        monkeypatch.setattr(
            "distill.generation._client.httpx.Client", _client_with_transport
        )

        client = OpenRouterClient("sk-or-abc", base_url="https://example.test/v1")
        with client:
            _ = client.generate("diff")

        request = seen[0]
        assert request.url == "https://example.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-or-abc"
        assert request.headers["X-Title"] == "Distill"
        assert "HTTP-Referer" in request.headers

    def test_injected_client_is_not_closed(self) -> None:
        http_client = httpx.Client(
            transport=httpx.MockTransport(lambda _: httpx.Response(200))
        )
        with OpenRouterClient("k", http_client=http_client):
            pass
        assert http_client.is_closed is False
        http_client.close()
