"""Tests for the hosted model client against a mocked inference endpoint."""
import json
import time

import httpx
import pytest

from historical_events_server.errors import (
    DecodeError, ErrorKind, SerializationError, TransportError, UpstreamError,
)
from model_client import EMPTY_REPLY_TEXT, HostedModelClient, InferenceConfig
from services.shared.models import GenerationParameters


def _reply(payload):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)
    return handler


def test_request_shape(make_hosted_client) -> None:
    """Test that the request has the expected method, URL, headers and body."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=[{"generated_text": "ok"}])

    make_hosted_client(handler).complete("When did it happen?")

    assert len(captured) == 1
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "https://inference.test/models/google/gemma-3-27b-it"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {
        "inputs": "When did it happen?",
        "parameters": {"max_new_tokens": 200, "temperature": 0.7},
    }


def test_custom_generation_parameters_are_sent(inference_config: InferenceConfig) -> None:
    """Test that custom generation parameters end up in the request body."""
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=[{"generated_text": "ok"}])

    client = HostedModelClient(
        inference_config,
        parameters=GenerationParameters(max_new_tokens=50, temperature=0.1),
        transport=httpx.MockTransport(handler),
    )
    client.complete("prompt")

    assert bodies[0]["parameters"] == {"max_new_tokens": 50, "temperature": 0.1}


def test_first_generated_text_is_returned_untrimmed(make_hosted_client) -> None:
    """Test that the first candidate is returned without trimming."""
    client = make_hosted_client(_reply([
        {"generated_text": "  1. [1969] Moon landing.\n"},
        {"generated_text": "second candidate"},
    ]))

    assert client.complete("prompt") == "  1. [1969] Moon landing.\n"


@pytest.mark.parametrize("payload", [[], [{"generated_text": ""}], [{"generated_text": ""}, {"generated_text": "x"}]])
def test_empty_reply_yields_literal_text(make_hosted_client, payload) -> None:
    """Test that an empty reply yields the literal no-events text."""
    assert make_hosted_client(_reply(payload)).complete("prompt") == EMPTY_REPLY_TEXT


@pytest.mark.parametrize("status", [400, 401, 404, 500, 503, 201])
def test_non_200_status_is_upstream_failure(make_hosted_client, status: int) -> None:
    """Test that a non-200 status carries the status code and body."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text='{"error": "Model is currently loading"}')

    with pytest.raises(UpstreamError) as exc_info:
        make_hosted_client(handler).complete("prompt")

    assert exc_info.value.kind is ErrorKind.UPSTREAM_FAILURE
    assert str(exc_info.value) == f'API error {status}: {{"error": "Model is currently loading"}}'


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b'{"generated_text": "an object, not a list"}',
        b'[{"text": "wrong key"}]',
        b'[{"generated_text": 42}]',
        b'["plain string"]',
        b"",
    ],
)
def test_unexpected_reply_shape_is_decode_failure(make_hosted_client, body: bytes) -> None:
    """Test that a reply of the wrong shape is a decode failure."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body)

    with pytest.raises(DecodeError, match="failed to parse response") as exc_info:
        make_hosted_client(handler).complete("prompt")

    assert exc_info.value.kind is ErrorKind.DECODE_FAILURE


def test_connection_error_is_transport_failure(make_hosted_client) -> None:
    """Test that a connection error is a transport failure."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError, match="request failed: connection refused") as exc_info:
        make_hosted_client(handler).complete("prompt")

    assert exc_info.value.kind is ErrorKind.TRANSPORT_FAILURE


def test_timeout_is_transport_failure(make_hosted_client) -> None:
    """Test that an httpx timeout is a transport failure."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError, match="request timed out after 30.0 seconds"):
        make_hosted_client(handler).complete("prompt")


def test_unreadable_body_is_transport_failure(make_hosted_client) -> None:
    """Test that a read error on the body is a transport failure."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadError("connection reset while reading body", request=request)

    with pytest.raises(TransportError, match="connection reset while reading body"):
        make_hosted_client(handler).complete("prompt")


def test_unencodable_prompt_is_serialization_failure(make_hosted_client) -> None:
    """Test that an unencodable prompt fails before any request is sent."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[{"generated_text": "unused"}])

    with pytest.raises(SerializationError) as exc_info:
        make_hosted_client(handler).complete(None)  # type: ignore[arg-type]

    assert exc_info.value.kind is ErrorKind.SERIALIZATION_FAILURE
    assert calls == []


def test_each_call_is_independent(make_hosted_client) -> None:
    """Test that a failed call does not affect the next one."""
    replies = iter([
        httpx.Response(500, text="boom"),
        httpx.Response(200, json=[{"generated_text": "recovered"}]),
    ])

    client = make_hosted_client(lambda request: next(replies))

    with pytest.raises(UpstreamError):
        client.complete("first")
    assert client.complete("second") == "recovered"


def test_config_from_env(monkeypatch) -> None:
    """Test that the configuration is read from the environment."""
    monkeypatch.setenv("HF_API_TOKEN", "secret")
    monkeypatch.setenv("HF_MODEL_ID", "org/model")
    monkeypatch.delenv("HF_INFERENCE_URL", raising=False)
    monkeypatch.delenv("HF_TIMEOUT_SECONDS", raising=False)

    config = InferenceConfig.from_env()

    assert config.api_token == "secret"
    assert config.endpoint_url == "https://api-inference.huggingface.co/models/org/model"
    assert config.timeout == 30.0
    assert "secret" not in repr(config)


def test_config_endpoint_override(monkeypatch) -> None:
    """Test that the endpoint, token fallback and timeout can be overridden."""
    monkeypatch.delenv("HF_API_TOKEN", raising=False)
    monkeypatch.setenv("HF_TOKEN", "fallback")
    monkeypatch.setenv("HF_INFERENCE_URL", "http://localhost:8081/models/mock")
    monkeypatch.setenv("HF_TIMEOUT_SECONDS", "5")

    config = InferenceConfig.from_env()

    assert config.api_token == "fallback"
    assert config.endpoint_url == "http://localhost:8081/models/mock"
    assert config.timeout == 5.0


def test_config_requires_token(monkeypatch) -> None:
    """Test that a missing token is refused at startup."""
    monkeypatch.delenv("HF_API_TOKEN", raising=False)
    monkeypatch.delenv("HF_TOKEN", raising=False)

    with pytest.raises(RuntimeError, match="HF_API_TOKEN"):
        InferenceConfig.from_env()


class _TrickleStream(httpx.SyncByteStream):
    """Response body that arrives one byte at a time."""

    def __init__(self, body: bytes, delay: float) -> None:
        self._body = body
        self._delay = delay

    def __iter__(self):
        for i in range(len(self._body)):
            time.sleep(self._delay)
            yield self._body[i:i + 1]


def test_slow_body_is_bounded_by_overall_timeout() -> None:
    """Test that a body trickling in past the timeout fails instead of completing late."""
    body = b'[{"generated_text": "slow"}]'

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_TrickleStream(body, delay=0.1))

    config = InferenceConfig(endpoint_url="https://inference.test/models/slow", api_token="t", timeout=0.5)
    client = HostedModelClient(config, transport=httpx.MockTransport(handler))

    start = time.monotonic()
    with pytest.raises(TransportError, match="request timed out after 0.5 seconds") as exc_info:
        client.complete("prompt")
    elapsed = time.monotonic() - start

    assert exc_info.value.kind is ErrorKind.TRANSPORT_FAILURE
    # 28 bytes at 0.1 s each would take 2.8 s
    assert elapsed < 1.5


def test_body_within_timeout_is_read_in_full() -> None:
    """Test that a chunked body finishing inside the deadline is decoded normally."""
    body = b'[{"generated_text": "ok"}]'

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_TrickleStream(body, delay=0.001))

    config = InferenceConfig(endpoint_url="https://inference.test/models/fast", api_token="t", timeout=5.0)
    client = HostedModelClient(config, transport=httpx.MockTransport(handler))

    assert client.complete("prompt") == "ok"
