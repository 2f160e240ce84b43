"""Shared fixtures for the historical events tests."""
import typing as t

import httpx
import pytest

from model_client import HostedModelClient, InferenceConfig


class StubCompletionClient:
    """Records prompts and answers with a canned reply or raises a canned error."""

    def __init__(self, reply: str = "", error: t.Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def stub_client() -> StubCompletionClient:
    return StubCompletionClient(reply="1. [1776] Example event\n2. [1776] Another event")


@pytest.fixture
def inference_config() -> InferenceConfig:
    return InferenceConfig(
        endpoint_url="https://inference.test/models/google/gemma-3-27b-it",
        api_token="test-token",
    )


@pytest.fixture
def make_hosted_client(inference_config: InferenceConfig) -> t.Callable[..., HostedModelClient]:
    """Build a HostedModelClient whose requests are answered by ``handler``."""

    def _make(handler: t.Callable[[httpx.Request], httpx.Response]) -> HostedModelClient:
        return HostedModelClient(inference_config, transport=httpx.MockTransport(handler))

    return _make
