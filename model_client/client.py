"""
HTTP client for the hosted text-generation model.

The request handler only depends on the TextCompletionClient protocol, so any
object with a ``complete(prompt) -> str`` method can stand in for the hosted
model (a local stub in tests, another provider later).
"""
from __future__ import annotations

import logging
import time
import typing as t

import httpx
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from historical_events_server.errors import DecodeError, SerializationError, TransportError, UpstreamError
from services.shared.models import GenerationParameters, InferenceReply, InferenceRequest

from .config import InferenceConfig


logger = logging.getLogger(__name__)

# Returned when the model answers with no usable text. Note the handler's
# no-events predicate looks for a different phrase, so this text is wrapped
# as a normal answer ("On <date>:\nNo historical events found for this date").
EMPTY_REPLY_TEXT = "No historical events found for this date"


class TextCompletionClient(t.Protocol):
    """Anything that turns a prompt into generated text."""

    def complete(self, prompt: str) -> str:
        ...


class HostedModelClient:
    """Single-attempt client for a Hugging Face style inference endpoint."""

    def __init__(
        self,
        config: InferenceConfig,
        parameters: t.Optional[GenerationParameters] = None,
        transport: t.Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Args:
            config: Endpoint URL, bearer token and timeout.
            parameters: Sampling parameters; defaults to 200 new tokens at 0.7.
            transport: Optional httpx transport, used by tests to fake the endpoint.
        """
        self._config = config
        self._parameters = parameters or GenerationParameters()
        self._transport = transport

    def complete(self, prompt: str) -> str:
        """Send one prompt and return the first generated text.

        Raises:
            SerializationError: If the request body cannot be encoded.
            TransportError: On connection, timeout or read errors.
            UpstreamError: If the endpoint answers with a non-200 status.
            DecodeError: If the reply is not a list of generated texts.
        """
        body = self._encode(prompt)

        headers = {
            "Authorization": f"Bearer {self._config.api_token}",
            "Content-Type": "application/json",
        }

        logger.debug("POST %s (%d bytes)", self._config.endpoint_url, len(body))
        # httpx timeouts bound each phase; the deadline bounds the whole call
        deadline = time.monotonic() + self._config.timeout
        try:
            # One connection per call, closed on every exit path
            with httpx.Client(timeout=self._config.timeout, transport=self._transport) as client:
                with client.stream("POST", self._config.endpoint_url, content=body, headers=headers) as response:
                    content = self._read_body(response, deadline)
        except httpx.TimeoutException as e:
            logger.warning("Inference request timed out after %s seconds", self._config.timeout)
            raise TransportError(f"request timed out after {self._config.timeout} seconds: {e}") from e
        except httpx.DecodingError as e:
            logger.warning("Could not read inference response body: %s", e)
            raise TransportError(f"failed to read response body: {e}") from e
        except httpx.RequestError as e:
            logger.warning("Inference request failed: %s", e)
            raise TransportError(f"request failed: {e}") from e

        if response.status_code != httpx.codes.OK:
            logger.warning("Inference endpoint returned HTTP %d", response.status_code)
            text = content.decode(response.encoding or "utf-8", errors="replace")
            raise UpstreamError(f"API error {response.status_code}: {text}")

        return self._decode(content)

    def _read_body(self, response: httpx.Response, deadline: float) -> bytes:
        """Read the whole body, failing once the overall deadline has passed."""
        chunks: list[bytes] = []
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            self._check_deadline(deadline)
        self._check_deadline(deadline)
        return b"".join(chunks)

    def _check_deadline(self, deadline: float) -> None:
        if time.monotonic() > deadline:
            logger.warning("Inference request timed out after %s seconds", self._config.timeout)
            raise TransportError(f"request timed out after {self._config.timeout} seconds")

    def _encode(self, prompt: str) -> bytes:
        try:
            request = InferenceRequest(inputs=prompt, parameters=self._parameters)
            return request.model_dump_json().encode("utf-8")
        except (ValidationError, PydanticSerializationError, UnicodeEncodeError) as e:
            raise SerializationError(f"failed to create request: {e}") from e

    @staticmethod
    def _decode(content: bytes) -> str:
        try:
            candidates = InferenceReply.validate_json(content)
        except ValidationError as e:
            raise DecodeError(f"failed to parse response: {e}") from e

        if not candidates or not candidates[0].generated_text:
            logger.info("Inference endpoint returned no generated text")
            return EMPTY_REPLY_TEXT

        return candidates[0].generated_text
