"""
Error taxonomy for the historical events tool.

Every failure raised by the request handler or the model client is a
HistoricalEventsError carrying an ErrorKind, so the MCP layer can report it
without inspecting exception types one by one.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    SERIALIZATION_FAILURE = "serialization_failure"
    TRANSPORT_FAILURE = "transport_failure"
    UPSTREAM_FAILURE = "upstream_failure"
    DECODE_FAILURE = "decode_failure"


class HistoricalEventsError(Exception):
    """Base exception for all historical events failures."""

    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgumentError(HistoricalEventsError):
    """Raised when the date argument is missing, not a string or malformed."""

    kind = ErrorKind.INVALID_ARGUMENT


class SerializationError(HistoricalEventsError):
    """Raised when the inference request body cannot be encoded."""

    kind = ErrorKind.SERIALIZATION_FAILURE


class TransportError(HistoricalEventsError):
    """Raised on connection, timeout or body read errors."""

    kind = ErrorKind.TRANSPORT_FAILURE


class UpstreamError(HistoricalEventsError):
    """Raised on a non-200 reply, or when wrapping a model client failure."""

    kind = ErrorKind.UPSTREAM_FAILURE


class DecodeError(HistoricalEventsError):
    """Raised when the inference reply is not a list of generated texts."""

    kind = ErrorKind.DECODE_FAILURE
