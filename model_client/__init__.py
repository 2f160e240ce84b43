"""Client side of the hosted text-generation model."""
from .client import EMPTY_REPLY_TEXT, HostedModelClient, TextCompletionClient
from .config import InferenceConfig

__all__ = ["EMPTY_REPLY_TEXT", "HostedModelClient", "InferenceConfig", "TextCompletionClient"]
