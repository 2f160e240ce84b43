"""
Configuration for the hosted inference endpoint.

Values come from the environment so the token never lives in source.
"""
from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_MODEL_ID = "google/gemma-3-27b-it"
DEFAULT_BASE_URL = "https://api-inference.huggingface.co/models"
DEFAULT_TIMEOUT = 30.0  # seconds, end to end


@dataclass(frozen=True)
class InferenceConfig:
    """Endpoint, credentials and timeout for one inference backend."""
    endpoint_url: str
    api_token: str
    timeout: float = DEFAULT_TIMEOUT

    def __repr__(self) -> str:
        return f"InferenceConfig(endpoint_url={self.endpoint_url!r}, timeout={self.timeout})"

    @classmethod
    def from_env(cls) -> InferenceConfig:
        """Build the configuration from HF_* environment variables.

        Raises:
            RuntimeError: If no API token is set.
        """
        api_token = os.getenv("HF_API_TOKEN") or os.getenv("HF_TOKEN")
        if not api_token:
            raise RuntimeError("HF_API_TOKEN environment variable is not set.")

        model_id = os.getenv("HF_MODEL_ID", DEFAULT_MODEL_ID)
        endpoint_url = os.getenv("HF_INFERENCE_URL", f"{DEFAULT_BASE_URL}/{model_id}")
        timeout = float(os.getenv("HF_TIMEOUT_SECONDS", DEFAULT_TIMEOUT))

        return cls(endpoint_url=endpoint_url, api_token=api_token, timeout=timeout)
