"""
Shared Pydantic models for the hosted inference API.

These describe the JSON exchanged with the text-generation endpoint, and are
used both by the model client and by the mock inference service.
"""
from __future__ import annotations

from pydantic import BaseModel, Field, TypeAdapter


class GenerationParameters(BaseModel):
    """
    Sampling parameters sent with every prompt.
    """
    max_new_tokens: int = 200
    temperature: float = 0.7


class InferenceRequest(BaseModel):
    """
    Request body of the text-generation endpoint:
    {"inputs": "<prompt>", "parameters": {...}}
    """
    inputs: str
    parameters: GenerationParameters = Field(default_factory=GenerationParameters)


class GeneratedText(BaseModel):
    """
    One candidate completion returned by the endpoint.
    """
    generated_text: str


# The endpoint replies with a bare JSON array, not an object
InferenceReply = TypeAdapter(list[GeneratedText])
