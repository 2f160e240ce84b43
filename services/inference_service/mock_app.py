"""
Mock inference service for running the server without a Hugging Face token.

Mimics the hosted text-generation endpoint: it accepts the same request body
and answers with a JSON array of generated texts, built from the month/day
named in the prompt instead of a real model call.
"""
from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager

from fastapi import FastAPI

from services.shared.models import GeneratedText, InferenceRequest


logger = logging.getLogger(__name__)

_DATE_IN_PROMPT = re.compile(r"happened on (?P<month_day>[A-Z][a-z]+ \d{1,2}) (?P<year>-?\d+)\.")

# Month/day for which the mock answers with an empty array
EMPTY_REPLY_MONTH_DAY = "January 1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Mock lifespan - no initialization needed."""
    logger.info("Mock inference service starting - no model calls will be made")
    yield
    logger.info("Mock inference service shutting down")


app = FastAPI(
    title="Mock Inference Service",
    description="Mock text-generation endpoint for testing the historical events server",
    version="1.0.0-mock",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "mock-inference-service", "mode": "test"}


@app.post("/models/{model_id:path}", response_model=list[GeneratedText])
async def generate(model_id: str, request: InferenceRequest) -> list[GeneratedText]:
    """
    Mock text generation - returns two predictable events for the prompt's date.
    """
    match = _DATE_IN_PROMPT.search(request.inputs)
    if match is None:
        return [GeneratedText(generated_text=f"No significant historical events found for this prompt ({model_id}).")]

    month_day = match.group("month_day")
    if month_day == EMPTY_REPLY_MONTH_DAY:
        return []

    return [GeneratedText(generated_text=_mock_events(month_day))]


def _mock_events(month_day: str) -> str:
    """Two enumerated lines in the format the prompt asks for."""
    return (
        f"1. [1901] Mock event one on {month_day}.\n"
        f"2. [1969] Mock event two on {month_day}.\n"
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8081)
