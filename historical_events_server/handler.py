"""
Request handling for the historical_events tool.

Validates the date argument, asks the model for two events on that month/day,
and formats the model's answer for the MCP caller.
"""
from __future__ import annotations

import logging
import typing as t

from model_client import TextCompletionClient
from prompts import render_prompt

from .errors import UpstreamError
from .models import HistoricalEventsRequest, ParsedDate, ToolResult


logger = logging.getLogger(__name__)

PROMPT_NAME = "historical_events_prompt"

# Phrase the prompt tells the model to use when nothing matches
NO_EVENTS_MARKER = "No significant historical events"


def build_prompt(parsed: ParsedDate) -> str:
    """Render the prompt asking for exactly two events on the given month/day."""
    return render_prompt(PROMPT_NAME, month_day=parsed.month_day, year=parsed.year)


def is_no_events_reply(text: str) -> bool:
    """Return True if the model signalled that no event matches the date.

    Case-sensitive substring match anywhere in the reply.
    """
    return NO_EVENTS_MARKER in text


def format_result(parsed: ParsedDate, answer: str) -> ToolResult:
    """Turn the raw model answer into the text returned to the caller."""
    cleaned = answer.strip()
    if is_no_events_reply(cleaned):
        return ToolResult(
            date=parsed,
            text=f"No historical events found for {parsed.label}",
            events_found=False,
        )
    return ToolResult(date=parsed, text=f"On {parsed.label}:\n{cleaned}")


def handle_historical_events(arguments: t.Mapping[str, t.Any], client: TextCompletionClient) -> ToolResult:
    """Handle one historical_events invocation.

    Args:
        arguments: Tool arguments; must hold a ``date`` string in YYYY-MM-DD form.
        client: Text completion backend the prompt is sent to.

    Returns:
        The formatted ToolResult.

    Raises:
        InvalidArgumentError: If the date is missing, not a string or malformed.
        UpstreamError: If the model client fails for any reason.
    """
    request = HistoricalEventsRequest.from_arguments(arguments)
    parsed = ParsedDate.parse(request.date)
    logger.info("Looking up historical events for %s", parsed.label)

    prompt = build_prompt(parsed)

    try:
        answer = client.complete(prompt)
    except Exception as e:
        logger.warning("Model call failed for %s: %s", parsed.label, e)
        raise UpstreamError(f"failed to get events: {e}") from e

    result = format_result(parsed, answer)
    logger.info("Events found for %s: %s", parsed.label, result.events_found)
    return result
