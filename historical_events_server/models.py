"""
Data models for the historical events tool.

This module contains the dataclasses passed between the MCP tool, the request
handler and the prompt builder. All of them live for a single invocation.
"""
from __future__ import annotations

import re
import typing as t
from dataclasses import dataclass
from datetime import date as Date

from .errors import InvalidArgumentError


DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Fixed English names; strftime("%B") follows the process locale.
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True)
class HistoricalEventsRequest:
    """
    Typed view of the tool arguments.
    """
    date: str

    @classmethod
    def from_arguments(cls, arguments: t.Mapping[str, t.Any]) -> HistoricalEventsRequest:
        value = arguments.get("date")
        if not isinstance(value, str):
            raise InvalidArgumentError("date must be a string")
        return cls(date=value)


@dataclass(frozen=True)
class ParsedDate:
    """
    A calendar date reduced to what the prompt needs:
    - year: 2001
    - month_day: "September 11"
    """
    year: int
    month_day: str

    @classmethod
    def parse(cls, value: str) -> ParsedDate:
        """Parse a strict YYYY-MM-DD string.

        Raises:
            InvalidArgumentError: If the string is not exactly YYYY-MM-DD or
                does not name a real calendar day.
        """
        if not DATE_PATTERN.fullmatch(value):
            raise InvalidArgumentError("invalid date format, must be YYYY-MM-DD")
        year, month, day = (int(part) for part in value.split("-"))
        try:
            Date(year, month, day)
        except ValueError:
            raise InvalidArgumentError("invalid date format, must be YYYY-MM-DD") from None
        return cls(year=year, month_day=f"{MONTH_NAMES[month - 1]} {day}")

    @property
    def label(self) -> str:
        """Month-day label followed by the year, e.g. "September 11 2001"."""
        return f"{self.month_day} {self.year}"


@dataclass(frozen=True)
class ToolResult:
    """
    Final text returned to the MCP caller.
    """
    date: ParsedDate
    text: str
    events_found: bool = True
