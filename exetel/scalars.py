"""Scalar wire encodings used by the Exetel API.

The API renders money as display strings (``"$12.34"``), percentages as raw
integers and dates in two human formats: ``"5 Jan 2024"`` for contract dates
and ``"5 Jan 24"`` for billing cycle dates. Each codec here round-trips
exactly through its wire form.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from exetel.errors import FormatError

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
_MONTH_NUMBERS = {name.lower(): index for index, name in enumerate(MONTH_ABBREVIATIONS, start=1)}

_DIGITS = re.compile(r"[0-9]+")
_LONG_DATE = re.compile(r"([0-9]{1,2}) ([A-Za-z]{3}) ([0-9]{4})")
_SHORT_DATE = re.compile(r"([0-9]{1,2}) ([A-Za-z]{3}) ([0-9]{2})")

# Two digit years: 70-99 are 19xx, 00-69 are 20xx.
SHORT_YEAR_PIVOT = 70


@dataclass(frozen=True, order=True)
class Price:
    """A monetary amount stored as a whole number of cents."""

    cents: int

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise FormatError(f"Price cents must be an integer, got {self.cents!r}")
        if self.cents < 0:
            raise FormatError(f"Price cannot be negative: {self.cents}")

    @classmethod
    def parse(cls, text: str) -> Price:
        """Parse ``"$12.34"``, ``"12.34"`` or ``"12"`` into a price.

        Only the first two ``.``-separated groups are read; a missing
        fractional group counts as zero cents.
        """
        if not isinstance(text, str):
            raise FormatError(f"Price must be a string, got {type(text).__name__}")
        body = text[1:] if text.startswith("$") else text
        groups = body.split(".")
        if len(groups) == 1:
            groups.append("0")

        value = 0
        for group in groups[:2]:
            if not _DIGITS.fullmatch(group):
                raise FormatError(f"Invalid price: {text!r}")
            value = value * 100 + int(group)
        return cls(value)

    def format(self) -> str:
        return f"${self.cents // 100}.{self.cents % 100:02d}"

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Price({self.format()!r})"


@dataclass(frozen=True, order=True)
class Percentage:
    """An integer percentage; the API value is trusted as-is, so no 0-100 bound."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise FormatError(f"Percentage must be an integer, got {self.value!r}")

    @classmethod
    def decode(cls, raw: Any) -> Percentage:
        return cls(raw)

    def encode(self) -> int:
        return self.value

    def to_display_string(self) -> str:
        return f"{self.value}%"

    def __str__(self) -> str:
        return self.to_display_string()


def _parse_date(text: Any, pattern: re.Pattern[str], kind: str) -> tuple[int, int, int]:
    if not isinstance(text, str):
        raise FormatError(f"{kind} must be a string, got {type(text).__name__}")
    match = pattern.fullmatch(text)
    if match is None:
        raise FormatError(f"Invalid {kind}: {text!r}")
    day, month_name, year = match.groups()
    month = _MONTH_NUMBERS.get(month_name.lower())
    if month is None:
        raise FormatError(f"Invalid {kind}: unknown month {month_name!r} in {text!r}")
    return int(year), month, int(day)


def _build_date(year: int, month: int, day: int, text: str) -> date:
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise FormatError(f"Invalid calendar date: {text!r}") from exc


def parse_long_date(text: str) -> date:
    """Parse a ``"5 Jan 2024"`` style date."""
    year, month, day = _parse_date(text, _LONG_DATE, "long date")
    return _build_date(year, month, day, text)


def format_long_date(value: date) -> str:
    return f"{value.day} {MONTH_ABBREVIATIONS[value.month - 1]} {value.year:04d}"


def expand_short_year(year: int) -> int:
    """Expand a two digit year: 00-69 become 20xx, 70-99 become 19xx."""
    if not 0 <= year <= 99:
        raise FormatError(f"Two digit year out of range: {year}")
    return 1900 + year if year >= SHORT_YEAR_PIVOT else 2000 + year


def parse_short_date(text: str) -> date:
    """Parse a ``"5 Jan 24"`` style date."""
    year, month, day = _parse_date(text, _SHORT_DATE, "short date")
    return _build_date(expand_short_year(year), month, day, text)


def format_short_date(value: date) -> str:
    # Years outside the pivot window would come back as a different century.
    if not 1900 + SHORT_YEAR_PIVOT <= value.year < 2000 + SHORT_YEAR_PIVOT:
        raise FormatError(f"Year {value.year} cannot be written as a two digit year")
    return f"{value.day} {MONTH_ABBREVIATIONS[value.month - 1]} {value.year % 100:02d}"
