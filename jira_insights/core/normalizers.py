"""Field normalizers for Jira CSV values (pure functions).

Every function here is total: unparsable input maps to ``None`` instead of
raising, so one malformed cell never aborts the rest of its row.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from functools import reduce
from typing import Any

import pandas as pd

from .config import (
    MONTH_ABBREVIATIONS,
    SECONDS_THRESHOLD,
    SYSTEM_ALIASES,
    TWO_DIGIT_YEAR_BASE,
    WORKDAY_HOURS,
)

# "17/12/25 10:11"
_NUMERIC_SHORT_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2})\s+(\d{1,2}):(\d{2})$")
# "15/Jan/24 10:30", "15/Mai/2024 10:30", "15/Jan/24 10:30 AM"
_TEXT_MONTH_DATE = re.compile(r"^(\d{1,2})/([A-Za-z]{3})/(\d{4}|\d{2})\s+(\d{1,2}):(\d{2})(?:\s*[AaPp][Mm])?$")
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
# "05/01/2024" (day first), optionally followed by a time of day
_SLASH_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})(?:\s+\d{1,2}:\d{2}(?::\d{2})?)?$")

_BARE_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_DURATION_TOKENS = (
    (re.compile(r"(\d+(?:\.\d+)?)\s*d", re.IGNORECASE), WORKDAY_HOURS),
    (re.compile(r"(\d+(?:\.\d+)?)\s*h", re.IGNORECASE), 1.0),
    (re.compile(r"(\d+(?:\.\d+)?)\s*m", re.IGNORECASE), 1.0 / 60.0),
)

_SUMMARY_TAG = re.compile(r"^\[([^\]]+)\]")
_DIGIT_RUN = re.compile(r"[0-9]+")


# ------------------ Dates ------------------
def _calendar_date(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> str | None:
    try:
        return datetime(year, month, day, hour, minute).date().isoformat()
    except ValueError:
        return None


def _generic_date(value: str) -> str | None:
    try:
        ts = pd.to_datetime(value, utc=True, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date().isoformat()


def parse_date(value: str | None) -> str | None:
    """Normalize a Jira export date to ``YYYY-MM-DD``.

    Formats are tried in priority order:

    1. ``D/M/YY HH:MM`` (numeric month, two-digit year in the 2000s)
    2. ``D/Mon/YY HH:MM`` or ``D/Mon/YYYY HH:MM`` (Portuguese or English month)
    3. ISO ``YYYY-MM-DD`` prefix, including full timestamps
    4. ``D/M/YYYY`` (regional day-first)
    5. generic parse

    The time of day is discarded. A format that matches but does not describe a
    real calendar date yields ``None`` rather than falling through.

    Examples
    --------
    >>> parse_date("17/12/25 10:11")
    '2025-12-17'
    >>> parse_date("3/Mai/24 09:00")
    '2024-05-03'
    >>> parse_date("31/02/2024") is None
    True
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    match = _NUMERIC_SHORT_DATE.match(text)
    if match:
        day, month, year, hour, minute = (int(g) for g in match.groups())
        return _calendar_date(TWO_DIGIT_YEAR_BASE + year, month, day, hour, minute)

    match = _TEXT_MONTH_DATE.match(text)
    if match:
        day, month_name, year_text, hour, minute = match.groups()
        month = MONTH_ABBREVIATIONS.get(month_name.capitalize())
        if month is None:
            return None
        year = int(year_text)
        if len(year_text) == 2:
            year += TWO_DIGIT_YEAR_BASE
        # An AM/PM suffix only shifts the hour, never the calendar date
        return _calendar_date(year, month, int(day), int(hour), int(minute))

    if _ISO_PREFIX.match(text):
        return _generic_date(text)

    match = _SLASH_DATE.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return _calendar_date(year, month, day)

    if not any(ch.isdigit() for ch in text):
        return None
    return _generic_date(text)


def calculate_lead_time(created_date: str | None, resolved_date: str | None) -> int | None:
    """Whole days from creation to resolution; ``None`` when negative or unknown."""
    if not created_date or not resolved_date:
        return None
    try:
        created = date.fromisoformat(created_date)
        resolved = date.fromisoformat(resolved_date)
    except (ValueError, TypeError):
        return None
    days = math.ceil((resolved - created).total_seconds() / 86400.0)
    return days if days >= 0 else None


# ------------------ Durations ------------------
def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` places with halves going up (1.125 -> 1.13, 2.5 -> 3)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def parse_time_value(value: Any) -> float | None:
    """Convert a Jira time-tracking value to hours.

    Bare numbers above ``SECONDS_THRESHOLD`` are seconds (Jira's raw unit);
    smaller ones are already hours. Otherwise ``<n>d``, ``<n>h`` and ``<n>m``
    tokens are summed with an 8-hour workday.

    >>> parse_time_value("1h 30m")
    1.5
    >>> parse_time_value("7200")
    2.0
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    if _BARE_NUMBER.fullmatch(text):
        number = float(text)
        if number > SECONDS_THRESHOLD:
            return round_half_up(number / 3600.0, 2)
        return number

    total = 0.0
    for pattern, hours_per_unit in _DURATION_TOKENS:
        match = pattern.search(text)
        if match:
            total += float(match.group(1)) * hours_per_unit
    return round_half_up(total, 2) if total > 0 else None


# ------------------ Systems ------------------
def normalize_system_name(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return SYSTEM_ALIASES.get(text, text)


def extract_system_from_summary(summary: str | None) -> str | None:
    """Return the canonical system named by a leading ``[tag]`` in the summary."""
    if not summary:
        return None
    match = _SUMMARY_TAG.match(summary)
    if not match:
        return None
    return normalize_system_name(match.group(1))


# ------------------ Versions ------------------
def extract_version_numbers(version: str | None) -> list[int]:
    """Digit runs of a version label, e.g. ``"Release 1.2.3"`` -> ``[1, 2, 3]``.

    Labels without digits map to ``[0]`` and so sort lowest.
    """
    numbers = _DIGIT_RUN.findall(version or "")
    if not numbers:
        return [0]
    return [int(n) for n in numbers]


def compare_versions(a: str, b: str) -> int:
    """Compare two version labels numerically, component by component.

    Returns a positive number when ``a`` is higher, negative when lower and 0
    on a tie. Missing trailing components count as 0. Pre-release suffixes
    (alpha, rc, ...) are not understood; only their digits take part.
    """
    nums_a = extract_version_numbers(a)
    nums_b = extract_version_numbers(b)
    for idx in range(max(len(nums_a), len(nums_b))):
        num_a = nums_a[idx] if idx < len(nums_a) else 0
        num_b = nums_b[idx] if idx < len(nums_b) else 0
        if num_a != num_b:
            return num_a - num_b
    return 0


def highest_version(versions: list[str]) -> str | None:
    """Pick the highest label; on a tie the earlier one is kept."""
    candidates = [v for v in versions if v]
    if not candidates:
        return None
    return reduce(lambda best, current: current if compare_versions(current, best) > 0 else best, candidates)
