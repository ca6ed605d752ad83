# delivery-sim/delivery_sim/utils.py
"""
Utility functions for the Fleet Delivery Simulation.

Provides time parsing, timestamp arithmetic and rounding helpers.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Union

# 24-hour clock, single-digit hours allowed ('8:05' as well as '08:05')
START_TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def is_valid_start_time(value: str) -> bool:
    """
    Check whether a string is a 24-hour 'HH:MM' clock time.

    Example:
        >>> is_valid_start_time("08:00")
        True
        >>> is_valid_start_time("25:00")
        False
    """
    return isinstance(value, str) and START_TIME_PATTERN.match(value) is not None


def parse_start_time(value: str) -> time:
    """
    Parse an 'HH:MM' string into a datetime.time.

    Raises:
        ValueError: If the string is not a valid 24-hour clock time
    """
    if not is_valid_start_time(value):
        raise ValueError(f"Invalid start time: {value!r}")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def combine_utc(run_date: date, clock: time) -> datetime:
    """Build a timezone-aware UTC timestamp from a date and a clock time."""
    return datetime.combine(run_date, clock, tzinfo=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return value as an aware UTC timestamp. Naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp, accepting the trailing 'Z' used by JSON APIs.

    Example:
        >>> parse_timestamp("2024-01-15T12:00:00Z")
        datetime.datetime(2024, 1, 15, 12, 0, tzinfo=datetime.timezone.utc)
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def add_minutes(base: datetime, minutes_to_add: Union[int, float]) -> datetime:
    """
    Add a (possibly fractional) number of minutes to a timestamp.

    Example:
        >>> add_minutes(datetime(2024, 1, 15, 8, 0), 39)
        datetime.datetime(2024, 1, 15, 8, 39)
    """
    return base + timedelta(minutes=minutes_to_add)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positive values.

    Python's round() uses banker's rounding (round(7.5) == 8 but round(6.5) == 6);
    route times are quoted with halves rounded up.
    """
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    """Round a monetary or percentage value to 2 decimals."""
    return round(value, 2)
