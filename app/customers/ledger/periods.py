"""
Billing period keys.

A period is one billing month, keyed "YYYY-MM". The key joins every
ledger view and is the unit of billing.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from django.utils import timezone

from .exceptions import InvalidPeriodError

PERIOD_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_period(period: str) -> tuple[int, int]:
    """
    Split a period key into (year, month).

    Raises:
        InvalidPeriodError: If the key is missing or malformed
    """
    if not isinstance(period, str):
        raise InvalidPeriodError(period)
    match = PERIOD_PATTERN.match(period)
    if not match:
        raise InvalidPeriodError(period)
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidPeriodError(period)
    return year, month


def validate_period(period: str) -> str:
    """Return the period unchanged if it is a valid key."""
    parse_period(period)
    return period


def format_period(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def previous_period_key(period: str) -> str:
    """
    Return the period preceding `period`, rolling over year boundaries.

    Example:
        previous_period_key("2024-01")  # "2023-12"
    """
    year, month = parse_period(period)
    if month == 1:
        return format_period(year - 1, 12)
    return format_period(year, month - 1)


def next_period_key(period: str) -> str:
    """Return the period following `period`, rolling over year boundaries."""
    year, month = parse_period(period)
    if month == 12:
        return format_period(year + 1, 1)
    return format_period(year, month + 1)


def period_for(moment: date | datetime) -> str:
    """Return the period containing a date or (local-time) datetime."""
    if isinstance(moment, datetime) and timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    return format_period(moment.year, moment.month)


def current_period(now: datetime | None = None) -> str:
    """Return the period of the wall-clock date."""
    return period_for(now or timezone.now())
