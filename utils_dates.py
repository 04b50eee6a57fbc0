#!/usr/bin/env python3
"""
Shared date utilities for the deadline reminder
All comparisons are whole calendar days in the configured timezone
"""

import argparse
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

import holidays
import pytz

from config import DUE_DATE_LOOKBACK_DAYS, DUE_IN_3_DAYS, HOLIDAY_FALLBACK_NAME


def get_anchor_date(timezone_name: str, now: Optional[datetime] = None) -> date:
    """
    Get today's calendar date in the given timezone.

    Args:
        timezone_name: IANA timezone name such as "Asia/Tokyo"
        now: Aware datetime to convert instead of the current time

    Returns:
        The calendar date in that timezone
    """
    tz = pytz.timezone(timezone_name)
    if now is None:
        return datetime.now(tz).date()
    return now.astimezone(tz).date()


def iso_date(value: date) -> str:
    """Format a date as YYYY-MM-DD"""
    return value.isoformat()


def day_difference(anchor: date, due: date) -> int:
    """Whole calendar days from anchor to due (negative when overdue)"""
    return (due - anchor).days


def get_due_date_window(anchor: date) -> Tuple[date, date]:
    """
    Get the inclusive due-date range to fetch.

    Reaches back DUE_DATE_LOOKBACK_DAYS to pick up overdue work and forward
    to the furthest reported offset.
    """
    since = anchor - timedelta(days=DUE_DATE_LOOKBACK_DAYS)
    until = anchor + timedelta(days=DUE_IN_3_DAYS)
    return since, until


def get_holiday_name(day: date, country: str) -> Optional[str]:
    """Return the public holiday name for day, or None on a working day"""
    calendar = holidays.country_holidays(country)
    if day not in calendar:
        return None
    return calendar.get(day) or HOLIDAY_FALLBACK_NAME


def parse_date_arg(value: str) -> date:
    """Parse a --date argument (argparse type)"""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}'. Expected YYYY-MM-DD.")
