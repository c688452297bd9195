"""Timezone utilities for US/Eastern market time."""

from datetime import date, datetime, timedelta
from typing import Callable, Optional

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")

Clock = Callable[[], datetime]


def now_eastern() -> datetime:
    """Return current time in US/Eastern timezone."""
    return datetime.now(EASTERN_TZ)


def to_eastern(dt: datetime) -> datetime:
    """Convert a datetime to US/Eastern timezone."""
    if dt.tzinfo is None:
        # Assume naive datetime is already Eastern
        return EASTERN_TZ.localize(dt)
    return dt.astimezone(EASTERN_TZ)


def parse_datetime_eastern(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a datetime string and return it in US/Eastern timezone.

    If no timezone is provided in the string, assumes US/Eastern.
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        tz = default_tz or EASTERN_TZ
        dt = tz.localize(dt)
    return to_eastern(dt)


def trading_date(dt: datetime) -> date:
    """Calendar date of a timestamp as seen in US/Eastern."""
    return to_eastern(dt).date()


def start_of_day_eastern(dt: datetime) -> datetime:
    """Midnight US/Eastern of the day containing ``dt``."""
    return EASTERN_TZ.localize(datetime.combine(trading_date(dt), datetime.min.time()))


def end_of_day_eastern(dt: datetime) -> datetime:
    """Last representable instant of the US/Eastern day containing ``dt``."""
    return EASTERN_TZ.localize(datetime.combine(trading_date(dt), datetime.max.time()))


def is_business_day(day: date) -> bool:
    """Mon-Fri; exchange holidays are not modelled."""
    return day.weekday() < 5


def business_days_between(start: datetime, end: datetime) -> int:
    """
    Count business days strictly between two timestamps.

    Dates are taken in US/Eastern; neither the start date nor the end
    date is counted.
    """
    first = trading_date(start) + timedelta(days=1)
    last = trading_date(end)
    count = 0
    day = first
    while day < last:
        if is_business_day(day):
            count += 1
        day += timedelta(days=1)
    return count
