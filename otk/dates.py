"""
Absolute day numbers.

Dates are compared as integer day numbers counted from the proleptic
Gregorian epoch (January 1 of year 1 is day 1). Both node timestamps and
caller supplied targets go through this module so they share one epoch.
"""
import re
from datetime import date, datetime
from typing import Optional, Union

DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?!\d)")
RELATIVE_PATTERN = re.compile(r"^([+-])(\d+)([dw])$")

DayLike = Union[int, str, date]


def absolute_day(value: date) -> int:
    """Absolute day number of a date (time of day is ignored)."""
    if isinstance(value, datetime):
        value = value.date()
    return value.toordinal()


def from_absolute(day: int) -> date:
    """Inverse of absolute_day()."""
    return date.fromordinal(day)


def parse_iso_day(text: str) -> Optional[int]:
    """
    Parse a YYYY-MM-DD string into an absolute day number.

    Anything after the date part (a time, a weekday name) is ignored.
    Returns None when the string is not a valid date.
    """
    match = DATE_PATTERN.match(text.strip())
    if not match:
        return None
    year, month, day = (int(g) for g in match.groups())
    try:
        return absolute_day(date(year, month, day))
    except ValueError:
        return None


def to_absolute(value: DayLike) -> Optional[int]:
    """
    Coerce a day given as int, date or YYYY-MM-DD string.

    Booleans are not day numbers. Returns None for unusable values.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, date):
        return absolute_day(value)
    if isinstance(value, str):
        return parse_iso_day(value)
    return None


def resolve_relative(expr: str, today: int) -> Optional[int]:
    """
    Resolve 'today' or an offset like '+3d' / '-2w' against today.

    Plain YYYY-MM-DD strings are accepted too.
    """
    expr = expr.strip().lower()
    if expr == "today":
        return today
    if expr == "tomorrow":
        return today + 1
    if expr == "yesterday":
        return today - 1

    match = RELATIVE_PATTERN.match(expr)
    if match:
        sign, amount, unit = match.groups()
        days = int(amount) * (7 if unit == "w" else 1)
        return today + days if sign == "+" else today - days

    return parse_iso_day(expr)


def today_absolute(now: Optional[datetime] = None) -> int:
    """Absolute day number for now (or the given moment)."""
    now = now or datetime.now()
    return absolute_day(now)
