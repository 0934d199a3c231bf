"""Date parsing utilities.

Statements and users write dates the Brazilian way (``15/01/2024``, or just
``15/01`` on card invoices); storage and the API use ISO dates. CLI filters
also accept a few relative words in English and Portuguese.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_BR_FULL_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_BR_SHORT_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})$")

# word -> offset in days from today
_DAY_WORDS = {
    "today": 0,
    "hoje": 0,
    "yesterday": -1,
    "ontem": -1,
    "tomorrow": 1,
    "amanhã": 1,
}

_PERIOD_STEPS = {"last": -1, "this": 0, "next": 1}

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def _period_start(today: date, unit: str, step: int) -> Optional[date]:
    """First day of the week, month or year ``step`` units away from today."""
    if unit == "week":
        return today - timedelta(days=today.weekday()) + timedelta(weeks=step)
    if unit == "month":
        return today.replace(day=1) + relativedelta(months=step)
    if unit == "year":
        return today.replace(month=1, day=1) + relativedelta(years=step)
    return None


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO and Brazilian dates: "2024-01-15", "15/01/2024"
    - Day words: "today", "hoje", "yesterday", "ontem", "tomorrow", "amanhã"
    - Period starts: "last month", "this week", "next year", ...
    - Anything else dateutil reads, day first

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    if date_str in _DAY_WORDS:
        return today + timedelta(days=_DAY_WORDS[date_str])

    words = date_str.split()
    if len(words) == 2 and words[0] in _PERIOD_STEPS:
        start = _period_start(today, words[1], _PERIOD_STEPS[words[0]])
        if start is not None:
            return start

    if _ISO_DATE.match(date_str) or _BR_FULL_DATE.match(date_str):
        return date.fromisoformat(normalize_date(date_str))

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "this-*" periods run up to today; "last-*" periods are complete.

    Args:
        period: One of ``PERIODS``

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if period not in PERIODS:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}"
        )

    today = date.today()
    which, unit = period.split("-")
    if which == "this":
        return (_period_start(today, unit, 0), today)

    start = _period_start(today, unit, -1)
    return (start, _period_start(today, unit, 0) - timedelta(days=1))


def parse_brazilian_short_date(date_str: str, today: Optional[date] = None) -> str:
    """Convert a short Brazilian date (DD/MM) to ISO format.

    Statements print day and month only. The current year is assumed, or the
    previous year when the month is still in the future.

    Args:
        date_str: Date like "25/12"
        today: Reference date, defaults to today

    Returns:
        ISO date string, e.g. "2024-12-25"
    """
    today = today or date.today()
    day_str, month_str = date_str.strip().split("/")
    month = int(month_str)
    year = today.year - 1 if month > today.month else today.year
    return f"{year}-{month:02d}-{int(day_str):02d}"


def normalize_date(date_str: str, today: Optional[date] = None) -> str:
    """Normalize ISO, DD/MM/YYYY or DD/MM dates to an ISO string.

    Raises:
        ValueError: If the format is not supported or the date is invalid
    """
    date_str = date_str.strip()

    if _ISO_DATE.match(date_str):
        normalized = date_str
    elif match := _BR_FULL_DATE.match(date_str):
        day, month, year = match.groups()
        normalized = f"{year}-{int(month):02d}-{int(day):02d}"
    elif _BR_SHORT_DATE.match(date_str):
        normalized = parse_brazilian_short_date(date_str, today=today)
    else:
        raise ValueError(f"Formato de data não suportado: {date_str}")

    try:
        date.fromisoformat(normalized)
    except ValueError as e:
        raise ValueError(f"Data inválida: {date_str}") from e
    return normalized


def coerce_date(value: object) -> date:
    """Coerce a date, datetime or date string into a date.

    ISO datetimes such as "2024-01-15T12:00:00Z" keep their calendar day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            try:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            except ValueError as e:
                raise ValueError(f"Data inválida: {value}") from e
        return date.fromisoformat(normalize_date(text))
    raise ValueError(f"Data inválida: {value!r}")


def format_brazilian_date(value: date) -> str:
    """Format a date as DD/MM/YYYY."""
    return value.strftime("%d/%m/%Y")


def add_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping to the end of shorter months."""
    return value + relativedelta(months=months)
