"""
Date helpers shared by the import pipeline, dashboard and timeline.
"""

import re
from datetime import date, datetime, timezone
from typing import Optional

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})\s+([A-Za-z]{3,})\.?\s+(\d{4})$")
_MONTH_YEAR = re.compile(r"^([A-Za-z]{3,})\.?\s+(\d{4})$")
_YEAR = re.compile(r"^(\d{4})$")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_MONTH_SLASH_YEAR = re.compile(r"^(\d{1,2})/(\d{4})$")

_FALLBACK_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y/%m/%d %H:%M:%S UTC", "%m/%d/%Y", "%m/%d/%y", "%d %B %Y", "%B %d, %Y", "%b %d, %Y")


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _month(name: str) -> Optional[int]:
    return MONTHS.get(name[:3].lower())


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_linkedin_date(value: Optional[str]) -> Optional[date]:
    """
    Parse the date formats found in LinkedIn exports.

    Accepts "12 Jan 2023", "Jan 2023", "2023", "2023-01", "01/2023" and ISO
    dates. Returns None for anything else.
    """
    if not value:
        return None
    text = " ".join(value.split())
    if not text:
        return None

    match = _DAY_MONTH_YEAR.match(text)
    if match:
        month = _month(match.group(2))
        return _safe_date(int(match.group(3)), month, int(match.group(1))) if month else None

    match = _MONTH_YEAR.match(text)
    if match:
        month = _month(match.group(1))
        return _safe_date(int(match.group(2)), month, 1) if month else None

    match = _YEAR.match(text)
    if match:
        return date(int(match.group(1)), 1, 1)

    match = _YEAR_MONTH.match(text)
    if match:
        return _safe_date(int(match.group(1)), int(match.group(2)), 1)

    match = _MONTH_SLASH_YEAR.match(text)
    if match:
        return _safe_date(int(match.group(2)), int(match.group(1)), 1)

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def as_date(value) -> Optional[date]:
    """Collapse datetimes to dates, pass dates through."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value
