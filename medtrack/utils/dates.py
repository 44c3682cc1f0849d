"""
Contains date parsing helpers shared by the repository and the aggregator.
"""

from datetime import date, datetime
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from ..exceptions import ValidationError

ISO_DATE_FORMAT = "%Y-%m-%d"
TIME_FORMATS = ("%H:%M", "%H:%M:%S")


def parse_iso_date(value: Optional[str], field: str = "date") -> date:
    """
    Parses a calendar day given as `yyyy-MM-dd`.

    Raises:
        ValidationError: If the value is empty or not a valid date.
    """
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return datetime.strptime(value, ISO_DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a date in yyyy-MM-dd format")


def parse_time_of_day(value: Optional[str], field: str = "time") -> str:
    """Parses a local time of day (HH:MM or HH:MM:SS) and returns it zero-padded."""
    if not value:
        raise ValidationError(f"{field} is required")
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt).strftime(fmt)
        except ValueError:
            continue
    raise ValidationError(f"{field} must be a time in HH:MM format")


def month_window(reference: date) -> Tuple[date, date]:
    """Returns the first and last day of the month containing `reference`."""
    start = reference.replace(day=1)
    end = start + relativedelta(months=1, days=-1)
    return start, end
