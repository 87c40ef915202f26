"""Calendar month helpers used for monthly filtering and settlements."""
import calendar
from datetime import date, MINYEAR, MAXYEAR

from .exceptions import InvalidInputError


def month_bounds(year, month):
    """
    Return the first and last day of a calendar month.

    Raises:
        InvalidInputError: If month is outside 1..12 or year outside 1..9999.
    """
    if not 1 <= int(month) <= 12:
        raise InvalidInputError("Month must be between 1 and 12", month=month)
    if not MINYEAR <= int(year) <= MAXYEAR:
        raise InvalidInputError(f"Year must be between {MINYEAR} and {MAXYEAR}", year=year)

    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)
