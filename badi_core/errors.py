"""Exception hierarchy for Badi calendar conversion and occasion lookup."""
from __future__ import annotations

from typing import Optional


class BadiDateError(Exception):
    """Base class for every error raised by the calendar core."""


class InvalidConstructorArguments(BadiDateError, TypeError):
    """Neither a Gregorian value nor a complete (year, month, day) triple was given."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "Invalid arguments. Use 'date' or all of 'year', 'month' and 'day'."
        )


class InvalidCalendarField(BadiDateError, ValueError):
    """Month or day outside the calendar's bounds."""


class InvalidIntercalaryDay(InvalidCalendarField):
    def __init__(self, day: int, year: int):
        self.day = day
        self.year = year
        super().__init__(f"'{day}' is not a valid day for Ayyam-i-Ha in the year {year}")


class OccasionNotFound(BadiDateError, LookupError):
    def __init__(self, occasion: str, year: Optional[int] = None):
        self.occasion = occasion
        self.year = year
        if year is None:
            message = f"Unknown occasion '{occasion}'"
        else:
            message = f"Occasion '{occasion}' does not occur in the year {year}"
        super().__init__(message)


class AstronomyError(BadiDateError, RuntimeError):
    """Swiss Ephemeris could not answer (e.g. no sunset during polar day)."""
