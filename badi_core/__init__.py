"""Badi (Baha'i) calendar: conversion engine, occasions and date value object."""

from .astronomy import AstronomicalService, SwissEphemerisService
from .badi_core import AYYAM_I_HA, CalendarEngine, Day, Month, Weekday, Year, default_engine
from .badi_date import BadiDate, Location
from .errors import (
    AstronomyError,
    BadiDateError,
    InvalidCalendarField,
    InvalidConstructorArguments,
    InvalidIntercalaryDay,
    OccasionNotFound,
)
from .occasions import Occasion, OccasionType, find, get_occasion, occasions_on

__all__ = [
    "AYYAM_I_HA",
    "AstronomicalService",
    "AstronomyError",
    "BadiDate",
    "BadiDateError",
    "CalendarEngine",
    "Day",
    "InvalidCalendarField",
    "InvalidConstructorArguments",
    "InvalidIntercalaryDay",
    "Location",
    "Month",
    "Occasion",
    "OccasionNotFound",
    "OccasionType",
    "SwissEphemerisService",
    "Weekday",
    "Year",
    "default_engine",
    "find",
    "get_occasion",
    "occasions_on",
]
