"""Immutable Badi date value object."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
from zoneinfo import ZoneInfo

from badi_core.astronomy import TEHRAN_LAT, TEHRAN_LONG, TEHRAN_TZ, Instant
from badi_core.badi_core import (
    CalendarEngine,
    Day,
    Month,
    Weekday,
    Year,
    default_engine,
    weekday_from_gregorian,
)
from badi_core.errors import InvalidCalendarField, InvalidConstructorArguments
from badi_core.occasions import Occasion, occasions_on

Days = Union[int, dt.timedelta]


@dataclass(frozen=True)
class Location:
    lat: float = TEHRAN_LAT
    lng: float = TEHRAN_LONG
    tz: str = TEHRAN_TZ

    @classmethod
    def resolve(
        cls,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        tz: Optional[str] = None,
    ) -> "Location":
        """Fill omitted values with Tehran.

        A latitude or longitude of exactly 0 also falls back to Tehran, so the
        equator and the prime meridian cannot be selected.
        """
        return cls(
            lat=float(lat) if lat else TEHRAN_LAT,
            lng=float(lng) if lng else TEHRAN_LONG,
            tz=tz or TEHRAN_TZ,
        )


def _zone_name(instant: Instant) -> Optional[str]:
    tzinfo = getattr(instant, "tzinfo", None)
    return tzinfo.key if isinstance(tzinfo, ZoneInfo) else None


def _as_timedelta(days: Days) -> dt.timedelta:
    if isinstance(days, dt.timedelta):
        return days
    if isinstance(days, bool) or not isinstance(days, int):
        raise TypeError(f"days must be an int or timedelta, got {days!r}")
    return dt.timedelta(days=days)


@dataclass(frozen=True, eq=False)
class BadiDate:
    """
    A day of the Badi calendar together with its Gregorian equivalent.

    Build instances with ``from_instant`` or ``from_calendar_fields`` (or the
    ``create`` facade). The Gregorian value and the (year, month, day) triple
    are checked against each other on construction.
    """

    year: Year
    month: Month
    day: Day
    gregorian_date: Instant
    location: Location = field(default_factory=Location)
    engine: CalendarEngine = field(default_factory=default_engine, repr=False)

    def __post_init__(self) -> None:
        expected = self.engine.to_badi(self.gregorian_date)
        actual = (self.year.bahai_era, self.month, self.day.number)
        if expected != actual:
            raise InvalidCalendarField(
                f"{self.gregorian_date.isoformat()} is {expected[0]}.{expected[1].number}.{expected[2]}, "
                f"not {actual[0]}.{actual[1].number}.{actual[2]}"
            )

    # ----------------- Constructors -----------------
    @classmethod
    def from_instant(
        cls,
        instant: Instant,
        *,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        tz: Optional[str] = None,
        engine: Optional[CalendarEngine] = None,
    ) -> "BadiDate":
        if not isinstance(instant, dt.date):
            raise InvalidConstructorArguments(
                f"date must be a datetime.date or datetime.datetime, got {type(instant).__name__}"
            )
        engine = engine or default_engine()
        year, month, day = engine.to_badi(instant)
        return cls(
            year=Year(year),
            month=month,
            day=Day(day),
            gregorian_date=instant,
            location=Location.resolve(lat, lng, tz or _zone_name(instant)),
            engine=engine,
        )

    @classmethod
    def from_calendar_fields(
        cls,
        year: int,
        month: Union[Month, int],
        day: int,
        *,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        tz: Optional[str] = None,
        engine: Optional[CalendarEngine] = None,
    ) -> "BadiDate":
        engine = engine or default_engine()
        resolved = engine.validate(year, month, day)
        return cls(
            year=Year(year),
            month=resolved,
            day=Day(day),
            gregorian_date=engine.to_gregorian(year, resolved, day),
            location=Location.resolve(lat, lng, tz),
            engine=engine,
        )

    @classmethod
    def create(
        cls,
        date: Optional[Instant] = None,
        year: Optional[int] = None,
        month: Union[Month, int, None] = None,
        day: Optional[int] = None,
        **options: Any,
    ) -> "BadiDate":
        """Dispatch to ``from_instant`` when ``date`` is given, else to ``from_calendar_fields``."""
        if date is not None:
            return cls.from_instant(date, **options)
        if year is not None and month is not None and day is not None:
            return cls.from_calendar_fields(year, month, day, **options)
        raise InvalidConstructorArguments()

    # ----------------- Accessors -----------------
    @property
    def weekday(self) -> Weekday:
        return Weekday(weekday_from_gregorian(self.gregorian_date))

    @property
    def lat(self) -> float:
        return self.location.lat

    @property
    def lng(self) -> float:
        return self.location.lng

    @property
    def tz(self) -> str:
        return self.location.tz

    def occasions(self) -> List[Occasion]:
        return occasions_on(self.year.bahai_era, self.month, self.day.number)

    def sunset_time(self) -> dt.datetime:
        return self.engine.service.sunset_time(self.gregorian_date, self.lat, self.lng, self.tz)

    def upcoming_sunset_time(self) -> dt.datetime:
        tomorrow = self.gregorian_date + dt.timedelta(days=1)
        return self.engine.service.sunset_time(tomorrow, self.lat, self.lng, self.tz)

    # ----------------- Formatting -----------------
    def __str__(self) -> str:
        return f"{self.year.bahai_era}.{self.month.number}.{self.day.number}"

    def long_format(self) -> str:
        return f"{self.weekday} {self.day.number} {self.month} {self.year.bahai_era} B.E."

    def long_comma_format(self) -> str:
        return f"{self.weekday}, {self.day.number} {self.month}, {self.year.bahai_era} B.E."

    def short_format(self) -> str:
        return f"{self.day.number} {self.month} {self.year.bahai_era}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year.bahai_era,
            "month": self.month.number,
            "day": self.day.number,
            "weekday": self.weekday.number,
            "gregorianDate": self.gregorian_date.isoformat(),
            "yearTitle": self.year.title,
            "vahid": self.year.vahid,
            "kullIShay": self.year.kull_i_shay,
            "monthTitle": self.month.title,
            "monthTitleHtml": self.month.title_html,
            "monthTranslation": self.month.translation,
            "weekdayTitle": self.weekday.title,
            "formatted": str(self),
            "longFormat": self.long_format(),
            "shortFormat": self.short_format(),
            "latitude": self.lat,
            "longitude": self.lng,
            "timeZone": self.tz,
        }

    # ----------------- Arithmetic -----------------
    def add_days(self, days: Days) -> "BadiDate":
        return BadiDate.from_instant(
            self.gregorian_date + _as_timedelta(days),
            lat=self.lat,
            lng=self.lng,
            tz=self.tz,
            engine=self.engine,
        )

    def subtract_days(self, days: Days) -> "BadiDate":
        return self.add_days(-_as_timedelta(days))

    def __add__(self, other: Days) -> "BadiDate":
        if isinstance(other, (int, dt.timedelta)) and not isinstance(other, bool):
            return self.add_days(other)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other: Union[Days, "BadiDate"]):
        if isinstance(other, BadiDate):
            return self._ordinal() - other._ordinal()
        if isinstance(other, (int, dt.timedelta)) and not isinstance(other, bool):
            return self.subtract_days(other)
        return NotImplemented

    # ----------------- Equality -----------------
    def _ordinal(self) -> int:
        return _gregorian_ordinal(self.gregorian_date)

    def _identity(self) -> tuple:
        return (
            self.weekday.number,
            self.day.number,
            self.month.number,
            self.year.bahai_era,
            self._ordinal(),
            self.lat,
            self.lng,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BadiDate):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


def _gregorian_ordinal(instant: Instant) -> int:
    # Day granularity: a datetime and its date compare equal
    if isinstance(instant, dt.datetime):
        return instant.date().toordinal()
    return instant.toordinal()
