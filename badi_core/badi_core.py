"""badi_core
================================================================================
Conversion engine between Gregorian dates and the Badi calendar.

Public API (stable)
-------------------
CalendarEngine(service)
    to_badi(instant) -> (era_year, Month, day)
    to_gregorian(era_year, month, day) -> datetime.date
    ayyam_i_ha_days(era_year) -> 4 | 5
    validate(era_year, month, day) -> Month
weekday_from_gregorian(instant) -> int
    1 (Saturday) .. 7 (Friday).
default_engine() -> CalendarEngine
    Shared engine backed by the Swiss Ephemeris service.

Data Structures
---------------
Year, Month, Day, Weekday:
    Immutable calendar fields carrying their plain, HTML and English titles.
    ``AYYAM_I_HA`` is the intercalary Month; it renders as ``-1`` only where a
    number is required (lookup keys, wire formats).

Key Concepts
------------
"Vahid"       : Cycle of 19 years; each year is named after its position.
"Kull-i-Shay" : Cycle of 361 (19 x 19) years.
"Ayyam-i-Ha"  : 4 or 5 intercalary days between month 18 and month 19.
"""
from __future__ import annotations
import datetime as dt
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple, Union

from badi_core.astronomy import (
    BADI_EPOCH_YEAR,
    AstronomicalService,
    Instant,
    SwissEphemerisService,
    civil_date,
)
from badi_core.errors import InvalidCalendarField, InvalidIntercalaryDay

logger = logging.getLogger(__name__)

AYYAM_I_HA_NUMBER: int = -1
MONTHS_IN_YEAR: int = 19
DAYS_IN_MONTH: int = 19
# 18 full months elapse before Ayyam-i-Ha begins
DAYS_BEFORE_AYYAM_I_HA: int = 18 * DAYS_IN_MONTH

# Years the engine converts; the Moshier ephemeris ends around 3000 CE
MIN_ERA_YEAR: int = 1
MAX_ERA_YEAR: int = 1000

# (plain, html, english)
MONTH_TITLES: List[Tuple[str, str, str]] = [
    ("Baha",      "Bahá",                "Splendour"),
    ("Jalal",     "Jalál",               "Glory"),
    ("Jamal",     "Jamál",               "Beauty"),
    ("Azamat",    "‘Aẓamat",             "Grandeur"),
    ("Nur",       "Núr",                 "Light"),
    ("Rahmat",    "Raḥmat",              "Mercy"),
    ("Kalimat",   "Kalimát",             "Words"),
    ("Kamal",     "Kamál",               "Perfection"),
    ("Asma",      "Asmá’",               "Names"),
    ("Izzat",     "‘Izzat",              "Might"),
    ("Mashiyyat", "Ma<u>sh</u>íyyat",    "Will"),
    ("Ilm",       "‘Ilm",                "Knowledge"),
    ("Qudrat",    "Qudrat",              "Power"),
    ("Qawl",      "Qawl",                "Speech"),
    ("Masail",    "Masá’il",             "Questions"),
    ("Sharaf",    "<u>Sh</u>araf",       "Honour"),
    ("Sultan",    "Sulṭán",              "Sovereignty"),
    ("Mulk",      "Mulk",                "Dominion"),
    ("Ala",       "‘Alá’",               "Loftiness"),
]
AYYAM_I_HA_TITLE: Tuple[str, str, str] = ("Ayyam-i-Ha", "Ayyám-i-Há", "Days of Ha")

# Saturday first
WEEKDAY_TITLES: List[Tuple[str, str, str]] = [
    ("Jalal",    "Jalál",    "Glory"),
    ("Jamal",    "Jamál",    "Beauty"),
    ("Kamal",    "Kamál",    "Perfection"),
    ("Fidal",    "Fiḍál",    "Grace"),
    ("Idal",     "‘Idál",    "Justice"),
    ("Istijlal", "Istijlál", "Majesty"),
    ("Istiqlal", "Istiqlál", "Independence"),
]

# Position of the year inside its vahid
YEAR_TITLES: List[Tuple[str, str, str]] = [
    ("Alif",   "Alif",   "A"),
    ("Ba",     "Bá’",    "B"),
    ("Ab",     "Ab",     "Father"),
    ("Dal",    "Dál",    "D"),
    ("Bab",    "Báb",    "Gate"),
    ("Vav",    "Váv",    "V"),
    ("Abad",   "Abad",   "Eternity"),
    ("Jad",    "Jád",    "Generosity"),
    ("Baha",   "Bahá",   "Splendour"),
    ("Hubb",   "Ḥubb",   "Love"),
    ("Bahhaj", "Bahháj", "Delightful"),
    ("Javab",  "Javáb",  "Answer"),
    ("Ahad",   "Aḥad",   "Single"),
    ("Vahhab", "Vahháb", "Bountiful"),
    ("Vidad",  "Vidád",  "Affection"),
    ("Badi",   "Badí‘",  "Beginning"),
    ("Bahi",   "Bahí",   "Luminous"),
    ("Abha",   "Abhá",   "Most Luminous"),
    ("Vahid",  "Váḥid",  "Unity"),
]


def _require_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCalendarField(f"{name} must be an integer, got {value!r}")
    return value


def _require_era_year(era_year: object) -> int:
    _require_int(era_year, "year")
    if not MIN_ERA_YEAR <= era_year <= MAX_ERA_YEAR:
        raise InvalidCalendarField(
            f"'{era_year}' is outside the supported years {MIN_ERA_YEAR}..{MAX_ERA_YEAR} B.E."
        )
    return era_year


# ----------------- Calendar fields -----------------
@dataclass(frozen=True)
class Year:
    bahai_era: int

    @property
    def vahid(self) -> int:
        return (self.bahai_era - 1) // 19 + 1

    @property
    def year_in_vahid(self) -> int:
        return (self.bahai_era - 1) % 19 + 1

    @property
    def kull_i_shay(self) -> int:
        return (self.bahai_era - 1) // 361 + 1

    @property
    def title(self) -> str:
        return YEAR_TITLES[self.year_in_vahid - 1][0]

    @property
    def title_html(self) -> str:
        return YEAR_TITLES[self.year_in_vahid - 1][1]

    @property
    def translation(self) -> str:
        return YEAR_TITLES[self.year_in_vahid - 1][2]

    def __str__(self) -> str:
        return str(self.bahai_era)


@dataclass(frozen=True)
class Month:
    """Ordinary month 1..19, or Ayyam-i-Ha when ``ordinal`` is None."""

    ordinal: Optional[int] = None

    def __post_init__(self) -> None:
        if self.ordinal is not None:
            _require_int(self.ordinal, "month")
            if not 1 <= self.ordinal <= MONTHS_IN_YEAR:
                raise InvalidCalendarField(f"'{self.ordinal}' is not a valid month")

    @classmethod
    def of(cls, value: Union["Month", int]) -> "Month":
        """Accept a Month or its wire number (``-1`` for Ayyam-i-Ha)."""
        if isinstance(value, Month):
            return value
        _require_int(value, "month")
        if value == AYYAM_I_HA_NUMBER:
            return AYYAM_I_HA
        return cls(value)

    @property
    def is_intercalary(self) -> bool:
        return self.ordinal is None

    @property
    def number(self) -> int:
        return AYYAM_I_HA_NUMBER if self.ordinal is None else self.ordinal

    def _titles(self) -> Tuple[str, str, str]:
        return AYYAM_I_HA_TITLE if self.ordinal is None else MONTH_TITLES[self.ordinal - 1]

    @property
    def title(self) -> str:
        return self._titles()[0]

    @property
    def title_html(self) -> str:
        return self._titles()[1]

    @property
    def translation(self) -> str:
        return self._titles()[2]

    def __str__(self) -> str:
        return self.title


AYYAM_I_HA = Month()


@dataclass(frozen=True)
class Day:
    number: int

    @property
    def title(self) -> str:
        return MONTH_TITLES[self.number - 1][0]

    @property
    def title_html(self) -> str:
        return MONTH_TITLES[self.number - 1][1]

    @property
    def translation(self) -> str:
        return MONTH_TITLES[self.number - 1][2]

    def __str__(self) -> str:
        return self.title


@dataclass(frozen=True)
class Weekday:
    number: int

    @property
    def title(self) -> str:
        return WEEKDAY_TITLES[self.number - 1][0]

    @property
    def title_html(self) -> str:
        return WEEKDAY_TITLES[self.number - 1][1]

    @property
    def translation(self) -> str:
        return WEEKDAY_TITLES[self.number - 1][2]

    def __str__(self) -> str:
        return self.title


def weekday_from_gregorian(instant: Instant) -> int:
    """Saturday is the first day of the week: Sat -> 1, Sun -> 2 ... Fri -> 7."""
    # date.weekday(): Monday == 0 .. Sunday == 6
    return (civil_date(instant).weekday() + 2) % 7 + 1


# --------------- Conversion engine ---------------
class CalendarEngine:
    def __init__(self, service: AstronomicalService):
        self.service = service

    def ayyam_i_ha_days(self, era_year: int) -> int:
        _require_era_year(era_year)
        return 5 if self.service.is_leap(era_year) else 4

    def validate(self, era_year: int, month: Union[Month, int], day: int) -> Month:
        """Check the triple and return the resolved Month."""
        _require_era_year(era_year)
        resolved = Month.of(month)
        _require_int(day, "day")
        if resolved.is_intercalary:
            if day < 1:
                raise InvalidCalendarField(f"'{day}' is not a valid day")
            if day > self.ayyam_i_ha_days(era_year):
                raise InvalidIntercalaryDay(day, era_year)
        elif not 1 <= day <= DAYS_IN_MONTH:
            raise InvalidCalendarField(f"'{day}' is not a valid day of {resolved.title}")
        return resolved

    def to_badi(self, instant: Instant) -> Tuple[int, Month, int]:
        civil = civil_date(instant)
        # era years are checked again below; 2844 holds the end of 1000 B.E.
        first, last = MIN_ERA_YEAR + BADI_EPOCH_YEAR - 1, MAX_ERA_YEAR + BADI_EPOCH_YEAR
        if not first <= civil.year <= last:
            raise InvalidCalendarField(
                f"{civil.isoformat()} is outside the supported years {first}..{last}"
            )
        nawruz = self.service.nawruz_for(civil.year)

        era_year = civil.year - BADI_EPOCH_YEAR
        if civil >= nawruz:
            era_year += 1
            days = (civil - nawruz).days
        else:
            days = (civil - self.service.nawruz_for(civil.year - 1)).days
        _require_era_year(era_year)

        # determine month and day, taking Ayyam-i-Ha into account
        intercalary = self.ayyam_i_ha_days(era_year)
        if days >= DAYS_BEFORE_AYYAM_I_HA + intercalary:
            month, day = Month(MONTHS_IN_YEAR), days - DAYS_BEFORE_AYYAM_I_HA - intercalary
        elif days >= DAYS_BEFORE_AYYAM_I_HA:
            month, day = AYYAM_I_HA, days - DAYS_BEFORE_AYYAM_I_HA
        else:
            full_months, day = divmod(days, DAYS_IN_MONTH)
            month = Month(full_months + 1)
        return era_year, month, day + 1

    def to_gregorian(self, era_year: int, month: Union[Month, int], day: int) -> dt.date:
        resolved = self.validate(era_year, month, day)
        nawruz = self.service.nawruz_for(era_year + BADI_EPOCH_YEAR - 1)
        return nawruz + dt.timedelta(days=self._days_from_nawruz(era_year, resolved, day))

    def _days_from_nawruz(self, era_year: int, month: Month, day: int) -> int:
        full_months = 18 if month.is_intercalary else month.number - 1
        days = (day - 1) + full_months * DAYS_IN_MONTH
        if month.number == MONTHS_IN_YEAR:
            days += self.ayyam_i_ha_days(era_year)
        return days


@lru_cache(maxsize=1)
def default_engine() -> CalendarEngine:
    logger.debug("creating default calendar engine (Swiss Ephemeris)")
    return CalendarEngine(SwissEphemerisService())
