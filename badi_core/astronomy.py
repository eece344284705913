"""badi_core.astronomy
================================================================================
Astronomical answers the Badi calendar depends on, computed with the Swiss
Ephemeris.

Purpose
-------
The calendar year starts on Naw-Ruz, the day (sunset to sunset, Tehran) on
which the vernal equinox falls. Everything else in the calendar is day
counting, so the conversion engine only needs three questions answered:

nawruz_for(gregorian_year) -> datetime.date
    Gregorian civil date of Naw-Ruz in that Gregorian year.
is_leap(era_year) -> bool
    True when Ayyam-i-Ha of that Badi year has 5 days instead of 4.
sunset_time(instant, lat, lng, tz) -> datetime.datetime
    Local sunset on the civil date of ``instant`` at (lat, lng), aware in tz.

``AstronomicalService`` is the protocol; ``SwissEphemerisService`` is the
implementation shipped with the package.

Key Concepts
------------
"Fixed era"  : Before 172 B.E. (Gregorian 2015) Naw-Ruz was fixed on 21 March
               and Ayyam-i-Ha followed the Gregorian February.
"Published"  : 172..221 B.E. use the dates published for that span
               (``nawruz.yaml``). The equinox is within seconds of Tehran
               sunset in some years (2026), closer than the sunset model can
               decide, so those years are not recomputed.
"Equinox"    : Moment the tropical (not sidereal) solar longitude crosses 0 deg.
"Tehran day" : The equinox is compared with sunset in Tehran, not UTC midnight.

Dependencies
------------
Python >= 3.11, swisseph, zoneinfo (standard library, PEP 615).

Thread Safety
-------------
Results are memoised per year with ``functools.lru_cache`` and never mutated.
The Swiss Ephemeris path is process-global; set it once through settings.
"""
from __future__ import annotations
import calendar
import datetime as dt
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Protocol, Union
from zoneinfo import ZoneInfo

import yaml

try:
    import swisseph as swe
except Exception as e:  # ModuleNotFoundError or other import errors
    raise ImportError(
        "Swiss Ephemeris (pyswisseph) is required. Install with: pip install pyswisseph\n"
        f"Original import error: {e}"
    )

import settings
from badi_core.errors import AstronomyError

logger = logging.getLogger(__name__)

# *** Latitude and longitude for Tehran, Iran ***
# 35° 41' 45.9996" N, 51° 25' 23.0016" E converted to decimal degrees
TEHRAN_LAT: float = 35.696111
TEHRAN_LONG: float = 51.423056
TEHRAN_TZ: str = "Asia/Tehran"

# Gregorian year of the first Naw-Ruz computed from the equinox (172 B.E.)
ASTRONOMICAL_NAWRUZ_FROM: int = 2015
BADI_EPOCH_YEAR: int = 1844

NAWRUZ_DATA_PATH = Path(__file__).with_name("nawruz.yaml")

# Bisection stops below ~1 second
_EQUINOX_TOLERANCE_DAYS: float = 1.0 / 86400.0

Instant = Union[dt.date, dt.datetime]
TimezoneRef = Union[str, dt.tzinfo]


class AstronomicalService(Protocol):
    def nawruz_for(self, gregorian_year: int) -> dt.date: ...

    def is_leap(self, era_year: int) -> bool: ...

    def sunset_time(self, instant: Instant, lat: float, lng: float, tz: TimezoneRef) -> dt.datetime: ...


# ----------------- Time helpers -----------------
def _zone(tz: TimezoneRef) -> dt.tzinfo:
    return ZoneInfo(tz) if isinstance(tz, str) else tz

def civil_date(instant: Instant, tz: Optional[dt.tzinfo] = None) -> dt.date:
    """Local calendar date of ``instant``; aware datetimes are moved into tz first."""
    if isinstance(instant, dt.datetime):
        if tz is not None and instant.tzinfo is not None:
            instant = instant.astimezone(tz)
        return instant.date()
    if isinstance(instant, dt.date):
        return instant
    raise TypeError("instant must be a datetime.date or datetime.datetime")

def _julday_utc(dtu: dt.datetime) -> float:
    """Build UT Julian day from a UTC datetime (aware)."""
    if dtu.tzinfo is None:
        raise ValueError("UTC datetime must be timezone-aware")
    dtu_utc = dtu.astimezone(dt.UTC)
    frac_hour = dtu_utc.hour + dtu_utc.minute/60.0 + dtu_utc.second/3600.0 + dtu_utc.microsecond/3_600_000_000.0
    return swe.julday(dtu_utc.year, dtu_utc.month, dtu_utc.day, frac_hour)

def _jd_to_utc(jd_ut: float) -> dt.datetime:
    y, m, d, hour = swe.revjul(jd_ut)
    return dt.datetime(int(y), int(m), int(d), tzinfo=dt.UTC) + dt.timedelta(hours=hour)


# --------------- Ephemeris helpers ---------------
def _ephe_flags(ephe_path: str) -> int:
    """Swiss files when a path is configured, else the built-in Moshier theory.

    Tropical positions only: FLG_SIDEREAL is never set here.
    """
    return swe.FLG_SWIEPH if ephe_path else swe.FLG_MOSEPH

def _sun_longitude(jd_ut: float, flags: int) -> float:
    try:
        pos, _ = swe.calc_ut(jd_ut, swe.SUN, flags)
    except swe.Error as exc:
        # e.g. outside the Moshier range (about 3000 BCE .. 3000 CE)
        raise AstronomyError(str(exc)) from exc
    return pos[0]

def _aries_offset(jd_ut: float, flags: int) -> float:
    """Signed distance (deg) of the Sun from 0° Aries; negative before the crossing."""
    return (_sun_longitude(jd_ut, flags) + 180.0) % 360.0 - 180.0

@lru_cache(maxsize=None)
def vernal_equinox_utc(gregorian_year: int, flags: int) -> dt.datetime:
    """
    Moment of the March equinox in ``gregorian_year`` (UTC, aware).

    Bisection between 17 and 24 March UT; the solar longitude is monotonic
    across that window.
    """
    lo = swe.julday(gregorian_year, 3, 17, 0.0)
    hi = swe.julday(gregorian_year, 3, 24, 0.0)
    if not (_aries_offset(lo, flags) < 0.0 <= _aries_offset(hi, flags)):
        raise AstronomyError(f"No vernal equinox found between 17 and 24 March {gregorian_year}")

    while hi - lo > _EQUINOX_TOLERANCE_DAYS:
        mid = (lo + hi) / 2.0
        if _aries_offset(mid, flags) < 0.0:
            lo = mid
        else:
            hi = mid

    equinox = _jd_to_utc(hi)
    logger.debug("vernal equinox %s at %s", gregorian_year, equinox.isoformat())
    return equinox

def _sunset_utc(civil: dt.date, lat: float, lng: float, zone: dt.tzinfo, flags: int) -> dt.datetime:
    """First sunset after local midnight of ``civil`` in ``zone``."""
    midnight = dt.datetime(civil.year, civil.month, civil.day, tzinfo=zone)
    jd0 = _julday_utc(midnight)
    geopos = (float(lng), float(lat), 0.0)
    try:
        res, tret = swe.rise_trans(jd0, swe.SUN, swe.CALC_SET, geopos, 0.0, 0.0, flags)
    except swe.Error as exc:
        raise AstronomyError(str(exc)) from exc
    if res != 0:
        # -2: circumpolar, the Sun neither rises nor sets that day
        raise AstronomyError(f"No sunset on {civil.isoformat()} at lat={lat}, lng={lng}")
    return _jd_to_utc(tret[0])


# --------------- Public API ----------------------
class SwissEphemerisService:
    """AstronomicalService backed by pyswisseph.

    ``ephe_path`` overrides ``settings.EPHE_PATH``; an empty path selects the
    Moshier ephemeris which needs no data files.
    """

    def __init__(self, ephe_path: Optional[str] = None):
        self.ephe_path = settings.EPHE_PATH if ephe_path is None else ephe_path
        swe.set_ephe_path(self.ephe_path)
        self.flags = _ephe_flags(self.ephe_path)

    def nawruz_for(self, gregorian_year: int) -> dt.date:
        return _nawruz_date(gregorian_year, self.flags)

    def is_leap(self, era_year: int) -> bool:
        gregorian_year = era_year + BADI_EPOCH_YEAR - 1
        if gregorian_year < ASTRONOMICAL_NAWRUZ_FROM:
            # Ayyam-i-Ha fell in February of the following Gregorian year
            return calendar.isleap(gregorian_year + 1)
        span = self.nawruz_for(gregorian_year + 1) - self.nawruz_for(gregorian_year)
        return span.days == 366

    def sunset_time(self, instant: Instant, lat: float, lng: float, tz: TimezoneRef) -> dt.datetime:
        zone = _zone(tz)
        civil = civil_date(instant, zone)
        return _sunset_utc(civil, lat, lng, zone, self.flags).astimezone(zone)


@lru_cache()
def published_nawruz_dates() -> Mapping[int, dt.date]:
    """Gregorian year -> published Naw-Ruz date, read once from ``nawruz.yaml``."""
    with NAWRUZ_DATA_PATH.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle)
    return MappingProxyType({int(year): day for year, day in raw["nawruz"].items()})


@lru_cache(maxsize=None)
def _nawruz_date(gregorian_year: int, flags: int) -> dt.date:
    if not dt.MINYEAR <= gregorian_year <= dt.MAXYEAR:
        raise AstronomyError(f"Gregorian year {gregorian_year} is out of range")
    if gregorian_year < ASTRONOMICAL_NAWRUZ_FROM:
        return dt.date(gregorian_year, 3, 21)

    published = published_nawruz_dates().get(gregorian_year)
    if published is not None:
        return published

    tehran = ZoneInfo(TEHRAN_TZ)
    equinox = vernal_equinox_utc(gregorian_year, flags)
    civil = equinox.astimezone(tehran).date()
    sunset = _sunset_utc(civil, TEHRAN_LAT, TEHRAN_LONG, tehran, flags)
    nawruz = civil if equinox < sunset else civil + dt.timedelta(days=1)
    logger.debug(
        "naw-ruz %s: equinox=%s sunset=%s -> %s",
        gregorian_year, equinox.isoformat(), sunset.isoformat(), nawruz.isoformat(),
    )
    return nawruz
