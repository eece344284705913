from __future__ import annotations
import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from badi_core.badi_core import CalendarEngine, Month, default_engine
from badi_core.badi_date import BadiDate
from badi_core.occasions import find, occasions_in_year, parse_date_key

logger = logging.getLogger(__name__)

MAX_UPCOMING_DAYS = 366


def convert_gregorian(
    date: dt.date,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    time_zone: Optional[str] = None,
    *,
    engine: Optional[CalendarEngine] = None,
) -> BadiDate:
    badi = BadiDate.from_instant(date, lat=latitude, lng=longitude, tz=time_zone, engine=engine)
    logger.debug("converted %s -> %s", date.isoformat(), badi)
    return badi


def convert_badi(
    year: int,
    month: int,
    day: int,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    time_zone: Optional[str] = None,
    *,
    engine: Optional[CalendarEngine] = None,
) -> BadiDate:
    badi = BadiDate.from_calendar_fields(
        year, month, day, lat=latitude, lng=longitude, tz=time_zone, engine=engine
    )
    logger.debug("converted %s -> %s", badi, badi.gregorian_date.isoformat())
    return badi


def find_occasion(occasion_id: str, era_year: int, *, engine: Optional[CalendarEngine] = None) -> Dict[str, Any]:
    """Badi and Gregorian date of one occasion in ``era_year``."""
    key = find(occasion_id, era_year)
    month, day = parse_date_key(key)
    badi = convert_badi(era_year, month, day, engine=engine)
    return {
        "occasion": occasion_id,
        "year": era_year,
        "key": key,
        "badiDate": str(badi),
        "gregorianDate": badi.gregorian_date.isoformat(),
    }


def year_occasions(
    era_year: int,
    *,
    work_suspended_only: bool = False,
    engine: Optional[CalendarEngine] = None,
) -> List[Dict[str, Any]]:
    """
    Occasions of a Badi year in calendar order.

    Returns:
      [{"badiDate": "172.1.1", "gregorianDate": "YYYY-MM-DD", "occasion": Occasion}, ...]
    """
    engine = engine or default_engine()
    rows: List[Dict[str, Any]] = []
    for key, occasion in occasions_in_year(era_year, engine.ayyam_i_ha_days(era_year)):
        if work_suspended_only and not occasion.work_suspended:
            continue
        month, day = parse_date_key(key)
        gregorian = engine.to_gregorian(era_year, Month.of(month), day)
        rows.append({
            "badiDate": f"{era_year}.{key}",
            "gregorianDate": gregorian.isoformat(),
            "occasion": occasion,
        })
    return rows


def upcoming_occasions(
    from_date: Optional[dt.date] = None,
    days: int = 30,
    *,
    engine: Optional[CalendarEngine] = None,
) -> List[Dict[str, Any]]:
    """Expand the window ``[from_date, from_date + days)`` into per-day occasion entries.

    Returns:
      A list sorted by date, days without occasions omitted:
        [{"date": "YYYY-MM-DD", "badiDate": "181.1.1", "occasions": [Occasion, ...]}, ...]

    Notes:
      - Crosses Badi year boundaries (lunar Twin Birthdays resolve per year).
      - ``days`` is clipped to MAX_UPCOMING_DAYS.
    """
    anchor = from_date or dt.date.today()
    span = max(0, min(days, MAX_UPCOMING_DAYS))
    engine = engine or default_engine()

    out: List[Dict[str, Any]] = []
    for offset in range(span):
        current = anchor + dt.timedelta(days=offset)
        badi = BadiDate.from_instant(current, engine=engine)
        found = badi.occasions()
        if found:
            out.append({"date": current.isoformat(), "badiDate": str(badi), "occasions": found})
    return out


def sunset_for(
    date: dt.date,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    time_zone: Optional[str] = None,
    *,
    engine: Optional[CalendarEngine] = None,
) -> Dict[str, Any]:
    badi = convert_gregorian(date, latitude, longitude, time_zone, engine=engine)
    return {
        "date": date.isoformat(),
        "badiDate": str(badi),
        "sunset": badi.sunset_time().isoformat(),
        "upcomingSunset": badi.upcoming_sunset_time().isoformat(),
        "latitude": badi.lat,
        "longitude": badi.lng,
        "timeZone": badi.tz,
    }
