from __future__ import annotations
import datetime as dt
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Query

from schemas import (
    GregorianPayload,
    BadiPayload,
    BadiDateOut, BadiDateData,
    OccasionsOut, OccasionItem,
    FoundOccasionOut, FoundOccasionData,
    YearOccasionsOut, YearOccasionRow,
    UpcomingOccasionsOut, UpcomingOccasionDay,
    SunsetOut, SunsetData,
)

from badi_core.occasions import Occasion, occasions_on
from services.calendar_services import (
    MAX_UPCOMING_DAYS,
    convert_badi,
    convert_gregorian,
    find_occasion,
    sunset_for,
    upcoming_occasions,
    year_occasions,
)


router = APIRouter(prefix="/api")


# --------------------- Helpers ---------------------
def _occasion_items(occasions: List[Occasion]) -> List[OccasionItem]:
    return [OccasionItem(**o.to_dict()) for o in occasions]


def _with_items(row: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Replace Occasion objects under ``key`` with their API shape."""
    value = row[key]
    if isinstance(value, list):
        return {**row, key: _occasion_items(value)}
    return {**row, key: OccasionItem(**value.to_dict())}


# --------------- Conversion -----------------
@router.post("/convert/to-badi", response_model=BadiDateOut, tags=["Conversion"], summary="Convert a Gregorian date to the Badi calendar")
def to_badi(
    payload: GregorianPayload = Body(
        ...,
        openapi_examples={
            "sample": {
                "summary": "Naw-Ruz 181",
                "value": {"date": "2024-03-20"},
            }
        },
    ),
) -> BadiDateOut:
    badi = convert_gregorian(payload.date, payload.latitude, payload.longitude, payload.timeZone)
    return BadiDateOut(data=BadiDateData(**badi.to_dict()))


@router.post("/convert/to-gregorian", response_model=BadiDateOut, tags=["Conversion"], summary="Convert a Badi date to the Gregorian calendar")
def to_gregorian(
    payload: BadiPayload = Body(
        ...,
        openapi_examples={
            "sample": {
                "summary": "Naw-Ruz 181",
                "value": {"year": 181, "month": 1, "day": 1},
            },
            "ayyam_i_ha": {
                "summary": "Fourth day of Ayyam-i-Ha",
                "value": {"year": 181, "month": -1, "day": 4},
            },
        },
    ),
) -> BadiDateOut:
    badi = convert_badi(payload.year, payload.month, payload.day, payload.latitude, payload.longitude, payload.timeZone)
    return BadiDateOut(data=BadiDateData(**badi.to_dict()))


# --------------- Occasions -----------------
@router.get("/occasions", response_model=OccasionsOut, tags=["Occasions"], summary="Occasions falling on a Badi date")
def occasions(
    year: int = Query(..., description="Year of the Badi era."),
    month: int = Query(..., description="Month 1..19, or -1 for Ayyam-i-Ha."),
    day: int = Query(..., description="Day of the month."),
) -> OccasionsOut:
    return OccasionsOut(data=_occasion_items(occasions_on(year, month, day)))


@router.get("/occasions/find", response_model=FoundOccasionOut, tags=["Occasions"], summary="Date of an occasion in a Badi year")
def occasions_find(
    occasion: str = Query(..., description="Occasion id, e.g. 'nawruz' or 'birth_bab'."),
    year: int = Query(..., description="Year of the Badi era."),
) -> FoundOccasionOut:
    return FoundOccasionOut(data=FoundOccasionData(**find_occasion(occasion, year)))


@router.get("/occasions/year/{year}", response_model=YearOccasionsOut, tags=["Occasions"], summary="All occasions of a Badi year")
def occasions_year(
    year: int,
    holyDaysOnly: bool = Query(False, description="Only days on which work is suspended."),
) -> YearOccasionsOut:
    rows = year_occasions(year, work_suspended_only=holyDaysOnly)
    return YearOccasionsOut(data=[YearOccasionRow(**_with_items(r, "occasion")) for r in rows])


@router.get("/occasions/upcoming", response_model=UpcomingOccasionsOut, tags=["Occasions"], summary="Occasions in the coming days")
def occasions_upcoming(
    fromDate: Optional[dt.date] = Query(None, description="First Gregorian date (defaults to today)."),
    days: int = Query(30, ge=1, le=MAX_UPCOMING_DAYS, description="Window length in days."),
) -> UpcomingOccasionsOut:
    rows = upcoming_occasions(fromDate, days)
    return UpcomingOccasionsOut(data=[UpcomingOccasionDay(**_with_items(r, "occasions")) for r in rows])


# --------------- Sunset -----------------
@router.post("/sunset", response_model=SunsetOut, tags=["Sunset"], summary="Sunset times for a Gregorian date")
def sunset(payload: GregorianPayload) -> SunsetOut:
    data = sunset_for(payload.date, payload.latitude, payload.longitude, payload.timeZone)
    return SunsetOut(data=SunsetData(**data))
