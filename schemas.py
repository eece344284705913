from __future__ import annotations
import datetime as dt
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


# --------- Common ---------
class ErrorDetail(BaseModel):
    field: Optional[str] = None
    issue: Optional[str] = None


class ErrorEnvelope(BaseModel):
    code: str = Field(default="SERVER_ERROR")
    message: str
    details: Optional[List[ErrorDetail]] = None


class ErrorResponse(BaseModel):
    error: ErrorEnvelope


# --------- Inputs ---------
class LocationPayload(BaseModel):
    """Optional observer location; omitted (or zero) coordinates mean Tehran."""
    latitude: Optional[float] = Field(default=None, description="Latitude in decimal degrees (north positive).", examples=[43.6532])
    longitude: Optional[float] = Field(default=None, description="Longitude in decimal degrees (east positive).", examples=[-79.3832])
    timeZone: Optional[str] = Field(default=None, description="IANA timezone used for sunset times.", examples=["America/Toronto"])


class GregorianPayload(LocationPayload):
    """A Gregorian civil date to convert."""
    model_config = ConfigDict(json_schema_extra={
        "examples": [
            {
                "date": "2024-03-20",
                "latitude": 43.6532,
                "longitude": -79.3832,
                "timeZone": "America/Toronto",
            }
        ]
    })

    date: dt.date = Field(..., description="Gregorian date in ISO format YYYY-MM-DD.", examples=["2024-03-20"])


class BadiPayload(LocationPayload):
    """A Badi date; Ayyam-i-Ha is month -1."""
    model_config = ConfigDict(json_schema_extra={
        "examples": [
            {"year": 181, "month": 1, "day": 1},
            {"year": 181, "month": -1, "day": 4},
        ]
    })

    year: int = Field(..., description="Year of the Badi era (B.E.).", examples=[181])
    month: int = Field(..., ge=-1, le=19, description="Month 1..19, or -1 for Ayyam-i-Ha.", examples=[1])
    day: int = Field(..., ge=1, le=19, description="Day of the month.", examples=[1])


# --------- Outputs ---------
class BadiDateData(BaseModel):
    year: int
    month: int
    day: int
    weekday: int = Field(..., description="1 (Jalal, Saturday) .. 7 (Istiqlal, Friday).")
    gregorianDate: str
    yearTitle: str
    vahid: int
    kullIShay: int
    monthTitle: str
    monthTitleHtml: str
    monthTranslation: str
    weekdayTitle: str
    formatted: str
    longFormat: str
    shortFormat: str
    latitude: float
    longitude: float
    timeZone: str


class BadiDateOut(BaseModel):
    data: BadiDateData


class OccasionItem(BaseModel):
    id: str
    type: str
    workSuspended: bool
    title: str
    shortTitle: str
    titleHtml: str
    shortTitleHtml: str


class OccasionsOut(BaseModel):
    data: List[OccasionItem]


class FoundOccasionData(BaseModel):
    occasion: str
    year: int
    key: str = Field(..., description="Lookup key 'month.day'.", examples=["4.8"])
    badiDate: str
    gregorianDate: str


class FoundOccasionOut(BaseModel):
    data: FoundOccasionData


class YearOccasionRow(BaseModel):
    badiDate: str
    gregorianDate: str
    occasion: OccasionItem


class YearOccasionsOut(BaseModel):
    data: List[YearOccasionRow]


class UpcomingOccasionDay(BaseModel):
    date: str = Field(..., description="Gregorian date (YYYY-MM-DD).")
    badiDate: str
    occasions: List[OccasionItem]


class UpcomingOccasionsOut(BaseModel):
    data: List[UpcomingOccasionDay]


class SunsetData(BaseModel):
    date: str
    badiDate: str
    sunset: str = Field(..., description="Local sunset on the date (ISO 8601 with offset).")
    upcomingSunset: str = Field(..., description="Local sunset on the following day.")
    latitude: float
    longitude: float
    timeZone: str


class SunsetOut(BaseModel):
    data: SunsetData
