import calendar
import datetime as dt
from zoneinfo import ZoneInfo

import pytest

from badi_core.badi_core import CalendarEngine


class FixedNawruzAstronomy:
    """Naw-Ruz on 21 March every year, Ayyam-i-Ha following the Gregorian February."""

    def nawruz_for(self, gregorian_year):
        return dt.date(gregorian_year, 3, 21)

    def is_leap(self, era_year):
        return calendar.isleap(era_year + 1844)

    def sunset_time(self, instant, lat, lng, tz):
        zone = ZoneInfo(tz) if isinstance(tz, str) else tz
        civil = instant.date() if isinstance(instant, dt.datetime) else instant
        return dt.datetime(civil.year, civil.month, civil.day, 18, 0, tzinfo=zone)


@pytest.fixture
def engine():
    return CalendarEngine(FixedNawruzAstronomy())
