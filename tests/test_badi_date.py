import datetime as dt

import pytest

from badi_core.astronomy import TEHRAN_LAT, TEHRAN_LONG, TEHRAN_TZ
from badi_core.badi_core import AYYAM_I_HA, Day, Month, Year
from badi_core.badi_date import BadiDate, Location
from badi_core.errors import (
    InvalidCalendarField,
    InvalidConstructorArguments,
    InvalidIntercalaryDay,
)

NAWRUZ_181 = dt.date(2024, 3, 21)


def test_from_instant(engine):
    d = BadiDate.from_instant(NAWRUZ_181, engine=engine)
    assert (d.year.bahai_era, d.month, d.day.number) == (181, Month(1), 1)
    assert d.gregorian_date == NAWRUZ_181
    assert d.weekday.number == 6  # Thursday
    assert (d.lat, d.lng, d.tz) == (TEHRAN_LAT, TEHRAN_LONG, TEHRAN_TZ)


def test_from_calendar_fields(engine):
    d = BadiDate.from_calendar_fields(181, 1, 1, lat=43.65, lng=-79.38, tz="America/Toronto", engine=engine)
    assert d.gregorian_date == NAWRUZ_181
    assert d.tz == "America/Toronto"
    assert d.lng == -79.38


def test_create_dispatches(engine):
    assert BadiDate.create(date=NAWRUZ_181, engine=engine) == BadiDate.create(year=181, month=1, day=1, engine=engine)


@pytest.mark.parametrize(
    "kwargs",
    [{}, {"year": 181}, {"year": 181, "month": 1}, {"month": 1, "day": 1}],
)
def test_create_needs_date_or_full_triple(engine, kwargs):
    with pytest.raises(InvalidConstructorArguments):
        BadiDate.create(engine=engine, **kwargs)


def test_from_instant_rejects_non_dates(engine):
    with pytest.raises(InvalidConstructorArguments):
        BadiDate.from_instant("2024-03-21", engine=engine)
    with pytest.raises(TypeError):
        BadiDate.from_instant(1711000000, engine=engine)


def test_intercalary_bound_is_checked_on_construction(engine):
    assert BadiDate.from_calendar_fields(180, -1, 5, engine=engine).month is AYYAM_I_HA
    with pytest.raises(InvalidIntercalaryDay):
        BadiDate.from_calendar_fields(181, -1, 5, engine=engine)
    with pytest.raises(InvalidCalendarField):
        BadiDate.from_calendar_fields(181, 20, 1, engine=engine)


def test_fields_must_match_gregorian_value(engine):
    with pytest.raises(InvalidCalendarField):
        BadiDate(year=Year(181), month=Month(2), day=Day(1), gregorian_date=NAWRUZ_181, engine=engine)


def test_formats(engine):
    d = BadiDate.from_instant(NAWRUZ_181, engine=engine)
    assert str(d) == "181.1.1"
    assert d.long_format() == "Istijlal 1 Baha 181 B.E."
    assert d.long_comma_format() == "Istijlal, 1 Baha, 181 B.E."
    assert d.short_format() == "1 Baha 181"

    ayyam = BadiDate.from_calendar_fields(181, AYYAM_I_HA, 2, engine=engine)
    assert str(ayyam) == "181.-1.2"
    assert ayyam.short_format() == "2 Ayyam-i-Ha 181"


def test_to_dict(engine):
    data = BadiDate.from_instant(NAWRUZ_181, engine=engine).to_dict()
    assert data["gregorianDate"] == "2024-03-21"
    assert data["month"] == 1
    assert data["monthTranslation"] == "Splendour"
    assert data["weekdayTitle"] == "Istijlal"
    assert data["yearTitle"] == "Hubb"
    assert data["vahid"] == 10
    assert data["timeZone"] == TEHRAN_TZ


def test_occasions(engine):
    d = BadiDate.from_instant(NAWRUZ_181, engine=engine)
    assert [o.id for o in d.occasions()] == ["nawruz", "feast_1"]
    assert BadiDate.from_calendar_fields(181, 5, 10, engine=engine).occasions() == []


def test_sunset_delegates_to_service(engine):
    d = BadiDate.from_instant(NAWRUZ_181, tz="Europe/London", lat=51.5, lng=-0.12, engine=engine)
    assert d.sunset_time() == dt.datetime(2024, 3, 21, 18, 0, tzinfo=d.sunset_time().tzinfo)
    assert d.upcoming_sunset_time().date() == dt.date(2024, 3, 22)


def test_zero_coordinates_fall_back_to_tehran(engine):
    d = BadiDate.from_instant(NAWRUZ_181, lat=0, lng=0.0, tz="UTC", engine=engine)
    assert d.lat == TEHRAN_LAT
    assert d.lng == TEHRAN_LONG
    assert d.tz == "UTC"
    assert Location.resolve(0, 10.5).lng == 10.5


def test_equality_ignores_timezone(engine):
    a = BadiDate.from_instant(NAWRUZ_181, tz="UTC", engine=engine)
    b = BadiDate.from_instant(NAWRUZ_181, tz="Asia/Tehran", engine=engine)
    assert a == b
    assert hash(a) == hash(b)


def test_equality_uses_location_and_day(engine):
    a = BadiDate.from_instant(NAWRUZ_181, engine=engine)
    assert a != BadiDate.from_instant(NAWRUZ_181, lat=10.0, engine=engine)
    assert a != BadiDate.from_instant(NAWRUZ_181 + dt.timedelta(days=1), engine=engine)
    assert a == BadiDate.from_instant(dt.datetime(2024, 3, 21, 15, 30), engine=engine)


def test_weekday_is_stable_over_a_week(engine):
    d = BadiDate.from_instant(dt.date(2023, 11, 2), engine=engine)
    for weeks in range(1, 60):
        assert (d + 7 * weeks).weekday == d.weekday


def test_month_18_rolls_into_ayyam_i_ha_then_month_19(engine):
    for era_year in (180, 181):
        d = BadiDate.from_calendar_fields(era_year, 18, 19, engine=engine)
        first = d + 1
        assert (first.year.bahai_era, first.month, first.day.number) == (era_year, AYYAM_I_HA, 1)
        after = first + engine.ayyam_i_ha_days(era_year)
        assert (after.year.bahai_era, after.month, after.day.number) == (era_year, Month(19), 1)


def test_arithmetic(engine):
    d = BadiDate.from_calendar_fields(180, 19, 19, engine=engine)
    nxt = d.add_days(1)
    assert str(nxt) == "181.1.1"
    assert 1 + d == nxt
    assert d + dt.timedelta(days=1) == nxt
    assert nxt - 1 == d
    assert nxt.subtract_days(dt.timedelta(days=1)) == d
    assert nxt - d == 1
    assert (d + 400) - d == 400
    with pytest.raises(TypeError):
        d + "1"
    with pytest.raises(TypeError):
        d.add_days(True)


def test_arithmetic_keeps_location(engine):
    d = BadiDate.from_instant(NAWRUZ_181, lat=43.65, lng=-79.38, tz="America/Toronto", engine=engine)
    later = d + 30
    assert (later.lat, later.lng, later.tz) == (43.65, -79.38, "America/Toronto")
    assert later.engine is engine


def test_is_immutable(engine):
    d = BadiDate.from_instant(NAWRUZ_181, engine=engine)
    with pytest.raises(AttributeError):
        d.year = Year(1)
