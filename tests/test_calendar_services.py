import datetime as dt

import pytest

from badi_core.errors import InvalidIntercalaryDay, OccasionNotFound
from services.calendar_services import (
    MAX_UPCOMING_DAYS,
    convert_badi,
    convert_gregorian,
    find_occasion,
    sunset_for,
    upcoming_occasions,
    year_occasions,
)


def test_convert_gregorian(engine):
    badi = convert_gregorian(dt.date(2024, 3, 21), 43.65, -79.38, "America/Toronto", engine=engine)
    assert str(badi) == "181.1.1"
    assert badi.tz == "America/Toronto"


def test_convert_badi(engine):
    assert convert_badi(181, -1, 1, engine=engine).gregorian_date == dt.date(2025, 2, 26)
    with pytest.raises(InvalidIntercalaryDay):
        convert_badi(181, -1, 5, engine=engine)


def test_find_occasion(engine):
    found = find_occasion("declaration_bab", 181, engine=engine)
    assert found == {
        "occasion": "declaration_bab",
        "year": 181,
        "key": "4.8",
        "badiDate": "181.4.8",
        "gregorianDate": "2024-05-24",
    }
    with pytest.raises(OccasionNotFound):
        find_occasion("birth_bab", 307, engine=engine)


def test_year_occasions(engine):
    rows = year_occasions(181, engine=engine)
    assert rows[0]["badiDate"] == "181.1.1"
    assert rows[0]["gregorianDate"] == "2024-03-21"
    assert rows[0]["occasion"].id == "nawruz"
    dates = [r["gregorianDate"] for r in rows]
    assert dates == sorted(dates)
    # ordinary year: only four days of Ayyam-i-Ha
    assert "ayyam_i_ha_5" not in [r["occasion"].id for r in rows]


def test_year_occasions_holy_days_only(engine):
    rows = year_occasions(181, work_suspended_only=True, engine=engine)
    assert len(rows) == 9
    assert all(r["occasion"].work_suspended for r in rows)
    assert [r["badiDate"] for r in rows][:4] == ["181.1.1", "181.2.13", "181.3.2", "181.3.5"]


def test_upcoming_occasions_cross_year(engine):
    rows = upcoming_occasions(dt.date(2024, 3, 19), 3, engine=engine)
    assert [r["date"] for r in rows] == ["2024-03-19", "2024-03-20", "2024-03-21"]
    assert [o.id for o in rows[0]["occasions"]] == ["fasting_18"]
    assert rows[2]["badiDate"] == "181.1.1"
    assert [o.id for o in rows[2]["occasions"]] == ["nawruz", "feast_1"]


def test_upcoming_occasions_skips_empty_days(engine):
    rows = upcoming_occasions(dt.date(2024, 3, 22), 10, engine=engine)
    assert rows == []


def test_upcoming_occasions_window_is_clipped(engine):
    rows = upcoming_occasions(dt.date(2024, 3, 21), MAX_UPCOMING_DAYS + 100, engine=engine)
    assert rows[-1]["date"] < (dt.date(2024, 3, 21) + dt.timedelta(days=MAX_UPCOMING_DAYS)).isoformat()
    assert upcoming_occasions(dt.date(2024, 3, 21), 0, engine=engine) == []


def test_sunset_for(engine):
    data = sunset_for(dt.date(2024, 3, 21), 0, 0, None, engine=engine)
    assert data["badiDate"] == "181.1.1"
    assert data["sunset"] == "2024-03-21T18:00:00+03:30"
    assert data["upcomingSunset"] == "2024-03-22T18:00:00+03:30"
    assert data["timeZone"] == "Asia/Tehran"
