import datetime as dt

import pytest

from badi_core.badi_core import (
    AYYAM_I_HA,
    Month,
    Year,
    weekday_from_gregorian,
)
from badi_core.errors import InvalidCalendarField, InvalidIntercalaryDay


def _all_days(engine, era_year):
    for month in range(1, 19):
        for day in range(1, 20):
            yield Month(month), day
    for day in range(1, engine.ayyam_i_ha_days(era_year) + 1):
        yield AYYAM_I_HA, day
    for day in range(1, 20):
        yield Month(19), day


@pytest.mark.parametrize("era_year", [1, 2, 100, 171, 172, 181, 306, 400])
def test_round_trip_every_day_of_year(engine, era_year):
    for month, day in _all_days(engine, era_year):
        gregorian = engine.to_gregorian(era_year, month, day)
        assert engine.to_badi(gregorian) == (era_year, month, day)


def test_round_trip_first_days_over_era_range(engine):
    for era_year in range(1, 401):
        for month, day in [(Month(1), 1), (AYYAM_I_HA, 1), (Month(19), 19)]:
            gregorian = engine.to_gregorian(era_year, month, day)
            assert engine.to_badi(gregorian) == (era_year, month, day)


def test_gregorian_anchored_round_trip(engine):
    start = dt.date(2023, 1, 1)
    for offset in range(0, 800, 3):
        gregorian = start + dt.timedelta(days=offset)
        era_year, month, day = engine.to_badi(gregorian)
        assert engine.to_gregorian(era_year, month, day) == gregorian


def test_datetime_is_converted_by_civil_date(engine):
    assert engine.to_badi(dt.datetime(2024, 3, 21, 23, 59)) == engine.to_badi(dt.date(2024, 3, 21))


def test_nawruz_and_eve(engine):
    assert engine.to_badi(dt.date(2024, 3, 21)) == (181, Month(1), 1)
    assert engine.to_badi(dt.date(2024, 3, 20)) == (180, Month(19), 19)
    assert engine.to_gregorian(1, 1, 1) == dt.date(1844, 3, 21)


def test_ayyam_i_ha_follows_month_18(engine):
    last_of_18 = engine.to_gregorian(180, 18, 19)
    assert engine.to_badi(last_of_18 + dt.timedelta(days=1)) == (180, AYYAM_I_HA, 1)
    # 180 B.E. contains February 2024
    assert engine.ayyam_i_ha_days(180) == 5
    assert engine.to_badi(last_of_18 + dt.timedelta(days=6)) == (180, Month(19), 1)


def test_wire_month_number_is_accepted(engine):
    assert engine.to_gregorian(180, -1, 1) == engine.to_gregorian(180, AYYAM_I_HA, 1)


def test_leap_consistency(engine):
    leap, ordinary = 180, 181
    assert engine.ayyam_i_ha_days(leap) == 5
    assert engine.ayyam_i_ha_days(ordinary) == 4

    assert engine.validate(leap, AYYAM_I_HA, 5) is AYYAM_I_HA
    with pytest.raises(InvalidIntercalaryDay) as exc:
        engine.validate(leap, AYYAM_I_HA, 6)
    assert exc.value.day == 6 and exc.value.year == leap

    with pytest.raises(InvalidIntercalaryDay):
        engine.to_gregorian(ordinary, AYYAM_I_HA, 5)


@pytest.mark.parametrize(
    "month,day",
    [(0, 1), (20, 1), (-2, 1), (1, 0), (1, 20), (-1, 0), ("1", 1), (1, 1.0), (True, 1)],
)
def test_invalid_fields_are_rejected(engine, month, day):
    with pytest.raises(InvalidCalendarField):
        engine.validate(181, month, day)


def test_invalid_intercalary_day_is_a_calendar_field_error():
    assert issubclass(InvalidIntercalaryDay, InvalidCalendarField)
    assert issubclass(InvalidCalendarField, ValueError)


def test_weekday_starts_on_saturday():
    assert weekday_from_gregorian(dt.date(2024, 3, 16)) == 1  # Saturday
    assert weekday_from_gregorian(dt.date(2024, 3, 17)) == 2  # Sunday
    assert weekday_from_gregorian(dt.date(2024, 3, 20)) == 5  # Wednesday
    assert weekday_from_gregorian(dt.date(2024, 3, 22)) == 7  # Friday


def test_month_titles_and_numbers():
    assert Month(1).title == "Baha"
    assert Month(19).title_html == "‘Alá’"
    assert AYYAM_I_HA.number == -1
    assert AYYAM_I_HA.is_intercalary
    assert str(AYYAM_I_HA) == "Ayyam-i-Ha"
    assert Month.of(-1) is AYYAM_I_HA
    assert Month.of(7) == Month(7)


def test_year_cycles():
    year = Year(181)
    assert year.vahid == 10
    assert year.year_in_vahid == 10
    assert year.title == "Hubb"
    assert year.kull_i_shay == 1
    assert Year(19).title == "Vahid"
    assert Year(20).vahid == 2
    assert Year(362).kull_i_shay == 2


@pytest.mark.parametrize("era_year", [-2000, -157, 0, 1001, 9000])
def test_unsupported_era_years_are_rejected(engine, era_year):
    with pytest.raises(InvalidCalendarField):
        engine.validate(era_year, 1, 1)
    with pytest.raises(InvalidCalendarField):
        engine.ayyam_i_ha_days(era_year)


def test_supported_era_range_edges(engine):
    assert engine.to_badi(dt.date(1844, 3, 21)) == (1, Month(1), 1)
    assert engine.to_gregorian(1000, 19, 19) == dt.date(2844, 3, 20)
    assert engine.to_badi(dt.date(2844, 3, 20)) == (1000, Month(19), 19)
    with pytest.raises(InvalidCalendarField):
        engine.to_badi(dt.date(2844, 3, 21))
    with pytest.raises(InvalidCalendarField):
        engine.to_badi(dt.date(1844, 3, 20))
    with pytest.raises(InvalidCalendarField):
        engine.to_badi(dt.date(1, 1, 1))
    with pytest.raises(InvalidCalendarField):
        engine.to_badi(dt.date(9999, 12, 31))
