"""Holy days, feasts, fasting and Ayyam-i-Ha days of the Badi calendar.

The catalogue and its date tables live in ``occasions.yaml`` next to this
module and are loaded once at import. Date tables map ``"month.day"``
(Ayyam-i-Ha is month ``-1``) to an ordered list of occasion ids:

DATES             every year
DATES_BEFORE_172  solar dates used until 171 B.E.
DATES_AFTER_172   solar dates from 172 B.E.
DATES_LUNAR       per year from 172 B.E.: the Twin Birthdays, which follow the
                  lunar calendar (only 172..306 are tabulated)

Forward lookup (``occasions_on``) concatenates matches from every applicable
table. Reverse lookup (``find``) merges the tables key by key with the later
table winning, then searches the merged mapping.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import yaml

from badi_core.badi_core import AYYAM_I_HA_NUMBER, Month
from badi_core.errors import OccasionNotFound

logger = logging.getLogger(__name__)

OCCASIONS_DATA_PATH = Path(__file__).with_name("occasions.yaml")

# First year of the calendar as adopted in 2014 (Naw-Ruz from the equinox,
# Twin Birthdays on the lunar calendar)
LUNAR_TABLES_FROM: int = 172


class OccasionType(str, Enum):
    HOLY = "holy"
    FEAST = "feast"
    FASTING = "fasting"
    RIDVAN = "ridvan"
    AYYAM_I_HA = "ayyam_i_ha"


@dataclass(frozen=True)
class Occasion:
    id: str
    type: OccasionType
    work_suspended: bool
    title: str
    short_title: str
    title_html: str
    short_title_html: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "workSuspended": self.work_suspended,
            "title": self.title,
            "shortTitle": self.short_title,
            "titleHtml": self.title_html,
            "shortTitleHtml": self.short_title_html,
        }


DateTable = Mapping[str, Tuple[str, ...]]


@lru_cache()
def _load_raw_tables() -> Dict[str, Any]:
    with OCCASIONS_DATA_PATH.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def _freeze_table(raw: Mapping[str, List[str]], known: Mapping[str, Occasion], name: str) -> DateTable:
    table: Dict[str, Tuple[str, ...]] = {}
    for key, ids in raw.items():
        unknown = [i for i in ids if i not in known]
        if unknown:
            raise ValueError(f"{name}[{key!r}] references unknown occasions: {unknown}")
        table[str(key)] = tuple(ids)
    return MappingProxyType(table)


def _build_registry() -> Tuple[
    Mapping[str, Occasion], DateTable, DateTable, DateTable, Mapping[int, DateTable]
]:
    raw = _load_raw_tables()
    occasions = MappingProxyType({
        occasion_id: Occasion(
            id=occasion_id,
            type=OccasionType(fields["type"]),
            work_suspended=bool(fields["work_suspended"]),
            title=fields["title"],
            short_title=fields["short_title"],
            title_html=fields["title_html"],
            short_title_html=fields["short_title_html"],
        )
        for occasion_id, fields in raw["occasions"].items()
    })
    dates = _freeze_table(raw["dates"], occasions, "dates")
    before = _freeze_table(raw["dates_before_172"], occasions, "dates_before_172")
    after = _freeze_table(raw["dates_after_172"], occasions, "dates_after_172")
    lunar = MappingProxyType({
        int(year): _freeze_table(table, occasions, f"dates_lunar[{year}]")
        for year, table in raw["dates_lunar"].items()
    })
    logger.debug(
        "occasion registry loaded: %d occasions, %d lunar years",
        len(occasions), len(lunar),
    )
    return occasions, dates, before, after, lunar


OCCASIONS, DATES, DATES_BEFORE_172, DATES_AFTER_172, DATES_LUNAR = _build_registry()


# ----------------- Helpers -----------------
def date_key(month: Union[Month, int], day: int) -> str:
    number = month.number if isinstance(month, Month) else int(month)
    return f"{number}.{day}"


def parse_date_key(key: str) -> Tuple[int, int]:
    month, day = key.split(".")
    return int(month), int(day)


def _year_position(key: str) -> Tuple[int, int]:
    """Sort key placing Ayyam-i-Ha between month 18 and month 19."""
    month, day = parse_date_key(key)
    if month == AYYAM_I_HA_NUMBER:
        return 19, day
    return (month if month <= 18 else 20), day


def _tables_for(era_year: int) -> Iterator[DateTable]:
    yield DATES
    if era_year < LUNAR_TABLES_FROM:
        yield DATES_BEFORE_172
    else:
        yield DATES_AFTER_172
        lunar = DATES_LUNAR.get(era_year)
        if lunar is not None:
            yield lunar


# --------------- Public API ----------------------
def get_occasion(occasion_id: str) -> Occasion:
    try:
        return OCCASIONS[occasion_id]
    except KeyError:
        raise OccasionNotFound(occasion_id) from None


def occasions_on(era_year: int, month: Union[Month, int], day: int) -> List[Occasion]:
    """All occasions on the given Badi date; base table first, then era tables."""
    key = date_key(month, day)
    ids: List[str] = []
    for table in _tables_for(era_year):
        ids.extend(table.get(key, ()))
    return [OCCASIONS[i] for i in ids]


def find(occasion_id: str, era_year: int) -> str:
    """
    ``"month.day"`` key of ``occasion_id`` in ``era_year``.

    Tables are merged per key (later tables replace earlier entries) before
    searching. Raises OccasionNotFound when the occasion is unknown or does not
    fall in that year, e.g. the Twin Birthdays after 306 B.E.
    """
    get_occasion(occasion_id)
    merged: Dict[str, Tuple[str, ...]] = {}
    for table in _tables_for(era_year):
        merged.update(table)
    for key, ids in merged.items():
        if occasion_id in ids:
            return key
    raise OccasionNotFound(occasion_id, era_year)


def occasions_in_year(era_year: int, ayyam_i_ha_days: Optional[int] = None) -> List[Tuple[str, Occasion]]:
    """
    Every ``(key, occasion)`` of ``era_year`` in calendar order.

    ``ayyam_i_ha_days`` (4 or 5) drops the fifth intercalary day in ordinary
    years; None keeps every tabulated key.
    """
    keys = set()
    for table in _tables_for(era_year):
        keys.update(table.keys())

    rows: List[Tuple[str, Occasion]] = []
    for key in sorted(keys, key=_year_position):
        month, day = parse_date_key(key)
        if month == AYYAM_I_HA_NUMBER and ayyam_i_ha_days is not None and day > ayyam_i_ha_days:
            continue
        rows.extend((key, occasion) for occasion in occasions_on(era_year, month, day))
    return rows
