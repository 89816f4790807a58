"""Filter enumerations for sgacrawl.

Data contract:
- FilterLevel: academic program tier to crawl (value equals member name)
- FilterPeriod: academic term to crawl (value equals member name)
- level codes "0".."3" and "" are accepted as-is (already understood by SGA)
- lookups lower-case the raw value; no trimming is done
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet


class FilterLevel(str, Enum):
    """Program tier filter."""

    ALL = "All"
    GRADO = "Grado"
    INGRESO = "Ingreso"
    POSGRADO = "Posgrado"
    EDUCACION_EJECUTIVA = "EducacionEjecutiva"


class FilterPeriod(str, Enum):
    """Academic term filter."""

    SEMESTER1 = "Semester1"
    SEMESTER2 = "Semester2"
    ALL = "All"
    SUMMER = "Summer"
    SPECIAL = "Special"


class UnknownFilterValue(ValueError):
    """Raised when a filter value matches no known synonym."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"bad {field} in config. got {value}")
        self.field = field
        self.value = value


LEVEL_SYNONYMS: Dict[str, FilterLevel] = {
    "todos": FilterLevel.ALL,
    "all": FilterLevel.ALL,
    "grado": FilterLevel.GRADO,
    "grad": FilterLevel.GRADO,
    "ingreso": FilterLevel.INGRESO,
    "ing": FilterLevel.INGRESO,
    "pichis": FilterLevel.INGRESO,
    "posgrado": FilterLevel.POSGRADO,
    "pos": FilterLevel.POSGRADO,
    "ee": FilterLevel.EDUCACION_EJECUTIVA,
    "educacionejecutiva": FilterLevel.EDUCACION_EJECUTIVA,
}

LEVEL_PASSTHROUGH: FrozenSet[str] = frozenset({"0", "1", "2", "3", ""})

PERIOD_SYNONYMS: Dict[str, FilterPeriod] = {
    "sem2": FilterPeriod.SEMESTER2,
    "cuat2": FilterPeriod.SEMESTER2,
    "segundo cuat.": FilterPeriod.SEMESTER2,
    "2": FilterPeriod.SEMESTER2,
    "semester2": FilterPeriod.SEMESTER2,
    "sem1": FilterPeriod.SEMESTER1,
    "cuat1": FilterPeriod.SEMESTER1,
    "primer cuat.": FilterPeriod.SEMESTER1,
    "1": FilterPeriod.SEMESTER1,
    "semester1": FilterPeriod.SEMESTER1,
    "all": FilterPeriod.ALL,
    "todos": FilterPeriod.ALL,
    "summer": FilterPeriod.SUMMER,
    "verano": FilterPeriod.SUMMER,
    "special": FilterPeriod.SPECIAL,
    "especial": FilterPeriod.SPECIAL,
}


def resolve_level(raw: str) -> str:
    """Return the canonical level for a user-supplied value.

    Passthrough codes are returned unchanged; everything else must be a known
    synonym.
    """
    if raw in LEVEL_PASSTHROUGH:
        return raw
    level = LEVEL_SYNONYMS.get(raw.lower())
    if level is None:
        raise UnknownFilterValue("filter.level", raw)
    return level.value


def resolve_period(raw: str) -> FilterPeriod:
    """Return the canonical period for a user-supplied value."""
    period = PERIOD_SYNONYMS.get(raw.lower())
    if period is None:
        raise UnknownFilterValue("filter.period", raw)
    return period
