from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date
from typing import Any

from ..models.filter_state import ALL
from .parsers import leading_float

"""Annual plan targets.

TargetMap layout: year (str) -> unit name -> annual planned length in metres.
Targets are supplied and persisted outside the engine; this module only
normalizes edits and derives the plan figure for a given filter.
"""

__all__ = [
    "TargetMap",
    "normalize_targets",
    "set_targets",
    "set_target",
    "plan_for_unit",
    "annual_target",
    "target_units",
    "plan_year_options",
]

TargetMap = dict[str, dict[str, float]]


def _as_number(value: Any) -> float:
    """Numeric target value; strings keep their leading number ("1200 m" -> 1200)."""
    if isinstance(value, str):
        number = leading_float(value)
        if number is None:
            return 0.0
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
    return 0.0 if math.isnan(number) or math.isinf(number) else number


def normalize_targets(raw: Mapping[Any, Any] | None) -> TargetMap:
    """Copy a loosely typed target map into ``{str: {str: float}}``."""
    out: TargetMap = {}
    if not raw:
        return out
    for year, units in raw.items():
        if not isinstance(units, Mapping):
            continue
        out[str(year)] = {str(unit): _as_number(v) for unit, v in units.items()}
    return out


def set_targets(new_map: Mapping[Any, Any] | None) -> TargetMap:
    """Replace the whole target map (the setTargets command)."""
    return normalize_targets(new_map)


def set_target(targets: Mapping[str, Mapping[str, float]], year: str | int, unit: str, value: Any) -> TargetMap:
    """Edit one year/unit cell; an unparsable value is stored as 0."""
    out = normalize_targets(targets)
    year_key = str(year)
    out[year_key] = {**out.get(year_key, {}), unit: _as_number(value)}
    return out


def annual_target(targets: Mapping[str, Mapping[str, float]], unit: str, year: str) -> float:
    """Target of one year, or the sum over every year when year is ALL."""
    per_year = normalize_targets(targets)
    if year != ALL:
        return per_year.get(str(year), {}).get(unit, 0.0)
    return float(sum(units.get(unit, 0.0) for units in per_year.values()))


def plan_for_unit(
    targets: Mapping[str, Mapping[str, float]], unit: str, year: str, month: str
) -> float:
    """Plan figure matching the active filter.

    With a month selected the annual figure is pro-rated linearly (/12); there is
    no per-month target table.
    """
    plan = annual_target(targets, unit, year)
    if month != ALL:
        return plan / 12
    return plan


def target_units(targets: Mapping[str, Mapping[str, float]]) -> set[str]:
    units: set[str] = set()
    for per_year in normalize_targets(targets).values():
        units.update(per_year.keys())
    return units


def plan_year_options(today: date | None = None) -> list[str]:
    """Years offered for target editing: two back, current, two ahead."""
    current = (today or date.today()).year
    return [str(current + offset) for offset in range(-2, 3)]
