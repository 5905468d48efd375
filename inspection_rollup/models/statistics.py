from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .document import RowStatus

"""Statistics result models produced by the aggregator.

Everything here is derived per query and held in memory only.
"""

__all__ = [
    "TargetLevel",
    "UnitStatistics",
    "MonthlyCell",
    "MonthlyRow",
    "StatisticsSummary",
]


class TargetLevel(Enum):
    """How a monthly value compares with the pro-rated monthly target."""
    MET = "met"
    NEAR = "near"  # >= near_target_ratio of the target
    BELOW = "below"
    NONE = "none"  # no value, no target, or no single year selected


@dataclass(frozen=True)
class UnitStatistics:
    """Plan comparison and status counts for one unit in the filtered view."""
    unit: str
    actual: float  # summed length (m)
    plan: float  # annual target, or annual/12 when a month is selected
    percentage: float  # actual / plan * 100, 0 when plan is 0
    total_rows: int
    uploaded_rows: int
    remediation_rows: int
    uploaded_pct: float
    remediation_pct: float
    status_counts: dict[RowStatus, int] = field(default_factory=dict)

    @property
    def plan_met(self) -> bool:
        return self.percentage >= 100


@dataclass(frozen=True)
class MonthlyCell:
    month: int  # 1..12
    value: float
    level: TargetLevel


@dataclass(frozen=True)
class MonthlyRow:
    """One unit's line in the month-by-month matrix."""
    unit: str
    cells: tuple[MonthlyCell, ...]
    yearly_total: float
    monthly_target: float


@dataclass(frozen=True)
class StatisticsSummary:
    """Aggregation output for the statistics view."""
    units: tuple[UnitStatistics, ...]
    monthly: tuple[MonthlyRow, ...] | None  # None while a month filter is active
    total_actual: float  # sum over listed units
    total_plan: float
    percentage: float
    total_rows: int  # whole filtered view
    uploaded_rows: int
    remediation_rows: int
    filtered_length: float  # every filtered row, unspecified units included

    def for_unit(self, unit: str) -> UnitStatistics | None:
        for stats in self.units:
            if stats.unit == unit:
                return stats
        return None
