from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import date

from ..config.loader import ColumnVocabulary, EngineConfig, default_config
from ..models.document import UNSPECIFIED_UNIT, Document, RowStatus
from ..models.filter_state import ALL, FilterState
from ..models.materialized_row import MaterializedRow
from ..models.statistics import (
    MonthlyCell,
    MonthlyRow,
    StatisticsSummary,
    TargetLevel,
    UnitStatistics,
)
from .columns import ColumnRoles, classify_columns
from .parsers import parse_length, resolve_period
from .targets import annual_target, normalize_targets, plan_for_unit, target_units

"""Statistics aggregation and plan comparison.

Input is the already filtered row set. Per unit the measured length is summed
into twelve monthly buckets (month taken from the full date parse of the date
cell, falling back to the document date), rows are counted by status, and the
actual figure is compared with the annual target pro-rated to the filter.

Rows whose period cannot be resolved stay out of the buckets but are still
counted in the unit's status totals.
"""

__all__ = [
    "aggregate",
    "percentage",
    "target_level",
    "total_length",
]

logger = logging.getLogger(__name__)

MONTHS = range(1, 13)


def percentage(part: float, whole: float) -> float:
    """part / whole * 100, defined as 0 when whole is not positive."""
    if whole <= 0:
        return 0.0
    return part / whole * 100


def target_level(value: float, monthly_target: float, near_ratio: float) -> TargetLevel:
    """Colour class of a matrix cell; measured length without any target is BELOW."""
    if value <= 0:
        return TargetLevel.NONE
    if monthly_target <= 0:
        return TargetLevel.BELOW
    if value >= monthly_target:
        return TargetLevel.MET
    if value >= monthly_target * near_ratio:
        return TargetLevel.NEAR
    return TargetLevel.BELOW


class _RoleCache:
    """Column roles per document, classified once per aggregation."""

    def __init__(self, vocabulary: ColumnVocabulary) -> None:
        self.vocabulary = vocabulary
        self._roles: dict[str, ColumnRoles] = {}

    def get(self, doc: Document) -> ColumnRoles:
        roles = self._roles.get(doc.id)
        if roles is None:
            roles = classify_columns(doc.headers, self.vocabulary)
            self._roles[doc.id] = roles
        return roles


def _cell(values: Sequence[str], index: int) -> str | None:
    if 0 <= index < len(values):
        return values[index] or None
    return None


def total_length(rows: Sequence[MaterializedRow], vocabulary: ColumnVocabulary | None = None) -> float:
    """Summed length column over the given rows (rows without one add 0)."""
    cache = _RoleCache(vocabulary or ColumnVocabulary())
    return sum(parse_length(_cell(r.values, cache.get(r.document).length_index)) for r in rows)


def aggregate(
    rows: Sequence[MaterializedRow],
    targets: Mapping[str, Mapping[str, float]],
    state: FilterState,
    config: EngineConfig | None = None,
    today: date | None = None,
) -> StatisticsSummary:
    """Compute the statistics summary of a filtered row set.

    Parameters
    ----------
    rows: materialized rows after filter_rows()
    targets: year -> unit -> annual target
    state: active filter (year/month decide the plan figure, unit limits the units)
    config: vocabulary, unspecified-unit sentinel, near-target ratio
    today: reference date for the matrix target when no year is selected

    Returns
    -------
    StatisticsSummary
    """
    cfg = config or default_config()
    targets = normalize_targets(targets)
    cache = _RoleCache(cfg.vocabulary)
    # 保存データ側の既定値と設定値の両方を未指定扱い
    unspecified = {cfg.unspecified_unit, UNSPECIFIED_UNIT}
    month = state.month_number

    units = target_units(targets) | {r.unit for r in rows}
    units = {u for u in units if u and u not in unspecified}
    if state.unit != ALL:
        units = {u for u in units if u == state.unit}

    buckets: dict[str, dict[int, float]] = {u: {m: 0.0 for m in MONTHS} for u in units}
    counts: dict[str, dict[RowStatus, int]] = {u: {s: 0 for s in RowStatus} for u in units}
    fixes: dict[str, int] = {u: 0 for u in units}

    filtered_length = 0.0
    view_uploaded = 0
    view_fixes = 0
    unbucketed = 0

    for row in rows:
        roles = cache.get(row.document)
        length = parse_length(_cell(row.values, roles.length_index))
        filtered_length += length
        if row.status is RowStatus.UPLOADED:
            view_uploaded += 1
        if row.requires_fix:
            view_fixes += 1

        unit = row.unit
        if unit not in buckets:
            continue
        counts[unit][row.status] += 1
        if row.requires_fix:
            fixes[unit] += 1

        if roles.length_index < 0:
            continue
        period = resolve_period(_cell(row.values, roles.date_index), row.document.date)
        if period is None:
            unbucketed += 1
            continue
        buckets[unit][period[1]] += length

    unit_stats: list[UnitStatistics] = []
    for unit in sorted(units):
        monthly = buckets[unit]
        actual = monthly[month] if month is not None else sum(monthly.values())
        plan = plan_for_unit(targets, unit, state.year, state.month)
        tally = counts[unit]
        total = sum(tally.values())
        uploaded = tally[RowStatus.UPLOADED]
        unit_stats.append(
            UnitStatistics(
                unit=unit,
                actual=actual,
                plan=plan,
                percentage=percentage(actual, plan),
                total_rows=total,
                uploaded_rows=uploaded,
                remediation_rows=fixes[unit],
                uploaded_pct=percentage(uploaded, total),
                remediation_pct=percentage(fixes[unit], total),
                status_counts=dict(tally),
            )
        )

    matrix: tuple[MonthlyRow, ...] | None = None
    if month is None:
        matrix_year = state.year if state.year != ALL else str((today or date.today()).year)
        lines: list[MonthlyRow] = []
        for unit in sorted(units):
            monthly_target = annual_target(targets, unit, matrix_year) / 12
            cells = []
            for m in MONTHS:
                value = buckets[unit][m]
                if state.year == ALL:
                    level = TargetLevel.NONE
                else:
                    level = target_level(value, monthly_target, cfg.near_target_ratio)
                cells.append(MonthlyCell(month=m, value=value, level=level))
            lines.append(
                MonthlyRow(
                    unit=unit,
                    cells=tuple(cells),
                    yearly_total=sum(buckets[unit].values()),
                    monthly_target=monthly_target,
                )
            )
        matrix = tuple(lines)

    total_actual = sum(s.actual for s in unit_stats)
    total_plan = sum(s.plan for s in unit_stats)
    logger.debug(
        "aggregated rows=%d units=%d unbucketed=%d actual=%.2f plan=%.2f",
        len(rows),
        len(unit_stats),
        unbucketed,
        total_actual,
        total_plan,
    )
    return StatisticsSummary(
        units=tuple(unit_stats),
        monthly=matrix,
        total_actual=total_actual,
        total_plan=total_plan,
        percentage=percentage(total_actual, total_plan),
        total_rows=len(rows),
        uploaded_rows=view_uploaded,
        remediation_rows=view_fixes,
        filtered_length=filtered_length,
    )
