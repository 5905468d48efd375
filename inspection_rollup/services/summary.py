from __future__ import annotations

from ..models.statistics import StatisticsSummary, UnitStatistics

"""Text rendering of the statistics summary for the CLI.

Line formats:
UNIT unit={name} actual={m} plan={m} pct={pct} rows={n} uploaded={n} remediation={n}
SUMMARY units={n} rows={n} uploaded={n} remediation={n} length={m} actual={m} plan={m} pct={pct}

The label itself ("SUMMARY"/"UNIT") is part of the rendered line; callers
logging through log_summary() strip "SUMMARY " first.
"""

__all__ = [
    "format_number",
    "render_unit_line",
    "render_summary_line",
]


def format_number(value: float) -> str:
    """Integers without decimals, others rounded to 2 places, never scientific."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def render_unit_line(stats: UnitStatistics) -> str:
    return (
        f"UNIT unit={stats.unit} "
        f"actual={format_number(stats.actual)} "
        f"plan={format_number(stats.plan)} "
        f"pct={format_number(stats.percentage)} "
        f"rows={stats.total_rows} "
        f"uploaded={stats.uploaded_rows} "
        f"remediation={stats.remediation_rows}"
    )


def render_summary_line(summary: StatisticsSummary) -> str:
    """Render the final SUMMARY line of a report.

    Examples:
        >>> from inspection_rollup.models.statistics import StatisticsSummary
        >>> s = StatisticsSummary(
        ...     units=(), monthly=None, total_actual=19.5, total_plan=1000.0,
        ...     percentage=1.95, total_rows=2, uploaded_rows=0,
        ...     remediation_rows=0, filtered_length=19.5,
        ... )
        >>> render_summary_line(s)
        'SUMMARY units=0 rows=2 uploaded=0 remediation=0 length=19.5 actual=19.5 plan=1000 pct=1.95'
    """
    return (
        f"SUMMARY units={len(summary.units)} "
        f"rows={summary.total_rows} "
        f"uploaded={summary.uploaded_rows} "
        f"remediation={summary.remediation_rows} "
        f"length={format_number(summary.filtered_length)} "
        f"actual={format_number(summary.total_actual)} "
        f"plan={format_number(summary.total_plan)} "
        f"pct={format_number(summary.percentage)}"
    )
