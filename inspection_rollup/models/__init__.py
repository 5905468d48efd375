"""Domain models for the inspection row roll-up engine.

Documents and rows come from the external store; materialized rows, filter
state and statistics are derived per query.
"""

from .document import UNSPECIFIED_UNIT, Document, RowStatus, TableRow
from .filter_state import ALL, FilterState
from .materialized_row import MaterializedRow
from .statistics import MonthlyCell, MonthlyRow, StatisticsSummary, TargetLevel, UnitStatistics

__all__ = [
    # Stored documents
    "Document",
    "RowStatus",
    "TableRow",
    "UNSPECIFIED_UNIT",
    # Query input / derived rows
    "ALL",
    "FilterState",
    "MaterializedRow",
    # Aggregation output
    "MonthlyCell",
    "MonthlyRow",
    "StatisticsSummary",
    "TargetLevel",
    "UnitStatistics",
]
