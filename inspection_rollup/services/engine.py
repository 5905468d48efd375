from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from ..config.loader import EngineConfig, default_config
from ..models.document import Document
from ..models.filter_state import FilterState
from ..models.materialized_row import MaterializedRow
from ..models.statistics import StatisticsSummary
from .aggregator import aggregate
from .filters import filter_rows
from .materializer import materialize

"""Query facade: documents -> materialized rows -> filtered rows -> statistics.

Everything is recomputed from scratch on each call; there is no cached or
incremental state between queries.
"""

__all__ = [
    "QueryResult",
    "run_query",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    rows: list[MaterializedRow]  # table view
    statistics: StatisticsSummary  # statistics view


def run_query(
    documents: Sequence[Document],
    targets: Mapping[str, Mapping[str, float]],
    state: FilterState,
    config: EngineConfig | None = None,
    today: date | None = None,
) -> QueryResult:
    cfg = config or default_config()
    materialized = materialize(documents, state.dedupe, cfg.vocabulary)
    rows = filter_rows(materialized, state)
    logger.debug(
        "query unit=%s category=%s year=%s month=%s text=%r dedupe=%s -> %d/%d rows",
        state.unit,
        state.category,
        state.year,
        state.month,
        state.text,
        state.dedupe,
        len(rows),
        len(materialized),
    )
    stats = aggregate(rows, targets, state, config=cfg, today=today)
    return QueryResult(rows=rows, statistics=stats)
