from __future__ import annotations

from dataclasses import dataclass

"""FilterState model: per-query selectors passed explicitly into the engine."""

__all__ = [
    "ALL",
    "FilterState",
]

ALL = "all"


def _selector(value: object) -> str:
    if value is None:
        return ALL
    text = str(value).strip()
    if not text or text.lower() == ALL:
        return ALL
    return text


def _month(value: object) -> str:
    month = _selector(value)
    if month == ALL:
        return ALL
    try:
        m = int(month)
    except ValueError as e:
        raise ValueError(f"month is not a number: {value}") from e
    if not 1 <= m <= 12:
        raise ValueError(f"month out of range: {value}")
    return str(m)


@dataclass(frozen=True)
class FilterState:
    """Selectors for a single query. ``ALL``/empty values match everything.

    Selectors are normalized on construction; months are stored in their plain
    integer form ("06" -> "6").

    Raises:
        ValueError: if the month is not ALL and not within 1..12
    """
    unit: str = ALL
    year: str = ALL
    month: str = ALL  # "1".."12" or ALL
    text: str = ""
    dedupe: bool = True
    category: str = ALL  # document category, exact match

    def __post_init__(self) -> None:
        # frozen なので object.__setattr__ で正規化
        object.__setattr__(self, "unit", _selector(self.unit))
        object.__setattr__(self, "year", _selector(self.year))
        object.__setattr__(self, "month", _month(self.month))
        object.__setattr__(self, "text", self.text or "")
        object.__setattr__(self, "category", _selector(self.category))

    @staticmethod
    def create(
        unit: str | None = None,
        year: str | int | None = None,
        month: str | int | None = None,
        text: str | None = None,
        dedupe: bool = True,
        category: str | None = None,
    ) -> FilterState:
        """Build a FilterState from loose caller input (None means ALL)."""
        return FilterState(
            unit=unit,
            year=year,
            month=month,
            text=text or "",
            dedupe=dedupe,
            category=category,
        )

    @property
    def month_number(self) -> int | None:
        return None if self.month == ALL else int(self.month)
