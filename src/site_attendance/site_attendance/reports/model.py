from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List


@dataclass(frozen=True)
class GridRow:
    employee_id: int
    full_name: str
    letters: List[str]
    total_p: int
    total_a: int
    total_i: int


@dataclass(frozen=True)
class MonthGrid:
    """Employees x days letter grid for one month of the spreadsheet export."""

    year: int
    month: int
    days_in_month: int
    rows: List[GridRow] = field(default_factory=list)

    @property
    def sheet_name(self) -> str:
        return date(self.year, self.month, 1).strftime("%b %Y")
