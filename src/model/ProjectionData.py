"""Data model for projection results.

This module contains the data classes produced by the projection engine
and the statistics calculator. Renderers, the shell and the MCP tools all
read from these structures.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class YearlyRecord:
    """Derived financial state for a single calendar year.

    Past records hold reconstructed history; future records hold
    inflation-adjusted projections.
    """
    year: int
    income: float = 0.0
    savings: float = 0.0
    investments: float = 0.0
    spending: Optional[float] = None  # None when not computed


@dataclass
class ProjectionResult:
    """Past and future yearly records for one calculation.

    `past` runs from the first earning year through the current year
    inclusive, `future` from the year after through the end of the horizon.
    """
    past: List[YearlyRecord] = field(default_factory=list)
    future: List[YearlyRecord] = field(default_factory=list)

    def combined(self) -> List[YearlyRecord]:
        """Get past and future records as one list ordered by year."""
        return self.past + self.future

    def get_year(self, year: int) -> Optional[YearlyRecord]:
        """Get the record for a specific year."""
        for record in self.combined():
            if record.year == year:
                return record
        return None

    @property
    def first_year(self) -> int:
        records = self.combined()
        return records[0].year if records else 0

    @property
    def last_year(self) -> int:
        records = self.combined()
        return records[-1].year if records else 0

    @property
    def current_year(self) -> int:
        """The last reconstructed year, which is the year the plan was calculated for."""
        if self.past:
            return self.past[-1].year
        return self.future[0].year - 1 if self.future else 0

    def is_past_year(self, year: int) -> bool:
        return year <= self.current_year


@dataclass
class DerivedStatistics:
    """Summary figures derived from a projection."""
    total_income: float = 0.0  # Past income plus the first 20 projected years
    final_savings: float = 0.0
    final_investments: float = 0.0
    total_value: float = 0.0
    fire_year: int = 0  # 0 if financial independence is never reached

    def years_to_fire(self, current_year: int) -> Optional[int]:
        """Years from current_year until the FIRE year, or None if never reached."""
        if self.fire_year <= 0:
            return None
        return self.fire_year - current_year
