"""Renderer classes for displaying projection results.

This module contains renderer classes that handle the presentation logic
for the projection. Each renderer takes a ProjectionResult and extracts the
records it needs; summary figures come from the statistics calculator.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from calc.statistics_calculator import statistics_for
from model.ProjectionData import ProjectionResult, YearlyRecord
from model.field_metadata import get_short_name, wrap_header


CHART_WIDTH = 50


def format_currency(value: float) -> str:
    """Format a value as whole US dollars, e.g. $1,235 or -$500."""
    rounded = round(value)
    if rounded < 0:
        return f"-${-rounded:,.0f}"
    return f"${rounded:,.0f}"


def format_percentage(value: float) -> str:
    """Format a percentage with one decimal, e.g. 7.0%."""
    return f"{value:.1f}%"


def format_multiline_headers(columns: List[tuple], year_width: int = 6) -> tuple[List[str], str]:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        year_width: Width of the Year column (default 6)

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = [(wrap_header(header, width), width) for header, width in columns]

    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad all headers to have the same number of lines (pad at top)
    for lines, _ in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        label = 'Year' if line_idx == max_lines - 1 else ''
        header_line = f"  {label:<{year_width}}"
        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * year_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def parse_year_range(year_range: str, data: ProjectionResult) -> tuple:
    """Parse a year range string into start and end years.

    Args:
        year_range: String in format 'startYear-endYear', 'startYear-', or '-endYear'
        data: ProjectionResult to get default years from

    Returns:
        Tuple of (start_year, end_year)
    """
    if '-' not in year_range:
        year = int(year_range)
        return (year, year)

    parts = year_range.split('-')
    start_year = int(parts[0]) if parts[0] else data.first_year
    end_year = int(parts[1]) if parts[1] else data.last_year
    return (start_year, end_year)


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data: ProjectionResult) -> None:
        """Render the data to output.

        Args:
            data: The ProjectionResult containing past and future records
        """
        pass


class RangeRenderer(BaseRenderer):
    """Base for renderers that show a range of years."""

    def __init__(self, start_year: int = None, end_year: int = None):
        """Initialize with optional year range.

        Args:
            start_year: First year to display (defaults to the first projected year)
            end_year: Last year to display (defaults to the last projected year)
        """
        self.start_year = start_year
        self.end_year = end_year

    def records(self, data: ProjectionResult) -> List[YearlyRecord]:
        """Get the records to display, filtered to the year range."""
        start = self.start_year if self.start_year is not None else data.first_year
        end = self.end_year if self.end_year is not None else data.last_year
        return [r for r in self.source(data) if start <= r.year <= end]

    def source(self, data: ProjectionResult) -> List[YearlyRecord]:
        return data.combined()


class SummaryRenderer(BaseRenderer):
    """Renderer for the headline statistics."""

    def render(self, data: ProjectionResult) -> None:
        stats = statistics_for(data)
        horizon = len(data.future)

        print()
        print("=" * 60)
        print(f"{'FIRE PROJECTION SUMMARY':^60}")
        print("=" * 60)
        if stats.fire_year > 0:
            years_away = stats.years_to_fire(data.current_year)
            print(f"  {'Estimated FIRE Year:':<36} {stats.fire_year:>20}")
            print(f"  {'':<36} {f'{years_away} years from now':>20}")
        else:
            print(f"  {'Estimated FIRE Year:':<36} {'N/A':>20}")
        print(f"  {'Total Income (past & 20 years):':<36} {format_currency(stats.total_income):>20}")
        print(f"  {f'Final Savings (after {horizon} years):':<36} {format_currency(stats.final_savings):>20}")
        print(f"  {f'Final Investments (after {horizon} years):':<36} {format_currency(stats.final_investments):>20}")
        print(f"  {'-' * 57}")
        print(f"  {'Total Value:':<36} {format_currency(stats.total_value):>20}")
        print("=" * 60)
        print()


class OverviewRenderer(RangeRenderer):
    """Renderer for a table of every projected year."""

    title = 'FINANCIAL PROJECTIONS'

    def render(self, data: ProjectionResult) -> None:
        fire_year = statistics_for(data).fire_year

        print()
        print("=" * 84)
        print(f"{self.title:^84}")
        print("=" * 84)
        print()

        columns = [
            (get_short_name("income"), 14),
            (get_short_name("spending"), 14),
            (get_short_name("savings"), 14),
            (get_short_name("investments"), 14),
            ("Period", 8),
        ]
        header_lines, sep_line = format_multiline_headers(columns)
        for line in header_lines:
            print(line)
        print(sep_line)

        for record in self.records(data):
            period = 'Past' if data.is_past_year(record.year) else 'Future'
            spending = format_currency(record.spending) if record.spending is not None else '-'
            marker = '  <- FIRE' if record.year == fire_year else ''
            print(f"  {record.year:<6} {format_currency(record.income):>14} {spending:>14} "
                  f"{format_currency(record.savings):>14} {format_currency(record.investments):>14} {period:>8}{marker}")

        print()
        print("=" * 84)
        print()


class PastRenderer(OverviewRenderer):
    """Renderer for the reconstructed historical years only."""

    title = 'RECONSTRUCTED HISTORY'

    def source(self, data: ProjectionResult) -> List[YearlyRecord]:
        return data.past


class FutureRenderer(OverviewRenderer):
    """Renderer for the projected years only (inflation-adjusted)."""

    title = 'FUTURE PROJECTION (INFLATION-ADJUSTED)'

    def source(self, data: ProjectionResult) -> List[YearlyRecord]:
        return data.future


class SeriesChartRenderer(RangeRenderer):
    """Renderer for a horizontal text bar chart of a single field."""

    def __init__(self, field_name: str, start_year: int = None, end_year: int = None):
        super().__init__(start_year, end_year)
        self.field_name = field_name

    def render(self, data: ProjectionResult) -> None:
        records = self.records(data)
        values = [getattr(r, self.field_name) or 0.0 for r in records]
        peak = max(values, default=0.0)
        title = get_short_name(self.field_name).upper()

        print()
        print("=" * 84)
        print(f"{title:^84}")
        print("=" * 84)
        for record, value in zip(records, values):
            bar_len = int(round(value / peak * CHART_WIDTH)) if peak > 0 else 0
            divider = '|' if record.year == data.current_year else ' '
            print(f"  {record.year:<6}{divider}{'#' * bar_len:<{CHART_WIDTH}} {format_currency(value):>14}")
        print("=" * 84)
        print()


def series_renderer_factory(field_name: str):
    """Create a factory for SeriesChartRenderer bound to one field.

    This is used to create callables that can be stored in RENDERER_REGISTRY.
    """
    def factory(start_year: int = None, end_year: int = None) -> SeriesChartRenderer:
        return SeriesChartRenderer(field_name, start_year, end_year)
    return factory


# Registry mapping mode names to renderer classes or factories
RENDERER_REGISTRY = {
    'Summary': SummaryRenderer,
    'Overview': OverviewRenderer,
    'Past': PastRenderer,
    'Future': FutureRenderer,
    'Income': series_renderer_factory('income'),
    'Savings': series_renderer_factory('savings'),
    'Investments': series_renderer_factory('investments'),
}

# Modes whose renderers accept a year range
RANGE_MODES = {'Overview', 'Past', 'Future', 'Income', 'Savings', 'Investments'}


def create_renderer(mode: str, start_year: Optional[int] = None, end_year: Optional[int] = None) -> BaseRenderer:
    """Instantiate the renderer registered for mode.

    Raises:
        ValueError: If mode is not registered
    """
    if mode not in RENDERER_REGISTRY:
        raise ValueError(f"Unknown mode '{mode}'. Available: {', '.join(RENDERER_REGISTRY)}")
    if mode in RANGE_MODES:
        return RENDERER_REGISTRY[mode](start_year, end_year)
    return RENDERER_REGISTRY[mode]()
