"""Render module for projection output display."""

from render.renderers import (
    BaseRenderer,
    RangeRenderer,
    SummaryRenderer,
    OverviewRenderer,
    PastRenderer,
    FutureRenderer,
    SeriesChartRenderer,
    series_renderer_factory,
    create_renderer,
    format_currency,
    format_percentage,
    parse_year_range,
    RENDERER_REGISTRY,
    RANGE_MODES,
)

__all__ = [
    'BaseRenderer',
    'RangeRenderer',
    'SummaryRenderer',
    'OverviewRenderer',
    'PastRenderer',
    'FutureRenderer',
    'SeriesChartRenderer',
    'series_renderer_factory',
    'create_renderer',
    'format_currency',
    'format_percentage',
    'parse_year_range',
    'RENDERER_REGISTRY',
    'RANGE_MODES',
]
