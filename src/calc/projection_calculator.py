"""Projection engine that builds past and future yearly records.

The calculation runs in two passes:
1. Historical years - income is taken from known data points or linearly
   interpolated, flows are accumulated through the cash waterfall, and the
   result is reconciled against the stated present-day balances.
2. Future years - income grows for the income-earning horizon, balances
   compound every year, and reported values are discounted for inflation.

The current year is always passed in explicitly; nothing here reads the clock.
"""

from typing import Dict, List, Tuple

from model.FinancialData import FinancialParameters
from model.ProjectionData import YearlyRecord, ProjectionResult


PROJECTION_YEARS = 40
INCOME_PROJECTION_YEARS = 20
RECONCILE_TOLERANCE = 0.01


def interpolate_income(year: int, known: Dict[int, float], first_year: int, last_year: int) -> float:
    """Get the income for a year from known values, interpolating linearly when unknown.

    Args:
        year: The year to get income for
        known: Mapping of year to known income
        first_year: Lower bound used when no known year precedes `year`
        last_year: Upper bound used when no known year follows `year`

    Returns:
        The known value for the year, or the interpolated value
    """
    if year in known:
        return known[year]

    prev_year = max((y for y in known if y < year), default=first_year)
    next_year = min((y for y in known if y > year), default=last_year)
    prev_value = known.get(prev_year, 0.0)
    next_value = known.get(next_year, 0.0)

    if next_year == prev_year:
        return prev_value

    return prev_value + (next_value - prev_value) * ((year - prev_year) / (next_year - prev_year))


def apply_cash_waterfall(savings: float, investments: float, spending: float,
                         savings_flow: float, investment_flow: float) -> Tuple[float, float]:
    """Add the year's flows and cover spending from savings first, then investments.

    Neither balance goes below 0; a shortfall larger than both balances is absorbed.

    Returns:
        Tuple of (savings, investments) after the year's flows
    """
    savings += savings_flow
    shortfall = max(0.0, spending - savings)
    savings = max(0.0, savings - spending)

    investments += investment_flow
    investments = max(0.0, investments - shortfall)
    return savings, investments


def _allocate(income: float, params: FinancialParameters) -> Tuple[float, float, float]:
    """Split income into (spending, savings, investments) flows."""
    return (
        income * (params.spend_percentage / 100),
        income * (params.savings_percentage / 100),
        income * (params.investment_percentage / 100),
    )


def _reconcile(records: List[YearlyRecord], attr: str, target: float) -> None:
    """Adjust one balance series in place so its last value equals target.

    A non-zero simulated endpoint is scaled proportionally. A simulated
    endpoint of zero is replaced by a linear ramp from 0 to target.
    """
    if not records:
        return
    last_index = len(records) - 1
    simulated = getattr(records[last_index], attr)

    if simulated > 0:
        if abs(simulated - target) > RECONCILE_TOLERANCE:
            ratio = target / simulated
            for record in records:
                setattr(record, attr, getattr(record, attr) * ratio)
            setattr(records[last_index], attr, target)
    elif target > 0:
        for index, record in enumerate(records):
            position = index / last_index if last_index > 0 else 1.0
            setattr(record, attr, target * position)


def compute_historical_series(params: FinancialParameters, current_year: int) -> List[YearlyRecord]:
    """Reconstruct yearly records from the first earning year through current_year.

    Args:
        params: The financial parameters
        current_year: The year the plan is calculated for

    Returns:
        List of YearlyRecord ordered by year, ending with current_year
    """
    first_year = params.first_earning_year

    # Anchors override any historical entry for the same year
    known = params.earnings_by_year()
    known[first_year] = params.first_year_earnings
    known[current_year] = params.current_annual_income

    savings_growth = 1 + params.savings_growth_rate / 100
    investments_growth = 1 + params.investments_growth_rate / 100

    running_savings = 0.0
    running_investments = 0.0
    records: List[YearlyRecord] = []

    for year in range(first_year, current_year + 1):
        income = interpolate_income(year, known, first_year, current_year)
        spending, savings_flow, investment_flow = _allocate(income, params)

        if year > first_year:
            running_savings = running_savings * savings_growth
            running_investments = running_investments * investments_growth

        running_savings, running_investments = apply_cash_waterfall(
            running_savings, running_investments, spending, savings_flow, investment_flow
        )

        records.append(YearlyRecord(
            year=year,
            income=income,
            savings=running_savings,
            investments=running_investments,
            spending=spending,
        ))

    _reconcile(records, 'savings', params.current_savings)
    _reconcile(records, 'investments', params.current_investments)
    return records


def compute_future_series(params: FinancialParameters, current_year: int,
                          horizon_years: int = PROJECTION_YEARS) -> List[YearlyRecord]:
    """Project yearly records for the years after current_year.

    Income grows only during the income-earning horizon (the first 20 years,
    or fewer for a shorter projection); afterwards the year's income and flows
    are 0 while balances keep compounding. Reported values are discounted by
    (1 - inflation) ** offset; the running totals are not.

    Args:
        params: The financial parameters
        current_year: The year the plan is calculated for
        horizon_years: Number of years to project

    Returns:
        List of YearlyRecord for current_year + 1 through current_year + horizon_years
    """
    income_years = min(INCOME_PROJECTION_YEARS, horizon_years)
    income_growth = 1 + params.income_growth_rate / 100
    savings_growth = 1 + params.savings_growth_rate / 100
    investments_growth = 1 + params.investments_growth_rate / 100
    inflation = params.inflation_rate / 100

    running_income = params.current_annual_income
    running_savings = params.current_savings
    running_investments = params.current_investments
    records: List[YearlyRecord] = []

    for year_offset in range(1, horizon_years + 1):
        if year_offset <= income_years:
            running_income = running_income * income_growth
            income = running_income
        else:
            income = 0.0
        spending, savings_flow, investment_flow = _allocate(income, params)

        running_savings = running_savings * savings_growth
        running_investments = running_investments * investments_growth
        running_savings, running_investments = apply_cash_waterfall(
            running_savings, running_investments, spending, savings_flow, investment_flow
        )

        factor = (1 - inflation) ** year_offset
        records.append(YearlyRecord(
            year=current_year + year_offset,
            income=income * factor,
            savings=running_savings * factor,
            investments=running_investments * factor,
            spending=spending * factor,
        ))

    return records


def calculate_projections(params: FinancialParameters, current_year: int,
                          horizon_years: int = PROJECTION_YEARS) -> ProjectionResult:
    """Calculate past and future projections for a parameter snapshot."""
    return ProjectionResult(
        past=compute_historical_series(params, current_year),
        future=compute_future_series(params, current_year, horizon_years),
    )
