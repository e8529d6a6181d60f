"""Summary statistics derived from a projection."""

from typing import List

from model.ProjectionData import YearlyRecord, ProjectionResult, DerivedStatistics


# Income years counted toward lifetime income after the current year
TOTAL_INCOME_FUTURE_YEARS = 20

# The FIRE estimate assumes 70% of the last known income is spent,
# regardless of the configured spend percentage.
FIRE_SPEND_FRACTION = 0.70
SAFE_WITHDRAWAL_RATE = 0.04


def find_fire_year(records: List[YearlyRecord], annual_spending: float) -> int:
    """Get the first year where a 4% withdrawal from investments covers annual_spending.

    Returns:
        The year, or 0 if it is never reached
    """
    for record in records:
        if record.investments * SAFE_WITHDRAWAL_RATE >= annual_spending:
            return record.year
    return 0


def compute_statistics(past: List[YearlyRecord], future: List[YearlyRecord],
                       last_known_past_income: float) -> DerivedStatistics:
    """Compute summary figures for a projection.

    Args:
        past: Reconstructed historical records
        future: Projected records
        last_known_past_income: Income of the last past record, used to
            estimate spending for the FIRE year

    Returns:
        DerivedStatistics for the combined sequence
    """
    combined = past + future
    if not combined:
        return DerivedStatistics()

    total_income = (sum(r.income for r in past) +
                    sum(r.income for r in future[:TOTAL_INCOME_FUTURE_YEARS]))

    final = combined[-1]
    annual_spending = last_known_past_income * FIRE_SPEND_FRACTION

    return DerivedStatistics(
        total_income=total_income,
        final_savings=final.savings,
        final_investments=final.investments,
        total_value=final.savings + final.investments,
        fire_year=find_fire_year(combined, annual_spending),
    )


def statistics_for(result: ProjectionResult) -> DerivedStatistics:
    """Compute statistics for a ProjectionResult using its last past income."""
    last_income = result.past[-1].income if result.past else 0.0
    return compute_statistics(result.past, result.future, last_income)
