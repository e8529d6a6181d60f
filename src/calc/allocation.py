"""Allocation percentage rules.

Income is split into spend, savings and investment percentages that must
sum to 100. This module holds the validity check and the adjustment used
when one of the three percentages is changed interactively.
"""

from dataclasses import dataclass, replace
from typing import List

from model.FinancialData import FinancialParameters


ALLOCATION_TOLERANCE = 0.01
ALLOCATION_FIELDS = ('spend', 'savings', 'investment')


def validate_allocation_percentages(spend_percentage: float,
                                    savings_percentage: float,
                                    investment_percentage: float) -> bool:
    """Check that the allocation percentages sum to 100, allowing for float error."""
    total = spend_percentage + savings_percentage + investment_percentage
    return abs(total - 100) < ALLOCATION_TOLERANCE


@dataclass(frozen=True)
class Allocation:
    """Spend, savings and investment percentages of income."""
    spend: float
    savings: float
    investment: float

    @classmethod
    def from_parameters(cls, params: FinancialParameters) -> 'Allocation':
        return cls(params.spend_percentage, params.savings_percentage, params.investment_percentage)

    def is_valid(self) -> bool:
        return validate_allocation_percentages(self.spend, self.savings, self.investment)

    def apply_to(self, params: FinancialParameters) -> FinancialParameters:
        """Get a copy of params using this allocation."""
        return replace(params,
                       spend_percentage=self.spend,
                       savings_percentage=self.savings,
                       investment_percentage=self.investment)


def adjust_allocation(allocation: Allocation, field_name: str, new_value: float) -> Allocation:
    """Set one percentage and rebalance the other two to keep the total at 100.

    The change is distributed across the other two fields in proportion to
    their current values, or evenly when both are zero. Each result is
    floored at 0.

    Args:
        allocation: The current allocation (expected to sum to 100)
        field_name: 'spend', 'savings' or 'investment'
        new_value: The new percentage for field_name, clamped to 0-100

    Returns:
        The adjusted Allocation

    Raises:
        ValueError: If field_name is not an allocation field
    """
    if field_name not in ALLOCATION_FIELDS:
        raise ValueError(f"Unknown allocation field '{field_name}'. Expected one of: {', '.join(ALLOCATION_FIELDS)}")

    new_value = min(100.0, max(0.0, new_value))
    change = new_value - getattr(allocation, field_name)

    others = [f for f in ALLOCATION_FIELDS if f != field_name]
    first, second = (getattr(allocation, f) for f in others)
    total_other = first + second

    if total_other == 0:
        first_share = second_share = 0.5
    else:
        first_share = first / total_other
        second_share = second / total_other

    values = {
        field_name: new_value,
        others[0]: max(0.0, first - change * first_share),
        others[1]: max(0.0, second - change * second_share),
    }
    return Allocation(**values)


def validate_parameters(params: FinancialParameters, current_year: int) -> List[str]:
    """Check the parameters before a projection is calculated.

    Returns:
        List of error messages; empty when the parameters are usable
    """
    errors = []
    if not validate_allocation_percentages(*params.allocation()):
        total = sum(params.allocation())
        errors.append(f"Allocation percentages must sum to 100% (currently {total:g}%)")

    if params.first_earning_year >= current_year:
        errors.append(f"First earning year ({params.first_earning_year}) must be before {current_year}")

    for label, value in (('Current savings', params.current_savings),
                         ('Current investments', params.current_investments),
                         ('Current annual income', params.current_annual_income),
                         ('First year earnings', params.first_year_earnings)):
        if value < 0:
            errors.append(f"{label} cannot be negative")

    years = [e.year for e in params.historical_earnings]
    duplicates = sorted({y for y in years if years.count(y) > 1})
    if duplicates:
        errors.append(f"Historical earnings contain duplicate years: {', '.join(str(y) for y in duplicates)}")

    return errors
