"""Financial parameters model.

Holds the snapshot of user-supplied parameters that drives a projection,
together with helpers for reading and writing the JSON parameter file
(input-parameters/<program>/spec.json). Keys in the file use camelCase;
percentages are whole numbers (7 means 7%).
"""

import json
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class HistoricalEarning:
    """A known income data point for a past year."""
    year: int
    amount: float


# Defaults for keys missing from a parameter file.
# first_earning_year defaults to five years before the current year.
DEFAULT_PARAMETERS = {
    'currentSavings': 10000.0,
    'savingsGrowthRate': 1.5,
    'currentInvestments': 50000.0,
    'investmentsGrowthRate': 7.0,
    'currentAnnualIncome': 75000.0,
    'incomeGrowthRate': 3.0,
    'spendPercentage': 70.0,
    'savingsPercentage': 10.0,
    'investmentPercentage': 20.0,
    'inflationRate': 2.5,
    'firstYearEarnings': 50000.0,
}

DEFAULT_HISTORY_YEARS = 5

# Mapping of spec.json keys to FinancialParameters attribute names
SPEC_KEYS = {
    'currentSavings': 'current_savings',
    'savingsGrowthRate': 'savings_growth_rate',
    'currentInvestments': 'current_investments',
    'investmentsGrowthRate': 'investments_growth_rate',
    'currentAnnualIncome': 'current_annual_income',
    'incomeGrowthRate': 'income_growth_rate',
    'spendPercentage': 'spend_percentage',
    'savingsPercentage': 'savings_percentage',
    'investmentPercentage': 'investment_percentage',
    'inflationRate': 'inflation_rate',
    'firstEarningYear': 'first_earning_year',
    'firstYearEarnings': 'first_year_earnings',
}


@dataclass(frozen=True)
class FinancialParameters:
    """Snapshot of the parameters for one projection.

    All rates and allocation percentages are whole percentages. The
    allocation percentages are expected to sum to 100; that is checked
    by validate_parameters, not by the projection engine.
    """
    # Current financial status
    current_savings: float
    savings_growth_rate: float
    current_investments: float
    investments_growth_rate: float

    # Income
    current_annual_income: float
    income_growth_rate: float

    # Allocation of income
    spend_percentage: float
    savings_percentage: float
    investment_percentage: float

    # Inflation
    inflation_rate: float

    # Historical data
    first_earning_year: int
    first_year_earnings: float
    historical_earnings: Tuple[HistoricalEarning, ...] = field(default_factory=tuple)

    @classmethod
    def from_spec(cls, spec: dict, current_year: int) -> 'FinancialParameters':
        """Build parameters from a spec.json dictionary.

        Args:
            spec: The parsed parameter file
            current_year: Year used for the default first earning year

        Returns:
            FinancialParameters with defaults applied for missing keys

        Raises:
            ValueError: If a value cannot be interpreted as a number
        """
        values = {}
        for key, attr in SPEC_KEYS.items():
            if key == 'firstEarningYear':
                raw = spec.get(key, current_year - DEFAULT_HISTORY_YEARS)
                values[attr] = _to_number(key, raw, int)
            else:
                raw = spec.get(key, DEFAULT_PARAMETERS[key])
                values[attr] = _to_number(key, raw, float)

        raw_entries = spec.get('historicalEarnings') or []
        if not isinstance(raw_entries, list):
            raise ValueError(f"Invalid value for 'historicalEarnings': {raw_entries!r}")

        entries = []
        for entry in raw_entries:
            try:
                entries.append(HistoricalEarning(int(entry['year']), float(entry['amount'])))
            except (KeyError, TypeError, ValueError):
                raise ValueError(f"Invalid historical earnings entry: {entry!r}")
        # Zero amounts are years the user did not supply; they are interpolated
        values['historical_earnings'] = collect_historical_earnings(entries)

        return cls(**values)

    def to_spec(self) -> dict:
        """Convert back to the spec.json dictionary layout."""
        spec = {key: getattr(self, attr) for key, attr in SPEC_KEYS.items()}
        spec['historicalEarnings'] = [
            {'year': e.year, 'amount': e.amount} for e in self.historical_earnings
        ]
        return spec

    def allocation(self) -> Tuple[float, float, float]:
        """Get the (spend, savings, investment) percentage triple."""
        return (self.spend_percentage, self.savings_percentage, self.investment_percentage)

    def earnings_by_year(self) -> Dict[int, float]:
        """Map of historical earning year to amount."""
        return {e.year: e.amount for e in self.historical_earnings}


def _to_number(key: str, raw, kind):
    if isinstance(raw, bool):
        raise ValueError(f"Invalid value for '{key}': {raw!r}")
    try:
        return kind(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for '{key}': {raw!r}")


def default_parameters(current_year: int) -> FinancialParameters:
    """Parameters matching the defaults of an empty parameter file."""
    return FinancialParameters.from_spec({}, current_year)


def build_historical_entries(first_earning_year: int, current_year: int,
                             existing: Optional[List[HistoricalEarning]] = None) -> List[HistoricalEarning]:
    """Build one entry for each year strictly between the first earning year and the current year.

    Amounts from existing entries are preserved; other years start at 0.
    """
    known = {e.year: e.amount for e in (existing or [])}
    return [
        HistoricalEarning(year, known.get(year, 0.0))
        for year in range(first_earning_year + 1, current_year)
    ]


def collect_historical_earnings(entries: List[HistoricalEarning]) -> Tuple[HistoricalEarning, ...]:
    """Keep only entries with a positive amount. Zero means 'not supplied'."""
    return tuple(e for e in entries if e.amount > 0)


def spec_path(program_name: str, base_path: str) -> str:
    return os.path.join(base_path, 'input-parameters', program_name, 'spec.json')


def load_spec(program_name: str, base_path: str) -> dict:
    """Load the parameter file for a program.

    Args:
        program_name: Name of the program folder in input-parameters
        base_path: Root directory containing input-parameters

    Raises:
        FileNotFoundError: If the program has no spec.json
        ValueError: If the file is not valid JSON
    """
    path = spec_path(program_name, base_path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Spec file not found: {path}")
    with open(path, 'r') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}")


def resolve_current_year(spec: dict, default_year: int) -> int:
    """Get the calculation year pinned in spec.json, or default_year.

    Raises:
        ValueError: If currentYear is not a whole number
    """
    return _to_number('currentYear', spec.get('currentYear', default_year), int)
