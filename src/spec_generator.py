"""Interactive spec.json generator for FIRE planning.

This module provides an interactive command-line interface to generate
a spec.json configuration file by prompting users for their financial
parameters.
"""

import os
import json
from datetime import datetime
from typing import Any, Optional

from model.FinancialData import (
    DEFAULT_PARAMETERS,
    DEFAULT_HISTORY_YEARS,
    HistoricalEarning,
    build_historical_entries,
    collect_historical_earnings,
    spec_path,
)
from calc.allocation import validate_allocation_percentages


def prompt_int(prompt: str, default: Optional[int] = None, min_val: Optional[int] = None, max_val: Optional[int] = None) -> int:
    """Prompt for an integer value with optional default and validation."""
    while True:
        default_str = f" [{default}]" if default is not None else ""
        try:
            value = input(f"{prompt}{default_str}: ").strip()
            if value == "" and default is not None:
                return default
            result = int(value)
            if min_val is not None and result < min_val:
                print(f"  Value must be at least {min_val}")
                continue
            if max_val is not None and result > max_val:
                print(f"  Value must be at most {max_val}")
                continue
            return result
        except ValueError:
            print("  Please enter a valid integer")


def prompt_percent(prompt: str, default: Optional[float] = None, max_val: float = 100.0) -> float:
    """Prompt for a percentage and return it as a whole percentage (7 for 7%)."""
    while True:
        default_display = f" [{default:g}%]" if default is not None else ""
        try:
            value = input(f"{prompt} (%){default_display}: ").strip().rstrip('%')
            if value == "" and default is not None:
                return default
            result = float(value)
            if result < 0:
                print("  Percentage cannot be negative")
                continue
            if result > max_val:
                print(f"  Percentage cannot exceed {max_val:g}%")
                continue
            return result
        except ValueError:
            print("  Please enter a valid percentage (e.g., 7 for 7%)")


def prompt_currency(prompt: str, default: Optional[float] = None, min_val: float = 0) -> float:
    """Prompt for a currency value."""
    while True:
        default_str = f" [${default:,.2f}]" if default is not None else ""
        try:
            value = input(f"{prompt} ($){default_str}: ").strip().lstrip('$').replace(',', '')
            if value == "" and default is not None:
                return default
            result = float(value)
            if result < min_val:
                print(f"  Value must be at least ${min_val:,.2f}")
                continue
            return result
        except ValueError:
            print("  Please enter a valid dollar amount (e.g., 50000 or 50,000)")


def prompt_yes_no(prompt: str, default: bool = False) -> bool:
    """Prompt for a yes/no answer."""
    default_str = "Y/n" if default else "y/N"
    while True:
        value = input(f"{prompt} [{default_str}]: ").strip().lower()
        if value == "":
            return default
        if value in ('y', 'yes'):
            return True
        if value in ('n', 'no'):
            return False
        print("  Please enter 'y' or 'n'")


def prompt_string(prompt: str, default: Optional[str] = None) -> str:
    """Prompt for a string value."""
    default_str = f" [{default}]" if default else ""
    value = input(f"{prompt}{default_str}: ").strip()
    if value == "" and default:
        return default
    return value


def print_section(title: str) -> None:
    """Print a section header."""
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def load_existing_spec(program_name: str, base_path: str) -> Optional[dict]:
    """Load an existing spec.json if it exists.

    Args:
        program_name: Name of the program folder
        base_path: Base path to the planner directory

    Returns:
        The spec dictionary if it exists, None otherwise
    """
    path = spec_path(program_name, base_path)
    if os.path.exists(path):
        try:
            with open(path, 'r') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            return None
    return None


def prompt_allocation(ex: dict) -> tuple:
    """Prompt for spend/savings/investment percentages until they sum to 100."""
    while True:
        spend = prompt_percent(
            "Percentage of income spent",
            default=ex.get('spendPercentage', DEFAULT_PARAMETERS['spendPercentage'])
        )
        savings = prompt_percent(
            "Percentage of income saved",
            default=ex.get('savingsPercentage', DEFAULT_PARAMETERS['savingsPercentage'])
        )
        investment = prompt_percent(
            "Percentage of income invested",
            default=ex.get('investmentPercentage', DEFAULT_PARAMETERS['investmentPercentage'])
        )
        if validate_allocation_percentages(spend, savings, investment):
            return spend, savings, investment
        print(f"  Allocation percentages must sum to 100% (currently {spend + savings + investment:g}%)")
        ex = {'spendPercentage': spend, 'savingsPercentage': savings, 'investmentPercentage': investment}


def generate_spec(existing_spec: Optional[dict] = None, current_year: Optional[int] = None) -> dict:
    """Interactive wizard to generate a spec.json configuration.

    Args:
        existing_spec: Optional existing spec to use for default values
        current_year: The year the plan is built for (defaults to today)
    """
    current_year = current_year or datetime.now().year
    ex = existing_spec or {}
    defaults = DEFAULT_PARAMETERS

    spec: dict[str, Any] = {}

    # =========================================================================
    # CURRENT FINANCES
    # =========================================================================
    print_section("Current Finances")

    spec['currentSavings'] = prompt_currency(
        "Current savings (cash, bank accounts)",
        default=ex.get('currentSavings', defaults['currentSavings'])
    )
    spec['savingsGrowthRate'] = prompt_percent(
        "Annual savings interest rate",
        default=ex.get('savingsGrowthRate', defaults['savingsGrowthRate']),
        max_val=10.0
    )
    spec['currentInvestments'] = prompt_currency(
        "Current investments",
        default=ex.get('currentInvestments', defaults['currentInvestments'])
    )
    spec['investmentsGrowthRate'] = prompt_percent(
        "Expected annual investment return",
        default=ex.get('investmentsGrowthRate', defaults['investmentsGrowthRate']),
        max_val=15.0
    )

    # =========================================================================
    # INCOME
    # =========================================================================
    print_section("Income")

    spec['currentAnnualIncome'] = prompt_currency(
        "Current annual income",
        default=ex.get('currentAnnualIncome', defaults['currentAnnualIncome'])
    )
    spec['incomeGrowthRate'] = prompt_percent(
        "Expected annual income growth",
        default=ex.get('incomeGrowthRate', defaults['incomeGrowthRate']),
        max_val=10.0
    )

    # =========================================================================
    # ALLOCATION
    # =========================================================================
    print_section("Income Allocation (must total 100%)")

    spend, savings, investment = prompt_allocation(ex)
    spec['spendPercentage'] = spend
    spec['savingsPercentage'] = savings
    spec['investmentPercentage'] = investment

    # =========================================================================
    # INFLATION
    # =========================================================================
    print_section("Inflation")

    spec['inflationRate'] = prompt_percent(
        "Expected annual inflation rate",
        default=ex.get('inflationRate', defaults['inflationRate']),
        max_val=10.0
    )

    # =========================================================================
    # HISTORICAL DATA
    # =========================================================================
    print_section("Historical Earnings")

    spec['firstEarningYear'] = prompt_int(
        "First year you had earnings",
        default=ex.get('firstEarningYear', current_year - DEFAULT_HISTORY_YEARS),
        min_val=1950,
        max_val=current_year - 1
    )
    spec['firstYearEarnings'] = prompt_currency(
        f"Earnings in {spec['firstEarningYear']}",
        default=ex.get('firstYearEarnings', defaults['firstYearEarnings'])
    )

    existing_entries = [
        HistoricalEarning(int(e['year']), float(e['amount']))
        for e in ex.get('historicalEarnings') or []
    ]
    entries = build_historical_entries(spec['firstEarningYear'], current_year, existing_entries)

    if entries and prompt_yes_no("Enter known earnings for the years in between? (unknown years are interpolated)",
                                 default=bool(existing_entries)):
        print("  Enter 0 for years you don't know.")
        entries = [
            HistoricalEarning(entry.year, prompt_currency(f"  Earnings in {entry.year}", default=entry.amount))
            for entry in entries
        ]

    # Entries outside the new year range are dropped; zero amounts are not saved
    spec['historicalEarnings'] = [
        {'year': e.year, 'amount': e.amount} for e in collect_historical_earnings(entries)
    ]

    if 'currentYear' in ex:
        spec['currentYear'] = ex['currentYear']

    return spec


def save_spec(spec: dict, program_name: str, base_path: str) -> str:
    """Save the spec to a JSON file.

    Args:
        spec: The parameter dictionary
        program_name: Name for the program folder
        base_path: Base path to the planner directory

    Returns:
        Path to the saved file
    """
    path = spec_path(program_name, base_path)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, 'w') as f:
        json.dump(spec, f, indent=4)

    return path


def list_existing_programs(base_path: str) -> list[str]:
    """List all existing programs in the input-parameters directory.

    Args:
        base_path: Base path to the planner directory

    Returns:
        List of program names
    """
    input_params_path = os.path.join(base_path, 'input-parameters')
    if not os.path.exists(input_params_path):
        return []

    programs = []
    for name in os.listdir(input_params_path):
        if os.path.isfile(spec_path(name, base_path)):
            programs.append(name)

    return sorted(programs)


def run_generator(base_path: Optional[str] = None) -> Optional[str]:
    """Run the interactive generator and return the program name if successful."""
    try:
        base_path = base_path or os.path.normpath(os.path.join(os.path.dirname(__file__), '..'))

        print()
        print("╔════════════════════════════════════════════════════════════╗")
        print("║          FIRE Planner - Configuration Generator            ║")
        print("╚════════════════════════════════════════════════════════════╝")
        print()

        existing_programs = list_existing_programs(base_path)
        if existing_programs:
            print("Existing plans:")
            for prog in existing_programs:
                print(f"  - {prog}")
            print()
            print("Enter an existing plan name to update it, or a new name to create.")
        else:
            print("No existing plans found. Enter a name for your new plan.")
        print()

        program_name = prompt_string(
            "Plan name",
            default="myplan"
        )

        # Clean up the name (remove spaces, special chars)
        program_name = "".join(c if c.isalnum() or c in '-_' else '_' for c in program_name)

        existing_spec = load_existing_spec(program_name, base_path)
        if existing_spec:
            print()
            print(f"Found existing plan '{program_name}'. Values will be used as defaults.")
        else:
            print()
            print(f"Creating new plan '{program_name}'.")

        spec = generate_spec(existing_spec)

        saved_path = save_spec(spec, program_name, base_path)

        print()
        print("╔════════════════════════════════════════════════════════════╗")
        print("║                    Configuration Saved!                    ║")
        print("╚════════════════════════════════════════════════════════════╝")
        print()
        print(f"  Saved to: {saved_path}")
        print()
        print("  To run your FIRE projection:")
        print(f"    python src/Program.py {program_name}")
        print()
        print("  Available modes:")
        print(f"    python src/Program.py {program_name} --mode Overview")
        print(f"    python src/Program.py {program_name} --mode Investments")
        print()

        return program_name

    except KeyboardInterrupt:
        print("\n\nCancelled. No changes made.")
        return None


if __name__ == "__main__":
    run_generator()
