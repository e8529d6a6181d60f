"""FIRE Planner Tools for MCP Server.

This module provides the tool implementations that wrap the projection
engine and expose its data through MCP.
"""

import os
import sys
from datetime import date
from typing import Dict, List, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from model.FinancialData import FinancialParameters, load_spec, resolve_current_year
from model.ProjectionData import ProjectionResult, YearlyRecord
from calc.allocation import (
    Allocation,
    adjust_allocation,
    validate_allocation_percentages,
    validate_parameters,
)
from calc.projection_calculator import calculate_projections
from calc.statistics_calculator import statistics_for, FIRE_SPEND_FRACTION, SAFE_WITHDRAWAL_RATE


def record_to_dict(record: YearlyRecord) -> dict:
    """Convert a yearly record to a JSON-friendly dict rounded to cents."""
    return {
        "year": record.year,
        "income": round(record.income, 2),
        "savings": round(record.savings, 2),
        "investments": round(record.investments, 2),
        "spending": round(record.spending, 2) if record.spending is not None else None,
    }


class FirePlannerTools:
    """Tools that wrap the projection engine for one program."""

    def __init__(self, base_path: str, program_name: str, current_year: Optional[int] = None):
        """Initialize with paths and calculate the projection.

        Args:
            base_path: Path to the planner root directory
            program_name: Name of the program folder in input-parameters
            current_year: Year to calculate for (defaults to currentYear in spec.json, then today)

        Raises:
            ValueError: If the program's parameters are invalid
        """
        self.base_path = base_path
        self.program_name = program_name
        self.spec = load_spec(program_name, base_path)
        self.current_year = current_year or resolve_current_year(self.spec, date.today().year)
        self.params = FinancialParameters.from_spec(self.spec, self.current_year)
        errors = validate_parameters(self.params, self.current_year)
        if errors:
            raise ValueError("; ".join(errors))
        self._calculate_plan()

    def _calculate_plan(self):
        """Calculate the projection and its statistics."""
        self.projection: ProjectionResult = calculate_projections(self.params, self.current_year)
        self.statistics = statistics_for(self.projection)

    def get_program_overview(self) -> dict:
        """Get an overview of the plan's parameters and year ranges."""
        p = self.params
        return {
            "program_name": self.program_name,
            "current_year": self.current_year,
            "years": {
                "history": [self.projection.past[0].year, self.projection.past[-1].year],
                "projection": [self.projection.future[0].year, self.projection.future[-1].year]
                if self.projection.future else [],
            },
            "current_finances": {
                "savings": p.current_savings,
                "savings_growth_rate": p.savings_growth_rate,
                "investments": p.current_investments,
                "investments_growth_rate": p.investments_growth_rate,
            },
            "income": {
                "current_annual_income": p.current_annual_income,
                "income_growth_rate": p.income_growth_rate,
                "first_earning_year": p.first_earning_year,
                "first_year_earnings": p.first_year_earnings,
                "historical_earnings": {str(e.year): e.amount for e in p.historical_earnings},
            },
            "allocation": {
                "spend_percentage": p.spend_percentage,
                "savings_percentage": p.savings_percentage,
                "investment_percentage": p.investment_percentage,
            },
            "inflation_rate": p.inflation_rate,
        }

    def get_projection(self, year: Optional[int] = None) -> dict:
        """Get one year's record, or every record when year is omitted."""
        if year is not None:
            record = self.projection.get_year(year)
            if record is None:
                return {"error": f"Year {year} is not in the projection ({self.projection.first_year}-{self.projection.last_year})"}
            result = record_to_dict(record)
            result["period"] = "past" if self.projection.is_past_year(year) else "future"
            return result

        return {
            "past": [record_to_dict(r) for r in self.projection.past],
            "future": [record_to_dict(r) for r in self.projection.future],
        }

    def get_statistics(self) -> dict:
        """Get the summary statistics."""
        stats = self.statistics
        return {
            "fire_year": stats.fire_year if stats.fire_year > 0 else None,
            "years_to_fire": stats.years_to_fire(self.current_year),
            "total_income": round(stats.total_income, 2),
            "final_savings": round(stats.final_savings, 2),
            "final_investments": round(stats.final_investments, 2),
            "total_value": round(stats.total_value, 2),
            "assumptions": {
                "fire_spend_fraction": FIRE_SPEND_FRACTION,
                "safe_withdrawal_rate": SAFE_WITHDRAWAL_RATE,
                "future_values": "inflation-adjusted",
            },
        }

    def compare_years(self, year1: int, year2: int) -> dict:
        """Compare the records of two years."""
        r1 = self.projection.get_year(year1)
        r2 = self.projection.get_year(year2)
        if r1 is None or r2 is None:
            missing = year1 if r1 is None else year2
            return {"error": f"Year {missing} is not in the projection"}

        comparison = {}
        for name in ('income', 'savings', 'investments', 'spending'):
            v1 = getattr(r1, name) or 0.0
            v2 = getattr(r2, name) or 0.0
            comparison[name] = {
                str(year1): round(v1, 2),
                str(year2): round(v2, 2),
                "change": round(v2 - v1, 2),
                "percent_change": round((v2 - v1) / v1 * 100, 1) if v1 else None,
            }
        return {"year1": year1, "year2": year2, "comparison": comparison}


class MultiProgramTools:
    """Manager for multiple FIRE planning programs.

    Discovers all available programs and caches their projections,
    allowing queries to specify which program to use.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None,
                 current_year: Optional[int] = None):
        """Initialize and discover all available programs.

        Args:
            base_path: Path to the planner root directory
            default_program: Default program to use when none specified
            current_year: Year to calculate every program for (defaults per program)
        """
        self.base_path = base_path
        self.current_year = current_year
        self.programs: Dict[str, FirePlannerTools] = {}
        self.default_program = default_program
        self._discover_programs()

    def _discover_programs(self):
        """Discover and load all available programs."""
        input_params_path = os.path.join(self.base_path, 'input-parameters')

        if not os.path.exists(input_params_path):
            return

        for name in sorted(os.listdir(input_params_path)):
            program_dir = os.path.join(input_params_path, name)
            spec_path = os.path.join(program_dir, 'spec.json')

            if os.path.isdir(program_dir) and os.path.exists(spec_path):
                try:
                    self.programs[name] = FirePlannerTools(self.base_path, name, self.current_year)
                except (ValueError, OSError) as e:
                    # Report but don't fail on individual program errors
                    print(f"Warning: Failed to load program '{name}': {e}", file=sys.stderr)

        if self.default_program is None and self.programs:
            self.default_program = list(self.programs.keys())[0]

    def _get_program(self, program: Optional[str] = None) -> FirePlannerTools:
        """Get the specified program or the default."""
        program_name = program or self.default_program

        if program_name not in self.programs:
            available = list(self.programs.keys())
            raise ValueError(
                f"Program '{program_name}' not found. Available programs: {available}"
            )

        return self.programs[program_name]

    def list_programs(self) -> dict:
        """List all available programs."""
        programs_info = {}
        for name, tools in self.programs.items():
            programs_info[name] = {
                "current_year": tools.current_year,
                "first_earning_year": tools.params.first_earning_year,
                "current_annual_income": tools.params.current_annual_income,
                "fire_year": tools.statistics.fire_year or None,
            }

        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "programs_info": programs_info
        }

    def reload_programs(self) -> dict:
        """Reload all programs from disk, refreshing the cache."""
        old_programs = set(self.programs.keys())

        self.programs.clear()
        self.default_program = None
        self._discover_programs()

        new_programs = set(self.programs.keys())

        return {
            "status": "success",
            "message": f"Reloaded {len(self.programs)} programs",
            "programs_loaded": list(self.programs.keys()),
            "default_program": self.default_program,
            "changes": {
                "added": sorted(new_programs - old_programs),
                "removed": sorted(old_programs - new_programs),
                "reloaded": sorted(old_programs & new_programs)
            }
        }

    def get_program_overview(self, program: Optional[str] = None) -> dict:
        """Get an overview of the specified plan."""
        result = self._get_program(program).get_program_overview()
        result["program"] = program or self.default_program
        return result

    def get_projection(self, year: Optional[int] = None, program: Optional[str] = None) -> dict:
        """Get projection records for the specified plan."""
        result = self._get_program(program).get_projection(year)
        result["program"] = program or self.default_program
        return result

    def get_statistics(self, program: Optional[str] = None) -> dict:
        """Get summary statistics for the specified plan."""
        result = self._get_program(program).get_statistics()
        result["program"] = program or self.default_program
        return result

    def compare_years(self, year1: int, year2: int, program: Optional[str] = None) -> dict:
        """Compare two years of the specified plan."""
        result = self._get_program(program).compare_years(year1, year2)
        result["program"] = program or self.default_program
        return result

    def compare_programs(self, program1: str, program2: str, metrics: Optional[List[str]] = None) -> dict:
        """Compare the statistics of two programs.

        Args:
            program1: First program name to compare
            program2: Second program name to compare
            metrics: Optional subset of 'fire_year', 'total_value',
                     'final_investments', 'final_savings', 'total_income'
        """
        for name in (program1, program2):
            if name not in self.programs:
                return {"error": f"Program '{name}' not found. Available: {list(self.programs.keys())}"}

        stats1 = self.programs[program1].statistics
        stats2 = self.programs[program2].statistics
        all_metrics = ['fire_year', 'total_value', 'final_investments', 'final_savings', 'total_income']
        selected = [m for m in (metrics or all_metrics) if m in all_metrics]

        comparison = {}
        wins = {program1: 0, program2: 0}
        for metric in selected:
            v1 = getattr(stats1, metric)
            v2 = getattr(stats2, metric)
            if metric == 'fire_year':
                # Earlier is better; 0 means never reached
                better = _earlier_fire_year(program1, v1, program2, v2)
                entry = {program1: v1 or None, program2: v2 or None, "better": better}
            else:
                better = program1 if v1 > v2 else program2 if v2 > v1 else None
                entry = {program1: round(v1, 2), program2: round(v2, 2),
                         "difference": round(v2 - v1, 2), "better": better}
            if better:
                wins[better] += 1
            comparison[metric] = entry

        if wins[program1] == wins[program2]:
            recommendation = "The programs are evenly matched on the compared metrics."
        else:
            winner = program1 if wins[program1] > wins[program2] else program2
            recommendation = f"'{winner}' is better on {wins[winner]} of {len(selected)} metrics."

        return {
            "program1": program1,
            "program2": program2,
            "comparison": comparison,
            "wins": wins,
            "recommendation": recommendation,
        }

    def validate_allocation(self, spend: float, savings: float, investment: float) -> dict:
        """Check whether an allocation sums to 100%."""
        return {
            "valid": validate_allocation_percentages(spend, savings, investment),
            "total": round(spend + savings + investment, 4),
        }

    def adjust_allocation(self, spend: float, savings: float, investment: float,
                          field: str, value: float) -> dict:
        """Change one allocation percentage and rebalance the other two."""
        adjusted = adjust_allocation(Allocation(spend, savings, investment), field, value)
        return {
            "spend": round(adjusted.spend, 4),
            "savings": round(adjusted.savings, 4),
            "investment": round(adjusted.investment, 4),
            "valid": adjusted.is_valid(),
        }


def _earlier_fire_year(program1: str, year1: int, program2: str, year2: int) -> Optional[str]:
    if year1 == year2:
        return None
    if not year1:
        return program2
    if not year2:
        return program1
    return program1 if year1 < year2 else program2
