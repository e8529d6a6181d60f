import sys
import os
import argparse
from datetime import date

from model.FinancialData import FinancialParameters, load_spec, resolve_current_year
from calc.allocation import validate_parameters
from calc.projection_calculator import calculate_projections, PROJECTION_YEARS
from model.ProjectionData import ProjectionResult
from render.renderers import RENDERER_REGISTRY, create_renderer, parse_year_range
from spec_generator import run_generator


BASE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..'))


def build_projection(spec: dict, current_year: int, horizon_years: int = PROJECTION_YEARS) -> ProjectionResult:
    """Validate a parameter file and calculate its projection.

    Args:
        spec: The parameter file dictionary
        current_year: The year to calculate for
        horizon_years: Number of future years to project

    Returns:
        The ProjectionResult

    Raises:
        ValueError: If the parameters fail validation
    """
    params = FinancialParameters.from_spec(spec, current_year)
    errors = validate_parameters(params, current_year)
    if errors:
        raise ValueError("; ".join(errors))
    return calculate_projections(params, current_year, horizon_years)


def main():
    parser = argparse.ArgumentParser(
        description='FIRE planning calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Summary      Print estimated FIRE year, lifetime income and final balances (default)
  Overview     Print a table of income, spending, savings and investments for every year
  Past         Print the reconstructed history only
  Future       Print the inflation-adjusted projection only
  Income       Print a bar chart of income
  Savings      Print a bar chart of savings
  Investments  Print a bar chart of investments

Examples:
  python src/Program.py myplan
  python src/Program.py myplan --mode Overview
  python src/Program.py myplan --mode Investments --years 2026-2040
  python src/Program.py myplan --current-year 2026
  python src/Program.py --generate
        """
    )
    parser.add_argument('program_name', nargs='?', help='Name of the program (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Summary',
                        help='Output mode (default: Summary)')
    parser.add_argument('--current-year', '-y',
                        type=int,
                        help='Year to calculate for (defaults to currentYear in spec.json, then today)')
    parser.add_argument('--years',
                        help='Year range for table and chart modes, e.g. 2020-2040, 2030-, -2035')
    parser.add_argument('--generate', '-g',
                        action='store_true',
                        help='Launch interactive wizard to create a new spec.json configuration')

    args = parser.parse_args()

    # If --generate flag is set, run the interactive generator
    if args.generate:
        program_name = run_generator(BASE_PATH)
        if program_name is None:
            sys.exit(0)
        run_plan = input("Would you like to run the plan now? [Y/n]: ").strip().lower()
        if run_plan in ('', 'y', 'yes'):
            args.program_name = program_name
        else:
            sys.exit(0)

    if not args.program_name:
        parser.error("program_name is required (or use --generate to create a new configuration)")

    try:
        spec = load_spec(args.program_name, BASE_PATH)
    except (FileNotFoundError, ValueError) as e:
        print(e)
        sys.exit(1)

    try:
        current_year = args.current_year or resolve_current_year(spec, date.today().year)
        projection = build_projection(spec, current_year)
    except ValueError as e:
        print(f"Cannot calculate projection: {e}")
        sys.exit(1)

    start_year = end_year = None
    if args.years:
        try:
            start_year, end_year = parse_year_range(args.years, projection)
        except ValueError:
            parser.error(f"Invalid year range: {args.years}")

    renderer = create_renderer(args.mode, start_year, end_year)
    renderer.render(projection)


if __name__ == '__main__':
    main()
