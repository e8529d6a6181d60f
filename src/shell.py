#!/usr/bin/env python3
"""Interactive command shell for querying FIRE projections.

This module provides an interactive shell that loads a plan at startup
and allows querying any field(s) from the yearly records across a
specified date range, and adjusting parameters to see how the
projection changes.

Usage:
    python src/shell.py [program_name] [current_year]

Commands:
    get <fields> [year_or_range]  - Query fields from yearly records
    fields                        - List all available fields
    years                         - Show available year range
    summary                       - Show FIRE year and final balances
    render <mode> [year_or_range] - Render a report
    params                        - Show the current parameters
    set <param> <value>           - Change a parameter and recalculate
    allocate <field> <percent>    - Change an allocation percentage
    load <program_name>           - Load a plan
    generate                      - Create or update a plan
    help                          - Show help message
    exit/quit                     - Exit the shell

Examples:
    > get income, investments
    > get savings 2026-2035
    > set inflation_rate 3
    > allocate spend 60
"""

import sys
import os
import cmd
import readline
from dataclasses import fields as dataclass_fields, replace
from datetime import date

# Configure readline for tab completion
try:
    if 'libedit' in readline.__doc__:
        # macOS uses libedit which has different syntax
        readline.parse_and_bind("bind ^I rl_complete")
    else:
        readline.parse_and_bind("tab: complete")
except (AttributeError, TypeError):
    pass  # readline might not be fully available

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from model.FinancialData import FinancialParameters, load_spec, resolve_current_year
from model.ProjectionData import ProjectionResult, YearlyRecord
from model.field_metadata import get_field_info, get_short_name, get_description
from calc.allocation import Allocation, ALLOCATION_FIELDS, adjust_allocation, validate_parameters
from calc.projection_calculator import calculate_projections
from render.renderers import (
    RENDERER_REGISTRY,
    RANGE_MODES,
    create_renderer,
    format_currency,
    format_percentage,
    parse_year_range,
)
from spec_generator import run_generator, list_existing_programs


BASE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..'))

# Parameters that can be changed with 'set'
EDITABLE_PARAMETERS = [
    f.name for f in dataclass_fields(FinancialParameters) if f.name != 'historical_earnings'
]


def load_plan(program_name: str, base_path: str = BASE_PATH, current_year: int = None) -> tuple:
    """Load and validate the parameters for the given program.

    Args:
        program_name: Name of the program folder in input-parameters
        base_path: Root directory containing input-parameters
        current_year: Year to calculate for (defaults to currentYear in spec.json, then today)

    Returns:
        Tuple of (FinancialParameters, current_year)

    Raises:
        FileNotFoundError: If the program does not exist
        ValueError: If the parameters are invalid
    """
    spec = load_spec(program_name, base_path)
    current_year = current_year or resolve_current_year(spec, date.today().year)
    params = FinancialParameters.from_spec(spec, current_year)
    errors = validate_parameters(params, current_year)
    if errors:
        raise ValueError("; ".join(errors))
    return params, current_year


def get_record_fields() -> list:
    """Get list of all field names from the YearlyRecord dataclass."""
    return [f.name for f in dataclass_fields(YearlyRecord)]


def format_value(value) -> str:
    """Format a value for display."""
    if value is None:
        return "-"
    if isinstance(value, float):
        return format_currency(value)
    return str(value)


class FirePlanShell(cmd.Cmd):
    """Interactive shell for querying FIRE projections."""

    prompt = '> '

    def __init__(self, params: FinancialParameters = None, current_year: int = None,
                 program_name: str = None, base_path: str = BASE_PATH):
        super().__init__()
        self.base_path = base_path
        self.params = params
        self.current_year = current_year
        self.program_name = program_name
        self.projection: ProjectionResult = None
        self.available_fields = get_record_fields()
        if params is not None:
            self._recalculate()
        self._update_intro()

    def preloop(self):
        """Set up readline before entering the command loop."""
        try:
            readline.set_completer_delims(' \t\n,')
            if 'libedit' in (readline.__doc__ or ''):
                readline.parse_and_bind("bind ^I rl_complete")
            else:
                readline.parse_and_bind("tab: complete")
        except (AttributeError, TypeError):
            pass  # readline might not be fully available

    def _recalculate(self):
        self.projection = calculate_projections(self.params, self.current_year)

    def _update_intro(self):
        """Update the intro message based on current state."""
        if self.projection and self.program_name:
            self.intro = f"""
FIRE Planner Interactive Shell
==============================
Program: {self.program_name}
Years: {self.projection.first_year} - {self.projection.last_year} (current year {self.current_year})

Type 'help' for available commands.
Type 'fields' to see available data fields.
Type 'exit' or 'quit' to exit.
"""
        else:
            self.intro = """
FIRE Planner Interactive Shell
==============================
No plan loaded. Use 'load <program_name>' or 'generate' to get started.

Type 'help' for available commands.
Type 'exit' or 'quit' to exit.
"""

    def _require_plan(self) -> bool:
        """Check if a plan is loaded. Returns True if loaded, False otherwise."""
        if self.projection is None:
            print("No plan loaded. Use 'load <program_name>' or 'generate' first.")
            return False
        return True

    def _split_range(self, parts: list) -> tuple:
        """Split a trailing year or year range off an argument list.

        Returns:
            Tuple of (remaining parts, (first_year, last_year) or None)
        """
        if not parts:
            return parts, None
        candidate = parts[-1]
        if not candidate.replace('-', '').isdigit():
            return parts, None
        try:
            return parts[:-1], parse_year_range(candidate, self.projection)
        except ValueError:
            return parts, None

    def do_get(self, arg: str):
        """Query field(s) from yearly records.

        Usage: get <fields> [year_or_range]

        Examples:
            get income
            get savings, investments
            get investments 2030
            get income, spending 2020-2030
            get investments 2040-
        """
        if not self._require_plan():
            return

        if not arg.strip():
            print("Error: Please specify at least one field to query.")
            print("Usage: get <fields> [year_or_range]")
            return

        field_parts, year_range = self._split_range(arg.strip().split())
        field_names = [f.strip() for f in ' '.join(field_parts).split(',') if f.strip()]
        if not field_names:
            print("Error: No valid field names provided.")
            return

        invalid_fields = [f for f in field_names if f not in self.available_fields]
        if invalid_fields:
            print(f"Error: Unknown field(s): {', '.join(invalid_fields)}")
            print("Use 'fields' command to see available field names.")
            return

        first_year, last_year = year_range or (self.projection.first_year, self.projection.last_year)
        if first_year > last_year:
            print(f"Error: First year ({first_year}) cannot be greater than last year ({last_year})")
            return

        header = ["Year"] + [get_short_name(f) for f in field_names]
        rows = []
        for record in self.projection.combined():
            if first_year <= record.year <= last_year:
                rows.append([str(record.year)] + [format_value(getattr(record, f)) for f in field_names])

        if not rows:
            print(f"No data available for years {first_year}-{last_year}")
            return

        col_widths = [max(len(h), 6) for h in header]
        for row in rows:
            for i, cell in enumerate(row):
                col_widths[i] = max(col_widths[i], len(cell))

        header_line = "  ".join(h.rjust(col_widths[i]) for i, h in enumerate(header))
        print()
        print(header_line)
        print("-" * len(header_line))
        for row in rows:
            print("  ".join(cell.rjust(col_widths[i]) for i, cell in enumerate(row)))
        print()

    def do_fields(self, arg: str):
        """List all available fields that can be queried.

        Usage: fields [field_name]
        """
        if arg.strip():
            field_name = arg.strip()
            info = get_field_info(field_name)
            if field_name not in self.available_fields or info is None:
                print(f"Error: Unknown field '{field_name}'")
                return
            print(f"\n{field_name}:")
            print(f"  Short name: {info.short_name}")
            print(f"  Description: {info.description}")
            print()
            return

        print("\nAvailable fields in YearlyRecord:")
        print("=" * 70)
        for field in self.available_fields:
            print(f"  {field:<14} [{get_short_name(field):<12}] {get_description(field)}")
        print()

    def complete_fields(self, text, line, begidx, endidx):
        return [f for f in self.available_fields if text.lower() in f.lower()]

    def do_years(self, arg: str):
        """Show the available year range."""
        if not self._require_plan():
            return
        past, future = self.projection.past, self.projection.future
        print("\nProjection Year Range:")
        print(f"  Reconstructed history: {past[0].year} - {past[-1].year} ({len(past)} years)")
        if future:
            print(f"  Projection:            {future[0].year} - {future[-1].year} ({len(future)} years)")
        print()

    def do_summary(self, arg: str):
        """Show the estimated FIRE year, lifetime income and final balances."""
        if not self._require_plan():
            return
        create_renderer('Summary').render(self.projection)

    def do_render(self, arg: str):
        """Render a report of the projection.

        Usage: render [mode] [year_or_range]

        Examples:
            render                     - List available modes
            render Overview            - Table of every year
            render Investments 2026-   - Investments chart from 2026
        """
        if not arg.strip():
            print("\nAvailable render modes:")
            for mode in RENDERER_REGISTRY:
                suffix = " [year_or_range]" if mode in RANGE_MODES else ""
                print(f"  {mode}{suffix}")
            print()
            return
        if not self._require_plan():
            return

        parts, year_range = self._split_range(arg.strip().split())
        if len(parts) != 1:
            print("Usage: render [mode] [year_or_range]")
            return
        mode = parts[0]
        start_year, end_year = year_range or (None, None)
        try:
            renderer = create_renderer(mode, start_year, end_year)
        except ValueError as e:
            print(f"Error: {e}")
            return
        renderer.render(self.projection)

    def complete_render(self, text, line, begidx, endidx):
        return [m for m in RENDERER_REGISTRY if m.lower().startswith(text.lower())]

    def do_params(self, arg: str):
        """Show the parameters of the loaded plan."""
        if not self._require_plan():
            return
        print(f"\nParameters for '{self.program_name}' (current year {self.current_year}):")
        print("=" * 50)
        for name in EDITABLE_PARAMETERS:
            value = getattr(self.params, name)
            if name == 'first_earning_year':
                shown = str(value)
            elif name.endswith(('_rate', '_percentage')):
                shown = format_percentage(value)
            else:
                shown = format_currency(value)
            print(f"  {name:<26} {shown:>20}")
        if self.params.historical_earnings:
            print("  historical_earnings:")
            for entry in sorted(self.params.historical_earnings, key=lambda e: e.year):
                print(f"    {entry.year}: {format_currency(entry.amount)}")
        print()

    def do_set(self, arg: str):
        """Change a parameter and recalculate the projection.

        Usage: set <param> <value>

        Allocation percentages must keep summing to 100; use 'allocate' to
        change one and rebalance the others.

        Examples:
            set inflation_rate 3
            set current_investments 80000
        """
        if not self._require_plan():
            return
        parts = arg.split()
        if len(parts) != 2:
            print("Usage: set <param> <value>")
            return
        name, raw = parts
        if name not in EDITABLE_PARAMETERS:
            print(f"Error: Unknown parameter '{name}'. Use 'params' to see parameter names.")
            return
        try:
            value = int(raw) if name == 'first_earning_year' else float(raw.replace(',', ''))
        except ValueError:
            print(f"Error: Invalid value '{raw}'")
            return

        updated = replace(self.params, **{name: value})
        errors = validate_parameters(updated, self.current_year)
        if errors:
            for error in errors:
                print(f"Error: {error}")
            print("Parameter not changed.")
            return
        self.params = updated
        self._recalculate()
        print(f"{name} set to {value:g}.")

    def complete_set(self, text, line, begidx, endidx):
        return [p for p in EDITABLE_PARAMETERS if p.startswith(text)]

    def do_allocate(self, arg: str):
        """Change one allocation percentage and rebalance the other two.

        Usage: allocate <spend|savings|investment> <percent>

        The change is spread across the other two percentages in
        proportion to their current values.
        """
        if not self._require_plan():
            return
        parts = arg.split()
        if len(parts) != 2:
            print("Usage: allocate <spend|savings|investment> <percent>")
            return
        try:
            allocation = adjust_allocation(Allocation.from_parameters(self.params), parts[0], float(parts[1]))
        except ValueError as e:
            print(f"Error: {e}")
            return
        self.params = allocation.apply_to(self.params)
        self._recalculate()
        print(f"Allocation: spend {allocation.spend:.1f}%, savings {allocation.savings:.1f}%, "
              f"investment {allocation.investment:.1f}%")

    def complete_allocate(self, text, line, begidx, endidx):
        return [f for f in ALLOCATION_FIELDS if f.startswith(text)]

    def do_generate(self, arg: str):
        """Launch the interactive wizard to create or update a plan."""
        print()
        program_name = run_generator(self.base_path)
        if program_name:
            print()
            reload_choice = input(f"Would you like to load '{program_name}' now? [Y/n]: ").strip().lower()
            if reload_choice in ('', 'y', 'yes'):
                self.do_load(program_name)

    def do_load(self, arg: str):
        """Load a plan.

        Usage: load <program_name>

        If no program name is given and a plan is already loaded, reloads it.
        """
        program_name = arg.strip() or self.program_name
        if not program_name:
            print("Please specify a program name.")
            print("Available programs:")
            for item in list_existing_programs(self.base_path):
                print(f"  - {item}")
            return

        try:
            print(f"Loading plan '{program_name}'...")
            # Reloading the same plan keeps the year it is being calculated for
            current_year = self.current_year if program_name == self.program_name else None
            self.params, self.current_year = load_plan(program_name, self.base_path, current_year)
            self.program_name = program_name
            self._recalculate()
            print("Plan loaded successfully!")
            print(f"Years: {self.projection.first_year} - {self.projection.last_year}")
        except FileNotFoundError as e:
            print(f"Error: {e}")
        except ValueError as e:
            print(f"Error loading plan: {e}")

    def complete_load(self, text, line, begidx, endidx):
        return [p for p in list_existing_programs(self.base_path) if p.startswith(text)]

    def do_help(self, arg: str):
        """Show help for available commands."""
        if arg:
            super().do_help(arg)
        else:
            print("""
Available Commands:
==================

  get <fields> [year_or_range]
      Query one or more fields from yearly records (comma-separated).
      Year specifier: 2030, 2026-2035, 2040- or -2030.

  fields [field_name]
      List available field names, or describe one field.

  years
      Show the reconstructed and projected year ranges.

  summary
      Show the estimated FIRE year, lifetime income and final balances.

  render [mode] [year_or_range]
      Render a report. Modes: Summary, Overview, Past, Future,
      Income, Savings, Investments.

  params
      Show the parameters of the loaded plan.

  set <param> <value>
      Change a parameter and recalculate.

  allocate <spend|savings|investment> <percent>
      Change one allocation percentage and rebalance the other two.

  generate
      Launch the interactive wizard to create or update a plan.

  load [program_name]
      Load a plan. Shows available programs if none specified.

  help [command]
      Show this help message or help for a specific command.

  exit, quit
      Exit the shell.
""")

    def do_exit(self, arg: str):
        """Exit the shell."""
        print("Goodbye!")
        return True

    def do_quit(self, arg: str):
        """Exit the shell."""
        return self.do_exit(arg)

    def do_EOF(self, arg: str):
        """Handle Ctrl+D to exit."""
        print()
        return self.do_exit(arg)

    def emptyline(self):
        """Do nothing on empty line."""
        pass

    def default(self, line: str):
        """Handle unknown commands."""
        print(f"Unknown command: {line}")
        print("Type 'help' for available commands.")

    def complete_get(self, text, line, begidx, endidx):
        return [f for f in self.available_fields if text.lower() in f.lower()]


def main():
    program_name = sys.argv[1] if len(sys.argv) > 1 else None
    current_year = int(sys.argv[2]) if len(sys.argv) > 2 else None

    if program_name:
        try:
            print(f"Loading plan '{program_name}'...")
            params, current_year = load_plan(program_name, current_year=current_year)
            print("Plan loaded successfully!")
        except FileNotFoundError as e:
            print(f"Error: {e}")
            sys.exit(1)
        except ValueError as e:
            print(f"Error loading plan: {e}")
            sys.exit(1)
        shell = FirePlanShell(params, current_year, program_name)
    else:
        shell = FirePlanShell()
    shell.cmdloop()


if __name__ == "__main__":
    main()
