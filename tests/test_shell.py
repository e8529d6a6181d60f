"""Tests for the interactive shell functionality."""

import pytest
import sys
import os
import shutil
import tempfile

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from shell import FirePlanShell, EDITABLE_PARAMETERS, format_value, get_record_fields, load_plan
from model.field_metadata import FIELD_METADATA, get_short_name, get_description, wrap_header


# Path to test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'mcp_server_tests', 'fixtures'))


@pytest.fixture(scope="module")
def test_base_path():
    """Create a temporary directory structure for testing.

    This creates a temp directory with the required structure:
    - input-parameters/testprogram/spec.json (from fixtures)
    """
    temp_dir = tempfile.mkdtemp()

    input_params_dir = os.path.join(temp_dir, 'input-parameters')
    os.makedirs(input_params_dir)
    shutil.copytree(
        os.path.join(FIXTURES_PATH, 'testprogram'),
        os.path.join(input_params_dir, 'testprogram')
    )

    yield temp_dir

    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def shell(test_base_path):
    """Create a shell with the test program loaded."""
    params, current_year = load_plan('testprogram', test_base_path)
    return FirePlanShell(params, current_year, 'testprogram', test_base_path)


class TestLoadPlan:

    def test_uses_current_year_from_spec(self, test_base_path):
        params, current_year = load_plan('testprogram', test_base_path)
        assert current_year == 2025
        assert params.first_earning_year == 2020

    def test_current_year_argument_wins(self, test_base_path):
        _, current_year = load_plan('testprogram', test_base_path, current_year=2030)
        assert current_year == 2030

    def test_missing_program(self, test_base_path):
        with pytest.raises(FileNotFoundError):
            load_plan('nonexistent', test_base_path)


class TestFieldMetadata:

    def test_every_record_field_described(self):
        for name in get_record_fields():
            assert name in FIELD_METADATA
            assert get_description(name)

    def test_short_name_falls_back_to_field_name(self):
        assert get_short_name('investments') == 'Investments'
        assert get_short_name('not_a_field') == 'not_a_field'

    def test_wrap_header(self):
        assert wrap_header('Final Investments', 10) == ['Final', 'Investments']


def test_format_value():
    assert format_value(None) == "-"
    assert format_value(1234.4) == "$1,234"
    assert format_value(2025) == "2025"


class TestShellCommands:

    def test_get_single_year(self, shell, capsys):
        shell.onecmd('get income 2022')
        output = capsys.readouterr().out
        assert "2022" in output
        assert "$60,000" in output

    def test_get_multiple_fields_over_range(self, shell, capsys):
        shell.onecmd('get savings, investments 2024-2025')
        lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
        rows = [line for line in lines if line.strip()[:4].isdigit()]
        assert [row.split()[0] for row in rows] == ['2024', '2025']
        assert "$10,000" in rows[-1]
        assert "$50,000" in rows[-1]

    def test_get_unknown_field(self, shell, capsys):
        shell.onecmd('get taxes')
        assert "Unknown field(s): taxes" in capsys.readouterr().out

    def test_years(self, shell, capsys):
        shell.onecmd('years')
        output = capsys.readouterr().out
        assert "2020 - 2025 (6 years)" in output
        assert "2026 - 2065 (40 years)" in output

    def test_summary(self, shell, capsys):
        shell.onecmd('summary')
        assert "FIRE PROJECTION SUMMARY" in capsys.readouterr().out

    def test_render_unknown_mode(self, shell, capsys):
        shell.onecmd('render Taxes')
        assert "Unknown mode" in capsys.readouterr().out

    def test_params_lists_every_editable_parameter(self, shell, capsys):
        shell.onecmd('params')
        output = capsys.readouterr().out
        for name in EDITABLE_PARAMETERS:
            assert name in output
        assert "2022: $60,000" in output

    def test_set_recalculates(self, shell, capsys):
        before = shell.projection.future[-1].investments
        shell.onecmd('set investments_growth_rate 8')
        assert shell.params.investments_growth_rate == 8.0
        assert shell.projection.future[-1].investments > before
        assert "investments_growth_rate set to 8." in capsys.readouterr().out

    def test_set_rejects_invalid_allocation(self, shell, capsys):
        shell.onecmd('set spend_percentage 50')
        output = capsys.readouterr().out
        assert "must sum to 100%" in output
        assert "Parameter not changed." in output
        assert shell.params.spend_percentage == 70.0

    def test_set_unknown_parameter(self, shell, capsys):
        shell.onecmd('set historical_earnings 1')
        assert "Unknown parameter" in capsys.readouterr().out

    def test_allocate_rebalances(self, shell, capsys):
        shell.onecmd('allocate spend 40')
        assert shell.params.spend_percentage == 40.0
        assert shell.params.savings_percentage == pytest.approx(20.0)
        assert shell.params.investment_percentage == pytest.approx(40.0)
        assert "spend 40.0%, savings 20.0%, investment 40.0%" in capsys.readouterr().out

    def test_allocate_unknown_field(self, shell, capsys):
        shell.onecmd('allocate taxes 10')
        assert "Unknown allocation field" in capsys.readouterr().out

    def test_load_missing_program(self, shell, capsys):
        shell.onecmd('load nonexistent')
        assert "Spec file not found" in capsys.readouterr().out
        assert shell.program_name == 'testprogram'

    def test_unknown_command(self, shell, capsys):
        shell.onecmd('frobnicate')
        assert "Unknown command: frobnicate" in capsys.readouterr().out

    def test_exit(self, shell):
        assert shell.onecmd('exit') is True


def test_commands_require_plan(capsys):
    empty = FirePlanShell()
    empty.onecmd('get income')
    assert "No plan loaded" in capsys.readouterr().out


def test_load_command(test_base_path, capsys):
    empty = FirePlanShell(base_path=test_base_path)
    empty.onecmd('load testprogram')
    output = capsys.readouterr().out
    assert "Plan loaded successfully!" in output
    assert empty.projection.first_year == 2020
    assert empty.current_year == 2025


def test_reload_keeps_current_year(test_base_path, capsys):
    params, _ = load_plan('testprogram', test_base_path, current_year=2030)
    sh = FirePlanShell(params, 2030, 'testprogram', test_base_path)

    sh.onecmd('load')
    assert sh.current_year == 2030
    assert sh.projection.past[-1].year == 2030

    sh.onecmd('load testprogram')
    assert sh.current_year == 2030
    assert "Plan loaded successfully!" in capsys.readouterr().out


def test_load_other_program_uses_its_own_year(test_base_path):
    other_dir = os.path.join(test_base_path, 'input-parameters', 'otherprogram')
    shutil.copytree(os.path.join(test_base_path, 'input-parameters', 'testprogram'), other_dir)
    try:
        params, _ = load_plan('testprogram', test_base_path, current_year=2030)
        sh = FirePlanShell(params, 2030, 'testprogram', test_base_path)

        sh.onecmd('load otherprogram')
        assert sh.program_name == 'otherprogram'
        assert sh.current_year == 2025
    finally:
        shutil.rmtree(other_dir, ignore_errors=True)
