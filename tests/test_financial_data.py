"""Tests for the financial parameters model and parameter file helpers."""

import json
import os
import sys

import pytest

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.projection_calculator import compute_historical_series
from model.FinancialData import (
    FinancialParameters,
    HistoricalEarning,
    build_historical_entries,
    collect_historical_earnings,
    default_parameters,
    load_spec,
    resolve_current_year,
)


CURRENT_YEAR = 2025


class TestFromSpec:

    def test_empty_spec_uses_defaults(self):
        params = FinancialParameters.from_spec({}, CURRENT_YEAR)
        assert params.current_savings == 10000.0
        assert params.investments_growth_rate == 7.0
        assert params.allocation() == (70.0, 10.0, 20.0)
        assert params.inflation_rate == 2.5
        assert params.first_earning_year == 2020
        assert params.first_year_earnings == 50000.0
        assert params.historical_earnings == ()

    def test_reads_camel_case_keys(self):
        spec = {
            'currentSavings': 2500,
            'currentAnnualIncome': '90000',
            'firstEarningYear': 2012,
            'historicalEarnings': [{'year': 2015, 'amount': 61000}],
        }
        params = FinancialParameters.from_spec(spec, CURRENT_YEAR)
        assert params.current_savings == 2500.0
        assert params.current_annual_income == 90000.0
        assert params.first_earning_year == 2012
        assert params.historical_earnings == (HistoricalEarning(2015, 61000.0),)
        assert params.earnings_by_year() == {2015: 61000.0}

    def test_invalid_number_raises(self):
        with pytest.raises(ValueError, match="currentSavings"):
            FinancialParameters.from_spec({'currentSavings': 'lots'}, CURRENT_YEAR)

    def test_boolean_rejected(self):
        with pytest.raises(ValueError, match="inflationRate"):
            FinancialParameters.from_spec({'inflationRate': True}, CURRENT_YEAR)

    def test_invalid_historical_entry_raises(self):
        with pytest.raises(ValueError, match="Invalid historical earnings entry"):
            FinancialParameters.from_spec({'historicalEarnings': [{'year': 2021}]}, CURRENT_YEAR)

    def test_null_historical_earnings_treated_as_empty(self):
        params = FinancialParameters.from_spec({'historicalEarnings': None}, CURRENT_YEAR)
        assert params.historical_earnings == ()

    def test_non_list_historical_earnings_raises(self):
        with pytest.raises(ValueError, match="historicalEarnings"):
            FinancialParameters.from_spec({'historicalEarnings': {'year': 2021}}, CURRENT_YEAR)

    def test_zero_historical_amount_is_interpolated(self):
        """A zero amount means the year was not supplied, not that nothing was earned."""
        spec = {
            'firstEarningYear': 2020,
            'firstYearEarnings': 50000,
            'currentAnnualIncome': 70000,
            'historicalEarnings': [{'year': 2022, 'amount': 0}, {'year': 2023, 'amount': 64000}],
        }
        params = FinancialParameters.from_spec(spec, CURRENT_YEAR)
        assert params.historical_earnings == (HistoricalEarning(2023, 64000.0),)

        past = compute_historical_series(params, CURRENT_YEAR)
        assert past[2].year == 2022
        assert past[2].income == pytest.approx(59333.333333)

    def test_to_spec_reads_back_equal(self):
        params = FinancialParameters.from_spec(
            {'historicalEarnings': [{'year': 2022, 'amount': 64000}]}, CURRENT_YEAR)
        spec = params.to_spec()
        assert spec['firstEarningYear'] == 2020
        assert spec['historicalEarnings'] == [{'year': 2022, 'amount': 64000.0}]
        assert FinancialParameters.from_spec(spec, CURRENT_YEAR) == params

    def test_parameters_are_immutable(self):
        params = default_parameters(CURRENT_YEAR)
        with pytest.raises(AttributeError):
            params.current_savings = 1.0


class TestHistoricalEntries:

    def test_one_entry_per_intermediate_year(self):
        entries = build_historical_entries(2020, 2025)
        assert [e.year for e in entries] == [2021, 2022, 2023, 2024]
        assert all(e.amount == 0.0 for e in entries)

    def test_existing_amounts_preserved(self):
        existing = [HistoricalEarning(2022, 58000.0), HistoricalEarning(2010, 1.0)]
        entries = build_historical_entries(2020, 2025, existing)
        assert {e.year: e.amount for e in entries}[2022] == 58000.0
        assert 2010 not in [e.year for e in entries]

    def test_no_entries_for_adjacent_years(self):
        assert build_historical_entries(2024, 2025) == []

    def test_collect_drops_zero_amounts(self):
        entries = [HistoricalEarning(2021, 0.0), HistoricalEarning(2022, 58000.0)]
        assert collect_historical_earnings(entries) == (HistoricalEarning(2022, 58000.0),)


class TestLoadSpec:

    def test_loads_program_file(self, tmp_path):
        program_dir = tmp_path / 'input-parameters' / 'myplan'
        program_dir.mkdir(parents=True)
        (program_dir / 'spec.json').write_text(json.dumps({'currentSavings': 1234}))
        assert load_spec('myplan', str(tmp_path)) == {'currentSavings': 1234}

    def test_missing_program_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Spec file not found"):
            load_spec('missing', str(tmp_path))

    def test_invalid_json_raises(self, tmp_path):
        program_dir = tmp_path / 'input-parameters' / 'broken'
        program_dir.mkdir(parents=True)
        (program_dir / 'spec.json').write_text('{not json')
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_spec('broken', str(tmp_path))


def test_resolve_current_year():
    assert resolve_current_year({'currentYear': 2030}, 2025) == 2030
    assert resolve_current_year({}, 2025) == 2025


def test_resolve_current_year_rejects_non_numbers():
    with pytest.raises(ValueError, match="currentYear"):
        resolve_current_year({'currentYear': None}, 2025)
    with pytest.raises(ValueError, match="currentYear"):
        resolve_current_year({'currentYear': 'soon'}, 2025)
