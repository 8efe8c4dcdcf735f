"""Shared fixtures for the simulator tests."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest

from realty_simulator.simulation.sim import Scenario, TrialResult


def make_trial(irr: float, **overrides) -> TrialResult:
    """A trial whose outputs default to simple functions of ``irr``."""
    inputs = overrides.pop("inputs", None) or Scenario(
        monthly_rent=2000.0 + irr * 10,
        vacancy_rate=5.0,
        annual_expenses=8000.0,
        appreciation_rate=3.0,
        exit_cap_rate=6.0,
    )
    fields = dict(
        irr=irr,
        total_return=irr * 2,
        cash_on_cash_return=irr / 2,
        equity_multiple=1 + irr / 10,
        monthly_cash_flow=irr * 10,
        annual_cash_flow=irr * 120,
        total_profit=irr * 1000,
        exit_value=300_000.0,
        sale_proceeds=60_000.0,
        inputs=inputs,
    )
    fields.update(overrides)
    return TrialResult(**fields)


@pytest.fixture
def ten_trials():
    """Trials with IRR 1..10 in scrambled order."""
    return [make_trial(float(v)) for v in (4, 9, 1, 7, 10, 2, 6, 3, 8, 5)]


@pytest.fixture
def example_config():
    return {
        "investment_parameters": {
            "purchase_price": 300_000,
            "down_payment_percent": 20,
            "loan_interest_rate": 7,
            "loan_term_years": 30,
            "holding_period_years": 5,
        },
        "variable_distributions": {
            "rental_income": {"type": "normal", "mean": 2500, "std_dev": 100},
            "operating_expenses": {"type": "normal", "mean": 8000, "std_dev": 500},
        },
        "simulation_settings": {"num_simulations": 1000, "random_seed": 42},
    }
