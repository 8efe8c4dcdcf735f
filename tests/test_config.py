"""Tests for configuration parsing, defaults and validation."""

from __future__ import annotations

import pytest

from realty_simulator.config import (DEFAULT_CONFIDENCE_LEVELS, InvestmentParameters, MonteCarloConfig,
                                     SimulationSettings, TargetMetrics, VariableDistributions)
from realty_simulator.errors import ConfigurationError
from realty_simulator.utils import NormalDistribution, TriangularDistribution, UniformDistribution


def test_example_config_parses(example_config):
    config = MonteCarloConfig.from_dict(example_config)
    params = config.investment_parameters
    assert params.down_payment == pytest.approx(60_000)
    assert params.loan_amount == pytest.approx(240_000)
    assert params.total_cash_invested == pytest.approx(60_000)
    assert config.simulation_settings.num_simulations == 1000
    assert config.simulation_settings.random_seed == 42
    assert config.target_metrics == TargetMetrics()
    assert config.confidence_levels == list(DEFAULT_CONFIDENCE_LEVELS)


def test_investment_defaults():
    params = InvestmentParameters.from_dict({"purchase_price": 100_000})
    assert params.down_payment_percent == 20
    assert params.closing_costs == 0
    assert params.holding_period_years == 5
    assert params.loan_interest_rate == 7
    assert params.loan_term_years == 30


def test_closing_costs_add_to_cash_invested():
    params = InvestmentParameters(200_000, down_payment_percent=25, closing_costs=5000)
    assert params.total_cash_invested == pytest.approx(55_000)


def test_purchase_price_required():
    with pytest.raises(ConfigurationError, match="purchase_price"):
        InvestmentParameters.from_dict({"down_payment_percent": 20})


@pytest.mark.parametrize("field, value", [
    ("purchase_price", -1),
    ("purchase_price", 0),
    ("down_payment_percent", 120),
    ("holding_period_years", 0),
    ("holding_period_years", 31),
    ("holding_period_years", 2.5),
    ("loan_term_years", 41),
    ("loan_interest_rate", 25),
    ("closing_costs", -100),
    ("purchase_price", "cheap"),
    ("purchase_price", float("nan")),
])
def test_investment_ranges(field, value):
    values = {"purchase_price": 300_000, field: value}
    with pytest.raises(ConfigurationError, match=field):
        InvestmentParameters.from_dict(values)


def test_nothing_invested_rejected():
    with pytest.raises(ConfigurationError, match="positive"):
        InvestmentParameters(300_000, down_payment_percent=0, closing_costs=0)


def test_all_cash_purchase_allowed():
    params = InvestmentParameters(300_000, down_payment_percent=100)
    assert params.loan_amount == 0


def test_unknown_investment_field():
    with pytest.raises(ConfigurationError, match="unknown fields: price"):
        InvestmentParameters.from_dict({"purchase_price": 1, "price": 2})


@pytest.mark.parametrize("missing", ["rental_income", "operating_expenses"])
def test_required_variables(missing):
    d = {"rental_income": {"mean": 2000}, "operating_expenses": {"mean": 6000}}
    del d[missing]
    with pytest.raises(ConfigurationError, match=missing):
        VariableDistributions.from_dict(d)


def test_required_variable_needs_mean():
    with pytest.raises(ConfigurationError, match="rental_income.mean"):
        VariableDistributions.from_dict({"rental_income": {"type": "normal", "std_dev": 5},
                                         "operating_expenses": {"mean": 6000}})


def test_optional_variables_default_to_constants():
    dists = VariableDistributions.from_dict({"rental_income": {"mean": 2000},
                                             "operating_expenses": {"mean": 6000}})
    assert dists.rental_income.mean == 2000
    assert dists.rental_income.std_dev == pytest.approx(200)
    assert dists.vacancy_rate is None
    assert dists.constant("vacancy_rate") == 5
    assert dists.constant("appreciation_rate") == 3
    assert dists.constant("exit_cap_rate") == 6


def test_optional_variable_fills_from_defaults():
    dists = VariableDistributions.from_dict({
        "rental_income": {"mean": 2000},
        "operating_expenses": {"mean": 6000},
        "vacancy_rate": {},
        "appreciation_rate": {},
        "exit_cap_rate": {"std_dev": 0.5},
    })
    assert dists.vacancy_rate == TriangularDistribution(0, 5, 20)
    assert dists.appreciation_rate == NormalDistribution(3, 2)
    assert dists.exit_cap_rate == NormalDistribution(6, 0.5)


def test_optional_variable_with_other_type_uses_mean_defaults():
    dists = VariableDistributions.from_dict({
        "rental_income": {"mean": 2000},
        "operating_expenses": {"mean": 6000},
        "vacancy_rate": {"type": "uniform"},
    })
    assert isinstance(dists.vacancy_rate, UniformDistribution)
    assert dists.vacancy_rate.low == pytest.approx(4)
    assert dists.vacancy_rate.high == pytest.approx(6)


def _with_optional(name, given):
    return VariableDistributions.from_dict({
        "rental_income": {"mean": 2000},
        "operating_expenses": {"mean": 6000},
        name: given,
    })


def test_optional_variable_mean_outside_documented_range():
    vacancy = _with_optional("vacancy_rate", {"type": "triangular", "mean": 25}).vacancy_rate
    assert (vacancy.low, vacancy.mode, vacancy.high) == pytest.approx((20, 25, 30))


def test_optional_variable_shape_derived_from_given_mean():
    vacancy = _with_optional("vacancy_rate", {"type": "triangular", "mean": 8}).vacancy_rate
    assert (vacancy.low, vacancy.mode, vacancy.high) == pytest.approx((6.4, 8, 9.6))
    appreciation = _with_optional("appreciation_rate", {"type": "normal", "mean": 10}).appreciation_rate
    assert appreciation.mean == 10
    assert appreciation.std_dev == pytest.approx(1.0)


def test_optional_variable_partial_shape_keeps_default_mean():
    vacancy = _with_optional("vacancy_rate", {"max": 30}).vacancy_rate
    assert (vacancy.low, vacancy.mode, vacancy.high) == pytest.approx((4, 5, 30))



def test_variable_error_names_path():
    with pytest.raises(ConfigurationError, match="variable_distributions.vacancy_rate"):
        VariableDistributions.from_dict({
            "rental_income": {"mean": 2000},
            "operating_expenses": {"mean": 6000},
            "vacancy_rate": {"type": "triangular", "min": 0, "mode": 30, "max": 20},
        })


def test_unknown_variable_rejected():
    with pytest.raises(ConfigurationError, match="property_tax"):
        VariableDistributions.from_dict({"rental_income": {"mean": 1}, "operating_expenses": {"mean": 1},
                                         "property_tax": {"mean": 1}})


def test_simulation_settings_defaults():
    settings = SimulationSettings.from_dict({})
    assert settings.num_simulations == 10_000
    assert settings.random_seed is None
    assert settings.confidence_levels == DEFAULT_CONFIDENCE_LEVELS


@pytest.mark.parametrize("count", [99, 100_001, 500.5, True])
def test_num_simulations_range(count):
    with pytest.raises(ConfigurationError, match="num_simulations"):
        SimulationSettings(num_simulations=count)


def test_num_simulations_bounds_inclusive():
    assert SimulationSettings(num_simulations=100).num_simulations == 100
    assert SimulationSettings(num_simulations=100_000).num_simulations == 100_000


def test_confidence_levels_sorted_and_deduplicated():
    settings = SimulationSettings.from_dict({"confidence_levels": [90, 5, 90, 50]})
    assert settings.confidence_levels == (5, 50, 90)


@pytest.mark.parametrize("levels", [[0], [100], [], [-5], "90"])
def test_confidence_levels_invalid(levels):
    with pytest.raises(ConfigurationError, match="confidence_levels"):
        SimulationSettings.from_dict({"confidence_levels": levels})


def test_negative_seed_rejected():
    with pytest.raises(ConfigurationError, match="random_seed"):
        SimulationSettings(random_seed=-1)


def test_missing_sections():
    with pytest.raises(ConfigurationError, match="investment_parameters"):
        MonteCarloConfig.from_dict({"variable_distributions": {}})
    with pytest.raises(ConfigurationError, match="variable_distributions"):
        MonteCarloConfig.from_dict({"investment_parameters": {"purchase_price": 1}})


def test_unknown_section_rejected(example_config):
    example_config["extras"] = {}
    with pytest.raises(ConfigurationError, match="extras"):
        MonteCarloConfig.from_dict(example_config)


def test_config_round_trip(example_config):
    example_config["variable_distributions"]["vacancy_rate"] = {"type": "triangular", "min": 2, "mode": 4,
                                                                "max": 12}
    example_config["variable_distributions"]["exit_cap_rate"] = {"type": "uniform", "min": 5, "max": 7}
    config = MonteCarloConfig.from_dict(example_config)
    assert MonteCarloConfig.from_dict(config.to_dict()) == config
