"""End-to-end tests for the Monte Carlo simulator."""

from __future__ import annotations

import json
import logging
import math
import threading

import pytest

from realty_simulator import MonteCarloSimulator
from realty_simulator.errors import ConfigurationError, SimulationCancelled


@pytest.fixture(scope="module")
def report():
    config = {
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
    return MonteCarloSimulator().calculate(config)


def test_irr_summary_is_plausible(report):
    irr = report.summary_statistics["irr"]
    assert math.isfinite(irr.mean)
    assert -20 <= irr.mean <= 40
    assert irr.min <= irr.median <= irr.max
    assert irr.std_dev > 0


def test_probabilities_are_percentages(report):
    for value in report.probability_analysis.to_dict().values():
        assert 0 <= value <= 100


def test_histograms_cover_every_trial(report):
    for analysis in report.distributions.values():
        assert len(analysis.histogram) == 20
        assert sum(b.count for b in analysis.histogram) == 1000


def test_constant_inputs_have_no_correlation(report):
    matrix = report.correlations.correlation_matrix["irr"]
    assert matrix["vacancy_rate"] == 0
    assert matrix["appreciation_rate"] == 0
    assert matrix["monthly_rent"] > 0
    assert matrix["annual_expenses"] < 0


def test_metadata(report):
    meta = report.simulation_metadata
    assert meta.num_simulations == 1000
    assert meta.random_seed == 42
    assert meta.seed_provided
    assert len(report.trials) == 1000


def test_report_is_json_serializable(report, tmp_path):
    d = report.to_dict()
    assert "trials" not in d
    assert set(d["risk_metrics"]["irr"]["value_at_risk"]) == {f"var_{level}" for level in (5, 10, 25, 50, 75, 90, 95)}
    assert "ci_90" in d["confidence_intervals"]["irr"]
    json.dumps(report.to_dict(include_trials=True))
    path = tmp_path / "report.json"
    report.save_json(str(path))
    assert json.loads(path.read_text())["simulation_metadata"]["random_seed"] == 42


def test_trials_dataframe(report):
    df = report.trials_dataframe()
    assert len(df) == 1000
    assert {"irr", "input_monthly_rent", "irr_converged"} <= set(df.columns)


def test_same_seed_reproduces_report(report, example_config):
    again = MonteCarloSimulator().calculate(example_config)
    assert again.summary_statistics["irr"] == report.summary_statistics["irr"]
    assert again.trials == report.trials


def test_parallel_run_matches_serial(example_config):
    example_config["simulation_settings"]["num_simulations"] = 200
    serial = MonteCarloSimulator().calculate(example_config)
    parallel = MonteCarloSimulator().calculate(example_config, workers=2)
    assert parallel.trials == serial.trials
    assert parallel.summary_statistics == serial.summary_statistics


def test_unseeded_run_records_seed(example_config, caplog):
    example_config["simulation_settings"] = {"num_simulations": 100}
    with caplog.at_level(logging.WARNING, logger="realty_simulator"):
        report = MonteCarloSimulator().calculate(example_config)
    assert not report.simulation_metadata.seed_provided
    assert isinstance(report.simulation_metadata.random_seed, int)
    assert "not reproducible" in caplog.text


def test_invalid_config_rejected_before_running(example_config):
    del example_config["variable_distributions"]["rental_income"]["mean"]
    with pytest.raises(ConfigurationError):
        MonteCarloSimulator().calculate(example_config)


def test_cancellation(example_config):
    event = threading.Event()
    event.set()
    with pytest.raises(SimulationCancelled):
        MonteCarloSimulator().calculate(example_config, cancel_event=event)


def test_get_recommendation(report):
    for recommendation in report.recommendations:
        assert report.get_recommendation(recommendation.type) is recommendation
    assert report.get_recommendation("Nonexistent") is None
