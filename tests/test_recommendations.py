"""Tests for the recommendation rules."""

from __future__ import annotations

import math

import pytest

from realty_simulator.recommendations import RecommendationInputs, generate_recommendations

NEUTRAL = dict(mean_irr=10.0, irr_std_dev=1.0, irr_probability_of_loss=0.0, positive_cash_flow=100.0,
               irr_var_10=5.0, double_money=0.0)


def _inputs(**overrides):
    return RecommendationInputs(**{**NEUTRAL, **overrides})


def test_neutral_deal_has_no_recommendations():
    assert generate_recommendations(_inputs()) == []


@pytest.mark.parametrize("overrides, type_, priority", [
    ({"mean_irr": 16.0}, "Performance", "High"),
    ({"mean_irr": 7.0, "irr_std_dev": 0.1}, "Performance", "High"),
    ({"irr_probability_of_loss": 25.0}, "Risk", "High"),
    ({"positive_cash_flow": 70.0}, "Cash Flow", "Medium"),
    ({"irr_std_dev": 6.0}, "Volatility", "Medium"),
    ({"irr_var_10": -1.0}, "Downside Risk", "High"),
    ({"double_money": 60.0}, "Upside Potential", "Low"),
])
def test_single_rule_fires(overrides, type_, priority):
    recommendations = generate_recommendations(_inputs(**overrides))
    assert [(r.type, r.priority) for r in recommendations] == [(type_, priority)]


def test_thresholds_are_strict():
    inputs = _inputs(mean_irr=15.0, irr_std_dev=7.5, irr_probability_of_loss=20.0, positive_cash_flow=80.0,
                     irr_var_10=0.0, double_money=50.0)
    assert generate_recommendations(inputs) == []


def test_messages_carry_values():
    recommendations = generate_recommendations(_inputs(mean_irr=18.3, irr_std_dev=1.0))
    assert recommendations[0].message == "Strong expected IRR of 18.3%"


def test_rules_in_fixed_order():
    inputs = _inputs(mean_irr=2.0, irr_std_dev=5.0, irr_probability_of_loss=40.0, positive_cash_flow=10.0,
                     irr_var_10=-8.0, double_money=0.0)
    types = [r.type for r in generate_recommendations(inputs)]
    assert types == ["Performance", "Risk", "Cash Flow", "Volatility", "Downside Risk"]


def test_coefficient_of_variation_with_zero_mean():
    assert _inputs(mean_irr=0.0, irr_std_dev=0.0).irr_coefficient_of_variation == 0
    assert math.isinf(_inputs(mean_irr=0.0, irr_std_dev=1.0).irr_coefficient_of_variation)
