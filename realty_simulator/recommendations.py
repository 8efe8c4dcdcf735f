"""Qualitative guidance from simulation statistics.

Thresholds (all percentages except the coefficient of variation):

==================================  ================  ========
condition                           type              priority
==================================  ================  ========
mean IRR > 15                       Performance       High
mean IRR < 8                        Performance       High
IRR probability of loss > 20        Risk              High
positive cash flow chance < 80      Cash Flow         Medium
IRR std-dev / abs(mean IRR) > 0.5   Volatility        Medium
IRR VaR at 10% < 0                  Downside Risk     High
chance of doubling > 50             Upside Potential  Low
==================================  ================  ========
"""
import math
from dataclasses import dataclass
from typing import List

from .results import Recommendation

STRONG_IRR = 15.0
WEAK_IRR = 8.0
MAX_LOSS_PROBABILITY = 20.0
MIN_POSITIVE_CASH_FLOW = 80.0
MAX_IRR_CV = 0.5
DOWNSIDE_LEVEL = 10
MIN_DOUBLE_MONEY = 50.0


@dataclass(frozen=True)
class RecommendationInputs:
    mean_irr: float
    irr_std_dev: float
    irr_probability_of_loss: float
    positive_cash_flow: float
    irr_var_10: float
    double_money: float

    @property
    def irr_coefficient_of_variation(self) -> float:
        if self.mean_irr == 0:
            return math.inf if self.irr_std_dev > 0 else 0.0
        return self.irr_std_dev / abs(self.mean_irr)


def generate_recommendations(inputs: RecommendationInputs) -> List[Recommendation]:
    recommendations = []

    if inputs.mean_irr > STRONG_IRR:
        recommendations.append(Recommendation(
            'Performance', 'High',
            f"Strong expected IRR of {inputs.mean_irr:.1f}%",
            "Investment shows attractive returns across scenarios"))
    elif inputs.mean_irr < WEAK_IRR:
        recommendations.append(Recommendation(
            'Performance', 'High',
            f"Low expected IRR of {inputs.mean_irr:.1f}%",
            "Consider alternative investments or improve deal terms"))

    if inputs.irr_probability_of_loss > MAX_LOSS_PROBABILITY:
        recommendations.append(Recommendation(
            'Risk', 'High',
            f"{inputs.irr_probability_of_loss:.1f}% chance of negative returns",
            "High risk investment - ensure adequate risk tolerance"))

    if inputs.positive_cash_flow < MIN_POSITIVE_CASH_FLOW:
        recommendations.append(Recommendation(
            'Cash Flow', 'Medium',
            f"Only {inputs.positive_cash_flow:.1f}% chance of positive cash flow",
            "Prepare for potential negative cash flow periods"))

    if inputs.irr_coefficient_of_variation > MAX_IRR_CV:
        recommendations.append(Recommendation(
            'Volatility', 'Medium',
            "High return volatility across scenarios",
            "Consider strategies to reduce uncertainty in key variables"))

    if inputs.irr_var_10 < 0:
        recommendations.append(Recommendation(
            'Downside Risk', 'High',
            f"10% chance of IRR below {inputs.irr_var_10:.1f}%",
            "Implement downside protection strategies"))

    if inputs.double_money > MIN_DOUBLE_MONEY:
        recommendations.append(Recommendation(
            'Upside Potential', 'Low',
            f"{inputs.double_money:.1f}% chance of doubling investment",
            "Strong upside potential in favorable scenarios"))

    return recommendations
