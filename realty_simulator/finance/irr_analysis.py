import math
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Optional

from ..errors import ConfigurationError
from ..results import Recommendation
from .discounting import irr, npv


@dataclass
class IRRAnalysisInput:
    """Hold-and-sell cash flows for a single property.

    Percent fields are whole percentages (7 == 7%).
    """
    initial_investment: float
    annual_cash_flows: List[float]
    projected_sale_price: float
    selling_costs_percent: float = 7.0
    loan_balance_at_sale: float = 0.0
    target_irr: float = 15.0

    def __post_init__(self):
        if not self.annual_cash_flows:
            raise ConfigurationError("annual_cash_flows must contain at least one year")
        if not self.initial_investment > 0:
            raise ConfigurationError("initial_investment must be > 0")
        if self.projected_sale_price < 0:
            raise ConfigurationError("projected_sale_price must be >= 0")
        if not 0 <= self.selling_costs_percent <= 15:
            raise ConfigurationError("selling_costs_percent must be between 0 and 15")
        if self.loan_balance_at_sale < 0:
            raise ConfigurationError("loan_balance_at_sale must be >= 0")
        values = [self.initial_investment, self.projected_sale_price, self.selling_costs_percent,
                  self.loan_balance_at_sale, self.target_irr, *self.annual_cash_flows]
        if not all(math.isfinite(v) for v in values):
            raise ConfigurationError("IRR analysis inputs must be finite numbers")
        self.annual_cash_flows = [float(cf) for cf in self.annual_cash_flows]

    @property
    def holding_period_years(self) -> int:
        return len(self.annual_cash_flows)

    def net_sale_proceeds(self, sale_price: Optional[float] = None) -> float:
        price = self.projected_sale_price if sale_price is None else sale_price
        return price * (1 - self.selling_costs_percent / 100) - self.loan_balance_at_sale

    def cash_flows(self, cash_flow_factor: float = 1.0, sale_price: Optional[float] = None,
                   investment_factor: float = 1.0) -> List[float]:
        flows = [-self.initial_investment * investment_factor]
        flows.extend(cf * cash_flow_factor for cf in self.annual_cash_flows)
        flows[-1] += self.net_sale_proceeds(sale_price)
        return flows

    @classmethod
    def from_dict(cls, d: Dict) -> 'IRRAnalysisInput':
        try:
            return cls(**d)
        except TypeError as e:
            raise ConfigurationError(str(e)) from None


@dataclass
class SensitivityScenario:
    scenario: str
    irr: float
    impact: float


@dataclass
class IRRAnalysis:
    irr_percentage: float
    irr_decimal: float
    meets_target: bool
    target_irr: float
    npv_at_target_rate: float
    net_sale_proceeds: float
    total_cash_received: float
    total_profit: float
    cash_on_cash_return: float
    average_annual_return: float
    performance_rating: str
    sensitivity: List[SensitivityScenario] = field(default_factory=list)
    most_sensitive_factor: str = ''
    npv_interpretation: str = ''
    recommendations: List[Recommendation] = field(default_factory=list)
    schedule: List[Dict] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return asdict(self)


PERFORMANCE_BANDS = (
    (10, 'Exceptional'),
    (5, 'Excellent'),
    (0, 'Good'),
    (-3, 'Marginal'),
)


def rate_performance(irr_percentage: float, target_irr: float) -> str:
    for margin, rating in PERFORMANCE_BANDS:
        if irr_percentage >= target_irr + margin:
            return rating
    return 'Poor'


MIN_CASH_ON_CASH = 8.0
IMPLAUSIBLE_IRR = 25.0


def interpret_npv(npv_at_target: float) -> str:
    if npv_at_target > 0:
        return "Positive NPV - Investment exceeds target return"
    return "Negative NPV - Investment below target return"


def irr_recommendations(irr_percentage: float, target_irr: float, cash_on_cash: float,
                        most_sensitive_factor: str) -> List[Recommendation]:
    recommendations = []
    if irr_percentage >= target_irr:
        recommendations.append(Recommendation(
            'Positive', 'High',
            f"IRR of {irr_percentage:.2f}% exceeds your target of {target_irr}%",
            "Consider proceeding with appropriate due diligence"))
    else:
        recommendations.append(Recommendation(
            'Caution', 'High',
            f"IRR of {irr_percentage:.2f}% is below your target of {target_irr}%",
            "Negotiate better terms or consider alternative investments"))

    if 'Cash Flows' in most_sensitive_factor:
        recommendations.append(Recommendation(
            'Risk Management', 'Medium',
            "Returns are highly sensitive to rental income",
            "Focus on tenant quality and lease terms to ensure stable cash flows"))
    elif 'Sale Price' in most_sensitive_factor:
        recommendations.append(Recommendation(
            'Risk Management', 'Medium',
            "Returns are highly sensitive to exit value",
            "Consider value-add strategies to ensure appreciation"))

    if cash_on_cash < MIN_CASH_ON_CASH:
        recommendations.append(Recommendation(
            'Optimization', 'Medium',
            "Low cash-on-cash return during holding period",
            "Look for ways to increase rents or reduce expenses"))

    if irr_percentage > IMPLAUSIBLE_IRR:
        recommendations.append(Recommendation(
            'Due Diligence', 'High',
            "Very high projected returns",
            "Double-check all assumptions for accuracy and conservatism"))
    return recommendations


def _schedule(flows: List[float]) -> List[Dict]:

    rows = []
    cumulative = 0.0
    last = len(flows) - 1
    for year, cf in enumerate(flows):
        cumulative += cf
        if year == 0:
            description = 'Initial Investment'
        elif year == last:
            description = f'Year {year} Operations + Sale Proceeds'
        else:
            description = f'Year {year} Net Cash Flow'
        rows.append({'year': year, 'description': description,
                     'cash_flow': cf, 'cumulative_cash_flow': cumulative})
    return rows


def analyze_irr(inputs: IRRAnalysisInput) -> IRRAnalysis:
    flows = inputs.cash_flows()
    rate = irr(flows)
    irr_pct = rate * 100
    net_sale = inputs.net_sale_proceeds()
    received = sum(inputs.annual_cash_flows) + net_sale
    profit = received - inputs.initial_investment
    coc = profit / inputs.initial_investment * 100

    scenarios = [
        SensitivityScenario('10% Lower Cash Flows', irr(inputs.cash_flows(cash_flow_factor=0.9)) * 100, 0.0),
        SensitivityScenario('10% Lower Sale Price',
                            irr(inputs.cash_flows(sale_price=inputs.projected_sale_price * 0.9)) * 100, 0.0),
        SensitivityScenario('20% Higher Initial Investment', irr(inputs.cash_flows(investment_factor=1.2)) * 100, 0.0),
    ]
    for s in scenarios:
        s.impact = s.irr - irr_pct
    most_sensitive = max(scenarios, key=lambda s: abs(s.impact))
    most_sensitive_factor = most_sensitive.scenario if most_sensitive.impact != 0 else ''
    npv_at_target = npv(inputs.target_irr / 100, flows)

    return IRRAnalysis(
        irr_percentage=irr_pct,
        irr_decimal=rate,
        meets_target=irr_pct >= inputs.target_irr,
        target_irr=inputs.target_irr,
        npv_at_target_rate=npv_at_target,
        net_sale_proceeds=net_sale,
        total_cash_received=received,
        total_profit=profit,
        cash_on_cash_return=coc,
        average_annual_return=coc / inputs.holding_period_years,
        performance_rating=rate_performance(irr_pct, inputs.target_irr),
        sensitivity=scenarios,
        most_sensitive_factor=most_sensitive_factor,
        npv_interpretation=interpret_npv(npv_at_target),
        recommendations=irr_recommendations(irr_pct, inputs.target_irr, coc, most_sensitive_factor),
        schedule=_schedule(flows),
    )
