import json
import math
from dataclasses import dataclass, asdict
from typing import List, Dict

from ..config import InvestmentParameters
from ..finance.discounting import irr_result
from ..finance.loan import monthly_payment, remaining_balance


@dataclass
class Scenario:
    """One sampled set of uncertain inputs. Rates are whole percentages."""
    monthly_rent: float
    vacancy_rate: float
    annual_expenses: float
    appreciation_rate: float
    exit_cap_rate: float

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict) -> 'Scenario':
        return cls(**d)


@dataclass
class TrialResult:
    irr: float
    total_return: float
    cash_on_cash_return: float
    equity_multiple: float
    monthly_cash_flow: float
    annual_cash_flow: float
    total_profit: float
    exit_value: float
    sale_proceeds: float
    inputs: Scenario
    irr_converged: bool = True

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['inputs'] = self.inputs.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: Dict) -> 'TrialResult':
        data = d.copy()
        data['inputs'] = Scenario.from_dict(data['inputs'])
        return cls(**data)


def _finite(value: float, fallback: float = 0.0) -> float:
    return value if math.isfinite(value) else fallback


def evaluate(params: InvestmentParameters, scenario: Scenario) -> TrialResult:
    """Discounted cash flow for one scenario.

    Year 0 is the cash invested; each holding year earns the operating cash flow and
    the last one also receives the sale proceeds. Never raises for validated inputs.
    """
    invested = params.total_cash_invested
    loan_amount = params.loan_amount
    payment = monthly_payment(loan_amount, params.loan_interest_rate, params.loan_term_years)

    annual_rental_income = scenario.monthly_rent * 12 * (1 - scenario.vacancy_rate / 100)
    noi = annual_rental_income - scenario.annual_expenses
    annual_cash_flow = noi - payment * 12

    years = params.holding_period_years
    future_value = params.purchase_price * (1 + scenario.appreciation_rate / 100) ** years
    exit_value = future_value
    if scenario.exit_cap_rate > 0:
        # Conservative: the lower of appreciated value and income value
        exit_value = min(future_value, noi / (scenario.exit_cap_rate / 100))
    exit_value = _finite(exit_value)
    balance = remaining_balance(loan_amount, params.loan_interest_rate, params.loan_term_years, years * 12)
    sale_proceeds = exit_value - balance

    cash_flows = [-invested] + [annual_cash_flow] * years
    cash_flows[-1] += sale_proceeds

    solved = irr_result(cash_flows)
    distributions = sum(cash_flows[1:])
    total_profit = distributions - invested

    return TrialResult(
        irr=_finite(solved.rate * 100),
        total_return=_finite(total_profit / invested * 100),
        cash_on_cash_return=_finite(annual_cash_flow / invested * 100),
        equity_multiple=_finite(distributions / invested),
        monthly_cash_flow=annual_cash_flow / 12,
        annual_cash_flow=annual_cash_flow,
        total_profit=total_profit,
        exit_value=exit_value,
        sale_proceeds=sale_proceeds,
        inputs=scenario,
        irr_converged=solved.converged,
    )


def save_json(results: List[TrialResult], filepath: str):
    with open(filepath, 'w') as f:
        json.dump([r.to_dict() for r in results], f, indent=4)


def load_json(filepath: str) -> List[TrialResult]:
    with open(filepath, 'r') as f:
        d = json.load(f)
    return [TrialResult.from_dict(r) for r in d]
