"""Input configuration for Monte Carlo investment simulations.

Every section is a dataclass with documented defaults that validates itself on
construction, so a bad configuration is rejected before the first trial is drawn.
``MonteCarloConfig.from_dict`` accepts the nested dictionary form::

    {
        'investment_parameters': {'purchase_price': 300000, ...},
        'variable_distributions': {'rental_income': {'type': 'normal', 'mean': 2500, 'std_dev': 100}, ...},
        'simulation_settings': {'num_simulations': 1000, 'random_seed': 42},
        'target_metrics': {'minimum_irr': 10},
    }
"""
import math
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Tuple

from .errors import ConfigurationError
from .utils import Distribution, create_distribution

DEFAULT_CONFIDENCE_LEVELS = (5, 10, 25, 50, 75, 90, 95)
MIN_SIMULATIONS = 100
MAX_SIMULATIONS = 100_000


def _number(path: str, value, low: Optional[float] = None, high: Optional[float] = None) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{path} must be a number, got {value!r}")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{path} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise ConfigurationError(f"{path} must be finite, got {value!r}")
    if low is not None and value < low:
        raise ConfigurationError(f"{path} must be >= {low}, got {value}")
    if high is not None and value > high:
        raise ConfigurationError(f"{path} must be <= {high}, got {value}")
    return value


def _integer(path: str, value, low: int, high: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        if not low <= value <= high:
            raise ConfigurationError(f"{path} must be between {low} and {high}, got {value}")
        return value
    number = _number(path, value, low, high)
    if not number.is_integer():
        raise ConfigurationError(f"{path} must be a whole number, got {value!r}")
    return int(number)


def _section(d: Dict, name: str, required: bool = False) -> Dict:
    section = d.get(name)
    if section is None:
        if required:
            raise ConfigurationError(f"{name} is required")
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"{name} must be an object")
    return section


def _known_fields(cls, d: Dict, path: str) -> Dict:
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(d) - names)
    if unknown:
        raise ConfigurationError(f"{path} has unknown fields: {', '.join(unknown)}")
    return d


@dataclass(frozen=True)
class InvestmentParameters:
    """Purchase and financing terms. Rates are whole percentages."""
    purchase_price: float
    down_payment_percent: float = 20.0
    closing_costs: float = 0.0
    holding_period_years: int = 5
    loan_interest_rate: float = 7.0
    loan_term_years: int = 30

    def __post_init__(self):
        p = 'investment_parameters'
        set_ = object.__setattr__
        set_(self, 'purchase_price', _number(f'{p}.purchase_price', self.purchase_price, 0))
        if self.purchase_price <= 0:
            raise ConfigurationError(f"{p}.purchase_price must be > 0, got {self.purchase_price}")
        set_(self, 'down_payment_percent', _number(f'{p}.down_payment_percent', self.down_payment_percent, 0, 100))
        set_(self, 'closing_costs', _number(f'{p}.closing_costs', self.closing_costs, 0))
        set_(self, 'holding_period_years', _integer(f'{p}.holding_period_years', self.holding_period_years, 1, 30))
        set_(self, 'loan_interest_rate', _number(f'{p}.loan_interest_rate', self.loan_interest_rate, 0, 20))
        set_(self, 'loan_term_years', _integer(f'{p}.loan_term_years', self.loan_term_years, 1, 40))
        if self.total_cash_invested <= 0:
            raise ConfigurationError(
                f"{p}: down payment plus closing costs must be positive to measure returns")

    @property
    def down_payment(self) -> float:
        return self.purchase_price * self.down_payment_percent / 100

    @property
    def loan_amount(self) -> float:
        return self.purchase_price - self.down_payment

    @property
    def total_cash_invested(self) -> float:
        return self.down_payment + self.closing_costs

    def to_dict(self) -> Dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: Dict) -> 'InvestmentParameters':
        d = _known_fields(cls, d, 'investment_parameters')
        if d.get('purchase_price') is None:
            raise ConfigurationError("investment_parameters.purchase_price is required")
        return cls(**{k: v for k, v in d.items() if v is not None})


# Per-variable defaults. A variable missing entirely is held at ``constant``;
# one given with no fields takes ``template`` whole, otherwise missing shape
# fields are derived from the mean.
VARIABLE_DEFAULTS = {
    'rental_income': {'required': True, 'template': {'type': 'normal'}},
    'operating_expenses': {'required': True, 'template': {'type': 'normal'}},
    'vacancy_rate': {'required': False, 'constant': 5.0,
                     'template': {'type': 'triangular', 'mean': 5.0, 'min': 0.0, 'max': 20.0, 'mode': 5.0}},
    'appreciation_rate': {'required': False, 'constant': 3.0,
                          'template': {'type': 'normal', 'mean': 3.0, 'std_dev': 2.0, 'min': -5.0, 'max': 10.0}},
    'exit_cap_rate': {'required': False, 'constant': 6.0,
                      'template': {'type': 'normal', 'mean': 6.0, 'std_dev': 1.0}},
}
TEMPLATE_FIELDS = ('mean', 'std_dev', 'min', 'max', 'mode')


@dataclass
class VariableDistributions:
    """Distributions for the uncertain inputs; ``None`` means use the fixed default."""
    rental_income: Distribution
    operating_expenses: Distribution
    vacancy_rate: Optional[Distribution] = None
    appreciation_rate: Optional[Distribution] = None
    exit_cap_rate: Optional[Distribution] = None

    def constant(self, name: str) -> float:
        return VARIABLE_DEFAULTS[name]['constant']

    def to_dict(self) -> Dict:
        return {name: getattr(self, name).to_dict() for name in VARIABLE_DEFAULTS if getattr(self, name) is not None}

    @classmethod
    def from_dict(cls, d: Dict) -> 'VariableDistributions':
        unknown = sorted(set(d) - set(VARIABLE_DEFAULTS))
        if unknown:
            raise ConfigurationError(f"variable_distributions has unknown variables: {', '.join(unknown)}")
        built = {}
        for name, defaults in VARIABLE_DEFAULTS.items():
            path = f'variable_distributions.{name}'
            given = d.get(name)
            if given is None:
                if defaults['required']:
                    raise ConfigurationError(f"{path} is required")
                continue
            if not isinstance(given, dict):
                raise ConfigurationError(f"{path} must be an object")
            if defaults['required'] and given.get('mean') is None:
                raise ConfigurationError(f"{path}.mean is required")
            template = dict(defaults['template'])
            given_type = given.get('type') or template['type']
            if given_type != template['type'] or any(given.get(k) is not None for k in TEMPLATE_FIELDS):
                # documented shape applies only as a whole; otherwise derive it from the mean
                template = {'type': given_type, 'mean': template.get('mean')}
            template.update({k: v for k, v in given.items() if v is not None})
            try:
                built[name] = create_distribution(template)
            except ConfigurationError as e:
                raise ConfigurationError(f"{path}: {e}") from None
        return cls(**built)


@dataclass(frozen=True)
class SimulationSettings:
    """How many trials to run and how to seed them.

    Attributes:
        num_simulations: Trials per run, 100 to 100,000. Default 10,000.
        random_seed: Seed for reproducible runs. ``None`` seeds from the clock; the
            seed actually used is reported in the run metadata.
        confidence_levels: Percent levels for VaR, CVaR and confidence intervals,
            stored sorted and de-duplicated.
    """
    num_simulations: int = 10_000
    random_seed: Optional[int] = None
    confidence_levels: Tuple[float, ...] = DEFAULT_CONFIDENCE_LEVELS

    def __post_init__(self):
        p = 'simulation_settings'
        set_ = object.__setattr__
        set_(self, 'num_simulations',
             _integer(f'{p}.num_simulations', self.num_simulations, MIN_SIMULATIONS, MAX_SIMULATIONS))
        if self.random_seed is not None:
            set_(self, 'random_seed', _integer(f'{p}.random_seed', self.random_seed, 0, 2 ** 63 - 1))
        levels = []
        for level in self.confidence_levels:
            value = _number(f'{p}.confidence_levels', level, 0, 100)
            if value in (0, 100):
                raise ConfigurationError(f"{p}.confidence_levels must lie strictly between 0 and 100")
            levels.append(int(value) if value.is_integer() else value)
        if not levels:
            raise ConfigurationError(f"{p}.confidence_levels must not be empty")
        set_(self, 'confidence_levels', tuple(sorted(set(levels))))

    def to_dict(self) -> Dict:
        return {'num_simulations': self.num_simulations, 'random_seed': self.random_seed,
                'confidence_levels': list(self.confidence_levels)}

    @classmethod
    def from_dict(cls, d: Dict) -> 'SimulationSettings':
        d = _known_fields(cls, d, 'simulation_settings')
        values = {k: v for k, v in d.items() if v is not None or k == 'random_seed'}
        if 'confidence_levels' in values:
            if not isinstance(values['confidence_levels'], (list, tuple)):
                raise ConfigurationError("simulation_settings.confidence_levels must be a list")
            values['confidence_levels'] = tuple(values['confidence_levels'])
        return cls(**values)


@dataclass(frozen=True)
class TargetMetrics:
    """Thresholds for the probability analysis. IRR in percent, cash flow monthly."""
    minimum_irr: float = 10.0
    minimum_cash_flow: float = 0.0
    maximum_loss: float = 0.0

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, _number(f'target_metrics.{f.name}', getattr(self, f.name)))

    def to_dict(self) -> Dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: Dict) -> 'TargetMetrics':
        d = _known_fields(cls, d, 'target_metrics')
        return cls(**{k: v for k, v in d.items() if v is not None})


@dataclass
class MonteCarloConfig:
    investment_parameters: InvestmentParameters
    variable_distributions: VariableDistributions
    simulation_settings: SimulationSettings = field(default_factory=SimulationSettings)
    target_metrics: TargetMetrics = field(default_factory=TargetMetrics)

    def to_dict(self) -> Dict:
        return {
            'investment_parameters': self.investment_parameters.to_dict(),
            'variable_distributions': self.variable_distributions.to_dict(),
            'simulation_settings': self.simulation_settings.to_dict(),
            'target_metrics': self.target_metrics.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict) -> 'MonteCarloConfig':
        if not isinstance(d, dict):
            raise ConfigurationError("configuration must be an object")
        unknown = sorted(set(d) - {f.name for f in fields(cls)})
        if unknown:
            raise ConfigurationError(f"unknown configuration sections: {', '.join(unknown)}")
        return cls(
            InvestmentParameters.from_dict(_section(d, 'investment_parameters', required=True)),
            VariableDistributions.from_dict(_section(d, 'variable_distributions', required=True)),
            SimulationSettings.from_dict(_section(d, 'simulation_settings')),
            TargetMetrics.from_dict(_section(d, 'target_metrics')),
        )

    @property
    def confidence_levels(self) -> List[float]:
        return list(self.simulation_settings.confidence_levels)
