"""Typed records for each section of a Monte Carlo report.

``to_dict`` on every record produces the plain nested form (section and key names
such as ``var_10`` or ``ci_90``) used for JSON output.
"""
import json
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from .simulation.sim import TrialResult


def _fmt_level(level: float) -> str:
    return str(int(level)) if float(level).is_integer() else str(level)


@dataclass
class MetricStatistics:
    mean: float
    median: float
    std_dev: float
    min: float
    max: float
    skewness: float
    kurtosis: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class HistogramBin:
    min: float
    max: float
    count: int
    frequency: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class DistributionAnalysis:
    histogram: List[HistogramBin]
    percentiles: Dict[str, float]

    def to_dict(self) -> Dict:
        return {'histogram': [b.to_dict() for b in self.histogram], 'percentiles': dict(self.percentiles)}


@dataclass
class MetricRisk:
    value_at_risk: Dict[float, float]
    conditional_value_at_risk: Dict[float, float]
    probability_of_loss: float
    downside_deviation: float

    def to_dict(self) -> Dict:
        return {
            'value_at_risk': {f'var_{_fmt_level(k)}': v for k, v in self.value_at_risk.items()},
            'conditional_value_at_risk': {f'cvar_{_fmt_level(k)}': v
                                          for k, v in self.conditional_value_at_risk.items()},
            'probability_of_loss': self.probability_of_loss,
            'downside_deviation': self.downside_deviation,
        }


@dataclass
class RiskMetrics:
    metrics: Dict[str, MetricRisk]
    sharpe_ratio: float
    max_drawdown: float

    def __getitem__(self, metric: str) -> MetricRisk:
        return self.metrics[metric]

    def to_dict(self) -> Dict:
        d = {name: m.to_dict() for name, m in self.metrics.items()}
        d['sharpe_ratio'] = self.sharpe_ratio
        d['max_drawdown'] = self.max_drawdown
        return d


@dataclass
class ProbabilityAnalysis:
    """Percent of trials meeting each condition."""
    irr_above_target: float
    positive_cash_flow: float
    profitable_exit: float
    double_money: float
    loss_probability: float
    meet_all_targets: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class SensitivityEntry:
    variable: str
    correlation: float
    impact: str

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class CorrelationAnalysis:
    correlation_matrix: Dict[str, Dict[str, float]]
    sensitivity_ranking: List[SensitivityEntry]

    def to_dict(self) -> Dict:
        return {
            'correlation_matrix': {k: dict(v) for k, v in self.correlation_matrix.items()},
            'sensitivity_ranking': [e.to_dict() for e in self.sensitivity_ranking],
        }


@dataclass
class KeyScenario:
    label: str
    result: 'TrialResult'

    def to_dict(self) -> Dict:
        outputs = self.result.to_dict()
        inputs = outputs.pop('inputs')
        return {'label': self.label, 'inputs': inputs, 'outputs': outputs}


@dataclass
class ScenarioAnalysis:
    best_case: KeyScenario
    worst_case: KeyScenario
    median_case: KeyScenario
    percentile_10: KeyScenario
    percentile_90: KeyScenario

    def to_dict(self) -> Dict:
        return {name: getattr(self, name).to_dict()
                for name in ('best_case', 'worst_case', 'median_case', 'percentile_10', 'percentile_90')}


@dataclass
class ConfidenceInterval:
    lower: float
    upper: float
    width: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class Recommendation:
    type: str
    priority: str
    message: str
    action: str

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class SimulationMetadata:
    num_simulations: int
    random_seed: int
    seed_provided: bool
    timestamp: str
    elapsed_seconds: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class MonteCarloReport:
    summary_statistics: Dict[str, MetricStatistics]
    distributions: Dict[str, DistributionAnalysis]
    risk_metrics: RiskMetrics
    probability_analysis: ProbabilityAnalysis
    correlations: CorrelationAnalysis
    scenario_analysis: ScenarioAnalysis
    confidence_intervals: Dict[str, Dict[float, ConfidenceInterval]]
    recommendations: List[Recommendation]
    simulation_metadata: SimulationMetadata
    trials: List['TrialResult'] = field(default_factory=list, repr=False)

    def to_dict(self, include_trials: bool = False) -> Dict:
        d = {
            'summary_statistics': {k: v.to_dict() for k, v in self.summary_statistics.items()},
            'distributions': {k: v.to_dict() for k, v in self.distributions.items()},
            'risk_metrics': self.risk_metrics.to_dict(),
            'probability_analysis': self.probability_analysis.to_dict(),
            'correlations': self.correlations.to_dict(),
            'scenario_analysis': self.scenario_analysis.to_dict(),
            'confidence_intervals': {
                metric: {f'ci_{_fmt_level(level)}': ci.to_dict() for level, ci in levels.items()}
                for metric, levels in self.confidence_intervals.items()
            },
            'recommendations': [r.to_dict() for r in self.recommendations],
            'simulation_metadata': self.simulation_metadata.to_dict(),
        }
        if include_trials:
            d['trials'] = [t.to_dict() for t in self.trials]
        return d

    def trials_dataframe(self) -> pd.DataFrame:
        from .simulation.sim_analyzer import SimulationAnalyzer
        return SimulationAnalyzer.to_dataframe(self.trials)

    def save_json(self, filepath: str, include_trials: bool = False):
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(include_trials), f, indent=4)

    def get_recommendation(self, type_: str) -> Optional[Recommendation]:
        return next((r for r in self.recommendations if r.type == type_), None)
