import math
from typing import Dict, List, Sequence, Iterable, Any

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from scipy import stats

from .sim import TrialResult, Scenario
from ..config import TargetMetrics
from ..results import (MetricStatistics, HistogramBin, DistributionAnalysis, MetricRisk, RiskMetrics,
                       ProbabilityAnalysis, SensitivityEntry, CorrelationAnalysis, KeyScenario,
                       ScenarioAnalysis, ConfidenceInterval)

OUTPUT_FIELDS = ('irr', 'total_return', 'cash_on_cash_return', 'equity_multiple', 'monthly_cash_flow',
                 'annual_cash_flow', 'total_profit', 'exit_value', 'sale_proceeds')
SUMMARY_METRICS = ('irr', 'total_return', 'cash_on_cash_return', 'equity_multiple', 'monthly_cash_flow',
                   'total_profit')
DISTRIBUTION_METRICS = ('irr', 'total_return', 'monthly_cash_flow')
INPUT_VARIABLES = ('monthly_rent', 'vacancy_rate', 'annual_expenses', 'appreciation_rate')
REPORT_PERCENTILES = (1, 5, 10, 25, 50, 75, 90, 95, 99)
HISTOGRAM_BINS = 20
HIGH_IMPACT = 0.7
MEDIUM_IMPACT = 0.4


def percentile_index(p: float, n: int) -> int:
    """Nearest-rank index ceil(p/100 * n) - 1, clamped to the sample."""
    return min(max(math.ceil(p * n / 100) - 1, 0), n - 1)


def impact_label(correlation: float) -> str:
    strength = abs(correlation)
    if strength > HIGH_IMPACT:
        return 'High'
    if strength > MEDIUM_IMPACT:
        return 'Medium'
    return 'Low'


class SimulationAnalyzer:
    """Statistics over a batch of trial results.

    The median is ``sorted[n // 2]``, which for even ``n`` is the upper of the two
    middle values rather than their average. Standard deviation, skewness and
    kurtosis (excess) use population moments.
    """

    def __init__(self, results: List[TrialResult]):
        if not results:
            raise ValueError("no trial results to analyze")
        self.results = results
        self.n = len(results)
        self.df = self.to_dataframe(results)
        self._sorted: Dict[str, np.ndarray] = {}

    @staticmethod
    def to_dataframe(results: List[TrialResult]) -> pd.DataFrame:
        data = {name: [getattr(r, name) for r in results] for name in OUTPUT_FIELDS}
        for name in Scenario.__dataclass_fields__:
            data[f'input_{name}'] = [getattr(r.inputs, name) for r in results]
        data['irr_converged'] = [r.irr_converged for r in results]
        return pd.DataFrame(data)

    def values(self, metric: str) -> np.ndarray:
        return self.df[metric].to_numpy(dtype=float)

    def sorted_values(self, metric: str) -> np.ndarray:
        if metric not in self._sorted:
            self._sorted[metric] = np.sort(self.values(metric))
        return self._sorted[metric]

    def describe(self, metric: str) -> MetricStatistics:
        values = self.values(metric)
        ordered = self.sorted_values(metric)
        std = float(np.std(values))
        if std > 0:
            skewness = float(stats.skew(values, bias=True))
            kurtosis = float(stats.kurtosis(values, fisher=True, bias=True))
        else:
            skewness = kurtosis = 0.0
        return MetricStatistics(
            mean=float(np.mean(values)),
            median=float(ordered[self.n // 2]),
            std_dev=std,
            min=float(ordered[0]),
            max=float(ordered[-1]),
            skewness=skewness,
            kurtosis=kurtosis,
        )

    def percentile(self, metric: str, p: float) -> float:
        return float(self.sorted_values(metric)[percentile_index(p, self.n)])

    def percentiles(self, metric: str, ps: Iterable[float] = REPORT_PERCENTILES) -> Dict[str, float]:
        return {f'p{p}': self.percentile(metric, p) for p in ps}

    def histogram(self, metric: str, bins: int = HISTOGRAM_BINS) -> List[HistogramBin]:
        values = self.values(metric)
        low, high = float(values.min()), float(values.max())
        if high == low:
            counts = np.zeros(bins, dtype=int)
            counts[0] = self.n
            edges = np.full(bins + 1, low)
        else:
            counts, edges = np.histogram(values, bins=bins, range=(low, high))
        return [HistogramBin(float(edges[i]), float(edges[i + 1]), int(c), int(c) / self.n)
                for i, c in enumerate(counts)]

    @staticmethod
    def downside_deviation(values: np.ndarray, target: float = 0.0) -> float:
        shortfalls = values[values < target] - target
        if shortfalls.size == 0:
            return 0.0
        return float(np.sqrt(np.mean(shortfalls ** 2)))

    def value_at_risk(self, metric: str, level: float) -> float:
        return self.percentile(metric, level)

    def conditional_value_at_risk(self, metric: str, level: float) -> float:
        """Mean of the sorted values up to and including the VaR position."""
        ordered = self.sorted_values(metric)
        return float(np.mean(ordered[:percentile_index(level, self.n) + 1]))

    def metric_risk(self, metric: str, levels: Sequence[float]) -> MetricRisk:
        values = self.values(metric)
        return MetricRisk(
            value_at_risk={level: self.value_at_risk(metric, level) for level in levels},
            conditional_value_at_risk={level: self.conditional_value_at_risk(metric, level) for level in levels},
            probability_of_loss=float(np.count_nonzero(values < 0) * 100 / self.n),
            downside_deviation=self.downside_deviation(values),
        )

    def risk_metrics(self, levels: Sequence[float]) -> RiskMetrics:
        returns = self.values('total_return')
        std = float(np.std(returns))
        return RiskMetrics(
            metrics={metric: self.metric_risk(metric, levels) for metric in DISTRIBUTION_METRICS},
            # risk-free rate of zero
            sharpe_ratio=float(np.mean(returns)) / std if std > 0 else 0.0,
            max_drawdown=float(returns.min()),
        )

    def probabilities(self, targets: TargetMetrics) -> ProbabilityAnalysis:
        df = self.df
        irr_ok = df['irr'] >= targets.minimum_irr
        cash_ok = df['monthly_cash_flow'] >= targets.minimum_cash_flow
        exit_ok = df['total_profit'] > targets.maximum_loss

        def pct(mask: pd.Series) -> float:
            return float(mask.sum() * 100 / self.n)

        return ProbabilityAnalysis(
            irr_above_target=pct(irr_ok),
            positive_cash_flow=pct(cash_ok),
            profitable_exit=pct(exit_ok),
            double_money=pct(df['equity_multiple'] >= 2),
            loss_probability=pct(df['total_return'] < 0),
            meet_all_targets=pct(irr_ok & cash_ok & exit_ok),
        )

    def correlations(self) -> CorrelationAnalysis:
        inputs = [f'input_{name}' for name in INPUT_VARIABLES]
        # Pearson is undefined for a constant series; report no correlation instead
        corr = self.df[inputs + list(DISTRIBUTION_METRICS)].corr(method='pearson').fillna(0.0).clip(-1.0, 1.0)
        matrix = {output: {name: float(corr.at[f'input_{name}', output]) for name in INPUT_VARIABLES}
                  for output in DISTRIBUTION_METRICS}
        ranking = [SensitivityEntry(name, r, impact_label(r)) for name, r in matrix['irr'].items()]
        ranking.sort(key=lambda e: abs(e.correlation), reverse=True)
        return CorrelationAnalysis(matrix, ranking)

    def key_scenarios(self) -> ScenarioAnalysis:
        by_irr = sorted(self.results, key=lambda r: r.irr, reverse=True)

        def pick(index: int, label: str) -> KeyScenario:
            return KeyScenario(label, by_irr[min(max(index, 0), self.n - 1)])

        return ScenarioAnalysis(
            best_case=pick(0, 'Best Case'),
            worst_case=pick(self.n - 1, 'Worst Case'),
            median_case=pick(self.n // 2, 'Median Case'),
            percentile_10=pick(math.floor(self.n * 0.9), '10th Percentile'),
            percentile_90=pick(math.floor(self.n * 0.1), '90th Percentile'),
        )

    def confidence_intervals(self, levels: Sequence[float]) -> Dict[str, Dict[float, ConfidenceInterval]]:
        intervals = {}
        for metric in DISTRIBUTION_METRICS:
            intervals[metric] = {}
            for level in levels:
                lower = self.percentile(metric, (100 - level) / 2)
                upper = self.percentile(metric, (100 + level) / 2)
                intervals[metric][level] = ConfidenceInterval(lower, upper, upper - lower)
        return intervals

    def summarize(self, confidence_levels: Sequence[float], targets: TargetMetrics) -> Dict[str, Any]:
        """All statistical sections of a report, keyed by section name."""
        return {
            'summary_statistics': {metric: self.describe(metric) for metric in SUMMARY_METRICS},
            'distributions': {metric: DistributionAnalysis(self.histogram(metric), self.percentiles(metric))
                              for metric in DISTRIBUTION_METRICS},
            'risk_metrics': self.risk_metrics(confidence_levels),
            'probability_analysis': self.probabilities(targets),
            'correlations': self.correlations(),
            'scenario_analysis': self.key_scenarios(),
            'confidence_intervals': self.confidence_intervals(confidence_levels),
        }

    def plot_histogram(self, metric: str = 'irr', title: str = None, bins: int = HISTOGRAM_BINS):
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.hist(self.values(metric), bins=bins, edgecolor='black')
        for p, style in ((10, '--'), (50, '-'), (90, '--')):
            ax.axvline(self.percentile(metric, p), color='red', linestyle=style, label=f'p{p}')
        ax.set_title(title or f"Distribution of {metric}")
        ax.set_xlabel(metric)
        ax.set_ylabel("Frequency")
        ax.legend()
        ax.grid(True)
        return fig

    def plot_sensitivity(self, title: str = "Input Sensitivity (correlation with IRR)"):
        ranking = self.correlations().sensitivity_ranking
        names = [e.variable for e in reversed(ranking)]
        values = [e.correlation for e in reversed(ranking)]
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.barh(names, values, color=['tab:green' if v >= 0 else 'tab:red' for v in values], edgecolor='black')
        ax.axvline(0, color='black', linewidth=0.8)
        ax.set_xlim(-1, 1)
        ax.set_title(title)
        ax.set_xlabel("Pearson correlation")
        ax.grid(True, axis='x')
        return fig
