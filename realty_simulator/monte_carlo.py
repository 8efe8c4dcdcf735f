import datetime as dt
import logging
import threading
import time
from typing import Dict, Optional, Union

from .config import MonteCarloConfig
from .random_source import RandomSource
from .recommendations import RecommendationInputs, DOWNSIDE_LEVEL, generate_recommendations
from .results import MonteCarloReport, SimulationMetadata
from .simulation.sim_analyzer import SimulationAnalyzer
from .simulation.sim_runner import SimulationRunner

logger = logging.getLogger(__name__)


class MonteCarloSimulator:
    """Simulate thousands of scenarios to assess investment risk and return probabilities.

    Example:
        >>> report = MonteCarloSimulator().calculate({
        ...     'investment_parameters': {'purchase_price': 300000},
        ...     'variable_distributions': {
        ...         'rental_income': {'type': 'normal', 'mean': 2500, 'std_dev': 100},
        ...         'operating_expenses': {'type': 'normal', 'mean': 8000, 'std_dev': 500},
        ...     },
        ...     'simulation_settings': {'num_simulations': 1000, 'random_seed': 42},
        ... })
        >>> report.summary_statistics['irr'].mean
    """

    name = 'Monte Carlo Real Estate Simulator'

    def calculate(self, config: Union[Dict, MonteCarloConfig], workers: int = 1,
                  cancel_event: Optional[threading.Event] = None) -> MonteCarloReport:
        if not isinstance(config, MonteCarloConfig):
            config = MonteCarloConfig.from_dict(config)
        settings = config.simulation_settings

        rng = RandomSource(settings.random_seed)
        if settings.random_seed is None:
            logger.warning("No random_seed given; run seeded from the clock with %d and is not reproducible "
                           "unless that seed is reused", rng.seed)
        logger.info("Running %d simulations (seed=%d, workers=%d)", settings.num_simulations, rng.seed, workers)

        started = time.perf_counter()
        runner = SimulationRunner(config.investment_parameters, config.variable_distributions)
        trials = runner.run(settings.num_simulations, rng, workers=workers, cancel_event=cancel_event)

        analyzer = SimulationAnalyzer(trials)
        sections = analyzer.summarize(settings.confidence_levels, config.target_metrics)
        irr_stats = sections['summary_statistics']['irr']
        recommendations = generate_recommendations(RecommendationInputs(
            mean_irr=irr_stats.mean,
            irr_std_dev=irr_stats.std_dev,
            irr_probability_of_loss=sections['risk_metrics']['irr'].probability_of_loss,
            positive_cash_flow=sections['probability_analysis'].positive_cash_flow,
            irr_var_10=analyzer.value_at_risk('irr', DOWNSIDE_LEVEL),
            double_money=sections['probability_analysis'].double_money,
        ))
        elapsed = time.perf_counter() - started
        logger.info("Finished %d simulations in %.2fs (mean IRR %.2f%%)",
                    settings.num_simulations, elapsed, irr_stats.mean)

        metadata = SimulationMetadata(
            num_simulations=settings.num_simulations,
            random_seed=rng.seed,
            seed_provided=settings.random_seed is not None,
            timestamp=dt.datetime.now(dt.timezone.utc).isoformat(),
            elapsed_seconds=elapsed,
        )
        return MonteCarloReport(recommendations=recommendations, simulation_metadata=metadata, trials=trials,
                                **sections)
