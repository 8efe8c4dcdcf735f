import logging
import threading
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import List, Optional

from .sim import TrialResult, evaluate
from .sim_builder import ScenarioGenerator
from ..config import InvestmentParameters, VariableDistributions
from ..errors import SimulationCancelled
from ..random_source import RandomSource

logger = logging.getLogger(__name__)


class SimulationRunner:
    """Runs independent scenario + cash-flow trials off one shared RandomSource.

    With ``workers > 1`` every scenario is drawn serially first and only the pure
    cash-flow evaluation is fanned out to a process pool, so the trial list is the
    same as a serial run with the same seed.
    """

    def __init__(self, params: InvestmentParameters, distributions: VariableDistributions):
        self.params = params
        self.generator = ScenarioGenerator(distributions)

    def run(self, num_simulations: int, rng: RandomSource, workers: int = 1,
            cancel_event: Optional[threading.Event] = None) -> List[TrialResult]:
        if workers > 1:
            return self._run_parallel(num_simulations, rng, workers, cancel_event)
        results = []
        for i in range(num_simulations):
            if cancel_event is not None and cancel_event.is_set():
                raise SimulationCancelled(f"simulation cancelled after {i} of {num_simulations} trials")
            scenario = self.generator.generate(rng)
            results.append(evaluate(self.params, scenario))
        self._log_convergence(results)
        return results

    def _run_parallel(self, num_simulations: int, rng: RandomSource, workers: int,
                      cancel_event: Optional[threading.Event]) -> List[TrialResult]:
        scenarios = self.generator.generate_many(num_simulations, rng)
        if cancel_event is not None and cancel_event.is_set():
            raise SimulationCancelled("simulation cancelled before evaluation")
        evaluate_one = partial(evaluate, self.params)
        chunksize = max(1, num_simulations // (workers * 4))
        results = []
        with ProcessPoolExecutor(max_workers=workers) as executor:
            for result in executor.map(evaluate_one, scenarios, chunksize=chunksize):
                if cancel_event is not None and cancel_event.is_set():
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise SimulationCancelled(
                        f"simulation cancelled after {len(results)} of {num_simulations} trials")
                results.append(result)
        self._log_convergence(results)
        return results

    @staticmethod
    def _log_convergence(results: List[TrialResult]):
        failed = sum(1 for r in results if not r.irr_converged)
        if failed:
            logger.debug("IRR root finding did not converge for %d of %d trials", failed, len(results))
