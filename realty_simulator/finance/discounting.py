"""Net present value and internal rate of return.

One root finder serves the Monte Carlo engine and the standalone IRR analysis.
It never raises for finite cash flows: when Newton's method fails from every
starting guess and no sign change can be bracketed, the last iterate of the
primary attempt is returned clamped to the rate bounds, because a single awkward
cash-flow vector must not abort a batch of trials.
"""
import logging
import math
import warnings
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from scipy import optimize

logger = logging.getLogger(__name__)

DEFAULT_GUESS = 0.1
DEFAULT_TOLERANCE = 1e-5
DEFAULT_MAX_ITERATIONS = 100
RATE_BOUNDS = (-0.99, 10.0)
FALLBACK_GUESSES = (0.0, 0.05, 0.15, 0.25, 0.5, -0.1)


@dataclass(frozen=True)
class IRRResult:
    rate: float
    converged: bool
    iterations: int
    guess: float


def npv(rate: float, cash_flows: Sequence[float]) -> float:
    """Discount cash_flows[t] by (1 + rate) ** t; period 0 is undiscounted."""
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        return float(np.sum(flows / (1.0 + rate) ** periods))


def npv_derivative(rate: float, cash_flows: Sequence[float]) -> float:
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        return float(np.sum(-periods * flows / (1.0 + rate) ** (periods + 1)))


def _in_bounds(rate: float, bounds: Tuple[float, float]) -> bool:
    return math.isfinite(rate) and bounds[0] <= rate <= bounds[1]


def _newton(cash_flows: Sequence[float], guess: float, tolerance: float,
            max_iterations: int, bounds: Tuple[float, float]) -> IRRResult:
    with warnings.catch_warnings():
        # zero derivative and non-convergence are reported through the result instead
        warnings.simplefilter('ignore', RuntimeWarning)
        rate, info = optimize.newton(npv, guess, fprime=npv_derivative, args=(cash_flows,), tol=tolerance,
                                     maxiter=max_iterations, full_output=True, disp=False)
    rate = float(rate)
    return IRRResult(rate, bool(info.converged) and _in_bounds(rate, bounds), info.iterations, guess)


def _bracketed(cash_flows: Sequence[float], tolerance: float, max_iterations: int,
               bounds: Tuple[float, float]) -> IRRResult:
    lower, upper = bounds
    if npv(lower, cash_flows) * npv(upper, cash_flows) > 0:
        return IRRResult(math.nan, False, 0, lower)
    rate, info = optimize.brentq(npv, lower, upper, args=(cash_flows,), xtol=tolerance,
                                 maxiter=max_iterations, full_output=True, disp=False)
    return IRRResult(float(rate), bool(info.converged), info.iterations, lower)


def irr_result(cash_flows: Sequence[float],
               guess: float = DEFAULT_GUESS,
               tolerance: float = DEFAULT_TOLERANCE,
               max_iterations: int = DEFAULT_MAX_ITERATIONS,
               bounds: Tuple[float, float] = RATE_BOUNDS,
               fallback_guesses: Sequence[float] = FALLBACK_GUESSES) -> IRRResult:
    """Solve npv(rate) == 0 and report how the solution was reached.

    Newton's method is tried from ``guess`` and then from each fallback guess; a
    root outside ``bounds`` does not count. Failing that, a sign change over
    ``bounds`` is searched with Brent's method.
    """
    if len(cash_flows) < 2:
        return IRRResult(0.0, False, 0, guess)
    primary = _newton(cash_flows, guess, tolerance, max_iterations, bounds)
    if primary.converged:
        return primary
    for alternative in fallback_guesses:
        result = _newton(cash_flows, alternative, tolerance, max_iterations, bounds)
        if result.converged:
            return result
    bracketed = _bracketed(cash_flows, tolerance, max_iterations, bounds)
    if bracketed.converged:
        return bracketed

    rate = primary.rate if math.isfinite(primary.rate) else guess
    rate = min(max(rate, bounds[0]), bounds[1])
    logger.debug("IRR did not converge for %d cash flows; returning %.6f", len(cash_flows), rate)
    return IRRResult(rate, False, primary.iterations, guess)


def irr(cash_flows: Sequence[float], guess: float = DEFAULT_GUESS, **kwargs) -> float:
    """Internal rate of return as a decimal (0.1 == 10%)."""
    return irr_result(cash_flows, guess, **kwargs).rate
