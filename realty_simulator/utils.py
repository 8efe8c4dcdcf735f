import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import ConfigurationError
from .random_source import RandomSource

# Fallbacks used when a distribution omits its shape parameters. They are
# heuristics, not numerical requirements; override them per run if needed.
DEFAULT_STD_FRACTION = 0.1
DEFAULT_LOW_FACTOR = 0.8
DEFAULT_HIGH_FACTOR = 1.2


def _check_finite(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return value


def default_bounds(mean: float):
    """Return (low, high) around mean, ordered even when mean is negative."""
    a, b = mean * DEFAULT_LOW_FACTOR, mean * DEFAULT_HIGH_FACTOR
    return min(a, b), max(a, b)


class Distribution(ABC):
    """Abstract base for parameter distributions in Monte Carlo."""
    @abstractmethod
    def sample(self, rng: RandomSource) -> float:
        pass

    @abstractmethod
    def to_dict(self) -> Dict:
        pass


@dataclass
class NormalDistribution(Distribution):
    mean: float
    std_dev: float

    def __post_init__(self):
        self.mean = _check_finite('mean', self.mean)
        self.std_dev = _check_finite('std_dev', self.std_dev)
        if self.std_dev < 0:
            raise ConfigurationError(f"std_dev must be >= 0, got {self.std_dev}")

    def sample(self, rng: RandomSource) -> float:
        # Box-Muller; 1 - u1 lies in (0, 1] so the log is always defined
        u1 = rng.next()
        u2 = rng.next()
        if self.std_dev == 0:
            return self.mean
        z0 = math.sqrt(-2.0 * math.log(1.0 - u1)) * math.cos(2.0 * math.pi * u2)
        return self.mean + z0 * self.std_dev

    def to_dict(self) -> Dict:
        return {'type': 'normal', 'mean': self.mean, 'std_dev': self.std_dev}

    @classmethod
    def from_dict(cls, d: Dict) -> 'NormalDistribution':
        mean = _check_finite('mean', d['mean'])
        std_dev = d.get('std_dev')
        if std_dev is None:
            std_dev = abs(mean) * DEFAULT_STD_FRACTION
        return cls(mean, std_dev)


@dataclass
class UniformDistribution(Distribution):
    low: float
    high: float

    def __post_init__(self):
        self.low = _check_finite('min', self.low)
        self.high = _check_finite('max', self.high)
        if self.high < self.low:
            raise ConfigurationError(f"max ({self.high}) must be >= min ({self.low})")

    @property
    def mean(self) -> float:
        return (self.low + self.high) / 2

    def sample(self, rng: RandomSource) -> float:
        u = rng.next()
        return self.low + u * (self.high - self.low)

    def to_dict(self) -> Dict:
        return {'type': 'uniform', 'mean': self.mean, 'min': self.low, 'max': self.high}

    @classmethod
    def from_dict(cls, d: Dict) -> 'UniformDistribution':
        mean = _check_finite('mean', d['mean'])
        low, high = default_bounds(mean)
        if d.get('min') is not None:
            low = d['min']
        if d.get('max') is not None:
            high = d['max']
        return cls(low, high)


@dataclass
class TriangularDistribution(Distribution):
    """For costs with low/mode/high estimates."""
    low: float
    mode: float
    high: float

    def __post_init__(self):
        self.low = _check_finite('min', self.low)
        self.mode = _check_finite('mode', self.mode)
        self.high = _check_finite('max', self.high)
        if not self.low <= self.mode <= self.high:
            raise ConfigurationError(
                f"triangular distribution needs min <= mode <= max, got "
                f"min={self.low}, mode={self.mode}, max={self.high}")

    @property
    def mean(self) -> float:
        return (self.low + self.mode + self.high) / 3

    def sample(self, rng: RandomSource) -> float:
        u = rng.next()
        span = self.high - self.low
        if span == 0:
            return self.low
        fc = (self.mode - self.low) / span
        if u < fc:
            return self.low + math.sqrt(u * span * (self.mode - self.low))
        return self.high - math.sqrt((1 - u) * span * (self.high - self.mode))

    def to_dict(self) -> Dict:
        return {'type': 'triangular', 'mean': self.mean, 'min': self.low, 'mode': self.mode, 'max': self.high}

    @classmethod
    def from_dict(cls, d: Dict) -> 'TriangularDistribution':
        mean = _check_finite('mean', d['mean'])
        low, high = default_bounds(mean)
        if d.get('min') is not None:
            low = d['min']
        if d.get('max') is not None:
            high = d['max']
        mode = d['mode'] if d.get('mode') is not None else mean
        return cls(low, mode, high)


DISTRIBUTION_TYPES = {
    'normal': NormalDistribution,
    'uniform': UniformDistribution,
    'triangular': TriangularDistribution,
}


def create_distribution(d: Dict, default_type: Optional[str] = 'normal') -> Distribution:
    typ = d.get('type') or default_type
    if typ not in DISTRIBUTION_TYPES:
        raise ConfigurationError(
            f"Unknown distribution type: {typ!r} (expected one of {sorted(DISTRIBUTION_TYPES)})")
    if d.get('mean') is None:
        raise ConfigurationError("distribution is missing required field 'mean'")
    return DISTRIBUTION_TYPES[typ].from_dict(d)
