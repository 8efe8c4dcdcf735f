class ConfigurationError(ValueError):
    """Raised for invalid simulation input, always before any trial runs."""


class SimulationCancelled(RuntimeError):
    """Raised when a run is stopped through its cancel event."""
