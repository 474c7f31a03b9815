"""
Custom exceptions for the reactor game library.
"""


class ReactorGameError(Exception):
    """Base exception for all reactor game errors."""
    pass


class InvalidTimeStepError(ReactorGameError, ValueError):
    """Elapsed time passed to the simulation is negative or not finite."""

    def __init__(self, dt):
        super().__init__(f"Time step must be a finite, non-negative number of seconds, got {dt!r}")
        self.dt = dt


class ConfigurationError(ReactorGameError):
    """Invalid configuration values."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("Invalid configuration: " + "; ".join(self.errors))


class HighScoreStoreError(ReactorGameError):
    """High score could not be persisted."""
    pass
