"""
Core errors - Exception taxonomy for the healthcheck service.

Configuration errors are fatal at startup. Probe request errors and
deadline overruns only fail a single tick.
"""


class HealthcheckError(Exception):
    """Base class for all healthcheck errors."""


class ConfigError(HealthcheckError, ValueError):
    """Probe configuration is malformed or cannot be loaded."""


class UnknownProbeKindError(ConfigError):
    """A probe spec names a kind that is not registered."""

    def __init__(self, kind: str):
        super().__init__(f"unknown probe kind: {kind}")
        self.kind = kind


class ProbeRequestError(HealthcheckError):
    """The probe could not build its outbound request (e.g. malformed URL)."""


class CheckDeadlineExceeded(HealthcheckError):
    """A probe check did not finish within its deadline."""


class OrchestratorStateError(HealthcheckError, RuntimeError):
    """An orchestrator operation was called in the wrong lifecycle state."""
