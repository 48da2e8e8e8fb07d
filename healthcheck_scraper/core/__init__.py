"""
Core module - Entities, ports and errors with no framework dependencies.
"""

from healthcheck_scraper.core.entities import (
    CheckResult,
    ProbeSpec,
    TunnelReadiness,
)
from healthcheck_scraper.core.errors import (
    CheckDeadlineExceeded,
    ConfigError,
    HealthcheckError,
    OrchestratorStateError,
    ProbeRequestError,
    UnknownProbeKindError,
)
from healthcheck_scraper.core.ports import (
    DEFAULT_INTERVAL_SECONDS,
    Notifier,
    Probe,
)

__all__ = [
    "CheckDeadlineExceeded",
    "CheckResult",
    "ConfigError",
    "DEFAULT_INTERVAL_SECONDS",
    "HealthcheckError",
    "Notifier",
    "OrchestratorStateError",
    "Probe",
    "ProbeRequestError",
    "ProbeSpec",
    "TunnelReadiness",
    "UnknownProbeKindError",
]
