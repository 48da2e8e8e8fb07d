"""
Application module - Probe registry and the scheduling orchestrator.
"""

from healthcheck_scraper.application.orchestrator import (
    HealthcheckOrchestrator,
    OrchestratorState,
)
from healthcheck_scraper.application.registry import (
    ProbeRegistry,
    default_registry,
)

__all__ = [
    "HealthcheckOrchestrator",
    "OrchestratorState",
    "ProbeRegistry",
    "default_registry",
]
