"""
Healthcheck scraper - Periodic health probes with success pings.

Each configured probe checks an external endpoint on its own interval. When
a check is healthy, the probe's ping URL is called so an external monitor
knows the target is alive.
"""

from healthcheck_scraper.application import (
    HealthcheckOrchestrator,
    default_registry,
)
from healthcheck_scraper.config import load_config

__all__ = ["HealthcheckOrchestrator", "default_registry", "load_config"]
