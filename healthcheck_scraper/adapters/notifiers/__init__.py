"""
Notifiers module - Notifier port implementations.
"""

from healthcheck_scraper.adapters.notifiers.http_ping import (
    AdapterHttpPingNotifier,
)

__all__ = ["AdapterHttpPingNotifier"]
