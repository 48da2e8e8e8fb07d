"""
Core ports - Interfaces implemented by adapters.

The orchestrator depends only on these abstractions, so new probe kinds
or notification channels can be added without touching it.
"""

from abc import ABC, abstractmethod

from healthcheck_scraper.core.entities import CheckResult

DEFAULT_INTERVAL_SECONDS = 30


class Probe(ABC):
    """
    Port for a single external health check.

    Implementations are bound to one ProbeSpec and never change after
    construction.
    """

    @abstractmethod
    def kind(self) -> str:
        """Return the kind identifier matching the configuration."""

    @abstractmethod
    def notify_target(self) -> str:
        """Return the URL to notify on success ("" means no notification)."""

    @abstractmethod
    def interval(self) -> int:
        """Return the check interval in seconds (always > 0)."""

    @abstractmethod
    def check(self, timeout: float) -> CheckResult:
        """
        Perform one probe attempt.

        Ordinary failures (connection refused, timeout, bad status, malformed
        payload) are reported as an unhealthy CheckResult, never raised.

        Args:
            timeout: Upper bound in seconds for the attempt

        Returns:
            CheckResult for this attempt

        Raises:
            ProbeRequestError: If the outbound request cannot be built
        """


class Notifier(ABC):  # pylint: disable=too-few-public-methods
    """Port for signalling a healthy check downstream."""

    @abstractmethod
    def notify(self, target: str) -> None:
        """
        Send a best-effort notification to target.

        Must not raise. An empty target is a no-op.

        Args:
            target: Notification URL
        """
