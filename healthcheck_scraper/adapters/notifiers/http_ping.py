"""
HTTP ping notifier - Signals a healthy check with a plain GET request.

Monitoring services such as healthchecks.io expose a "ping" URL that marks a
check as alive whenever it is requested. This adapter calls that URL once,
logs the outcome and never raises.
"""

import logging
from typing import Optional

import requests  # type: ignore

from healthcheck_scraper.core.ports import Notifier

logger = logging.getLogger(__name__)

PING_TIMEOUT_SECONDS = 10


class AdapterHttpPingNotifier(Notifier):
    """
    Adapter that implements Notifier by issuing a GET to the target URL.

    Best effort only: no retries, no queueing. The response body is ignored.
    """

    def __init__(
        self,
        timeout: float = PING_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the notifier.

        Args:
            timeout: Request timeout in seconds (default: 10)
            session: Optional requests.Session (a new one is created if None)
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def notify(self, target: str) -> None:
        """
        Ping target once.

        Args:
            target: Ping URL; empty string means nothing to do
        """
        if not target:
            return

        try:
            response = self.session.get(target, timeout=self.timeout)
            response.close()
        except Exception as e:
            logger.error(
                "Failed to ping success URL %s: %s",
                target,
                e,
                extra={"url": target, "error": str(e)},
            )
            return

        logger.info(
            "Pinged success URL %s (status %d)",
            target,
            response.status_code,
            extra={"url": target, "status_code": response.status_code},
        )
