"""
Cloudflared tunnel probe - Checks a cloudflared connector's /ready endpoint.

This adapter implements the Probe port using requests. The endpoint answers
with a JSON body such as:

    {"status": 200, "readyConnections": 4, "connectorId": "..."}

The tunnel is considered healthy when the HTTP status is 200, the reported
status is 200 and at least one connection is ready.
"""

import logging
from typing import Optional

import requests  # type: ignore

from healthcheck_scraper.core.entities import (
    CheckResult,
    ProbeSpec,
    TunnelReadiness,
)
from healthcheck_scraper.core.errors import ProbeRequestError
from healthcheck_scraper.core.ports import DEFAULT_INTERVAL_SECONDS, Probe

logger = logging.getLogger(__name__)

CLOUDFLARED_TUNNEL_KIND = "cloudflared-tunnel-connector"
CLIENT_TIMEOUT_SECONDS = 10

# Raised by requests before any I/O when the URL itself is unusable
_REQUEST_BUILD_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
)


class AdapterCloudflaredTunnelProbe(Probe):
    """
    Adapter that implements Probe for cloudflared tunnel connectors.

    Each instance owns its own requests.Session, so probes never share
    connection state.
    """

    def __init__(
        self,
        scrape_target: str,
        notify_target: str = "",
        interval_seconds: int = 0,
        client_timeout: float = CLIENT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the probe.

        Args:
            scrape_target: URL of the connector's /ready endpoint
            notify_target: URL pinged on healthy checks ("" disables it)
            interval_seconds: Check interval; <= 0 falls back to 30 seconds
            client_timeout: Transport timeout applied to every request
            session: Optional requests.Session (a new one is created if None)
        """
        if interval_seconds <= 0:
            interval_seconds = DEFAULT_INTERVAL_SECONDS

        self.scrape_target = scrape_target
        self._notify_target = notify_target
        self._interval_seconds = interval_seconds
        self.client_timeout = client_timeout
        self.session = session or requests.Session()

    @classmethod
    def from_spec(cls, spec: ProbeSpec) -> "AdapterCloudflaredTunnelProbe":
        """Build a probe from a ProbeSpec."""
        return cls(
            scrape_target=spec.scrape_target,
            notify_target=spec.notify_target,
            interval_seconds=spec.interval_seconds,
        )

    def kind(self) -> str:
        return CLOUDFLARED_TUNNEL_KIND

    def notify_target(self) -> str:
        return self._notify_target

    def interval(self) -> int:
        return self._interval_seconds

    def check(self, timeout: float) -> CheckResult:
        """
        Call the /ready endpoint and evaluate the tunnel state.

        Args:
            timeout: Caller deadline in seconds; the request timeout is the
                     smaller of this and the client timeout

        Returns:
            CheckResult describing the tunnel state

        Raises:
            ProbeRequestError: If scrape_target is not a usable URL
        """
        logger.debug(
            "Starting cloudflared tunnel healthcheck",
            extra={"url": self.scrape_target},
        )

        request_timeout = min(self.client_timeout, timeout)

        try:
            response = self.session.get(self.scrape_target, timeout=request_timeout)
        except _REQUEST_BUILD_ERRORS as e:
            raise ProbeRequestError(f"failed to create request: {e}") from e
        except requests.exceptions.RequestException as e:
            return CheckResult(
                healthy=False,
                message=f"Failed to connect to {self.scrape_target}: {e}",
                details={"error": str(e)},
            )

        with response:
            if response.status_code != 200:
                return CheckResult(
                    healthy=False,
                    message=(
                        f"HTTP status {response.status_code} "
                        f"from {self.scrape_target}"
                    ),
                    details={"status_code": response.status_code},
                )

            try:
                readiness = TunnelReadiness.from_payload(response.json())
            except ValueError as e:
                # requests' JSONDecodeError is a ValueError as well
                return CheckResult(
                    healthy=False,
                    message=(
                        f"Failed to parse response from {self.scrape_target}: {e}"
                    ),
                    details={"error": str(e)},
                )

        healthy = readiness.is_healthy
        if healthy:
            message = (
                f"Tunnel healthy with {readiness.ready_connections} "
                "ready connections"
            )
        else:
            message = (
                f"Tunnel unhealthy: status={readiness.status}, "
                f"readyConnections={readiness.ready_connections}"
            )

        logger.info(
            "Cloudflared tunnel healthcheck completed",
            extra={
                "status": readiness.status,
                "readyConnections": readiness.ready_connections,
                "connectorId": readiness.connector_id,
                "healthy": healthy,
            },
        )

        return CheckResult(
            healthy=healthy,
            message=message,
            details=readiness.to_details(),
        )
