"""
Core entities - Value objects shared across the healthcheck layers.

These are plain dataclasses with no framework dependencies:
- ProbeSpec: declarative description of a probe to build
- CheckResult: outcome of a single probe check
- TunnelReadiness: parsed body of a cloudflared /ready endpoint
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict


@dataclass(frozen=True)
class ProbeSpec:
    """
    Declarative probe definition as loaded from configuration.

    Attributes:
        kind: Probe kind identifier (e.g. "cloudflared-tunnel-connector")
        scrape_target: URL probed on every tick
        notify_target: URL pinged when a check is healthy ("" disables it)
        interval_seconds: Seconds between checks; <= 0 means "use default"
    """

    kind: str
    scrape_target: str
    notify_target: str = ""
    interval_seconds: int = 0


@dataclass
class CheckResult:
    """Outcome of one probe check."""

    healthy: bool
    message: str
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    details: Dict[str, Any] = field(default_factory=dict)


def _expect_int(payload: Dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if value is None:
        return 0
    # bool is an int subclass, but true/false is not a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(
            f"field '{key}' must be an integer, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class TunnelReadiness:
    """
    Readiness payload returned by cloudflared's /ready endpoint.

    Example body: {"status": 200, "readyConnections": 4, "connectorId": "..."}
    """

    status: int
    ready_connections: int
    connector_id: str

    @classmethod
    def from_payload(cls, payload: Any) -> "TunnelReadiness":
        """
        Build a TunnelReadiness from a decoded JSON document.

        Missing and null fields take zero values. Wrong types are rejected.

        Args:
            payload: Decoded JSON value

        Returns:
            TunnelReadiness instance

        Raises:
            ValueError: If payload is not an object or a field has the wrong type
        """
        if not isinstance(payload, dict):
            raise ValueError(
                f"expected a JSON object, got {type(payload).__name__}"
            )

        connector_id = payload.get("connectorId")
        if connector_id is None:
            connector_id = ""
        if not isinstance(connector_id, str):
            raise ValueError(
                "field 'connectorId' must be a string, "
                f"got {type(connector_id).__name__}"
            )

        return cls(
            status=_expect_int(payload, "status"),
            ready_connections=_expect_int(payload, "readyConnections"),
            connector_id=connector_id,
        )

    @property
    def is_healthy(self) -> bool:
        """A tunnel is healthy when it reports 200 and at least one connection."""
        return self.status == 200 and self.ready_connections > 0

    def to_details(self) -> Dict[str, Any]:
        """Return the fields in the wire naming used for result details."""
        return {
            "status": self.status,
            "readyConnections": self.ready_connections,
            "connectorId": self.connector_id,
        }
