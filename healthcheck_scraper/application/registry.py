"""
Probe registry - Builds Probe instances from declarative specs.

The registry maps a kind string to a constructor. The orchestrator only
talks to the registry, so adding a probe kind means registering one more
constructor here.
"""

import logging
from typing import Callable, Dict, List

from healthcheck_scraper.adapters.probes import (
    CLOUDFLARED_TUNNEL_KIND,
    AdapterCloudflaredTunnelProbe,
)
from healthcheck_scraper.core.entities import ProbeSpec
from healthcheck_scraper.core.errors import UnknownProbeKindError
from healthcheck_scraper.core.ports import Probe

logger = logging.getLogger(__name__)

ProbeConstructor = Callable[[ProbeSpec], Probe]


class ProbeRegistry:
    """Mapping from probe kind to the constructor that builds it."""

    def __init__(self):
        self._constructors: Dict[str, ProbeConstructor] = {}

    def register(self, kind: str, constructor: ProbeConstructor) -> None:
        """
        Register a constructor for a probe kind.

        Args:
            kind: Kind identifier used in configuration
            constructor: Callable taking a ProbeSpec and returning a Probe

        Raises:
            ValueError: If kind is empty or already registered
        """
        if not kind:
            raise ValueError("Probe kind must be a non-empty string")
        if kind in self._constructors:
            raise ValueError(f"Probe kind already registered: {kind}")
        self._constructors[kind] = constructor
        logger.debug("Registered probe kind %s", kind, extra={"probe_kind": kind})

    def kinds(self) -> List[str]:
        """Return the registered kinds, sorted."""
        return sorted(self._constructors)

    def build(self, spec: ProbeSpec) -> Probe:
        """
        Build a probe for spec.

        Args:
            spec: Probe definition

        Returns:
            Probe bound to spec

        Raises:
            UnknownProbeKindError: If spec.kind is not registered
        """
        constructor = self._constructors.get(spec.kind)
        if constructor is None:
            raise UnknownProbeKindError(spec.kind)
        return constructor(spec)


def default_registry() -> ProbeRegistry:
    """Return a registry with every built-in probe kind registered."""
    registry = ProbeRegistry()
    registry.register(
        CLOUDFLARED_TUNNEL_KIND, AdapterCloudflaredTunnelProbe.from_spec
    )
    return registry
