"""
Probes module - Probe port implementations.

This module contains adapters that implement the Probe port, one per
supported endpoint type.
"""

from healthcheck_scraper.adapters.probes.cloudflared_tunnel import (
    CLOUDFLARED_TUNNEL_KIND,
    AdapterCloudflaredTunnelProbe,
)

__all__ = [
    "AdapterCloudflaredTunnelProbe",
    "CLOUDFLARED_TUNNEL_KIND",
]
