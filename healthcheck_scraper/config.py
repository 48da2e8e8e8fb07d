"""
Healthcheck configuration - Loads and validates probe definitions.

Probe definitions are a JSON array, read from a file when a path is given
or from the HEALTHCHECK_SCRAPERS environment variable otherwise.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from healthcheck_scraper.core.entities import ProbeSpec
from healthcheck_scraper.core.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_VAR = "HEALTHCHECK_SCRAPERS"


# Configuration schema structure
# [
#   {
#     "healthcheck-scraper-type": str,
#     "scrape_url": str,
#     "ping_url": Optional[str],
#     "scrape_interval_seconds": Optional[int]
#   }
# ]


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> List[ProbeSpec]:
    """
    Load probe definitions.

    Args:
        config_path: Path to a JSON file. If None, reads HEALTHCHECK_SCRAPERS
        environ: Environment mapping (defaults to os.environ)

    Returns:
        List of ProbeSpec in configuration order (empty if nothing configured)

    Raises:
        ConfigError: If the file is missing or the JSON is invalid
    """
    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            raw = config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to read config file {config_path}: {e}") from e
        source = str(config_file)
    else:
        env = os.environ if environ is None else environ
        raw = env.get(ENV_VAR, "")
        source = ENV_VAR

    specs = parse_specs(raw, source) if raw.strip() else []

    logger.info(
        "Loaded configuration: %d probe(s) from %s",
        len(specs),
        source,
        extra={"probe_count": len(specs), "source": source},
    )
    return specs


def parse_specs(raw: str, source: str = ENV_VAR) -> List[ProbeSpec]:
    """
    Parse a JSON array of probe definitions.

    Args:
        raw: JSON text
        source: Where the text came from, used in error messages

    Returns:
        List of ProbeSpec

    Raises:
        ConfigError: If the JSON is invalid or an entry is malformed
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse {source} JSON: {e}") from e

    if not isinstance(data, list):
        raise ConfigError(f"{source} must be a JSON array of probe definitions")

    return [_validate_probe_config(index, entry) for index, entry in enumerate(data)]


def _validate_probe_config(index: int, config: Dict[str, Any]) -> ProbeSpec:
    """
    Validate a single probe definition.

    Args:
        index: Position of the entry, used in error messages
        config: Raw configuration dict

    Returns:
        Validated ProbeSpec

    Raises:
        ConfigError: If the entry is invalid
    """
    if not isinstance(config, dict):
        raise ConfigError(f"Probe definition #{index} must be an object")

    # Required fields
    for key in ("healthcheck-scraper-type", "scrape_url"):
        if key not in config:
            raise ConfigError(f"Missing required field '{key}' for probe #{index}")
        if not isinstance(config[key], str):
            raise ConfigError(f"Field '{key}' must be a string for probe #{index}")

    # Optional fields with defaults
    ping_url = config.get("ping_url", "")
    interval = config.get("scrape_interval_seconds", 0)

    if not isinstance(ping_url, str):
        raise ConfigError(f"Field 'ping_url' must be a string for probe #{index}")
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise ConfigError(
            f"Field 'scrape_interval_seconds' must be an int for probe #{index}"
        )

    return ProbeSpec(
        kind=config["healthcheck-scraper-type"],
        scrape_target=config["scrape_url"],
        notify_target=ping_url,
        interval_seconds=interval,
    )
