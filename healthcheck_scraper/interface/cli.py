#!/usr/bin/env python3
"""
Healthcheck CLI - Process entry point for the healthcheck scraper.

Usage:
    healthcheck-scraper [--config probes.json] [--log-format json|text] [-v]

Without --config, probe definitions are read from the HEALTHCHECK_SCRAPERS
environment variable. The process runs until SIGINT or SIGTERM.

Exit codes:
    0: Clean shutdown (or nothing configured)
    1: Configuration error
"""

import argparse
import json
import logging
import select
import signal
import socket
import sys
from typing import Any, Dict, List, Optional, Sequence

from healthcheck_scraper.adapters.notifiers import AdapterHttpPingNotifier
from healthcheck_scraper.application import (
    HealthcheckOrchestrator,
    default_registry,
)
from healthcheck_scraper.config import ENV_VAR, load_config
from healthcheck_scraper.core.errors import ConfigError

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)

# Attributes every LogRecord has; anything else came in through `extra=`
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Formats each record as a single JSON object, including extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(verbose: bool = False, log_format: str = "json") -> None:
    """
    Setup logging configuration.

    Args:
        verbose: If True, enable DEBUG level logging
        log_format: "json" for one JSON object per line, "text" for plain lines
    """
    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    logging.basicConfig(level=level, handlers=[handler], force=True)


def wait_for_shutdown_signal(
    signals: Sequence[signal.Signals] = SHUTDOWN_SIGNALS,
    timeout: float = 1.0,
) -> signal.Signals:
    """
    Block until one of signals is received.

    The handler only records the signal. The interpreter also writes each
    signal to a socket registered with signal.set_wakeup_fd, and the main
    thread selects on that socket, so it returns as soon as the signal
    lands and nothing lock-based runs inside the handler.

    Must be called from the main thread.

    Args:
        signals: Signals that request shutdown
        timeout: Upper bound in seconds on each select() call

    Returns:
        The signal that was received
    """
    received: List[signal.Signals] = []

    def handler(signum, frame):  # pylint: disable=unused-argument
        received.append(signal.Signals(signum))

    wakeup_reader, wakeup_writer = socket.socketpair()
    wakeup_reader.setblocking(False)
    wakeup_writer.setblocking(False)
    previous_wakeup_fd = signal.set_wakeup_fd(wakeup_writer.fileno())
    previous = {sig: signal.signal(sig, handler) for sig in signals}
    try:
        while not received:
            readable, _, _ = select.select([wakeup_reader], [], [], timeout)
            if readable:
                wakeup_reader.recv(4096)
    finally:
        for sig, old_handler in previous.items():
            signal.signal(sig, old_handler)
        signal.set_wakeup_fd(previous_wakeup_fd)
        wakeup_reader.close()
        wakeup_writer.close()
    return received[0]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Probe health endpoints and ping a monitoring URL on success",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Probe definitions (JSON array, from --config or ${ENV_VAR}):
  [{{"healthcheck-scraper-type": "cloudflared-tunnel-connector",
    "scrape_url": "http://localhost:2000/ready",
    "ping_url": "https://hc-ping.com/<uuid>",
    "scrape_interval_seconds": 60}}]

Exit codes:
  0  - Clean shutdown, or no probes configured
  1  - Configuration error
        """,
    )

    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to a JSON file with probe definitions (default: ${ENV_VAR})",
    )

    parser.add_argument(
        "--log-format",
        choices=("json", "text"),
        default="json",
        help="Log output format (default: json)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 (clean shutdown), 1 (configuration error)
    """
    args = build_parser().parse_args(argv)

    setup_logging(verbose=args.verbose, log_format=args.log_format)

    try:
        specs = load_config(args.config)
    except ConfigError as e:
        logger.error("Failed to load configuration: %s", e)
        return 1

    if not specs:
        logger.warning("No probes configured - application will exit")
        return 0

    orchestrator = HealthcheckOrchestrator(
        registry=default_registry(),
        notifier=AdapterHttpPingNotifier(),
    )

    try:
        orchestrator.initialize(specs)
    except ConfigError as e:
        logger.error("Failed to initialize healthcheck manager: %s", e)
        return 1

    orchestrator.start()

    sig = wait_for_shutdown_signal()
    logger.info(
        "Received shutdown signal %s", sig.name, extra={"signal": sig.name}
    )

    orchestrator.stop()
    logger.info("Application shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
