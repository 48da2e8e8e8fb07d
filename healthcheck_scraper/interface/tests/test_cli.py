"""
Tests for the healthcheck CLI.
"""

import json
import logging
import os
import signal
import threading
import time
from unittest.mock import patch

import pytest  # type: ignore

from healthcheck_scraper.config import ENV_VAR
from healthcheck_scraper.interface import cli

VALID_ENTRY = {
    "healthcheck-scraper-type": "cloudflared-tunnel-connector",
    "scrape_url": "http://127.0.0.1:1/ready",
    "ping_url": "",
    "scrape_interval_seconds": 120,
}


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestMain:
    """Tests for main()."""

    def test_no_probes_exits_cleanly(self, monkeypatch):
        """Test an empty configuration exits with 0."""
        monkeypatch.delenv(ENV_VAR, raising=False)
        assert cli.main(["--log-format", "text"]) == 0

    def test_invalid_json_exits_with_error(self, monkeypatch):
        """Test malformed configuration exits with 1."""
        monkeypatch.setenv(ENV_VAR, "invalid json")
        assert cli.main([]) == 1

    def test_unknown_kind_exits_with_error(self, monkeypatch):
        """Test an unknown probe kind aborts startup."""
        entry = dict(VALID_ENTRY, **{"healthcheck-scraper-type": "unknown"})
        monkeypatch.setenv(ENV_VAR, json.dumps([entry]))
        assert cli.main([]) == 1

    @patch("healthcheck_scraper.interface.cli.wait_for_shutdown_signal")
    @patch("healthcheck_scraper.interface.cli.HealthcheckOrchestrator")
    def test_runs_until_signal(self, mock_orchestrator, mock_wait, tmp_path):
        """Test the orchestrator is started, then stopped after a signal."""
        config_file = tmp_path / "probes.json"
        config_file.write_text(json.dumps([VALID_ENTRY]))
        mock_wait.return_value = signal.SIGTERM

        exit_code = cli.main(["--config", str(config_file)])

        assert exit_code == 0
        instance = mock_orchestrator.return_value
        instance.initialize.assert_called_once()
        instance.start.assert_called_once()
        instance.stop.assert_called_once()

    def test_missing_config_file(self, tmp_path):
        """Test a missing --config file exits with 1."""
        assert cli.main(["--config", str(tmp_path / "nope.json")]) == 1


class TestWaitForShutdownSignal:
    """Tests for signal wiring."""

    @pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="POSIX only")
    def test_returns_received_signal(self):
        """Test the received signal is returned and handlers restored."""
        previous = signal.getsignal(signal.SIGUSR1)
        timer = threading.Timer(
            0.1, os.kill, args=(os.getpid(), signal.SIGUSR1)
        )
        timer.start()

        started = time.monotonic()
        received = cli.wait_for_shutdown_signal(
            signals=(signal.SIGUSR1,), timeout=0.05
        )

        assert received is signal.SIGUSR1
        assert time.monotonic() - started < 2
        assert signal.getsignal(signal.SIGUSR1) == previous

    @pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="POSIX only")
    def test_returns_as_soon_as_signal_arrives(self):
        """Test the wait ends on delivery rather than at the next timeout."""
        timer = threading.Timer(
            0.1, os.kill, args=(os.getpid(), signal.SIGUSR1)
        )
        timer.start()

        started = time.monotonic()
        received = cli.wait_for_shutdown_signal(
            signals=(signal.SIGUSR1,), timeout=5.0
        )

        assert received is signal.SIGUSR1
        assert time.monotonic() - started < 1.0

    @pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="POSIX only")
    def test_restores_wakeup_fd(self):
        """Test the previous wakeup fd is put back afterwards."""
        previous = signal.set_wakeup_fd(-1)
        signal.set_wakeup_fd(previous)
        timer = threading.Timer(
            0.1, os.kill, args=(os.getpid(), signal.SIGUSR1)
        )
        timer.start()

        cli.wait_for_shutdown_signal(signals=(signal.SIGUSR1,), timeout=0.05)

        assert signal.set_wakeup_fd(previous) == previous


class TestJsonFormatter:
    """Tests for JSON log output."""

    def test_includes_extra_fields(self):
        """Test extra fields are emitted alongside the message."""
        record = logging.LogRecord(
            "healthcheck", logging.INFO, __file__, 1, "Healthcheck %s", ("done",), None
        )
        record.probe_kind = "cloudflared-tunnel-connector"
        record.healthy = True

        payload = json.loads(cli.JsonFormatter().format(record))

        assert payload["msg"] == "Healthcheck done"
        assert payload["level"] == "info"
        assert payload["probe_kind"] == "cloudflared-tunnel-connector"
        assert payload["healthy"] is True
        assert "args" not in payload
