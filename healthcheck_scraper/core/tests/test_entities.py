"""
Tests for core entities.
"""

from datetime import timezone

import pytest  # type: ignore

from healthcheck_scraper.core.entities import CheckResult, TunnelReadiness


class TestTunnelReadiness:
    """Tests for TunnelReadiness.from_payload."""

    def test_full_payload(self):
        """Test every field is read."""
        readiness = TunnelReadiness.from_payload(
            {"status": 200, "readyConnections": 4, "connectorId": "abc"}
        )
        assert readiness == TunnelReadiness(200, 4, "abc")
        assert readiness.is_healthy is True

    def test_missing_fields_default_to_zero(self):
        """Test absent fields take zero values."""
        readiness = TunnelReadiness.from_payload({})
        assert readiness == TunnelReadiness(0, 0, "")
        assert readiness.is_healthy is False

    def test_null_fields_default_to_zero(self):
        """Test JSON null is read like an absent field."""
        readiness = TunnelReadiness.from_payload(
            {"status": None, "readyConnections": None, "connectorId": None}
        )
        assert readiness == TunnelReadiness(0, 0, "")

    def test_null_connector_id_with_ready_tunnel(self):
        """Test a null connector id does not turn a ready tunnel into a parse error."""
        readiness = TunnelReadiness.from_payload(
            {"status": 200, "readyConnections": 2, "connectorId": None}
        )
        assert readiness.is_healthy is True
        assert readiness.connector_id == ""

    @pytest.mark.parametrize("payload", [[], "ok", 200, None])
    def test_not_an_object(self, payload):
        """Test non-object documents are rejected."""
        with pytest.raises(ValueError):
            TunnelReadiness.from_payload(payload)

    @pytest.mark.parametrize(
        "payload",
        [
            {"status": "200"},
            {"readyConnections": 1.5},
            {"readyConnections": True},
            {"connectorId": 7},
        ],
    )
    def test_wrong_types(self, payload):
        """Test wrongly typed fields are rejected."""
        with pytest.raises(ValueError):
            TunnelReadiness.from_payload(payload)

    def test_to_details_uses_wire_names(self):
        """Test details keep the endpoint's field names."""
        assert TunnelReadiness(200, 2, "x").to_details() == {
            "status": 200,
            "readyConnections": 2,
            "connectorId": "x",
        }


class TestCheckResult:
    """Tests for CheckResult defaults."""

    def test_defaults(self):
        """Test timestamp is timezone-aware and details are independent."""
        first = CheckResult(healthy=True, message="ok")
        second = CheckResult(healthy=True, message="ok")

        assert first.timestamp.tzinfo is timezone.utc
        first.details["x"] = 1
        assert second.details == {}
