"""Tests for lanatlas/discovery/models.py"""

import json

import pytest
from pydantic import ValidationError

from lanatlas.discovery.models import (
    DiscoveryDeviceRecord,
    DiscoveryScanResult,
    DiscoveryServiceRecord,
    NodeKind,
    PrimaryProtocol,
    ReachabilityResult,
    TopologyOptions,
    TopologySnapshot,
)


class TestEnums:
    """Tests for string-valued enums."""

    def test_primary_protocol_values(self):
        """Test wire values of PrimaryProtocol."""
        assert [p.value for p in PrimaryProtocol] == ["mdns", "upnp", "both"]

    def test_is_str_subclass(self):
        """Test enums compare equal to their wire strings."""
        assert NodeKind.HOST == "host"
        assert isinstance(NodeKind.ROOT, str)


class TestWireFormat:
    """Tests for camelCase JSON input/output."""

    def test_service_record_from_camel_case(self):
        """Test collaborator JSON populates snake_case fields."""
        record = DiscoveryServiceRecord.model_validate(
            {
                "serviceName": "printer",
                "serviceType": "_ipp._tcp",
                "ipAddresses": ["192.168.1.50"],
                "networkInterface": "en0",
                "txtRecords": {"rp": "ipp/print"},
            }
        )

        assert record.service_name == "printer"
        assert record.ip_addresses == ["192.168.1.50"]
        assert record.txt_records == {"rp": "ipp/print"}

    def test_dump_by_alias_is_camel_case(self, make_device):
        """Test output JSON uses camelCase keys."""
        data = json.loads(make_device().model_dump_json(by_alias=True))

        assert data["friendlyName"] == "Living Room TV"
        assert "friendly_name" not in data

    def test_reachability_roundtrip_time_alias(self):
        """Test the sweep's roundtripTime key is accepted."""
        host = ReachabilityResult.model_validate({"ipAddress": "10.0.0.1", "roundtripTime": 12})

        assert host.roundtrip_time_ms == 12

    def test_scan_result_accepts_mdns_devices_key(self):
        """Test mdnsDevices is accepted as an alias for mDNS services."""
        result = DiscoveryScanResult.model_validate(
            {"mdnsDevices": [{"serviceType": "_hap._tcp"}], "upnpDevices": [{"usn": "uuid:1"}]}
        )

        assert len(result.mdns_services) == 1
        assert result.total_devices == 2

    def test_snapshot_nested_documents(self):
        """Test a topology snapshot parses nested sweep and discovery data."""
        snapshot = TopologySnapshot.model_validate_json(
            '{"cidr": "10.0.0.0/24", "hosts": [{"ipAddress": "10.0.0.1"}],'
            ' "discovery": {"mdnsServices": [], "error": "timeout"}}'
        )

        assert snapshot.hosts[0].ip_address == "10.0.0.1"
        assert snapshot.discovery.error == "timeout"


class TestValidation:
    """Tests for field validation."""

    def test_usn_required(self):
        """Test an empty USN is rejected."""
        with pytest.raises(ValidationError):
            DiscoveryDeviceRecord(usn="")

    def test_negative_port_rejected(self):
        """Test ports must be non-negative."""
        with pytest.raises(ValidationError):
            DiscoveryServiceRecord(port=-1)

    def test_models_are_frozen(self, make_service):
        """Test records cannot be mutated after construction."""
        record = make_service()

        with pytest.raises(ValidationError):
            record.port = 80

    def test_list_defaults_not_shared(self):
        """Test default lists are independent per instance."""
        a = DiscoveryServiceRecord()
        b = DiscoveryServiceRecord()

        assert a.ip_addresses is not b.ip_addresses


class TestTopologyOptions:
    """Tests for TopologyOptions clamping."""

    def test_defaults(self):
        """Test default option values."""
        options = TopologyOptions()

        assert options.include_discovery is True
        assert options.discovery_duration_seconds == 6
        assert options.concurrency_limit == 100
        assert options.timeout_ms == 750

    def test_values_clamped_low(self):
        """Test values below range are raised to the minimum."""
        options = TopologyOptions(discovery_duration_seconds=0, concurrency_limit=1, timeout_ms=5)

        assert options.discovery_duration_seconds == 1
        assert options.concurrency_limit == 10
        assert options.timeout_ms == 100

    def test_values_clamped_high(self):
        """Test values above range are lowered to the maximum."""
        options = TopologyOptions(discovery_duration_seconds=120, concurrency_limit=9999, timeout_ms=60000)

        assert options.discovery_duration_seconds == 30
        assert options.concurrency_limit == 300
        assert options.timeout_ms == 5000
