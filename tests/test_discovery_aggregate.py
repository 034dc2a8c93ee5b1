"""Tests for lanatlas/discovery/aggregate.py"""

import pytest

from lanatlas.discovery.aggregate import aggregate_devices
from lanatlas.discovery.models import PrimaryProtocol


class TestAggregateDevices:
    """Tests for aggregate_devices function."""

    def test_empty_input_returns_empty_list(self):
        """Test empty inputs yield an empty list."""
        assert aggregate_devices([], []) == []

    def test_service_and_device_merge_into_one(self, make_service, make_device):
        """Test records resolving to the same IP merge, protocol 'both'."""
        service = make_service(ip_addresses=["169.254.1.2", "10.0.0.9"])
        device = make_device(location="http://10.0.0.9:1900/desc.xml")

        result = aggregate_devices([service], [device])

        assert len(result) == 1
        merged = result[0]
        assert merged.ip_address == "10.0.0.9"
        assert merged.primary_protocol == PrimaryProtocol.BOTH
        assert merged.service_records == [service]
        assert merged.device_records == [device]

    def test_service_only_protocol(self, make_service):
        """Test a device built only from mDNS records is service-only."""
        result = aggregate_devices([make_service()], [])

        assert result[0].primary_protocol == PrimaryProtocol.SERVICE_ONLY

    def test_device_only_protocol(self, make_device):
        """Test a device built only from UPnP records is device-only."""
        result = aggregate_devices([], [make_device()])

        assert result[0].primary_protocol == PrimaryProtocol.DEVICE_ONLY

    def test_unresolvable_records_are_dropped(self, make_service, make_device):
        """Test records without an address are silently skipped."""
        result = aggregate_devices(
            [make_service(ip_addresses=[])],
            [make_device(location=None, ip_address=None)],
        )

        assert result == []

    def test_unions_are_deduplicated_in_insertion_order(self, make_service):
        """Test hostnames, ports and interfaces are de-duplicated."""
        services = [
            make_service(hostname="nas.local", port=445, network_interface="eth0"),
            make_service(hostname="nas.local", port=22, network_interface="wlan0"),
            make_service(hostname="nas-alt.local", port=445, network_interface="eth0"),
        ]

        result = aggregate_devices(services, [])

        device = result[0]
        assert device.hostnames == ["nas.local", "nas-alt.local"]
        assert device.network_interfaces == ["eth0", "wlan0"]
        assert device.ports == [22, 445]
        assert len(device.service_records) == 3

    def test_zero_and_missing_ports_are_ignored(self, make_service):
        """Test port 0 and None are not added to the port set."""
        result = aggregate_devices([make_service(port=0), make_service(port=None)], [])

        assert result[0].ports == []

    def test_ports_sorted_numerically(self, make_service):
        """Test ports are sorted ascending."""
        services = [make_service(port=p) for p in (8080, 80, 443)]

        result = aggregate_devices(services, [])

        assert result[0].ports == [80, 443, 8080]


class TestDisplayName:
    """Tests for display name precedence."""

    def test_friendly_name_wins(self, make_service, make_device):
        """Test UPnP friendly name beats mDNS service name."""
        service = make_service(service_name="nas-smb", ip_addresses=["10.0.0.2"])
        device = make_device(friendly_name="NAS01", location="http://10.0.0.2/desc.xml")

        result = aggregate_devices([service], [device])

        assert result[0].display_name == "NAS01"

    def test_service_name_when_no_friendly_name(self, make_service, make_device):
        """Test service name is used when no friendly name exists."""
        service = make_service(service_name="nas-smb", ip_addresses=["10.0.0.2"])
        device = make_device(friendly_name=None, location="http://10.0.0.2/desc.xml")

        result = aggregate_devices([service], [device])

        assert result[0].display_name == "nas-smb"

    def test_legacy_name_field(self, make_service):
        """Test the legacy 'name' field is a service name fallback."""
        service = make_service(service_name=None, name="Office Printer")

        result = aggregate_devices([service], [])

        assert result[0].display_name == "Office Printer"

    def test_hostname_when_no_names(self, make_service):
        """Test first hostname is used when no names exist."""
        service = make_service(service_name=None, hostname="box.local")

        result = aggregate_devices([service], [])

        assert result[0].display_name == "box.local"

    def test_ip_is_last_resort(self, make_service):
        """Test the IP address is used when nothing else is set."""
        service = make_service(service_name=None, hostname=None, ip_addresses=["10.9.9.9"])

        result = aggregate_devices([service], [])

        assert result[0].display_name == "10.9.9.9"

    def test_first_record_in_order_wins(self, make_service):
        """Test the first record with a name determines the display name."""
        services = [
            make_service(service_name=None, name="first"),
            make_service(service_name="second"),
        ]

        result = aggregate_devices(services, [])

        assert result[0].display_name == "first"


class TestOrdering:
    """Tests for output ordering and idempotence."""

    def test_numeric_not_lexical_order(self, make_service):
        """Test devices sort by numeric IPv4 value."""
        services = [make_service(ip_addresses=[ip]) for ip in ("10.0.0.20", "10.0.0.3", "10.0.0.100")]

        result = aggregate_devices(services, [])

        assert [d.ip_address for d in result] == ["10.0.0.3", "10.0.0.20", "10.0.0.100"]

    def test_non_ipv4_keys_sort_last(self, make_service):
        """Test devices keyed by non-IPv4 addresses come after IPv4 ones."""
        services = [
            make_service(ip_addresses=["fe80::2"]),
            make_service(ip_addresses=["192.168.1.1"]),
            make_service(ip_addresses=["fe80::1"]),
        ]

        result = aggregate_devices(services, [])

        assert [d.ip_address for d in result] == ["192.168.1.1", "fe80::2", "fe80::1"]

    def test_idempotent(self, make_service, make_device):
        """Test running twice yields equal results, order included."""
        services = [make_service(ip_addresses=[f"10.0.0.{i}"]) for i in (5, 1, 3)]
        devices = [make_device(location="http://10.0.0.3/d.xml"), make_device(location="http://10.0.0.7/d.xml")]

        first = aggregate_devices(services, devices)
        second = aggregate_devices(services, devices)

        assert first == second
        assert [d.ip_address for d in first] == ["10.0.0.1", "10.0.0.3", "10.0.0.5", "10.0.0.7"]

    def test_accepts_generators(self, make_service, make_device):
        """Test one-shot iterables are accepted."""
        result = aggregate_devices(
            (make_service(ip_addresses=[ip]) for ip in ("10.0.0.2", "10.0.0.1")),
            iter([make_device(location="http://10.0.0.2/")]),
        )

        assert [d.ip_address for d in result] == ["10.0.0.1", "10.0.0.2"]
        assert result[1].primary_protocol == PrimaryProtocol.BOTH
