"""Shared fixtures for the lanatlas test suite."""

from __future__ import annotations

import pytest
from loguru import logger

from lanatlas.discovery.models import DiscoveryDeviceRecord, DiscoveryServiceRecord, ReachabilityResult

# ── discovery record factories ────────────────────────────────────────


@pytest.fixture()
def make_service():
    """Factory fixture returning a DiscoveryServiceRecord with customizable fields."""

    def _make(**kwargs):
        defaults = {
            "service_name": "printer",
            "hostname": "printer.local",
            "service_type": "_ipp._tcp",
            "ip_addresses": ["192.168.1.50"],
            "port": 631,
            "network_interface": "eth0",
        }
        defaults.update(kwargs)
        return DiscoveryServiceRecord(**defaults)

    return _make


@pytest.fixture()
def make_device():
    """Factory fixture returning a DiscoveryDeviceRecord with customizable fields."""

    def _make(**kwargs):
        defaults = {
            "usn": "uuid:0000-1111::upnp:rootdevice",
            "friendly_name": "Living Room TV",
            "device_type": "urn:schemas-upnp-org:device:MediaRenderer:1",
            "manufacturer": "Samsung",
            "model_name": "QE55",
            "location": "http://192.168.1.60:9197/dmr",
        }
        defaults.update(kwargs)
        return DiscoveryDeviceRecord(**defaults)

    return _make


@pytest.fixture()
def make_host():
    """Factory fixture returning a ReachabilityResult with customizable fields."""

    def _make(**kwargs):
        defaults = {
            "ip_address": "192.168.1.10",
            "hostname": None,
            "mac_address": "aa:bb:cc:dd:ee:ff",
            "vendor": None,
            "device_type": None,
            "roundtrip_time_ms": 2,
        }
        defaults.update(kwargs)
        return ReachabilityResult(**defaults)

    return _make


@pytest.fixture(autouse=True)
def _reset_loguru():
    """Drop sinks added by CLI entry points so they do not outlive the test's captured streams."""
    yield
    logger.remove()
    logger.disable("lanatlas")
