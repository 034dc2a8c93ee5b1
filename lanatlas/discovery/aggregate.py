"""Merge mDNS and UPnP discovery records into one device per IP address."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from loguru import logger

from lanatlas.discovery._util import _ip_sort_key
from lanatlas.discovery.models import (
    AggregatedDevice,
    DiscoveryDeviceRecord,
    DiscoveryServiceRecord,
    PrimaryProtocol,
)
from lanatlas.discovery.resolve import resolve_device_address, resolve_service_address


class _DeviceAccumulator:
    """Mutable per-IP state while records are being merged."""

    def __init__(self, ip_address: str, protocol: PrimaryProtocol):
        self.ip_address = ip_address
        self.primary_protocol = protocol
        self.hostnames: list[str] = []
        self.service_records: list[DiscoveryServiceRecord] = []
        self.device_records: list[DiscoveryDeviceRecord] = []
        self.ports: list[int] = []
        self.network_interfaces: list[str] = []

    def add_service(self, record: DiscoveryServiceRecord) -> None:
        self.service_records.append(record)
        if record.hostname and record.hostname not in self.hostnames:
            self.hostnames.append(record.hostname)
        if record.port and record.port not in self.ports:
            self.ports.append(record.port)
        if record.network_interface and record.network_interface not in self.network_interfaces:
            self.network_interfaces.append(record.network_interface)

    def add_device(self, record: DiscoveryDeviceRecord) -> None:
        self.device_records.append(record)
        if self.service_records:
            self.primary_protocol = PrimaryProtocol.BOTH

    def finalize(self) -> AggregatedDevice:
        return AggregatedDevice(
            ip_address=self.ip_address,
            hostnames=list(self.hostnames),
            service_records=list(self.service_records),
            device_records=list(self.device_records),
            display_name=_display_name(self),
            primary_protocol=self.primary_protocol,
            ports=sorted(self.ports),
            network_interfaces=list(self.network_interfaces),
        )


def _first_device_friendly_name(acc: _DeviceAccumulator) -> Optional[str]:
    return next((d.friendly_name for d in acc.device_records if d.friendly_name), None)


def _first_service_name(acc: _DeviceAccumulator) -> Optional[str]:
    return next((s.service_name or s.name for s in acc.service_records if s.service_name or s.name), None)


def _first_hostname(acc: _DeviceAccumulator) -> Optional[str]:
    return acc.hostnames[0] if acc.hostnames else None


# Display-name candidates in precedence order; the first non-empty one wins.
_DISPLAY_NAME_CANDIDATES: list[Callable[[_DeviceAccumulator], Optional[str]]] = [
    _first_device_friendly_name,
    _first_service_name,
    _first_hostname,
]


def _display_name(acc: _DeviceAccumulator) -> str:
    for candidate in _DISPLAY_NAME_CANDIDATES:
        value = candidate(acc)
        if value:
            return value
    return acc.ip_address


def aggregate_devices(
    service_records: Iterable[DiscoveryServiceRecord],
    device_records: Iterable[DiscoveryDeviceRecord],
) -> list[AggregatedDevice]:
    """Group discovery records by resolved IP address.

    Records without a resolvable address are dropped. The result is ordered
    by numeric IPv4 value.
    """
    by_ip: dict[str, _DeviceAccumulator] = {}
    dropped = 0
    seen = 0

    for service in service_records:
        seen += 1
        ip = resolve_service_address(service)
        if not ip:
            dropped += 1
            continue
        acc = by_ip.get(ip)
        if acc is None:
            acc = by_ip[ip] = _DeviceAccumulator(ip, PrimaryProtocol.SERVICE_ONLY)
        acc.add_service(service)

    for device in device_records:
        seen += 1
        ip = resolve_device_address(device)
        if not ip:
            dropped += 1
            continue
        acc = by_ip.get(ip)
        if acc is None:
            acc = by_ip[ip] = _DeviceAccumulator(ip, PrimaryProtocol.DEVICE_ONLY)
        acc.add_device(device)

    devices = sorted((acc.finalize() for acc in by_ip.values()), key=lambda d: _ip_sort_key(d.ip_address))
    logger.debug(f"Aggregated {seen} discovery records into {len(devices)} devices ({dropped} without address)")
    return devices
