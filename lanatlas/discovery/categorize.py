"""Device category classification rules and discovery record filtering."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from lanatlas.discovery.models import AggregatedDevice, DiscoveryDeviceRecord, DiscoveryServiceRecord


class DeviceCategory(str, Enum):
    PRINTER = "printer"
    MEDIA = "media"
    IOT = "iot"
    NETWORK = "network"
    STORAGE = "storage"
    OTHER = "other"


PROTOCOL_FILTERS = ("all", "mdns", "upnp")

# mDNS service-type substrings, checked in order
_SERVICE_TYPE_RULES: list[tuple[str, DeviceCategory]] = [
    ("_ipp._tcp", DeviceCategory.PRINTER),
    ("_printer._tcp", DeviceCategory.PRINTER),
    ("_pdl-datastream._tcp", DeviceCategory.PRINTER),
    ("_airplay._tcp", DeviceCategory.MEDIA),
    ("_raop._tcp", DeviceCategory.MEDIA),
    ("_googlecast._tcp", DeviceCategory.MEDIA),
    ("_spotify-connect._tcp", DeviceCategory.MEDIA),
    ("_sonos._tcp", DeviceCategory.MEDIA),
    ("_daap._tcp", DeviceCategory.MEDIA),
    ("_homekit._tcp", DeviceCategory.IOT),
    ("_hap._tcp", DeviceCategory.IOT),
    ("_hue._tcp", DeviceCategory.IOT),
    ("_smb._tcp", DeviceCategory.STORAGE),
    ("_nfs._tcp", DeviceCategory.STORAGE),
    ("_afpovertcp._tcp", DeviceCategory.STORAGE),
    ("_ftp._tcp", DeviceCategory.STORAGE),
    ("_sftp-ssh._tcp", DeviceCategory.STORAGE),
    ("_ssh._tcp", DeviceCategory.NETWORK),
    ("_http._tcp", DeviceCategory.NETWORK),
    ("_https._tcp", DeviceCategory.NETWORK),
    ("_workstation._tcp", DeviceCategory.NETWORK),
]

# UPnP device-type substrings (e.g. urn:schemas-upnp-org:device:MediaRenderer:1)
_DEVICE_TYPE_RULES: list[tuple[str, DeviceCategory]] = [
    ("MediaServer", DeviceCategory.MEDIA),
    ("MediaRenderer", DeviceCategory.MEDIA),
    ("InternetGatewayDevice", DeviceCategory.NETWORK),
    ("WANDevice", DeviceCategory.NETWORK),
    ("WFADevice", DeviceCategory.NETWORK),
    ("Printer", DeviceCategory.PRINTER),
    ("ScannerDevice", DeviceCategory.PRINTER),
    ("BasicDevice", DeviceCategory.OTHER),
]


def _match(value: str, rules: list[tuple[str, DeviceCategory]]) -> DeviceCategory:
    lower = value.lower()
    for pattern, category in rules:
        if pattern.lower() in lower:
            return category
    return DeviceCategory.OTHER


def categorize_service(record: DiscoveryServiceRecord) -> DeviceCategory:
    """Classify an mDNS service by its service type."""
    return _match(record.service_type, _SERVICE_TYPE_RULES)


def categorize_device(record: DiscoveryDeviceRecord) -> DeviceCategory:
    """Classify a UPnP device by its device type."""
    if not record.device_type:
        return DeviceCategory.OTHER
    return _match(record.device_type, _DEVICE_TYPE_RULES)


def categorize_aggregated(device: AggregatedDevice) -> DeviceCategory:
    """First specific category among the device's UPnP then mDNS records."""
    for upnp in device.device_records:
        category = categorize_device(upnp)
        if category is not DeviceCategory.OTHER:
            return category
    for mdns in device.service_records:
        category = categorize_service(mdns)
        if category is not DeviceCategory.OTHER:
            return category
    return DeviceCategory.OTHER


def _contains(value: Optional[str], query: str) -> bool:
    if not value:
        return False
    return query in value.lower()


def filter_records(
    service_records: Iterable[DiscoveryServiceRecord],
    device_records: Iterable[DiscoveryDeviceRecord],
    query: str = "",
    protocol: str = "all",
    category: Optional[DeviceCategory] = None,
) -> tuple[list[DiscoveryServiceRecord], list[DiscoveryDeviceRecord]]:
    """Filter discovery records by protocol, free-text query and category.

    ``protocol`` is one of ``all``, ``mdns`` or ``upnp``. ``query`` matches
    case-insensitively against the record's names and types.
    """
    if protocol not in PROTOCOL_FILTERS:
        raise ValueError(f"Unknown protocol filter: {protocol}")
    q = query.lower()

    services: list[DiscoveryServiceRecord] = []
    if protocol != "upnp":
        for s in service_records:
            if q and not (
                _contains(s.service_name or s.name, q) or _contains(s.hostname, q) or _contains(s.service_type, q)
            ):
                continue
            if category is not None and categorize_service(s) != category:
                continue
            services.append(s)

    devices: list[DiscoveryDeviceRecord] = []
    if protocol != "mdns":
        for d in device_records:
            if q and not (
                _contains(d.friendly_name, q)
                or _contains(d.manufacturer, q)
                or _contains(d.model_name, q)
                or _contains(d.device_type, q)
            ):
                continue
            if category is not None and categorize_device(d) != category:
                continue
            devices.append(d)

    return services, devices
