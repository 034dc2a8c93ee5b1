"""Canonical IPv4 address resolution for mDNS and UPnP discovery records."""

from __future__ import annotations

from typing import Optional, Union
from urllib.parse import urlsplit

from loguru import logger

from lanatlas.discovery._util import _is_dotted_quad, _is_link_local
from lanatlas.discovery.models import DiscoveryDeviceRecord, DiscoveryServiceRecord

DiscoveryRecord = Union[DiscoveryServiceRecord, DiscoveryDeviceRecord]


def resolve_service_address(record: DiscoveryServiceRecord) -> Optional[str]:
    """Pick the address of an mDNS service.

    Prefers the first non-link-local dotted quad, falls back to the first
    advertised address of any form.
    """
    for ip in record.ip_addresses:
        if _is_dotted_quad(ip) and not _is_link_local(ip):
            return ip
    if record.ip_addresses:
        return record.ip_addresses[0]
    logger.trace(f"mDNS service {record.service_name or record.service_type!r} has no addresses")
    return None


def _location_host(location: str) -> str:
    """Hostname of an absolute URL, or empty string when it does not parse."""
    try:
        parts = urlsplit(location)
        if not parts.scheme or not parts.netloc:
            return ""
        return parts.hostname or ""
    except ValueError:
        return ""


def resolve_device_address(record: DiscoveryDeviceRecord) -> Optional[str]:
    """Pick the address of a UPnP device.

    The host of the description URL is authoritative; ``ip_address`` is the
    fallback when there is no URL or it has no usable host.
    """
    location = record.location or record.description_location
    if location:
        host = _location_host(location)
        if host:
            return host
    if record.ip_address:
        return record.ip_address
    logger.trace(f"UPnP device {record.usn!r} has no resolvable address")
    return None


def resolve_address(record: DiscoveryRecord) -> Optional[str]:
    """Resolve either record family to its canonical address."""
    if isinstance(record, DiscoveryServiceRecord):
        return resolve_service_address(record)
    return resolve_device_address(record)
