"""Shared helper functions for discovery aggregation and topology building."""

from __future__ import annotations

import ipaddress
import re

_DOTTED_QUAD_RE = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+")

_LINK_LOCAL_PREFIX = "169.254."

# Hostname suffixes to strip for shorter labels
_HOSTNAME_SUFFIXES = (".local", ".lan", ".fritz.box")


def _strip_hostname_suffix(hostname: str) -> str:
    """Strip common mDNS/DNS suffixes from hostnames for shorter labels."""
    lower = hostname.lower()
    for suffix in _HOSTNAME_SUFFIXES:
        if lower.endswith(suffix):
            return hostname[: -len(suffix)]
    return hostname


def _is_dotted_quad(ip: str) -> bool:
    """Syntactic dotted-quad check; octet ranges are not verified."""
    return bool(_DOTTED_QUAD_RE.fullmatch(ip))


def _is_link_local(ip: str) -> bool:
    return ip.startswith(_LINK_LOCAL_PREFIX)


def _validate_ipv4(ip: str) -> bool:
    """Validate IPv4 address string."""
    try:
        ipaddress.IPv4Address(ip)
        return True
    except ValueError:
        return False


def _ip_to_int(octets: list[int]) -> int:
    """Pack four octets into a 32-bit unsigned integer (big-endian)."""
    return (octets[0] << 24) + (octets[1] << 16) + (octets[2] << 8) + octets[3]


def _int_to_ip(value: int) -> str:
    """Render a 32-bit unsigned integer as a dotted quad."""
    return ".".join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def _ip_sort_key(ip: str) -> tuple[int, tuple[int, ...]]:
    """Sort key ordering dotted quads numerically, anything else after them.

    Non-IPv4 keys all compare equal so a stable sort keeps their encounter order.
    """
    if _is_dotted_quad(ip):
        return (0, tuple(int(part) for part in ip.split(".")))
    return (1, ())
