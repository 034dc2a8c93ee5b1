"""IPv4 CIDR arithmetic: masks, network/broadcast, usable range and host counts."""

from __future__ import annotations

from lanatlas.discovery._util import _int_to_ip, _ip_to_int
from lanatlas.discovery.models import SubnetResult
from lanatlas.exceptions import InvalidCidrError

_FULL_MASK = 0xFFFFFFFF


def _parse_octets(cidr: str, ip_part: str) -> list[int]:
    parts = ip_part.split(".")
    if len(parts) != 4:
        raise InvalidCidrError(cidr, f"expected 4 octets, got {len(parts)}")
    octets: list[int] = []
    for part in parts:
        if not part.isascii() or not part.isdigit():
            raise InvalidCidrError(cidr, f"octet {part!r} is not a number")
        value = int(part)
        if value > 255:
            raise InvalidCidrError(cidr, f"octet {value} out of range 0-255")
        octets.append(value)
    return octets


def _parse_prefix(cidr: str, prefix_part: str) -> int:
    if not prefix_part.isascii() or not prefix_part.isdigit():
        raise InvalidCidrError(cidr, f"prefix {prefix_part!r} is not a number")
    prefix = int(prefix_part)
    if prefix > 32:
        raise InvalidCidrError(cidr, f"prefix {prefix} out of range 0-32")
    return prefix


def _mask_from_prefix(prefix: int) -> int:
    if prefix <= 0:
        return 0
    return (_FULL_MASK << (32 - prefix)) & _FULL_MASK


def parse_and_compute(cidr: str) -> SubnetResult:
    """Compute the address block described by ``"<ipv4>/<prefix>"``.

    /31 and /32 follow point-to-point and single-host semantics: no address is
    reserved for network or broadcast, so every address in the block is usable.

    Raises:
        InvalidCidrError: the string is not a dotted quad with an integer
            prefix in 0-32.
    """
    text = cidr.strip()
    pieces = text.split("/")
    if len(pieces) != 2 or not pieces[0]:
        raise InvalidCidrError(cidr, "expected '<ipv4>/<prefix>'")

    octets = _parse_octets(cidr, pieces[0])
    prefix = _parse_prefix(cidr, pieces[1])

    ip_int = _ip_to_int(octets)
    mask = _mask_from_prefix(prefix)
    wildcard = ~mask & _FULL_MASK
    network = ip_int & mask
    broadcast = network | wildcard

    total_hosts = 1 if prefix == 32 else 2 ** (32 - prefix)
    if prefix <= 30:
        usable_hosts = max(0, total_hosts - 2)
        first_usable = network + 1
        last_usable = broadcast - 1
    else:
        usable_hosts = total_hosts
        first_usable = network
        last_usable = broadcast

    return SubnetResult(
        cidr=cidr,
        network_address=_int_to_ip(network),
        broadcast_address=_int_to_ip(broadcast),
        first_usable=_int_to_ip(first_usable),
        last_usable=_int_to_ip(last_usable),
        subnet_mask=_int_to_ip(mask),
        wildcard_mask=_int_to_ip(wildcard),
        total_hosts=total_hosts,
        usable_hosts=usable_hosts,
    )


def subnet_key(ip: str) -> str:
    """Return the /24 cluster key for ``ip``.

    Addresses with fewer than three dot-separated parts become their own key.
    """
    parts = ip.split(".")
    if len(parts) < 3:
        return ip
    return f"{parts[0]}.{parts[1]}.{parts[2]}.0/24"
