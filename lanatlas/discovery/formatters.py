"""Terminal table formatters for subnet, aggregation and topology results."""

from __future__ import annotations

from tabulate import tabulate

from lanatlas.discovery._util import _strip_hostname_suffix
from lanatlas.discovery.categorize import categorize_aggregated
from lanatlas.discovery.models import AggregatedDevice, SubnetResult, TopologyResult


def format_subnet(result: SubnetResult) -> str:
    rows = [
        ["CIDR", result.cidr],
        ["Network", result.network_address],
        ["Broadcast", result.broadcast_address],
        ["First usable", result.first_usable],
        ["Last usable", result.last_usable],
        ["Subnet mask", result.subnet_mask],
        ["Wildcard mask", result.wildcard_mask],
        ["Total hosts", result.total_hosts],
        ["Usable hosts", result.usable_hosts],
    ]
    return tabulate(rows, tablefmt="simple")


def format_devices(devices: list[AggregatedDevice]) -> str:
    """One row per aggregated device; hostnames are shortened for display."""
    if not devices:
        return "No devices discovered."
    headers = ["IP", "Name", "Protocol", "Category", "Hostnames", "Ports", "Interfaces"]
    rows = []
    for d in devices:
        rows.append(
            [
                d.ip_address,
                d.display_name,
                d.primary_protocol.value,
                categorize_aggregated(d).value,
                ", ".join(_strip_hostname_suffix(h) for h in d.hostnames) or "-",
                ", ".join(str(p) for p in d.ports) or "-",
                ", ".join(d.network_interfaces) or "-",
            ]
        )
    return tabulate(rows, headers=headers, tablefmt="simple")


def format_topology_summary(result: TopologyResult) -> str:
    s = result.summary
    rows = [
        ["CIDR", result.cidr or "-"],
        ["Subnets", s.subnet_count],
        ["Hosts", s.host_count],
        ["Discovery-only hosts", s.discovery_only_hosts],
        ["mDNS services", s.mdns_services],
        ["UPnP devices", s.upnp_devices],
        ["Nodes", s.total_nodes],
        ["Links", s.total_links],
    ]
    if result.discovery_error:
        rows.append(["Discovery error", result.discovery_error])
    return tabulate(rows, tablefmt="simple")
