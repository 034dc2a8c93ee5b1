"""Discovery aggregation and topology subpackage.

Provides IPv4 CIDR arithmetic, canonical address resolution for mDNS and
UPnP records, per-IP device aggregation, and root/subnet/host/service
topology graph construction. Outputs are pydantic models that serialize
to camelCase JSON.
"""

from lanatlas.discovery.aggregate import aggregate_devices
from lanatlas.discovery.categorize import DeviceCategory, categorize_aggregated, filter_records
from lanatlas.discovery.models import (
    AggregatedDevice,
    DiscoveryDeviceRecord,
    DiscoveryScanResult,
    DiscoveryServiceRecord,
    LinkKind,
    NodeKind,
    NodeSource,
    PrimaryProtocol,
    ReachabilityResult,
    SubnetResult,
    TopologyGraph,
    TopologyLink,
    TopologyNode,
    TopologyOptions,
    TopologyResult,
    TopologySnapshot,
    TopologySummary,
)
from lanatlas.discovery.resolve import resolve_address, resolve_device_address, resolve_service_address
from lanatlas.discovery.subnet import parse_and_compute, subnet_key
from lanatlas.discovery.topology import TopologyBuilder, build_topology, build_topology_result

__all__ = [
    "aggregate_devices",
    "build_topology",
    "build_topology_result",
    "categorize_aggregated",
    "filter_records",
    "parse_and_compute",
    "resolve_address",
    "resolve_device_address",
    "resolve_service_address",
    "subnet_key",
    "TopologyBuilder",
    "AggregatedDevice",
    "DeviceCategory",
    "DiscoveryDeviceRecord",
    "DiscoveryScanResult",
    "DiscoveryServiceRecord",
    "LinkKind",
    "NodeKind",
    "NodeSource",
    "PrimaryProtocol",
    "ReachabilityResult",
    "SubnetResult",
    "TopologyGraph",
    "TopologyLink",
    "TopologyNode",
    "TopologyOptions",
    "TopologyResult",
    "TopologySnapshot",
    "TopologySummary",
]
