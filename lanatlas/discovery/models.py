"""Pydantic models and enums for discovery aggregation and topology graphs."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Frozen model that reads and writes the collaborators' camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ── discovery input ───────────────────────────────────────────────────


class DiscoveryServiceRecord(_WireModel):
    """mDNS/DNS-SD service advertisement."""

    service_name: Optional[str] = None
    name: Optional[str] = None
    hostname: Optional[str] = None
    service_type: str = ""
    ip_addresses: list[str] = Field(default_factory=list)
    port: Optional[int] = Field(default=None, ge=0)
    network_interface: Optional[str] = None
    txt_records: dict[str, str] = Field(default_factory=dict)


class DiscoveryDeviceRecord(_WireModel):
    """UPnP/SSDP device advertisement."""

    usn: str = Field(min_length=1)
    friendly_name: Optional[str] = None
    device_type: Optional[str] = None
    notification_type: Optional[str] = None
    manufacturer: Optional[str] = None
    model_name: Optional[str] = None
    model_number: Optional[str] = None
    location: Optional[str] = None
    description_location: Optional[str] = None
    services: list[str] = Field(default_factory=list)
    ip_address: Optional[str] = None
    server: Optional[str] = None


class ReachabilityResult(_WireModel):
    """A host that answered the subnet sweep."""

    ip_address: str
    hostname: Optional[str] = None
    mac_address: Optional[str] = None
    vendor: Optional[str] = None
    device_type: Optional[str] = None
    roundtrip_time_ms: int = Field(
        default=0,
        validation_alias=AliasChoices("roundtrip_time_ms", "roundtripTimeMs", "roundtripTime"),
    )


class DiscoveryScanResult(_WireModel):
    """Combined mDNS + UPnP discovery snapshot.

    ``error`` is set by the discovery collaborator when it failed; the record
    lists then hold whatever was collected before the failure (often nothing).
    """

    mdns_services: list[DiscoveryServiceRecord] = Field(
        default_factory=list,
        validation_alias=AliasChoices("mdns_services", "mdnsServices", "mdnsDevices"),
    )
    upnp_devices: list[DiscoveryDeviceRecord] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def total_devices(self) -> int:
        return len(self.mdns_services) + len(self.upnp_devices)


# ── aggregation ───────────────────────────────────────────────────────


class PrimaryProtocol(str, Enum):
    SERVICE_ONLY = "mdns"
    DEVICE_ONLY = "upnp"
    BOTH = "both"


class AggregatedDevice(_WireModel):
    ip_address: str
    hostnames: list[str] = Field(default_factory=list)
    service_records: list[DiscoveryServiceRecord] = Field(default_factory=list)
    device_records: list[DiscoveryDeviceRecord] = Field(default_factory=list)
    display_name: str = Field(min_length=1)
    primary_protocol: PrimaryProtocol
    ports: list[int] = Field(default_factory=list)
    network_interfaces: list[str] = Field(default_factory=list)


# ── subnet arithmetic ─────────────────────────────────────────────────


class SubnetResult(_WireModel):
    cidr: str
    network_address: str
    broadcast_address: str
    first_usable: str
    last_usable: str
    subnet_mask: str
    wildcard_mask: str
    total_hosts: int = Field(ge=0)
    usable_hosts: int = Field(ge=0)


# ── topology graph ────────────────────────────────────────────────────


class NodeKind(str, Enum):
    ROOT = "root"
    SUBNET = "subnet"
    HOST = "host"
    SERVICE = "service"


class NodeSource(str, Enum):
    SYSTEM = "system"
    SCAN = "scan"
    DISCOVERY = "discovery"
    MDNS = "mdns"
    UPNP = "upnp"


class LinkKind(str, Enum):
    MEMBERSHIP = "membership"
    SERVICE = "service"


class TopologyNode(_WireModel):
    id: str
    kind: NodeKind
    label: str
    source: NodeSource
    ip_address: Optional[str] = None
    hostname: Optional[str] = None
    mac_address: Optional[str] = None
    vendor: Optional[str] = None
    device_type: Optional[str] = None
    subnet: Optional[str] = None
    service_type: Optional[str] = None
    port: Optional[int] = None


class TopologyLink(_WireModel):
    source: str
    target: str
    kind: LinkKind


class TopologySummary(_WireModel):
    host_count: int = 0
    discovery_only_hosts: int = 0
    subnet_count: int = 0
    mdns_services: int = 0
    upnp_devices: int = 0
    total_nodes: int = 0
    total_links: int = 0


class TopologyGraph(_WireModel):
    nodes: list[TopologyNode] = Field(default_factory=list)
    links: list[TopologyLink] = Field(default_factory=list)
    summary: TopologySummary = Field(default_factory=TopologySummary)


class TopologyOptions(_WireModel):
    """Call parameters for a topology run.

    Only ``include_discovery`` changes what the builder does. The remaining
    values are hints for the scanning and discovery collaborators; they are
    clamped to the ranges those collaborators accept and echoed in the result.
    """

    include_discovery: bool = True
    discovery_duration_seconds: int = 6
    concurrency_limit: int = 100
    timeout_ms: int = 750

    @field_validator("discovery_duration_seconds")
    @classmethod
    def _clamp_duration(cls, v: int) -> int:
        return min(max(v, 1), 30)

    @field_validator("concurrency_limit")
    @classmethod
    def _clamp_concurrency(cls, v: int) -> int:
        return min(max(v, 10), 300)

    @field_validator("timeout_ms")
    @classmethod
    def _clamp_timeout(cls, v: int) -> int:
        return min(max(v, 100), 5000)


class TopologySnapshot(_WireModel):
    """Input document for a topology run: sweep results plus discovery."""

    cidr: str = ""
    hosts: list[ReachabilityResult] = Field(default_factory=list)
    discovery: Optional[DiscoveryScanResult] = None


class TopologyResult(_WireModel):
    cidr: str = ""
    nodes: list[TopologyNode] = Field(default_factory=list)
    links: list[TopologyLink] = Field(default_factory=list)
    summary: TopologySummary = Field(default_factory=TopologySummary)
    options: TopologyOptions = Field(default_factory=TopologyOptions)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    discovery_error: Optional[str] = None
