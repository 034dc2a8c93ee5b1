"""Topology graph construction: root → /24 subnet → host → discovered service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from loguru import logger

from lanatlas.discovery._util import _validate_ipv4
from lanatlas.discovery.models import (
    DiscoveryDeviceRecord,
    DiscoveryServiceRecord,
    LinkKind,
    NodeKind,
    NodeSource,
    ReachabilityResult,
    TopologyGraph,
    TopologyLink,
    TopologyNode,
    TopologyOptions,
    TopologyResult,
    TopologySnapshot,
    TopologySummary,
)
from lanatlas.discovery.resolve import resolve_device_address, resolve_service_address
from lanatlas.discovery.subnet import subnet_key

ROOT_ID = "network:local"
ROOT_LABEL = "Local Network"


def _subnet_id(key: str) -> str:
    return f"subnet:{key}"


def _host_id(ip: str) -> str:
    return f"host:{ip}"


def _mdns_id(ip: str, record: DiscoveryServiceRecord) -> str:
    return f"mdns:{ip}:{record.service_type}:{record.port if record.port is not None else ''}"


def _upnp_id(ip: str, record: DiscoveryDeviceRecord) -> str:
    return f"upnp:{ip}:{record.usn}"


def _service_ipv4(record: DiscoveryServiceRecord) -> Optional[str]:
    """Resolved address if it is valid IPv4, else the first valid IPv4 advertised."""
    ip = resolve_service_address(record)
    if ip and _validate_ipv4(ip):
        return ip
    return next((a for a in record.ip_addresses if _validate_ipv4(a)), None)


class _GraphState:
    """Per-build node/link accumulator.

    Node ids, subnet keys and host IPs compare case-insensitively; links are
    unique per (source, target).
    """

    def __init__(self) -> None:
        self.nodes: list[TopologyNode] = []
        self.links: list[TopologyLink] = []
        self._index: dict[str, TopologyNode] = {}
        self._link_keys: set[tuple[str, str]] = set()
        self.subnets: dict[str, str] = {}
        self.hosts: dict[str, TopologyNode] = {}

    def add_node(self, node: TopologyNode) -> bool:
        """Append ``node`` unless its id is already present. Returns True if added."""
        key = node.id.lower()
        if key in self._index:
            return False
        self._index[key] = node
        self.nodes.append(node)
        return True

    def add_link(self, source: str, target: str, kind: LinkKind) -> None:
        key = (source.lower(), target.lower())
        if key in self._link_keys:
            return
        self._link_keys.add(key)
        self.links.append(TopologyLink(source=source, target=target, kind=kind))

    def ensure_subnet(self, key: str) -> str:
        existing = self.subnets.get(key.lower())
        if existing is not None:
            return existing
        node_id = _subnet_id(key)
        self.subnets[key.lower()] = node_id
        self.add_node(
            TopologyNode(id=node_id, kind=NodeKind.SUBNET, label=key, source=NodeSource.SCAN, subnet=key)
        )
        self.add_link(ROOT_ID, node_id, LinkKind.MEMBERSHIP)
        return node_id

    def add_host(self, ip: str, key: str, node: TopologyNode) -> TopologyNode:
        """Register a host node under subnet ``key``; the first node seen for an IP wins."""
        subnet_id = self.ensure_subnet(key)
        if self.add_node(node):
            self.add_link(subnet_id, node.id, LinkKind.MEMBERSHIP)
        host = self._index[node.id.lower()]
        self.hosts[ip.lower()] = host
        return host

    def find_host(self, ip: str) -> Optional[TopologyNode]:
        return self.hosts.get(ip.lower())


class TopologyBuilder:
    """Build a :class:`TopologyGraph` from sweep results and discovery records.

    The builder holds only its options; every :meth:`build` call starts from an
    empty graph, so identical input always yields an identical graph.
    """

    def __init__(self, options: Optional[TopologyOptions] = None):
        self.options = options or TopologyOptions()

    def build(
        self,
        hosts: Iterable[ReachabilityResult],
        service_records: Iterable[DiscoveryServiceRecord] = (),
        device_records: Iterable[DiscoveryDeviceRecord] = (),
    ) -> TopologyGraph:
        state = _GraphState()
        state.add_node(TopologyNode(id=ROOT_ID, kind=NodeKind.ROOT, label=ROOT_LABEL, source=NodeSource.SYSTEM))

        for host in hosts:
            self._add_scanned_host(state, host)

        mdns_count = 0
        upnp_count = 0
        discovery_only = 0

        if self.options.include_discovery:
            for service in service_records:
                ip = _service_ipv4(service)
                if not ip:
                    logger.trace(f"Skipping mDNS service without IPv4 address: {service.service_type}")
                    continue
                host_node = state.find_host(ip)
                if host_node is None:
                    host_node = self._add_discovery_host(state, ip, service.hostname)
                    discovery_only += 1
                self._add_mdns_leaf(state, host_node, ip, service)
                mdns_count += 1

            for device in device_records:
                ip = resolve_device_address(device)
                if not ip or not _validate_ipv4(ip):
                    logger.trace(f"Skipping UPnP device without IPv4 address: {device.usn}")
                    continue
                host_node = state.find_host(ip)
                if host_node is None:
                    host_node = self._add_discovery_host(state, ip, device.friendly_name)
                    discovery_only += 1
                self._add_upnp_leaf(state, host_node, ip, device)
                upnp_count += 1

        summary = TopologySummary(
            host_count=len(state.hosts),
            discovery_only_hosts=discovery_only,
            subnet_count=len(state.subnets),
            mdns_services=mdns_count,
            upnp_devices=upnp_count,
            total_nodes=len(state.nodes),
            total_links=len(state.links),
        )
        logger.debug(
            f"Topology: {summary.subnet_count} subnets, {summary.host_count} hosts "
            f"({summary.discovery_only_hosts} discovery-only), {summary.total_nodes} nodes, "
            f"{summary.total_links} links"
        )
        return TopologyGraph(nodes=state.nodes, links=state.links, summary=summary)

    @staticmethod
    def _add_scanned_host(state: _GraphState, host: ReachabilityResult) -> None:
        ip = host.ip_address.strip()
        if not ip:
            return
        key = subnet_key(ip)
        state.add_host(
            ip,
            key,
            TopologyNode(
                id=_host_id(ip),
                kind=NodeKind.HOST,
                label=host.hostname or ip,
                source=NodeSource.SCAN,
                ip_address=ip,
                hostname=host.hostname,
                mac_address=host.mac_address,
                vendor=host.vendor,
                device_type=host.device_type,
                subnet=key,
            ),
        )

    @staticmethod
    def _add_discovery_host(state: _GraphState, ip: str, label: Optional[str]) -> TopologyNode:
        key = subnet_key(ip)
        return state.add_host(
            ip,
            key,
            TopologyNode(
                id=_host_id(ip),
                kind=NodeKind.HOST,
                label=label or ip,
                source=NodeSource.DISCOVERY,
                ip_address=ip,
                hostname=label,
                subnet=key,
            ),
        )

    @staticmethod
    def _add_mdns_leaf(state: _GraphState, host_node: TopologyNode, ip: str, record: DiscoveryServiceRecord) -> None:
        node = TopologyNode(
            id=_mdns_id(ip, record),
            kind=NodeKind.SERVICE,
            label=record.service_name or record.name or record.service_type or ip,
            source=NodeSource.MDNS,
            ip_address=ip,
            hostname=record.hostname,
            subnet=host_node.subnet,
            service_type=record.service_type,
            port=record.port,
        )
        if state.add_node(node):
            state.add_link(host_node.id, node.id, LinkKind.SERVICE)

    @staticmethod
    def _add_upnp_leaf(state: _GraphState, host_node: TopologyNode, ip: str, record: DiscoveryDeviceRecord) -> None:
        node = TopologyNode(
            id=_upnp_id(ip, record),
            kind=NodeKind.SERVICE,
            label=record.friendly_name or record.model_name or record.usn,
            source=NodeSource.UPNP,
            ip_address=ip,
            vendor=record.manufacturer,
            device_type=record.device_type or record.notification_type,
            subnet=host_node.subnet,
            service_type=record.notification_type or record.device_type,
        )
        if state.add_node(node):
            state.add_link(host_node.id, node.id, LinkKind.SERVICE)


def build_topology(
    hosts: Iterable[ReachabilityResult],
    service_records: Iterable[DiscoveryServiceRecord] = (),
    device_records: Iterable[DiscoveryDeviceRecord] = (),
    options: Optional[TopologyOptions] = None,
) -> TopologyGraph:
    """Functional shortcut for ``TopologyBuilder(options).build(...)``."""
    return TopologyBuilder(options).build(hosts, service_records, device_records)


def build_topology_result(snapshot: TopologySnapshot, options: Optional[TopologyOptions] = None) -> TopologyResult:
    """Build the graph for a sweep + discovery snapshot and stamp it with timings.

    A discovery snapshot that carries an ``error`` is still used for whatever
    records it holds; the error is passed through as ``discovery_error``.
    """
    options = options or TopologyOptions()
    started_at = datetime.now(timezone.utc)

    discovery = snapshot.discovery if options.include_discovery else None
    discovery_error: Optional[str] = None
    if discovery is not None and discovery.error:
        discovery_error = discovery.error
        logger.warning(f"Discovery reported an error; continuing with partial results: {discovery_error}")

    graph = build_topology(
        snapshot.hosts,
        discovery.mdns_services if discovery else (),
        discovery.upnp_devices if discovery else (),
        options,
    )
    return TopologyResult(
        cidr=snapshot.cidr,
        nodes=graph.nodes,
        links=graph.links,
        summary=graph.summary,
        options=options,
        started_at=started_at,
        completed_at=datetime.now(timezone.utc),
        discovery_error=discovery_error,
    )
