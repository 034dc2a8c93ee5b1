"""CLI entry points for subnet math, device aggregation and topology building."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from lanatlas.discovery.aggregate import aggregate_devices
from lanatlas.discovery.categorize import PROTOCOL_FILTERS, DeviceCategory, filter_records
from lanatlas.discovery.formatters import format_devices, format_subnet, format_topology_summary
from lanatlas.discovery.models import AggregatedDevice, DiscoveryScanResult, TopologyOptions, TopologySnapshot
from lanatlas.discovery.subnet import parse_and_compute
from lanatlas.discovery.topology import build_topology_result
from lanatlas.exceptions import LanAtlasError


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output",
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )


def parse_subnet_args(args: list[str] | None = None) -> argparse.Namespace:
    """Build argparse parser for the subnet calculator."""
    parser = argparse.ArgumentParser(
        prog="lanatlas subnet",
        description="Compute network, broadcast, masks and usable range for an IPv4 CIDR block",
    )
    parser.add_argument("cidr", help="CIDR block, e.g. 192.168.1.0/24")
    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    _add_common(parser)
    return parser.parse_args(args)


def parse_aggregate_args(args: list[str] | None = None) -> argparse.Namespace:
    """Build argparse parser for device aggregation."""
    parser = argparse.ArgumentParser(
        prog="lanatlas aggregate",
        description="Merge mDNS/UPnP discovery records into one device per IP address",
    )
    parser.add_argument("snapshot", help="Discovery snapshot JSON (mdnsServices / upnpDevices)")
    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "-q",
        "--query",
        default="",
        help="Keep only records whose names or types contain this text",
    )
    parser.add_argument(
        "--protocol",
        choices=PROTOCOL_FILTERS,
        default="all",
        help="Restrict to one discovery protocol (default: all)",
    )
    parser.add_argument(
        "--category",
        choices=[c.value for c in DeviceCategory],
        help="Keep only records of this device category",
    )
    _add_common(parser)
    return parser.parse_args(args)


def parse_topology_args(args: list[str] | None = None) -> argparse.Namespace:
    """Build argparse parser for topology graph building."""
    parser = argparse.ArgumentParser(
        prog="lanatlas topology",
        description="Build a root/subnet/host/service topology graph from sweep and discovery results",
    )
    parser.add_argument("snapshot", help="Topology snapshot JSON (cidr, hosts, discovery)")
    parser.add_argument(
        "--no-discovery",
        action="store_true",
        help="Ignore mDNS/UPnP records in the snapshot",
    )
    parser.add_argument(
        "--format",
        choices=["summary", "json"],
        default="summary",
        help="Output format (default: summary)",
    )
    _add_common(parser)
    return parser.parse_args(args)


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        logger.remove()
        logger.add(sys.stderr, level="INFO")


def _emit(output: str, output_path: str | None) -> None:
    if output_path:
        Path(output_path).write_text(output + "\n")
        logger.info(f"Output written to {output_path}")
    else:
        print(output)


def _devices_json(devices: list[AggregatedDevice]) -> str:
    return TypeAdapter(list[AggregatedDevice]).dump_json(devices, by_alias=True, indent=2).decode()


def run_subnet(parsed: argparse.Namespace) -> str:
    result = parse_and_compute(parsed.cidr)
    if parsed.format == "json":
        return result.model_dump_json(by_alias=True, indent=2)
    return format_subnet(result)


def run_aggregate(parsed: argparse.Namespace) -> str:
    snapshot = DiscoveryScanResult.model_validate_json(Path(parsed.snapshot).read_text())
    if snapshot.error:
        logger.warning(f"Discovery snapshot reports an error: {snapshot.error}")
    category = DeviceCategory(parsed.category) if parsed.category else None
    services, devices = filter_records(
        snapshot.mdns_services,
        snapshot.upnp_devices,
        query=parsed.query,
        protocol=parsed.protocol,
        category=category,
    )
    aggregated = aggregate_devices(services, devices)
    logger.info(f"{snapshot.total_devices} records -> {len(aggregated)} devices")
    if parsed.format == "json":
        return _devices_json(aggregated)
    return format_devices(aggregated)


def run_topology(parsed: argparse.Namespace) -> str:
    snapshot = TopologySnapshot.model_validate_json(Path(parsed.snapshot).read_text())
    options = TopologyOptions(include_discovery=not parsed.no_discovery)
    result = build_topology_result(snapshot, options)
    if parsed.format == "json":
        return result.model_dump_json(by_alias=True, indent=2)
    return format_topology_summary(result)


_RUNNERS = {
    "subnet": (parse_subnet_args, run_subnet),
    "aggregate": (parse_aggregate_args, run_aggregate),
    "topology": (parse_topology_args, run_topology),
}


def _main(command: str, args: list[str] | None) -> None:
    parse, run = _RUNNERS[command]
    parsed = parse(args)
    _setup_logging(parsed.verbose)
    try:
        output = run(parsed)
    except (LanAtlasError, ValidationError, OSError) as e:
        logger.error(f"{command}: {e}")
        sys.exit(1)
    _emit(output, parsed.output)


def subnet_main(args: list[str] | None = None) -> None:
    """Entry point for ``lanatlas subnet``."""
    _main("subnet", args)


def aggregate_main(args: list[str] | None = None) -> None:
    """Entry point for ``lanatlas aggregate``."""
    _main("aggregate", args)


def topology_main(args: list[str] | None = None) -> None:
    """Entry point for ``lanatlas topology``."""
    _main("topology", args)
