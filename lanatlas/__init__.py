"""Discovery aggregation and topology-graph library.

Merges already-parsed mDNS/UPnP discovery records and subnet sweep results
into per-IP devices and a root/subnet/host/service topology graph. Also
provides standalone IPv4 CIDR arithmetic.
"""

__version__ = "0.1.0"

import os
import sys
from typing import Any, Callable, Dict

from loguru import logger as glogger

glogger.disable(__name__)


def _loguru_skiplog_filter(record: dict) -> bool:  # type: ignore[type-arg]
    """Filter function to hide records with ``extra['skiplog']`` set."""
    return not record.get("extra", {}).get("skiplog", False)


def configure_logging(
    loguru_filter: Callable[[Dict[str, Any]], bool] = _loguru_skiplog_filter,
) -> None:
    """Configure a default ``loguru`` sink with a convenient format and filter."""
    os.environ["LOGURU_LEVEL"] = os.getenv("LOGURU_LEVEL", "DEBUG")
    glogger.remove()
    logger_fmt: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>::<cyan>{extra[classname]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )
    glogger.add(sys.stderr, level=os.getenv("LOGURU_LEVEL"), format=logger_fmt, filter=loguru_filter)  # type: ignore[arg-type]
    glogger.configure(extra={"classname": "None", "skiplog": False})
    glogger.enable(__name__)


from lanatlas.discovery.aggregate import aggregate_devices  # noqa: E402
from lanatlas.discovery.resolve import resolve_address, resolve_device_address, resolve_service_address  # noqa: E402
from lanatlas.discovery.subnet import parse_and_compute, subnet_key  # noqa: E402
from lanatlas.discovery.topology import TopologyBuilder, build_topology, build_topology_result  # noqa: E402
from lanatlas.exceptions import InvalidCidrError, LanAtlasError  # noqa: E402

__all__ = [
    "glogger",
    "configure_logging",
    "aggregate_devices",
    "build_topology",
    "build_topology_result",
    "parse_and_compute",
    "resolve_address",
    "resolve_device_address",
    "resolve_service_address",
    "subnet_key",
    "TopologyBuilder",
    "LanAtlasError",
    "InvalidCidrError",
]
