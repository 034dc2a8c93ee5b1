"""Orchestrator CLI: dispatches to sub-CLIs.

Sub-commands:
  subnet     IPv4 CIDR calculator (masks, network/broadcast, usable range)
  aggregate  Merge mDNS/UPnP discovery records into one device per IP
  topology   Build a root/subnet/host/service graph from sweep + discovery

Examples:
  lanatlas subnet 192.168.1.0/24

  lanatlas aggregate discovery.json --category media

  lanatlas topology snapshot.json --format json -o topology.json
"""

from __future__ import annotations

import os
import sys

from tabulate import tabulate

from lanatlas import __version__, configure_logging
from lanatlas import glogger

COMMANDS = {
    "subnet": ("lanatlas.discovery.cli", "subnet_main", "IPv4 CIDR calculator"),
    "aggregate": ("lanatlas.discovery.cli", "aggregate_main", "Per-IP discovery aggregation"),
    "topology": ("lanatlas.discovery.cli", "topology_main", "Topology graph building"),
}


def _print_usage() -> None:
    print("usage: lanatlas <command> [options]\n")
    print("Available commands:")
    for cmd, (_, _, desc) in COMMANDS.items():
        print(f"  {cmd:14s}  {desc}")
    print("\nRun 'lanatlas <command> --help' for command-specific options.")


def _print_startup_banner() -> None:
    startup_rows = [
        ["version", __version__],
        ["python", sys.version.split()[0]],
        ["log level", os.environ.get("LOGURU_LEVEL", "DEBUG")],
    ]

    for var in ("GITHUB_REF", "GITHUB_SHA", "BUILDTIME"):
        val = os.environ.get(var)
        if val and not val.endswith("_is_undefined"):
            startup_rows.append([var, val])

    table_str = tabulate(startup_rows, tablefmt="mixed_grid")
    lines = table_str.split("\n")
    table_width = len(lines[0])
    title = "lanatlas starting up"
    title_border = "┍" + "━" * (table_width - 2) + "┑"
    title_row = "│ " + title.center(table_width - 4) + " │"
    separator = lines[0].replace("┍", "┝").replace("┑", "┥").replace("┯", "┿")

    glogger.opt(raw=True).info(
        "\n{}\n", title_border + "\n" + title_row + "\n" + separator + "\n" + "\n".join(lines[1:])
    )


def main() -> None:
    """Main entry point: dispatch to sub-CLI."""
    configure_logging()
    _print_startup_banner()

    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        _print_usage()
        sys.exit(0 if len(sys.argv) >= 2 else 1)

    command = sys.argv[1]
    if command not in COMMANDS:
        print(f"lanatlas: unknown command '{command}'\n", file=sys.stderr)
        _print_usage()
        sys.exit(1)

    module_path, func_name, _ = COMMANDS[command]

    # Import and call the sub-CLI entry point, passing remaining args
    from importlib import import_module

    module = import_module(module_path)
    getattr(module, func_name)(sys.argv[2:])


if __name__ == "__main__":
    main()
