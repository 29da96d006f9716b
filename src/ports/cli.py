"""ports - List listening ports."""

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from enum import Enum

from ports import lsof, ps
from ports.config import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV, VERSION
from ports.errors import PortsError
from ports.filters import allowed_ports, filter_by_ports, parse_port_argument
from ports.models import ListeningPort, ProcessInfo
from ports.runner import Runner, run_command
from ports.table import Alignment, to_table

logger = logging.getLogger(__name__)


class Verbosity(Enum):
    """How much detail the table shows."""

    NORMAL = 0
    VERBOSE = 1
    VERY_VERBOSE = 2


BASE_COLUMNS = [
    ("COMMAND", Alignment.LEFT),
    ("PID", Alignment.RIGHT),
    ("USER", Alignment.LEFT),
    ("TYPE", Alignment.LEFT),
    ("NODE", Alignment.LEFT),
    ("HOST:PORT", Alignment.RIGHT),
]

EXTRA_COLUMNS = {
    Verbosity.NORMAL: [],
    Verbosity.VERBOSE: [
        ("COMMAND", Alignment.LEFT),
    ],
    Verbosity.VERY_VERBOSE: [
        ("%CPU", Alignment.RIGHT),
        ("%MEM", Alignment.RIGHT),
        ("START", Alignment.RIGHT),
        ("TIME", Alignment.RIGHT),
        ("COMMAND", Alignment.LEFT),
    ],
}


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="ports",
        description="List listening ports.",
        epilog="Ports can be single numbers (80) or inclusive ranges (8000-8080).",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}",
    )
    parser.add_argument(
        "-vv",
        "--verbose",
        dest="verbosity",
        action="store_const",
        const=Verbosity.VERBOSE,
        default=Verbosity.NORMAL,
        help="show the command line of the owning process",
    )
    parser.add_argument(
        "-vvv",
        "--very-verbose",
        dest="verbosity",
        action="store_const",
        const=Verbosity.VERY_VERBOSE,
        help="show CPU, memory and timing of the owning process",
    )
    parser.add_argument(
        "ports",
        nargs="*",
        type=parse_port_argument,
        metavar="PORT",
        help="only list these ports or port ranges",
    )
    return parser


def configure_logging() -> None:
    """Send log records to stderr, at the level set in the environment."""
    level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def collect(
    verbosity: Verbosity,
    allowed: set[str] | None = None,
    runner: Runner = run_command,
) -> list[ListeningPort]:
    """
    List listening ports, filtered and enriched according to the options.

    `allowed=None` means no port filter. The filter runs before enrichment
    so ps output is only kept for pids that are shown.
    """
    listening = lsof.listening_ports(runner)

    if allowed is not None:
        listening = filter_by_ports(listening, allowed)

    if listening and verbosity is not Verbosity.NORMAL:
        pids = {port.pid for port in listening}
        processes = ps.processes_info(pids, runner)
        for port in listening:
            lsof.enrich_with_process_info(port, processes)

    return listening


def to_row(port: ListeningPort, verbosity: Verbosity) -> list[str]:
    """Table cells for one listening port."""
    row = [port.command, port.pid, port.user, port.kind, port.transport, port.address]
    process = port.process_detail or ProcessInfo()

    if verbosity is Verbosity.VERBOSE:
        row.append(process.command)
    elif verbosity is Verbosity.VERY_VERBOSE:
        row.extend(
            [
                process.cpu_percent,
                process.mem_percent,
                process.start_time,
                process.elapsed_time,
                process.command,
            ]
        )
    return row


def render(ports: Sequence[ListeningPort], verbosity: Verbosity) -> str:
    """Render listening ports as a table. Empty when there is nothing to show."""
    if not ports:
        return ""
    columns = BASE_COLUMNS + EXTRA_COLUMNS[verbosity]
    headers = [name for name, _ in columns]
    alignments = [alignment for _, alignment in columns]
    return to_table(headers, alignments, [to_row(port, verbosity) for port in ports])


def main(argv: Sequence[str] | None = None, runner: Runner = run_command) -> int:
    """Entry point for the ports command."""
    args = build_parser().parse_args(argv)
    configure_logging()

    allowed = allowed_ports(args.ports) if args.ports else None

    try:
        ports = collect(args.verbosity, allowed, runner)
    except PortsError as e:
        logger.debug("%s failed", e.tool, exc_info=True)
        print(f"ports: error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(render(ports, args.verbosity))
    return 0


if __name__ == "__main__":
    sys.exit(main())
