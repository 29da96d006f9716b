"""List listening sockets with `lsof -i -n -P`."""

import dataclasses
import logging
from collections.abc import Iterable, Iterator, Sequence

from ports.config import LISTEN_MARKER, LSOF_COMMAND, LSOF_REQUIRED_COLUMNS
from ports.errors import UnexpectedCommandFailure
from ports.models import ListeningPort, ProcessInfo
from ports.parsing import extract_header_columns, map_detail_values
from ports.runner import CommandOutput, Runner, run_command

logger = logging.getLogger(__name__)

TOOL = "lsof"

# lsof column -> ListeningPort attribute
FIELDS = {
    "COMMAND": "command",
    "PID": "pid",
    "USER": "user",
    "TYPE": "kind",
    "NODE": "transport",
    "NAME": "address",
}


def listening_ports(runner: Runner = run_command) -> list[ListeningPort]:
    """
    Use lsof to list listening ports.

    Raises:
        ExecutableNotFound: lsof is not installed.
        UnexpectedCommandFailure: lsof exited with an error.
        ParseError: The output does not look like lsof output.
    """
    output = handle_output(runner(LSOF_COMMAND))
    return parse_listening_ports(output)


def parse_listening_ports(output: str) -> list[ListeningPort]:
    """Parse raw lsof output into listening port records."""
    lines = iter(output.splitlines())

    header_columns = extract_header_columns(lines, TOOL, LSOF_REQUIRED_COLUMNS)
    detail_lines = extract_detail_lines_of_listening_ports(lines)

    ports = map_detail_values(TOOL, header_columns, detail_lines, ListeningPort, FIELDS)
    logger.debug("Found %d listening sockets", len(ports))
    return ports


def handle_output(output: CommandOutput) -> str:
    """
    Return lsof's stdout, or raise if the command failed.

    lsof exits 1 with nothing on stderr when no socket matches. That is an
    empty result, not an error, so a header-only output is returned instead.
    """
    if output.success:
        return output.stdout

    # A negative code means we don't know how it exited.
    nothing_found = output.returncode == 1 or output.returncode < 0
    if nothing_found and not output.stderr.strip():
        logger.debug("lsof exited %s without error output, nothing found", output.returncode)
        return " ".join(LSOF_REQUIRED_COLUMNS)

    raise UnexpectedCommandFailure(TOOL, output.returncode, output.stderr)


def extract_detail_lines_of_listening_ports(lines: Iterable[str]) -> Iterator[list[str]]:
    """
    Yield the values of lines marked (LISTEN), without the marker.

    The marker has no header column of its own and would shift the
    positional mapping if kept.
    """
    for line in lines:
        values = line.split()
        for i, value in enumerate(values):
            if value.upper() == LISTEN_MARKER:
                del values[i]
                yield values
                break


def enrich_with_process_info(port: ListeningPort, processes: Sequence[ProcessInfo]) -> None:
    """Attach a copy of the first process sharing the port's pid, if any."""
    process = next((p for p in processes if p.pid == port.pid), None)
    port.process_detail = dataclasses.replace(process) if process is not None else None

