"""Describe running processes with `ps aux`."""

import logging
from collections.abc import Collection, Iterable, Iterator

from ports.config import PS_COLUMN_SYNONYMS, PS_COMMAND, PS_REQUIRED_COLUMNS
from ports.errors import UnexpectedCommandFailure
from ports.models import ProcessInfo
from ports.parsing import extract_header_columns, map_detail_values, split_detail_lines
from ports.runner import CommandOutput, Runner, run_command

logger = logging.getLogger(__name__)

TOOL = "ps"

# ps column -> ProcessInfo attribute
FIELDS = {
    "USER": "user",
    "PID": "pid",
    "%CPU": "cpu_percent",
    "%MEM": "mem_percent",
    "START": "start_time",
    "TIME": "elapsed_time",
    "COMMAND": "command",
}


def processes_info(pids: Collection[str], runner: Runner = run_command) -> list[ProcessInfo]:
    """
    Use ps to get info on the processes in `pids`.

    Raises:
        ExecutableNotFound: ps is not installed.
        UnexpectedCommandFailure: ps exited with an error.
        ParseError: The output does not look like ps output.
    """
    output = handle_output(runner(PS_COMMAND))
    return keep_only_relevant_pids(parse_processes(output), pids)


def parse_processes(output: str) -> list[ProcessInfo]:
    """Parse raw ps output into process records."""
    lines = iter(output.splitlines())

    header_columns = extract_header_columns(
        lines, TOOL, PS_REQUIRED_COLUMNS, synonyms=PS_COLUMN_SYNONYMS
    )
    detail_lines = extract_detail_lines_of_processes(lines)

    # COMMAND is last and its values may contain spaces
    # (e.g. `python3 -m http.server`), so it eats the rest of the line.
    # Runs of spaces get squeezed into one on the way.
    return map_detail_values(
        TOOL, header_columns, detail_lines, ProcessInfo, FIELDS, remainder="COMMAND"
    )


def handle_output(output: CommandOutput) -> str:
    """Return ps's stdout, or raise if the command failed."""
    if output.success:
        return output.stdout
    raise UnexpectedCommandFailure(TOOL, output.returncode, output.stderr)


def extract_detail_lines_of_processes(lines: Iterable[str]) -> Iterator[list[str]]:
    """Yield the values of every remaining line."""
    return split_detail_lines(lines)


def keep_only_relevant_pids(
    processes: Iterable[ProcessInfo], pids: Collection[str]
) -> list[ProcessInfo]:
    """Keep processes whose pid is in `pids`, in their original order."""
    kept = [process for process in processes if process.pid in pids]
    logger.debug("Kept %d processes out of %d requested pids", len(kept), len(pids))
    return kept
