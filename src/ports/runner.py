"""Run external commands and capture their output."""

import logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import psutil

from ports.errors import ExecutableNotFound, ExecutableNotRunnable

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CommandOutput:
    """Captured result of one finished command."""

    stdout: str
    stderr: str
    returncode: int  # Negative when the process was killed by a signal

    @property
    def success(self) -> bool:
        return self.returncode == 0


Runner = Callable[[Sequence[str]], CommandOutput]


def run_command(argv: Sequence[str]) -> CommandOutput:
    """
    Run a command to completion and buffer its output.

    Args:
        argv: Program name followed by its arguments.

    Raises:
        ExecutableNotFound: The program is not installed or not on PATH.
        ExecutableNotRunnable: The program exists but may not be executed.
    """
    tool = argv[0]
    logger.debug("Running %s", " ".join(argv))
    try:
        with psutil.Popen(
            list(argv),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        ) as proc:
            stdout, stderr = proc.communicate()
    except FileNotFoundError as e:
        raise ExecutableNotFound(tool) from e
    except PermissionError as e:
        raise ExecutableNotRunnable(tool) from e

    logger.debug("%s exited with %s", tool, proc.returncode)
    return CommandOutput(stdout=stdout, stderr=stderr, returncode=proc.returncode)
