"""Shared fixtures: recorded tool output and a runner that replays it."""

from pathlib import Path

import pytest

from ports.runner import CommandOutput

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def lsof_output() -> str:
    """Recorded `lsof -i -n -P` output."""
    return (FIXTURES / "lsof.txt").read_text()


@pytest.fixture
def ps_output() -> str:
    """Recorded `ps aux` output, from a ps that spells START as STARTED."""
    return (FIXTURES / "ps.txt").read_text()


@pytest.fixture
def fake_runner(lsof_output, ps_output):
    """
    Build a runner that answers lsof and ps from recorded output.

    Pass a CommandOutput (or an exception to raise) per tool name to
    override the recorded answer. Every call is appended to `calls`.
    """

    def make(**overrides):
        answers = {
            "lsof": CommandOutput(stdout=lsof_output, stderr="", returncode=0),
            "ps": CommandOutput(stdout=ps_output, stderr="", returncode=0),
        }
        answers.update(overrides)

        def runner(argv):
            runner.calls.append(list(argv))
            answer = answers[argv[0]]
            if isinstance(answer, Exception):
                raise answer
            return answer

        runner.calls = []
        return runner

    return make
