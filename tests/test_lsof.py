"""Tests for the lsof listening port pipeline."""

import pytest

from ports import lsof
from ports.config import LSOF_COMMAND, LSOF_REQUIRED_COLUMNS
from ports.errors import (
    ExecutableNotFound,
    MissingExpectedColumns,
    MissingHeader,
    UnexpectedCommandFailure,
)
from ports.models import ListeningPort, ProcessInfo
from ports.runner import CommandOutput


class TestHandleOutput:
    """Tests for lsof.handle_output()."""

    def test_success(self):
        """Test stdout is returned on exit 0."""
        output = CommandOutput(stdout="<stdout>", stderr="<stderr>", returncode=0)
        assert lsof.handle_output(output) == "<stdout>"

    def test_exit_1_without_stderr_means_nothing_found(self):
        """Test exit 1 with no error output gives a header-only result."""
        output = CommandOutput(stdout="<stdout>", stderr="", returncode=1)
        assert lsof.handle_output(output) == " ".join(LSOF_REQUIRED_COLUMNS)

    def test_unknown_exit_without_stderr_means_nothing_found(self):
        """Test a signal-terminated lsof with no error output is treated alike."""
        output = CommandOutput(stdout="", stderr="  \n", returncode=-9)
        assert lsof.handle_output(output) == " ".join(LSOF_REQUIRED_COLUMNS)

    def test_exit_1_with_stderr(self):
        """Test exit 1 with error output is a failure."""
        output = CommandOutput(stdout="<stdout>", stderr="<stderr>", returncode=1)
        with pytest.raises(
            UnexpectedCommandFailure,
            match="The lsof command has failed in an unexpected way.",
        ) as exc_info:
            lsof.handle_output(output)
        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr == "<stderr>"

    def test_other_exit_code_without_stderr(self):
        """Test exit codes other than 1 are failures even with no error output."""
        output = CommandOutput(stdout="", stderr="", returncode=2)
        with pytest.raises(UnexpectedCommandFailure):
            lsof.handle_output(output)


class TestExtractDetailLines:
    """Tests for lsof.extract_detail_lines_of_listening_ports()."""

    def test_regular(self):
        """Test only (LISTEN) lines are kept, without the marker."""
        lines = [
            "This is not included",
            "This is included (LISTEN)",
            "This is (ESTABLISHED) not included",
            "(LISTEN) This is included too",
        ]
        detail_lines = list(lsof.extract_detail_lines_of_listening_ports(lines))
        assert detail_lines == [
            ["This", "is", "included"],
            ["This", "is", "included", "too"],
        ]

    @pytest.mark.parametrize("marker", ["(LISTEN)", "(listen)", "(LiStEn)"])
    def test_case_insensitive(self, marker):
        """Test the marker is matched regardless of case."""
        lines = [f"docker-pr 2673 root IPv4 TCP *:333 {marker}"]
        detail_lines = list(lsof.extract_detail_lines_of_listening_ports(lines))
        assert detail_lines == [["docker-pr", "2673", "root", "IPv4", "TCP", "*:333"]]

    def test_marker_must_be_whole_value(self):
        """Test the marker inside a longer value doesn't count."""
        lines = ["foo bar(LISTEN)", "foo (LISTEN)x"]
        assert list(lsof.extract_detail_lines_of_listening_ports(lines)) == []


class TestParseListeningPorts:
    """Tests for lsof.parse_listening_ports()."""

    def test_single_line(self):
        """Test the minimal header and one listening socket."""
        output = "COMMAND PID USER TYPE NODE NAME\ndocker-pr 2673 root IPv4 TCP *:333 (LISTEN)\n"
        assert lsof.parse_listening_ports(output) == [
            ListeningPort(
                command="docker-pr",
                pid="2673",
                user="root",
                kind="IPv4",
                transport="TCP",
                address="*:333",
            )
        ]

    def test_header_only(self):
        """Test a header without detail lines gives no ports."""
        assert lsof.parse_listening_ports("COMMAND PID USER TYPE NODE NAME") == []

    def test_reordered_lowercase_header(self):
        """Test columns are mapped through the header, not fixed positions."""
        output = "name node type user pid command\n*:80 TCP IPv6 www 99 nginx (LISTEN)\n"
        [port] = lsof.parse_listening_ports(output)
        assert port.command == "nginx"
        assert port.pid == "99"
        assert port.address == "*:80"

    def test_empty_output(self):
        """Test empty output is a missing header."""
        with pytest.raises(MissingHeader):
            lsof.parse_listening_ports("")

    def test_missing_column(self):
        """Test a header without NAME is rejected."""
        with pytest.raises(MissingExpectedColumns, match="lsof"):
            lsof.parse_listening_ports("COMMAND PID USER TYPE NODE\n")

    def test_recorded_output(self, lsof_output):
        """Test the full recorded output keeps only listening sockets."""
        ports = lsof.parse_listening_ports(lsof_output)

        assert [port.pid for port in ports] == ["1", "612", "845", "845", "901", "2673", "7311"]
        assert {port.transport for port in ports} == {"TCP"}

        port = next(port for port in ports if port.pid == "2673")
        assert port == ListeningPort(
            command="docker-pr",
            pid="2673",
            user="root",
            kind="IPv4",
            transport="TCP",
            address="*:333",
        )

        ipv6 = ports[2]
        assert ipv6.kind == "IPv6"
        assert ipv6.address == "[::1]:631"


class TestListeningPorts:
    """Tests for lsof.listening_ports()."""

    def test_runs_lsof(self, fake_runner):
        """Test the runner is asked for lsof -i -n -P."""
        runner = fake_runner()
        ports = lsof.listening_ports(runner)

        assert runner.calls == [LSOF_COMMAND]
        assert len(ports) == 7

    def test_nothing_found(self, fake_runner):
        """Test lsof's 'nothing found' exit gives an empty list."""
        runner = fake_runner(lsof=CommandOutput(stdout="", stderr="", returncode=1))
        assert lsof.listening_ports(runner) == []

    def test_not_installed(self, fake_runner):
        """Test a missing executable propagates."""
        runner = fake_runner(lsof=ExecutableNotFound("lsof"))
        with pytest.raises(ExecutableNotFound, match="Unable to locate the lsof executable"):
            lsof.listening_ports(runner)

    def test_failure(self, fake_runner):
        """Test a failing lsof propagates."""
        runner = fake_runner(
            lsof=CommandOutput(stdout="", stderr="lsof: illegal option", returncode=1)
        )
        with pytest.raises(UnexpectedCommandFailure):
            lsof.listening_ports(runner)


class TestEnrichWithProcessInfo:
    """Tests for lsof.enrich_with_process_info()."""

    def test_regular(self):
        """Test the matching process is attached."""
        port = ListeningPort(pid="2673")
        process = ProcessInfo(pid="2673", command="/usr/bin/docker-proxy -proto tcp")
        processes = [ProcessInfo(pid="1"), process, ProcessInfo(pid="3")]

        lsof.enrich_with_process_info(port, processes)

        assert port.process_detail == process

    def test_attaches_a_copy(self):
        """Test the process list is left untouched."""
        port = ListeningPort(pid="1")
        process = ProcessInfo(pid="1", command="init")

        lsof.enrich_with_process_info(port, [process])
        port.process_detail.command = "changed"

        assert process.command == "init"

    def test_first_match_wins(self):
        """Test duplicate pids resolve to the earliest process."""
        port = ListeningPort(pid="7")
        processes = [ProcessInfo(pid="7", command="first"), ProcessInfo(pid="7", command="second")]

        lsof.enrich_with_process_info(port, processes)

        assert port.process_detail.command == "first"

    def test_missing_process(self):
        """Test no process is attached when none matches."""
        port = ListeningPort(pid="2673")
        lsof.enrich_with_process_info(port, [ProcessInfo(pid="1"), ProcessInfo(pid="26730")])
        assert port.process_detail is None

    def test_no_processes(self):
        """Test no process is attached when there are none."""
        port = ListeningPort(pid="2673")
        lsof.enrich_with_process_info(port, [])
        assert port.process_detail is None
