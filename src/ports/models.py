"""Data models for ports."""

from dataclasses import dataclass


@dataclass(slots=True)
class ProcessInfo:
    """One row of `ps aux` output, kept verbatim as text."""

    user: str = ""
    pid: str = ""
    cpu_percent: str = ""
    mem_percent: str = ""
    start_time: str = ""
    elapsed_time: str = ""  # ps TIME column
    command: str = ""  # May contain spaces


@dataclass(slots=True)
class ListeningPort:
    """One listening socket reported by `lsof -i`."""

    command: str = ""
    pid: str = ""
    user: str = ""
    kind: str = ""  # lsof TYPE, e.g. IPv4
    transport: str = ""  # lsof NODE, e.g. TCP
    address: str = ""  # lsof NAME, e.g. *:8080 or [::1]:631
    process_detail: ProcessInfo | None = None

    @property
    def port(self) -> str:
        """Port component of the address (after the last colon)."""
        return self.address.rpartition(":")[2]
