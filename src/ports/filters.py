"""Port allow-list: parsing of port arguments and filtering of sockets."""

import argparse
import logging
from collections.abc import Iterable

from ports.config import MAX_PORT, MIN_PORT
from ports.models import ListeningPort

logger = logging.getLogger(__name__)


def parse_port(value: str) -> int:
    """Parse a single port number, rejecting anything out of range."""
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"not a port number: {value!r}")
    port = int(value)
    if not MIN_PORT <= port <= MAX_PORT:
        raise ValueError(f"port out of range: {value!r}")
    return port


def parse_port_argument(value: str) -> range:
    """
    Parse `80` or an inclusive range `8000-8080` into a range of ports.

    Range bounds may be given in either order. Used as an argparse `type`,
    so invalid input raises ArgumentTypeError.
    """
    start, sep, end = value.partition("-")
    try:
        if sep:
            low, high = sorted((parse_port(start), parse_port(end)))
        else:
            low = high = parse_port(start)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid port or port range: '{value}'") from e
    return range(low, high + 1)


def allowed_ports(ranges: Iterable[range]) -> set[str]:
    """Union port ranges into a set of port strings, as they appear in addresses."""
    return {str(port) for ports in ranges for port in ports}


def filter_by_ports(ports: Iterable[ListeningPort], allowed: set[str]) -> list[ListeningPort]:
    """
    Keep sockets whose port number is in `allowed`.

    The port number is whatever follows the last colon of the address, so
    `*:80`, `127.0.0.1:80` and `[::1]:80` all match "80". An address with
    no colon is compared whole. An empty `allowed` keeps nothing; skip the
    call entirely when no filter was requested.
    """
    kept = [port for port in ports if port.port in allowed]
    logger.debug("Port filter kept %d sockets", len(kept))
    return kept
