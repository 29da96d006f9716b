"""
Parse the tabular text printed by tools such as lsof and ps.

Output is a header line naming the columns followed by detail lines. Values
are whitespace-delimited and positional: the n-th value of a detail line
belongs to the n-th header column. Column order and extra columns vary
between tool versions, so records are mapped through the header rather than
through fixed positions.
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import TypeVar

from ports.errors import MalformedDetailLine, MissingExpectedColumns, MissingHeader

logger = logging.getLogger(__name__)

R = TypeVar("R")


def extract_header_columns(
    lines: Iterator[str],
    tool: str,
    required: Sequence[str],
    synonyms: Mapping[str, str] | None = None,
) -> list[str]:
    """
    Consume the first line of output and return its column names.

    Names are upper-cased and, when `synonyms` is given, alternate
    spellings are replaced with their canonical name. Extra columns are
    kept in place since detail lines are positional.

    Raises:
        MissingHeader: There is no line at all.
        MissingExpectedColumns: A required column is absent.
    """
    header = next(lines, None)
    if header is None:
        raise MissingHeader(tool)

    columns = header.upper().split()
    if synonyms:
        columns = [synonyms.get(col, col) for col in columns]

    missing = [col for col in required if col not in columns]
    if missing:
        logger.debug("%s header %r lacks %s", tool, header, missing)
        raise MissingExpectedColumns(tool, missing)

    logger.debug("%s header columns: %s", tool, columns)
    return columns


def split_detail_lines(lines: Iterable[str]) -> Iterator[list[str]]:
    """Split every remaining line into its values."""
    for line in lines:
        yield line.split()


def map_detail_values(
    tool: str,
    header_columns: Sequence[str],
    detail_lines: Iterable[list[str]],
    factory: Callable[[], R],
    fields: Mapping[str, str],
    remainder: str | None = None,
) -> list[R]:
    """
    Build one record per detail line.

    Args:
        tool: Tool name, used in error messages.
        header_columns: Column names as returned by extract_header_columns().
        detail_lines: Values of each detail line.
        factory: Creates an all-default record.
        fields: Column name -> record attribute. Other columns are ignored.
        remainder: Column whose value runs to the end of the line. Its
            tokens are re-joined with single spaces.

    Raises:
        MalformedDetailLine: A line has no value for a recognized column,
            the remainder column included.
    """
    # Only recognized columns matter; positions come from the header.
    positions = [
        (index, col, fields[col])
        for index, col in enumerate(header_columns)
        if col in fields
    ]

    records = []
    for values in detail_lines:
        if not values:
            continue

        record = factory()
        for index, col, attr in positions:
            if index >= len(values):
                raise MalformedDetailLine(tool, values)
            if col == remainder:
                value = " ".join(values[index:])
            else:
                value = values[index]
            setattr(record, attr, value)

        records.append(record)

    return records
