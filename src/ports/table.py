"""Render rows of text as a column-aligned table."""

from collections.abc import Sequence
from enum import Enum

COLUMN_SEPARATOR = "  "


class Alignment(Enum):
    """Alignment of a column's values within its width."""

    LEFT = "<"
    CENTER = "^"
    RIGHT = ">"


def to_table(
    headers: Sequence[str],
    alignments: Sequence[Alignment],
    rows: Sequence[Sequence[str]],
) -> str:
    """
    Format headers and rows as a table, one line per row.

    Each column is as wide as its widest value or header. Columns are
    separated by two spaces, and a left-aligned last column is not padded
    so lines never end in whitespace.

    Raises:
        ValueError: Headers, alignments and rows disagree on column count.
    """
    if not rows:
        return COLUMN_SEPARATOR.join(headers) + "\n"

    if len(headers) != len(alignments):
        raise ValueError("number of headers must match alignments")
    if any(len(row) != len(headers) for row in rows):
        raise ValueError("number of headers must match columns in data")

    widths = [
        max(len(header), *(len(row[i]) for row in rows))
        for i, header in enumerate(headers)
    ]
    last = len(headers) - 1

    def render_row(row: Sequence[str]) -> str:
        cells = []
        for i, cell in enumerate(row):
            align = alignments[i]
            if i == last and align is Alignment.LEFT:
                cells.append(cell)
            else:
                cells.append(f"{cell:{align.value}{widths[i]}}")
        return COLUMN_SEPARATOR.join(cells) + "\n"

    return render_row(headers) + "".join(render_row(row) for row in rows)
