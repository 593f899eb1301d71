"""Plain-text table rendering.

Columns are left-justified and padded to the widest cell (header included)
plus two, then joined with two more spaces.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from .collector import ResultRow
from .formatting import round_half_up

PADDING = 2
SEPARATOR = "  "


@dataclass(frozen=True)
class Column:
    label: str
    width: int


def format_row(row: ResultRow) -> tuple[str, ...]:
    return (
        row.bench,
        str(row.size_kb),
        str(row.baseline_us),
        str(row.challenger_us),
        str(round_half_up(row.speedup, 1)),
    )


def build_columns(labels: Sequence[str], cells: Sequence[Sequence[str]]) -> list[Column]:
    for i, row in enumerate(cells):
        if len(row) != len(labels):
            raise ValueError(f"Row {i} has {len(row)} cells, expected {len(labels)}")
    return [
        Column(label=label, width=max([len(label), *(len(row[i]) for row in cells)]) + PADDING)
        for i, label in enumerate(labels)
    ]


def _render_line(columns: Sequence[Column], values: Sequence[str]) -> str:
    return SEPARATOR.join(value.ljust(col.width) for col, value in zip(columns, values))


def render_table(labels: Sequence[str], cells: Sequence[Sequence[str]]) -> list[str]:
    columns = build_columns(labels, cells)
    lines = [_render_line(columns, labels)]
    lines.extend(_render_line(columns, row) for row in cells)
    return lines


def render_rows(labels: Sequence[str], rows: Sequence[ResultRow]) -> list[str]:
    return render_table(labels, [format_row(row) for row in rows])
