"""Read delimited text tables into the column layout the builder expects."""

from __future__ import annotations

__all__ = ["FlowTable", "read_flow_table", "parse_flow_table"]

import csv
import io
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class FlowTable:
    """Parallel source/target/value columns read from a table."""

    source_column: str
    target_column: str
    value_column: str
    sources: list[str] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)
    values: list[str] = field(default_factory=list)

    @property
    def label_columns(self) -> list[list[str]]:
        return [self.sources, self.targets]

    def __len__(self) -> int:
        return len(self.values)


def _pick_column(
    header: list[str], requested: str | None, position: int, role: str
) -> int:
    """Resolve a column by header name, or fall back to its position."""
    if requested is None:
        if position >= len(header):
            raise ValueError(
                f"Table has {len(header)} columns; expected at least 3 "
                f"(no {role} column)"
            )
        return position
    stripped = [h.strip() for h in header]
    if requested in stripped:
        return stripped.index(requested)
    raise ValueError(
        f"{role.capitalize()} column '{requested}' not found. "
        f"Available columns: {', '.join(stripped)}"
    )


def parse_flow_table(
    text: str,
    source: str | None = None,
    target: str | None = None,
    value: str | None = None,
    delimiter: str = ",",
) -> FlowTable:
    """Parse a delimited table with a header row.

    Columns are picked by header name; when a name is not given the first,
    second and third columns are used for source, target and value.
    Rows that are shorter than the header are padded with empty cells.
    """
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    try:
        header = next(reader)
    except StopIteration:
        raise ValueError("Table is empty (no header row)") from None

    src_i = _pick_column(header, source, 0, "source")
    tgt_i = _pick_column(header, target, 1, "target")
    val_i = _pick_column(header, value, 2, "value")

    table = FlowTable(
        source_column=header[src_i].strip(),
        target_column=header[tgt_i].strip(),
        value_column=header[val_i].strip(),
    )
    width = max(src_i, tgt_i, val_i) + 1
    for row in reader:
        if not row or not any(cell.strip() for cell in row):
            continue
        if len(row) < width:
            row = row + [""] * (width - len(row))
        table.sources.append(row[src_i].strip())
        table.targets.append(row[tgt_i].strip())
        table.values.append(row[val_i].strip())
    return table


def read_flow_table(
    path: Path,
    source: str | None = None,
    target: str | None = None,
    value: str | None = None,
    delimiter: str = ",",
) -> FlowTable:
    """Read a delimited file from disk. See parse_flow_table()."""
    text = Path(path).read_text(encoding="utf-8-sig")
    return parse_flow_table(text, source, target, value, delimiter)
