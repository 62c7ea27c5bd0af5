"""Render records as an unconditionally quoted CSV document."""

import csv
import io
from typing import Any, List, Sequence

from record_export.models import (
    BoolCell,
    CellValue,
    CompositeCell,
    NullCell,
    NumberCell,
    Record,
    TextCell,
    classify_value,
    format_number,
)

CONTENT_TYPE = "text/csv"
NO_DATA_DOCUMENT = "No data available\n"


def render_cell(cell: CellValue) -> str:
    if isinstance(cell, NullCell):
        return ""
    if isinstance(cell, BoolCell):
        return "true" if cell.value else "false"
    if isinstance(cell, NumberCell):
        return format_number(cell.value)
    if isinstance(cell, TextCell):
        return cell.value
    if isinstance(cell, CompositeCell):
        return cell.text
    raise TypeError(f"Unknown cell variant: {type(cell).__name__}")


def encode_value(value: Any) -> str:
    return render_cell(classify_value(value))


def encode(records: Sequence[Record], schema: List[str]) -> str:
    """Every cell is quoted, embedded quotes are doubled, rows end with a newline."""
    if not records:
        return NO_DATA_DOCUMENT

    buf = io.StringIO()
    writer = csv.writer(
        buf, quoting=csv.QUOTE_ALL, doublequote=True, lineterminator="\n"
    )
    writer.writerow(schema)
    for record in records:
        # .get() yields None for absent fields, which renders like an explicit null
        writer.writerow([encode_value(record.get(name)) for name in schema])
    return buf.getvalue()


def encode_bytes(records: Sequence[Record], schema: List[str]) -> bytes:
    return encode(records, schema).encode("utf-8")
