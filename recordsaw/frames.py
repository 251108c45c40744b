"""
Tabular view of parsed records.

Collects a record sequence into one pandas DataFrame per record type.
Each table has the record type's declared fields as columns, in
declaration order, plus ``line_number`` so rows can be traced back to
the source. Fields a record never populated (short delimited lines)
become missing values.

This consumes the whole sequence; use it when the parsed data fits in
memory. The parser itself stays single-pass and lazy.
"""

from __future__ import annotations

import logging
from typing import Iterable

import pandas as pd

from recordsaw.record import Record

logger = logging.getLogger(__name__)

LINE_NUMBER_COLUMN = "line_number"


def to_frames(
    records: Iterable[Record],
    record_types: list[str] | None = None,
) -> dict[str, pd.DataFrame]:
    """Split parsed records into one DataFrame per record type.

    Args:
        records: Records from ``Parser.parse()``.
        record_types: Only keep these record types. Unknown names are
            skipped with a warning. Defaults to every type seen.

    Returns:
        Dict mapping record type name -> DataFrame, in order of first
        appearance. Record types with no records are omitted.
    """
    rows: dict[str, list[dict]] = {}
    columns: dict[str, list[str]] = {}
    wanted = set(record_types) if record_types is not None else None

    for record in records:
        name = record.record_type
        if wanted is not None and name not in wanted:
            continue
        if name not in rows:
            rows[name] = []
            columns[name] = [LINE_NUMBER_COLUMN] + record.spec.field_names
        row = record.to_dict()
        row[LINE_NUMBER_COLUMN] = record.line_number
        rows[name].append(row)

    if wanted is not None:
        missing = sorted(wanted - rows.keys())
        if missing:
            logger.warning("No records found for record types: %s", missing)

    result: dict[str, pd.DataFrame] = {}
    for name, table_rows in rows.items():
        result[name] = pd.DataFrame(table_rows, columns=columns[name])
        logger.debug("Record type '%s': %d rows", name, len(table_rows))
    return result
