"""
Fixed-width record reader for recordsaw.

Line boundaries use the same trailing-match rule as the delimited reader,
with no escaping. Field values are column slices: for each field of the
selected FixedRecordSpec, in declared order, ``line[start:start + length]``.

A field whose range runs past the end of the line is a FieldBoundsError;
values are never padded or truncated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from recordsaw.exceptions import FieldBoundsError
from recordsaw.readers.base import CharReader, RecordReader
from recordsaw.schema import FixedFieldSpec, FixedRecordSpec

if TYPE_CHECKING:
    from recordsaw.context import ParserContext


class FixedRecordReader(RecordReader):
    """Reads records laid out in fixed character columns."""

    def try_extract_line(self, chars: CharReader) -> str | None:
        return self._scan_line(chars)

    def read_values(self, line: str, context: ParserContext) -> Iterator[str]:
        record_spec = context.record_spec
        for field_spec in record_spec.fields:
            yield self._slice(line, field_spec, context)

    def _slice(self, line: str, field_spec: FixedFieldSpec, context: ParserContext) -> str:
        if field_spec.start is None or field_spec.length is None:
            raise FieldBoundsError(
                f"Field '{field_spec.name}' has no column range; declare it with at()",
                line=line,
                line_number=context.line_number,
                record_name=context.record_name,
            )
        if field_spec.end > len(line):
            raise FieldBoundsError(
                f"Field '{field_spec.name}' spans columns "
                f"[{field_spec.start}, {field_spec.end}) but the line has "
                f"{len(line)} characters",
                line=line,
                line_number=context.line_number,
                record_name=context.record_name,
            )
        return line[field_spec.start:field_spec.end]

    def create_record_spec(self, name: str) -> FixedRecordSpec:
        return FixedRecordSpec(name)

    def __repr__(self) -> str:
        return f"FixedRecordReader(record_delimiter={self.record_delimiter!r})"
