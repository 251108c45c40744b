"""
Delimited record reader for recordsaw (CSV and friends).

Line boundaries: characters are read one at a time until the buffer ends
with the record delimiter while the parse strategy is not escaped. The
line keeps its raw text (quotes included) so discriminators and error
messages see what was in the file. Input that ends inside a quoted run
raises UnterminatedQuoteError instead of swallowing the rest of the file.

Field boundaries: the line is re-scanned with a freshly reset strategy.
Characters the strategy includes are appended to the value being built;
when the value ends with the field delimiter, and none of those
characters were copied while the strategy was escaped, the value is
emitted without the delimiter. Quoted text ending in part of a
multi-character delimiter therefore never completes it. The last value is
always emitted, so a line with N delimiters yields N + 1 values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from recordsaw.exceptions import ConfigurationError
from recordsaw.readers.base import CharReader, RecordReader
from recordsaw.schema import RecordSpec
from recordsaw.strategies import NoEscapeStrategy, ParseStrategy

if TYPE_CHECKING:
    from recordsaw.context import ParserContext


class DelimitedRecordReader(RecordReader):
    """Reads records whose fields are separated by a delimiter string.

    Args:
        field_delimiter: The string separating fields (e.g. ``","``).
        record_delimiter: The string separating records, usually ``"\\n"``.
        parse_strategy: Escaping policy; defaults to ``NoEscapeStrategy``.
    """

    def __init__(
        self,
        field_delimiter: str = ",",
        record_delimiter: str = "\n",
        parse_strategy: ParseStrategy | None = None,
    ) -> None:
        super().__init__(record_delimiter)
        if not field_delimiter:
            raise ConfigurationError("field_delimiter must be a non-empty string")
        self.field_delimiter = field_delimiter
        self.parse_strategy = parse_strategy if parse_strategy is not None else NoEscapeStrategy()

    def try_extract_line(self, chars: CharReader) -> str | None:
        return self._scan_line(chars, self.parse_strategy)

    def read_values(self, line: str, context: ParserContext) -> Iterator[str]:
        strategy = self.parse_strategy
        strategy.reset()

        delimiter = self.field_delimiter
        tail = delimiter[-1]
        size = len(delimiter)
        last = len(line) - 1
        value: list[str] = []
        # Length of value after the last character copied while escaped
        escaped_end = 0

        for ix, current in enumerate(line):
            next_char = line[ix + 1] if ix < last else None
            if not strategy.include_char(current, next_char):
                continue
            value.append(current)
            if strategy.escaped:
                escaped_end = len(value)
            elif (
                current == tail
                and len(value) - size >= escaped_end
                and "".join(value[-size:]) == delimiter
            ):
                del value[-size:]
                yield "".join(value)
                value = []
                escaped_end = 0

        yield "".join(value)

    def create_record_spec(self, name: str) -> RecordSpec:
        return RecordSpec(name)

    def __repr__(self) -> str:
        return (
            f"DelimitedRecordReader(field_delimiter={self.field_delimiter!r}, "
            f"record_delimiter={self.record_delimiter!r}, "
            f"parse_strategy={self.parse_strategy!r})"
        )
