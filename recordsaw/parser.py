"""
Parser orchestrator for recordsaw.

A Parser owns a record reader and a schema (an ordered list of record
types) and turns a character stream into a lazy sequence of Records.

Orchestration, per line:
  1. Update the context: line text, line number, ``last_record`` (known
     from one line of lookahead).
  2. Select the first record type, in declaration order, whose ``where``
     predicate matches (a record type without ``where`` always matches).
  3. Create a Record through the record factory.
  4. Split the line with the reader and convert each raw value with the
     matching field's converter.
  5. Run the record type's ``requiring`` predicate.
  6. Yield the record, then advance.

The sequence is forward-only and single-pass. Every error propagates to
the caller at the point where the offending line is produced.

Construction shortcuts (``Parser.csv()``, ``Parser.fixed()``, ...) mirror
the common file layouts. The default record delimiter is ``"\\n"``:
Python text streams opened in the default newline mode already
translate platform line endings to it.
"""

from __future__ import annotations

import io
import logging
from typing import Iterator, Literal

from recordsaw.context import ParserContext
from recordsaw.exceptions import (
    ConfigurationError,
    ConversionError,
    ParsingError,
    SchemaDeclarationError,
    UnknownRecordTypeError,
    UnmatchedLineError,
    UnterminatedQuoteError,
    ValidationFailedError,
)
from recordsaw.readers.base import CharReader, RecordReader, TextSource
from recordsaw.readers.delimited import DelimitedRecordReader
from recordsaw.readers.fixed import FixedRecordReader
from recordsaw.record import Record, RecordFactory
from recordsaw.schema import RecordSpec
from recordsaw.strategies import ParseStrategy, QuotedStringStrategy

logger = logging.getLogger(__name__)

DEFAULT_RECORD_DELIMITER = "\n"

UnmatchedPolicy = Literal["raise", "skip"]
_UNMATCHED_POLICIES = ("raise", "skip")


class Parser:
    """A text parser driven by a schema declared at run time.

    Args:
        record_reader: Finds lines and fields (delimited or fixed-width).
        record_factory: Callable ``context -> Record``; defaults to ``Record``.
        on_unmatched: What to do with a line no record type matches:
            ``"raise"`` (default) stops with ``UnmatchedLineError``,
            ``"skip"`` logs a warning and drops the line.
    """

    def __init__(
        self,
        record_reader: RecordReader,
        record_factory: RecordFactory | None = None,
        on_unmatched: UnmatchedPolicy = "raise",
    ) -> None:
        if on_unmatched not in _UNMATCHED_POLICIES:
            raise ConfigurationError(
                f"on_unmatched must be one of {list(_UNMATCHED_POLICIES)}, "
                f"got {on_unmatched!r}"
            )
        self.record_reader = record_reader
        self.on_unmatched = on_unmatched
        self._records: list[RecordSpec] = []
        self._record_factory: RecordFactory = Record
        self._frozen = False
        if record_factory is not None:
            self.set_record_factory(record_factory)

    # -- Schema declaration -------------------------------------------------

    def record(self, name: str) -> RecordSpec:
        """Declare a new record type and return its builder.

        Raises:
            SchemaDeclarationError: If the name is already declared, or
                parsing has already started.
        """
        if self._frozen:
            raise SchemaDeclarationError(
                f"Cannot declare record [{name}] after parsing has started."
            )
        if self.has_record(name):
            raise SchemaDeclarationError(
                f"A record named [{name}] has already been described."
            )
        spec = self.record_reader.create_record_spec(name)
        self._records.append(spec)
        logger.debug("Declared record type '%s'", name)
        return spec

    def has_record(self, name: str) -> bool:
        return any(spec.name == name for spec in self._records)

    def __getitem__(self, name: str) -> RecordSpec:
        for spec in self._records:
            if spec.name == name:
                return spec
        raise UnknownRecordTypeError(f"No record type named [{name}] has been described.")

    @property
    def records(self) -> tuple[RecordSpec, ...]:
        return tuple(self._records)

    @property
    def record_names(self) -> frozenset[str]:
        return frozenset(spec.name for spec in self._records)

    def set_record_factory(self, record_factory: RecordFactory) -> None:
        """Replace the callable that creates an empty Record for a line."""
        if record_factory is None:
            raise ConfigurationError("record_factory must not be None")
        self._record_factory = record_factory

    # -- Parsing ------------------------------------------------------------

    def parse(self, stream: TextSource | CharReader) -> Iterator[Record]:
        """Parse records lazily from a text stream.

        The schema is frozen on the first call. The returned iterator is
        single-pass; parsing the same stream again continues from where
        the stream cursor is.

        Args:
            stream: An object with ``read(n)`` (text file, ``io.StringIO``)
                or a ``CharReader``.

        Returns:
            An iterator of Records, one per line.
        """
        self._freeze()
        return self._iter_records(CharReader.wrap(stream))

    def parse_text(self, text: str) -> Iterator[Record]:
        """Parse records from an in-memory string."""
        return self.parse(io.StringIO(text))

    def _freeze(self) -> None:
        if not self._frozen:
            self._frozen = True
            for spec in self._records:
                spec.freeze()

    def _iter_records(self, chars: CharReader) -> Iterator[Record]:
        context = ParserContext(record_names=self.record_names)
        logger.info(
            "Parsing with %r (%d record types: %s)",
            self.record_reader, len(self._records), [s.name for s in self._records],
        )

        line_number = 1
        current, current_error = self._read_line(chars, line_number)
        following, following_error = self._read_line(chars, line_number + 1)
        produced = 0
        skipped = 0

        while current is not None:
            if current_error is not None:
                raise current_error
            context.line = current
            context.line_number = line_number
            context.last_record = following is None
            context.record_spec = None
            context.current = None

            spec = self._find_record_spec(context)
            if spec is None:
                self._handle_unmatched(context)
                skipped += 1
            else:
                context.record_spec = spec
                context.current = self._create_record(context)
                self._parse_record(context)
                self._validate(context)

                yield context.current

                produced += 1
                context.first_record = False

            current, current_error = following, following_error
            line_number += 1
            following, following_error = self._read_line(chars, line_number + 1)

        logger.info("Parsed %d records (%d lines skipped)", produced, skipped)

    def _read_line(
        self, chars: CharReader, line_number: int
    ) -> tuple[str | None, ParsingError | None]:
        # A broken line is only reported once the lines before it are yielded.
        try:
            return self.record_reader.try_extract_line(chars), None
        except UnterminatedQuoteError as exc:
            error = UnterminatedQuoteError(
                "Input ended inside a quoted value",
                line=exc.line,
                line_number=line_number,
            )
            return exc.line, error

    def _find_record_spec(self, context: ParserContext) -> RecordSpec | None:
        for spec in self._records:
            if spec.is_match(context):
                logger.debug("Line %d -> '%s'", context.line_number, spec.name)
                return spec
        return None

    def _handle_unmatched(self, context: ParserContext) -> None:
        if self.on_unmatched == "skip":
            logger.warning(
                "Line %d matches no record type, skipping: %r",
                context.line_number, context.line,
            )
            return
        raise UnmatchedLineError(
            f"No record type matches this line; declared types: "
            f"{[s.name for s in self._records]}",
            line=context.line,
            line_number=context.line_number,
        )

    def _create_record(self, context: ParserContext) -> Record:
        record = self._record_factory(context)
        if not isinstance(record, Record):
            raise ConfigurationError(
                f"record_factory must return a Record, got {type(record).__name__}"
            )
        return record

    def _parse_record(self, context: ParserContext) -> None:
        spec = context.record_spec
        record = context.current
        field_count = len(spec)

        for ix, value in enumerate(self.record_reader.read_values(context.line, context)):
            if ix >= field_count:
                logger.debug(
                    "Line %d: ignoring values beyond the %d fields of '%s'",
                    context.line_number, field_count, spec.name,
                )
                break
            field_spec = spec[ix]
            try:
                converted = field_spec.convert(value)
            except Exception as exc:
                raise ConversionError(
                    f"Cannot convert field '{field_spec.name}' value {value!r}: {exc}",
                    field_name=field_spec.name,
                    value=value,
                    line=context.line,
                    line_number=context.line_number,
                    record_name=spec.name,
                ) from exc
            record.add(converted)

    def _validate(self, context: ParserContext) -> None:
        if not context.record_spec.is_valid(context):
            raise ValidationFailedError(
                "Record failed validation",
                line=context.line,
                line_number=context.line_number,
                record_name=context.record_spec.name,
            )

    # -- Construction shortcuts ---------------------------------------------

    @classmethod
    def csv(
        cls,
        record_delimiter: str = DEFAULT_RECORD_DELIMITER,
        parse_strategy: ParseStrategy | None = None,
    ) -> Parser:
        """Comma-separated; no escaping unless *parse_strategy* says otherwise."""
        return cls.delimited(",", record_delimiter, parse_strategy)

    @classmethod
    def csv_with_quoted_strings(
        cls, record_delimiter: str = DEFAULT_RECORD_DELIMITER
    ) -> Parser:
        """Comma-separated with CSV-style double-quote escaping."""
        return cls.delimited_with_quoted_strings(",", record_delimiter)

    @classmethod
    def delimited(
        cls,
        field_delimiter: str,
        record_delimiter: str = DEFAULT_RECORD_DELIMITER,
        parse_strategy: ParseStrategy | None = None,
    ) -> Parser:
        return cls(DelimitedRecordReader(field_delimiter, record_delimiter, parse_strategy))

    @classmethod
    def delimited_with_quoted_strings(
        cls,
        field_delimiter: str,
        record_delimiter: str = DEFAULT_RECORD_DELIMITER,
    ) -> Parser:
        return cls.delimited(field_delimiter, record_delimiter, QuotedStringStrategy())

    @classmethod
    def fixed(cls, record_delimiter: str = DEFAULT_RECORD_DELIMITER) -> Parser:
        """Fixed-width columns; declare each field's range with ``at()``."""
        return cls(FixedRecordReader(record_delimiter))
