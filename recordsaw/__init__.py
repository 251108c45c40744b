"""
recordsaw: parse line-oriented text into typed records with a schema
declared at run time.

Public API surface:

- ``csv()``, ``csv_with_quoted_strings()``, ``delimited()``,
  ``delimited_with_quoted_strings()``, ``fixed()`` -- construct a
  Parser for a file layout.

- ``Parser.record(name)`` -- declare a record type; chain ``field()``,
  ``as_()``, ``at()`` (fixed-width), ``where()`` and ``requiring()`` on
  the returned builder.

- ``Parser.parse(stream)`` -- lazily yield one ``Record`` per line.

- ``parser_from_yaml(path)`` -- build a Parser from a YAML declaration.

- ``to_frames(records)`` -- collect records into pandas DataFrames.

Example::

    import recordsaw

    parser = recordsaw.csv()
    parser.record("Header").where(lambda ctx: ctx.line.startswith("H"))
    parser.record("Detail").field("Code").field("Amount").as_(int)

    with open("orders.csv", encoding="utf-8") as f:
        for record in parser.parse(f):
            if record.is_type("Detail"):
                print(record["Code"], record["Amount"])
"""

from __future__ import annotations

from recordsaw.config import ParserConfig, build_parser, load_config, parser_from_yaml
from recordsaw.context import ParserContext
from recordsaw.exceptions import (
    ConfigurationError,
    ConversionError,
    FieldAccessError,
    FieldBoundsError,
    FieldNotPopulatedError,
    ParsingError,
    RecordSawError,
    SchemaDeclarationError,
    UnknownRecordTypeError,
    UnmatchedLineError,
    UnterminatedQuoteError,
    ValidationFailedError,
)
from recordsaw.frames import to_frames
from recordsaw.parser import Parser
from recordsaw.readers import CharReader, DelimitedRecordReader, FixedRecordReader
from recordsaw.record import Record, is_record_type
from recordsaw.strategies import NoEscapeStrategy, ParseStrategy, QuotedStringStrategy

__all__ = [
    "csv",
    "csv_with_quoted_strings",
    "delimited",
    "delimited_with_quoted_strings",
    "fixed",
    "Parser",
    "ParserContext",
    "Record",
    "is_record_type",
    "CharReader",
    "DelimitedRecordReader",
    "FixedRecordReader",
    "ParseStrategy",
    "NoEscapeStrategy",
    "QuotedStringStrategy",
    "ParserConfig",
    "load_config",
    "build_parser",
    "parser_from_yaml",
    "to_frames",
    "RecordSawError",
    "SchemaDeclarationError",
    "ConfigurationError",
    "ParsingError",
    "ConversionError",
    "ValidationFailedError",
    "UnmatchedLineError",
    "UnterminatedQuoteError",
    "FieldBoundsError",
    "FieldAccessError",
    "FieldNotPopulatedError",
    "UnknownRecordTypeError",
]

csv = Parser.csv
csv_with_quoted_strings = Parser.csv_with_quoted_strings
delimited = Parser.delimited
delimited_with_quoted_strings = Parser.delimited_with_quoted_strings
fixed = Parser.fixed
