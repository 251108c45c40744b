"""
Unit tests for record readers (recordsaw.readers).

Covers line extraction (record delimiters, end of input, escaped
delimiters), delimited field splitting, and fixed-width column slicing.
"""

from __future__ import annotations

import io

import pytest

from recordsaw.context import ParserContext
from recordsaw.exceptions import (
    ConfigurationError,
    FieldBoundsError,
    UnterminatedQuoteError,
)
from recordsaw.readers import CharReader, DelimitedRecordReader, FixedRecordReader
from recordsaw.schema import FixedRecordSpec, RecordSpec
from recordsaw.strategies import QuotedStringStrategy


def _lines(reader, text: str) -> list[str]:
    """Extract every line of *text* with *reader*."""
    chars = CharReader(io.StringIO(text))
    lines = []
    while (line := reader.try_extract_line(chars)) is not None:
        lines.append(line)
    return lines


def _context(line: str, spec: RecordSpec | None = None) -> ParserContext:
    return ParserContext(line=line, line_number=1, record_spec=spec)


# ---------------------------------------------------------------------------
# CharReader
# ---------------------------------------------------------------------------

class TestCharReader:
    """Tests for the one-character lookahead wrapper."""

    def test_peek_does_not_consume(self):
        chars = CharReader(io.StringIO("ab"))
        assert chars.peek() == "a"
        assert chars.read() == "a"
        assert chars.read() == "b"
        assert chars.read() == ""

    def test_peek_at_end(self):
        chars = CharReader(io.StringIO(""))
        assert chars.peek() == ""
        assert chars.read() == ""

    def test_wrap_reuses_existing_reader(self):
        chars = CharReader(io.StringIO("x"))
        assert CharReader.wrap(chars) is chars


# ---------------------------------------------------------------------------
# Line extraction
# ---------------------------------------------------------------------------

class TestTryExtractLine:
    """Tests for line boundary detection."""

    def test_splits_on_record_delimiter(self):
        reader = DelimitedRecordReader(",", "\n")
        assert _lines(reader, "a,b\nc,d\n") == ["a,b", "c,d"]

    def test_last_line_without_delimiter(self):
        reader = DelimitedRecordReader(",", "\n")
        assert _lines(reader, "a\nb") == ["a", "b"]

    def test_empty_input_yields_nothing(self):
        reader = DelimitedRecordReader(",", "\n")
        assert _lines(reader, "") == []

    def test_blank_lines_are_empty_strings(self):
        reader = DelimitedRecordReader(",", "\n")
        assert _lines(reader, "a\n\nb\n") == ["a", "", "b"]

    def test_multi_character_record_delimiter(self):
        reader = DelimitedRecordReader(",", "\r\n")
        assert _lines(reader, "a\rb\r\nc\r\n") == ["a\rb", "c"]

    def test_quoted_record_delimiter_does_not_end_line(self):
        reader = DelimitedRecordReader(",", "\n", QuotedStringStrategy())
        assert _lines(reader, '"a\nb",c\nd\n') == ['"a\nb",c', "d"]

    def test_line_keeps_raw_quotes(self):
        reader = DelimitedRecordReader(",", "\n", QuotedStringStrategy())
        assert _lines(reader, '"x ""y""",z\n') == ['"x ""y""",z']

    def test_unterminated_quote_raises_at_end_of_input(self):
        reader = DelimitedRecordReader(",", "\n", QuotedStringStrategy())
        chars = CharReader(io.StringIO('a\n"b,c\nd\n'))
        assert reader.try_extract_line(chars) == "a"
        with pytest.raises(UnterminatedQuoteError) as excinfo:
            reader.try_extract_line(chars)
        assert excinfo.value.line == '"b,c\nd\n'

    def test_fixed_reader_ignores_quotes(self):
        reader = FixedRecordReader("\n")
        assert _lines(reader, '"AB\nCD"\n') == ['"AB', 'CD"']

    def test_stream_resumes_where_it_stopped(self):
        reader = FixedRecordReader("\n")
        chars = CharReader(io.StringIO("one\ntwo\nthree\n"))
        assert reader.try_extract_line(chars) == "one"
        assert reader.try_extract_line(chars) == "two"
        assert reader.try_extract_line(chars) == "three"
        assert reader.try_extract_line(chars) is None

    def test_empty_record_delimiter_rejected(self):
        with pytest.raises(ConfigurationError, match="record_delimiter"):
            FixedRecordReader("")


# ---------------------------------------------------------------------------
# Delimited field splitting
# ---------------------------------------------------------------------------

class TestDelimitedReadValues:
    """Tests for DelimitedRecordReader.read_values()."""

    def test_n_delimiters_give_n_plus_one_values(self):
        reader = DelimitedRecordReader(",", "\n")
        assert list(reader.read_values("a,b,c", _context("a,b,c"))) == ["a", "b", "c"]

    def test_trailing_delimiter_gives_empty_value(self):
        reader = DelimitedRecordReader(",", "\n")
        assert list(reader.read_values("a,b,", _context("a,b,"))) == ["a", "b", ""]

    def test_empty_line_gives_one_empty_value(self):
        reader = DelimitedRecordReader(",", "\n")
        assert list(reader.read_values("", _context(""))) == [""]

    def test_multi_character_field_delimiter(self):
        reader = DelimitedRecordReader("||", "\n")
        assert list(reader.read_values("a||b|c||", _context(""))) == ["a", "b|c", ""]

    def test_quoted_text_does_not_complete_multi_character_delimiter(self):
        reader = DelimitedRecordReader("||", "\r\n", QuotedStringStrategy())
        line = '"x|"||b'
        assert list(reader.read_values(line, _context(line))) == ["x|", "b"]

    def test_quoted_delimiter_halves_on_both_sides(self):
        reader = DelimitedRecordReader("||", "\n", QuotedStringStrategy())
        line = '"|"||"|"'
        assert list(reader.read_values(line, _context(line))) == ["|", "|"]

    def test_no_escape_keeps_quotes(self):
        reader = DelimitedRecordReader(",", "\n")
        assert list(reader.read_values('"a,b"', _context(""))) == ['"a', 'b"']

    def test_quoted_delimiter_is_text(self):
        reader = DelimitedRecordReader(",", "\n", QuotedStringStrategy())
        line = '"Smith, John",42,"say ""hi"""'
        assert list(reader.read_values(line, _context(line))) == [
            "Smith, John", "42", 'say "hi"',
        ]

    def test_values_are_lazy(self):
        reader = DelimitedRecordReader(",", "\n")
        values = reader.read_values("a,b", _context("a,b"))
        assert next(values) == "a"

    def test_empty_field_delimiter_rejected(self):
        with pytest.raises(ConfigurationError, match="field_delimiter"):
            DelimitedRecordReader("", "\n")

    def test_creates_plain_record_spec(self):
        spec = DelimitedRecordReader().create_record_spec("Row")
        assert type(spec) is RecordSpec
        assert spec.name == "Row"


# ---------------------------------------------------------------------------
# Fixed-width field slicing
# ---------------------------------------------------------------------------

class TestFixedReadValues:
    """Tests for FixedRecordReader.read_values()."""

    @pytest.fixture()
    def reader(self) -> FixedRecordReader:
        return FixedRecordReader("\n")

    def test_slices_declared_ranges(self, reader: FixedRecordReader):
        spec = reader.create_record_spec("Row")
        spec.field("A").at(0, 2).field("B").at(2, 2)
        assert list(reader.read_values("AB12", _context("AB12", spec))) == ["AB", "12"]

    def test_range_independent_of_neighbours(self, reader: FixedRecordReader):
        spec = reader.create_record_spec("Row")
        spec.field("Mid").at(2, 3).field("All").at(0, 7)
        values = list(reader.read_values("ABXYZCD", _context("ABXYZCD", spec)))
        assert values == ["XYZ", "ABXYZCD"]

    def test_range_past_end_of_line(self, reader: FixedRecordReader):
        spec = reader.create_record_spec("Row")
        spec.field("A").at(0, 2).field("B").at(2, 5)
        values = reader.read_values("AB12", _context("AB12", spec))
        assert next(values) == "AB"
        with pytest.raises(FieldBoundsError, match="spans columns \\[2, 7\\)") as excinfo:
            next(values)
        assert excinfo.value.record_name == "Row"
        assert excinfo.value.line == "AB12"

    def test_field_without_range(self, reader: FixedRecordReader):
        spec = reader.create_record_spec("Row")
        spec.field("A")
        with pytest.raises(FieldBoundsError, match="no column range"):
            list(reader.read_values("AB", _context("AB", spec)))

    def test_zero_length_field(self, reader: FixedRecordReader):
        spec = reader.create_record_spec("Row")
        spec.field("Empty").at(4, 0)
        assert list(reader.read_values("AB12", _context("AB12", spec))) == [""]

    def test_creates_fixed_record_spec(self, reader: FixedRecordReader):
        assert isinstance(reader.create_record_spec("Row"), FixedRecordSpec)
