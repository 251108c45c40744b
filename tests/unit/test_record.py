"""
Unit tests for Record (recordsaw.record).

Tests named field access, the not-yet-populated guard, record type
queries and the context snapshot.
"""

from __future__ import annotations

import pytest

from recordsaw.context import ParserContext
from recordsaw.exceptions import (
    ConfigurationError,
    FieldAccessError,
    FieldNotPopulatedError,
    UnknownRecordTypeError,
)
from recordsaw.record import Record, is_record_type
from recordsaw.schema import RecordSpec


@pytest.fixture()
def detail_spec() -> RecordSpec:
    return RecordSpec("Detail").field("Code").field("Amount").as_(int)


@pytest.fixture()
def context(detail_spec: RecordSpec) -> ParserContext:
    return ParserContext(
        record_names=frozenset({"Header", "Detail"}),
        first_record=True,
        last_record=False,
        line="D,42",
        line_number=3,
        record_spec=detail_spec,
    )


class TestFieldAccess:
    """Tests for Record.__getitem__() / get()."""

    def test_reads_populated_fields(self, context: ParserContext):
        record = Record(context)
        record.add("D")
        record.add(42)
        assert record["Code"] == "D"
        assert record["Amount"] == 42

    def test_unknown_field(self, context: ParserContext):
        record = Record(context)
        with pytest.raises(FieldAccessError, match="no field named 'Price'"):
            record["Price"]

    def test_unknown_field_is_a_key_error(self, context: ParserContext):
        with pytest.raises(KeyError):
            Record(context)["Price"]

    def test_field_not_yet_populated(self, context: ParserContext):
        record = Record(context)
        record.add("D")
        with pytest.raises(FieldNotPopulatedError, match=r"\[Amount\] has not been initialized"):
            record["Amount"]

    def test_get_returns_default_for_unpopulated(self, context: ParserContext):
        record = Record(context)
        assert record.get("Amount") is None
        assert record.get("Amount", 0) == 0

    def test_get_still_rejects_unknown_field(self, context: ParserContext):
        with pytest.raises(FieldAccessError):
            Record(context).get("Price")

    def test_contains_checks_declared_fields(self, context: ParserContext):
        record = Record(context)
        assert "Amount" in record
        assert "Price" not in record

    def test_to_dict_only_populated(self, context: ParserContext):
        record = Record(context)
        record.add("D")
        assert record.to_dict() == {"Code": "D"}
        assert record.values == ("D",)


class TestRecordType:
    """Tests for is_type() / is_record_type()."""

    def test_own_type(self, context: ParserContext):
        record = Record(context)
        assert record.record_type == "Detail"
        assert record.is_type("Detail") is True

    def test_other_declared_type(self, context: ParserContext):
        assert Record(context).is_type("Header") is False

    def test_undeclared_type(self, context: ParserContext):
        with pytest.raises(UnknownRecordTypeError, match="'Trailer'"):
            Record(context).is_type("Trailer")

    def test_two_argument_form(self, context: ParserContext):
        record = Record(context)
        assert is_record_type(record, "Detail")
        assert not is_record_type(record, "Header")


class TestContextSnapshot:
    """A record keeps the context values it was created with."""

    def test_flags_and_line(self, context: ParserContext):
        record = Record(context)
        assert record.first_record is True
        assert record.last_record is False
        assert record.line == "D,42"
        assert record.line_number == 3

    def test_later_context_changes_do_not_leak(self, context: ParserContext):
        record = Record(context)
        context.first_record = False
        context.last_record = True
        context.line = "other"
        assert record.first_record is True
        assert record.last_record is False
        assert record.line == "D,42"

    def test_requires_selected_record_type(self):
        with pytest.raises(ConfigurationError, match="selected record type"):
            Record(ParserContext())
