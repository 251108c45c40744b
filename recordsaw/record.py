"""
Parsed record values for recordsaw.

A Record is the output for one line: the converted field values, in the
order of its record type's fields, plus a snapshot of the parse context
taken when the record was created (position flags, line text, line
number, record type). The snapshot keeps a record correct after the
parse pass has moved on, so callers can hold records indefinitely.

Field access is by name (``record["Amount"]``, ``record.get("Amount")``);
names resolve to a positional index through the record type. Type queries
use ``record.is_type("Header")`` or ``is_record_type(record, "Header")``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from recordsaw.exceptions import (
    ConfigurationError,
    FieldNotPopulatedError,
    UnknownRecordTypeError,
)

if TYPE_CHECKING:
    from recordsaw.context import ParserContext
    from recordsaw.schema import RecordSpec


class Record:
    """One parsed line."""

    def __init__(self, context: ParserContext) -> None:
        if context.record_spec is None:
            raise ConfigurationError("Record requires a context with a selected record type")
        self._spec: RecordSpec = context.record_spec
        self._record_names = context.record_names
        self._first_record = context.first_record
        self._last_record = context.last_record
        self._line = context.line
        self._line_number = context.line_number
        self._values: list[Any] = []

    # -- Context snapshot ---------------------------------------------------

    @property
    def first_record(self) -> bool:
        return self._first_record

    @property
    def last_record(self) -> bool:
        return self._last_record

    @property
    def line(self) -> str:
        """Raw text of the source line."""
        return self._line

    @property
    def line_number(self) -> int:
        return self._line_number

    @property
    def record_type(self) -> str:
        return self._spec.name

    @property
    def spec(self) -> RecordSpec:
        return self._spec

    # -- Building -----------------------------------------------------------

    def add(self, value: Any) -> None:
        """Append the next converted value. Used by the parser while building."""
        self._values.append(value)

    # -- Type queries -------------------------------------------------------

    def is_type(self, name: str) -> bool:
        """True if this record's type is *name*.

        Raises:
            UnknownRecordTypeError: If *name* is not a declared record type.
        """
        if name not in self._record_names:
            raise UnknownRecordTypeError(
                f"No record type named '{name}' has been declared. "
                f"Declared types: {sorted(self._record_names)}"
            )
        return name == self._spec.name

    # -- Field access -------------------------------------------------------

    def __getitem__(self, name: str) -> Any:
        index = self._spec.index_of(name)
        if index >= len(self._values):
            raise FieldNotPopulatedError(
                f"Value of [{name}] has not been initialized "
                f"(line {self._line_number}, record '{self._spec.name}')."
            )
        return self._values[index]

    def get(self, name: str, default: Any = None) -> Any:
        """Return field *name*, or *default* if it was never populated.

        Unknown field names still raise ``FieldAccessError``.
        """
        try:
            return self[name]
        except FieldNotPopulatedError:
            return default

    def __contains__(self, name: object) -> bool:
        return name in self._spec

    @property
    def values(self) -> tuple[Any, ...]:
        return tuple(self._values)

    def to_dict(self) -> dict[str, Any]:
        """Populated fields as a name -> value dict, in field order."""
        return {
            name: value
            for name, value in zip(self._spec.field_names, self._values)
        }

    def __repr__(self) -> str:
        return f"Record({self._spec.name!r}, line={self._line_number}, {self.to_dict()!r})"


RecordFactory = Callable[["ParserContext"], Record]


def is_record_type(record: Record, name: str) -> bool:
    """Two-argument form of ``Record.is_type``."""
    return record.is_type(name)
