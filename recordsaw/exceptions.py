"""
Custom exception hierarchy for recordsaw.

Errors fall into three groups:
- Declaration-time errors (SchemaDeclarationError, ConfigurationError),
  raised at the call that declared the bad schema or setting.
- Parse-time errors (ParsingError and subclasses), raised at the point in
  the record sequence where the offending line is produced. They carry
  the source line, its 1-based line number and the record type name.
- Access errors on a finished Record (FieldAccessError,
  UnknownRecordTypeError).

Nothing is retried or repaired internally.
"""

from __future__ import annotations


class RecordSawError(Exception):
    """Base exception for all recordsaw errors."""


class SchemaDeclarationError(RecordSawError):
    """Raised when a record or field declaration conflicts with the schema.

    This can happen if:
    - A record or field name is declared twice.
    - ``where()`` or ``requiring()`` is called twice on one record.
    - ``as_()`` or ``at()`` is called when no field is being declared.
    - The schema is changed after parsing has started.
    """


class ConfigurationError(RecordSawError):
    """Raised when a parser is configured with an unusable setting.

    For example a ``None`` record factory, an empty delimiter, or an
    empty YAML config file.
    """


class ParsingError(RecordSawError):
    """Raised when a line cannot be turned into a record.

    Attributes:
        line: The raw text of the offending line (``None`` if unknown).
        line_number: 1-based position of the line in the stream.
        record_name: The record type selected for the line, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        line: str | None = None,
        line_number: int | None = None,
        record_name: str | None = None,
    ) -> None:
        self.line = line
        self.line_number = line_number
        self.record_name = record_name
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        where = []
        if self.line_number is not None:
            where.append(f"line {self.line_number}")
        if self.record_name is not None:
            where.append(f"record '{self.record_name}'")
        if where:
            message = f"{message} ({', '.join(where)})"
        if self.line is not None:
            message = f"{message}\nLine text: {self.line!r}"
        return message


class ConversionError(ParsingError):
    """Raised when a field's converter rejects the raw field text."""

    def __init__(self, message: str, *, field_name: str, value: str, **kwargs) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(message, **kwargs)


class ValidationFailedError(ParsingError):
    """Raised when a record's ``requiring()`` predicate returns False."""


class UnmatchedLineError(ParsingError):
    """Raised when no record type matches a line and none is unconditional."""


class UnterminatedQuoteError(ParsingError):
    """Raised when the input ends inside a quoted value.

    The line text holds everything read from the opening quote onwards.
    """


class FieldBoundsError(ParsingError):
    """Raised when a fixed-width field's column range falls outside the line."""


class FieldAccessError(RecordSawError, KeyError):
    """Raised when a Record is asked for a field its type does not declare."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return str(self.args[0]) if self.args else ""


class FieldNotPopulatedError(FieldAccessError):
    """Raised when a declared field has no value for this record.

    Happens when a delimited line carries fewer values than the record
    type declares fields.
    """


class UnknownRecordTypeError(RecordSawError, KeyError):
    """Raised when a record type lookup or query names an undeclared type."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
