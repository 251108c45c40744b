"""
Schema model and declaration builder for recordsaw.

A schema is an ordered list of record types (RecordSpec). Each record
type holds an ordered list of fields (FieldSpec), an optional
discriminator predicate (``where``) and an optional validator predicate
(``requiring``).

Declaration is incremental and chained::

    parser.record("Detail") \\
        .field("Code") \\
        .field("Amount").as_(int) \\
        .requiring(lambda ctx: ctx.current["Amount"] >= 0)

``field()`` moves a "current field" cursor that ``as_()`` (and, for
fixed-width records, ``at()``) apply to. ``where()`` and ``requiring()``
are record-level and clear the cursor.

Field order is declaration order, which is also positional order for
both delimited and fixed-width extraction. Field names are resolved to a
positional index at declaration time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from recordsaw.converters import Converter, resolve_converter
from recordsaw.exceptions import FieldAccessError, SchemaDeclarationError

if TYPE_CHECKING:
    from recordsaw.context import ParserContext

logger = logging.getLogger(__name__)

Predicate = Callable[["ParserContext"], bool]


class FieldSpec:
    """The declared shape of one field: its name and optional converter."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.converter: Converter | None = None

    def convert(self, text: str) -> Any:
        if self.converter is None:
            return text
        return self.converter(text)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class FixedFieldSpec(FieldSpec):
    """A field of a fixed-width record, located by column range."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.start: int | None = None
        self.length: int | None = None

    @property
    def end(self) -> int | None:
        if self.start is None or self.length is None:
            return None
        return self.start + self.length


class RecordSpec:
    """The declared shape of one record type, and its declaration builder."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._fields: list[FieldSpec] = []
        self._index: dict[str, int] = {}
        self._where: Predicate | None = None
        self._requiring: Predicate | None = None
        self._current_field: FieldSpec | None = None
        self._frozen = False

    # -- Read side ----------------------------------------------------------

    @property
    def fields(self) -> tuple[FieldSpec, ...]:
        return tuple(self._fields)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self._fields]

    @property
    def current_field(self) -> FieldSpec | None:
        """The field ``as_()`` / ``at()`` would apply to, if any."""
        return self._current_field

    def __len__(self) -> int:
        return len(self._fields)

    def __getitem__(self, index: int) -> FieldSpec:
        return self._fields[index]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def index_of(self, name: str) -> int:
        """Return the positional index of field *name*.

        Raises:
            FieldAccessError: If the record type has no such field.
        """
        try:
            return self._index[name]
        except KeyError:
            raise FieldAccessError(
                f"Record '{self.name}' has no field named '{name}'. "
                f"Declared fields: {self.field_names}"
            ) from None

    def is_match(self, context: ParserContext) -> bool:
        """Discriminator check. A record type with no ``where`` always matches."""
        if self._where is None:
            return True
        return bool(self._where(context))

    def is_valid(self, context: ParserContext) -> bool:
        if self._requiring is None:
            return True
        return bool(self._requiring(context))

    # -- Declaration side ---------------------------------------------------

    def field(self, name: str) -> RecordSpec:
        """Declare a new field and make it the current field.

        Raises:
            SchemaDeclarationError: If a field with this name already exists.
        """
        self._check_open()
        if name in self._index:
            raise SchemaDeclarationError(
                f"A field named [{name}] has already been described "
                f"on record [{self.name}]."
            )
        spec = self._create_field_spec(name)
        self._index[name] = len(self._fields)
        self._fields.append(spec)
        self._current_field = spec
        return self

    def where(self, predicate: Predicate) -> RecordSpec:
        """Set the predicate that selects this record type for a line."""
        self._check_open()
        if self._where is not None:
            raise SchemaDeclarationError(
                f"where() already specified for record [{self.name}]."
            )
        self._where = predicate
        self._current_field = None
        return self

    def requiring(self, predicate: Predicate) -> RecordSpec:
        """Set the predicate a fully built record must satisfy."""
        self._check_open()
        if self._requiring is not None:
            raise SchemaDeclarationError(
                f"requiring() already specified for record [{self.name}]."
            )
        self._requiring = predicate
        self._current_field = None
        return self

    def as_(self, target: type | str | Converter) -> RecordSpec:
        """Set the conversion of the current field.

        Args:
            target: A built-in type, a type name, or a callable
                ``str -> value``. See ``recordsaw.converters``.
        """
        field_spec = self._require_current_field("as_")
        field_spec.converter = resolve_converter(target)
        return self

    def _create_field_spec(self, name: str) -> FieldSpec:
        return FieldSpec(name)

    def _require_current_field(self, verb: str) -> FieldSpec:
        self._check_open()
        if self._current_field is None:
            raise SchemaDeclarationError(
                f"{verb}() called on record [{self.name}] with no current field."
            )
        return self._current_field

    def _check_open(self) -> None:
        if self._frozen:
            raise SchemaDeclarationError(
                f"Record [{self.name}] cannot be changed after parsing has started."
            )

    def freeze(self) -> None:
        self._frozen = True
        self._current_field = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, fields={self.field_names})"


class FixedRecordSpec(RecordSpec):
    """Record type for fixed-width files; fields also take a column range."""

    def _create_field_spec(self, name: str) -> FieldSpec:
        return FixedFieldSpec(name)

    def at(self, start: int, length: int) -> FixedRecordSpec:
        """Set the column range (0-based *start*, *length* characters)."""
        field_spec = self._require_current_field("at")
        if start < 0 or length < 0:
            raise SchemaDeclarationError(
                f"Field [{field_spec.name}] on record [{self.name}]: start and "
                f"length must be non-negative, got at({start}, {length})."
            )
        field_spec.start = start
        field_spec.length = length
        logger.debug(
            "Record '%s' field '%s' at columns [%d, %d)",
            self.name, field_spec.name, start, start + length,
        )
        return self
