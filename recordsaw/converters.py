"""
Built-in field conversions for recordsaw.

Raw field text arrives as ``str``. ``RecordSpec.as_()`` maps a Python
type or a type name onto one of the converters below; any other callable
is used as-is.

Numeric converters apply the usual cleaning for exported text files:
1. Strip leading/trailing whitespace.
2. Remove comma thousand separators (e.g., "1,234,567").
3. Convert with the target type's constructor.

Converters raise ``ValueError`` (or the target type's own error) on bad
input; the parser wraps it in ``ConversionError`` with line context.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from recordsaw.exceptions import SchemaDeclarationError

Converter = Callable[[str], Any]

_TRUE_VALUES = {"true", "t", "yes", "y", "1"}
_FALSE_VALUES = {"false", "f", "no", "n", "0"}


def _clean_number(value: str) -> str:
    return value.strip().replace(",", "")


def to_str(value: str) -> str:
    return value


def to_int(value: str) -> int:
    return int(_clean_number(value))


def to_float(value: str) -> float:
    return float(_clean_number(value))


def to_decimal(value: str) -> Decimal:
    try:
        return Decimal(_clean_number(value))
    except InvalidOperation as exc:
        raise ValueError(f"invalid decimal literal: {value!r}") from exc


def to_bool(value: str) -> bool:
    token = value.strip().lower()
    if token in _TRUE_VALUES:
        return True
    if token in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean literal: {value!r}")


def to_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` or compact ``YYYYMMDD``."""
    token = value.strip()
    if len(token) == 8 and token.isdigit():
        return datetime.strptime(token, "%Y%m%d").date()
    return date.fromisoformat(token)


def to_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.strip())


# Python type -> converter, name -> converter
_BY_TYPE: dict[type, Converter] = {
    str: to_str,
    int: to_int,
    float: to_float,
    Decimal: to_decimal,
    bool: to_bool,
    date: to_date,
    datetime: to_datetime,
}

_BY_NAME: dict[str, Converter] = {
    "str": to_str,
    "int": to_int,
    "float": to_float,
    "decimal": to_decimal,
    "bool": to_bool,
    "date": to_date,
    "datetime": to_datetime,
}

CONVERTER_NAMES = tuple(_BY_NAME)


def resolve_converter(target: type | str | Converter) -> Converter:
    """Turn an ``as_()`` argument into a converter function.

    Args:
        target: A built-in type (``int``, ``Decimal``, ``date``, ...), a
            type name (``"int"``, ``"decimal"``, ...), or any callable
            taking the raw string.

    Returns:
        A callable ``str -> value``.

    Raises:
        SchemaDeclarationError: If *target* is an unknown type name or
            is not callable.
    """
    if isinstance(target, str):
        try:
            return _BY_NAME[target.lower()]
        except KeyError:
            raise SchemaDeclarationError(
                f"Unknown field type '{target}'. "
                f"Supported types: {list(CONVERTER_NAMES)}"
            ) from None

    if isinstance(target, type) and target in _BY_TYPE:
        return _BY_TYPE[target]

    if not callable(target):
        raise SchemaDeclarationError(
            f"Field type must be a type name or a callable, got {target!r}"
        )
    return target
