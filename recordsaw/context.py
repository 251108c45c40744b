"""
Parse context threaded through one parse pass.

One ParserContext is created per ``Parser.parse()`` call and mutated once
per line. Discriminator (``where``) and validator (``requiring``)
predicates receive it, so it is the public view of "where are we" during
a pass:

- ``line``: raw text of the current line (record delimiter removed).
- ``line_number``: 1-based position of the line in the stream.
- ``first_record`` / ``last_record``: position flags; ``last_record`` is
  known thanks to one line of lookahead.
- ``record_spec``: the record type selected for the line (``None`` while
  discriminators are being evaluated).
- ``current``: the record under construction (``None`` until the record
  factory has run; fully populated when validators run).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from recordsaw.record import Record
    from recordsaw.schema import RecordSpec


@dataclass
class ParserContext:
    """Mutable per-pass state. Not shared between passes."""

    record_names: frozenset[str] = field(default_factory=frozenset)
    first_record: bool = True
    last_record: bool = False
    line: str = ""
    line_number: int = 0
    record_spec: RecordSpec | None = None
    current: Record | None = None

    @property
    def record_name(self) -> str | None:
        """Name of the selected record type, if one has been selected."""
        return self.record_spec.name if self.record_spec is not None else None
