"""
Base record reader protocol / ABC for recordsaw.

All record readers implement this interface. The contract is:
1. try_extract_line() reads one line from a CharReader and returns it
   without its record delimiter, or ``None`` when the stream is exhausted.
2. read_values() splits a line into raw field strings, lazily and in
   field order.
3. create_record_spec() builds the RecordSpec subclass the reader needs.

Readers keep reusable per-line state and must not drive two parse
passes at the same time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterator, Protocol

from recordsaw.exceptions import ConfigurationError, UnterminatedQuoteError

if TYPE_CHECKING:
    from recordsaw.context import ParserContext
    from recordsaw.schema import RecordSpec
    from recordsaw.strategies import ParseStrategy


class TextSource(Protocol):
    def read(self, size: int = ..., /) -> str: ...


class CharReader:
    """Character-at-a-time view of a text stream with one character of lookahead.

    Wraps anything with a ``read(n)`` method (open text files,
    ``io.StringIO``, ...). To continue a stream across two parse passes,
    pass the same CharReader to both; a character already peeked lives
    in the wrapper, not in the underlying stream.
    """

    def __init__(self, stream: TextSource) -> None:
        self._stream = stream
        self._peeked: str | None = None

    def read(self) -> str:
        """Return the next character, or ``""`` at end of input."""
        if self._peeked is not None:
            char, self._peeked = self._peeked, None
            return char
        return self._stream.read(1)

    def peek(self) -> str:
        """Return the next character without consuming it (``""`` at end)."""
        if self._peeked is None:
            self._peeked = self._stream.read(1)
        return self._peeked

    @classmethod
    def wrap(cls, stream: TextSource | CharReader) -> CharReader:
        if isinstance(stream, CharReader):
            return stream
        return cls(stream)


class RecordReader(ABC):
    """Abstract base class for record readers."""

    def __init__(self, record_delimiter: str = "\n") -> None:
        if not record_delimiter:
            raise ConfigurationError("record_delimiter must be a non-empty string")
        self.record_delimiter = record_delimiter

    def _scan_line(
        self, chars: CharReader, strategy: ParseStrategy | None = None
    ) -> str | None:
        """Read characters up to and including the record delimiter.

        Every character is kept, so the line is the raw text. When a
        *strategy* is given it is fed each character and the delimiter
        only counts while ``strategy.escaped`` is False and none of its
        characters were read inside an escaped run.

        Raises:
            UnterminatedQuoteError: If the input ends while the strategy
                is still escaped.
        """
        current = chars.read()
        if not current:
            return None

        if strategy is not None:
            strategy.reset()

        delimiter = self.record_delimiter
        tail = delimiter[-1]
        size = len(delimiter)
        buf: list[str] = []
        # Length of buf after the last character read while escaped
        escaped_end = 0

        while current:
            if strategy is not None:
                strategy.include_char(current, chars.peek() or None)
            buf.append(current)
            if strategy is not None and strategy.escaped:
                escaped_end = len(buf)
            elif (
                current == tail
                and len(buf) - size >= escaped_end
                and "".join(buf[-size:]) == delimiter
            ):
                del buf[-size:]
                return "".join(buf)
            current = chars.read()

        if strategy is not None and strategy.escaped:
            raise UnterminatedQuoteError(
                "Input ended inside a quoted value", line="".join(buf)
            )
        return "".join(buf)

    @abstractmethod
    def try_extract_line(self, chars: CharReader) -> str | None:
        """Read the next line.

        Returns:
            The line text without its record delimiter (possibly ``""``),
            or ``None`` if no character could be read.
        """

    @abstractmethod
    def read_values(self, line: str, context: ParserContext) -> Iterator[str]:
        """Yield the raw field strings of *line*, in field order.

        Raises:
            ParsingError: If the line cannot be split for the record type
                selected in *context*.
        """

    @abstractmethod
    def create_record_spec(self, name: str) -> RecordSpec:
        """Create an empty record type this reader can extract."""
