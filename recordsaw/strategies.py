"""
Parse strategies for delimited record readers.

A strategy decides, one character at a time, whether the character is
inside an escaped run and whether it should be copied into the value
being built. The delimited reader only honours field and record
delimiters while the strategy reports ``escaped == False``.

Design: Strategy Pattern
- ParseStrategy is the ABC every strategy implements.
- NoEscapeStrategy copies everything and never escapes.
- QuotedStringStrategy implements CSV-style quoting with doubled quotes
  as a literal quote.

Strategies hold per-line state and are not safe to share between two
parse passes running at the same time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class ParseStrategy(ABC):
    """Abstract base class for delimited parse strategies."""

    @property
    @abstractmethod
    def escaped(self) -> bool:
        """True while the current character lies inside an escaped run."""

    @abstractmethod
    def reset(self) -> None:
        """Clear per-line state. Called before every line and every split."""

    @abstractmethod
    def include_char(self, current: str, next_char: str | None) -> bool:
        """Decide whether *current* is copied into the value being built.

        Args:
            current: The character being examined.
            next_char: The following character, or ``None`` at the end of
                the line / input.

        Returns:
            True if *current* belongs in the value.
        """


class NoEscapeStrategy(ParseStrategy):
    """No escaping: every character is copied, delimiters always count."""

    @property
    def escaped(self) -> bool:
        return False

    def reset(self) -> None:
        pass

    def include_char(self, current: str, next_char: str | None) -> bool:
        return True


class QuotedStringStrategy(ParseStrategy):
    """CSV-style quoting.

    - A quote outside a quoted run opens one; the quote is dropped.
    - Inside a run, two quotes in a row are one literal quote.
    - Inside a run, a lone quote closes the run and is dropped.

    Delimiters and record delimiters inside a run are ordinary text.
    """

    def __init__(self, quote: str = '"') -> None:
        if len(quote) != 1:
            raise ValueError(f"quote must be a single character, got {quote!r}")
        self.quote = quote
        self._in_quotes = False
        self._drop_next = False

    @property
    def escaped(self) -> bool:
        return self._in_quotes

    def reset(self) -> None:
        self._in_quotes = False
        self._drop_next = False

    def include_char(self, current: str, next_char: str | None) -> bool:
        if current != self.quote:
            return True

        if self._drop_next:
            # Second half of a doubled quote
            self._drop_next = False
            return False

        if not self._in_quotes:
            self._in_quotes = True
            return False

        if next_char == self.quote:
            self._drop_next = True
            return True

        self._in_quotes = False
        return False

    def __repr__(self) -> str:
        return f"QuotedStringStrategy(quote={self.quote!r})"


def quote_value(value: str, quote: str = '"') -> str:
    """Render *value* as a quoted field the QuotedStringStrategy reads back."""
    return quote + value.replace(quote, quote * 2) + quote
