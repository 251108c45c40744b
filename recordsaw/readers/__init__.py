"""
Record readers sub-package for recordsaw.

A record reader finds record (line) boundaries in a character stream and
splits a line into raw field strings.

Design: Strategy Pattern
- base.py defines the RecordReader ABC and the CharReader lookahead wrapper.
- delimited.py implements DelimitedRecordReader (CSV-like, pluggable escaping).
- fixed.py implements FixedRecordReader (fixed-width columns).

Each reader also creates the RecordSpec flavour its fields need, so the
parser's schema always matches the reader that will consume it.
"""

from recordsaw.readers.base import CharReader, RecordReader
from recordsaw.readers.delimited import DelimitedRecordReader
from recordsaw.readers.fixed import FixedRecordReader

__all__ = ["CharReader", "RecordReader", "DelimitedRecordReader", "FixedRecordReader"]
