"""
Configuration models and YAML I/O for recordsaw.

A parser can be declared in a YAML file instead of Python code. The
Pydantic models below map 1:1 to that file; ``build_parser()`` turns a
validated config into a ready Parser by calling the same declaration
builder a Python caller would.

Example::

    format: delimited
    field_delimiter: ","
    quoted: true
    records:
      - name: Header
        match: {starts_with: "H"}
      - name: Detail
        required: [Amount]
        fields:
          - {name: Code}
          - {name: Amount, type: int}

Key models:
- ParserConfig: Top-level config (format, delimiters, record types).
- RecordConfig: One record type (name, match rules, required fields, fields).
- FieldConfig: One field (name, type, fixed-width column range).
- MatchConfig: Declarative discriminator; all given rules must hold.

Key functions:
- load_config(path) -> ParserConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
- build_parser(config) -> Parser: Declare the schema on a new Parser.
- parser_from_yaml(path) -> Parser: load_config + build_parser.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from recordsaw.context import ParserContext
from recordsaw.converters import CONVERTER_NAMES
from recordsaw.exceptions import ConfigurationError
from recordsaw.parser import DEFAULT_RECORD_DELIMITER, Parser
from recordsaw.readers import DelimitedRecordReader, FixedRecordReader, RecordReader
from recordsaw.schema import FixedRecordSpec, Predicate
from recordsaw.strategies import NoEscapeStrategy, QuotedStringStrategy

logger = logging.getLogger(__name__)


class FieldConfig(BaseModel):
    """One field of a record type."""

    name: str = Field(..., min_length=1)
    type: str = Field("str", description=f"One of {list(CONVERTER_NAMES)}")
    start: int | None = Field(None, ge=0, description="Fixed format only: first column (0-based)")
    length: int | None = Field(None, ge=0, description="Fixed format only: number of columns")

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        if value.lower() not in CONVERTER_NAMES:
            raise ValueError(
                f"Unknown field type '{value}'. Supported types: {list(CONVERTER_NAMES)}"
            )
        return value.lower()


class MatchConfig(BaseModel):
    """Declarative discriminator. Unset rules are ignored."""

    starts_with: str | None = None
    regex: str | None = None
    first: bool | None = None
    last: bool | None = None

    @field_validator("regex")
    @classmethod
    def _check_regex(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"Invalid regex {value!r}: {exc}") from exc
        return value

    def is_empty(self) -> bool:
        return all(
            v is None for v in (self.starts_with, self.regex, self.first, self.last)
        )

    def to_predicate(self) -> Predicate:
        pattern = re.compile(self.regex) if self.regex is not None else None

        def predicate(context: ParserContext) -> bool:
            if self.starts_with is not None and not context.line.startswith(self.starts_with):
                return False
            if pattern is not None and pattern.search(context.line) is None:
                return False
            if self.first is not None and context.first_record != self.first:
                return False
            if self.last is not None and context.last_record != self.last:
                return False
            return True

        return predicate


class RecordConfig(BaseModel):
    """One record type."""

    name: str = Field(..., min_length=1)
    match: MatchConfig | None = None
    required: list[str] = Field(
        default_factory=list,
        description="Fields that must be populated and non-empty",
    )
    fields: list[FieldConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_fields(self) -> RecordConfig:
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Record '{self.name}' declares duplicate fields: {duplicates}")
        unknown = [n for n in self.required if n not in names]
        if unknown:
            raise ValueError(
                f"Record '{self.name}' requires undeclared fields: {unknown}"
            )
        return self

    def to_validator(self) -> Predicate:
        required = list(self.required)

        def predicate(context: ParserContext) -> bool:
            record = context.current
            for name in required:
                value = record.get(name)
                if value is None or value == "":
                    return False
            return True

        return predicate


class ParserConfig(BaseModel):
    """Top-level parser configuration."""

    format: Literal["delimited", "fixed"] = "delimited"
    field_delimiter: str = Field(",", min_length=1)
    record_delimiter: str = Field(DEFAULT_RECORD_DELIMITER, min_length=1)
    quoted: bool = Field(False, description="Delimited only: CSV-style quote escaping")
    on_unmatched: Literal["raise", "skip"] = "raise"
    records: list[RecordConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_records(self) -> ParserConfig:
        names = [r.name for r in self.records]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate record names: {duplicates}")

        if self.format == "fixed":
            for record in self.records:
                for f in record.fields:
                    if f.start is None or f.length is None:
                        raise ValueError(
                            f"Fixed-width field '{record.name}.{f.name}' "
                            "needs both 'start' and 'length'"
                        )
        return self


def load_config(path: str | Path) -> ParserConfig:
    """Load and validate a parser YAML file into a ParserConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigurationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigurationError(f"Config file is empty: {path}")
    logger.info("Loaded parser config from %s", path)
    return ParserConfig.model_validate(raw)


def save_config(config: ParserConfig, path: str | Path) -> None:
    """Serialize a ParserConfig to YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json", exclude_none=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# recordsaw parser configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved parser config to %s", path)


def build_parser(config: ParserConfig) -> Parser:
    """Create a Parser and declare every record type in *config* on it."""
    reader: RecordReader
    if config.format == "fixed":
        reader = FixedRecordReader(config.record_delimiter)
    else:
        strategy = QuotedStringStrategy() if config.quoted else NoEscapeStrategy()
        reader = DelimitedRecordReader(
            config.field_delimiter, config.record_delimiter, strategy
        )
    parser = Parser(reader, on_unmatched=config.on_unmatched)

    for record in config.records:
        spec = parser.record(record.name)
        for f in record.fields:
            spec.field(f.name).as_(f.type)
            if isinstance(spec, FixedRecordSpec):
                spec.at(f.start, f.length)
        if record.match is not None and not record.match.is_empty():
            spec.where(record.match.to_predicate())
        if record.required:
            spec.requiring(record.to_validator())

    logger.info(
        "Built %s parser with %d record types", config.format, len(config.records)
    )
    return parser


def parser_from_yaml(path: str | Path) -> Parser:
    """Load a YAML parser declaration and build the Parser it describes."""
    return build_parser(load_config(path))
