"""
Configuration model and YAML I/O for the listparse record reader.

The parser engine itself takes every setting as an explicit argument.
This module only describes how the record reader turns a text file into
records: which delimiter splits a line, how the file is decoded, which
lines are skipped, and whether the first failure aborts the read.

Key model:
- ReaderConfig: delimiter, encoding, header/blank line handling,
  fail-fast switch and default date patterns.

Key functions:
- load_config(path) -> ReaderConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from listparse import dates
from listparse.delimited import QUOTE
from listparse.exceptions import ConfigValidationError
from listparse.parsers.base import ListParser
from listparse.parsers.primitives import local_date_format, local_datetime_format

logger = logging.getLogger(__name__)


class ReaderConfig(BaseModel):
    """Settings for reading delimited records from a text file."""

    delimiter: str = Field(",", description="Single character separating fields")
    encoding: str = Field(
        "utf-8-sig", description="Text encoding of the input file (BOM-tolerant UTF-8 by default)"
    )
    header_rows: int = Field(0, ge=0, description="Leading lines to skip")
    skip_blank_lines: bool = Field(
        True, description="If True, empty lines are not parsed as records"
    )
    fail_fast: bool = Field(
        False, description="If True, raise on the first record that fails to parse"
    )
    date_format: str = Field(
        dates.DEFAULT_DATE_PATTERN, description="Pattern for date fields"
    )
    datetime_format: str = Field(
        dates.DEFAULT_DATETIME_PATTERN, description="Pattern for date-time fields"
    )

    @field_validator("delimiter")
    @classmethod
    def _check_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"delimiter must be a single character, got {v!r}")
        if v == QUOTE:
            raise ValueError("delimiter cannot be the quote character")
        return v

    @field_validator("date_format", "datetime_format")
    @classmethod
    def _check_pattern(cls, v: str) -> str:
        dates.to_strptime(v)
        return v

    def date_parser(self) -> ListParser[date]:
        """A date parser using ``date_format``."""
        return local_date_format(self.date_format)

    def datetime_parser(self) -> ListParser[datetime]:
        """A date-time parser using ``datetime_format``."""
        return local_datetime_format(self.datetime_format)


def load_config(path: str | Path) -> ReaderConfig:
    """Load and validate a reader config YAML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty or not a mapping.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            f"Config file must contain a mapping, got {type(raw).__name__}: {path}"
        )
    logger.info("Loaded config from %s", path)
    return ReaderConfig.model_validate(raw)


def save_config(config: ReaderConfig, path: str | Path) -> None:
    """Serialize a ReaderConfig to YAML, with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# listparse reader configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
