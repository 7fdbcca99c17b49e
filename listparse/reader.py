"""
Record reading for listparse.

Connects the parser engine to text files: reads the lines of a file,
splits each line with the delimiter tokenizer and runs one parser per
record. The results are collected in a ``RecordBatch``, which keeps
successes and failures side by side (with their 1-based line numbers)
and can turn either into a pandas DataFrame.

The engine never raises on bad records. This module only raises in
fail-fast mode (``ReaderConfig.fail_fast``), where the first failing
record aborts the read with ``RecordParseError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

import pandas as pd

from listparse.config import ReaderConfig
from listparse.delimited import tokenize
from listparse.exceptions import RecordParseError
from listparse.parsers.base import ListParser, RunResult

logger = logging.getLogger(__name__)


@dataclass
class ParsedRecord:
    """One input line and the result of parsing it."""
    line_no: int
    line: str
    fields: list[str]
    result: RunResult[Any]

    @property
    def ok(self) -> bool:
        return self.result.ok


@dataclass
class RecordBatch:
    """Results of parsing a sequence of lines, in input order."""
    records: list[ParsedRecord] = field(default_factory=list)

    @property
    def values(self) -> list[Any]:
        """Parsed values of the successful records."""
        return [r.result.value for r in self.records if r.ok]

    @property
    def failures(self) -> list[ParsedRecord]:
        return [r for r in self.records if not r.ok]

    @property
    def ok(self) -> bool:
        """True when every record parsed."""
        return all(r.ok for r in self.records)

    def to_frame(self, columns: Sequence[str] | None = None) -> pd.DataFrame:
        """Build a DataFrame from the successful records.

        - Tuple / list values become one column per element (named by
          *columns*, or ``0, 1, ...``).
        - Dict values become one column per key.
        - Any other value goes into a single ``value`` column.

        A ``line_no`` column is always added first. A batch with no
        successful records gives an empty frame with the requested columns.
        """
        good = [r for r in self.records if r.ok]
        line_nos = [r.line_no for r in good]
        values = [r.result.value for r in good]

        if not values:
            df = pd.DataFrame(columns=list(columns) if columns is not None else ["value"])
        elif all(isinstance(v, dict) for v in values):
            df = pd.DataFrame.from_records(values)
        elif all(isinstance(v, (tuple, list)) for v in values):
            df = pd.DataFrame.from_records([list(v) for v in values])
        else:
            df = pd.DataFrame({"value": pd.Series(values, dtype=object)})

        if columns is not None:
            if len(columns) != len(df.columns):
                raise ValueError(
                    f"Expected {len(df.columns)} column names, got {len(columns)}: "
                    f"{list(columns)}"
                )
            df.columns = list(columns)

        df.insert(0, "line_no", line_nos)
        return df

    def failures_frame(self) -> pd.DataFrame:
        """DataFrame of failed records: ``line_no``, ``line``, ``message``."""
        bad = self.failures
        return pd.DataFrame({
            "line_no": [r.line_no for r in bad],
            "line": [r.line for r in bad],
            "message": [r.result.error for r in bad],
        })


def read_lines(path: str | Path, encoding: str = "utf-8-sig") -> list[str]:
    """Read a text file into lines, without line terminators.

    The default encoding drops a leading UTF-8 BOM.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with open(path, "r", encoding=encoding, newline="") as f:
        return [line.rstrip("\r\n") for line in f]


def parse_lines(
    lines: Iterable[str],
    parser: ListParser[Any],
    config: ReaderConfig | None = None,
) -> RecordBatch:
    """Tokenize and parse each line as one record.

    Args:
        lines: Decoded lines, without line terminators.
        parser: Parser applied to the fields of each line; it must consume
            every field.
        config: Reader settings. Defaults to ``ReaderConfig()``.

    Returns:
        A RecordBatch with one entry per parsed line.

    Raises:
        RecordParseError: On the first failing record when
            ``config.fail_fast`` is True.
    """
    if config is None:
        config = ReaderConfig()

    batch = RecordBatch()
    for line_no, line in enumerate(lines, start=1):
        if line_no <= config.header_rows:
            continue
        if config.skip_blank_lines and line == "":
            continue

        fields = tokenize(line, config.delimiter)
        result = parser.run(fields)
        if not result.ok:
            if config.fail_fast:
                raise RecordParseError(result.error, line_no=line_no)
            logger.warning("Line %d failed to parse: %s", line_no, result.error)
        batch.records.append(
            ParsedRecord(line_no=line_no, line=line, fields=fields, result=result)
        )

    return batch


def read_records(
    path: str | Path,
    parser: ListParser[Any],
    config: ReaderConfig | None = None,
) -> RecordBatch:
    """Read a delimited text file and parse every line as one record.

    Raises:
        FileNotFoundError: If the file does not exist.
        RecordParseError: On the first failing record in fail-fast mode.
    """
    if config is None:
        config = ReaderConfig()

    lines = read_lines(path, encoding=config.encoding)
    batch = parse_lines(lines, parser, config)
    logger.info(
        "Parsed %d records from %s (%d failures)",
        len(batch.records), Path(path).name, len(batch.failures),
    )
    return batch
