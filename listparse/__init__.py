"""
listparse: tokenize delimited text records and parse their fields.

Public API surface:

- ``tokenize(line, delimiter)`` / ``parse_csv`` / ``parse_psv`` /
  ``parse_tsv`` -- split one line into fields, honouring double-quote
  quoting.

- ``ListParser`` and the parsers in ``listparse.parsers`` -- composable
  parsers that consume fields left to right. ``parser.run(fields)``
  returns a ``RunResult`` holding either the value or a failure message.

- ``parse_record(line, parser, delimiter=",")`` -- tokenize + run in one
  call.

- ``read_records(path, parser, config)`` -- parse every line of a file
  into a ``RecordBatch``.

Example::

    from listparse import parse_record
    from listparse.parsers import int_, json_key_value_map, local_date, string

    record = (
        local_date.flat_map(lambda d:
        string.flat_map(lambda name:
        json_key_value_map(string, int_).map(lambda counts: (d, name, counts))))
    )
    parse_record('2024-01-02,alice,"a:1,b:2"', record).get()
    # -> (datetime.date(2024, 1, 2), 'alice', {'a': 1, 'b': 2})
"""

from __future__ import annotations

from typing import Any

from listparse.config import ReaderConfig, load_config, save_config
from listparse.delimited import parse_csv, parse_psv, parse_tsv, tokenize, tokenizer
from listparse.exceptions import ConfigValidationError, ListParseError, RecordParseError
from listparse.parsers.base import (
    Failure,
    ListParser,
    ParseState,
    RunResult,
    Success,
    run,
)
from listparse.reader import ParsedRecord, RecordBatch, parse_lines, read_lines, read_records

__all__ = [
    "ConfigValidationError",
    "Failure",
    "ListParseError",
    "ListParser",
    "ParseState",
    "ParsedRecord",
    "ReaderConfig",
    "RecordBatch",
    "RecordParseError",
    "RunResult",
    "Success",
    "load_config",
    "parse_csv",
    "parse_lines",
    "parse_psv",
    "parse_record",
    "parse_tsv",
    "read_lines",
    "read_records",
    "run",
    "save_config",
    "tokenize",
    "tokenizer",
]


def parse_record(line: str, parser: ListParser[Any], delimiter: str = ",") -> RunResult[Any]:
    """Tokenize *line* on *delimiter* and run *parser* over its fields."""
    return parser.run(tokenize(line, delimiter))
