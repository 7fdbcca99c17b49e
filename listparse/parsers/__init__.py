"""
Parsers sub-package for listparse.

Contains the list parser engine: parsers that consume the fields of one
record left to right and produce a typed value or a positioned failure.

Layout:
- base.py defines ``ParseState``, the ``Success`` / ``Failure`` outcomes,
  ``RunResult`` and the ``ListParser`` class with its combinators
  (map, flat_map, alternation, repetition, constraints).
- primitives.py implements one-field parsers: strings, scalars, dates,
  enumerations and position helpers.
- structural.py implements parsers for fields with internal structure:
  bracketed text, delimited pairs, delimited lists and key-value maps.
"""

from listparse.parsers.base import (
    Failure,
    ListParser,
    ParseOutcome,
    ParseState,
    RunResult,
    Success,
    empty,
    fail,
    run,
    sequence,
    success,
)
from listparse.parsers.primitives import (
    boolean,
    byte,
    char,
    char_flag,
    consume,
    consume_rest,
    debug,
    double,
    double_or_zero,
    empty_list,
    empty_string,
    get_position,
    int_,
    int_or_zero,
    local_date,
    local_date_format,
    local_datetime,
    local_datetime_format,
    long,
    next_field,
    one_of,
    one_of_list,
    parse_attempt,
    parse_with_type,
    short,
    string,
    string_opt,
    value,
    value_or,
)
from listparse.parsers.structural import (
    bracketed,
    csv_pair,
    csv_values,
    delimited_values,
    json_key_value_map,
    key_value_map,
    pair,
)

__all__ = [
    "Failure",
    "ListParser",
    "ParseOutcome",
    "ParseState",
    "RunResult",
    "Success",
    "boolean",
    "bracketed",
    "byte",
    "char",
    "char_flag",
    "consume",
    "consume_rest",
    "csv_pair",
    "csv_values",
    "debug",
    "delimited_values",
    "double",
    "double_or_zero",
    "empty",
    "empty_list",
    "empty_string",
    "fail",
    "get_position",
    "int_",
    "int_or_zero",
    "json_key_value_map",
    "key_value_map",
    "local_date",
    "local_date_format",
    "local_datetime",
    "local_datetime_format",
    "long",
    "next_field",
    "one_of",
    "one_of_list",
    "pair",
    "parse_attempt",
    "parse_with_type",
    "run",
    "sequence",
    "short",
    "string",
    "string_opt",
    "success",
    "value",
    "value_or",
]
