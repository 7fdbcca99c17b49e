"""
Primitive field parsers for listparse.

Each primitive consumes at most one field. Scalar parsers convert the
field strictly: when the text does not convert, the failure names the
expected kind and the offending text and is reported at the position
**before** the field was consumed, so the diagnostic points at the
offending field.

Conversions follow the conventional textual forms:

- Integral kinds accept an optional sign followed by ASCII digits and are
  range-checked (byte = 8 bits, short = 16, int = 32, long = 64, signed).
- ``double`` accepts decimal notation with optional fraction and exponent,
  plus ``NaN`` and ``Infinity``.
- ``boolean`` accepts ``true`` / ``false`` in any letter case.
- ``char`` accepts single-character fields only.

No whitespace trimming and no digit-group separators anywhere; use
``ListParser.preprocess`` to clean fields first when needed.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, Callable, Iterable, TypeVar

from listparse import dates
from listparse.parsers.base import (
    Failure,
    ListParser,
    ParseOutcome,
    ParseState,
    Success,
    empty,
    fail,
    success,
)

logger = logging.getLogger(__name__)

A = TypeVar("A")

_INTEGRAL_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------

def _next_field(state: ParseState) -> ParseOutcome[str]:
    if not state.remaining:
        return Failure(
            state.position,
            f"not enough input, expected more than {state.position} fields.",
        )
    return Success(state.advance(), state.remaining[0])


#: Exactly one field; fails only when the input is exhausted.
string: ListParser[str] = ListParser(_next_field)
next_field = string

#: One field, or ``None`` when the input is exhausted.
string_opt: ListParser[str | None] = string | success(None)


def _get_position(state: ParseState) -> ParseOutcome[int]:
    return Success(state, state.position)


#: The current position, without consuming anything.
get_position: ListParser[int] = ListParser(_get_position)


def consume(n: int) -> ListParser[None]:
    """Skip the next *n* fields."""
    if n < 0:
        raise ValueError(f"Cannot consume a negative number of fields: {n}")

    def step(state: ParseState) -> ParseOutcome[None]:
        if n > len(state.remaining):
            return Failure(
                state.position + n,
                f"not enough input, expected more than {state.position + n}.",
            )
        return Success(state.advance(n), None)
    return ListParser(step)


def _consume_rest(state: ParseState) -> ParseOutcome[None]:
    return Success(state.advance(len(state.remaining)), None)


#: Skip every remaining field.
consume_rest: ListParser[None] = ListParser(_consume_rest)


def debug(tag: str) -> ListParser[None]:
    """Log the current state at DEBUG level and succeed without consuming."""
    def step(state: ParseState) -> ParseOutcome[None]:
        logger.debug("[%s] %d, %s", tag, state.position, list(state.remaining))
        return Success(state, None)
    return ListParser(step)


# ---------------------------------------------------------------------------
# Building scalar parsers
# ---------------------------------------------------------------------------

def parse_with_type(convert: Callable[[str], A], annotation: str) -> ListParser[A]:
    """Build a one-field parser from a conversion that raises on bad input.

    *convert* signals bad input by raising ``ValueError`` (or
    ``ArithmeticError`` for out-of-range values). The failure message is
    ``"<annotation>: '<field>'"`` at the position before the field.
    """
    def step(state: ParseState) -> ParseOutcome[A]:
        outcome = _next_field(state)
        if not outcome.ok:
            return outcome
        text = outcome.value
        try:
            converted = convert(text)
        except (ValueError, ArithmeticError):
            return Failure(state.position, f"{annotation}: '{text}'")
        return Success(outcome.state, converted)
    return ListParser(step)


def parse_attempt(convert: Callable[[str], A | None], annotation: str) -> ListParser[A]:
    """Build a one-field parser from a conversion returning ``None`` on bad input."""
    def _convert(text: str) -> A:
        converted = convert(text)
        if converted is None:
            raise ValueError(text)
        return converted
    return parse_with_type(_convert, annotation)


def value(thunk: Callable[[], A]) -> ListParser[A]:
    """Succeed with ``thunk()``; a ``ValueError`` becomes a failure.

    The exception's message becomes the failure message, reported at the
    current position. Nothing is consumed.
    """
    def step(state: ParseState) -> ParseOutcome[A]:
        try:
            return Success(state, thunk())
        except ValueError as e:
            return Failure(state.position, str(e))
    return ListParser(step)


def value_or(thunk: Callable[[], A], on_error: Callable[[Exception], str]) -> ListParser[A]:
    """Succeed with ``thunk()``; any exception is turned into a failure by *on_error*."""
    def step(state: ParseState) -> ParseOutcome[A]:
        try:
            return Success(state, thunk())
        except Exception as e:
            return Failure(state.position, on_error(e))
    return ListParser(step)


def _integral(bits: int) -> Callable[[str], int]:
    low = -(1 << (bits - 1))
    high = (1 << (bits - 1)) - 1

    def convert(text: str) -> int:
        if not _INTEGRAL_RE.fullmatch(text):
            raise ValueError(text)
        n = int(text)
        if not low <= n <= high:
            raise OverflowError(text)
        return n
    return convert


def _to_double(text: str) -> float:
    if not _DECIMAL_RE.fullmatch(text):
        raise ValueError(text)
    return float(text.replace("Infinity", "inf"))


def _to_boolean(text: str) -> bool:
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(text)


def _to_char(text: str) -> str | None:
    return text if len(text) == 1 else None


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

byte: ListParser[int] = parse_with_type(_integral(8), "not a byte")
short: ListParser[int] = parse_with_type(_integral(16), "not a short")
int_: ListParser[int] = parse_with_type(_integral(32), "not an int")
long: ListParser[int] = parse_with_type(_integral(64), "not a long")
double: ListParser[float] = parse_with_type(_to_double, "not a double")
boolean: ListParser[bool] = parse_with_type(_to_boolean, "not a boolean")
char: ListParser[str] = parse_attempt(_to_char, "not a char")


def char_flag(valid: Iterable[str]) -> ListParser[str]:
    """A ``char`` restricted to the characters in *valid*."""
    valid = list(valid)

    def check(c: str) -> ListParser[str]:
        if c in valid:
            return success(c)
        return fail(f"Unknown flag '{c}', expected one of '{','.join(valid)}'")
    return char.flat_map(check)


def one_of_list(names: Iterable[str]) -> ListParser[str]:
    """A field whose text is exactly one of *names*."""
    names = list(names)
    allowed = set(names)
    return parse_attempt(
        lambda s: s if s in allowed else None,
        f"{','.join(names)} does not contain",
    )


def one_of(name: str, *names: str) -> ListParser[str]:
    """A field whose text is exactly one of the given names."""
    return one_of_list([name, *names])


# ---------------------------------------------------------------------------
# Defaults for exhausted input
# ---------------------------------------------------------------------------

empty_string: ListParser[str] = empty("")


def empty_list() -> ListParser[list[Any]]:
    """Succeed with a fresh empty list when no fields remain."""
    def step(state: ParseState) -> ParseOutcome[list[Any]]:
        if state.remaining:
            return Failure(state.position, f"{list(state.remaining)} is not empty")
        return Success(state, [])
    return ListParser(step)


double_or_zero: ListParser[float] = empty(0.0) | double
int_or_zero: ListParser[int] = empty(0) | int_


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def local_date_format(pattern: str) -> ListParser[date]:
    """A date in the given pattern (e.g. ``dd/MM/yyyy``). See ``listparse.dates``."""
    dates.to_strptime(pattern)
    return parse_with_type(
        lambda s: dates.parse_date(s, pattern),
        f"not a local date with format {pattern}",
    )


def local_datetime_format(pattern: str) -> ListParser[datetime]:
    """A date-time in the given pattern (e.g. ``yyyy-MM-dd'T'HH:mm``)."""
    dates.to_strptime(pattern)
    return parse_with_type(
        lambda s: dates.parse_datetime(s, pattern),
        f"not a local date time with format {pattern}",
    )


#: A date in ``yyyy-MM-dd`` format.
local_date: ListParser[date] = local_date_format(dates.DEFAULT_DATE_PATTERN)

#: A date-time in ``yyyy-MM-dd HH:mm:ss`` format.
local_datetime: ListParser[datetime] = local_datetime_format(dates.DEFAULT_DATETIME_PATTERN)
