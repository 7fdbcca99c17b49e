"""
Structural parsers for listparse: fields with internal structure.

A single field may itself hold structured text, such as ``(abc)``,
``key:value`` or ``a:1,b:2``. These parsers consume one field of the outer
record and parse its inside:

- ``bracketed`` strips one opening and one closing character and hands the
  inner text to another parser, in place of the original field.
- ``pair`` and ``delimited_values`` re-split the field with the delimiter
  tokenizer (same quoting rules as for whole lines) and run other parsers
  over the sub-fields, each as a complete one-field record.
- ``key_value_map`` combines the two to read ``k:v,k:v`` style maps.

Sub-fields are parsed with ``ListParser.run`` from a fresh position 0, so
a failure inside a nested field is reported at the **outer** field's
position; the sub-field's own position does not survive into the outer
diagnostic. The nested ``run`` message does include the sub-field text.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from listparse.delimited import tokenizer
from listparse.parsers.base import (
    Failure,
    ListParser,
    ParseOutcome,
    ParseState,
    Success,
)

A = TypeVar("A")
B = TypeVar("B")
K = TypeVar("K")
V = TypeVar("V")

Splitter = Callable[[str], list[str]]


def _non_empty_failure(state: ParseState) -> Failure:
    return Failure(
        state.position,
        f"Expected string at position {state.position} to be non empty",
    )


def bracketed(parser: ListParser[A], opening: str, closing: str) -> ListParser[A]:
    """Parse the head field, stripped of a leading *opening* and trailing *closing*.

    The stripped text replaces the head field and *parser* continues from
    there at the same position, with the rest of the record untouched.
    When *opening* and *closing* are the same character, a field made of
    that one character counts as bracketed and leaves ``""``.
    """
    if len(opening) != 1 or len(closing) != 1:
        raise ValueError(
            f"Brackets must be single characters, got {opening!r} and {closing!r}"
        )

    def step(state: ParseState) -> ParseOutcome[A]:
        if state.remaining:
            head = state.remaining[0]
            if head.startswith(opening) and head.endswith(closing):
                inner = (head[1:-1],) + state.remaining[1:]
                return parser(ParseState(state.position, inner))
        return Failure(
            state.position,
            f"The current string to parse is not bracketed by {opening}, {closing}: "
            f"{list(state.remaining)} (at position: {state.position})",
        )
    return ListParser(step)


def csv_pair(pa: ListParser[A], pb: ListParser[B], split: Splitter) -> ListParser[tuple[A, B]]:
    """Parse one field that *split* breaks into exactly two sub-fields.

    When both sub-parsers fail, both messages are reported, one per line.
    """
    def step(state: ParseState) -> ParseOutcome[tuple[A, B]]:
        if not state.remaining or state.remaining[0] == "":
            return _non_empty_failure(state)
        parts = split(state.remaining[0])
        if len(parts) != 2:
            return Failure(state.position, f"{parts} cannot be parsed as a pair")
        first = pa.run([parts[0]])
        second = pb.run([parts[1]])
        errors = [r.error for r in (first, second) if r.error is not None]
        if errors:
            return Failure(state.position + 1, "\n".join(errors))
        return Success(state.advance(), (first.value, second.value))
    return ListParser(step)


def pair(pa: ListParser[A], pb: ListParser[B], delimiter: str) -> ListParser[tuple[A, B]]:
    """Parse one field holding two values separated by *delimiter*.

    Quoted sub-fields follow the tokenizer's lenient rules: a quoted
    sub-field with stray text after its closing quote is not rejected.
    """
    return csv_pair(pa, pb, tokenizer(delimiter))


def csv_values(p: ListParser[A], split: Splitter) -> ListParser[list[A]]:
    """Parse one field that *split* breaks into values of the same kind.

    The first failing sub-field fails the whole field, with that
    sub-field's message.
    """
    def step(state: ParseState) -> ParseOutcome[list[A]]:
        if not state.remaining or state.remaining[0] == "":
            return _non_empty_failure(state)
        values: list[A] = []
        for part in split(state.remaining[0]):
            result = p.run([part])
            if result.error is not None:
                return Failure(state.position, result.error)
            values.append(result.value)
        return Success(state.advance(), values)
    return ListParser(step)


def delimited_values(p: ListParser[A], delimiter: str) -> ListParser[list[A]]:
    """Parse one field holding *delimiter*-separated values of the same kind."""
    return csv_values(p, tokenizer(delimiter))


def key_value_map(
    key: ListParser[K],
    value: ListParser[V],
    entries_delimiter: str,
    key_value_delimiter: str,
) -> ListParser[dict[K, V]]:
    """Parse one field holding a map, e.g. ``a:1,b:2``.

    Entries are folded in input order, so a repeated key keeps its last
    value.
    """
    entries = delimited_values(pair(key, value, key_value_delimiter), entries_delimiter)
    return entries.map(dict)


def json_key_value_map(key: ListParser[K], value: ListParser[V]) -> ListParser[dict[K, V]]:
    """``key_value_map`` with ``,`` between entries and ``:`` inside them."""
    return key_value_map(key, value, ",", ":")
