"""
Delimiter tokenizer for listparse.

Splits one already-read line of text into its fields, honouring
double-quote quoting the way most CSV producers emit it:

- A field is quoted only when its **first** character is ``"``.
- Inside a quoted field the delimiter is ordinary text, and ``""`` stands
  for one literal quote.
- A lone ``"`` closes the quoted section. Anything after it up to the next
  delimiter is kept verbatim (lenient: malformed trailing text is not
  rejected).
- An unterminated quoted field runs to the end of the line.

Splitting never fails. ``""`` yields ``[""]``, a trailing delimiter yields
a trailing empty field, and consecutive delimiters yield empty fields.

The scan is a single left-to-right pass over the characters with no
backtracking. Lines that contain no quote at all cannot trigger any of the
quoting rules and go through ``str.split`` directly, which is by far the
common case for machine-generated files.
"""

from __future__ import annotations

from typing import Callable

QUOTE = '"'

# Tokenizer states
_UNQUOTED = 0
_QUOTED = 1
_MAYBE_CLOSE_QUOTE = 2


def _check_delimiter(delimiter: str) -> None:
    if len(delimiter) != 1:
        raise ValueError(
            f"Delimiter must be a single character, got {delimiter!r}"
        )
    if delimiter == QUOTE:
        raise ValueError("The quote character cannot be used as a delimiter")


def tokenize(line: str, delimiter: str) -> list[str]:
    """Split *line* into fields on *delimiter*.

    Args:
        line: One decoded line of text, without its line terminator.
        delimiter: A single character other than ``"``.

    Returns:
        The fields of the line, in order. Always at least one field.

    Raises:
        ValueError: If *delimiter* is not a single non-quote character.
    """
    _check_delimiter(delimiter)

    if QUOTE not in line:
        return line.split(delimiter)

    fields: list[str] = []
    current: list[str] = []
    state = _UNQUOTED
    at_field_start = True

    for ch in line:
        if state == _QUOTED:
            if ch == QUOTE:
                state = _MAYBE_CLOSE_QUOTE
            else:
                current.append(ch)
        elif state == _MAYBE_CLOSE_QUOTE:
            if ch == QUOTE:
                # Escaped quote, still inside the quoted section
                current.append(QUOTE)
                state = _QUOTED
            elif ch == delimiter:
                fields.append("".join(current))
                current = []
                state = _UNQUOTED
                at_field_start = True
            else:
                current.append(ch)
                state = _UNQUOTED
        elif ch == delimiter:
            fields.append("".join(current))
            current = []
            at_field_start = True
        elif ch == QUOTE and at_field_start:
            state = _QUOTED
            at_field_start = False
        else:
            current.append(ch)
            at_field_start = False

    fields.append("".join(current))
    return fields


def tokenizer(delimiter: str) -> Callable[[str], list[str]]:
    """Return a one-argument tokenizer bound to *delimiter*."""
    _check_delimiter(delimiter)

    def _tokenize(line: str) -> list[str]:
        return tokenize(line, delimiter)

    return _tokenize


def parse_csv(line: str) -> list[str]:
    """Split a comma-separated line."""
    return tokenize(line, ",")


def parse_psv(line: str) -> list[str]:
    """Split a pipe-separated line."""
    return tokenize(line, "|")


def parse_tsv(line: str) -> list[str]:
    """Split a tab-separated line."""
    return tokenize(line, "\t")
