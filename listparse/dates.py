"""
Date pattern support for listparse.

Date and date-time parsers take patterns written in the conventional
date-format vocabulary (``yyyy-MM-dd``, ``dd/MM/yyyy HH:mm:ss`` ...), the
one used by most JVM and spreadsheet tooling. This module translates such a
pattern into a ``datetime.strptime`` format string once and caches it.

Supported letters:

- ``y``: year (``yy`` is a 2-digit year)
- ``M``: month (``MMM`` abbreviated name, ``MMMM`` full name)
- ``d``: day of month
- ``H``: hour 0-23, ``h``: hour 1-12, ``a``: AM/PM marker
- ``m``: minute, ``s``: second, ``S``: fraction of a second
- ``E``: day name (``EEEE`` full name)

Text inside single quotes is literal; ``''`` is one literal quote.
"""

from __future__ import annotations

from datetime import date, datetime
from functools import lru_cache

DEFAULT_DATE_PATTERN = "yyyy-MM-dd"
DEFAULT_DATETIME_PATTERN = "yyyy-MM-dd HH:mm:ss"


def _translate_run(letter: str, count: int, pattern: str) -> str:
    if letter == "y":
        return "%y" if count == 2 else "%Y"
    if letter == "M":
        if count >= 4:
            return "%B"
        if count == 3:
            return "%b"
        return "%m"
    if letter == "E":
        return "%A" if count >= 4 else "%a"
    simple = {
        "d": "%d",
        "H": "%H",
        "h": "%I",
        "m": "%M",
        "s": "%S",
        "S": "%f",
        "a": "%p",
    }
    if letter in simple:
        return simple[letter]
    raise ValueError(
        f"Unsupported pattern letter '{letter}' in date pattern '{pattern}'"
    )


@lru_cache(maxsize=128)
def to_strptime(pattern: str) -> str:
    """Translate a date pattern into a ``strptime`` format string.

    Raises:
        ValueError: If the pattern uses an unsupported letter or has an
            unterminated quoted literal.
    """
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "'":
            if i + 1 < n and pattern[i + 1] == "'":
                out.append("'")
                i += 2
                continue
            i += 1
            literal: list[str] = []
            while True:
                if i >= n:
                    raise ValueError(
                        f"Unterminated quoted literal in date pattern '{pattern}'"
                    )
                if pattern[i] == "'":
                    # '' inside a literal is an escaped quote, a lone ' closes it
                    if i + 1 < n and pattern[i + 1] == "'":
                        literal.append("'")
                        i += 2
                        continue
                    i += 1
                    break
                literal.append(pattern[i])
                i += 1
            out.append("".join(literal).replace("%", "%%"))
        elif ch.isalpha():
            j = i
            while j < n and pattern[j] == ch:
                j += 1
            out.append(_translate_run(ch, j - i, pattern))
            i = j
        else:
            out.append("%%" if ch == "%" else ch)
            i += 1
    return "".join(out)


def parse_datetime(text: str, pattern: str) -> datetime:
    """Parse *text* against *pattern*. Raises ``ValueError`` on mismatch."""
    return datetime.strptime(text, to_strptime(pattern))


def parse_date(text: str, pattern: str) -> date:
    """Parse *text* against *pattern* and keep only the date part."""
    return parse_datetime(text, pattern).date()
