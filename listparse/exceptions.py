"""
Custom exception hierarchy for listparse.

Parse failures inside the engine are ordinary values (``Failure``) and are
never raised. The exceptions below only appear at the package boundary:
when a caller unwraps a ``RunResult``, when the record reader runs in
fail-fast mode, or when a reader config file is unusable.
"""

from __future__ import annotations


class ListParseError(Exception):
    """Base exception for all listparse errors."""


class RecordParseError(ListParseError):
    """Raised when a failed parse result is unwrapped.

    ``message`` is the failure message produced by ``ListParser.run``.
    ``line_no`` is the 1-based input line when the failure came from the
    record reader, otherwise ``None``.
    """

    def __init__(self, message: str, line_no: int | None = None) -> None:
        self.message = message
        self.line_no = line_no
        if line_no is None:
            super().__init__(message)
        else:
            super().__init__(f"line {line_no}: {message}")


class ConfigValidationError(ListParseError):
    """Raised when a reader config file fails validation.

    This can happen if:
    - The YAML file is empty.
    - The YAML document is not a mapping.
    """
