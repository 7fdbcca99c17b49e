"""
Core list parser engine for listparse.

A ``ListParser`` wraps a single pure step function::

    ParseState -> Success | Failure

where ``ParseState`` is the number of fields consumed so far plus the
fields still to parse. Every step returns a **new** state rather than
moving a shared cursor, so alternation gets backtracking for free: the
right-hand branch is simply called with the state the left-hand branch
was given.

Combinators are methods that build new ``ListParser`` instances around
existing ones. Parsers hold no per-call state, so a parser graph built
once can be reused (and shared across threads) for any number of records.

Failures are values, never exceptions. They short-circuit ``flat_map``
chains and are only recovered by ``|`` (``or_else``), ``when_empty`` or
``option``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Generic, Iterable, TypeVar, Union

from listparse.exceptions import RecordParseError

A = TypeVar("A")
B = TypeVar("B")


# ---------------------------------------------------------------------------
# State and outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParseState:
    """Position reached so far and the fields left to parse.

    Attributes:
        position: Count of fields consumed since the start of ``run``.
        remaining: Fields not yet consumed, in input order.
    """
    position: int
    remaining: tuple[str, ...]

    @classmethod
    def initial(cls, fields: Iterable[str]) -> ParseState:
        return cls(0, tuple(fields))

    def advance(self, n: int = 1) -> ParseState:
        """Return the state after consuming the next *n* fields."""
        return ParseState(self.position + n, self.remaining[n:])


@dataclass(frozen=True)
class Success(Generic[A]):
    """A successful step: the state to continue from and the parsed value."""
    state: ParseState
    value: A
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Failure:
    """A failed step: where it failed and why."""
    position: int
    message: str
    ok: ClassVar[bool] = False


ParseOutcome = Union[Success[A], Failure]


@dataclass(frozen=True)
class RunResult(Generic[A]):
    """Result of running a parser over a whole record.

    Exactly one of ``value`` / ``error`` is meaningful: ``error`` is
    ``None`` on success (``value`` may itself be ``None``, e.g. for an
    ``option()`` parser).
    """
    value: A | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def get(self) -> A:
        """Return the parsed value, or raise ``RecordParseError``."""
        if self.error is not None:
            raise RecordParseError(self.error)
        return self.value  # type: ignore[return-value]

    def get_or(self, default: A) -> A:
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# ListParser
# ---------------------------------------------------------------------------

class ListParser(Generic[A]):
    """Parser over a list of fields, producing a value of type ``A``."""

    __slots__ = ("_step",)

    def __init__(self, step: Callable[[ParseState], ParseOutcome[A]]) -> None:
        self._step = step

    def __call__(self, state: ParseState) -> ParseOutcome[A]:
        return self._step(state)

    # -- Entry points ------------------------------------------------------

    def parse(self, fields: Iterable[str], position: int = 0) -> ParseOutcome[A]:
        """Apply the parser to *fields*, without requiring full consumption."""
        return self._step(ParseState(position, tuple(fields)))

    def run(self, fields: Iterable[str]) -> RunResult[A]:
        """Parse a whole record; every field must be consumed.

        Failure messages:

        - Leftover fields: names the input, the position reached and the
          unconsumed rest.
        - Outright failure on a non-empty record: the record joined by
          ``", "``, a newline, the parser's message and its position.
        - Outright failure on an empty record: the parser's message only.
        """
        fields = tuple(fields)
        outcome = self.parse(fields)
        if isinstance(outcome, Success):
            if not outcome.state.remaining:
                return RunResult(value=outcome.value)
            return RunResult(
                error=(
                    f"Parsed successfully: {list(fields)} up to position "
                    f"{outcome.state.position}\n"
                    f" -> but the rest of the list was not consumed: "
                    f"{list(outcome.state.remaining)}"
                )
            )
        if not fields:
            return RunResult(error=outcome.message)
        return RunResult(
            error=", ".join(fields) + "\n" + outcome.message
            + f" (position: {outcome.position})"
        )

    # -- Core combinators --------------------------------------------------

    def map(self, f: Callable[[A], B]) -> ListParser[B]:
        """Transform a successful value. *f* must be total."""
        def step(state: ParseState) -> ParseOutcome[B]:
            outcome = self._step(state)
            if not outcome.ok:
                return outcome
            return Success(outcome.state, f(outcome.value))
        return ListParser(step)

    def flat_map(self, f: Callable[[A], ListParser[B]]) -> ListParser[B]:
        """Run this parser, then the parser *f* builds from its value."""
        def step(state: ParseState) -> ParseOutcome[B]:
            outcome = self._step(state)
            if not outcome.ok:
                return outcome
            return f(outcome.value)._step(outcome.state)
        return ListParser(step)

    def preprocess(self, f: Callable[[str], str]) -> ListParser[A]:
        """Apply *f* to every remaining field before parsing."""
        def step(state: ParseState) -> ParseOutcome[A]:
            return self._step(
                ParseState(state.position, tuple(f(x) for x in state.remaining))
            )
        return ListParser(step)

    def satisfies(self, predicate: Callable[[A], bool]) -> ListParser[A]:
        """Reject successful values for which *predicate* is false.

        The failure is reported one past the position this parser started
        at, with a fixed generic message.
        """
        def step(state: ParseState) -> ParseOutcome[A]:
            outcome = self._step(state)
            if outcome.ok and not predicate(outcome.value):
                return Failure(state.position + 1, "Value does not satisfy supposition")
            return outcome
        return ListParser(step)

    def named(self, label: str) -> ListParser[A]:
        """Append ``" (for <label>)"`` to failure messages."""
        def step(state: ParseState) -> ParseOutcome[A]:
            outcome = self._step(state)
            if outcome.ok:
                return outcome
            return Failure(outcome.position, f"{outcome.message} (for {label})")
        return ListParser(step)

    def or_else(self, other: ListParser[A]) -> ListParser[A]:
        """Try this parser; on failure try *other* from the same state."""
        def step(state: ParseState) -> ParseOutcome[A]:
            outcome = self._step(state)
            if outcome.ok:
                return outcome
            return other._step(state)
        return ListParser(step)

    def __or__(self, other: ListParser[A]) -> ListParser[A]:
        return self.or_else(other)

    def when_empty(self, default: A) -> ListParser[A]:
        """Succeed with *default* when no fields remain, else parse."""
        return empty(default) | self

    def option(self) -> ListParser[A | None]:
        """Parse an optional field: an empty field yields ``None``.

        The empty field is consumed. A wrapped parser never sees an empty
        field through ``option()``.
        """
        def step(state: ParseState) -> ParseOutcome[A | None]:
            if state.remaining and state.remaining[0] == "":
                return Success(state.advance(), None)
            return self._step(state)
        return ListParser(step)

    # -- Repetition --------------------------------------------------------

    def many1(self) -> ListParser[list[A]]:
        """One or more occurrences, in input order.

        Repetition stops at the first failing step and at the first step
        that succeeds without advancing the position, so a parser that
        consumes nothing cannot loop forever.
        """
        def step(state: ParseState) -> ParseOutcome[list[A]]:
            outcome = self._step(state)
            if not outcome.ok:
                return outcome
            values = [outcome.value]
            current = outcome.state
            if current.position == state.position:
                return Success(current, values)
            while True:
                nxt = self._step(current)
                if not nxt.ok or nxt.state.position == current.position:
                    break
                values.append(nxt.value)
                current = nxt.state
            return Success(current, values)
        return ListParser(step)

    def many(self) -> ListParser[list[A]]:
        """Zero or more occurrences; never fails."""
        plus = self.many1()

        def step(state: ParseState) -> ParseOutcome[list[A]]:
            outcome = plus._step(state)
            if outcome.ok:
                return outcome
            return Success(state, [])
        return ListParser(step)

    # -- String constraints ------------------------------------------------

    def _check(self, check: Callable[[Any], bool], message: str) -> ListParser[A]:
        def step(state: ParseState) -> ParseOutcome[A]:
            outcome = self._step(state)
            if not outcome.ok or check(outcome.value):
                return outcome
            position = outcome.state.position
            return Failure(position, message.format(position=position))
        return ListParser(step)

    def nonempty(self) -> ListParser[A]:
        return self._check(
            lambda s: len(s) > 0,
            "Expected string at position {position} to be non empty",
        )

    def of_length(self, length: int, max_length: int | None = None) -> ListParser[A]:
        """Require the parsed string to have *length* characters.

        With *max_length*, require ``length <= len(value) <= max_length``.
        """
        if max_length is None:
            return self._check(
                lambda s: len(s) == length,
                f"Expected string at position {{position}} to be of length {length}",
            )
        _check_bounds(length, max_length)
        return self._check(
            lambda s: length <= len(s) <= max_length,
            f"Expected string at position {{position}} to be of length "
            f"between {length} and {max_length}",
        )

    def of_length_if_some(self, length: int, max_length: int | None = None) -> ListParser[A]:
        """Like ``of_length`` for an optional string; ``None`` always passes."""
        if max_length is None:
            return self._check(
                lambda s: s is None or len(s) == length,
                f"Expected the optional string at position {{position}} to be of "
                f"length {length} if it exists",
            )
        _check_bounds(length, max_length)
        return self._check(
            lambda s: s is None or length <= len(s) <= max_length,
            f"Expected the optional string at position {{position}} to be of "
            f"length between {length} and {max_length} if it exists",
        )

    # -- Nested fields -----------------------------------------------------

    def delimited(self, delimiter: str) -> ListParser[list[A]]:
        """Parse one field holding *delimiter*-separated values of this kind."""
        from listparse.parsers.structural import delimited_values

        return delimited_values(self, delimiter)

    def comma_delimited(self) -> ListParser[list[A]]:
        return self.delimited(",")

    def bracketed(self, opening: str, closing: str) -> ListParser[A]:
        """Parse the head field with its surrounding brackets stripped."""
        from listparse.parsers.structural import bracketed

        return bracketed(self, opening, closing)


def _check_bounds(min_length: int, max_length: int) -> None:
    if min_length < 0 or max_length < min_length:
        raise ValueError(
            f"Invalid length bounds: {min_length}..{max_length}"
        )


# ---------------------------------------------------------------------------
# Basic parsers
# ---------------------------------------------------------------------------

def success(value: A) -> ListParser[A]:
    """The parser that always succeeds with *value*, consuming nothing."""
    return ListParser(lambda state: Success(state, value))


def fail(message: str) -> ListParser[Any]:
    """The parser that always fails with *message*."""
    return ListParser(lambda state: Failure(state.position, message))


def empty(value: A) -> ListParser[A]:
    """Succeed with *value* only when no fields remain."""
    def step(state: ParseState) -> ParseOutcome[A]:
        if not state.remaining:
            return Success(state, value)
        return Failure(state.position, f"{list(state.remaining)} is not empty")
    return ListParser(step)


def sequence(*parsers: ListParser[Any]) -> ListParser[tuple]:
    """Run *parsers* left to right and collect their values in a tuple."""
    def step(state: ParseState) -> ParseOutcome[tuple]:
        values: list[Any] = []
        current = state
        for parser in parsers:
            outcome = parser(current)
            if not outcome.ok:
                return outcome
            values.append(outcome.value)
            current = outcome.state
        return Success(current, tuple(values))
    return ListParser(step)


def run(parser: ListParser[A], fields: Iterable[str]) -> RunResult[A]:
    """Run *parser* over a whole record. See ``ListParser.run``."""
    return parser.run(fields)
