"""
Unit tests for the core combinators (listparse.parsers.base).

Tests run() (full consumption and its failure messages), map/flat_map,
alternation with backtracking, repetition (including the zero-width
guard), constraints, option and when_empty.
"""

from __future__ import annotations

import pytest

from listparse.exceptions import RecordParseError
from listparse.parsers.base import (
    Failure,
    ListParser,
    ParseState,
    RunResult,
    Success,
    empty,
    fail,
    run,
    sequence,
    success,
)
from listparse.parsers.primitives import get_position, int_, string


def _consume_then_fail(state: ParseState):
    """Consumes a field internally, then fails."""
    return Failure(state.position + 1, "left branch failed")


# ---------------------------------------------------------------------------
# run()
# ---------------------------------------------------------------------------

class TestRun:
    """Tests for run() and RunResult."""

    def test_success(self):
        """A parser that consumes every field succeeds."""
        assert run(int_, ["1"]) == RunResult(value=1)

    def test_leftover_fields_fail(self):
        """Unconsumed fields fail the run with the stopping position."""
        result = int_.run(["1", "2"])
        assert not result.ok
        assert result.error == (
            "Parsed successfully: ['1', '2'] up to position 1\n"
            " -> but the rest of the list was not consumed: ['2']"
        )

    def test_failure_on_non_empty_input_is_wrapped(self):
        """Failures on non-empty input carry the joined fields and the position."""
        result = int_.run(["x", "y"])
        assert result.error == "x, y\nnot an int: 'x' (position: 0)"

    def test_failure_on_empty_input_is_raw(self):
        """Failures on empty input return the bare message."""
        result = int_.run([])
        assert result.error == "not enough input, expected more than 0 fields."

    def test_get_raises_on_failure(self):
        """RunResult.get() raises RecordParseError with the run message."""
        with pytest.raises(RecordParseError) as exc:
            int_.run(["x"]).get()
        assert exc.value.message == "x\nnot an int: 'x' (position: 0)"
        assert exc.value.line_no is None

    def test_get_or(self):
        assert int_.run(["x"]).get_or(-1) == -1
        assert int_.run(["3"]).get_or(-1) == 3

    def test_none_value_is_success(self):
        """A None value is still a success."""
        result = success(None).run([])
        assert result.ok
        assert result.get() is None

    def test_rerun_is_identical(self):
        """Parsers hold no state between runs."""
        parser = sequence(string, int_.many())
        fields = ["a", "1", "2", "3"]
        assert parser.run(fields) == parser.run(fields)
        assert parser.parse(fields) == parser.parse(fields)

    def test_accepts_any_iterable(self):
        """Fields may come from any iterable, not only lists."""
        assert sequence(string, string).run(iter(["a", "b"])).get() == ("a", "b")


# ---------------------------------------------------------------------------
# map / flat_map / sequence
# ---------------------------------------------------------------------------

class TestSequencing:
    """Tests for map, flat_map and sequence."""

    def test_map(self):
        """map() transforms the parsed value."""
        assert int_.map(lambda n: n * 2).run(["21"]).get() == 42

    def test_map_passes_failure(self):
        """map() leaves a failure untouched."""
        assert int_.map(lambda n: n * 2).parse(["x"]) == Failure(0, "not an int: 'x'")

    def test_flat_map_threads_state(self):
        """flat_map() runs the next parser after the consumed fields."""
        parser = int_.flat_map(lambda n: string.map(lambda s: s * n))
        assert parser.run(["3", "ab"]).get() == "ababab"

    def test_flat_map_short_circuits(self):
        """flat_map() does not build the next parser after a failure."""
        called = []

        def next_parser(n):
            called.append(n)
            return string
        outcome = int_.flat_map(next_parser).parse(["x", "y"])
        assert outcome == Failure(0, "not an int: 'x'")
        assert called == []

    def test_flat_map_propagates_second_failure_unchanged(self):
        """A failure of the second parser keeps its own position."""
        outcome = string.flat_map(lambda _: int_).parse(["a", "b"])
        assert outcome == Failure(1, "not an int: 'b'")

    def test_sequence(self):
        """sequence() collects values into a tuple."""
        parser = sequence(string, int_, get_position)
        assert parser.run(["a", "1"]).get() == ("a", 1, 2)

    def test_preprocess(self):
        """preprocess() rewrites each field before parsing."""
        parser = sequence(int_, int_).preprocess(str.strip)
        assert parser.run([" 1", "2 "]).get() == (1, 2)


# ---------------------------------------------------------------------------
# Alternation
# ---------------------------------------------------------------------------

class TestAlternation:
    """Tests for | / or_else."""

    def test_left_success_is_returned_unmodified(self):
        """A left success wins without trying the right branch."""
        outcome = (int_ | string.map(len)).parse(["12", "x"])
        assert outcome == Success(ParseState(1, ("x",)), 12)

    def test_right_branch_starts_from_original_state(self):
        """The right branch sees the state from before the left branch ran."""
        parser = ListParser(_consume_then_fail) | get_position
        outcome = parser.parse(["a", "b"], position=4)
        assert outcome == Success(ParseState(4, ("a", "b")), 4)

    def test_backtracks_over_partial_consumption(self):
        """A left branch that consumed fields before failing is fully undone."""
        left = sequence(string, int_)
        right = sequence(string, string)
        outcome = (left | right).parse(["a", "b"])
        assert outcome == Success(ParseState(2, ()), ("a", "b"))

    def test_both_fail_reports_right_failure(self):
        """When both branches fail, the right failure is reported."""
        outcome = (int_ | fail("nope")).parse(["x"])
        assert outcome == Failure(0, "nope")

    def test_or_else_alias(self):
        assert int_.or_else(success(0)).run([]).get() == 0


# ---------------------------------------------------------------------------
# Repetition
# ---------------------------------------------------------------------------

class TestRepetition:
    """Tests for many1 (+) and many (*)."""

    def test_many1_preserves_order(self):
        """many1() collects values in input order."""
        assert int_.many1().run(["1", "2", "3"]).get() == [1, 2, 3]

    def test_many1_requires_one(self):
        """many1() fails when the first step fails."""
        assert int_.many1().parse(["x"]) == Failure(0, "not an int: 'x'")

    def test_many1_stops_at_first_failure(self):
        """Repetition stops at the first failing step and keeps what it has."""
        outcome = int_.many1().parse(["1", "2", "x"])
        assert outcome == Success(ParseState(2, ("x",)), [1, 2])

    def test_many_zero_occurrences(self):
        """many() succeeds with [] when nothing matches."""
        outcome = int_.many().parse(["x"])
        assert outcome == Success(ParseState(0, ("x",)), [])

    def test_many_on_empty_input(self):
        assert int_.many().run([]).get() == []

    def test_many_results_are_fresh_lists(self):
        """Each run returns a new list."""
        parser = int_.many()
        first = parser.run([]).get()
        first.append(99)
        assert parser.run([]).get() == []

    def test_zero_width_parser_terminates(self):
        """A step that consumes nothing ends the repetition."""
        outcome = success("z").many().parse(["a"])
        assert outcome == Success(ParseState(0, ("a",)), ["z"])

    def test_zero_width_when_empty_terminates(self):
        """when_empty() at end of input does not loop forever."""
        parser = int_.when_empty(0).many()
        assert parser.run(["1", "2"]).get() == [1, 2]

    def test_long_repetition_does_not_recurse(self):
        """Long repetitions do not hit the recursion limit."""
        fields = [str(i) for i in range(5_000)]
        assert int_.many().run(fields).get() == list(range(5_000))

    def test_many_inside_sequence(self):
        parser = sequence(string, int_.many(), string)
        assert parser.run(["a", "1", "2", "b"]).get() == ("a", [1, 2], "b")


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------

class TestConstraints:
    """Tests for satisfies, named, nonempty and of_length variants."""

    def test_satisfies_passes(self):
        """A value passing the predicate is returned."""
        assert int_.satisfies(lambda n: n > 0).run(["3"]).get() == 3

    def test_satisfies_fails_one_past_start(self):
        """A rejected value fails one past the starting position."""
        parser = string.flat_map(lambda _: int_.satisfies(lambda n: n > 0))
        outcome = parser.parse(["a", "-3"])
        assert outcome == Failure(2, "Value does not satisfy supposition")

    def test_satisfies_passes_inner_failure(self):
        """A failure of the wrapped parser is returned unchanged."""
        outcome = int_.satisfies(lambda n: n > 0).parse(["x"])
        assert outcome == Failure(0, "not an int: 'x'")

    def test_named_appends_label(self):
        """named() adds the label to the failure message."""
        outcome = int_.named("quantity").parse(["x"])
        assert outcome == Failure(0, "not an int: 'x' (for quantity)")

    def test_named_passes_success(self):
        assert int_.named("quantity").run(["1"]).get() == 1

    def test_nonempty(self):
        """nonempty() rejects an empty string."""
        assert string.nonempty().run(["a"]).get() == "a"
        assert string.nonempty().parse([""]) == Failure(
            1, "Expected string at position 1 to be non empty"
        )

    def test_of_length(self):
        """of_length(n) requires exactly n characters."""
        parser = string.of_length(3)
        assert parser.run(["abc"]).get() == "abc"
        assert parser.parse(["ab"]) == Failure(
            1, "Expected string at position 1 to be of length 3"
        )

    def test_of_length_range(self):
        """of_length(lo, hi) accepts lengths within the bounds."""
        parser = string.of_length(2, 3)
        assert parser.run(["ab"]).get() == "ab"
        assert parser.run(["abc"]).get() == "abc"
        assert parser.parse(["abcd"]) == Failure(
            1, "Expected string at position 1 to be of length between 2 and 3"
        )

    def test_of_length_invalid_bounds(self):
        """An upper bound below the lower bound raises ValueError."""
        with pytest.raises(ValueError):
            string.of_length(3, 2)

    def test_of_length_if_some(self):
        """of_length_if_some() checks only present values."""
        parser = string.option().of_length_if_some(2)
        assert parser.run(["ab"]).get() == "ab"
        assert parser.run([""]).get() is None
        assert parser.parse(["abc"]) == Failure(
            1, "Expected the optional string at position 1 to be of length 2 if it exists"
        )

    def test_of_length_if_some_range(self):
        parser = string.option().of_length_if_some(1, 2)
        assert parser.run([""]).get() is None
        assert parser.parse(["abc"]) == Failure(
            1,
            "Expected the optional string at position 1 to be of length between 1 and 2 "
            "if it exists",
        )


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

class TestDefaults:
    """Tests for option, when_empty and empty."""

    def test_option_empty_field_is_none(self):
        """option() turns an empty field into None and consumes it."""
        outcome = int_.option().parse(["", "x"])
        assert outcome == Success(ParseState(1, ("x",)), None)

    def test_option_present(self):
        assert int_.option().run(["5"]).get() == 5

    def test_option_passes_failure(self):
        """option() does not hide failures on non-empty fields."""
        assert int_.option().parse(["x"]) == Failure(0, "not an int: 'x'")

    def test_option_hides_empty_field_from_wrapped_parser(self):
        """The wrapped parser never sees the empty field."""
        seen = []
        parser = string.map(lambda s: seen.append(s) or s).option()
        assert parser.run([""]).get() is None
        assert seen == []

    def test_when_empty_on_exhausted_input(self):
        """when_empty() yields the default at end of input without consuming."""
        outcome = int_.when_empty(7).parse([], position=2)
        assert outcome == Success(ParseState(2, ()), 7)

    def test_when_empty_delegates(self):
        assert int_.when_empty(7).run(["1"]).get() == 1

    def test_when_empty_does_not_cover_empty_field(self):
        """when_empty() only covers exhausted input, not an empty field."""
        assert not int_.when_empty(7).run([""]).ok

    def test_empty(self):
        """empty() fails when fields remain."""
        assert empty("x").parse(["a"]) == Failure(0, "['a'] is not empty")
