"""Tests for console rendering of results and suites."""

import io

import pytest

from factcheck.reporting.console import (
    ConsoleReporter,
    format_error,
    format_line,
    format_suite,
    format_value,
    pluralize,
)
from factcheck.results import Error, Failure, Success
from factcheck.suite import TestSuite, make_handler


def test_pluralize():
    assert pluralize("fact", 0) == "facts"
    assert pluralize("fact", 1) == "fact"
    assert pluralize("fact", 2) == "facts"


def test_format_line_without_meta():
    assert format_line(Success("1 => 1", 1, {}), "Success") == "Success"


def test_format_line_with_line_and_context():
    r = Success("1 => 1", 1, {"line": 10, "context": "math"})
    assert format_line(r, "Success") == "Success :: (line:10) :: math"


def test_format_value():
    assert format_value(Failure("x", [1, 2]), "") == " :: got [1, 2]"


def test_format_error():
    assert format_error(Error("x", ValueError("bad"), "")) == "ValueError: bad"
    assert format_error(Error("x", KeyboardInterrupt(), "")) == "KeyboardInterrupt"


@pytest.mark.parametrize(
    "description,filename,expected",
    [
        ("Math", None, "Math"),
        (None, "f.py", "(f.py)"),
        ("Math", "f.py", "Math (f.py)"),
        (None, None, ""),
    ],
)
def test_format_suite(description, filename, expected):
    assert format_suite(TestSuite(description=description, filename=filename)) == expected


def _reporter():
    buf = io.StringIO()
    return ConsoleReporter(color=False, file=buf), buf


def test_failure_block():
    reporter, buf = _reporter()
    reporter.failure(Failure("add(1, 1) => 3", 2, {"line": 7, "context": "add"}))
    assert buf.getvalue() == "Failure :: (line:7) :: add :: got 2\nadd(1, 1) => 3\n"


def test_error_block():
    reporter, buf = _reporter()
    reporter.error(Error("parse('') => 0", ValueError("empty"), "trace", {}))
    out = buf.getvalue()
    assert out.startswith("Error\n")
    assert "parse('') => 0" in out
    assert "ValueError: empty" in out


def test_success_hidden_unless_requested():
    reporter, buf = _reporter()
    reporter.result(Success("1 => 1", 1))
    assert buf.getvalue() == ""

    reporter.show_successes = True
    reporter.result(Success("1 => 1", 1))
    assert buf.getvalue() == "Success :: 1 => 1\n"


def test_summary_all_verified():
    reporter, buf = _reporter()
    suite = TestSuite(successes=[Success("a", 1)])
    reporter.summary(suite)
    assert buf.getvalue() == "1 fact verified.\n"


def test_summary_breakdown():
    reporter, buf = _reporter()
    suite = TestSuite(
        successes=[Success("a", 1)],
        failures=[Failure("b", 2)],
        errors=[Error("c", ValueError(), "")],
    )
    reporter.summary(suite)
    assert buf.getvalue().splitlines() == [
        "Out of 3 total facts:",
        "  Verified: 1",
        "  Failed:   1",
        "  Errored:  1",
    ]


def test_summary_empty_suite():
    reporter, buf = _reporter()
    reporter.summary(TestSuite())
    assert buf.getvalue() == "0 facts verified.\n"


def test_color_uses_secho(mocker):
    secho = mocker.patch("factcheck.reporting.console.typer.secho")
    reporter = ConsoleReporter(color=True, file=io.StringIO())
    reporter.summary(TestSuite())
    secho.assert_called_once()
    assert secho.call_args.kwargs["fg"] == "green"


def test_handler_stores_and_renders_eagerly():
    reporter, buf = _reporter()
    suite = TestSuite(description="s")
    handle = make_handler(suite, reporter)

    handle(Success("a", 1))
    assert buf.getvalue() == ""
    handle(Failure("b", 2))
    assert "Failure" in buf.getvalue()
    handle(Error("c", ValueError("x"), ""))

    assert suite.total == 3
    assert suite.passed is False
    assert suite.to_dict() == {
        "description": "s",
        "filename": None,
        "successes": 1,
        "failures": 1,
        "errors": 1,
    }


def test_handler_rejects_foreign_values():
    reporter, _ = _reporter()
    handle = make_handler(TestSuite(), reporter)
    with pytest.raises(TypeError):
        handle("oops")


class _Opaque:
    def __repr__(self):
        raise ValueError("cannot repr")


def test_format_value_survives_failing_repr():
    assert "_Opaque object at" in format_value(Failure("x", _Opaque()), "")


def test_format_error_survives_failing_str():
    class Unprintable(Exception):
        def __str__(self):
            raise ValueError("cannot str")

    assert format_error(Error("x", Unprintable(), "")) == "Unprintable: Unprintable()"
