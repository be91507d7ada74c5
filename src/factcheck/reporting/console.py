from __future__ import annotations

from typing import IO, TYPE_CHECKING

import typer

from factcheck.results import Error, Failure, Result, Success, safe_repr, status_of

if TYPE_CHECKING:
    from factcheck.suite import TestSuite


def pluralize(word: str, n: int) -> str:
    return word if n == 1 else f"{word}s"


def format_line(result: Result, label: str) -> str:
    """Append the line and context annotations carried in ``result.meta``.

        format_line(Success("1 => 1", 1, {}), "Success")
        # => "Success"
        format_line(Success("1 => 1", 1, {"line": 10, "context": "math"}), "Success")
        # => "Success :: (line:10) :: math"
    """
    line = result.meta.get("line")
    context = result.meta.get("context")
    formatted = f"{label} :: (line:{line})" if line is not None else label
    if context is not None:
        formatted += f" :: {context}"
    return formatted


def format_value(result: Failure, formatted: str) -> str:
    return f"{formatted} :: got {safe_repr(result.value)}"


def format_error(result: Error) -> str:
    try:
        message = str(result.error)
    except Exception:
        message = safe_repr(result.error)
    name = type(result.error).__name__
    return f"{name}: {message}" if message else name


def format_suite(suite: TestSuite) -> str:
    """Header line: ``"<description> (<filename>)"``, either part optional."""
    parts = []
    if suite.description is not None:
        parts.append(suite.description)
    if suite.filename is not None:
        parts.append(f"({suite.filename})")
    return " ".join(parts)


class ConsoleReporter:
    """Writes suite headers, eager failure/error blocks and suite summaries."""

    def __init__(
        self,
        color: bool = True,
        show_successes: bool = False,
        file: IO[str] | None = None,
    ):
        self.color = color
        self.show_successes = show_successes
        self.file = file

    def _echo(self, message: str = "", fg: str | None = None, nl: bool = True) -> None:
        if self.color and fg is not None:
            typer.secho(message, fg=fg, nl=nl, file=self.file)
        else:
            typer.echo(message, nl=nl, file=self.file)

    def suite_header(self, suite: TestSuite) -> None:
        self._echo()
        self._echo(format_suite(suite))

    def result(self, result: Result) -> None:
        status = status_of(result)
        if status == "success":
            if self.show_successes:
                self.success(result)
        elif status == "failure":
            self.failure(result)
        else:
            self.error(result)

    def success(self, result: Success) -> None:
        self._echo("Success", fg="green", nl=False)
        self._echo(f" :: {result.expr}")

    def failure(self, result: Failure) -> None:
        self._echo("Failure", fg="red", nl=False)
        self._echo(format_value(result, format_line(result, "")))
        self._echo(result.expr)

    def error(self, result: Error) -> None:
        self._echo("Error", fg="red", nl=False)
        self._echo(format_line(result, ""))
        self._echo(result.expr)
        self._echo(format_error(result))

    def summary(self, suite: TestSuite) -> None:
        n_success = len(suite.successes)
        n_failure = len(suite.failures)
        n_error = len(suite.errors)
        if suite.passed:
            self._echo(f"{n_success} {pluralize('fact', n_success)} verified.", fg="green")
            return
        total = suite.total
        self._echo(f"Out of {total} total {pluralize('fact', total)}:")
        self._echo(f"  Verified: {n_success}", fg="green")
        self._echo(f"  Failed:   {n_failure}", fg="red")
        self._echo(f"  Errored:  {n_error}", fg="red")
