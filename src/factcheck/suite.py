"""Suite data structure and the handler that feeds it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from factcheck.reporting.console import ConsoleReporter
from factcheck.results import Error, Failure, Result, Success, status_of

Handler = Callable[[Result], None]


@dataclass
class TestSuite:
    """Results of one ``facts`` block, plus its description and source file."""

    __test__ = False  # not a pytest test class

    description: str | None = None
    filename: str | None = None
    successes: list[Success] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)
    errors: list[Error] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successes) + len(self.failures) + len(self.errors)

    @property
    def passed(self) -> bool:
        return not self.failures and not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "filename": self.filename,
            "successes": len(self.successes),
            "failures": len(self.failures),
            "errors": len(self.errors),
        }


def make_handler(suite: TestSuite, reporter: ConsoleReporter) -> Handler:
    """Build a handler storing results in ``suite``.

    Successes are kept silently until the summary; failures and errors are
    rendered as soon as they arrive.
    """

    def handle(result: Result) -> None:
        status = status_of(result)
        if status == "success":
            suite.successes.append(result)
        elif status == "failure":
            suite.failures.append(result)
        else:
            suite.errors.append(result)
        reporter.result(result)

    return handle
