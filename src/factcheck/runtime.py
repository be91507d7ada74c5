"""Fact dispatch, context and handler stacks, and the run-wide result log.

All mutable state lives on a :class:`RunContext`. The module-level functions
(``fact``, ``facts``, ``context``...) delegate to a process-wide default
instance for convenience; that default is NOT safe for suites running
concurrently on several threads. Give each thread its own ``RunContext``
instead.
"""

from __future__ import annotations

import logging
import os
import sys
import traceback
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping

from factcheck.predicates import Check, fact_pred, lazy_fact_pred, throws_pred
from factcheck.reporting.console import ConsoleReporter
from factcheck.results import Error, Failure, Result, Success, safe_repr, status_of
from factcheck.stats import FactStats, HarnessError, check_exit_status, compute_stats
from factcheck.suite import Handler, TestSuite, make_handler

_PACKAGE_DIR = str(Path(__file__).resolve().parent) + os.sep


def _describe(value: Any) -> str:
    if callable(value) and hasattr(value, "__qualname__"):
        return value.__qualname__
    return safe_repr(value)


def format_assertion(actual: Any, expected: Any) -> str:
    """Format a fact as ``"<actual> => <expected>"``.

        format_assertion(2, 2)        # => "2 => 2"
        format_assertion(x, truthy)   # => "... => truthy"
    """
    return f"{_describe(actual)} => {_describe(expected)}"


def call_site() -> dict[str, Any]:
    """Best-effort file/line of the first caller outside this package."""
    try:
        frame = sys._getframe(1)
    except ValueError:
        return {}
    while frame is not None:
        filename = frame.f_code.co_filename
        if not str(Path(filename).resolve()).startswith(_PACKAGE_DIR):
            return {"file": filename, "line": frame.f_lineno}
        frame = frame.f_back
    return {}


class RunContext:
    """Context labels, result handlers and results for one test run."""

    def __init__(
        self,
        reporter: ConsoleReporter | None = None,
        logger: logging.Logger | None = None,
    ):
        self.reporter = reporter if reporter is not None else ConsoleReporter()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        # contexts[-1] is the innermost label; handlers[-1] receives results.
        self.contexts: list[str] = []
        self.handlers: list[Handler] = []
        self.all_results: list[Result] = []
        self.suites: list[TestSuite] = []
        self.current_file: str | None = None

    @property
    def context_label(self) -> str | None:
        """Innermost open context label, or ``None``."""
        return self.contexts[-1] if self.contexts else None

    # -- dispatch -----------------------------------------------------------

    def do_fact(self, check: Check, expr: str, meta: Mapping[str, Any] | None = None) -> Result:
        """Run ``check`` and record the resulting Success, Failure or Error.

        Only a raise from inside ``check`` becomes an ``Error``. The result is
        passed to the topmost handler (if any) and always appended to
        ``all_results``.
        """
        meta = {**(meta or {}), "context": self.context_label, "seq": len(self.all_results)}
        try:
            passed, value = check()
        except Exception as exc:
            result: Result = Error(expr, exc, traceback.format_exc(), meta)
        else:
            result = Success(expr, value, meta) if passed else Failure(expr, value, meta)

        if isinstance(result, Error):
            self.logger.debug(f"Fact errored: {expr}\n{result.trace}")
        else:
            self.logger.debug(f"Fact {status_of(result)}: {expr} (got {safe_repr(result.value)})")

        try:
            if self.handlers:
                self.handlers[-1](result)
        finally:
            self.all_results.append(result)
        return result

    def fact(
        self,
        actual: Any,
        expected: Any,
        text: str | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> Result:
        """Check ``actual`` against a value (``==``) or a one-argument predicate."""
        return self.do_fact(
            fact_pred(actual, expected),
            text if text is not None else format_assertion(actual, expected),
            {**call_site(), **(meta or {})},
        )

    def fact_lazy(
        self,
        compute: Callable[[], Any],
        expected: Any,
        text: str | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> Result:
        """Like :meth:`fact`, but the actual value comes from ``compute()``.

        A raise while computing it is recorded as an ``Error`` instead of
        escaping into the suite body.
        """
        return self.do_fact(
            lazy_fact_pred(compute, expected),
            text if text is not None else f"{_describe(compute)}() => {_describe(expected)}",
            {**call_site(), **(meta or {})},
        )

    def fact_throws(
        self,
        compute: Callable[[], Any],
        exc_type: type[BaseException] | tuple[type[BaseException], ...] = Exception,
        text: str | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> Result:
        """Succeed when ``compute()`` raises ``exc_type``, fail when it returns."""
        return self.do_fact(
            throws_pred(compute, exc_type),
            text if text is not None else f"{_describe(compute)}() throws",
            {**call_site(), **(meta or {})},
        )

    # -- scoping ------------------------------------------------------------

    @contextmanager
    def context(self, label: str | None = None) -> Iterator[None]:
        """Label the facts evaluated inside the block. No label, no push."""
        if label is None:
            yield
            return
        self.contexts.append(label)
        try:
            yield
        finally:
            self.contexts.pop()

    def with_context(self, body: Callable[[], Any], label: str | None = None) -> None:
        with self.context(label):
            body()

    @contextmanager
    def handler(self, fn: Handler) -> Iterator[Handler]:
        """Make ``fn`` the active handler for the duration of the block."""
        self.handlers.append(fn)
        try:
            yield fn
        finally:
            if not self.handlers or self.handlers[-1] is not fn:
                raise HarnessError("Result handler stack corrupted: active handler is not the one being removed")
            self.handlers.pop()

    @contextmanager
    def facts(self, description: str | None = None, *, filename: str | None = None) -> Iterator[TestSuite]:
        """Collect the facts evaluated in the block into a new suite.

        Prints a header, renders failures and errors as they happen and a
        summary at the end. The handler is removed and the summary printed
        even when the block raises; the exception then propagates.
        """
        suite = TestSuite(
            description=description,
            filename=filename if filename is not None else self.current_file,
        )
        self.logger.debug(f"Starting suite: {description!r}")
        with self.handler(make_handler(suite, self.reporter)):
            self.reporter.suite_header(suite)
            try:
                yield suite
            except Exception:
                self.logger.warning(f"Suite {description!r} raised outside of a fact")
                raise
            finally:
                self.reporter.summary(suite)
                self.suites.append(suite)
                self.logger.debug(
                    f"Finished suite {description!r}: {len(suite.successes)} verified, "
                    f"{len(suite.failures)} failed, {len(suite.errors)} errored"
                )

    def run_facts(self, body: Callable[[], Any], description: str | None = None) -> None:
        with self.facts(description):
            body()

    # -- statistics ---------------------------------------------------------

    def get_stats(self) -> FactStats:
        return compute_stats(self.all_results)

    def exit_status(self) -> None:
        """Raise ``NonSuccessfulFactsError`` if any recorded fact did not succeed."""
        check_exit_status(self.get_stats())


_default: RunContext | None = None


def default_context() -> RunContext:
    """The process-wide context used by the module-level functions."""
    global _default
    if _default is None:
        _default = RunContext()
    return _default


def reset_default_context(
    reporter: ConsoleReporter | None = None,
    logger: logging.Logger | None = None,
) -> RunContext:
    """Replace the process-wide context with a fresh one and return it."""
    global _default
    _default = RunContext(reporter=reporter, logger=logger)
    return _default


def fact(actual: Any, expected: Any, text: str | None = None) -> Result:
    return default_context().fact(actual, expected, text)


def fact_lazy(compute: Callable[[], Any], expected: Any, text: str | None = None) -> Result:
    return default_context().fact_lazy(compute, expected, text)


def fact_throws(
    compute: Callable[[], Any],
    exc_type: type[BaseException] | tuple[type[BaseException], ...] = Exception,
    text: str | None = None,
) -> Result:
    return default_context().fact_throws(compute, exc_type, text)


def facts(description: str | None = None, *, filename: str | None = None):
    return default_context().facts(description, filename=filename)


def run_facts(body: Callable[[], Any], description: str | None = None) -> None:
    default_context().run_facts(body, description)


def context(label: str | None = None):
    return default_context().context(label)


def with_context(body: Callable[[], Any], label: str | None = None) -> None:
    default_context().with_context(body, label)


def get_stats() -> FactStats:
    return default_context().get_stats()


def exit_status() -> None:
    default_context().exit_status()
