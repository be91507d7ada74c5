"""Build the deferred checks that back ``fact`` and ``fact_throws``.

A check is a zero-argument callable returning ``(passed, value)``. Building it
is side-effect free; everything that can raise (computing the actual value,
calling a predicate, comparing with ``==``) happens when the check is invoked,
so the dispatch boundary in :mod:`factcheck.runtime` sees the raise.
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np

Check = Callable[[], tuple[bool, Any]]

_NO_ERROR = "no error"
_ERROR = "error"


def _equal(actual: Any, expected: Any) -> bool:
    if isinstance(actual, np.ndarray) or isinstance(expected, np.ndarray):
        return bool(np.array_equal(actual, expected))
    eq = expected == actual
    if isinstance(eq, (bool, np.bool_)):
        return bool(eq)
    # other array-likes compare element-wise
    if hasattr(eq, "shape"):
        return bool(np.array_equal(actual, expected))
    return bool(eq)


def check_value(actual: Any, expected: Any) -> tuple[bool, Any]:
    """Compare ``actual`` against a value or a one-argument predicate.

    If ``expected`` is a function (or other callable instance) it decides the
    outcome; otherwise equality does. Classes are compared by equality, not
    called. The reported value is always ``actual``, never the predicate.
    """
    if callable(expected) and not isinstance(expected, type):
        return bool(expected(actual)), actual
    return _equal(actual, expected), actual


def fact_pred(actual: Any, expected: Any) -> Check:
    """Check ``actual`` (an already evaluated value) against ``expected``."""

    def check() -> tuple[bool, Any]:
        return check_value(actual, expected)

    return check


def lazy_fact_pred(compute: Callable[[], Any], expected: Any) -> Check:
    """Like :func:`fact_pred`, but ``compute()`` runs inside the check."""

    def check() -> tuple[bool, Any]:
        return check_value(compute(), expected)

    return check


def throws_pred(
    compute: Callable[[], Any],
    exc_type: type[BaseException] | tuple[type[BaseException], ...] = Exception,
) -> Check:
    """Pass when ``compute()`` raises ``exc_type``; fail when it returns.

    Exceptions outside ``exc_type`` are not caught here, so they surface as an
    ``Error`` result rather than a pass.
    """

    def check() -> tuple[bool, Any]:
        try:
            compute()
        except exc_type:
            return True, _ERROR
        return False, _NO_ERROR

    return check
