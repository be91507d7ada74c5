"""Assertion helpers usable as the expected side of a fact.

    fact(parse("1"), not_(None))
    fact(result, truthy)
    fact(mean(samples), roughly(0.5, atol=1e-3))
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np

Predicate = Callable[[Any], bool]

DEFAULT_RTOL = 1e-5
DEFAULT_ATOL = 1e-8


def not_(x: Any) -> Predicate:
    """Negate a predicate, or build "not equal to ``x``" for a plain value."""
    if callable(x):
        return lambda y: not x(y)
    return lambda y: x != y


def anything(x: Any) -> bool:
    """Anything but ``None``."""
    return x is not None


def truthy(x: Any) -> bool:
    # Only None and boolean false (numpy's included) are falsy; 0, "" and [] count as truthy.
    if x is None:
        return False
    if isinstance(x, (bool, np.bool_)):
        return bool(x)
    return True


def falsy(x: Any) -> bool:
    return not truthy(x)


falsey = falsy


def exactly(x: Any) -> Predicate:
    """Identity (``is``) rather than equality."""
    return lambda y: y is x


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float, complex, np.number)) and not isinstance(x, bool)


def roughly(x: Any, rtol: float = DEFAULT_RTOL, atol: float = DEFAULT_ATOL) -> Predicate:
    """Approximate comparison for numbers and same-shaped numeric sequences.

    Uses ``numpy.isclose`` semantics: ``|y - x| <= atol + rtol * |x|``. For
    sequences the shapes must match and every element pair must be close; a
    shape mismatch or a non-numeric operand yields ``False`` instead of
    raising.
    """
    if _is_number(x):

        def close_number(y: Any) -> bool:
            if not _is_number(y):
                return False
            return bool(np.isclose(y, x, rtol=rtol, atol=atol))

        return close_number

    expected = np.asarray(x)

    def close_array(y: Any) -> bool:
        try:
            actual = np.asarray(y)
        except (TypeError, ValueError):
            return False
        if actual.shape != expected.shape:
            return False
        if not (np.issubdtype(actual.dtype, np.number) and np.issubdtype(expected.dtype, np.number)):
            return False
        return bool(np.all(np.isclose(actual, expected, rtol=rtol, atol=atol)))

    return close_array
