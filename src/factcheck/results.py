"""Result types produced by evaluating a single fact."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union


def safe_repr(value: Any) -> str:
    """``repr(value)``, falling back to ``object.__repr__`` when it raises."""
    try:
        return repr(value)
    except Exception:
        return object.__repr__(value)


def _freeze(meta: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(meta or {}))


@dataclass(frozen=True)
class Success:
    """A fact whose predicate held.

    Attributes:
        expr: Human-readable assertion text (e.g. ``"add(1, 1) => 2"``).
        value: The actual value the predicate was applied to.
        meta: Read-only metadata: ``context`` label plus best-effort
            ``file``/``line`` call-site hints.
    """

    expr: str
    value: Any
    meta: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "meta", _freeze(self.meta))


@dataclass(frozen=True)
class Failure:
    """A fact that evaluated cleanly but whose predicate did not hold."""

    expr: str
    value: Any
    meta: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "meta", _freeze(self.meta))


@dataclass(frozen=True)
class Error:
    """A fact whose evaluation raised.

    ``trace`` holds the formatted traceback captured at the dispatch boundary.
    """

    expr: str
    error: BaseException
    trace: str
    meta: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "meta", _freeze(self.meta))


Result = Union[Success, Failure, Error]


def status_of(result: Result) -> str:
    """Return ``"success"``, ``"failure"`` or ``"error"`` for a result."""
    if isinstance(result, Success):
        return "success"
    if isinstance(result, Failure):
        return "failure"
    if isinstance(result, Error):
        return "error"
    raise TypeError(f"Not a fact result: {result!r}")
