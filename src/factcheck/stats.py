from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from factcheck.results import Error, Failure, Result, Success


class FactCheckError(Exception):
    """Base class for errors raised by factcheck itself."""


class HarnessError(FactCheckError):
    """The harness state is corrupt (e.g. a handler was popped out of order)."""


class NonSuccessfulFactsError(FactCheckError):
    """Raised by ``exit_status`` when any fact failed or errored."""

    def __init__(self, count: int):
        super().__init__(f"factcheck finished with {count} non-successful facts.")
        self.count = count


@dataclass
class FactStats:
    """Counts over every result recorded in a run context."""

    successes: int
    failures: int
    errors: int

    @property
    def non_successful(self) -> int:
        return self.failures + self.errors

    @property
    def total(self) -> int:
        return self.successes + self.failures + self.errors

    def to_dict(self) -> dict[str, int]:
        return {
            "nSuccesses": self.successes,
            "nFailures": self.failures,
            "nErrors": self.errors,
            "nNonSuccessful": self.non_successful,
        }


def compute_stats(results: Iterable[Result]) -> FactStats:
    """Count successes, failures and errors in a single pass."""
    results = list(results)
    successes = failures = errors = 0
    for result in results:
        if isinstance(result, Success):
            successes += 1
        elif isinstance(result, Failure):
            failures += 1
        elif isinstance(result, Error):
            errors += 1

    stats = FactStats(successes=successes, failures=failures, errors=errors)
    if stats.total != len(results):
        raise HarnessError(
            f"Counted {stats.total} results but {len(results)} were recorded"
        )
    return stats


def check_exit_status(stats: FactStats) -> None:
    """Raise :class:`NonSuccessfulFactsError` unless every fact succeeded."""
    if stats.non_successful > 0:
        raise NonSuccessfulFactsError(stats.non_successful)
