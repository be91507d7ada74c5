"""Lightweight fact checking: assertions grouped into suites and contexts."""

from factcheck.helpers import anything, exactly, falsey, falsy, not_, roughly, truthy
from factcheck.results import Error, Failure, Result, Success
from factcheck.runtime import (
    RunContext,
    context,
    default_context,
    exit_status,
    fact,
    fact_lazy,
    fact_throws,
    facts,
    get_stats,
    reset_default_context,
    run_facts,
    with_context,
)
from factcheck.stats import FactCheckError, FactStats, HarnessError, NonSuccessfulFactsError
from factcheck.suite import TestSuite

__all__ = [
    "Error",
    "FactCheckError",
    "FactStats",
    "Failure",
    "HarnessError",
    "NonSuccessfulFactsError",
    "Result",
    "RunContext",
    "Success",
    "TestSuite",
    "anything",
    "context",
    "default_context",
    "exactly",
    "exit_status",
    "fact",
    "fact_lazy",
    "fact_throws",
    "facts",
    "falsey",
    "falsy",
    "get_stats",
    "not_",
    "reset_default_context",
    "roughly",
    "run_facts",
    "truthy",
    "with_context",
]
