from __future__ import annotations

from pathlib import Path
from typing import Iterable

from junitparser import Error as JUnitError
from junitparser import Failure as JUnitFailure
from junitparser import JUnitXml, TestCase
from junitparser import TestSuite as JUnitSuite

from factcheck.reporting.console import format_error
from factcheck.results import Result, safe_repr, status_of
from factcheck.suite import TestSuite


def _suite_name(suite: TestSuite, index: int) -> str:
    if suite.description is not None:
        return suite.description
    if suite.filename is not None:
        return suite.filename
    return f"facts #{index + 1}"


def _ordered_results(suite: TestSuite) -> list[Result]:
    """Suite results in evaluation order (``all_results`` order is not kept per suite)."""
    results: list[Result] = [*suite.successes, *suite.failures, *suite.errors]
    return sorted(results, key=lambda r: r.meta.get("seq", 0))


def _testcase(result: Result, suite_name: str) -> TestCase:
    case = TestCase(result.expr)
    case.classname = result.meta.get("context") or suite_name
    status = status_of(result)
    if status == "failure":
        case.result = JUnitFailure(f"got {safe_repr(result.value)}")
    elif status == "error":
        err = JUnitError(format_error(result), type(result.error).__name__)
        err.text = result.trace
        case.result = err
    return case


def write_junit(run_dir: Path, suites: Iterable[TestSuite]) -> Path:
    """Write junit.xml with one testsuite per facts block, return path."""
    xml = JUnitXml()

    for index, suite in enumerate(suites):
        name = _suite_name(suite, index)
        junit_suite = JUnitSuite(name)
        if suite.filename is not None:
            junit_suite.add_property("filename", suite.filename)

        for result in _ordered_results(suite):
            junit_suite.add_testcase(_testcase(result, name))

        # Use append (not +=) to preserve properties
        xml.append(junit_suite)

    junit_path = run_dir / "junit.xml"
    xml.write(str(junit_path), pretty=True)
    return junit_path


def generate_report(run_dir: Path) -> Path:
    """Render junit.xml → report.html using Jinja2 template, return path."""
    import yaml
    from jinja2 import Environment, FileSystemLoader

    junit_path = run_dir / "junit.xml"
    report_path = run_dir / "report.html"

    # Load run metadata
    meta: dict = {}
    meta_path = run_dir / "meta.yaml"
    if meta_path.exists():
        meta = yaml.safe_load(meta_path.read_text()) or {}

    xml = JUnitXml.fromfile(str(junit_path))

    suites = []
    for suite in xml:
        cases = []
        for case in suite:
            result = None
            if case.result:
                result = {
                    "status": type(case.result[0]).__name__,
                    "message": case.result[0].message or "",
                    "text": case.result[0].text or "",
                }
            cases.append(
                {"name": case.name, "classname": case.classname, "result": result}
            )

        props = {p.name: p.value for p in suite.properties()}
        suites.append(
            {
                "name": suite.name,
                "tests": suite.tests,
                "failures": suite.failures,
                "errors": suite.errors,
                "properties": props,
                "cases": cases,
            }
        )

    total_tests = sum(s["tests"] for s in suites)
    total_failures = sum(s["failures"] for s in suites)
    total_errors = sum(s["errors"] for s in suites)

    tmpl_dir = Path(__file__).parent / "templates"
    env = Environment(loader=FileSystemLoader(str(tmpl_dir)), autoescape=True)
    template = env.get_template("report.html.j2")

    html = template.render(
        suites=suites,
        total_tests=total_tests,
        total_failures=total_failures,
        total_errors=total_errors,
        total_verified=total_tests - total_failures - total_errors,
        run_dir=str(run_dir),
        meta=meta,
    )
    report_path.write_text(html, encoding="utf-8")
    return report_path
