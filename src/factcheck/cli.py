from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="factcheck", help="Run fact files and report verified, failed and errored facts")


@app.command()
def run(
    files: list[str] | None = typer.Argument(None, help="Fact files to run, in order"),
    config: str | None = typer.Option(None, "--config", "-c", help="Path to factcheck YAML config"),
    output_dir: str | None = typer.Option(None, help="Output directory for run results"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable coloured output"),
    no_junit: bool = typer.Option(
        False, "--no-junit", help="Do not write junit.xml and report.html"
    ),
):
    """Run fact files and exit non-zero if any fact failed or errored."""
    from factcheck.config import FactCheckConfig, load_config
    from factcheck.runner import Runner
    from factcheck.stats import HarnessError, NonSuccessfulFactsError, check_exit_status

    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Error: config file not found: {config}", err=True)
            raise typer.Exit(1)
        try:
            fc_config = load_config(config_path)
        except ValueError as e:
            typer.echo(f"Error: invalid config: {e}", err=True)
            raise typer.Exit(1)
    else:
        fc_config = FactCheckConfig()

    if no_color:
        fc_config.color = False
    if no_junit:
        fc_config.junit = False

    runner = Runner(
        config=fc_config,
        output_dir=Path(output_dir or fc_config.output_dir),
        files=[Path(f) for f in files] if files else None,
        verbose=verbose,
    )

    try:
        run_dir = runner.execute()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except HarnessError as e:
        typer.echo(f"Harness error: {e}", err=True)
        raise typer.Exit(2)

    stats = runner.stats
    typer.echo("")
    typer.echo(
        f"Total: {stats.successes} verified, {stats.failures} failed, {stats.errors} errored"
    )
    typer.echo(f"Run directory: {run_dir}")
    if not verbose:
        typer.echo(f"Debug log: {run_dir / 'debug.log'}")

    # A fact file that raised outside a fact is a broken file, not a failed fact
    if runner.failed_files:
        typer.echo(
            f"Error: {len(runner.failed_files)} fact file(s) raised outside of a fact",
            err=True,
        )
        raise typer.Exit(2)

    try:
        check_exit_status(stats)
    except NonSuccessfulFactsError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)


@app.command()
def report(
    run_dir: str = typer.Argument(help="Path to run output directory"),
):
    """Regenerate the HTML report from a previous run."""
    from factcheck.reporting.junit import generate_report

    run_path = Path(run_dir)
    if not run_path.exists() or not (run_path / "junit.xml").exists():
        typer.echo(f"Error: not a valid run directory: {run_dir}", err=True)
        raise typer.Exit(1)

    report_path = generate_report(run_path)
    typer.echo(f"Report generated: {report_path}")


@app.command()
def init(
    dir: str = typer.Option(
        "factcheck", "--dir", help="Directory to initialize the fact project in"
    ),
):
    """Initialize a new fact project with an example fact file and config."""
    project_dir = Path(dir)

    if not project_dir.exists():
        project_dir.mkdir(parents=True, exist_ok=True)

    config_file = project_dir / "factcheck.yaml"
    if config_file.exists():
        typer.echo(f"factcheck.yaml already exists in {dir}, skipping.")
        return

    config_file.write_text("""\
color: true
show_successes: false
output_dir: runs
files:
  - facts_example.py
""")

    (project_dir / "facts_example.py").write_text('''\
from factcheck import context, fact, fact_lazy, fact_throws, facts, not_, roughly, truthy

with facts("Arithmetic"):
    fact(1 + 1, 2)
    fact(0.1 + 0.2, roughly(0.3))

    with context("division"):
        fact_lazy(lambda: 10 / 4, 2.5)
        fact_throws(lambda: 1 / 0, ZeroDivisionError)

with facts("Predicates"):
    fact([1, 2, 3], truthy)
    fact("abc", not_("xyz"))
''')

    typer.echo(f"Initialized fact project in {dir}:")
    typer.echo("  factcheck.yaml     - example config")
    typer.echo("  facts_example.py   - example fact file")


def main() -> None:
    app()
