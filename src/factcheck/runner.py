from __future__ import annotations

import runpy
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from factcheck.config import FactCheckConfig
from factcheck.reporting.console import ConsoleReporter
from factcheck.runtime import RunContext, reset_default_context
from factcheck.stats import FactStats, HarnessError, NonSuccessfulFactsError
from factcheck.verbose import close_logger, setup_logger


class Runner:
    """Runs fact files in order and writes the run directory."""

    def __init__(
        self,
        config: FactCheckConfig,
        output_dir: Path,
        files: list[Path] | None = None,
        verbose: bool = False,
    ):
        self.config = config
        self.output_dir = output_dir
        self.files = files if files is not None else [Path(f) for f in config.files]
        self.verbose = verbose
        self.failed_files: list[str] = []
        self.stats: FactStats | None = None
        self.context: RunContext | None = None

    def execute(self) -> Path:
        """Run every fact file. Returns the run directory."""
        missing = [str(f) for f in self.files if not f.is_file()]
        if missing:
            raise ValueError(f"fact file(s) not found: {', '.join(missing)}")
        if not self.files:
            raise ValueError("no fact files given")

        run_id = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
        run_dir = self.output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        logger = setup_logger(
            run_dir / "debug.log", verbose=self.verbose, logger_name=f"factcheck_{run_id}"
        )
        try:
            logger.debug("Starting fact run")
            reporter = ConsoleReporter(
                color=self.config.color, show_successes=self.config.show_successes
            )
            ctx = reset_default_context(reporter=reporter, logger=logger)
            self.context = ctx

            for path in self.files:
                self._run_file(ctx, path, logger)

            self.stats = ctx.get_stats()
            logger.debug(
                f"Run finished: {self.stats.successes} verified, "
                f"{self.stats.failures} failed, {self.stats.errors} errored"
            )
            self._write_results(run_dir, ctx)
        finally:
            close_logger(logger)

        return run_dir

    def _run_file(self, ctx: RunContext, path: Path, logger) -> None:
        logger.debug(f"Running fact file {path}")
        ctx.current_file = str(path)
        try:
            runpy.run_path(str(path), run_name="__main__")
        except NonSuccessfulFactsError:
            # the file called exit_status() itself; its results are already recorded
            pass
        except Exception as e:
            self.failed_files.append(str(path))
            print(f"  ERROR  {path}: {type(e).__name__}: {e}")
            logger.error(f"Fact file '{path}' raised outside of a fact: {e!r}")
        finally:
            ctx.current_file = None

        if ctx.handlers or ctx.contexts:
            raise HarnessError(
                f"'{path}' left {len(ctx.handlers)} handler(s) and "
                f"{len(ctx.contexts)} context label(s) active"
            )

    def _write_results(self, run_dir: Path, ctx: RunContext) -> None:
        """Write junit.xml, meta.yaml and report.html to the run directory."""
        from factcheck.reporting.junit import generate_report, write_junit

        try:
            import importlib.metadata

            factcheck_version = importlib.metadata.version("factcheck")
        except Exception:
            factcheck_version = "unknown"

        meta: dict[str, Any] = {
            "run_id": run_dir.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "files": [str(f) for f in self.files],
            "stats": ctx.get_stats().to_dict(),
            "suites": [suite.to_dict() for suite in ctx.suites],
            "factcheck_version": factcheck_version,
        }
        if self.failed_files:
            meta["failed_files"] = self.failed_files

        (run_dir / "meta.yaml").write_text(yaml.dump(meta, default_flow_style=False))

        if self.config.junit:
            write_junit(run_dir, ctx.suites)
            if self.config.html_report:
                generate_report(run_dir)
