import pytest
import yaml
from junitparser import JUnitXml

from factcheck.config import FactCheckConfig
from factcheck.runner import Runner
from factcheck.runtime import default_context
from factcheck.stats import HarnessError

GREEN = """\
    from factcheck import fact, facts, truthy

    with facts("green"):
        fact(1 + 1, 2)
        fact([1], truthy)
"""

MIXED = """\
    from factcheck import context, fact, fact_lazy, facts

    with facts("mixed"):
        fact(1, 1)
        with context("ctx"):
            fact(1, 2)
        fact_lazy(lambda: int("x"), 0)
"""


@pytest.fixture
def config():
    return FactCheckConfig(color=False)


def test_runner_creates_run_directory(tmp_path, config, fact_file):
    runner = Runner(config=config, output_dir=tmp_path / "runs", files=[fact_file(GREEN)])
    run_dir = runner.execute()

    assert run_dir.exists()
    assert (run_dir / "junit.xml").exists()
    assert (run_dir / "meta.yaml").exists()
    assert (run_dir / "debug.log").exists()
    assert (run_dir / "report.html").exists()


def test_runner_collects_stats(tmp_path, config, fact_file):
    runner = Runner(config=config, output_dir=tmp_path / "runs", files=[fact_file(MIXED)])
    runner.execute()

    assert runner.stats.successes == 1
    assert runner.stats.failures == 1
    assert runner.stats.errors == 1
    assert runner.failed_files == []
    assert runner.context is default_context()


def test_runner_runs_files_in_order(tmp_path, config, fact_file):
    first = fact_file(GREEN, name="facts_1.py")
    second = fact_file(MIXED, name="facts_2.py")
    runner = Runner(config=config, output_dir=tmp_path / "runs", files=[first, second])
    run_dir = runner.execute()

    xml = JUnitXml.fromfile(str(run_dir / "junit.xml"))
    assert [s.name for s in xml] == ["green", "mixed"]
    filenames = [{p.name: p.value for p in s.properties()}["filename"] for s in xml]
    assert filenames == [str(first), str(second)]


def test_runner_writes_meta(tmp_path, config, fact_file):
    path = fact_file(MIXED)
    runner = Runner(config=config, output_dir=tmp_path / "runs", files=[path])
    run_dir = runner.execute()

    meta = yaml.safe_load((run_dir / "meta.yaml").read_text())
    assert meta["run_id"] == run_dir.name
    assert meta["files"] == [str(path)]
    assert meta["stats"] == {"nSuccesses": 1, "nFailures": 1, "nErrors": 1, "nNonSuccessful": 2}
    assert "failed_files" not in meta
    assert meta["suites"] == [
        {"description": "mixed", "filename": str(path), "successes": 1, "failures": 1, "errors": 1}
    ]


def test_runner_debug_log_records_facts(tmp_path, config, fact_file):
    run_dir = Runner(
        config=config, output_dir=tmp_path / "runs", files=[fact_file(MIXED)]
    ).execute()

    log = (run_dir / "debug.log").read_text()
    assert "Starting fact run" in log
    assert "Fact failure" in log
    assert "Fact errored" in log


def test_runner_records_file_raising_outside_fact(tmp_path, config, fact_file, capsys):
    broken = fact_file(
        """\
        from factcheck import fact, facts

        with facts("broken"):
            fact(1, 1)
            raise RuntimeError("not inside a fact")
        """,
        name="facts_broken.py",
    )
    ok = fact_file(GREEN, name="facts_ok.py")
    runner = Runner(config=config, output_dir=tmp_path / "runs", files=[broken, ok])
    run_dir = runner.execute()

    assert runner.failed_files == [str(broken)]
    assert runner.stats.successes == 3
    meta = yaml.safe_load((run_dir / "meta.yaml").read_text())
    assert meta["failed_files"] == [str(broken)]
    assert "ERROR" in capsys.readouterr().out


def test_runner_tolerates_exit_status_in_file(tmp_path, config, fact_file):
    path = fact_file(
        """\
        from factcheck import exit_status, fact, facts

        with facts("self-checking"):
            fact(1, 2)
        exit_status()
        """
    )
    runner = Runner(config=config, output_dir=tmp_path / "runs", files=[path])
    runner.execute()

    assert runner.failed_files == []
    assert runner.stats.failures == 1


def test_runner_detects_leaked_handler(tmp_path, config, fact_file):
    path = fact_file(
        """\
        from factcheck import default_context

        default_context().handlers.append(lambda result: None)
        """
    )
    runner = Runner(config=config, output_dir=tmp_path / "runs", files=[path])
    with pytest.raises(HarnessError):
        runner.execute()


def test_runner_without_junit(tmp_path, fact_file):
    config = FactCheckConfig(color=False, junit=False)
    run_dir = Runner(
        config=config, output_dir=tmp_path / "runs", files=[fact_file(GREEN)]
    ).execute()

    assert (run_dir / "meta.yaml").exists()
    assert not (run_dir / "junit.xml").exists()
    assert not (run_dir / "report.html").exists()


def test_runner_uses_config_files(tmp_path, fact_file):
    path = fact_file(GREEN)
    config = FactCheckConfig(color=False, files=[str(path)])
    runner = Runner(config=config, output_dir=tmp_path / "runs")
    runner.execute()
    assert runner.stats.successes == 2


def test_runner_missing_file(tmp_path, config):
    runner = Runner(config=config, output_dir=tmp_path / "runs", files=[tmp_path / "nope.py"])
    with pytest.raises(ValueError, match="not found"):
        runner.execute()


def test_runner_no_files(tmp_path, config):
    with pytest.raises(ValueError, match="no fact files"):
        Runner(config=config, output_dir=tmp_path / "runs").execute()


def test_runner_runs_file_via_runpy(tmp_path, config, fact_file, mocker):
    run_path = mocker.patch("factcheck.runner.runpy.run_path")
    path = fact_file(GREEN)
    Runner(config=config, output_dir=tmp_path / "runs", files=[path]).execute()
    run_path.assert_called_once_with(str(path), run_name="__main__")
