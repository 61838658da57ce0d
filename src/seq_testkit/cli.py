from typing import List, Optional
import asyncio
import importlib
import signal
import typer
from .config import load_config, AppConfig, RunConfig
from .interaction import ConsoleInteraction
from .logging import setup_logging
from .monitor import MonitorGroup
from .reporters.console import ConsoleReporter
from .reporters.junit import JUnitReporter
from .reporters.log import LogMonitor
from .reporters.results import ResultCollector
from .runners.runner import TestRunner
from .suite import TestSuite

app = typer.Typer(add_completion=False, help="seq-testkit - sequential runner for asynchronous test suites")


@app.callback()
def _root():
    pass


def load_suites(modules: List[str]) -> List[TestSuite]:
    """Import suite modules and collect what their `discover()` returns."""
    suites: List[TestSuite] = []
    for name in modules:
        module_name = name if "." in name else f"seq_testkit.testsuites.{name}"
        mod = importlib.import_module(module_name)
        suites.extend(getattr(mod, "discover")())
    return suites


async def _run(runner: TestRunner, suites: List[TestSuite]) -> bool:
    # Ctrl+C finishes the running test, then stops the batch.
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, runner.cancel_running_tests)
    except NotImplementedError:
        pass
    return await runner.run_tests(suites)


@app.command()
def run(
    modules: Optional[List[str]] = typer.Argument(None, help="Suite modules, e.g. selfcheck or my_pkg.suites"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config YAML"),
    suite: Optional[str] = typer.Option(None, "--suite", help="Run only this suite"),
    test: Optional[str] = typer.Option(None, "--test", help="Skip every test except this one"),
    platform: Optional[str] = typer.Option(None, "--platform", help="Override the host platform"),
    junit: Optional[str] = typer.Option(None, "--junit", help="Write JUnit XML to this path"),
    interactive: bool = typer.Option(False, "--interactive", help="Allow suites to prompt the user"),
    list_tests: bool = typer.Option(False, "--list", help="List tests without running"),
):
    cfg: AppConfig = load_config(config)
    updates = {k: v for k, v in {"only_suite": suite, "only_test": test, "platform": platform}.items() if v}
    if interactive:
        updates["interactive"] = True
    run_cfg = RunConfig.model_validate({**cfg.run.model_dump(), **updates})
    log = setup_logging(cfg.log.level)

    suites = load_suites(modules or cfg.suites)
    if list_tests:
        for s in suites:
            typer.echo(s.suite_name)
            for entry in s.test_plan(run_cfg.platform):
                typer.echo(f" - {entry.name}")
        raise typer.Exit(code=0)

    collector = ResultCollector()
    monitor = MonitorGroup([LogMonitor(run_cfg.platform), collector])
    interaction = ConsoleInteraction(typer.echo) if run_cfg.interactive else None
    runner = TestRunner(run_cfg.batch_name, run_cfg, monitor, interaction)
    ok = asyncio.run(_run(runner, suites))
    if runner.was_cancelled:
        log.warning("Batch was cancelled.")

    if cfg.report.console:
        ConsoleReporter(typer.echo).emit(collector.suites)
    junit_path = junit or cfg.report.junit
    if junit_path:
        JUnitReporter(path=junit_path).emit(collector.suites)
    t = runner.all_tests_counter
    typer.echo(f"Done. {t.succeeded} passed, {t.failed} failed, {t.skipped} skipped.")
    raise typer.Exit(code=0 if ok else 1)


def main():
    app()


if __name__ == "__main__":
    main()
