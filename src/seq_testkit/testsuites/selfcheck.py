import asyncio
from ..errors import CounterError
from ..monitor import TestMonitor
from ..outcome import Skip
from ..progress import TestCounter
from ..runners.runner import TestRunner
from ..suite import TestSuite, test_method


class CounterChecks(TestSuite):
    """Sanity checks of the progress counter, runnable on any host."""

    def __init__(self):
        super().__init__("selfcheck.counter")
        self.counter = None

    async def before_each(self):
        await super().before_each()
        self.counter = TestCounter("selfcheck")
        self.counter.restart(3)

    @test_method
    async def test_counts_add_up(self):
        self.counter.add_succeeded()
        self.counter.add_failed()
        self.counter.add_skipped()
        assert self.counter.progress == self.counter.total == 3

    @test_method
    async def test_overflow_is_rejected(self):
        self.counter.add_succeeded(3)
        try:
            self.counter.add_failed()
        except CounterError:
            return
        raise AssertionError("Counter accepted more results than its total.")


class _Probe(TestSuite):
    def __init__(self, skip_first: bool):
        super().__init__("selfcheck.probe")
        self.skip_first = skip_first
        self.calls = []

    @test_method
    async def test_first(self):
        self.calls.append("first")
        if self.skip_first:
            return Skip("probe skip")

    @test_method
    async def test_second(self):
        await asyncio.sleep(0)
        self.calls.append("second")


class RunnerChecks(TestSuite):
    """Runs a nested batch and checks what the runner counted."""

    def __init__(self):
        super().__init__("selfcheck.runner")

    def _nested_config(self):
        return self.config.model_copy(update={"only_suite": None, "only_test": None})

    @test_method
    async def test_sequential_order(self):
        probe = _Probe(skip_first=False)
        runner = TestRunner("selfcheck", self._nested_config(), TestMonitor())
        assert await runner.run_tests([probe])
        assert probe.calls == ["first", "second"]

    @test_method
    async def test_skip_is_counted(self):
        runner = TestRunner("selfcheck", self._nested_config(), TestMonitor())
        assert await runner.run_tests([_Probe(skip_first=True)])
        assert runner.all_tests_counter.skipped == 1
        assert runner.all_tests_counter.succeeded == 1

    @test_method(platforms=["android", "ios"])
    async def test_mobile_platform(self):
        assert self.config.platform in ("android", "ios")


def discover():
    return [CounterChecks(), RunnerChecks()]
