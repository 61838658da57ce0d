import asyncio
import logging

import pytest

from seq_testkit.errors import StaleContextError
from seq_testkit.events import TestEventType as EventType
from seq_testkit.suite import TestSuite as BaseSuite, test_method


class _Leaky(BaseSuite):
    """test_leaks starts a task that reports after the test has returned."""

    def __init__(self, report):
        super().__init__()
        self.report = report
        self.release = asyncio.Event()
        self.reported = asyncio.Event()
        self.task = None

    @test_method
    async def test_leaks(self):
        async def late():
            await self.release.wait()
            try:
                self.report(self)
            finally:
                self.reported.set()
        self.task = asyncio.create_task(late())

    @test_method
    async def test_waits(self):
        self.release.set()
        await self.reported.wait()


class TestStaleContext:
    @pytest.mark.asyncio
    async def test_late_skip_stops_the_batch(self, make_runner, monitor, caplog):
        suite = _Leaky(lambda s: s.report_skip("too late"))
        runner = make_runner()

        with pytest.raises(StaleContextError) as info:
            await runner.run_tests([suite])
        with pytest.raises(StaleContextError):
            await suite.task

        assert info.value.reported.test_name == "test_leaks"
        assert info.value.current.test_name == "test_waits"
        assert not monitor.of_type(EventType.TEST_SKIP)
        last = monitor.events[-1]
        assert last.event_type == EventType.BATCH_FAIL
        assert isinstance(last.failure, StaleContextError)
        assert not runner.is_running
        assert "stale context" in caplog.text

    @pytest.mark.asyncio
    async def test_late_failure_stops_the_batch(self, make_runner, monitor, caplog):
        caplog.set_level(logging.ERROR)
        suite = _Leaky(lambda s: s.report_failure("too late"))
        runner = make_runner()

        with pytest.raises(StaleContextError) as info:
            await runner.run_tests([suite])
        # The late task itself returns normally.
        await suite.task

        assert info.value.reported.test_name == "test_leaks"
        assert not monitor.of_type(EventType.TEST_FAIL)
        assert monitor.events[-1].event_type == EventType.BATCH_FAIL
        assert runner.all_tests_counter.succeeded == 1
        assert "Stale failure dropped: too late" in caplog.text

    @pytest.mark.asyncio
    async def test_report_after_suite_finished(self, make_runner):
        class Lingering(BaseSuite):
            task = None

            @test_method
            async def test_only(self):
                self.task = asyncio.create_task(self.later())

            async def later(self):
                await asyncio.sleep(0)
                await asyncio.sleep(0)
                self.report_info("still here")

        suite = Lingering()
        runner = make_runner()
        assert await runner.run_tests([suite])
        with pytest.raises(StaleContextError):
            await suite.task

    @pytest.mark.asyncio
    async def test_stale_context_is_not_a_test_failure(self, make_runner):
        captured = {}

        class Keeper(BaseSuite):
            @test_method
            async def test_keep(self):
                captured["ctx"] = self.context

            @test_method
            async def test_use(self):
                try:
                    captured["ctx"].report_warning("old context")
                except StaleContextError:
                    captured["raised"] = True

        runner = make_runner()
        with pytest.raises(StaleContextError):
            await runner.run_tests([Keeper()])
        assert captured["raised"]
