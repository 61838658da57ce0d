"""Suites, monitors and interactions shared by the runner tests."""

from collections import Counter
from typing import List, Optional

from seq_testkit.events import TestEvent, TestEventType as EventType
from seq_testkit.interaction import TestInteraction as BaseInteraction
from seq_testkit.monitor import TestMonitor as BaseMonitor
from seq_testkit.progress import TestProgress as Progress
from seq_testkit.suite import TestSuite as BaseSuite, test_method


class ConfigurableSuite(BaseSuite):
    """Six tests on android: test1, test2, test_skipped, test_skipped_from_test, test_failed, android_test."""

    def __init__(self, suite_name: Optional[str] = None):
        super().__init__(suite_name)
        self.skip_from_before_all = False
        self.skip_from_before_each = False
        self.skip_from_test = False
        self.skip_from_after_each = False
        self.skip_from_after_all = False
        self.double_skip = False

        self.fail_from_before_all = False
        self.fail_from_before_each = False
        self.fail_from_test = False
        self.fail_from_after_each = False
        self.fail_from_after_all = False
        self.double_fail = False

        self.cancel_runner = None
        self.on_cancelled = None
        self.calls = Counter()

    def _skip(self, reason: str):
        self.report_skip(reason)
        if self.double_skip:
            self.report_skip(f"{reason} for 2nd time")

    def _fail(self, message: str):
        if self.double_fail:
            self.report_failure(f"{message}, reported")
        raise RuntimeError(message)

    async def before_all(self):
        self.calls["before_all"] += 1
        await super().before_all()
        if self.skip_from_before_all:
            self._skip("Skipped from before_all")
        if self.fail_from_before_all:
            self._fail("Failed from before_all")

    async def after_all(self):
        self.calls["after_all"] += 1
        await super().after_all()
        if self.skip_from_after_all:
            self._skip("Skipped from after_all")
        if self.fail_from_after_all:
            self._fail("Failed from after_all")

    async def before_each(self):
        self.calls["before_each"] += 1
        await super().before_each()
        if self.skip_from_before_each and self.current_test_name == "test_skipped":
            self._skip("Skipped from before_each")
        if self.fail_from_before_each and self.current_test_name == "test_failed":
            self._fail("Failed from before_each")

    async def after_each(self):
        self.calls["after_each"] += 1
        await super().after_each()
        if self.skip_from_after_each and self.current_test_name == "test_skipped":
            self._skip("Skipped from after_each")
        if self.fail_from_after_each and self.current_test_name == "test_failed":
            self._fail("Failed from after_each")

    @test_method
    async def test1(self):
        self.calls["test1"] += 1

    @test_method
    async def test2(self):
        self.calls["test2"] += 1
        if self.cancel_runner is not None:
            self.cancel_runner.cancel_running_tests(self.on_cancelled)

    @test_method
    async def test_skipped(self):
        self.calls["test_skipped"] += 1

    @test_method
    async def test_skipped_from_test(self):
        self.calls["test_skipped_from_test"] += 1
        if self.skip_from_test:
            self._skip("Skipped from test")

    @test_method
    async def test_failed(self):
        self.calls["test_failed"] += 1
        if self.fail_from_test:
            self._fail("Failed from test")

    @test_method(platforms=["android"])
    async def android_test(self):
        self.calls["android_test"] += 1

    @test_method(platforms=["ios"])
    async def ios_test(self):
        self.calls["ios_test"] += 1


class EmptySuite(BaseSuite):
    pass


class RecordingMonitor(BaseMonitor):
    def __init__(self):
        self.events: List[TestEvent] = []
        self.suites_progress: Optional[Progress] = None
        self.tests_progress: Optional[Progress] = None
        self.suites_history: List[Progress] = []
        self.tests_history: List[Progress] = []
        # Events and progress updates in the order they arrived.
        self.timeline: List[tuple] = []

    def report_event(self, event: TestEvent) -> None:
        self.events.append(event)
        self.timeline.append(("event", event.event_type))

    def report_test_suites_progress(self, progress: Progress) -> None:
        self.suites_progress = progress
        self.suites_history.append(progress)
        self.timeline.append(("suites", progress))

    def report_all_tests_progress(self, progress: Progress) -> None:
        self.tests_progress = progress
        self.tests_history.append(progress)
        self.timeline.append(("tests", progress))

    def of_type(self, event_type: EventType) -> List[TestEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def without_phases(self) -> List[TestEvent]:
        return [e for e in self.events if e.event_type != EventType.PHASE]


class RecordingInteraction(BaseInteraction):
    def __init__(self):
        self.prompts = []
        self.infos = []
        self.warnings = []
        self.skips = []
        self.failures = []

    async def show_prompt(self, context, message, duration) -> None:
        self.prompts.append((message, duration))

    def report_info(self, context, message: str) -> None:
        self.infos.append(message)

    def report_warning(self, context, message: str) -> None:
        self.warnings.append(message)

    def report_skip(self, context, reason: str) -> None:
        self.skips.append(reason)

    def report_failure(self, context, reason) -> None:
        self.failures.append(reason)


def counts(counter) -> dict:
    return {"total": counter.total, "succeeded": counter.succeeded,
            "failed": counter.failed, "skipped": counter.skipped}
