from typing import Iterable, List
from .events import TestEvent
from .progress import TestProgress


class TestMonitor:
    """Write-only sink for events and progress. The runner never reads anything back."""

    __test__ = False

    def report_event(self, event: TestEvent) -> None:
        pass

    def report_test_suites_progress(self, progress: TestProgress) -> None:
        pass

    def report_all_tests_progress(self, progress: TestProgress) -> None:
        pass


class MonitorGroup(TestMonitor):
    def __init__(self, monitors: Iterable[TestMonitor] = ()):
        self.monitors: List[TestMonitor] = list(monitors)

    def add_monitor(self, monitor: TestMonitor) -> None:
        self.monitors.append(monitor)

    def remove_monitor(self, monitor: TestMonitor) -> None:
        if monitor in self.monitors:
            self.monitors.remove(monitor)

    def report_event(self, event: TestEvent) -> None:
        for m in self.monitors:
            m.report_event(event)

    def report_test_suites_progress(self, progress: TestProgress) -> None:
        for m in self.monitors:
            m.report_test_suites_progress(progress)

    def report_all_tests_progress(self, progress: TestProgress) -> None:
        for m in self.monitors:
            m.report_all_tests_progress(progress)
