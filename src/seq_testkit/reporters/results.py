from dataclasses import dataclass, field
from typing import Dict, List, Optional
from ..events import TestEvent, TestEventType as E
from ..monitor import TestMonitor


@dataclass
class TestCaseResult:
    __test__ = False

    id: str
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    logs: List[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        if self.failed: return "FAIL"
        if self.skipped: return "SKIP"
        return "PASS" if self.passed else "NOT RUN"


@dataclass
class SuiteResult:
    suite: str
    cases: List[TestCaseResult] = field(default_factory=list)
    status: str = "NOT RUN"
    logs: List[str] = field(default_factory=list)
    @property
    def passed(self) -> int: return sum(c.passed for c in self.cases)
    @property
    def failed(self) -> int: return sum(c.failed for c in self.cases)
    @property
    def skipped(self) -> int: return sum(c.skipped for c in self.cases)


class ResultCollector(TestMonitor):
    """Rebuilds per-suite and per-test results from the event stream."""

    def __init__(self):
        self.suites: List[SuiteResult] = []
        self.batch_messages: List[str] = []
        self._by_name: Dict[str, SuiteResult] = {}
        self._case: Optional[TestCaseResult] = None

    def report_event(self, event: TestEvent) -> None:
        t = event.event_type
        if t == E.SUITE_START:
            suite = SuiteResult(event.suite)
            self.suites.append(suite)
            self._by_name[event.suite] = suite
            self._case = None
            return
        if t in (E.BATCH_INFO, E.BATCH_FAIL, E.BATCH_CANCEL):
            self.batch_messages.append(event.failure_description if t == E.BATCH_FAIL else (event.message or ""))
            return
        suite = self._by_name.get(event.suite)
        if suite is None:
            return
        if t == E.TEST_START:
            self._case = TestCaseResult(event.test_name or "?")
            suite.cases.append(self._case)
        elif t == E.TEST_SUCCESS and self._case is not None:
            self._case.passed = 1
        elif t == E.TEST_FAIL and self._case is not None:
            self._case.failed = 1
            self._case.logs.append(event.failure_stack or event.failure_description)
        elif t == E.TEST_SKIP and self._case is not None:
            self._case.skipped = 1
            self._case.logs.append(event.message or "skipped")
        elif t in (E.TEST_INFO, E.TEST_WARN) and self._case is not None:
            self._case.logs.append(event.message or "")
        elif t == E.SUITE_SUCCESS:
            suite.status = "PASS"
        elif t == E.SUITE_FAIL:
            suite.status = "FAIL"
            suite.logs.append(event.failure_description)
        elif t == E.SUITE_SKIP:
            suite.status = "SKIP"
            suite.logs.append(event.message or "skipped")
        elif t in (E.SUITE_INFO, E.SUITE_WARN):
            suite.logs.append(event.message or "")
