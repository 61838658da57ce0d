from typing import Callable, Iterable, List, Optional, Tuple
from ..config import RunConfig
from ..context import TestContext
from ..errors import CounterError, DefinitionError, StaleContextError
from ..events import TestEvent
from ..interaction import TestInteraction
from ..logging import get_logger
from ..monitor import TestMonitor
from ..outcome import Fail
from ..progress import TestCounter
from ..suite import TestEntry, TestSuite
from .runtime import SuiteRuntime

SuitePlan = List[Tuple[TestSuite, List[TestEntry]]]


class TestRunner:
    """Runs test suites one after another and aggregates their results.

    Suites run in list order and tests in registration order, never
    overlapping. Cancellation is checked only between tests and between
    suites.
    """

    __test__ = False

    def __init__(self, batch_name: str, config: Optional[RunConfig] = None,
                 monitor: Optional[TestMonitor] = None, interaction: Optional[TestInteraction] = None):
        self.batch_name = batch_name
        self.config = config or RunConfig()
        self.monitor = monitor or TestMonitor()
        self.interaction = interaction
        self.log = get_logger("runner")

        self.all_suites_counter = TestCounter("Test suites")
        self.all_tests_counter = TestCounter("All tests")
        self.all_suites_counter.add_observer(self.monitor.report_test_suites_progress)
        self.all_tests_counter.add_observer(self.monitor.report_all_tests_progress)

        self._is_running = False
        self._cancel_requested = False
        self._cancelled = False
        self._cancel_callbacks: List[Callable[[], None]] = []
        self._interrupted: Optional[Tuple[str, int, int]] = None
        self._defect: Optional[StaleContextError] = None

    @property
    def is_interactive(self) -> bool:
        return self.interaction is not None

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def was_cancelled(self) -> bool:
        return self._cancelled

    # ---------- public ----------
    async def run_tests(self, suites: Iterable[TestSuite]) -> bool:
        """Run all suites and return True if none of them failed."""
        if self._is_running:
            self.log.warning("Tests of batch '%s' are still in progress.", self.batch_name)
            return False
        self._is_running = True
        self._cancel_requested = False
        self._cancelled = False
        self._interrupted = None
        self._defect = None
        try:
            return await self._run_batch(list(suites))
        except (StaleContextError, CounterError) as e:
            self._emit(TestEvent.batch_fail(self.batch_name, "Test results can't be trusted.", e))
            raise
        except Exception as e:
            self._emit(TestEvent.batch_fail(self.batch_name, "Unhandled error while executing tests.", e))
            self.log.exception("Unhandled error in batch '%s'", self.batch_name)
            return False
        finally:
            self._is_running = False
            callbacks, self._cancel_callbacks = self._cancel_callbacks, []
            for callback in callbacks:
                callback()

    def cancel_running_tests(self, on_complete: Optional[Callable[[], None]] = None) -> None:
        """Stop the batch before the next test or suite starts.

        `on_complete` is called once the running batch has unwound, or right
        away if nothing is running.
        """
        if not self._is_running:
            if on_complete is not None:
                on_complete()
            return
        self.log.info("Cancelling batch '%s'", self.batch_name)
        self._cancel_requested = True
        if on_complete is not None:
            self._cancel_callbacks.append(on_complete)

    # ---------- batch ----------
    async def _run_batch(self, suites: List[TestSuite]) -> bool:
        plan = self._before_batch(suites)
        if plan is None:
            return False
        for suite, entries in plan:
            if self._cancel_requested:
                self._cancelled = True
                break
            await self._run_suite(suite, entries)
        if self._cancelled:
            message = (f"Cancelled after {self.all_suites_counter.progress} of {self.all_suites_counter.total} "
                       f"test suites and {self.all_tests_counter.progress} of {self.all_tests_counter.total} tests.")
            if self._interrupted is not None:
                name, done, total = self._interrupted
                message += f" Test suite '{name}' was interrupted after {done} of {total} tests."
            self._emit(TestEvent.batch_cancel(self.batch_name, message))
            return self.all_suites_counter.failed == 0
        return self._after_batch()

    def _before_batch(self, suites: List[TestSuite]) -> Optional[SuitePlan]:
        only_suite = self.config.only_suite
        if only_suite is not None:
            suites = [s for s in suites if s.suite_name == only_suite]
            if not suites:
                self._emit(TestEvent.batch_fail(self.batch_name, f"Test suite '{only_suite}' not found."))
                return None
        if not suites:
            self._emit(TestEvent.batch_fail(self.batch_name, "No test suites to run."))
            return None
        plan = [(s, s.test_plan(self.config.platform)) for s in suites]
        tests_count = sum(len(entries) for _, entries in plan)
        if tests_count == 0:
            self._emit(TestEvent.batch_fail(self.batch_name, "No test methods to execute."))
            return None
        self._emit(TestEvent.batch_info(
            self.batch_name, f"Starting {len(plan)} test suites with {tests_count} tests inside."))
        self.all_suites_counter.restart(len(plan))
        self.all_tests_counter.restart(tests_count)
        return plan

    def _after_batch(self) -> bool:
        suites, tests = self.all_suites_counter, self.all_tests_counter
        if not suites.is_complete or not tests.is_complete:
            raise CounterError(f"Batch finished with uncounted results: {suites!r}, {tests!r}")
        if tests.skipped == tests.total:
            self._emit(TestEvent.batch_fail(self.batch_name, "All tests were skipped."))
            return False
        if suites.failed == 0 and tests.failed == 0:
            self._emit(TestEvent.batch_info(self.batch_name, "All tests succeeded."))
            return True
        self._emit(TestEvent.batch_fail(self.batch_name, f"Failed {suites.failed} from {suites.total} test suites."))
        return False

    # ---------- suite ----------
    async def _run_suite(self, suite: TestSuite, entries: List[TestEntry]) -> None:
        runtime = SuiteRuntime(self.config, self.monitor, self.interaction,
                               self.all_suites_counter, self.all_tests_counter, on_defect=self._store_defect)
        if self.config.print_info_messages:
            suite.print_info_messages = True
        only_test = suite.run_only_one_test or self.config.only_test

        async def before_all(ctx: TestContext):
            suite._assign_context(ctx)
            if suite.is_interactive and not self.is_interactive:
                return Fail(DefinitionError(
                    "Test suite is interactive, but the current test runner doesn't support interaction with the user."))
            return await suite.before_all()

        async def after_all(ctx: TestContext):
            suite._assign_context(ctx)
            return await suite.after_all()

        async def after_each(ctx: TestContext):
            suite._assign_context(ctx)
            return await suite.after_each()

        try:
            await runtime.before_all(suite.suite_name, len(entries), before_all)
            self._check_defect()
            if runtime.is_concluded:
                return
            for index, entry in enumerate(entries):
                if self._cancel_requested:
                    self._cancelled = True
                    self._interrupted = (suite.suite_name, index, len(entries))
                    break

                async def before_each(ctx: TestContext, name: str = entry.name):
                    suite._assign_context(ctx)
                    if only_test is not None and name != only_test:
                        ctx.report_skip(f"Skipped, because only '{only_test}' is allowed to run.")
                    return await suite.before_each()

                async def run_test(ctx: TestContext, body=entry.body):
                    suite._assign_context(ctx)
                    return await body()

                await runtime.before_each(entry.name, before_each)
                self._check_defect()
                await runtime.run_test(run_test)
                self._check_defect()
                await runtime.after_each(after_each)
                self._check_defect()
            await runtime.after_all(after_all)
            self._check_defect()
        finally:
            runtime.finish()
            suite._assign_context(None)

    def _store_defect(self, error: StaleContextError) -> None:
        if self._defect is None:
            self._defect = error

    def _check_defect(self) -> None:
        if self._defect is not None:
            raise self._defect

    def _emit(self, event: TestEvent) -> None:
        self.monitor.report_event(event)
