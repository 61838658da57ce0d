from typing import Any, Awaitable, Callable, Optional
import logging
from ..context import Phase, TestContext
from ..errors import CounterError, DefinitionError, InteractionNotAllowedError, StaleContextError
from ..events import TestEvent, describe_error
from ..interaction import PromptDuration, TestInteraction
from ..logging import get_logger
from ..monitor import TestMonitor
from ..outcome import Fail, Outcome, Skip, as_outcome
from ..progress import TestCounter

Action = Callable[[TestContext], Awaitable[Any]]


class SuiteRuntime:
    """Drives one suite through its lifecycle and turns outcomes into events and counts.

    Phases go BEFORE_ALL -> (BEFORE_EACH -> IN_TEST -> AFTER_EACH)* -> AFTER_ALL.
    Every phase transition bumps the generation token; contexts handed to the
    suite carry the token of their phase, so a result reported after the runner
    moved on is recognized by value.

    Within a scope only the first skip or failure counts. Suite scope is
    BEFORE_ALL and AFTER_ALL, test scope is everything in between.
    """

    def __init__(self, config, monitor: TestMonitor, interaction: Optional[TestInteraction],
                 suites_counter: TestCounter, tests_counter: TestCounter,
                 on_defect: Optional[Callable[[StaleContextError], None]] = None):
        self.config = config
        self.monitor = monitor
        self.interaction = interaction
        self.suites_counter = suites_counter
        self.tests_counter = tests_counter
        self.on_defect = on_defect
        self.log = get_logger("runtime")

        self._suite_name: Optional[str] = None
        self._test_name: Optional[str] = None
        self._phase = Phase.BEFORE_ALL
        self._token = 0
        self._finished = False
        self._tests_count = 0

        self._is_skipped = False
        self._is_failed = False
        self._is_test_skipped = False
        self._is_test_failed = False
        self._failed_tests = 0

    # ---------- state ----------
    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def token(self) -> int:
        return self._token

    @property
    def is_concluded(self) -> bool:
        """True once the whole suite is skipped or failed."""
        return self._is_skipped or self._is_failed

    @property
    def is_test_concluded(self) -> bool:
        return self._is_test_skipped or self._is_test_failed

    def current_context(self) -> TestContext:
        if self._suite_name is None:
            raise DefinitionError("Name of the test suite is not known.")
        return TestContext(
            suite_name=self._suite_name,
            test_name=self._test_name,
            phase=self._phase,
            token=self._token,
            config=self.config,
            interaction_allowed=self.interaction is not None,
            _reporter=self,
        )

    def _enter(self, phase: Phase, start_event=None) -> TestContext:
        self._phase = phase
        self._token += 1
        ctx = self.current_context()
        if start_event is not None:
            self._emit(start_event(ctx))
        self._emit(TestEvent.phase(ctx))
        return ctx

    # ---------- phases ----------
    async def before_all(self, suite_name: str, tests_count: int, action: Action) -> None:
        self._suite_name = suite_name
        self._test_name = None
        self._tests_count = tests_count
        self._is_skipped = self._is_failed = False
        self._is_test_skipped = self._is_test_failed = False
        self._failed_tests = 0

        ctx = self._enter(Phase.BEFORE_ALL, TestEvent.suite_start)
        if tests_count > 0:
            outcome = await self._invoke(action, ctx)
        else:
            outcome = Fail(DefinitionError(
                "Test suite is empty. Register at least one test with @test_method or build_tests()."))
        self._record(ctx, outcome)

    async def before_each(self, test_name: str, action: Action) -> None:
        self._test_name = test_name
        self._is_test_skipped = self._is_skipped
        self._is_test_failed = self._is_failed
        ctx = self._enter(Phase.BEFORE_EACH, TestEvent.test_start)
        if not self.is_concluded:
            self._record(ctx, await self._invoke(action, ctx))

    async def run_test(self, action: Action) -> None:
        ctx = self._enter(Phase.IN_TEST)
        # Nothing to run if before_each skipped or failed.
        if not self.is_test_concluded:
            self._record(ctx, await self._invoke(action, ctx))

    async def after_each(self, action: Action) -> None:
        ctx = self._enter(Phase.AFTER_EACH)
        if not self.is_concluded:
            self._record(ctx, await self._invoke(action, ctx))
        if not self.is_test_concluded:
            self._emit(TestEvent.test_success(ctx))
            self.tests_counter.add_succeeded()
        self._test_name = None

    async def after_all(self, action: Action) -> None:
        self._test_name = None
        ctx = self._enter(Phase.AFTER_ALL)
        if not self.is_concluded:
            self._record(ctx, await self._invoke(action, ctx))
            if not self.is_concluded:
                if self._failed_tests:
                    self._is_failed = True
                    self._emit(TestEvent.suite_fail(
                        ctx, message=f"{self._failed_tests} of {self._tests_count} tests failed."))
                    self.suites_counter.add_failed()
                else:
                    self._emit(TestEvent.suite_success(ctx))
                    self.suites_counter.add_succeeded()
        self.finish()

    def finish(self) -> None:
        """Invalidate every context handed out for this suite."""
        self._finished = True
        self._token += 1

    async def _invoke(self, action: Action, ctx: TestContext) -> Outcome:
        try:
            return as_outcome(await action(ctx))
        except (StaleContextError, CounterError):
            raise
        except Exception as e:
            return Fail(e)

    # ---------- outcomes ----------
    def _record(self, ctx: TestContext, outcome: Outcome) -> None:
        if isinstance(outcome, Skip):
            error = self._skip_not_allowed(ctx.phase)
            if error is None:
                self._skip(ctx, outcome.reason)
            else:
                self._fail(ctx, error)
        elif isinstance(outcome, Fail):
            self._fail(ctx, outcome.cause, outcome.message)

    @staticmethod
    def _skip_not_allowed(phase: Phase) -> Optional[DefinitionError]:
        if phase == Phase.AFTER_EACH:
            return DefinitionError("You must not skip from after_each().")
        if phase == Phase.AFTER_ALL:
            return DefinitionError("You must not skip from after_all().")
        return None

    def _skip(self, ctx: TestContext, reason: str) -> None:
        if ctx.phase == Phase.BEFORE_ALL:
            if self.is_concluded:
                return
            self._is_skipped = True
            self._emit(TestEvent.suite_skip(ctx, reason))
            self.suites_counter.add_skipped()
            self.tests_counter.add_skipped(self._tests_count)
        else:
            if self.is_test_concluded:
                return
            self._is_test_skipped = True
            self._emit(TestEvent.test_skip(ctx, reason))
            self.tests_counter.add_skipped()
        if self.interaction is not None:
            self.interaction.report_skip(ctx, reason)

    def _fail(self, ctx: TestContext, failure: Any, message: Optional[str] = None) -> None:
        if ctx.phase.is_suite_scope:
            if self.is_concluded:
                self._ignore(ctx, failure)
                return
            self._is_failed = True
            self._emit(TestEvent.suite_fail(ctx, failure, message))
            self.suites_counter.add_failed()
            if ctx.phase == Phase.BEFORE_ALL:
                self.tests_counter.add_failed(self._tests_count)
        else:
            if self.is_test_concluded:
                self._ignore(ctx, failure)
                return
            self._is_test_failed = True
            self._failed_tests += 1
            self._emit(TestEvent.test_fail(ctx, failure, message))
            self.tests_counter.add_failed()
        if self.interaction is not None:
            self.interaction.report_failure(ctx, failure)

    def _ignore(self, ctx: TestContext, failure: Any) -> None:
        # Misuse of the testbed stays visible even when the result is already decided.
        level = logging.ERROR if isinstance(failure, DefinitionError) else logging.WARNING
        self.log.log(level, "Ignoring failure from %s :: %s, the result is already decided: %s",
                     ctx.suite_name, ctx.hook_name, describe_error(failure))

    def _emit(self, event: TestEvent) -> None:
        self.monitor.report_event(event)

    # ---------- staleness ----------
    def _validate(self, ctx: TestContext, failure: Any = None) -> bool:
        if not self._finished and ctx.token == self._token:
            return True
        now = f"{self._suite_name} finished" if self._finished else self.current_context().describe()
        self.log.error(
            "Result reported with a stale context. The test probably didn't await an asynchronous "
            "operation before it returned.\n  reported: %s\n  current:  %s", ctx.describe(), now)
        error = StaleContextError(
            f"Result reported from {ctx.describe()} while the runner is at {now}.",
            reported=ctx, current=None if self._finished else self.current_context())
        if self.on_defect is not None:
            self.on_defect(error)
        if failure is not None:
            # Not counted, and not raised over the error already in flight. The runner still stops.
            self.log.error("Stale failure dropped: %s", describe_error(failure))
            return False
        raise error

    # ---------- reporting from tests ----------
    def report_info(self, ctx: TestContext, message: str) -> None:
        self._validate(ctx)
        if ctx.phase.is_suite_scope:
            self._emit(TestEvent.suite_info(ctx, message))
        else:
            self._emit(TestEvent.test_info(ctx, message))
        if self.interaction is not None:
            self.interaction.report_info(ctx, message)

    def report_warning(self, ctx: TestContext, message: str) -> None:
        self._validate(ctx)
        if ctx.phase.is_suite_scope:
            self._emit(TestEvent.suite_warn(ctx, message))
        else:
            self._emit(TestEvent.test_warn(ctx, message))
        if self.interaction is not None:
            self.interaction.report_warning(ctx, message)

    def report_skip(self, ctx: TestContext, reason: str) -> None:
        self._validate(ctx)
        error = self._skip_not_allowed(ctx.phase)
        if error is not None:
            raise error
        self._skip(ctx, reason)

    def report_failure(self, ctx: TestContext, reason: Any) -> None:
        if self._validate(ctx, failure=reason if reason is not None else "failure"):
            self._fail(ctx, reason)

    async def show_prompt(self, ctx: TestContext, message: str, duration: PromptDuration) -> None:
        self._validate(ctx)
        if self.interaction is None:
            raise InteractionNotAllowedError("Interaction with the user is not allowed for this test.")
        await self.interaction.show_prompt(ctx, message, duration)
