from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Tuple
from .context import TestContext
from .errors import DefinitionError
from .interaction import PromptDuration

TestBody = Callable[[], Awaitable[Any]]

_TEST_MARK = "__seq_testkit_platforms__"


def test_method(func: Optional[Callable] = None, *, platforms: Iterable[str] = ()):
    """Register a coroutine method of a `TestSuite` subclass as a test.

    `platforms` restricts the test to hosts whose platform is in the list.
    Usable bare (`@test_method`) or with arguments.
    """
    tags = tuple(p.lower() for p in platforms)

    def mark(f: Callable) -> Callable:
        setattr(f, _TEST_MARK, tags)
        return f

    if func is not None:
        return mark(func)
    return mark


test_method.__test__ = False


@dataclass(frozen=True)
class TestEntry:
    __test__ = False

    name: str
    body: TestBody
    platforms: Tuple[str, ...] = ()

    def applies_to(self, platform: str) -> bool:
        return not self.platforms or platform.lower() in self.platforms


class TestPlanBuilder:
    """Collects the ordered test entries of one suite for one host platform."""

    __test__ = False

    def __init__(self, platform: str):
        self.platform = platform.lower()
        self._entries: List[TestEntry] = []

    def add(self, name: str, body: TestBody, platforms: Iterable[str] = ()) -> "TestPlanBuilder":
        if any(e.name == name for e in self._entries):
            raise DefinitionError(f"Test '{name}' is registered twice.")
        self._entries.append(TestEntry(name, body, tuple(p.lower() for p in platforms)))
        return self

    def build(self) -> List[TestEntry]:
        # Tests for every platform go first, platform specific ones after them.
        common = [e for e in self._entries if not e.platforms]
        specific = [e for e in self._entries if e.platforms and e.applies_to(self.platform)]
        return common + specific


class TestSuite:
    """Base class for suites executed by `TestRunner`.

    Subclasses register tests with `@test_method` or by overriding
    `build_tests`. Hooks may be overridden; overrides should await the
    base implementation so `print_info_messages` keeps working.
    """

    __test__ = False

    def __init__(self, suite_name: Optional[str] = None, is_interactive: bool = False):
        self.suite_name = suite_name or type(self).__name__
        self.is_interactive = is_interactive
        # Debugging aids
        self.print_info_messages = False
        self.run_only_one_test: Optional[str] = None
        # Per task: background tasks spawned by a test keep the context they were created with.
        self._context: ContextVar[Optional[TestContext]] = ContextVar(f"{self.suite_name}.context", default=None)

    # ---------- registration ----------
    def build_tests(self, builder: TestPlanBuilder) -> None:
        # Definition order, base classes first. An override keeps the position of the method it replaces.
        ordered: List[str] = []
        for klass in reversed(type(self).__mro__):
            for name, attr in vars(klass).items():
                if hasattr(attr, _TEST_MARK) and name not in ordered:
                    ordered.append(name)
        for name in ordered:
            func = getattr(type(self), name)
            tags = getattr(func, _TEST_MARK, None)
            if tags is None:
                continue
            builder.add(name, getattr(self, name), tags)

    def test_plan(self, platform: str) -> List[TestEntry]:
        builder = TestPlanBuilder(platform)
        self.build_tests(builder)
        return builder.build()

    # ---------- context ----------
    @property
    def context(self) -> TestContext:
        context = self._context.get()
        if context is None:
            raise DefinitionError("TestContext is not set. The suite is not running.")
        return context

    @property
    def config(self):
        return self.context.config

    @property
    def interaction_allowed(self) -> bool:
        return self.context.interaction_allowed

    @property
    def current_test_name(self) -> Optional[str]:
        return self.context.test_name

    def _assign_context(self, context: Optional[TestContext]) -> None:
        self._context.set(context)

    # ---------- lifecycle ----------
    async def before_all(self):
        if self.print_info_messages: self.report_info("before_all()")

    async def before_each(self):
        if self.print_info_messages: self.report_info("before_each()")

    async def after_each(self):
        if self.print_info_messages: self.report_info("after_each()")

    async def after_all(self):
        if self.print_info_messages: self.report_info("after_all()")

    # ---------- reporting ----------
    def report_info(self, message: str) -> None:
        self.context.report_info(message)

    def report_warning(self, message: str) -> None:
        self.context.report_warning(message)

    def report_skip(self, reason: str) -> None:
        self.context.report_skip(reason)

    def report_failure(self, reason: Any) -> None:
        self.context.report_failure(reason)

    async def show_prompt(self, message: str, duration: PromptDuration = PromptDuration.SHORT) -> None:
        await self.context.show_prompt(message, duration)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.suite_name!r}>"
