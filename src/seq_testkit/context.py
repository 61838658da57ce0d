from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from .interaction import PromptDuration


class Phase(Enum):
    BEFORE_ALL = "beforeAll"
    BEFORE_EACH = "beforeEach"
    IN_TEST = "test"
    AFTER_EACH = "afterEach"
    AFTER_ALL = "afterAll"

    @property
    def is_suite_scope(self) -> bool:
        return self in (Phase.BEFORE_ALL, Phase.AFTER_ALL)


@dataclass(frozen=True)
class TestContext:
    """Snapshot of where the runner was when a hook or a test started.

    `token` is the generation of the phase the context was created for. Any
    outcome reported through this context is validated against the runner's
    current generation.
    """

    __test__ = False

    suite_name: str
    test_name: Optional[str]
    phase: Phase
    token: int
    config: Any = field(default=None, repr=False, compare=False)
    interaction_allowed: bool = False
    _reporter: Any = field(default=None, repr=False, compare=False)

    @property
    def hook_name(self) -> str:
        """Name of the running hook as shown in info and warning events."""
        if self.phase == Phase.BEFORE_ALL:
            return "beforeAll"
        if self.phase == Phase.AFTER_ALL:
            return "afterAll"
        if self.test_name is None:
            return self.phase.value
        if self.phase in (Phase.BEFORE_EACH, Phase.AFTER_EACH):
            return f"{self.test_name} :: {self.phase.value}"
        return self.test_name

    def describe(self) -> str:
        test = self.test_name if self.test_name is not None else "-"
        return f"{self.suite_name} :: {test} @ {self.phase.name} (#{self.token})"

    def report_info(self, message: str) -> None:
        self._reporter.report_info(self, message)

    def report_warning(self, message: str) -> None:
        self._reporter.report_warning(self, message)

    def report_skip(self, reason: str) -> None:
        self._reporter.report_skip(self, reason)

    def report_failure(self, reason: Any) -> None:
        self._reporter.report_failure(self, reason)

    async def show_prompt(self, message: str, duration: PromptDuration = PromptDuration.SHORT) -> None:
        await self._reporter.show_prompt(self, message, duration)
