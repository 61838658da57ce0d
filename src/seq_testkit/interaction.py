from enum import Enum
import asyncio


class PromptDuration(Enum):
    QUICK = 0.5
    SHORT = 2.0
    LONG = 5.0


class UserInteraction:
    """Prompts the person sitting in front of the device. Required by interactive suites."""

    async def show_prompt(self, context, message: str, duration: PromptDuration) -> None:
        raise NotImplementedError


class TestInteraction(UserInteraction):
    """User interaction that also receives the messages reported by the tests."""

    __test__ = False

    def report_info(self, context, message: str) -> None:
        pass

    def report_warning(self, context, message: str) -> None:
        pass

    def report_skip(self, context, reason: str) -> None:
        pass

    def report_failure(self, context, reason) -> None:
        pass


class ConsoleInteraction(TestInteraction):
    """Shows prompts on the terminal and keeps them visible for the requested duration."""

    def __init__(self, echo=print):
        self.echo = echo

    async def show_prompt(self, context, message: str, duration: PromptDuration) -> None:
        self.echo(f">>> [{context.hook_name}] {message}")
        await asyncio.sleep(duration.value)

    def report_skip(self, context, reason: str) -> None:
        self.echo(f"    skipped: {reason}")
