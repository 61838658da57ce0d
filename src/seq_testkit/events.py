from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
import traceback


class TestEventType(Enum):
    SUITE_START = "SUITE_START"
    SUITE_SUCCESS = "SUITE_SUCCESS"
    SUITE_FAIL = "SUITE_FAIL"
    SUITE_SKIP = "SUITE_SKIP"
    SUITE_INFO = "SUITE_INFO"
    SUITE_WARN = "SUITE_WARN"

    TEST_START = "TEST_START"
    TEST_SUCCESS = "TEST_SUCCESS"
    TEST_FAIL = "TEST_FAIL"
    TEST_SKIP = "TEST_SKIP"
    TEST_INFO = "TEST_INFO"
    TEST_WARN = "TEST_WARN"

    # Lifecycle phase entered. Message holds the phase name.
    PHASE = "PHASE"

    BATCH_INFO = "BATCH_INFO"
    BATCH_FAIL = "BATCH_FAIL"
    BATCH_CANCEL = "BATCH_CANCEL"


def describe_error(error: Any) -> str:
    if isinstance(error, BaseException):
        text = str(error)
        return f"{type(error).__name__}: {text}" if text else type(error).__name__
    if isinstance(error, str):
        return error
    return repr(error)


def _format_stack(error: Any) -> Optional[str]:
    if isinstance(error, BaseException) and error.__traceback__ is not None:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return None


@dataclass(frozen=True)
class TestEvent:
    __test__ = False

    event_type: TestEventType
    suite: str
    test_name: Optional[str] = None
    message: Optional[str] = None
    failure: Any = field(default=None, compare=False)
    failure_stack: Optional[str] = field(default=None, compare=False, repr=False)
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def event_description(self) -> str:
        if self.test_name is not None:
            return f"{self.suite} :: {self.test_name}"
        return self.suite

    @property
    def failure_description(self) -> str:
        if isinstance(self.failure, BaseException):
            return describe_error(self.failure)
        return self.message or ""

    # Batch

    @classmethod
    def batch_info(cls, batch_name: str, message: str) -> "TestEvent":
        return cls(TestEventType.BATCH_INFO, batch_name, message=message)

    @classmethod
    def batch_fail(cls, batch_name: str, reason: str, failure: Any = None) -> "TestEvent":
        return cls._error_event(TestEventType.BATCH_FAIL, batch_name, None, failure, reason)

    @classmethod
    def batch_cancel(cls, batch_name: str, message: str) -> "TestEvent":
        return cls(TestEventType.BATCH_CANCEL, batch_name, message=message)

    # Suite

    @classmethod
    def suite_start(cls, ctx) -> "TestEvent":
        return cls(TestEventType.SUITE_START, ctx.suite_name)

    @classmethod
    def suite_success(cls, ctx) -> "TestEvent":
        return cls(TestEventType.SUITE_SUCCESS, ctx.suite_name)

    @classmethod
    def suite_skip(cls, ctx, reason: str) -> "TestEvent":
        return cls(TestEventType.SUITE_SKIP, ctx.suite_name, message=reason)

    @classmethod
    def suite_fail(cls, ctx, failure: Any = None, message: Optional[str] = None) -> "TestEvent":
        return cls._error_event(TestEventType.SUITE_FAIL, ctx.suite_name, None, failure, message)

    @classmethod
    def suite_info(cls, ctx, message: str) -> "TestEvent":
        return cls(TestEventType.SUITE_INFO, ctx.suite_name, ctx.hook_name, message)

    @classmethod
    def suite_warn(cls, ctx, message: str) -> "TestEvent":
        return cls(TestEventType.SUITE_WARN, ctx.suite_name, ctx.hook_name, message)

    # Test

    @classmethod
    def test_start(cls, ctx) -> "TestEvent":
        return cls(TestEventType.TEST_START, ctx.suite_name, ctx.test_name)

    @classmethod
    def test_success(cls, ctx) -> "TestEvent":
        return cls(TestEventType.TEST_SUCCESS, ctx.suite_name, ctx.test_name)

    @classmethod
    def test_skip(cls, ctx, reason: str) -> "TestEvent":
        return cls(TestEventType.TEST_SKIP, ctx.suite_name, ctx.test_name, reason)

    @classmethod
    def test_fail(cls, ctx, failure: Any = None, message: Optional[str] = None) -> "TestEvent":
        return cls._error_event(TestEventType.TEST_FAIL, ctx.suite_name, ctx.test_name, failure, message)

    @classmethod
    def test_info(cls, ctx, message: str) -> "TestEvent":
        return cls(TestEventType.TEST_INFO, ctx.suite_name, ctx.hook_name, message)

    @classmethod
    def test_warn(cls, ctx, message: str) -> "TestEvent":
        return cls(TestEventType.TEST_WARN, ctx.suite_name, ctx.hook_name, message)

    @classmethod
    def phase(cls, ctx) -> "TestEvent":
        return cls(TestEventType.PHASE, ctx.suite_name, ctx.test_name, ctx.phase.value)

    @classmethod
    def _error_event(cls, event_type: TestEventType, suite: str, test_name: Optional[str],
                     failure: Any, message: Optional[str]) -> "TestEvent":
        if isinstance(failure, BaseException):
            failure_message = describe_error(failure)
            if message is not None:
                separator = " " if message.endswith(".") else ". "
                message = f"{message}{separator}{failure_message}"
            else:
                message = failure_message
        elif isinstance(failure, str) and message is None:
            message = failure
        return cls(event_type, suite, test_name, message, failure, _format_stack(failure))
