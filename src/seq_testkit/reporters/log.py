import logging
from typing import Optional
from ..events import TestEvent, TestEventType as E
from ..logging import get_logger
from ..monitor import TestMonitor


def _platform_label(platform: str) -> str:
    names = {"android": "Android", "ios": "iOS"}
    return f"{names.get(platform, platform):>8} : "


class LogMonitor(TestMonitor):
    """Writes events to the package logger, one line per event."""

    def __init__(self, platform: str = "", logger: Optional[logging.Logger] = None):
        self.log = logger or get_logger("events")
        self.prefix = _platform_label(platform) if platform else ""

    def report_event(self, event: TestEvent) -> None:
        p, desc, msg = self.prefix, event.event_description, event.message or ""
        t = event.event_type
        if t == E.BATCH_INFO:
            self.log.info("%s## %s ## - %s", p, desc, msg)
        elif t == E.BATCH_FAIL:
            self.log.error("%s## %s ## - %s%s", p, desc, event.failure_description, _stack(event))
        elif t == E.BATCH_CANCEL:
            self.log.warning("%s## %s ## - CANCELLED: %s", p, desc, msg)
        elif t == E.SUITE_START:
            self.log.info("%s[[ %s ]] - STARTED", p, desc)
        elif t == E.SUITE_SKIP:
            self.log.warning("%s[[ %s ]] - SKIPPED: %s", p, desc, msg)
        elif t == E.SUITE_FAIL:
            self.log.error("%s[[ %s ]] - FAILED: %s%s", p, desc, event.failure_description, _stack(event))
        elif t == E.SUITE_SUCCESS:
            self.log.info("%s[[ %s ]] - SUCCESS", p, desc)
        elif t in (E.SUITE_INFO, E.TEST_INFO):
            self.log.info("%s [ %s ] - %s", p, desc, msg)
        elif t in (E.SUITE_WARN, E.TEST_WARN):
            self.log.warning("%s [ %s ] - %s", p, desc, msg)
        elif t == E.TEST_START:
            self.log.info("%s [ %s ] - STARTED", p, desc)
        elif t == E.TEST_SKIP:
            self.log.warning("%s [ %s ] - SKIPPED: %s", p, desc, msg)
        elif t == E.TEST_FAIL:
            self.log.error("%s [ %s ] - FAILED: %s%s", p, desc, event.failure_description, _stack(event))
        elif t == E.TEST_SUCCESS:
            self.log.info("%s [ %s ] - SUCCESS", p, desc)
        elif t == E.PHASE:
            self.log.debug("%s [ %s ] - %s", p, desc, msg)


def _stack(event: TestEvent) -> str:
    return f"\n{event.failure_stack.rstrip()}" if event.failure_stack else ""
