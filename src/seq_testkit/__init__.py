# Lightweight package init: the runner pulls in pydantic and rich, import it on first use.
__all__ = [
    "TestRunner", "TestSuite", "test_method", "TestPlanBuilder",
    "Success", "Skip", "Fail", "TestContext", "Phase",
    "TestEvent", "TestEventType", "TestMonitor", "MonitorGroup",
    "TestCounter", "TestProgress", "PromptDuration", "TestInteraction",
]

_EXPORTS = {
    "TestRunner": ".runners.runner",
    "TestSuite": ".suite", "test_method": ".suite", "TestPlanBuilder": ".suite",
    "Success": ".outcome", "Skip": ".outcome", "Fail": ".outcome",
    "TestContext": ".context", "Phase": ".context",
    "TestEvent": ".events", "TestEventType": ".events",
    "TestMonitor": ".monitor", "MonitorGroup": ".monitor",
    "TestCounter": ".progress", "TestProgress": ".progress",
    "PromptDuration": ".interaction", "TestInteraction": ".interaction",
}


def __getattr__(name):
    if name in _EXPORTS:
        import importlib
        return getattr(importlib.import_module(_EXPORTS[name], __name__), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
