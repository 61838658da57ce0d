from .runner import TestRunner
from .runtime import SuiteRuntime

__all__ = ["TestRunner", "SuiteRuntime"]
