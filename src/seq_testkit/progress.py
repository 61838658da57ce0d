from dataclasses import dataclass
from typing import Callable, List
import time
from .errors import CounterError


@dataclass(frozen=True)
class TestProgress:
    __test__ = False

    total: int
    succeeded: int
    failed: int
    skipped: int
    elapsed_time: float = 0.0

    @property
    def progress(self) -> int:
        return self.succeeded + self.failed + self.skipped


TestProgressObserver = Callable[[TestProgress], None]


class TestCounter:
    """Mutable succeeded/failed/skipped counter with a fixed total.

    Every mutation notifies the observers with a fresh `TestProgress` snapshot
    and verifies that the counter never exceeds its total. The counter must be
    restarted before the first mutation.
    """

    __test__ = False

    def __init__(self, counter_name: str, total: int = 0):
        self.counter_name = counter_name
        self._total = total
        self._succeeded = 0
        self._failed = 0
        self._skipped = 0
        self._started_at: float = 0.0
        self._observers: List[TestProgressObserver] = []

    @property
    def total(self) -> int: return self._total
    @property
    def succeeded(self) -> int: return self._succeeded
    @property
    def failed(self) -> int: return self._failed
    @property
    def skipped(self) -> int: return self._skipped

    @property
    def progress(self) -> int:
        return self._succeeded + self._failed + self._skipped

    @property
    def is_complete(self) -> bool:
        return self.progress == self._total

    @property
    def elapsed_time(self) -> float:
        if not self._started_at:
            return 0.0
        return time.monotonic() - self._started_at

    def snapshot(self) -> TestProgress:
        return TestProgress(total=self._total, succeeded=self._succeeded, failed=self._failed,
                            skipped=self._skipped, elapsed_time=self.elapsed_time)

    def restart(self, total: int) -> None:
        if total < 0:
            raise CounterError(f"Counter '{self.counter_name}' can't be restarted with negative total {total}.")
        self._total = total
        self._succeeded = 0
        self._failed = 0
        self._skipped = 0
        self._started_at = time.monotonic()
        self._notify("restart")

    def add_succeeded(self, amount: int = 1) -> None:
        self._succeeded += amount
        self._notify("add_succeeded")

    def add_failed(self, amount: int = 1) -> None:
        self._failed += amount
        self._notify("add_failed")

    def add_skipped(self, amount: int = 1) -> None:
        self._skipped += amount
        self._notify("add_skipped")

    def add_observer(self, observer: TestProgressObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: TestProgressObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def reset_observers(self) -> None:
        self._observers = []

    def _notify(self, op: str) -> None:
        if self.progress > self._total:
            raise CounterError(
                f"Counter '{self.counter_name}' exceeded its maximum value {self._total} after {op}."
            )
        if not self._started_at:
            raise CounterError(f"Counter '{self.counter_name}' is not restarted before {op}.")
        snapshot = self.snapshot()
        for observer in list(self._observers):
            observer(snapshot)

    def __repr__(self) -> str:
        return (f"TestCounter({self.counter_name!r}, total={self._total}, succeeded={self._succeeded}, "
                f"failed={self._failed}, skipped={self._skipped})")
