import pytest

from seq_testkit.errors import CounterError
from seq_testkit.progress import TestCounter as Counter, TestProgress as Progress


class TestCounterUsage:
    def test_restart_sets_total_and_clears_counts(self):
        c = Counter("suites")
        c.restart(3)
        c.add_succeeded()
        c.restart(5)
        assert (c.total, c.succeeded, c.failed, c.skipped) == (5, 0, 0, 0)
        assert not c.is_complete

    def test_counts_add_up_to_total(self):
        c = Counter("tests")
        c.restart(6)
        c.add_succeeded(2)
        c.add_failed()
        c.add_skipped(3)
        assert c.progress == 6
        assert c.is_complete

    def test_mutation_before_restart_is_rejected(self):
        c = Counter("tests", total=3)
        with pytest.raises(CounterError, match="not restarted"):
            c.add_succeeded()

    def test_overflow_is_rejected(self):
        c = Counter("tests")
        c.restart(1)
        c.add_skipped()
        with pytest.raises(CounterError, match="exceeded its maximum value 1"):
            c.add_failed()

    def test_negative_total_is_rejected(self):
        with pytest.raises(CounterError):
            Counter("tests").restart(-1)

    def test_elapsed_time_starts_at_restart(self):
        c = Counter("tests")
        assert c.elapsed_time == 0.0
        c.restart(1)
        assert c.elapsed_time >= 0.0


class TestObservers:
    def test_observers_receive_snapshots(self):
        seen = []
        c = Counter("tests")
        c.add_observer(seen.append)
        c.restart(2)
        c.add_succeeded()
        c.add_failed()
        assert [(p.total, p.succeeded, p.failed, p.skipped) for p in seen] == [
            (2, 0, 0, 0), (2, 1, 0, 0), (2, 1, 1, 0)]
        assert all(isinstance(p, Progress) for p in seen)
        assert seen[-1].progress == 2

    def test_snapshot_is_frozen(self):
        c = Counter("tests")
        c.restart(1)
        snap = c.snapshot()
        c.add_succeeded()
        assert snap.succeeded == 0
        with pytest.raises(Exception):
            snap.succeeded = 1

    def test_remove_and_reset(self):
        a, b = [], []
        c = Counter("tests")
        c.add_observer(a.append)
        c.add_observer(b.append)
        c.remove_observer(a.append)
        c.restart(1)
        assert not a and len(b) == 1
        c.reset_observers()
        c.add_succeeded()
        assert len(b) == 1
