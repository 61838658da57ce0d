import pytest

from seq_testkit.config import RunConfig
from seq_testkit.runners.runner import TestRunner as Runner

from helpers import RecordingInteraction, RecordingMonitor


@pytest.fixture
def run_config():
    """Android host, so ConfigurableSuite registers six tests."""
    return RunConfig(batch_name="RunnerTests", platform="android")


@pytest.fixture
def monitor():
    return RecordingMonitor()


@pytest.fixture
def interaction():
    return RecordingInteraction()


@pytest.fixture
def make_runner(run_config, monitor):
    def _make(config=None, interaction=None):
        return Runner("RunnerTests", config or run_config, monitor, interaction)
    return _make
