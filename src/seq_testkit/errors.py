class TestbedError(Exception):
    """Base class for errors raised by the testbed itself."""


class DefinitionError(TestbedError):
    """The suite is written in a way the runner can't execute. Reported as a failure."""


class InteractionNotAllowedError(TestbedError):
    pass


class StaleContextError(TestbedError):
    """An outcome was reported with a context the runner has already left.

    Usually means the test code didn't await an asynchronous operation before
    returning. Results of the batch can't be trusted, so this error is never
    converted into an ordinary test failure.
    """

    def __init__(self, message: str, reported=None, current=None):
        super().__init__(message)
        self.reported = reported
        self.current = current


class CounterError(TestbedError):
    """Internal error: a progress counter was used incorrectly."""
