from typing import Iterable
from .results import SuiteResult


class ConsoleReporter:
    def __init__(self, echo=print):
        self.echo = echo

    def emit(self, results: Iterable[SuiteResult]) -> None:
        for result in results:
            self.echo(f"Suite: {result.suite} [{result.status}]")
            for line in result.logs:
                self.echo(f"   {line}")
            for c in result.cases:
                self.echo(f" - {c.id}: {c.status}")
