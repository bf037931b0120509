"""Sequential execution of registered tests."""

import traceback
from typing import Optional

from rich.console import Console

from taprunner.core import failure
from taprunner.core.failure import HarnessError, SourceLocation, TestFailure
from taprunner.core.models import (
    FixtureItem,
    RegisteredItem,
    RunContext,
    RunResult,
    TestItem,
    TestOutcome,
    TestStatus,
)
from taprunner.core.reporter import TapReporter


class SuiteRunner:
    """Runs a drained list of items once, in registration order."""

    def __init__(
        self,
        items: list[RegisteredItem],
        reporter: TapReporter,
        catch_assertions: bool = True,
        verbose: bool = False,
        console: Optional[Console] = None,
    ):
        """Initialize the runner.

        Args:
            items: Tests and fixtures in registration order
            reporter: Destination for TAP lines
            catch_assertions: Treat ``AssertionError`` as a test failure
            verbose: Trace fixture switches and test starts on ``console``
            console: Rich console for traces (default: stderr)
        """
        self.items = items
        self.reporter = reporter
        self.catch_assertions = catch_assertions
        self.verbose = verbose
        self.console = console or Console(stderr=True)

        self.context = RunContext()
        self._outcomes: list[TestOutcome] = []

    def run(self) -> RunResult:
        """Execute every test and return the aggregated result."""
        tests = [item for item in self.items if isinstance(item, TestItem)]
        if not tests:
            self.reporter.plan(0)
            return RunResult()

        self.context = RunContext(total=len(tests))
        self.reporter.plan(len(tests))

        fixture: Optional[FixtureItem] = None
        previous = failure.activate(self)
        try:
            for item in self.items:
                if isinstance(item, FixtureItem):
                    fixture = item
                    if self.verbose:
                        self.console.print("[dim]Switching fixture[/dim]")
                    continue
                self._run_test(item, fixture)
        finally:
            failure.activate(previous)
            self.context = RunContext()

        failed = sum(1 for test in tests if test.failed)
        return RunResult(total=len(tests), failed=failed, outcomes=self._outcomes)

    def _run_test(self, item: TestItem, fixture: Optional[FixtureItem]) -> None:
        """Run one test between the active fixture's setup and teardown."""
        if item.function is None:
            raise HarnessError(f"Test {item.name!r} has no function")

        self.context.number += 1
        self.context.current = item
        self._outcomes.append(TestOutcome(number=self.context.number, name=item.name))

        if self.verbose:
            self.console.print(f"[dim]Running {self.context.number}: {item.name}[/dim]")

        try:
            try:
                if fixture and fixture.setup:
                    fixture.setup(item.argument)

                item.invoke()

                if fixture and fixture.teardown:
                    fixture.teardown(item.argument)
            except TestFailure as e:
                # Raised directly instead of through fail()
                if not item.failed:
                    self.report_failure(e.message, e.location)
            except AssertionError as e:
                if not self.catch_assertions:
                    raise
                self.report_failure(str(e) or "assertion failed", _assertion_location(e))
            else:
                if not item.failed:
                    self.reporter.ok(self.context.number, item.name)
        finally:
            self.context.current = None

        if item.failed:
            self._outcomes[-1].status = TestStatus.FAILED

    def report_failure(self, message: str, location: SourceLocation) -> None:
        """Mark the current test failed and write its diagnostics."""
        item = self.context.current
        if item is None:
            raise HarnessError("Failure reported outside of a running test")

        if not item.failed:
            item.failed = True
            self.reporter.not_ok(self.context.number, item.name)

        self.reporter.diagnostic(message)
        self.reporter.location(location)
        self._outcomes[-1].messages.append(message)


def _assertion_location(error: AssertionError) -> SourceLocation:
    """Location of the innermost frame that raised an assertion."""
    frames = traceback.extract_tb(error.__traceback__)
    if not frames:
        return SourceLocation(filename="<unknown>", line=0, function="<unknown>")
    frame = frames[-1]
    return SourceLocation(filename=frame.filename, line=frame.lineno, function=frame.name)
