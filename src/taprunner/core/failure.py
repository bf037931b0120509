"""Failure signalling for running tests.

Two primitives are available to test functions and fixture callbacks:

- ``fail`` marks the current test failed, reports it and aborts the rest of
  the test (setup, body and teardown) by raising ``TestFailure``. The runner
  catches it once, at the boundary it sets up before each test.
- ``fail_soft`` marks and reports the same way but returns, so a test can
  record several independent failures.

Both must be called while a test is executing; anything else is a harness
misuse and raises ``HarnessError``.
"""

import inspect
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from taprunner.core.runner import SuiteRunner


class HarnessError(Exception):
    """Raised when the harness is used incorrectly."""

    pass


@dataclass(frozen=True)
class SourceLocation:
    """Where a failure was reported."""

    filename: str
    line: int
    function: str

    @property
    def basename(self) -> str:
        """Filename stripped to its final path component."""
        base = os.path.basename(self.filename)
        return base or self.filename

    @classmethod
    def from_caller(cls, depth: int = 1) -> "SourceLocation":
        """Capture the location ``depth`` frames above the caller."""
        frame = inspect.currentframe()
        try:
            target = frame.f_back
            for _ in range(depth):
                if target.f_back is None:
                    break
                target = target.f_back
            return cls(
                filename=target.f_code.co_filename,
                line=target.f_lineno,
                function=target.f_code.co_name,
            )
        finally:
            del frame

    def __str__(self) -> str:
        return f"in {self.function}() at {self.basename}:{self.line}"


class TestFailure(BaseException):
    """Aborts the current test. Caught by the runner, never by callers.

    Not an ``Exception`` subclass, so ``except Exception`` in code under test
    does not stop the abort.
    """

    __test__ = False

    def __init__(self, message: str, location: SourceLocation):
        super().__init__(message)
        self.message = message
        self.location = location


_active_runner: Optional["SuiteRunner"] = None


def activate(runner: Optional["SuiteRunner"]) -> Optional["SuiteRunner"]:
    """Make ``runner`` the target of failure reports, returning the previous one."""
    global _active_runner
    previous = _active_runner
    _active_runner = runner
    return previous


def format_message(message: str, args: tuple) -> str:
    """Apply printf-style arguments, treating bad formats as misuse."""
    if not args:
        return message
    try:
        return message % args
    except (TypeError, ValueError, KeyError) as e:
        raise HarnessError(f"Cannot format message {message!r}: {e}") from e


def _require_runner() -> "SuiteRunner":
    if _active_runner is None or _active_runner.context.current is None:
        raise HarnessError("Failure reported outside of a running test")
    return _active_runner


def fail(message: str, *args, location: Optional[SourceLocation] = None) -> None:
    """Report the current test as failed and abort it.

    Args:
        message: printf-style message; newlines produce separate diagnostics
        *args: values for the message placeholders
        location: override for the reported source location

    Raises:
        TestFailure: always, unwinding to the runner's per-test boundary
        HarnessError: if no test is currently executing
    """
    runner = _require_runner()
    text = format_message(message, args)
    location = location or SourceLocation.from_caller()
    runner.report_failure(text, location)
    raise TestFailure(text, location)


def fail_soft(message: str, *args, location: Optional[SourceLocation] = None) -> None:
    """Report the current test as failed without aborting it."""
    runner = _require_runner()
    text = format_message(message, args)
    runner.report_failure(text, location or SourceLocation.from_caller())
