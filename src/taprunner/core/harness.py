"""Harness session: registration followed by a single consuming run."""

from typing import Any, Callable, Optional, Sequence, TextIO

from rich.console import Console

from taprunner.config import HarnessConfig
from taprunner.core.failure import HarnessError
from taprunner.core.models import FixtureCallback, RunResult
from taprunner.core.registry import Registry
from taprunner.core.reporter import TapReporter
from taprunner.core.runner import SuiteRunner


class Harness:
    """Collects tests and fixtures, then runs them in registration order.

    Fixtures apply to every test registered after them, up to the next
    fixture. A run drains the harness, so it can be filled and run again.
    """

    def __init__(
        self,
        config: Optional[HarnessConfig] = None,
        stream: Optional[TextIO] = None,
        verbose: bool = False,
        console: Optional[Console] = None,
    ):
        """Initialize the harness.

        Args:
            config: Harness settings (default: ``HarnessConfig()``)
            stream: TAP output stream (default: stdout)
            verbose: Trace execution on the console
            console: Rich console for traces (default: stderr)
        """
        self.config = config or HarnessConfig()
        self.reporter = TapReporter(stream)
        self.verbose = verbose
        self.console = console

        self.registry = Registry(self.config.max_name_length)
        self._running = False

    def configure(self, config: HarnessConfig) -> None:
        """Replace the harness settings before tests are registered."""
        self._check_idle("reconfigure")
        self.config = config
        self.registry.max_name_length = config.max_name_length

    @property
    def running(self) -> bool:
        return self._running

    def _check_idle(self, action: str) -> None:
        if self._running:
            raise HarnessError(f"Cannot {action} while a run is in progress")

    def register_test(self, function: Callable[[], None], name: str, *args) -> None:
        """Register a test called without arguments.

        ``name`` is a printf-style format applied to ``args``.
        """
        self._check_idle("register a test")
        self.registry.add_test(function, name, args)

    def register_test_with_argument(
        self,
        function: Callable[[Any], None],
        argument: Any,
        name: str,
        *args,
    ) -> None:
        """Register a test called with ``argument``.

        The same argument is passed to the active fixture's setup and teardown.
        """
        self._check_idle("register a test")
        self.registry.add_test(function, name, args, argument=argument, has_argument=True)

    def register_fixture(
        self,
        setup: Optional[FixtureCallback] = None,
        teardown: Optional[FixtureCallback] = None,
    ) -> None:
        """Register setup and teardown for the tests registered after this call."""
        self._check_idle("register a fixture")
        self.registry.add_fixture(setup, teardown)

    def test(self, name: Optional[str] = None) -> Callable:
        """Decorator that registers a function as a test under ``name``."""

        def decorator(function: Callable[[], None]) -> Callable[[], None]:
            # Names given here are used verbatim, never as format strings
            self._check_idle("register a test")
            self.registry.add_test(function, name or function.__name__)
            return function

        return decorator

    def run_with_result(self, argv: Optional[Sequence[str]] = None) -> RunResult:
        """Run all registered tests and return the detailed result.

        ``argv`` is accepted for command-line compatibility and not used.
        """
        self._check_idle("start a run")
        self._running = True
        try:
            runner = SuiteRunner(
                self.registry.drain(),
                self.reporter,
                catch_assertions=self.config.catch_assertions,
                verbose=self.verbose,
                console=self.console,
            )
            return runner.run()
        finally:
            self._running = False

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Run all registered tests and return the number that failed."""
        return self.run_with_result(argv).failed


default_harness = Harness()


def register_test(function: Callable[[], None], name: str, *args) -> None:
    """Register a test on the default harness."""
    default_harness.register_test(function, name, *args)


def register_test_with_argument(
    function: Callable[[Any], None], argument: Any, name: str, *args
) -> None:
    """Register a test with an argument on the default harness."""
    default_harness.register_test_with_argument(function, argument, name, *args)


def register_fixture(
    setup: Optional[FixtureCallback] = None,
    teardown: Optional[FixtureCallback] = None,
) -> None:
    """Register a fixture on the default harness."""
    default_harness.register_fixture(setup, teardown)


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Run the default harness."""
    return default_harness.run(argv)
