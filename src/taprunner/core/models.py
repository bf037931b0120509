"""Data models for registered items and run results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union


FixtureCallback = Callable[[Any], None]


class TestStatus(str, Enum):
    """Outcome of a single test."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"


@dataclass
class FixtureItem:
    """Setup and teardown applied to every test registered after it."""

    setup: Optional[FixtureCallback] = None
    teardown: Optional[FixtureCallback] = None


@dataclass
class TestItem:
    """A registered test function and its argument."""

    __test__ = False

    name: str
    function: Optional[Callable[..., None]]
    argument: Any = None
    has_argument: bool = False
    failed: bool = False

    def invoke(self) -> None:
        """Call the test function, passing the argument if one was registered."""
        if self.has_argument:
            self.function(self.argument)
        else:
            self.function()


RegisteredItem = Union[FixtureItem, TestItem]


@dataclass
class RunContext:
    """State that only lives while a run is in progress."""

    total: int = 0
    number: int = 0
    current: Optional[TestItem] = None


@dataclass
class TestOutcome:
    """Result of one executed test."""

    __test__ = False

    number: int
    name: str
    status: TestStatus = TestStatus.PASSED
    messages: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "number": self.number,
            "name": self.name,
            "status": self.status.value,
            "messages": list(self.messages),
        }


@dataclass
class RunResult:
    """Aggregated result of a whole run."""

    total: int = 0
    failed: int = 0
    outcomes: list[TestOutcome] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return self.total - self.failed

    def exit_code(self, limit: int = 254) -> int:
        """Failure count clamped to a valid process exit status."""
        return min(self.failed, limit)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
