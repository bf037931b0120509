"""Ordered storage of registered tests and fixtures."""

from typing import Any, Callable, Iterator, Optional

from taprunner.core.failure import format_message
from taprunner.core.models import FixtureCallback, FixtureItem, RegisteredItem, TestItem

DEFAULT_MAX_NAME_LENGTH = 1023


class Registry:
    """Append-only sequence of items, drained by a single run."""

    def __init__(self, max_name_length: int = DEFAULT_MAX_NAME_LENGTH):
        if max_name_length < 1:
            raise ValueError("max_name_length must be at least 1")
        self.max_name_length = max_name_length
        self._items: list[RegisteredItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[RegisteredItem]:
        return iter(self._items)

    @property
    def tests(self) -> list[TestItem]:
        return [item for item in self._items if isinstance(item, TestItem)]

    def format_name(self, name: str, args: tuple) -> str:
        """Format a test name and cut it to the configured bound."""
        return format_message(name, args)[: self.max_name_length]

    def add_test(
        self,
        function: Callable[..., None],
        name: str,
        args: tuple = (),
        argument: Any = None,
        has_argument: bool = False,
    ) -> TestItem:
        """Append a test item."""
        item = TestItem(
            name=self.format_name(name, args),
            function=function,
            argument=argument,
            has_argument=has_argument,
        )
        self._items.append(item)
        return item

    def add_fixture(
        self,
        setup: Optional[FixtureCallback] = None,
        teardown: Optional[FixtureCallback] = None,
    ) -> FixtureItem:
        """Append a fixture item that applies to the tests after it."""
        item = FixtureItem(setup=setup, teardown=teardown)
        self._items.append(item)
        return item

    def drain(self) -> list[RegisteredItem]:
        """Hand over all items and leave the registry empty."""
        items, self._items = self._items, []
        return items
