"""TAP output for test runs."""

import sys
from typing import Optional, TextIO

from taprunner.core.failure import SourceLocation


class TapReporter:
    """Writes Test Anything Protocol lines as a run progresses.

    Every line is flushed as soon as it is written so the stream can be
    consumed while tests are still running.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        """Initialize the reporter.

        Args:
            stream: Where to write lines (default: the current ``sys.stdout``)
        """
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _write(self, line: str) -> None:
        stream = self.stream
        stream.write(line + "\n")
        stream.flush()

    def plan(self, count: int) -> None:
        """Declare how many tests will run."""
        if count == 0:
            self._write("1..0 # No tests")
        else:
            self._write(f"1..{count}")

    def ok(self, number: int, name: str) -> None:
        self._write(f"ok {number} {name}")

    def not_ok(self, number: int, name: str) -> None:
        self._write(f"not ok {number} {name}")

    def diagnostic(self, message: str) -> None:
        """Write a message as comment lines, one per line of the message."""
        for segment in message.split("\n"):
            self._write(f"# {segment}")

    def location(self, location: SourceLocation) -> None:
        self._write(f"# {location}")
