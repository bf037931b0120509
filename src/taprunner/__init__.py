"""
TapRunner - a small in-process test harness that speaks TAP.

This package provides tools to:
- Register test functions and setup/teardown fixtures in order
- Run them sequentially with per-test failure isolation
- Stream results as Test Anything Protocol lines
- Return the number of failed tests as the exit signal
"""

__version__ = "0.1.0"
__author__ = "TapRunner Team"

from taprunner.core.failure import HarnessError, SourceLocation, TestFailure, fail, fail_soft
from taprunner.core.harness import (
    Harness,
    default_harness,
    register_fixture,
    register_test,
    register_test_with_argument,
    run,
)

__all__ = [
    "Harness",
    "HarnessError",
    "SourceLocation",
    "TestFailure",
    "default_harness",
    "fail",
    "fail_soft",
    "register_fixture",
    "register_test",
    "register_test_with_argument",
    "run",
]
