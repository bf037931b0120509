"""Core registration, execution and reporting functionality."""

from taprunner.core.harness import Harness
from taprunner.core.registry import Registry
from taprunner.core.reporter import TapReporter
from taprunner.core.runner import SuiteRunner

__all__ = ["Harness", "Registry", "TapReporter", "SuiteRunner"]
