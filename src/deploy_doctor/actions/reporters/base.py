"""Base Reporter Interface."""

from abc import ABC, abstractmethod

from rich.console import Console

from deploy_doctor.checks import BaseCheck
from deploy_doctor.config import ReadinessConfig
from deploy_doctor.model.result import CheckResult, RunReport


class BaseReporter(ABC):
    """Abstract base class for all readiness reporters.

    Streaming reporters print as the battery runs; structured reporters
    only implement ``report_summary``.
    """

    def __init__(self, console: Console, config: ReadinessConfig) -> None:
        self.console = console
        self.config = config

    def report_header(self, target: str) -> None:
        """Announce the run."""

    def report_section(self, check: BaseCheck) -> None:
        """Start of a battery section."""

    def report_result(self, result: CheckResult) -> None:
        """A single result, as soon as it is produced."""

    @abstractmethod
    def report_summary(self, report: RunReport) -> int:
        """Totals and verdict. Returns the process exit code."""
        ...
