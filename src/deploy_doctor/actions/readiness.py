"""Readiness Action - Run the check battery and report on it.

CONTRACT:
- read_only: False (runs the production build, creates and removes a test image)
- requires_backup: False
- rollback_support: N/A
- prerequisites: None (missing tools are reported, not required)
"""

from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console

from deploy_doctor.actions.reporters import (
    BaseReporter,
    JsonReporter,
    PlainReporter,
    RichReporter,
    YamlReporter,
)
from deploy_doctor.checks import CheckContext, run_checks
from deploy_doctor.config import ReadinessConfig
from deploy_doctor.model.result import RunReport

REPORTERS: dict[str, type[BaseReporter]] = {
    "rich": RichReporter,
    "plain": PlainReporter,
    "json": JsonReporter,
    "yaml": YamlReporter,
}


@dataclass
class ActionContract:
    """Explicit contract for an action."""

    read_only: bool
    requires_backup: bool
    rollback_support: bool
    prerequisites: list[str]


def create_reporter(fmt: str, console: Console, config: ReadinessConfig) -> BaseReporter:
    try:
        reporter_cls = REPORTERS[fmt]
    except KeyError:
        raise ValueError(f"Unknown output format: {fmt}") from None
    return reporter_cls(console, config)


class ReadinessAction:
    """Run the battery, streaming each result to a reporter."""

    CONTRACT = ActionContract(
        read_only=False,
        requires_backup=False,
        rollback_support=False,
        prerequisites=[],
    )

    def __init__(self, context: CheckContext, reporter: BaseReporter) -> None:
        self.context = context
        self.reporter = reporter

    def run(
        self,
        sections: Iterable[str] | None = None,
        skip: Iterable[str] | None = None,
    ) -> tuple[RunReport, int]:
        """Returns the report and the process exit code."""
        config = self.context.config
        sections = list(sections or config.sections)
        skip = list(skip or config.skip_sections)

        self.reporter.report_header(self.context.host.label)
        report = run_checks(
            self.context,
            sections=sections,
            skip=skip,
            on_section=self.reporter.report_section,
            on_result=self.reporter.report_result,
        )
        exit_code = self.reporter.report_summary(report)
        return report, exit_code
