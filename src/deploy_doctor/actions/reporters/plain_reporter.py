"""Plain Text Reporter Implementation."""

from deploy_doctor.actions.reporters.base import BaseReporter
from deploy_doctor.checks import BaseCheck
from deploy_doctor.model.result import CheckResult, RunReport, Status


class PlainReporter(BaseReporter):
    """Clean, text-only output for logs and CI."""

    def report_header(self, target: str) -> None:
        self.console.out(f"PRODUCTION READINESS CHECK: {self.config.target_hostname} ({target})")

    def report_section(self, check: BaseCheck) -> None:
        self.console.out("")
        self.console.out(f"== {check.title} ==")

    def report_result(self, result: CheckResult) -> None:
        self.console.out(f"[{result.status.value.upper()}] {result.key}: {result.message}")
        if result.hint and result.status is not Status.PASS:
            for line in result.hint.splitlines():
                self.console.out(f"      {line}")

    def report_summary(self, report: RunReport) -> int:
        tally = report.tally
        self.console.out("")
        self.console.out(f"Passed:   {tally.passed}/{tally.total}")
        self.console.out(f"Failed:   {tally.failed}/{tally.total}")
        self.console.out(f"Warnings: {tally.warned}/{tally.total}")
        if tally.skipped:
            self.console.out(f"Skipped:  {tally.skipped}")
        self.console.out("READY FOR PRODUCTION" if tally.ready else "NOT READY FOR PRODUCTION")
        return tally.exit_code
