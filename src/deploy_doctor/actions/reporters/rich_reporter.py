"""Rich Reporter Implementation."""

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from deploy_doctor.actions.reporters.base import BaseReporter
from deploy_doctor.checks import BaseCheck
from deploy_doctor.model.result import CheckResult, RunReport, Status

STYLES = {
    Status.PASS: ("green", "✓"),
    Status.FAIL: ("red", "✗"),
    Status.WARN: ("yellow", "⚠"),
    Status.SKIP: ("dim", "-"),
}


class RichReporter(BaseReporter):
    """Colorized terminal output using Rich."""

    def report_header(self, target: str) -> None:
        self.console.print(Panel(
            f"[bold]Production Readiness & Security Check[/]\n{escape(self.config.target_hostname)}",
            subtitle=f"[dim]{escape(target)}[/]",
            border_style="blue",
            padding=(0, 4),
        ))

    def report_section(self, check: BaseCheck) -> None:
        self.console.print()
        self.console.rule(f"[bold blue]{escape(check.title)}[/]", style="blue", align="left")

    def report_result(self, result: CheckResult) -> None:
        color, icon = STYLES[result.status]
        if result.status is Status.SKIP:
            self.console.print(f"[dim]{icon} {escape(result.message)}[/]")
        else:
            self.console.print(f"[{color}]{icon}[/] {escape(result.message)}")
        if result.hint and result.status is not Status.PASS:
            for line in result.hint.splitlines():
                self.console.print(f"   [yellow]{escape(line)}[/]")

    def report_summary(self, report: RunReport) -> int:
        tally = report.tally
        self.console.print()
        self.console.rule("[bold blue]Summary[/]", style="blue", align="left")

        grid = Table.grid(padding=(0, 2))
        grid.add_column()
        grid.add_column(justify="right")
        grid.add_row("[green]Passed:[/]", f"{tally.passed}/{tally.total}")
        grid.add_row("[red]Failed:[/]", f"{tally.failed}/{tally.total}")
        grid.add_row("[yellow]Warnings:[/]", f"{tally.warned}/{tally.total}")
        if tally.skipped:
            grid.add_row("[dim]Skipped:[/]", f"[dim]{tally.skipped}[/]")
        self.console.print(grid)
        self.console.print()

        if tally.ready:
            self.console.print(Panel(
                "[bold green]✓ READY FOR PRODUCTION ✓[/]",
                border_style="green",
                padding=(0, 12),
                expand=False,
            ))
            if self.config.next_steps:
                self.console.print("\n[blue]Next steps:[/]")
                for n, step in enumerate(self.config.next_steps, start=1):
                    self.console.print(f"  {n}. [green]{escape(step)}[/]")
        else:
            self.console.print(Panel(
                "[bold red]✗ NOT READY FOR PRODUCTION ✗[/]",
                border_style="red",
                padding=(0, 12),
                expand=False,
            ))
            self.console.print("\n[red]Please fix the failed checks before deploying.[/]")
        self.console.print()
        return tally.exit_code
