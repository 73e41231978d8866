"""Required Files check.

- FILE-1: one result per configured file; Pass when present, Fail when missing
"""

from collections.abc import Iterator

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.model.result import CheckResult


@register_check
class RequiredFilesCheck(BaseCheck):
    """Every deployment artifact the build and serve path relies on."""

    @property
    def section(self) -> str:
        return "files"

    @property
    def title(self) -> str:
        return "Required Files"

    @property
    def order(self) -> int:
        return 20

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        for name in context.config.required_files:
            if context.project.file_exists(name):
                yield self.passed("FILE-1", f"{name} exists", subject=name)
            else:
                yield self.failed("FILE-1", f"{name} is missing", subject=name)
