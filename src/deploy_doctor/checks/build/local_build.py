"""Build Test check.

Runs the real production build of the project.

- BUILD-1: dependencies installed (node_modules); Warn only
- BUILD-2: build command succeeds
- BUILD-3: build output size
- BUILD-4: entry HTML generated
"""

from collections.abc import Iterator

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.connector.base import as_command_string
from deploy_doctor.model.result import CheckResult


def human_size(num_bytes: int) -> str:
    """Format a byte count like ``du -h``."""
    size = float(num_bytes)
    for unit in ("B", "K", "M"):
        if size < 1024:
            return f"{int(size)}B" if unit == "B" else f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}G"


@register_check
class LocalBuildCheck(BaseCheck):
    """Does the production bundle build, and does it contain an entry page?"""

    @property
    def section(self) -> str:
        return "build"

    @property
    def title(self) -> str:
        return "Build Test"

    @property
    def order(self) -> int:
        return 50

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        config = context.config
        project = context.project

        if project.dir_exists(config.dependency_dir):
            yield self.passed("BUILD-1", f"{config.dependency_dir} exists")
        else:
            yield self.warned(
                "BUILD-1",
                f"{config.dependency_dir} not found",
                hint="Run: npm install",
            )

        command = as_command_string(config.build_command)
        res = project.run(config.build_command, timeout=context.timeouts.build)
        if res.timed_out:
            yield self.failed(
                "BUILD-2",
                f"Production build timed out after {context.timeouts.build:g}s",
                hint=command,
            )
            return
        if not res.success:
            yield self.failed(
                "BUILD-2",
                "Production build failed",
                hint=res.error_excerpt() or command,
            )
            return
        yield self.passed("BUILD-2", "Production build successful")

        out_dir = config.build_output_dir
        if not project.dir_exists(out_dir):
            yield self.skipped("BUILD-3", f"{out_dir}/ not found, output checks skipped", subject=out_dir)
            return

        yield self.passed("BUILD-3", f"Build output size: {human_size(project.dir_size(out_dir))}", subject=out_dir)

        entry = f"{out_dir.rstrip('/')}/{config.entry_html}"
        if project.file_exists(entry):
            yield self.passed("BUILD-4", f"{config.entry_html} generated", subject=entry)
        else:
            yield self.failed("BUILD-4", f"{config.entry_html} not found in {out_dir}/", subject=entry)
