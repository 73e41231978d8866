"""Docker Build Test check.

Builds the project image under a throwaway tag and removes it again,
whatever the outcome.

- IMAGE-1: docker build succeeds
- IMAGE-2: resulting image size
"""

import logging
from collections.abc import Iterator

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.model.result import CheckResult

logger = logging.getLogger(__name__)


@register_check
class DockerBuildCheck(BaseCheck):
    """Exercise the real image build path."""

    @property
    def section(self) -> str:
        return "image"

    @property
    def title(self) -> str:
        return "Docker Build Test"

    @property
    def order(self) -> int:
        return 60

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        tag = context.config.test_image_tag
        project = context.project
        try:
            res = project.run(
                ["docker", "build", "-f", context.config.dockerfile, "-t", tag, "."],
                timeout=context.timeouts.build,
            )
            if res.timed_out:
                yield self.failed("IMAGE-1", f"Docker build timed out after {context.timeouts.build:g}s")
                return
            if not res.success:
                yield self.failed("IMAGE-1", "Docker build failed", hint=res.error_excerpt() or None)
                return
            yield self.passed("IMAGE-1", "Docker image builds successfully", subject=tag)

            size = project.run(
                ["docker", "images", tag, "--format", "{{.Size}}"],
                timeout=context.timeouts.command,
            ).first_line
            yield self.passed("IMAGE-2", f"Docker image size: {size or 'unknown'}", subject=tag)
        finally:
            self._cleanup(context, tag)

    def _cleanup(self, context: CheckContext, tag: str) -> None:
        """Remove the test image. Best effort, never reported."""
        res = context.project.run(["docker", "rmi", tag], timeout=context.timeouts.command)
        if not res.success:
            logger.debug("could not remove test image %s: %s", tag, res.stderr.strip())
