"""Docker Environment check.

- DOCKER-1: docker CLI installed
- DOCKER-2: Docker daemon reachable
"""

import re
from collections.abc import Iterator

from deploy_doctor.checks import BaseCheck, CheckContext, register_check
from deploy_doctor.model.result import CheckResult

_VERSION_RE = re.compile(r"version\s+([^\s,]+)", re.IGNORECASE)


def parse_docker_version(output: str) -> str | None:
    """'Docker version 27.1.1, build 6312585' -> '27.1.1'."""
    match = _VERSION_RE.search(output)
    return match.group(1) if match else None


@register_check
class DockerEnvironmentCheck(BaseCheck):
    """Is the container runtime installed and its daemon running?"""

    @property
    def section(self) -> str:
        return "docker"

    @property
    def title(self) -> str:
        return "Docker Environment"

    @property
    def order(self) -> int:
        return 10

    def run(self, context: CheckContext) -> Iterator[CheckResult]:
        project = context.project

        if project.has_tool("docker"):
            version = parse_docker_version(
                project.run(["docker", "--version"], timeout=context.timeouts.command).stdout
            )
            suffix = f" ({version})" if version else ""
            yield self.passed("DOCKER-1", f"Docker is installed{suffix}")
        else:
            yield self.failed(
                "DOCKER-1",
                "Docker is not installed",
                hint="Install Docker Engine: https://docs.docker.com/engine/install/",
            )

        info = project.run(["docker", "info"], timeout=context.timeouts.command)
        if info.success:
            yield self.passed("DOCKER-2", "Docker daemon is running")
        elif info.timed_out:
            yield self.failed("DOCKER-2", "Docker daemon did not answer (docker info timed out)")
        else:
            yield self.failed("DOCKER-2", "Docker daemon is not running", hint=info.error_excerpt(5) or None)
